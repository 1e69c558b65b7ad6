"""Deterministic router — pure rule-based branching between submission nodes."""

from typing import Literal

from graph.state import SubmissionState

# All valid destinations for add_conditional_edges
RouterDest = Literal[
    "check_agreement",
    "resolve_documents",
    "assemble_payload",
    "dispatch_create",
    "dispatch_update",
    "finish",
    "fail",
]

STAGES = (
    "check_agreement",
    "resolve_documents",
    "assemble_payload",
    "dispatch_create",
    "dispatch_update",
    "finish",
)


def router(state: SubmissionState) -> RouterDest:
    """
    Rule-based router.  Priority: failure > completion > requested stage.
    Called via add_conditional_edges after every node.
    """
    if state.get("error"):
        return "fail"

    if state["finished"]:
        return "finish"

    stage = state["stage"]
    if stage in STAGES:
        return stage

    # Unknown stage means a node forgot to say where to go
    return "fail"
