"""Graph assembly — builds and compiles the SubmissionState graph with all nodes and edges."""

from functools import partial

from langgraph.graph import StateGraph, START, END

from graph.state import SubmissionState
from graph.router import router
from graph.submission_nodes import (
    check_agreement,
    resolve_documents,
    assemble_payload,
    dispatch_create,
    dispatch_update,
    finish_node,
    fail_node,
)


def _bind(node, name: str, **collaborators):
    """Bind collaborators into a node; partials have no __name__ of their own."""
    node_func = partial(node, **collaborators)
    node_func.__name__ = name
    return node_func


def build_submission_graph(stager, client):
    """
    Assemble the submission pipeline for one session's stager and registry client.
    Returns a compiled graph ready for ainvoke.
    """
    builder = StateGraph(SubmissionState)

    # ── Register pipeline nodes ─────────────────────────────────────
    builder.add_node("check_agreement", check_agreement)
    builder.add_node("resolve_documents", _bind(resolve_documents, "resolve_documents", stager=stager))
    builder.add_node("assemble_payload", _bind(assemble_payload, "assemble_payload", stager=stager))
    builder.add_node("dispatch_create", _bind(dispatch_create, "dispatch_create", client=client))
    builder.add_node("dispatch_update", _bind(dispatch_update, "dispatch_update", client=client))
    builder.add_node("finish", finish_node)
    builder.add_node("fail", fail_node)

    # ── Entry edge ──────────────────────────────────────────────────
    builder.add_edge(START, "check_agreement")

    # ── Conditional edges: every working node → router ──────────────
    for node_name in ("check_agreement", "resolve_documents", "assemble_payload",
                      "dispatch_create", "dispatch_update"):
        builder.add_conditional_edges(node_name, router)

    # ── Terminal nodes → END ────────────────────────────────────────
    builder.add_edge("finish", END)
    builder.add_edge("fail", END)

    # One-shot runs; nothing to resume, so no checkpointer
    return builder.compile()
