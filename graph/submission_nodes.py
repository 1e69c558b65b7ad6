"""Submission nodes — the steps between a finished wizard and a registry write.

Each node returns a partial state update and names the next stage; the
router does the branching.  Collaborators (stager, registry client) are
bound in by the builder with functools.partial.
"""

import logging
from typing import Any, Dict

from graph.state import SubmissionState
from registry_client import RegistryAPIError
from wizard.errors import AgreementRequiredError, GENERIC_SUBMISSION_MESSAGE
from wizard.fields import to_wire

logger = logging.getLogger(__name__)


def document_business_id(state: SubmissionState) -> str:
    """businessId stamped on outgoing documents."""
    return state.get("business_id") or state["record"].get("business_name") or "temp"


# ── Gate ────────────────────────────────────────────────────────────────
async def check_agreement(state: SubmissionState) -> Dict[str, Any]:
    """No agreement, no network call."""
    if state["record"].get("agreed_to_terms") is not True:
        return {
            "error": str(AgreementRequiredError()),
            "error_kind": "agreement",
        }
    return {"stage": "resolve_documents"}


# ── Join point ──────────────────────────────────────────────────────────
async def resolve_documents(state: SubmissionState, stager) -> Dict[str, Any]:
    """Wait for every in-flight encoding before the payload is built."""
    await stager.settle()
    # failures recorded before this submit are no longer pending; read them all
    failures = list(stager.errors)
    if failures:
        logger.warning(f"Submitting without {len(failures)} document(s) that failed to encode")
    return {
        "stage": "assemble_payload",
        "staging_errors": [str(f) for f in failures],
    }


async def assemble_payload(state: SubmissionState, stager) -> Dict[str, Any]:
    payload = to_wire(state["record"])
    payload["documents"] = stager.documents_payload(document_business_id(state))
    payload["requirements"] = stager.requirements_payload()

    return {
        "payload": payload,
        "stage": "dispatch_update" if state["mode"] == "edit" else "dispatch_create",
    }


# ── Dispatch ────────────────────────────────────────────────────────────
def _failure(e: RegistryAPIError) -> Dict[str, Any]:
    return {
        "error": e.server_message or GENERIC_SUBMISSION_MESSAGE,
        "error_kind": "submission",
        "status_code": e.status_code,
    }


async def dispatch_create(state: SubmissionState, client) -> Dict[str, Any]:
    logger.info(f"Creating business '{state['record'].get('business_name')}' "
                f"with {len(state['payload'].get('documents', []))} document(s)")
    try:
        response = await client.create_business(state["payload"])
    except RegistryAPIError as e:
        return _failure(e)
    return {"response": response, "stage": "finish"}


async def dispatch_update(state: SubmissionState, client) -> Dict[str, Any]:
    logger.info(f"Updating business {state['business_id']}")
    try:
        response = await client.update_business(state["business_id"], state["payload"])
    except RegistryAPIError as e:
        return _failure(e)
    return {"response": response, "stage": "finish"}


# ── Terminal nodes ──────────────────────────────────────────────────────
async def finish_node(state: SubmissionState) -> Dict[str, Any]:
    return {"finished": True, "stage": "done"}


async def fail_node(state: SubmissionState) -> Dict[str, Any]:
    error = state.get("error") or GENERIC_SUBMISSION_MESSAGE
    logger.info(f"Submission stopped at '{state['stage']}': {error}")
    return {
        "finished": True,
        "error": error,
        "error_kind": state.get("error_kind") or "submission",
    }
