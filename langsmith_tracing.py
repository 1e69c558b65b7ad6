"""LangSmith tracing — one wizard session = one trace across requests."""

import logging
import os
from contextlib import contextmanager

import langsmith as ls
from langsmith.run_trees import RunTree

from config import LANGSMITH_TRACING, LANGSMITH_PROJECT

logger = logging.getLogger(__name__)

# In-memory store: session_id -> parent RunTree
_session_trace_store: dict[str, RunTree] = {}

TAGS = ["permit-wizard", "registration"]


def _ensure_env():
    """Ensure LangSmith env vars are set when tracing is enabled."""
    if LANGSMITH_TRACING:
        os.environ.setdefault("LANGCHAIN_TRACING_V2", "true")
        os.environ.setdefault("LANGCHAIN_PROJECT", LANGSMITH_PROJECT)


@contextmanager
def flow_trace(session_id: str, user_id: str = "", mode: str = "create"):
    """
    Open the parent trace for a registration session.  Later requests of the
    same session attach to it through continue_flow_trace.
    """
    if not LANGSMITH_TRACING:
        yield None
        return

    _ensure_env()
    metadata = {"session_id": session_id, "user_id": user_id or session_id, "mode": mode}
    root = RunTree(name="business_registration", run_type="chain")
    root.add_metadata(metadata)
    root.add_tags(TAGS)
    root.post()
    _session_trace_store[session_id] = root

    with ls.tracing_context(
        project_name=LANGSMITH_PROJECT,
        enabled=True,
        parent=root,
        metadata=metadata,
        tags=TAGS,
    ):
        yield str(root.id)


@contextmanager
def continue_flow_trace(session_id: str, action: str = ""):
    """Attach a step transition or submission to the session's existing trace."""
    root = _session_trace_store.get(session_id) if LANGSMITH_TRACING else None
    if root is None:
        yield
        return

    _ensure_env()
    with ls.tracing_context(
        project_name=LANGSMITH_PROJECT,
        enabled=True,
        parent=root,
        metadata={"session_id": session_id, "action": action},
        tags=TAGS + ([action] if action else []),
    ):
        yield


def clear_flow_trace(session_id: str) -> None:
    """End the root run and remove it when the session submits or is cancelled."""
    root = _session_trace_store.pop(session_id, None)
    if root is None:
        return
    try:
        root.end()
        root.patch()
    except Exception as e:
        logger.warning(f"Could not close trace for session {session_id}: {e}")
