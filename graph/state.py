"""SubmissionState schema — single source of truth for one submission run."""

from typing import Any, Dict, List, Optional, TypedDict


class SubmissionState(TypedDict):
    """Flat state dict for the submission pipeline."""

    # What is being submitted
    mode: str                       # create | edit
    business_id: Optional[str]      # edit mode only
    record: Dict[str, Any]          # FormRecord snapshot

    # Pipeline tracking
    stage: str                      # name of the node the router should run next
    finished: bool

    # Produced along the way
    staging_errors: List[str]
    payload: Dict[str, Any]
    response: Any

    # Failure (any node may set these)
    error: Optional[str]
    error_kind: Optional[str]       # agreement | submission
    status_code: Optional[int]


def initial_state(mode: str, record: Dict[str, Any], business_id: Optional[str] = None) -> SubmissionState:
    """Factory — returns a clean starting state."""
    return SubmissionState(
        mode=mode,
        business_id=business_id,
        record=dict(record),
        stage="check_agreement",
        finished=False,
        staging_errors=[],
        payload={},
        response=None,
        error=None,
        error_kind=None,
        status_code=None,
    )
