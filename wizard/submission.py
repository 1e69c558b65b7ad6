"""SubmissionCoordinator — turns a finished wizard into exactly one registry write."""

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional

from graph.builder import build_submission_graph
from graph.state import initial_state
from wizard.errors import AgreementRequiredError, SubmissionError, SubmissionInProgressError
from wizard.field_store import FieldStore
from wizard.state import WizardMode

logger = logging.getLogger(__name__)


@dataclass
class SubmissionResult:
    business_id: Optional[str]
    mode: str
    data: Any = None
    staging_errors: List[str] = field(default_factory=list)
    message: str = "Application submitted successfully."


def _created_id(data: Any) -> Optional[str]:
    """The registry returns either the new id or the created record."""
    if isinstance(data, dict):
        for key in ("businessid_", "businessId", "id"):
            if data.get(key) not in (None, ""):
                return str(data[key])
        return None
    if isinstance(data, (str, int)) and data != "":
        return str(data)
    return None


class SubmissionCoordinator:

    def __init__(self, client, stager):
        self.client = client
        self.stager = stager
        self.graph = build_submission_graph(stager, client)
        self.in_flight = False

    async def submit(self, store: FieldStore, mode: WizardMode) -> SubmissionResult:
        """
        Run the submission pipeline once.  On success the store and stager
        are reset; on failure nothing in the session is touched.
        """
        if self.in_flight:
            raise SubmissionInProgressError()

        self.in_flight = True
        try:
            state = initial_state(mode.kind, store.snapshot(), mode.business_id)
            final = await self.graph.ainvoke(state)
        finally:
            self.in_flight = False

        if final.get("error"):
            if final.get("error_kind") == "agreement":
                raise AgreementRequiredError(final["error"])
            logger.info(f"Submission failed ({final.get('status_code')}): {final['error']}")
            raise SubmissionError(final["error"], status_code=final.get("status_code"))

        data = final.get("response")
        business_id = mode.business_id if mode.is_edit else _created_id(data)
        result = SubmissionResult(
            business_id=business_id,
            mode=mode.kind,
            data=data,
            staging_errors=final.get("staging_errors", []),
        )

        store.reset()
        self.stager.reset()
        logger.info(f"Submission succeeded ({mode.kind}, business {business_id})")
        return result
