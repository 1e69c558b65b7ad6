"""WizardSession — one applicant's run through the registration wizard.

Owns the FieldStore, StepController, DocumentStager and SubmissionCoordinator
of a single session.  `init(mode)` starts (or restarts) the lifecycle; in Edit
mode field edits are refused until the existing record has been loaded.
"""

import logging
from dataclasses import asdict
from datetime import date
from typing import Any, Dict, Optional, Tuple

from registry_client import RegistryAPIError
from wizard.cascades import on_agreement_changed, on_city_changed, on_province_changed
from wizard.errors import HydrationError, SessionNotReadyError, ValidationError
from wizard.field_store import FieldStore
from wizard.fields import FIELDS_BY_NAME, is_known_field
from wizard.hydration import normalize, parse_details
from wizard.state import Requirement, SourceFile, WizardMode, new_id
from wizard.steps import StepController, Transition
from wizard.submission import SubmissionCoordinator, SubmissionResult
from wizard.waiver import WAIVER_FIELDS
from workers.document_stager import DocumentStager

logger = logging.getLogger(__name__)


class WizardSession:

    def __init__(self, client, user_id: str = "current-user", session_id: Optional[str] = None):
        self.session_id = session_id or new_id("wiz-")
        self.client = client
        self.user_id = user_id
        self.mode = WizardMode.create()
        self.store = FieldStore()
        self.steps = StepController(self.store)
        self.stager = DocumentStager(user_id, business_ref=self._business_ref)
        self.coordinator = SubmissionCoordinator(client, self.stager)
        self.ready = True
        self.last_result: Optional[SubmissionResult] = None
        self._generation = 0   # bumped on every init/reset; stale loads compare against it

    def _business_ref(self) -> str:
        return self.mode.business_id or self.store.get("business_name") or "temp"

    def _require_ready(self) -> None:
        if not self.ready:
            raise SessionNotReadyError("The business record is still loading; try again shortly.")

    def _clear(self) -> None:
        self._generation += 1
        self.store.reset()
        self.steps.reset()
        self.stager.reset()
        self.last_result = None

    # ── Lifecycle ───────────────────────────────────────────────────────

    async def init(self, mode: WizardMode) -> None:
        """Start a fresh Create session, or load an existing business for Edit."""
        self._clear()
        generation = self._generation
        self.mode = mode

        if not mode.is_edit:
            self.ready = True
            logger.info(f"Session {self.session_id} started (create)")
            return

        self.ready = False
        logger.info(f"Session {self.session_id} loading business {mode.business_id}")
        try:
            raw = await self.client.get_business_details(mode.business_id)
        except RegistryAPIError as e:
            if generation != self._generation:
                logger.debug(f"Ignoring failed load of {mode.business_id}; session moved on")
                return
            raise HydrationError(
                e.server_message or f"Could not load business {mode.business_id}",
                business_id=mode.business_id,
            ) from e

        if generation != self._generation:
            logger.debug(f"Discarding stale details for {mode.business_id}")
            return

        hydrated = normalize(parse_details(raw), mode.business_id)
        self.store.reset(hydrated.record)
        self.stager.hydrate(hydrated.requirements, hydrated.documents)
        self.ready = True

    def reset(self) -> None:
        """Throw away everything and go back to an empty Create session."""
        self._clear()
        self.mode = WizardMode.create()
        self.ready = True
        logger.info(f"Session {self.session_id} reset")

    # ── Field edits ─────────────────────────────────────────────────────

    @staticmethod
    def _rejected(patch: Dict[str, Any]) -> Dict[str, str]:
        """Field edits the session refuses, keyed by field name."""
        errors = {}
        for name, value in patch.items():
            if not is_known_field(name):
                errors[name] = f"Unknown field '{name}'"
            elif name in WAIVER_FIELDS:
                errors[name] = f"'{name}' is set by agreeing to the terms"
            elif FIELDS_BY_NAME[name].kind == "bool" and not isinstance(value, bool):
                errors[name] = f"'{name}' must be true or false"
        return errors

    def update_field(self, name: str, value: Any) -> None:
        self.update_fields({name: value})

    def update_fields(self, patch: Dict[str, Any]) -> None:
        self._require_ready()
        rejected = self._rejected(patch)
        if rejected:
            raise ValidationError(rejected)
        patch = dict(patch)
        agreed = patch.pop("agreed_to_terms", None)
        if patch:
            self.store.merge_fields(patch)
        if agreed is not None:
            self.set_agreement(agreed)

    def set_agreement(self, agreed: bool, as_of: Optional[date] = None) -> None:
        self._require_ready()
        if not isinstance(agreed, bool):
            raise ValidationError({"agreed_to_terms": "'agreed_to_terms' must be true or false"})
        on_agreement_changed(self.store, agreed, as_of)

    def change_province(self, value: str, scope: str = "business") -> None:
        self._require_ready()
        on_province_changed(self.store, value, scope)

    def change_city(self, value: str, scope: str = "business") -> None:
        self._require_ready()
        on_city_changed(self.store, value, scope)

    # ── Requirements ────────────────────────────────────────────────────

    def add_requirement(self, req_type: str, description: str, file: Optional[SourceFile]) -> Requirement:
        self._require_ready()
        return self.stager.add_requirement(req_type, description, file)

    def attach_file(self, requirement_id: str, file: SourceFile) -> Optional[Requirement]:
        self._require_ready()
        return self.stager.attach_file(requirement_id, file)

    def update_requirement(self, requirement_id: str, patch: Dict[str, Any]) -> Optional[Requirement]:
        self._require_ready()
        return self.stager.update_requirement(requirement_id, patch)

    def delete_requirement(self, requirement_id: str) -> bool:
        self._require_ready()
        return self.stager.delete_requirement(requirement_id)

    # ── Navigation / submission ─────────────────────────────────────────

    async def next(self) -> Tuple[Transition, Optional[SubmissionResult]]:
        """Advance one step; at the last step a passing validation submits."""
        self._require_ready()
        transition = self.steps.next()
        if not transition.submit_due:
            return transition, None
        return transition, await self.submit()

    def prev(self) -> int:
        return self.steps.prev()

    async def submit(self) -> SubmissionResult:
        self._require_ready()
        result = await self.coordinator.submit(self.store, self.mode)
        # store and stager were reset by the coordinator
        self.steps.reset()
        self.mode = WizardMode.create()
        self.last_result = result
        return result

    # ── Views ───────────────────────────────────────────────────────────

    def snapshot(self) -> Dict[str, Any]:
        return {
            "session_id": self.session_id,
            "mode": self.mode.model_dump(),
            "ready": self.ready,
            "current_step": self.steps.current,
            "steps": [asdict(s) for s in self.steps.statuses()],
            "record": self.store.snapshot(),
            "errors": dict(self.store.errors),
            "submitting": self.coordinator.in_flight,
            "last_result": asdict(self.last_result) if self.last_result else None,
            **self.stager.snapshot(),
        }
