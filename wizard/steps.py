"""StepController — the step-gated state machine of the wizard.

Forward moves are gated by the validator; backward moves never are.  Display
status for each step is derived from `current`, never stored.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List

from config import TOTAL_WIZARD_STEPS
from wizard.field_store import FieldStore
from wizard.validator import validate

logger = logging.getLogger(__name__)

STEP_LABELS: Dict[int, str] = {
    1: "Taxpayer Info",
    2: "Business Info",
    3: "Requirements",
    4: "Summary",
}


@dataclass
class Transition:
    """Outcome of a next() attempt."""
    step: int
    advanced: bool
    errors: Dict[str, str] = field(default_factory=dict)
    submit_due: bool = False   # terminal step passed validation


@dataclass
class StepStatus:
    number: int
    label: str
    status: str   # complete | current | incomplete


class StepController:

    def __init__(self, store: FieldStore, total_steps: int = TOTAL_WIZARD_STEPS):
        self.store = store
        self.total_steps = total_steps
        self.current = 1

    @property
    def at_terminal(self) -> bool:
        return self.current == self.total_steps

    def next(self) -> Transition:
        """
        Validate the current step.  On errors, stay put and publish the full
        error map; otherwise advance (or, at the last step, report that the
        application is ready to submit).
        """
        errors = validate(self.current, self.store.snapshot())
        self.store.set_errors(errors)

        if errors:
            logger.info(f"Step {self.current} blocked by {len(errors)} error(s)")
            return Transition(step=self.current, advanced=False, errors=errors)

        if self.at_terminal:
            return Transition(step=self.current, advanced=False, submit_due=True)

        self.current = min(self.current + 1, self.total_steps)
        return Transition(step=self.current, advanced=True)

    def prev(self) -> int:
        self.current = max(self.current - 1, 1)
        return self.current

    def reset(self) -> None:
        self.current = 1

    def statuses(self) -> List[StepStatus]:
        result = []
        for number in range(1, self.total_steps + 1):
            if number < self.current:
                status = "complete"
            elif number == self.current:
                status = "current"
            else:
                status = "incomplete"
            result.append(StepStatus(number, STEP_LABELS.get(number, f"Step {number}"), status))
        return result
