"""FieldStore — the single mutable FormRecord of a wizard session, plus its error set."""

import logging
from typing import Any, Dict, Optional

from wizard.fields import default_record

logger = logging.getLogger(__name__)


class FieldStore:
    """
    Holds the FormRecord and the ValidationErrorSet for the current step.

    Writes never validate or coerce.  Editing a field clears that field's
    error immediately, independently of any re-validation.
    """

    def __init__(self, record: Optional[Dict[str, Any]] = None):
        self._record: Dict[str, Any] = dict(record) if record is not None else default_record()
        self.errors: Dict[str, str] = {}

    def get(self, name: str, default: Any = None) -> Any:
        return self._record.get(name, default)

    def set_field(self, name: str, value: Any) -> None:
        """Replace one value unconditionally."""
        self._record[name] = value
        self.errors.pop(name, None)

    def merge_fields(self, patch: Dict[str, Any]) -> None:
        """Replace several values in one step; readers never see half a patch."""
        merged = {**self._record, **patch}
        self._record = merged
        for name in patch:
            self.errors.pop(name, None)

    def snapshot(self) -> Dict[str, Any]:
        """A copy of the record, safe to hand to the validator or payload builder."""
        return dict(self._record)

    def set_errors(self, errors: Dict[str, str]) -> None:
        self.errors = dict(errors)

    def clear_errors(self) -> None:
        self.errors = {}

    def reset(self, record: Optional[Dict[str, Any]] = None) -> None:
        """Back to defaults (or to a freshly hydrated record) with no errors."""
        self._record = dict(record) if record is not None else default_record()
        self.errors = {}
        logger.debug("FieldStore reset (hydrated=%s)", record is not None)
