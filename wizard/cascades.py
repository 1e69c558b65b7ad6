"""Named transition functions for fields that drive other fields.

Each one applies its whole effect through a single `merge_fields` call.
"""

from datetime import date
from typing import Optional

from wizard.field_store import FieldStore
from wizard.waiver import agreement_patch

# scope → (province, city, barangay) field names
ADDRESS_SCOPES = {
    "business": ("province", "municipality", "barangay"),
    "representative": ("rep_province", "rep_municipality", "rep_barangay"),
}


def _scope_fields(scope: str):
    try:
        return ADDRESS_SCOPES[scope]
    except KeyError:
        raise ValueError(f"Unknown address scope '{scope}'") from None


def on_province_changed(store: FieldStore, value: str, scope: str = "business") -> None:
    """Set the province and clear its city and barangay."""
    province, city, barangay = _scope_fields(scope)
    store.merge_fields({province: value, city: "", barangay: ""})


def on_city_changed(store: FieldStore, value: str, scope: str = "business") -> None:
    """Set the city/municipality and clear its barangay."""
    _, city, barangay = _scope_fields(scope)
    store.merge_fields({city: value, barangay: ""})


def on_agreement_changed(store: FieldStore, agreed: bool, as_of: Optional[date] = None) -> None:
    """Flip the terms checkbox together with every waiver field it owns."""
    store.merge_fields(agreement_patch(store.snapshot(), agreed, as_of))
