"""Step validator — pure, rule-table driven, no side effects.

Each step owns an ordered list of (field, rule, message).  All rules run on
every call so the caller gets the complete error list in declaration order.
"""

from typing import Any, Callable, Dict, List, Tuple

Rule = Callable[[Any], bool]


def required(value: Any) -> bool:
    """Non-empty string after trimming."""
    return value is not None and str(value).strip() != ""


def is_true(value: Any) -> bool:
    return value is True


# ── Step rule sets (data-driven) ───────────────────────────────────────
STEP_RULES: Dict[int, List[Tuple[str, Rule, str]]] = {
    1: [  # Taxpayer info
        ("registrant_name", required, "Registrant Name is required"),
        ("rep_ownership_type", required, "Ownership Type is required"),
        ("first_name", required, "First Name is required"),
        ("last_name", required, "Last Name is required"),
        ("birthdate", required, "Birth Date is required"),
        ("gender", required, "Gender is required"),
        ("civil_status", required, "Civil Status is required"),
        ("nationality", required, "Nationality is required"),
        ("rep_email", required, "Email is required"),
        ("rep_province", required, "Province is required"),
        ("rep_municipality", required, "City/Municipality is required"),
        ("rep_landmark", required, "Landmark is required"),
    ],
    2: [  # Business info
        ("business_name", required, "Business Name is required"),
        ("ownership_type", required, "Ownership Type is required"),
        ("province", required, "Province is required"),
        ("municipality", required, "City/Municipality is required"),
        ("barangay", required, "Barangay is required"),
        ("landmark", required, "Landmark is required"),
        ("email", required, "Email is required"),
        ("tin", required, "TIN is required"),
    ],
    3: [],  # Requirements are optional
    4: [  # Summary
        ("agreed_to_terms", is_true, "You must agree to the terms and conditions"),
    ],
}


def validate(step: int, record: Dict[str, Any]) -> Dict[str, str]:
    """Return {field: message} for every failing rule of `step`; empty means valid."""
    errors: Dict[str, str] = {}
    for field, rule, message in STEP_RULES.get(step, []):
        if not rule(record.get(field)):
            errors[field] = message
    return errors
