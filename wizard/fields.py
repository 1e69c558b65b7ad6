"""FormRecord field table — single source of truth for names, wire keys and defaults.

Every field the wizard collects is declared once here.  Defaults, payload
assembly and edit-mode hydration are all derived from this table, so a new
field only needs one line.
"""

import re
from typing import Any, Dict, List, NamedTuple, Optional


class FieldSpec(NamedTuple):
    name: str            # python-side key in the FormRecord
    wire: Optional[str]  # registry API key; None = session-only
    default: Any
    kind: str = "str"    # str | bool | number | date
    nullable: bool = False  # empty value is sent as null


def _s(name, wire, nullable=False):
    return FieldSpec(name, wire, "", "str", nullable)


def _d(name, wire):
    return FieldSpec(name, wire, "", "date", True)


def _b(name, wire, default=False):
    return FieldSpec(name, wire, default, "bool")


FIELDS: List[FieldSpec] = [
    # ── Main business info ──────────────────────────────────────────────
    _s("business_name", "businessname_"),
    _b("is_main", "ismain_", True),
    _b("is_foreign", "isforeign_"),
    _b("is_branch", "isbranch_"),
    _d("date_established", "dateestablished_"),
    _s("ownership_type", "ownershiptype_"),
    _s("registered_ceo", "registeredceo_"),
    _s("trade_name", "tradename_", nullable=True),
    _b("is_franchise", "isfranchise_"),
    _b("is_market_stall", "ismarketstall"),
    _b("is_commercial_building", "iscommercialbuilding"),
    _s("market_stall", "marketstall_", nullable=True),
    _s("business_building_id", "businessbuildingid_", nullable=True),
    _s("building_space", "buildingspace_"),
    _b("waiver_agreement", "waiveragreement_", True),

    # ── Business address ────────────────────────────────────────────────
    _s("province", "province_"),
    _s("municipality", "municipality_"),
    _s("barangay", "barangay_"),
    _s("subdivision", "subdivision_", nullable=True),
    _s("street", "street_", nullable=True),
    _s("building_name", "buildingname_", nullable=True),
    _s("house_no", "houseno_", nullable=True),
    _s("phase_block", "phaseblock_", nullable=True),
    _s("lot", "lot_", nullable=True),
    _s("landmark", "landmark_"),
    _s("long_lat", "longlat_"),
    _s("tel_no", "telno_", nullable=True),
    _s("cell_no", "cellno_", nullable=True),
    _s("fax_no", "faxno_", nullable=True),
    _s("email", "email_"),
    _s("tin", "tin_", nullable=True),

    # ── Representative (taxpayer) ───────────────────────────────────────
    _s("rep_id", "repid", nullable=True),
    _s("registrant_name", "repname_"),
    _s("rep_position", "repposition_"),
    _s("rep_ownership_type", "ownershiptype_rep"),
    _s("first_name", "firstname_"),
    _s("middle_name", "middlename_", nullable=True),
    _s("last_name", "lastname_"),
    _s("suffix_name", "suffixname_", nullable=True),
    _d("birthdate", "birthdate_"),
    _s("gender", "gender_"),
    _s("civil_status", "civilstatus_"),
    _s("nationality", "nationality_"),
    _s("rep_tel_no", "telno_rep", nullable=True),
    _s("rep_cell_no", "cellno_rep", nullable=True),
    _s("rep_fax_no", "faxno_rep", nullable=True),
    _s("rep_email", "email_rep", nullable=True),
    _s("rep_tin", "tin_rep", nullable=True),
    _b("outside_city", "outsidecity_"),
    _s("rep_province", "province_rep"),
    _s("rep_municipality", "municipality_rep"),
    _s("rep_barangay", "barangay_rep", nullable=True),
    _s("rep_subdivision", "subdivision_rep", nullable=True),
    _s("rep_street", "street_rep", nullable=True),
    _s("rep_building_name", "buildingname_rep", nullable=True),
    _s("rep_house_no", "houseno_rep", nullable=True),
    _s("rep_block", "block_", nullable=True),
    _s("rep_lot", "lot_rep", nullable=True),
    _s("rep_landmark", "landmark_rep"),

    # ── Regulatory requirement numbers ──────────────────────────────────
    _s("dti_no", "dtino_", nullable=True),
    _d("dti_issued", "dtiissued_"),
    _d("dti_expiry", "dtiexpiry_"),
    _s("sec_no", "secno_", nullable=True),
    _d("sec_issued", "secissued_"),
    _d("sec_expiry", "secexpiry_"),
    _s("cda_no", "cdano_", nullable=True),
    _d("cda_issued", "cdaissued_"),
    _d("cda_expiry", "cdaexpiry_"),
    _s("local_clearance_no", "localclearanceno_", nullable=True),
    _d("local_clearance_date", "localclearancedate_"),
    _s("cedula_no", "cedulano_", nullable=True),
    _s("cedula_place_issued", "cedulaplaceissued_", nullable=True),
    _d("cedula_issued", "cedulaissued_"),
    FieldSpec("cedula_amount", "cedulaamount_", 0, "number"),
    _s("boi_no", "boino_", nullable=True),
    _d("boi_issued", "boiissued_"),
    _d("boi_expiry", "boiexpiry_"),
    _s("sss_no", "sssno_", nullable=True),
    _d("sss_date_reg", "sssdatereg_"),
    _s("pagibig_no", "pagibigno_", nullable=True),
    _d("pagibig_reg", "pagibigreg_"),
    _s("phic_no", "phicno_", nullable=True),
    _d("phic_reg", "phicreg_"),
    _b("peza_registered", "pezaregistered_"),
    _s("peza_reg_no", "pezaregno_", nullable=True),
    _d("peza_issued", "pezaissued_"),
    _d("peza_expiry", "pezaexpiry_"),
    _b("verification", "verification_"),

    # ── Waiver ──────────────────────────────────────────────────────────
    _s("waiver_name", "waivername_", nullable=True),
    _s("waiver_type", "waivertype_", nullable=True),
    _s("content", "content_", nullable=True),
    _b("waiver_status", "waiverstatus_"),

    # ── Session-only ────────────────────────────────────────────────────
    FieldSpec("agreed_to_terms", None, False, "bool"),
]

FIELDS_BY_NAME: Dict[str, FieldSpec] = {f.name: f for f in FIELDS}
FIELDS_BY_WIRE: Dict[str, FieldSpec] = {f.wire: f for f in FIELDS if f.wire}

_ISO_DATE = re.compile(r"^(\d{4}-\d{2}-\d{2})")


def default_record() -> Dict[str, Any]:
    """Factory — returns a FormRecord at its documented defaults."""
    return {f.name: f.default for f in FIELDS}


def is_known_field(name: str) -> bool:
    return name in FIELDS_BY_NAME


def to_wire(record: Dict[str, Any]) -> Dict[str, Any]:
    """
    Map a FormRecord onto registry keys, sending empty optionals as null.
    Booleans go out as stored; WizardSession only lets real bools in.
    """
    payload: Dict[str, Any] = {}
    for spec in FIELDS:
        if spec.wire is None:
            continue
        value = record.get(spec.name, spec.default)
        if spec.kind == "number":
            value = value or 0
        elif spec.nullable and (value is None or str(value).strip() == ""):
            value = None
        payload[spec.wire] = value
    return payload


def _coerce(spec: FieldSpec, raw: Any) -> Any:
    if spec.kind == "bool":
        return spec.default if raw is None else bool(raw)
    if spec.kind == "number":
        return raw or 0
    if raw is None:
        return ""
    if spec.kind == "date":
        m = _ISO_DATE.match(str(raw).strip())
        return m.group(1) if m else ""
    return str(raw)


def from_wire(data: Dict[str, Any]) -> Dict[str, Any]:
    """Build a full FormRecord from a registry-shaped dict; absent keys keep defaults."""
    record = default_record()
    for wire, raw in data.items():
        spec = FIELDS_BY_WIRE.get(wire)
        if spec is not None:
            record[spec.name] = _coerce(spec, raw)
    return record
