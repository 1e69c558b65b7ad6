"""Edit-mode hydration — normalize a fetched business record into session state.

The details endpoint answers in one of two shapes: a flat record keyed by
wire names, or a nested {businessInfo, address, representative, requirements}
object.  `parse_details` tags the response once; `normalize` turns either
variant into a FormRecord plus the requirement/document collections.
"""

import logging
from dataclasses import dataclass, field
from typing import Annotated, Any, Dict, List, Literal, Union

from pydantic import BaseModel, Field

from wizard.errors import HydrationError
from wizard.fields import from_wire
from wizard.state import (
    DocumentStatus,
    Requirement,
    RequirementStatus,
    StagedDocument,
    new_id,
    now_iso,
)

logger = logging.getLogger(__name__)

# Nested representatives reuse the business contact keys; these are theirs.
REPRESENTATIVE_ALIASES = {
    "ownershiptype_": "ownershiptype_rep",
    "telno_": "telno_rep",
    "cellno_": "cellno_rep",
    "faxno_": "faxno_rep",
    "email_": "email_rep",
    "tin_": "tin_rep",
    "province_": "province_rep",
    "municipality_": "municipality_rep",
    "barangay_": "barangay_rep",
    "subdivision_": "subdivision_rep",
    "street_": "street_rep",
    "buildingname_": "buildingname_rep",
    "houseno_": "houseno_rep",
    "lot_": "lot_rep",
    "landmark_": "landmark_rep",
}


class FlatDetails(BaseModel):
    kind: Literal["flat"] = "flat"
    fields: Dict[str, Any]
    requirement_rows: List[Dict[str, Any]] = []
    document_rows: List[Dict[str, Any]] = []


class NestedDetails(BaseModel):
    kind: Literal["nested"] = "nested"
    business_info: Dict[str, Any] = {}
    address: Dict[str, Any] = {}
    representative: Dict[str, Any] = {}
    requirement_info: Dict[str, Any] = {}
    requirement_rows: List[Dict[str, Any]] = []
    document_rows: List[Dict[str, Any]] = []


BusinessDetails = Annotated[Union[FlatDetails, NestedDetails], Field(discriminator="kind")]


@dataclass
class HydratedSession:
    record: Dict[str, Any]
    requirements: List[Requirement] = field(default_factory=list)
    documents: List[StagedDocument] = field(default_factory=list)


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_rows(value: Any) -> List[Dict[str, Any]]:
    return [row for row in value if isinstance(row, dict)] if isinstance(value, list) else []


def parse_details(raw: Any) -> BusinessDetails:
    """Tag a raw details response as flat or nested."""
    if not isinstance(raw, dict) or not raw:
        raise HydrationError("Business details response is empty or malformed")

    if isinstance(raw.get("businessInfo"), dict):
        requirements = raw.get("requirements")
        return NestedDetails(
            business_info=raw["businessInfo"],
            address=_as_dict(raw.get("address")),
            representative=_as_dict(raw.get("representative")),
            requirement_info=_as_dict(requirements),
            requirement_rows=_as_rows(requirements),
            document_rows=_as_rows(raw.get("documents")),
        )

    fields = {k: v for k, v in raw.items() if k not in ("requirements", "documents")}
    return FlatDetails(
        fields=fields,
        requirement_rows=_as_rows(raw.get("requirements")),
        document_rows=_as_rows(raw.get("documents")),
    )


def _wire_fields(details: BusinessDetails) -> Dict[str, Any]:
    if details.kind == "flat":
        return details.fields
    representative = {REPRESENTATIVE_ALIASES.get(k, k): v for k, v in details.representative.items()}
    return {**details.business_info, **details.address, **representative, **details.requirement_info}


def _pick(row: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if row.get(key) not in (None, ""):
            return row[key]
    return default


def _requirement_status(value: Any) -> RequirementStatus:
    try:
        return RequirementStatus(value)
    except ValueError:
        return RequirementStatus.PENDING_UPLOAD


def _document_status(value: Any) -> DocumentStatus:
    try:
        return DocumentStatus(int(value))
    except (TypeError, ValueError):
        return DocumentStatus.COMMITTED


def _build_requirements(rows: List[Dict[str, Any]]) -> List[Requirement]:
    return [
        Requirement(
            id=str(_pick(row, "id", "id_", default=new_id())),
            type=str(_pick(row, "type", "type_", default="")),
            description=str(_pick(row, "description", "desc_", default="")),
            status=_requirement_status(row.get("status")),
            file_name=_pick(row, "fileName", "filename_"),
            path=_pick(row, "path", "path_"),
        )
        for row in rows
    ]


def _build_documents(rows: List[Dict[str, Any]], requirements: List[Requirement], business_id: str) -> List[StagedDocument]:
    by_filename = {r.file_name: r for r in requirements if r.file_name}
    documents = []
    for row in rows:
        filename = str(_pick(row, "filename", "filename_", default=""))
        owner = by_filename.get(filename)
        documents.append(StagedDocument(
            id=str(_pick(row, "id", "id_", default=new_id("doc-"))),
            requirement_id=owner.id if owner else None,
            type=str(_pick(row, "type", "type_", default="")),
            description=str(_pick(row, "description", "desc_", default="")),
            business_ref=str(_pick(row, "businessId", "businessId_", default=business_id)),
            user_id=str(_pick(row, "userId", "userid_", default="")),
            filename=filename,
            file_type=_pick(row, "fileType"),
            path=str(_pick(row, "path", "path_", default="")),
            status=_document_status(_pick(row, "status", "status_", default=1)),
            timestamp=str(_pick(row, "timestamp", "datetimestamp_", default=now_iso())),
        ))
    return documents


def _link(requirements: List[Requirement], documents: List[StagedDocument]) -> List[Requirement]:
    """Point each requirement at its persisted document."""
    linked = []
    for requirement in requirements:
        doc = next((d for d in documents if d.requirement_id == requirement.id), None)
        if doc is not None:
            update = {"file_ref": doc.id}
            if doc.status == DocumentStatus.COMMITTED:
                update["status"] = RequirementStatus.UPLOADED
            requirement = requirement.model_copy(update=update)
        linked.append(requirement)
    return linked


def normalize(details: BusinessDetails, business_id: str = "") -> HydratedSession:
    """Turn either details variant into a FormRecord and its collections."""
    record = from_wire(_wire_fields(details))
    record["agreed_to_terms"] = False   # consent is always given afresh

    requirements = _build_requirements(details.requirement_rows)
    documents = _build_documents(details.document_rows, requirements, business_id)
    requirements = _link(requirements, documents)

    logger.info(
        f"Hydrated business {business_id or '?'} from {details.kind} details "
        f"({len(requirements)} requirements, {len(documents)} documents)"
    )
    return HydratedSession(record=record, requirements=requirements, documents=documents)
