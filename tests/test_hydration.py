"""Unit tests for edit-mode hydration."""

import pytest

from wizard.errors import HydrationError
from wizard.hydration import FlatDetails, NestedDetails, normalize, parse_details
from wizard.state import DocumentStatus, RequirementStatus


@pytest.fixture
def flat_details():
    return {
        "businessid_": "BIZ-9",
        "businessname_": "Flat Co",
        "ismain_": None,
        "isbranch_": True,
        "birthdate_": "1985-12-24T08:00:00Z",
        "email_rep": "owner@example.com",
        "requirements": [
            {"id": "r1", "type": "DTI", "description": "DTI", "status": "Pending Upload", "fileName": "dti.pdf"},
            {"id": "r2", "type": "Cedula", "description": "Cedula", "status": "Bogus"},
        ],
        "documents": [
            {"id": "d1", "type_": "DTI", "desc_": "DTI", "filename_": "dti.pdf",
             "path_": "/files/dti.pdf", "status_": 1, "userid_": "u1"},
        ],
    }


class TestParseDetails:

    def test_nested_shape(self, nested_details):
        details = parse_details(nested_details)
        assert isinstance(details, NestedDetails)
        assert details.requirement_info["dtino_"] == "DTI-001"

    def test_flat_shape(self, flat_details):
        details = parse_details(flat_details)
        assert isinstance(details, FlatDetails)
        assert "requirements" not in details.fields
        assert len(details.requirement_rows) == 2

    @pytest.mark.parametrize("raw", [None, {}, [], "oops"])
    def test_malformed(self, raw):
        with pytest.raises(HydrationError):
            parse_details(raw)


class TestNormalizeNested:

    def test_business_name_comes_from_business_info(self, nested_details):
        hydrated = normalize(parse_details(nested_details), "BIZ-7")
        assert hydrated.record["business_name"] == nested_details["businessInfo"]["businessname_"]

    def test_field_mapping(self, nested_details):
        record = normalize(parse_details(nested_details), "BIZ-7").record
        assert record["date_established"] == "2020-01-15"
        assert record["province"] == "Iloilo"
        assert record["barangay"] == "Molo"
        assert record["first_name"] == "Ana"
        assert record["dti_no"] == "DTI-001"
        assert record["cedula_amount"] == 150

    def test_representative_contacts_do_not_overwrite_business_ones(self, nested_details):
        record = normalize(parse_details(nested_details), "BIZ-7").record
        assert record["email"] == "acme@example.com"
        assert record["rep_email"] == "ana@example.com"
        assert record["rep_cell_no"] == "09171234567"
        assert record["cell_no"] == ""

    def test_absent_booleans_take_defaults(self, nested_details):
        record = normalize(parse_details(nested_details), "BIZ-7").record
        assert record["is_main"] is True
        assert record["waiver_agreement"] is True
        assert record["agreed_to_terms"] is False

    def test_no_requirement_rows(self, nested_details):
        hydrated = normalize(parse_details(nested_details), "BIZ-7")
        assert hydrated.requirements == []
        assert hydrated.documents == []


class TestNormalizeFlat:

    def test_record(self, flat_details):
        record = normalize(parse_details(flat_details), "BIZ-9").record
        assert record["business_name"] == "Flat Co"
        assert record["is_main"] is True
        assert record["is_branch"] is True
        assert record["birthdate"] == "1985-12-24"
        assert record["rep_email"] == "owner@example.com"

    def test_documents_are_committed_and_keep_path(self, flat_details):
        hydrated = normalize(parse_details(flat_details), "BIZ-9")
        [doc] = hydrated.documents
        assert doc.status == DocumentStatus.COMMITTED
        assert doc.path == "/files/dti.pdf"
        assert doc.business_ref == "BIZ-9"
        assert doc.encoded_payload is None

    def test_requirements_link_to_their_documents(self, flat_details):
        hydrated = normalize(parse_details(flat_details), "BIZ-9")
        r1, r2 = hydrated.requirements
        assert r1.file_ref == "d1"
        assert r1.status == RequirementStatus.UPLOADED
        assert hydrated.documents[0].requirement_id == "r1"
        assert r2.status == RequirementStatus.PENDING_UPLOAD
        assert r2.file_ref is None
