"""
Shared fixtures

A fake registry that records every call, plus ready-made field sets that
satisfy the taxpayer and business steps.
"""

import asyncio

import pytest

from registry_client import RegistryAPIError
from wizard.field_store import FieldStore
from wizard.state import SourceFile


STEP1_FIELDS = {
    "registrant_name": "Juan Dela Cruz",
    "rep_ownership_type": "Single Proprietorship",
    "first_name": "Juan",
    "last_name": "Dela Cruz",
    "birthdate": "1990-05-01",
    "gender": "Male",
    "civil_status": "Single",
    "nationality": "Filipino",
    "rep_email": "juan@example.com",
    "rep_province": "Iloilo",
    "rep_municipality": "Iloilo City",
    "rep_landmark": "Near the plaza",
}

STEP2_FIELDS = {
    "business_name": "Juan's Sari-Sari Store",
    "ownership_type": "Single Proprietorship",
    "province": "Iloilo",
    "municipality": "Iloilo City",
    "barangay": "Jaro",
    "landmark": "Beside the cathedral",
    "email": "store@example.com",
    "tin": "123-456-789-000",
}


class FakeRegistry:
    """Async registry double; `gate` events let a test hold a call open."""

    def __init__(self):
        self.calls = []
        self.create_response = {"businessid_": "BIZ-1"}
        self.update_response = {"businessid_": "BIZ-7"}
        self.details = {}
        self.lookups = {"gender": ["Male", "Female"]}
        self.submit_error = None
        self.details_error = None
        self.submit_gate = None
        self.details_gate = None

    async def create_business(self, payload):
        self.calls.append(("create", payload))
        if self.submit_gate is not None:
            await self.submit_gate.wait()
        if self.submit_error is not None:
            raise self.submit_error
        return self.create_response

    async def update_business(self, business_id, payload):
        self.calls.append(("update", business_id, payload))
        if self.submit_error is not None:
            raise self.submit_error
        return self.update_response

    async def get_business_details(self, business_id):
        self.calls.append(("details", business_id))
        if self.details_gate is not None:
            await self.details_gate.wait()
        if self.details_error is not None:
            raise self.details_error
        return self.details

    async def get_lookup_options(self, lookup_type):
        self.calls.append(("lookup", lookup_type))
        if lookup_type not in self.lookups:
            raise RegistryAPIError("Unknown lookup", status_code=404, server_message="Unknown lookup")
        return self.lookups[lookup_type]


async def wait_until(predicate, attempts: int = 200):
    """Yield to the event loop until `predicate()` holds."""
    for _ in range(attempts):
        if predicate():
            return
        await asyncio.sleep(0.01)
    raise AssertionError("condition never became true")


@pytest.fixture
def registry():
    return FakeRegistry()


@pytest.fixture
def step1_fields():
    return dict(STEP1_FIELDS)


@pytest.fixture
def step2_fields():
    return dict(STEP2_FIELDS)


@pytest.fixture
def filled_store():
    """FieldStore with both data-entry steps complete (terms not yet agreed)."""
    store = FieldStore()
    store.merge_fields({**STEP1_FIELDS, **STEP2_FIELDS})
    return store


@pytest.fixture
def pdf_file():
    return SourceFile(name="fileA.pdf", content=b"%PDF-1.4 test document")


@pytest.fixture
def nested_details():
    return {
        "businessInfo": {
            "businessid_": "BIZ-7",
            "businessname_": "Acme Trading",
            "dateestablished_": "2020-01-15T00:00:00",
            "ownershiptype_": "Corporation",
            "email_": "acme@example.com",
        },
        "address": {"province_": "Iloilo", "municipality_": "Iloilo City", "barangay_": "Molo"},
        "representative": {
            "firstname_": "Ana",
            "lastname_": "Reyes",
            "email_": "ana@example.com",
            "cellno_": "09171234567",
        },
        "requirements": {"dtino_": "DTI-001", "cedulaamount_": 150},
    }
