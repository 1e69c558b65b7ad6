"""Unit tests for the FormRecord field table."""

from wizard.fields import FIELDS, default_record, from_wire, is_known_field, to_wire


class TestDefaults:

    def test_every_field_has_a_default(self):
        record = default_record()
        assert set(record) == {f.name for f in FIELDS}

    def test_documented_defaults(self):
        record = default_record()
        assert record["is_main"] is True
        assert record["waiver_agreement"] is True
        assert record["is_branch"] is False
        assert record["cedula_amount"] == 0
        assert record["business_name"] == ""
        assert record["agreed_to_terms"] is False

    def test_known_fields(self):
        assert is_known_field("business_name")
        assert is_known_field("agreed_to_terms")
        assert not is_known_field("businessname_")


class TestToWire:

    def test_uses_registry_keys(self):
        record = {**default_record(), "business_name": "Acme", "registrant_name": "Ana Reyes"}
        payload = to_wire(record)
        assert payload["businessname_"] == "Acme"
        assert payload["repname_"] == "Ana Reyes"

    def test_session_only_fields_are_not_sent(self):
        payload = to_wire(default_record())
        assert "agreed_to_terms" not in payload
        assert "agreed_to_terms_" not in payload

    def test_empty_optionals_become_null(self):
        record = {**default_record(), "trade_name": "  ", "birthdate": ""}
        payload = to_wire(record)
        assert payload["tradename_"] is None
        assert payload["birthdate_"] is None
        # required strings stay as typed
        assert payload["businessname_"] == ""

    def test_booleans_are_sent_as_stored(self):
        record = {**default_record(), "is_branch": True, "is_foreign": False}
        payload = to_wire(record)
        assert payload["isbranch_"] is True
        assert payload["isforeign_"] is False
        assert payload["ismain_"] is True

    def test_cedula_amount_falls_back_to_zero(self):
        record = {**default_record(), "cedula_amount": None}
        assert to_wire(record)["cedulaamount_"] == 0


class TestFromWire:

    def test_absent_keys_keep_defaults(self):
        record = from_wire({"businessname_": "Acme"})
        assert record["business_name"] == "Acme"
        assert record["is_main"] is True
        assert record["waiver_agreement"] is True

    def test_datetimes_are_truncated_to_dates(self):
        record = from_wire({"birthdate_": "1990-05-01T00:00:00", "dtiissued_": "not a date"})
        assert record["birthdate"] == "1990-05-01"
        assert record["dti_issued"] == ""

    def test_null_values(self):
        record = from_wire({"ismain_": None, "tradename_": None, "cedulaamount_": None})
        assert record["is_main"] is True
        assert record["trade_name"] == ""
        assert record["cedula_amount"] == 0

    def test_unknown_keys_are_ignored(self):
        record = from_wire({"somethingelse_": "x"})
        assert record == default_record()
