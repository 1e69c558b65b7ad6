"""Unit tests for the step validator."""

from wizard.fields import default_record
from wizard.validator import STEP_RULES, validate


class TestValidate:

    def test_empty_record_fails_every_step1_rule_in_order(self):
        errors = validate(1, default_record())
        assert list(errors) == [field for field, _, _ in STEP_RULES[1]]
        assert errors["birthdate"] == "Birth Date is required"

    def test_single_missing_field(self, step1_fields):
        step1_fields["birthdate"] = ""
        errors = validate(1, {**default_record(), **step1_fields})
        assert errors == {"birthdate": "Birth Date is required"}

    def test_whitespace_counts_as_empty(self, step1_fields):
        step1_fields["first_name"] = "   "
        errors = validate(1, {**default_record(), **step1_fields})
        assert list(errors) == ["first_name"]

    def test_business_step(self, step2_fields):
        assert validate(2, {**default_record(), **step2_fields}) == {}
        step2_fields["tin"] = ""
        assert validate(2, {**default_record(), **step2_fields}) == {"tin": "TIN is required"}

    def test_requirements_step_has_no_rules(self):
        assert validate(3, default_record()) == {}

    def test_summary_step_needs_literal_true(self):
        record = default_record()
        assert "agreed_to_terms" in validate(4, record)
        record["agreed_to_terms"] = "yes"
        assert "agreed_to_terms" in validate(4, record)
        record["agreed_to_terms"] = True
        assert validate(4, record) == {}

    def test_does_not_mutate_record(self):
        record = default_record()
        before = dict(record)
        validate(1, record)
        assert record == before

    def test_unknown_step(self):
        assert validate(99, default_record()) == {}
