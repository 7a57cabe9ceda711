"""Tests for row normalization."""

import pytest

from leadsplit.core.errors import ValidationError
from leadsplit.core.normalizer import (
    CanonicalRecord,
    map_columns,
    normalize_row,
    normalize_rows,
    to_text,
)


class TestHeaderSynonyms:
    """Every synonym, in any case, resolves to the same canonical field."""

    @pytest.mark.parametrize("header", ["FirstName", "first_name", "NAME", "First Name", "firstname"])
    def test_first_name_synonyms(self, header):
        record = normalize_row({header: "Asha", "Phone": "555"})
        assert record.first_name == "Asha"

    @pytest.mark.parametrize("header", ["Phone", "PHONE_NUMBER", "mobile", "Mobile"])
    def test_phone_synonyms(self, header):
        record = normalize_row({"FirstName": "Asha", header: "555-0100"})
        assert record.phone == "555-0100"

    @pytest.mark.parametrize("header", ["Notes", "note", "REMARKS"])
    def test_notes_synonyms(self, header):
        record = normalize_row({"FirstName": "Asha", "Phone": "555", header: "call after 5"})
        assert record.notes == "call after 5"

    def test_first_name_priority(self):
        """firstname beats first_name beats name beats 'first name'."""
        row = {"first name": "D", "Name": "C", "first_name": "B", "FirstName": "A", "phone": "1"}
        assert normalize_row(row).first_name == "A"

        del row["FirstName"]
        assert normalize_row(row).first_name == "B"

        del row["first_name"]
        assert normalize_row(row).first_name == "C"

        del row["Name"]
        assert normalize_row(row).first_name == "D"

    def test_phone_priority(self):
        row = {"name": "A", "Mobile": "3", "phone_number": "2", "Phone": "1"}
        assert normalize_row(row).phone == "1"

        del row["Phone"]
        assert normalize_row(row).phone == "2"

        del row["phone_number"]
        assert normalize_row(row).phone == "3"

    def test_notes_priority(self):
        row = {"name": "A", "phone": "1", "Remarks": "r", "Note": "n", "NOTES": "N"}
        assert normalize_row(row).notes == "N"

        del row["NOTES"]
        assert normalize_row(row).notes == "n"

        del row["Note"]
        assert normalize_row(row).notes == "r"

    def test_header_whitespace_ignored(self):
        record = normalize_row({" Name ": "Asha", "Phone ": "555"})
        assert record == CanonicalRecord(first_name="Asha", phone="555", notes="")

    def test_map_columns_returns_original_headers(self):
        assert map_columns({"NAME": "x", "Mobile": "y"}) == {"first_name": "NAME", "phone": "Mobile"}


class TestRejection:
    """Rows missing required headers are rejected with None."""

    def test_missing_both(self):
        assert normalize_row({"Email": "a@b.co", "City": "Pune"}) is None

    def test_missing_phone(self):
        assert normalize_row({"FirstName": "Asha", "Notes": "x"}) is None

    def test_missing_first_name(self):
        assert normalize_row({"Phone": "555", "Remarks": "x"}) is None

    def test_empty_row(self):
        assert normalize_row({}) is None

    def test_non_string_keys_ignored(self):
        assert normalize_row({None: ["overflow"], "Name": "A", "Phone": "1"}).first_name == "A"


class TestValues:
    """Value coercion and trimming."""

    def test_values_trimmed(self):
        record = normalize_row({"Name": "  Asha ", "Phone": " 555 ", "Notes": "\tVIP \n"})
        assert record == CanonicalRecord(first_name="Asha", phone="555", notes="VIP")

    def test_missing_notes_defaults_to_empty(self):
        assert normalize_row({"Name": "Asha", "Phone": "555"}).notes == ""

    def test_none_values_become_empty(self):
        record = normalize_row({"Name": None, "Phone": None, "Notes": None})
        assert record == CanonicalRecord(first_name="", phone="", notes="")

    def test_numbers_coerced(self):
        record = normalize_row({"Name": "Asha", "Phone": 9876543210.0, "Notes": 2.5})
        assert record.phone == "9876543210"
        assert record.notes == "2.5"

    def test_to_text_int(self):
        assert to_text(42) == "42"

    def test_to_dict_uses_canonical_keys(self):
        record = CanonicalRecord(first_name="A", phone="1", notes="n")
        assert record.to_dict() == {"FirstName": "A", "Phone": "1", "Notes": "n"}


class TestBatchNormalization:
    """A batch normalizes entirely or fails."""

    def test_all_rows_normalized_in_order(self):
        rows = [{"Name": "A", "Phone": "1"}, {"Name": "B", "Phone": "2"}]
        assert [r.first_name for r in normalize_rows(rows)] == ["A", "B"]

    def test_bad_row_fails_batch(self):
        rows = [{"Name": "A", "Phone": "1"}, {"Name": "B"}, {"Name": "C", "Phone": "3"}]
        with pytest.raises(ValidationError) as exc_info:
            list(normalize_rows(rows, "CSV"))
        assert "CSV format invalid" in exc_info.value.message
        assert "row 2" in exc_info.value.message
