"""Tests for the batch import file parser."""

import pytest

from src.core.errors import MalformedRowError
from src.interface.task_file_parser import parse_import_file


HEADER = "title,description,ownerName,ownerEmail,assignedByName,assignedByEmail"


@pytest.mark.unit
class TestParseImportFile:
    """Parsing import file text into rows."""

    def test_skips_header_and_parses_rows(self):
        content = f"{HEADER}\nBuy milk,Two litres,Alice,alice@example.com,Bob,bob@example.com\n"

        rows = parse_import_file(content)

        assert len(rows) == 1
        row = rows[0]
        assert row.title == "Buy milk"
        assert row.description == "Two litres"
        assert row.owner_email == "alice@example.com"
        assert row.assigned_by_name == "Bob"
        assert row.line_number == 2

    def test_strips_carriage_returns(self):
        content = f"{HEADER}\r\nBuy milk,Two litres,Alice,alice@example.com,Bob,bob@example.com\r\n"

        rows = parse_import_file(content)

        assert rows[0].assigned_by_email == "bob@example.com"

    def test_skips_blank_lines(self):
        content = (
            f"{HEADER}\n\nBuy milk,,Alice,alice@example.com,Bob,bob@example.com\n\n"
            "Walk dog,,Alice,alice@example.com,Bob,bob@example.com"
        )

        rows = parse_import_file(content)

        assert [row.title for row in rows] == ["Buy milk", "Walk dog"]
        assert [row.line_number for row in rows] == [3, 5]

    def test_header_only_has_no_rows(self):
        assert parse_import_file(f"{HEADER}\n") == []

    def test_row_with_too_few_fields_rejected(self):
        content = f"{HEADER}\nBuy milk,Two litres,Alice,alice@example.com\n"

        with pytest.raises(MalformedRowError) as exc_info:
            parse_import_file(content)

        assert exc_info.value.line_number == 2
        assert exc_info.value.field_count == 4

    def test_row_with_too_many_fields_rejected(self):
        content = f"{HEADER}\nBuy milk,Two, litres,Alice,alice@example.com,Bob,bob@example.com\n"

        with pytest.raises(MalformedRowError, match="expected 6 fields, got 7"):
            parse_import_file(content)

    def test_row_converts_to_task_request(self):
        rows = parse_import_file(f"{HEADER}\nBuy milk,Two litres,Alice,alice@example.com,Bob,bob@example.com")

        request = rows[0].to_request()

        assert request.owner.name == "Alice"
        assert request.assigned_by.email == "bob@example.com"
