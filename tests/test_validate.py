import unittest

import pytest
from pyresults import Err, Ok

from voido.core.errors import ValidationError
from voido.core.validate import ensure, parse_due, parse_priority, parse_status, parse_subtask_status, validate_text


class TestParseStatus(unittest.TestCase):
    def test_canonical_case_insensitive(self) -> None:
        assert parse_status("done").unwrap() == "Done"
        assert parse_status("PENDING").unwrap() == "Pending"
        assert parse_status(" Ongoing ").unwrap() == "Ongoing"

    def test_aliases(self) -> None:
        assert parse_status("in_progress").unwrap() == "Ongoing"
        assert parse_status("completed").unwrap() == "Done"
        assert parse_status("todo").unwrap() == "Pending"

    def test_invalid(self) -> None:
        r = parse_status("someday")
        assert r.is_err()
        assert "Invalid status" in r.unwrap_err()

    def test_subtask_status(self) -> None:
        assert parse_subtask_status("done").unwrap() == "Done"
        assert parse_subtask_status("Ongoing").is_err()


class TestParsePriority(unittest.TestCase):
    def test_values(self) -> None:
        assert parse_priority("high").unwrap() == "High"
        assert parse_priority("l").unwrap() == "Low"
        assert parse_priority("normal").unwrap() == "Medium"

    def test_invalid(self) -> None:
        assert parse_priority("urgent").is_err()


class TestParseDue(unittest.TestCase):
    def test_parse_due_none_or_blank(self) -> None:
        assert parse_due(None).unwrap() is None
        assert parse_due("  ").unwrap() is None
        assert parse_due("-").unwrap() is None

    def test_invalid(self) -> None:
        assert parse_due("not a date").is_err()


class TestValidateText(unittest.TestCase):
    def test_strips(self) -> None:
        assert validate_text("  hi  ").unwrap() == "hi"

    def test_empty(self) -> None:
        r = validate_text("   ", field_name="subtask")
        assert r.unwrap_err() == "Empty subtask"


class TestEnsure(unittest.TestCase):
    def test_ok(self) -> None:
        assert ensure(Ok(3)) == 3

    def test_err_raises(self) -> None:
        with pytest.raises(ValidationError, match="bad"):
            ensure(Err("bad"))
