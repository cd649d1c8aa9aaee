import json
import tempfile
import unittest
from datetime import datetime
from pathlib import Path

import pytest
import yaml
from openpyxl import Workbook, load_workbook

from voido.core.errors import ValidationError
from voido.core.models import Subtask, Todo
from voido.io.json_io import export_json, import_json
from voido.io.xlsx_io import HEADERS, export_xlsx, import_xlsx
from voido.io.yaml_io import export_yaml, import_yaml


def _todos() -> list[Todo]:
    return [
        Todo(description="a", id=1, priority="High", subtasks=[Subtask(1, "s", "Done")], note="n"),
        Todo(description="日本語", id=2, status="Ongoing"),
    ]


class TestJSON(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = tempfile.TemporaryDirectory()
        self.path = (Path(self.tmp.name) / "out.json").as_posix()

    def tearDown(self) -> None:
        self.tmp.cleanup()

    def test_export_then_import(self) -> None:
        export_json(_todos(), self.path)
        raw = Path(self.path).read_text(encoding="utf-8")
        assert "日本語" in raw
        assert import_json(self.path) == _todos()

    def test_export_refuses_overwrite(self) -> None:
        Path(self.path).write_text("[]", encoding="utf-8")
        with pytest.raises(FileExistsError):
            export_json(_todos(), self.path)

    def test_import_missing(self) -> None:
        with pytest.raises(FileNotFoundError):
            import_json(self.path)

    def test_import_not_a_list(self) -> None:
        Path(self.path).write_text(json.dumps({"a": 1}), encoding="utf-8")
        with pytest.raises(ValueError, match="Expected a list"):
            import_json(self.path)

    def test_import_invalid_todo(self) -> None:
        Path(self.path).write_text(json.dumps([{"description": "x", "priority": "urgent"}]), encoding="utf-8")
        with pytest.raises(ValidationError):
            import_json(self.path)


class TestYAML(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = tempfile.TemporaryDirectory()
        self.path = (Path(self.tmp.name) / "out.yaml").as_posix()

    def tearDown(self) -> None:
        self.tmp.cleanup()

    def test_export_then_import(self) -> None:
        export_yaml(_todos(), self.path)
        assert import_yaml(self.path) == _todos()

    def test_hand_written_yaml(self) -> None:
        Path(self.path).write_text(
            "- description: from yaml\n  priority: low\n  subtasks:\n    - text: one\n",
            encoding="utf-8",
        )
        (t,) = import_yaml(self.path)
        assert t.priority == "Low"
        assert t.subtasks[0].text == "one"

    def test_empty_file(self) -> None:
        Path(self.path).write_text("", encoding="utf-8")
        assert import_yaml(self.path) == []

    def test_broken_yaml(self) -> None:
        Path(self.path).write_text("- [unclosed", encoding="utf-8")
        with pytest.raises(yaml.YAMLError):
            import_yaml(self.path)


class TestXLSX(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = tempfile.TemporaryDirectory()
        self.path = (Path(self.tmp.name) / "out.xlsx").as_posix()

    def tearDown(self) -> None:
        self.tmp.cleanup()

    def test_export_then_import(self) -> None:
        export_xlsx(_todos(), self.path)
        assert import_xlsx(self.path) == _todos()

    def test_header_row(self) -> None:
        export_xlsx(_todos(), self.path)
        ws = load_workbook(self.path).active
        assert tuple(c.value for c in ws[1]) == HEADERS
        assert ws.cell(row=2, column=4).value == "a"
        assert ws.cell(row=2, column=10).value == "[x] s"

    def test_export_refuses_overwrite(self) -> None:
        export_xlsx(_todos(), self.path)
        with pytest.raises(FileExistsError):
            export_xlsx(_todos(), self.path)

    def test_hand_written_sheet(self) -> None:
        wb = Workbook()
        ws = wb.active
        ws.append(["todo", "Due Date", "status", "subtasks"])
        ws.append(["Plan", datetime(2026, 3, 1), "doing", "[ ] one\n[X] two"])
        ws.append([None, None, None, None])
        ws.append(["Ship", None, None, None])
        wb.save(self.path)
        plan, ship = import_xlsx(self.path)
        assert plan.description == "Plan"
        assert plan.due == "2026-03-01"
        assert plan.status == "Ongoing"
        assert plan.subtasks == [Subtask(1, "one"), Subtask(2, "two", "Done")]
        assert ship.status == "Pending"
        assert ship.priority == "Medium"

    def test_missing_todo_column(self) -> None:
        wb = Workbook()
        wb.active.append(["ID", "STATUS"])
        wb.save(self.path)
        with pytest.raises(ValueError, match="Missing TODO column"):
            import_xlsx(self.path)

    def test_not_a_workbook(self) -> None:
        Path(self.path).write_text("plain text", encoding="utf-8")
        with pytest.raises(ValueError, match="Not an Excel workbook"):
            import_xlsx(self.path)

    def test_invalid_row(self) -> None:
        wb = Workbook()
        wb.active.append(["TODO", "PRIORITY"])
        wb.active.append(["x", "urgent"])
        wb.save(self.path)
        with pytest.raises(ValidationError):
            import_xlsx(self.path)
