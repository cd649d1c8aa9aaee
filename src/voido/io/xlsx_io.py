"""Excel workbook import/export.

One sheet with a header row and one todo per row. Subtasks share a single
cell, one ``[x] text`` / ``[ ] text`` line each. Columns are looked up by
header name on import, so a hand-edited sheet may reorder or drop them;
only ``TODO`` is required.
"""

from datetime import date, datetime
from pathlib import Path
from typing import Any
from zipfile import BadZipFile

from openpyxl import Workbook, load_workbook  # type: ignore[import-untyped]
from openpyxl.utils.exceptions import InvalidFileException  # type: ignore[import-untyped]

from voido.core.models import Subtask, Todo

SHEET_TITLE = "Todos"
HEADERS = (
    "ID",
    "PRIORITY",
    "TOPIC",
    "TODO",
    "DESCRIPTION",
    "CREATED",
    "DUE DATE",
    "STATUS",
    "OWNER",
    "SUBTASKS",
    "NOTE",
)


def _subtask_cell(subtasks: list[Subtask]) -> str | None:
    if not subtasks:
        return None
    return "\n".join(f"[{'x' if s.is_done else ' '}] {s.text}" for s in subtasks)


def _parse_subtasks(cell: str | None) -> list[dict[str, Any]]:
    out: list[dict[str, Any]] = []
    for raw in (cell or "").splitlines():
        line = raw.strip()
        if not line:
            continue
        status = "Pending"
        if line[:3].lower() == "[x]":
            status, line = "Done", line[3:]
        elif line[:3] == "[ ]":
            line = line[3:]
        # id はシート内の並び順, store に入るときに振り直される
        out.append({"id": len(out) + 1, "text": line.strip(), "status": status})
    return out


def _cell_text(v: Any) -> str | None:
    if v is None:
        return None
    if isinstance(v, datetime):
        return v.date().isoformat()
    if isinstance(v, date):
        return v.isoformat()
    if isinstance(v, float) and v.is_integer():
        return str(int(v))
    return str(v)


def export_xlsx(todos: list[Todo], path: str) -> None:
    _path = Path(path)
    if _path.exists():
        _msg = f"File already exists: {_path}"
        raise FileExistsError(_msg)
    wb = Workbook()
    ws = wb.active
    ws.title = SHEET_TITLE
    ws.append(HEADERS)
    for t in todos:
        ws.append(
            [
                t.id,
                t.priority,
                t.topic,
                t.description,
                t.detail,
                t.created_at,
                t.due,
                t.status,
                t.owner,
                _subtask_cell(t.subtasks),
                t.note or None,
            ],
        )
    # "=" で始まる文字列を数式として保存させない
    for row in ws.iter_rows(min_row=2):
        for cell in row:
            if isinstance(cell.value, str) and cell.value.startswith("="):
                cell.data_type = "s"
    wb.save(_path.as_posix())


def import_xlsx(path: str) -> list[Todo]:
    """Read todos from the first sheet of a workbook.

    Raises:
        FileNotFoundError: path does not exist.
        ValueError: the file is not a workbook or has no ``TODO`` column.
        ValidationError: a row holds an invalid value.
    """
    _path = Path(path)
    if not _path.exists():
        _msg = f"File not found: {_path}"
        raise FileNotFoundError(_msg)
    try:
        wb = load_workbook(_path.as_posix(), read_only=True, data_only=True)
    except (InvalidFileException, BadZipFile, KeyError) as e:
        _msg = f"Not an Excel workbook: {_path}"
        raise ValueError(_msg) from e

    try:
        rows = wb.worksheets[0].iter_rows(values_only=True)
        header = next(rows, None)
        if header is None:
            return []
        index = {str(h).strip().upper(): i for i, h in enumerate(header) if h is not None}
        if "TODO" not in index:
            _msg = f"Missing TODO column in {_path}"
            raise ValueError(_msg)

        todos: list[Todo] = []
        for row in rows:
            cells = {name: _cell_text(row[i]) if i < len(row) else None for name, i in index.items()}
            if not any(v and v.strip() for v in cells.values()):
                continue
            todos.append(
                Todo.from_dict(
                    {
                        "id": cells.get("ID"),
                        "priority": cells.get("PRIORITY"),
                        "topic": cells.get("TOPIC"),
                        "description": cells.get("TODO"),
                        "detail": cells.get("DESCRIPTION"),
                        "created_at": cells.get("CREATED"),
                        "due": cells.get("DUE DATE"),
                        "status": cells.get("STATUS"),
                        "owner": cells.get("OWNER"),
                        "subtasks": _parse_subtasks(cells.get("SUBTASKS")),
                        "note": cells.get("NOTE"),
                    },
                ),
            )
    finally:
        wb.close()
    return todos
