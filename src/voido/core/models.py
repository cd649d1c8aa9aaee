from dataclasses import asdict, dataclass, field
from typing import Any, Literal

from voido.core.errors import ValidationError
from voido.util.time import today_iso

Status = Literal["Pending", "Ongoing", "Done"]
Priority = Literal["Low", "Medium", "High"]
SubtaskStatus = Literal["Pending", "Done"]

STATUSES: tuple[Status, ...] = ("Pending", "Ongoing", "Done")
PRIORITIES: tuple[Priority, ...] = ("Low", "Medium", "High")
SUBTASK_STATUSES: tuple[SubtaskStatus, ...] = ("Pending", "Done")


@dataclass
class Subtask:
    id: int
    text: str
    status: SubtaskStatus = "Pending"

    @property
    def is_done(self) -> bool:
        return self.status == "Done"

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "Subtask":
        # 循環importを避けるため遅延import
        from voido.core.validate import ensure, parse_subtask_status, validate_text

        if not isinstance(d, dict):
            _msg = f"Subtask entry must be a mapping, got {type(d).__name__}"
            raise ValidationError(_msg)
        return Subtask(
            id=int(d.get("id") or 0),
            text=ensure(validate_text(str(d.get("text") or ""), field_name="subtask")),
            status=ensure(parse_subtask_status(str(d.get("status", "Pending")))),
        )


@dataclass
class Todo:
    description: str
    id: int = 0  # 0 = まだstoreに保存されていない
    detail: str | None = None
    topic: str | None = None
    priority: Priority = "Medium"
    owner: str | None = None
    due: str | None = None  # YYYY-MM-DD
    status: Status = "Pending"
    subtasks: list[Subtask] = field(default_factory=list)
    note: str = ""
    created_at: str = field(default_factory=today_iso)

    def subtask(self, subtask_id: int) -> Subtask | None:
        for s in self.subtasks:
            if s.id == subtask_id:
                return s
        return None

    def subtask_progress(self) -> tuple[int, int]:
        return sum(1 for s in self.subtasks if s.is_done), len(self.subtasks)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "Todo":
        """Build a Todo from exported data, normalising enum values.

        Raises:
            ValidationError: the entry is not a mapping, description is
                missing, the due date is not a calendar date or an enum value
                is unknown.
        """
        from voido.core.validate import ensure, parse_due, parse_priority, parse_status, validate_text

        if not isinstance(d, dict):
            _msg = f"Todo entry must be a mapping, got {type(d).__name__}"
            raise ValidationError(_msg)
        subtasks = d.get("subtasks") or []
        if not isinstance(subtasks, list):
            _msg = f"subtasks must be a list, got {type(subtasks).__name__}"
            raise ValidationError(_msg)
        # YAML の日付は datetime.date で来るので文字列にしてから検証する
        due = d.get("due")
        return Todo(
            id=int(d.get("id") or 0),
            description=ensure(validate_text(str(d.get("description") or ""), field_name="description")),
            detail=_optional_text(d.get("detail")),
            topic=_optional_text(d.get("topic")),
            priority=ensure(parse_priority(str(d.get("priority") or "Medium"))),
            owner=_optional_text(d.get("owner")),
            due=ensure(parse_due(str(due) if due is not None else None)),
            status=ensure(parse_status(str(d.get("status") or "Pending"))),
            subtasks=[Subtask.from_dict(s) for s in subtasks],
            note=str(d.get("note") or ""),
            created_at=str(d.get("created_at") or today_iso()),
        )


def _optional_text(v: Any) -> str | None:
    if v is None:
        return None
    s = str(v).strip()
    return s or None
