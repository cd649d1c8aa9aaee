from typing import TypeVar

from pyresults import Err, Ok, Result

from voido.core.errors import ValidationError
from voido.core.models import PRIORITIES, STATUSES, SUBTASK_STATUSES, Priority, Status, SubtaskStatus
from voido.util.time import parse_date

T = TypeVar("T")

# CLI / import で受け付ける別名
_STATUS_ALIASES: dict[str, Status] = {
    "todo": "Pending",
    "in_progress": "Ongoing",
    "in-progress": "Ongoing",
    "doing": "Ongoing",
    "completed": "Done",
}
_PRIORITY_ALIASES: dict[str, Priority] = {
    "l": "Low",
    "m": "Medium",
    "normal": "Medium",
    "h": "High",
}


def ensure(result: Result[T, str]) -> T:
    """Unwrap a validation result, raising ValidationError on Err."""
    match result:
        case Ok(value):
            return value  # type: ignore[no-any-return]
        case Err(e):
            raise ValidationError(e)
        case _:
            _msg = "Unexpected validation result"
            raise ValidationError(_msg)


def parse_status(s: str) -> Result[Status, str]:
    key = s.strip().lower()
    for st in STATUSES:
        if st.lower() == key:
            return Ok(st)
    if key in _STATUS_ALIASES:
        return Ok(_STATUS_ALIASES[key])
    return Err(f"Invalid status '{s}' (expected one of: {', '.join(STATUSES)})")


def parse_subtask_status(s: str) -> Result[SubtaskStatus, str]:
    key = s.strip().lower()
    for st in SUBTASK_STATUSES:
        if st.lower() == key:
            return Ok(st)
    if key == "completed":
        return Ok("Done")
    return Err(f"Invalid subtask status '{s}' (expected one of: {', '.join(SUBTASK_STATUSES)})")


def parse_priority(s: str) -> Result[Priority, str]:
    key = s.strip().lower()
    for p in PRIORITIES:
        if p.lower() == key:
            return Ok(p)
    if key in _PRIORITY_ALIASES:
        return Ok(_PRIORITY_ALIASES[key])
    return Err(f"Invalid priority '{s}' (expected one of: {', '.join(PRIORITIES)})")


def parse_due(s: str | None) -> Result[str | None, str]:
    if s is None or not s.strip() or s.strip() == "-":
        return Ok(None)
    return parse_date(s)


def validate_text(s: str, *, field_name: str = "text") -> Result[str, str]:
    text = s.strip()
    if not text:
        return Err(f"Empty {field_name}")
    return Ok(text)
