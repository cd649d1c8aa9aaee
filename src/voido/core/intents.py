from dataclasses import dataclass

from voido.core.models import Priority, Status, SubtaskStatus


@dataclass(frozen=True)
class SetStatus:
    todo_id: int
    status: Status


@dataclass(frozen=True)
class SetPriority:
    todo_id: int
    priority: Priority


@dataclass(frozen=True)
class AddSubtask:
    todo_id: int
    text: str


@dataclass(frozen=True)
class SetSubtaskStatus:
    todo_id: int
    subtask_id: int
    status: SubtaskStatus


@dataclass(frozen=True)
class DeleteSubtask:
    todo_id: int
    subtask_id: int


@dataclass(frozen=True)
class SetNote:
    todo_id: int
    text: str


@dataclass(frozen=True)
class DeleteTodo:
    todo_id: int


Intent = SetStatus | SetPriority | AddSubtask | SetSubtaskStatus | DeleteSubtask | SetNote | DeleteTodo


def describe(intent: Intent) -> str:
    """Short human-readable summary used for the TUI banner."""
    match intent:
        case SetStatus(todo_id, status):
            return f"#{todo_id} -> {status}"
        case SetPriority(todo_id, priority):
            return f"#{todo_id} priority -> {priority}"
        case AddSubtask(todo_id, _):
            return f"#{todo_id} subtask added"
        case SetSubtaskStatus(todo_id, subtask_id, status):
            return f"#{todo_id} subtask {subtask_id} -> {status}"
        case DeleteSubtask(todo_id, subtask_id):
            return f"#{todo_id} subtask {subtask_id} deleted"
        case SetNote(todo_id, _):
            return f"#{todo_id} note saved"
        case DeleteTodo(todo_id):
            return f"#{todo_id} deleted"
