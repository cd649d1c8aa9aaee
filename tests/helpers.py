import tempfile
from pathlib import Path

from pyresults import Err, Result

from voido.core.errors import NotFoundError, StoreError, StoreIOError
from voido.core.models import Priority, Status, Subtask, Todo
from voido.storage import StoreToSQLite


def temp_store() -> tuple[StoreToSQLite, tempfile.TemporaryDirectory[str]]:
    d = tempfile.TemporaryDirectory()
    return StoreToSQLite(data_path=(Path(d.name) / "todos.db").as_posix()), d


def seed(store: StoreToSQLite, *descriptions: str, subtasks: list[str] | None = None) -> list[int]:
    return [
        store.add(Todo(description=d, subtasks=[Subtask(0, s) for s in subtasks or []])).unwrap()
        for d in descriptions
    ]


class FailingStore(StoreToSQLite):
    """StoreToSQLite whose writes fail on demand."""

    fail_with: StoreError | None = None

    def set_status(self, todo_id: int, status: Status) -> Result[None, StoreError]:
        if self.fail_with is not None:
            return Err(self.fail_with)
        return super().set_status(todo_id, status)

    def set_priority(self, todo_id: int, priority: Priority) -> Result[None, StoreError]:
        if self.fail_with is not None:
            return Err(self.fail_with)
        return super().set_priority(todo_id, priority)

    def set_note(self, todo_id: int, text: str) -> Result[None, StoreError]:
        if self.fail_with is not None:
            return Err(self.fail_with)
        return super().set_note(todo_id, text)

    def delete(self, todo_id: int) -> Result[None, StoreError]:
        if self.fail_with is not None:
            return Err(self.fail_with)
        return super().delete(todo_id)


IO_ERROR = StoreIOError("Error (test): disk full")
GONE = NotFoundError("Todo not found: 1")
