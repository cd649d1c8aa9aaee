from abc import ABC, abstractmethod

from pyresults import Result

from voido.core.errors import StoreError
from voido.core.models import Priority, Status, SubtaskStatus, Todo
from voido.util.dirs import ensure_dirs, load_env


class Store(ABC):
    """Record Store abstract base class.

    Every public method is a single atomic operation: it either completes and
    is durable, or fails and leaves the stored data untouched. Failures are
    returned, never raised:

        - Err(NotFoundError): the todo / subtask id does not exist
        - Err(StoreIOError): the read or write itself failed
        - Err(InvalidValueError): a status / priority is outside its
          enumeration or a required text is blank; checked before any SQL runs

    Public API (used by the interactive session):
        - list_all(): every todo with its subtasks, in id order
        - get(): a single todo by id
        - set_status() / set_priority() / set_note()
        - delete(): a todo and its subtasks
        - add_subtask() / set_subtask_status() / delete_subtask()

    Public API (used by one-shot commands):
        - add(): insert a todo (and its subtasks), returns the new id
        - add_many(): insert several todos in one transaction
        - clear(): delete everything
        - replace_all(): swap the whole content for imported todos
    """

    def __init__(self, data_path: str | None = None) -> None:
        ensure_dirs()
        env = load_env()
        self.data_path = data_path or env["DATA_PATH"]

    # ---- 読み取り ----

    @abstractmethod
    def list_all(self) -> Result[list[Todo], StoreError]:
        raise NotImplementedError

    @abstractmethod
    def get(self, todo_id: int) -> Result[Todo, StoreError]:
        raise NotImplementedError

    # ---- todo 単位の更新 ----

    @abstractmethod
    def add(self, todo: Todo) -> Result[int, StoreError]:
        raise NotImplementedError

    @abstractmethod
    def add_many(self, todos: list[Todo]) -> Result[list[int], StoreError]:
        raise NotImplementedError

    @abstractmethod
    def set_status(self, todo_id: int, status: Status) -> Result[None, StoreError]:
        raise NotImplementedError

    @abstractmethod
    def set_priority(self, todo_id: int, priority: Priority) -> Result[None, StoreError]:
        raise NotImplementedError

    @abstractmethod
    def set_note(self, todo_id: int, text: str) -> Result[None, StoreError]:
        raise NotImplementedError

    @abstractmethod
    def delete(self, todo_id: int) -> Result[None, StoreError]:
        raise NotImplementedError

    # ---- subtask ----

    @abstractmethod
    def add_subtask(self, todo_id: int, text: str) -> Result[int, StoreError]:
        raise NotImplementedError

    @abstractmethod
    def set_subtask_status(
        self,
        todo_id: int,
        subtask_id: int,
        status: SubtaskStatus,
    ) -> Result[None, StoreError]:
        raise NotImplementedError

    @abstractmethod
    def delete_subtask(self, todo_id: int, subtask_id: int) -> Result[None, StoreError]:
        raise NotImplementedError

    # ---- 一括操作 ----

    @abstractmethod
    def clear(self) -> Result[int, StoreError]:
        raise NotImplementedError

    @abstractmethod
    def replace_all(self, todos: list[Todo]) -> Result[list[int], StoreError]:
        raise NotImplementedError
