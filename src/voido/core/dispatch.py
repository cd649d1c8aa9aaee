"""Mutation dispatcher: one view-level intent -> one Record Store call.

After a successful write the whole todo list is re-fetched rather than
patched in memory, so callers only ever see what is durable.
"""

from pyresults import Err, Ok, Result

from voido.core.errors import StoreError
from voido.core.intents import (
    AddSubtask,
    DeleteSubtask,
    DeleteTodo,
    Intent,
    SetNote,
    SetPriority,
    SetStatus,
    SetSubtaskStatus,
)
from voido.core.models import Todo
from voido.storage.base import Store
from voido.util.logger import setup_logger

logger = setup_logger("voido")


def apply(intent: Intent, store: Store) -> Result[None, StoreError]:
    logger.debug("dispatch %r", intent)
    match intent:
        case SetStatus(todo_id, status):
            res = store.set_status(todo_id, status)
        case SetPriority(todo_id, priority):
            res = store.set_priority(todo_id, priority)
        case AddSubtask(todo_id, text):
            res = store.add_subtask(todo_id, text).and_then(lambda _: Ok(None))
        case SetSubtaskStatus(todo_id, subtask_id, status):
            res = store.set_subtask_status(todo_id, subtask_id, status)
        case DeleteSubtask(todo_id, subtask_id):
            res = store.delete_subtask(todo_id, subtask_id)
        case SetNote(todo_id, text):
            res = store.set_note(todo_id, text)
        case DeleteTodo(todo_id):
            res = store.delete(todo_id)
        case _:
            _msg = f"Unknown intent: {intent!r}"
            raise TypeError(_msg)
    if res.is_err():
        logger.warning("dispatch failed %r: %s", intent, res.unwrap_err())
    return res


def apply_and_reload(intent: Intent, store: Store) -> Result[list[Todo], StoreError]:
    match apply(intent, store):
        case Ok(_):
            return store.list_all()
        case Err(e):
            return Err(e)
        case _:
            _msg = "Unexpected dispatch result"
            raise TypeError(_msg)
