import contextlib
import sqlite3
from collections.abc import Callable, Iterator
from typing import TypeVar

from pyresults import Err, Ok, Result

from voido.core.errors import InvalidValueError, NotFoundError, StoreError, StoreIOError
from voido.core.models import (
    PRIORITIES,
    STATUSES,
    SUBTASK_STATUSES,
    Priority,
    Status,
    Subtask,
    SubtaskStatus,
    Todo,
)
from voido.storage.base import Store
from voido.util.logger import setup_logger

logger = setup_logger("voido")

T = TypeVar("T")

BUSY_TIMEOUT_SEC = 5.0

_SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS todos (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        description TEXT NOT NULL CHECK (length(trim(description)) > 0),
        detail TEXT,
        topic TEXT,
        priority TEXT NOT NULL DEFAULT 'Medium' CHECK (priority IN ('Low', 'Medium', 'High')),
        owner TEXT,
        due TEXT,
        status TEXT NOT NULL DEFAULT 'Pending' CHECK (status IN ('Pending', 'Ongoing', 'Done')),
        note TEXT NOT NULL DEFAULT '',
        created_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS subtasks (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        todo_id INTEGER NOT NULL,
        text TEXT NOT NULL CHECK (length(trim(text)) > 0),
        status TEXT NOT NULL DEFAULT 'Pending' CHECK (status IN ('Pending', 'Done')),
        FOREIGN KEY (todo_id) REFERENCES todos(id) ON DELETE CASCADE
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_subtasks_todo ON subtasks(todo_id)",
)


# ---- SQL を投げる前の値チェック (CHECK 制約より先に弾く) ----


def _check_choice(field: str, value: str, allowed: tuple[str, ...]) -> None:
    if value not in allowed:
        _msg = f"Invalid {field}: {value!r} (expected one of {', '.join(allowed)})"
        raise InvalidValueError(_msg)


def _check_text(field: str, value: str) -> None:
    if not value or not value.strip():
        _msg = f"Empty {field}"
        raise InvalidValueError(_msg)


def _check_todo(todo: Todo) -> None:
    _check_text("description", todo.description)
    _check_choice("status", todo.status, STATUSES)
    _check_choice("priority", todo.priority, PRIORITIES)
    for s in todo.subtasks:
        _check_text("subtask", s.text)
        _check_choice("subtask status", s.status, SUBTASK_STATUSES)


def _check_todos(todos: list[Todo]) -> None:
    for t in todos:
        _check_todo(t)


class StoreToSQLite(Store):
    """SQLite3 バックエンド実装.

    - todos テーブル: Todo 本体 (AUTOINCREMENT なので削除済み id は再利用されない)
    - subtasks テーブル: todo_id -> todos.id (ON DELETE CASCADE)

    接続は操作ごとに開いて閉じる。書き込みは BEGIN IMMEDIATE で DB 全体の
    write lock を取るので、TUI と one-shot コマンドが同時に動いても直列化される。
    """

    def __init__(self, data_path: str | None = None, *, timeout: float = BUSY_TIMEOUT_SEC) -> None:
        super().__init__(data_path)
        self.timeout = timeout
        self._init_schema()

    # ---- low-level helpers ---------------------------------------------

    @contextlib.contextmanager
    def _session(self, *, write: bool) -> Iterator[sqlite3.Connection]:
        """1 操作 = 1 接続 = 1 トランザクション."""
        conn = sqlite3.connect(self.data_path, timeout=self.timeout, isolation_level=None)
        conn.row_factory = sqlite3.Row
        try:
            # 外部キー制約と ON DELETE CASCADE を有効化 (トランザクション外で設定する必要がある)
            conn.execute("PRAGMA foreign_keys = ON")
            conn.execute("BEGIN IMMEDIATE" if write else "BEGIN")
            try:
                yield conn
            except BaseException:
                if conn.in_transaction:
                    conn.execute("ROLLBACK")
                raise
            conn.execute("COMMIT")
        finally:
            conn.close()

    def _run(
        self,
        op: str,
        fn: Callable[[sqlite3.Connection], T],
        *,
        write: bool,
        validate: Callable[[], None] | None = None,
    ) -> Result[T, StoreError]:
        try:
            if validate is not None:
                validate()
            with self._session(write=write) as conn:
                value = fn(conn)
        except (NotFoundError, InvalidValueError) as e:
            logger.info("%s: %s", op, e)
            return Err(e)
        except sqlite3.Error as e:
            msg = f"Error ({op}): {e!s}"
            logger.exception(msg)
            return Err(StoreIOError(msg))
        return Ok(value)

    def _init_schema(self) -> None:
        """テーブルがなければ作成する."""

        def _create(conn: sqlite3.Connection) -> None:
            for stmt in _SCHEMA:
                conn.execute(stmt)

        match self._run("init_schema", _create, write=True):
            case Err(e):
                # スキーマが作れない DB は使いようがないので呼び出し元に伝える
                raise e
            case _:
                pass

    @staticmethod
    def _require_todo(conn: sqlite3.Connection, todo_id: int) -> None:
        if conn.execute("SELECT 1 FROM todos WHERE id = ?", (todo_id,)).fetchone() is None:
            _msg = f"Todo not found: {todo_id}"
            raise NotFoundError(_msg)

    @staticmethod
    def _row_to_todo(row: sqlite3.Row, subtasks: list[Subtask]) -> Todo:
        return Todo(
            id=row["id"],
            description=row["description"],
            detail=row["detail"],
            topic=row["topic"],
            priority=row["priority"],
            owner=row["owner"],
            due=row["due"],
            status=row["status"],
            subtasks=subtasks,
            note=row["note"] or "",
            created_at=row["created_at"],
        )

    @staticmethod
    def _row_to_subtask(row: sqlite3.Row) -> Subtask:
        return Subtask(id=row["id"], text=row["text"], status=row["status"])

    @staticmethod
    def _insert(conn: sqlite3.Connection, todo: Todo) -> int:
        cur = conn.execute(
            """
            INSERT INTO todos (description, detail, topic, priority, owner, due, status, note, created_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                todo.description,
                todo.detail,
                todo.topic,
                todo.priority,
                todo.owner,
                todo.due,
                todo.status,
                todo.note,
                todo.created_at,
            ),
        )
        todo_id = int(cur.lastrowid or 0)
        conn.executemany(
            "INSERT INTO subtasks (todo_id, text, status) VALUES (?, ?, ?)",
            [(todo_id, s.text, s.status) for s in todo.subtasks],
        )
        return todo_id

    def _update_todo_column(
        self,
        op: str,
        column: str,
        todo_id: int,
        value: str,
        validate: Callable[[], None] | None = None,
    ) -> Result[None, StoreError]:
        # column は内部定数のみ (利用者入力は入らない)
        def _update(conn: sqlite3.Connection) -> None:
            cur = conn.execute(f"UPDATE todos SET {column} = ? WHERE id = ?", (value, todo_id))  # noqa: S608
            if cur.rowcount == 0:
                _msg = f"Todo not found: {todo_id}"
                raise NotFoundError(_msg)

        return self._run(op, _update, write=True, validate=validate)

    # ---- 読み取り -------------------------------------------------------

    def list_all(self) -> Result[list[Todo], StoreError]:
        def _list(conn: sqlite3.Connection) -> list[Todo]:
            subtasks: dict[int, list[Subtask]] = {}
            for row in conn.execute("SELECT id, todo_id, text, status FROM subtasks ORDER BY todo_id, id"):
                subtasks.setdefault(row["todo_id"], []).append(self._row_to_subtask(row))
            return [
                self._row_to_todo(row, subtasks.get(row["id"], []))
                for row in conn.execute("SELECT * FROM todos ORDER BY id")
            ]

        return self._run("list_all", _list, write=False)

    def get(self, todo_id: int) -> Result[Todo, StoreError]:
        def _get(conn: sqlite3.Connection) -> Todo:
            row = conn.execute("SELECT * FROM todos WHERE id = ?", (todo_id,)).fetchone()
            if row is None:
                _msg = f"Todo not found: {todo_id}"
                raise NotFoundError(_msg)
            subtasks = [
                self._row_to_subtask(r)
                for r in conn.execute(
                    "SELECT id, text, status FROM subtasks WHERE todo_id = ? ORDER BY id",
                    (todo_id,),
                )
            ]
            return self._row_to_todo(row, subtasks)

        return self._run("get", _get, write=False)

    # ---- todo 単位の更新 ------------------------------------------------

    def add(self, todo: Todo) -> Result[int, StoreError]:
        return self._run("add", lambda conn: self._insert(conn, todo), write=True, validate=lambda: _check_todo(todo))

    def add_many(self, todos: list[Todo]) -> Result[list[int], StoreError]:
        """全件を 1 トランザクションで追加する. 1 件でも不正なら何も書かない."""

        def _add(conn: sqlite3.Connection) -> list[int]:
            return [self._insert(conn, t) for t in todos]

        return self._run("add_many", _add, write=True, validate=lambda: _check_todos(todos))

    def set_status(self, todo_id: int, status: Status) -> Result[None, StoreError]:
        return self._update_todo_column(
            "set_status",
            "status",
            todo_id,
            status,
            validate=lambda: _check_choice("status", status, STATUSES),
        )

    def set_priority(self, todo_id: int, priority: Priority) -> Result[None, StoreError]:
        return self._update_todo_column(
            "set_priority",
            "priority",
            todo_id,
            priority,
            validate=lambda: _check_choice("priority", priority, PRIORITIES),
        )

    def set_note(self, todo_id: int, text: str) -> Result[None, StoreError]:
        return self._update_todo_column("set_note", "note", todo_id, text)

    def delete(self, todo_id: int) -> Result[None, StoreError]:
        def _delete(conn: sqlite3.Connection) -> None:
            self._require_todo(conn, todo_id)
            # subtasks は ON DELETE CASCADE でもよいが、明示的に削除しておく
            conn.execute("DELETE FROM subtasks WHERE todo_id = ?", (todo_id,))
            conn.execute("DELETE FROM todos WHERE id = ?", (todo_id,))

        return self._run("delete", _delete, write=True)

    # ---- subtask --------------------------------------------------------

    def add_subtask(self, todo_id: int, text: str) -> Result[int, StoreError]:
        def _add(conn: sqlite3.Connection) -> int:
            self._require_todo(conn, todo_id)
            cur = conn.execute(
                "INSERT INTO subtasks (todo_id, text, status) VALUES (?, ?, 'Pending')",
                (todo_id, text),
            )
            return int(cur.lastrowid or 0)

        return self._run("add_subtask", _add, write=True, validate=lambda: _check_text("subtask", text))

    def set_subtask_status(
        self,
        todo_id: int,
        subtask_id: int,
        status: SubtaskStatus,
    ) -> Result[None, StoreError]:
        def _update(conn: sqlite3.Connection) -> None:
            self._require_todo(conn, todo_id)
            cur = conn.execute(
                "UPDATE subtasks SET status = ? WHERE todo_id = ? AND id = ?",
                (status, todo_id, subtask_id),
            )
            if cur.rowcount == 0:
                _msg = f"Subtask not found: {subtask_id} (todo {todo_id})"
                raise NotFoundError(_msg)

        return self._run(
            "set_subtask_status",
            _update,
            write=True,
            validate=lambda: _check_choice("subtask status", status, SUBTASK_STATUSES),
        )

    def delete_subtask(self, todo_id: int, subtask_id: int) -> Result[None, StoreError]:
        def _delete(conn: sqlite3.Connection) -> None:
            self._require_todo(conn, todo_id)
            cur = conn.execute("DELETE FROM subtasks WHERE todo_id = ? AND id = ?", (todo_id, subtask_id))
            if cur.rowcount == 0:
                _msg = f"Subtask not found: {subtask_id} (todo {todo_id})"
                raise NotFoundError(_msg)

        return self._run("delete_subtask", _delete, write=True)

    # ---- 一括操作 -------------------------------------------------------

    def clear(self) -> Result[int, StoreError]:
        def _clear(conn: sqlite3.Connection) -> int:
            conn.execute("DELETE FROM subtasks")
            return conn.execute("DELETE FROM todos").rowcount

        return self._run("clear", _clear, write=True)

    def replace_all(self, todos: list[Todo]) -> Result[list[int], StoreError]:
        """全件を入れ替える (import 用). id は振り直す."""

        def _replace(conn: sqlite3.Connection) -> list[int]:
            conn.execute("DELETE FROM subtasks")
            conn.execute("DELETE FROM todos")
            return [self._insert(conn, t) for t in todos]

        return self._run("replace_all", _replace, write=True, validate=lambda: _check_todos(todos))
