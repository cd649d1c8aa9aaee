import os
import sqlite3
import tempfile
import unittest
from pathlib import Path
from unittest import mock

import pytest

from voido.core.errors import InvalidValueError, NotFoundError, StoreIOError, ValidationError
from voido.core.models import Subtask, Todo
from voido.storage import StoreToSQLite, get_store


class TestSQLite3Store(unittest.TestCase):
    """StoreToSQLite の単体メソッド・エラー経路のテスト"""

    def setUp(self) -> None:
        self.original_username = os.environ.get("VD_USERNAME")
        os.environ["VD_USERNAME"] = "test_user"
        self.temp_file = tempfile.NamedTemporaryFile(delete=False, suffix=".db")  # noqa: SIM115
        self.temp_file.close()
        self.store = StoreToSQLite(data_path=self.temp_file.name)

    def tearDown(self) -> None:
        Path(self.temp_file.name).unlink(missing_ok=True)
        if self.original_username is not None:
            os.environ["VD_USERNAME"] = self.original_username
        elif "VD_USERNAME" in os.environ:
            del os.environ["VD_USERNAME"]

    def _add(self, description: str, subtasks: list[str] | None = None) -> int:
        t = Todo(description=description, subtasks=[Subtask(0, s) for s in subtasks or []])
        return self.store.add(t).unwrap()

    def test_empty_list_ok(self) -> None:
        r = self.store.list_all()
        assert r.is_ok()
        assert r.unwrap() == []

    def test_add_and_get_roundtrip_fields(self) -> None:
        t = Todo(
            description="Write report",
            detail="quarterly",
            topic="work",
            priority="High",
            owner="alice",
            due="2026-01-31",
            note="# draft",
            subtasks=[Subtask(0, "outline"), Subtask(0, "numbers", "Done")],
        )
        tid = self.store.add(t).unwrap()
        got = self.store.get(tid).unwrap()
        assert got.id == tid
        assert got.description == "Write report"
        assert got.priority == "High"
        assert got.due == "2026-01-31"
        assert got.note == "# draft"
        assert [s.text for s in got.subtasks] == ["outline", "numbers"]
        assert [s.status for s in got.subtasks] == ["Pending", "Done"]
        assert all(s.id > 0 for s in got.subtasks)

    def test_list_all_in_id_order(self) -> None:
        a = self._add("a")
        b = self._add("b")
        c = self._add("c")
        assert [t.id for t in self.store.list_all().unwrap()] == [a, b, c]

    def test_get_not_found_err(self) -> None:
        r = self.store.get(999)
        assert r.is_err()
        assert isinstance(r.unwrap_err(), NotFoundError)

    def test_set_status_and_priority(self) -> None:
        tid = self._add("x")
        assert self.store.set_status(tid, "Done").is_ok()
        assert self.store.set_priority(tid, "Low").is_ok()
        got = self.store.get(tid).unwrap()
        assert got.status == "Done"
        assert got.priority == "Low"

    def test_set_status_missing_is_not_found(self) -> None:
        r = self.store.set_status(42, "Done")
        assert isinstance(r.unwrap_err(), NotFoundError)

    def test_invalid_status_rejected_and_unchanged(self) -> None:
        tid = self._add("x")
        r = self.store.set_status(tid, "Bogus")  # type: ignore[arg-type]
        e = r.unwrap_err()
        assert isinstance(e, InvalidValueError)
        assert isinstance(e, ValidationError)
        assert "Invalid status" in str(e)
        assert self.store.get(tid).unwrap().status == "Pending"

    def test_invalid_values_rejected_before_sql(self) -> None:
        tid = self._add("x", ["s"])
        sid = self.store.get(tid).unwrap().subtasks[0].id
        with mock.patch("voido.storage.sqlite3_store.sqlite3.connect") as connect:
            results = [
                self.store.set_priority(tid, "Urgent"),  # type: ignore[arg-type]
                self.store.add_subtask(tid, "   "),
                self.store.set_subtask_status(tid, sid, "Ongoing"),  # type: ignore[arg-type]
                self.store.add(Todo(description="  ")),
                self.store.add_many([Todo(description="ok"), Todo(description="x", priority="Top")]),  # type: ignore[arg-type]
            ]
        connect.assert_not_called()
        assert all(isinstance(r.unwrap_err(), InvalidValueError) for r in results)

    def test_add_many_is_one_transaction(self) -> None:
        ids = self.store.add_many([Todo(description="a"), Todo(description="b", subtasks=[Subtask(0, "s")])]).unwrap()
        assert [t.id for t in self.store.list_all().unwrap()] == ids
        assert self.store.get(ids[1]).unwrap().subtasks[0].text == "s"

    def test_add_many_failure_writes_nothing(self) -> None:
        self._add("keep")
        real_insert = StoreToSQLite._insert
        inserted: list[Todo] = []

        def flaky(conn: sqlite3.Connection, todo: Todo) -> int:
            # 1 件目は本当に書き込んでから 2 件目で失敗させる
            if inserted:
                raise sqlite3.OperationalError("disk I/O error")
            inserted.append(todo)
            return real_insert(conn, todo)

        with mock.patch.object(StoreToSQLite, "_insert", side_effect=flaky):
            r = self.store.add_many([Todo(description="a"), Todo(description="b")])
        assert isinstance(r.unwrap_err(), StoreIOError)
        assert [t.description for t in self.store.list_all().unwrap()] == ["keep"]

    def test_delete_removes_todo_and_subtasks(self) -> None:
        tid = self._add("x", ["s1", "s2"])
        keep = self._add("y", ["s3"])
        assert self.store.delete(tid).is_ok()
        assert isinstance(self.store.get(tid).unwrap_err(), NotFoundError)
        with sqlite3.connect(self.temp_file.name) as conn:
            n = conn.execute("SELECT COUNT(*) FROM subtasks WHERE todo_id = ?", (tid,)).fetchone()[0]
        assert n == 0
        assert len(self.store.get(keep).unwrap().subtasks) == 1

    def test_delete_twice_not_found(self) -> None:
        tid = self._add("x")
        self.store.delete(tid)
        assert isinstance(self.store.delete(tid).unwrap_err(), NotFoundError)

    def test_ids_never_reused(self) -> None:
        a = self._add("a")
        b = self._add("b")
        self.store.delete(b)
        c = self._add("c")
        assert c > b > a

    def test_subtask_lifecycle(self) -> None:
        tid = self._add("x")
        sid = self.store.add_subtask(tid, "step").unwrap()
        assert self.store.set_subtask_status(tid, sid, "Done").is_ok()
        assert self.store.get(tid).unwrap().subtask(sid).is_done  # type: ignore[union-attr]
        assert self.store.delete_subtask(tid, sid).is_ok()
        assert self.store.get(tid).unwrap().subtasks == []

    def test_subtask_of_other_todo_not_found(self) -> None:
        a = self._add("a", ["sa"])
        b = self._add("b")
        sid = self.store.get(a).unwrap().subtasks[0].id
        r = self.store.set_subtask_status(b, sid, "Done")
        assert isinstance(r.unwrap_err(), NotFoundError)
        assert not self.store.get(a).unwrap().subtasks[0].is_done

    def test_add_subtask_missing_todo(self) -> None:
        assert isinstance(self.store.add_subtask(7, "x").unwrap_err(), NotFoundError)

    def test_add_subtask_blank_rejected(self) -> None:
        tid = self._add("x")
        assert self.store.add_subtask(tid, "   ").is_err()
        assert self.store.get(tid).unwrap().subtasks == []

    def test_set_note(self) -> None:
        tid = self._add("x")
        assert self.store.set_note(tid, "line1\nline2").is_ok()
        assert self.store.get(tid).unwrap().note == "line1\nline2"

    def test_clear_returns_count(self) -> None:
        self._add("a")
        self._add("b", ["s"])
        assert self.store.clear().unwrap() == 2
        assert self.store.list_all().unwrap() == []

    def test_replace_all_assigns_fresh_ids(self) -> None:
        old = self._add("old")
        ids = self.store.replace_all([Todo(description="n1", id=old), Todo(description="n2")]).unwrap()
        todos = self.store.list_all().unwrap()
        assert [t.description for t in todos] == ["n1", "n2"]
        assert all(i > old for i in ids)

    def test_replace_all_failure_keeps_existing(self) -> None:
        self._add("keep")
        r = self.store.replace_all([Todo(description="ok"), Todo(description="bad", status="Nope")])  # type: ignore[arg-type]
        assert r.is_err()
        assert [t.description for t in self.store.list_all().unwrap()] == ["keep"]

    def test_persists_across_instances(self) -> None:
        tid = self._add("persist")
        other = StoreToSQLite(data_path=self.temp_file.name)
        assert other.get(tid).unwrap().description == "persist"


class TestGetStore(unittest.TestCase):
    def test_db_path(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            st = get_store((Path(d) / "t.db").as_posix())
            assert isinstance(st, StoreToSQLite)

    def test_invalid_suffix(self) -> None:
        with pytest.raises(ValueError, match="Invalid data path"):
            get_store("/tmp/todos.yaml")

    def test_unwritable_location_raises_store_error(self) -> None:
        with tempfile.TemporaryDirectory() as d, pytest.raises(StoreIOError):
            StoreToSQLite(data_path=(Path(d) / "missing" / "t.db").as_posix())
