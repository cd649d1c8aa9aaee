import unittest

import pytest
from pyresults import Err, Result

from voido.core.errors import OpsError, StoreError, StoreIOError
from voido.core.models import Todo
from voido.interfaces.tui import keys
from voido.interfaces.tui.app import App
from voido.interfaces.tui.data import DeleteConfirm, DetailModal, NoteEditor
from voido.interfaces.tui.keys import char, ctrl, key
from voido.interfaces.tui.render import project

from .helpers import GONE, IO_ERROR, FailingStore, seed, temp_store


class _BrokenStore(FailingStore):
    def list_all(self) -> Result[list[Todo], StoreError]:
        return Err(StoreIOError("Error (list_all): locked"))


class TestApp(unittest.TestCase):
    def setUp(self) -> None:
        store, self._dir = temp_store()
        self.store = FailingStore(data_path=store.data_path)
        self.ids = seed(self.store, "Buy milk", "Write report", "Call mom")
        self.app = App(self.store)

    def tearDown(self) -> None:
        self._dir.cleanup()

    def _press(self, *events: keys.KeyEvent) -> bool:
        cont = True
        for ev in events:
            cont = self.app.handle_key(ev)
        return cont

    def test_loads_on_start(self) -> None:
        assert [t.description for t in self.app.state.todos] == ["Buy milk", "Write report", "Call mom"]

    def test_load_failure_raises_ops_error(self) -> None:
        with pytest.raises(OpsError, match="Failed to load"):
            App(_BrokenStore(data_path=self.store.data_path))

    def test_status_key_persists_and_reloads(self) -> None:
        self._press(key(keys.END), char("d"))
        assert self.store.get(self.ids[2]).unwrap().status == "Done"
        assert self.app.state.todos[2].status == "Done"
        assert self.app.state.banner == f"#{self.ids[2]} -> Done"
        assert self.app.machine.selected_id() == self.ids[2]

    def test_delete_confirm_no_leaves_store_unchanged(self) -> None:
        before = self.store.list_all().unwrap()
        self._press(char("x"), char("n"))
        assert self.store.list_all().unwrap() == before
        assert self.app.state.modal is None

    def test_delete_confirm_yes(self) -> None:
        self._press(char("j"), char("x"), char("y"))
        assert [t.id for t in self.app.state.todos] == [self.ids[0], self.ids[2]]
        # 消えた行の位置で clamp される
        assert self.app.machine.selected_id() == self.ids[2]

    def test_note_abort_vs_commit(self) -> None:
        self._press(key(keys.ENTER), char("N"), char("h"), char("i"), key(keys.ESC))
        assert self.store.get(self.ids[0]).unwrap().note == ""
        assert self.app.state.modal == DetailModal(self.ids[0])

        self._press(char("N"))
        for c in "hello":
            self._press(char(c))
        self._press(ctrl("s"))
        assert self.store.get(self.ids[0]).unwrap().note == "hello"
        assert self.app.state.modal == DetailModal(self.ids[0])

    def test_failure_rolls_back_view_state(self) -> None:
        self._press(key(keys.END))
        self._press(char("x"))
        before = self.app.machine.snapshot()
        self.store.fail_with = IO_ERROR
        self._press(char("y"))
        assert self.app.state.modal == DeleteConfirm(self.ids[2])
        assert self.app.state.todos == before.todos
        assert self.app.state.selected == before.selected
        assert "disk full" in (self.app.state.banner or "")
        self.store.fail_with = None
        assert len(self.store.list_all().unwrap()) == 3

    def test_failed_status_key_keeps_old_status(self) -> None:
        self.store.fail_with = IO_ERROR
        before = self.app.machine.snapshot()
        self._press(char("d"))
        assert self.app.state.todos == before.todos
        assert self.app.state.todos[0].status == "Pending"
        assert self.app.state.selected == before.selected
        assert "disk full" in (self.app.state.banner or "")
        rows = project(self.app.state, 20, 80).rows
        assert rows[0].text.startswith("[-] ")
        assert rows[0].style == "pending"
        self.store.fail_with = None
        assert self.store.get(self.ids[0]).unwrap().status == "Pending"

    def test_not_found_self_heals_modal(self) -> None:
        self._press(key(keys.ENTER), char("N"))
        assert isinstance(self.app.state.modal, NoteEditor)
        # 別プロセスが消した
        self.store.delete(self.ids[0])
        self.store.fail_with = GONE
        self._press(ctrl("s"))
        assert self.app.state.modal is None
        assert [t.id for t in self.app.state.todos] == self.ids[1:]
        assert "not found" in (self.app.state.banner or "").lower()

    def test_validation_error_keeps_buffer(self) -> None:
        self._press(key(keys.ENTER), char("a"), char(" "), key(keys.ENTER))
        assert "Empty subtask" in (self.app.state.banner or "")
        modal = self.app.state.modal
        assert modal is not None
        assert modal.draft == " "  # type: ignore[union-attr]

    def test_banner_cleared_by_next_key(self) -> None:
        self._press(char("d"))
        assert self.app.state.banner
        self._press(char("j"))
        assert self.app.state.banner is None

    def test_quit(self) -> None:
        assert self._press(char("q")) is False
