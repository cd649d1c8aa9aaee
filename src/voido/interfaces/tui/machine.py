"""Keyboard-driven view state machine.

``ViewMachine.handle_key`` applies one key to the ``ViewState`` and returns
the mutation intents the key asks for. It never talks to the store: the
caller dispatches the intents and feeds the reloaded todos back through
``replace_todos``.
"""

from collections.abc import Sequence
from dataclasses import replace

from pyresults import Err, Ok

from voido.core.errors import ValidationError
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
from voido.core.models import Priority, Todo
from voido.core.search import fuzzy_filter
from voido.core.validate import validate_text
from voido.interfaces.tui import keys
from voido.interfaces.tui.data import (
    DeleteConfirm,
    DetailModal,
    HelpMenu,
    NoteEditor,
    PriorityMenu,
    SubtaskInput,
    ViewState,
    modal_todo_id,
)
from voido.interfaces.tui.keys import KeyEvent
from voido.interfaces.tui.render import max_note_scroll

NOTE_PAGE = 10  # PgUp/PgDn で動かす note の行数

_PRIORITY_KEYS: dict[str, Priority] = {"l": "Low", "m": "Medium", "h": "High"}


class ViewMachine:
    def __init__(self, todos: Sequence[Todo] = ()) -> None:
        self.state = ViewState()
        self.replace_todos(todos)

    # ---- snapshot -------------------------------------------------------

    def snapshot(self) -> ViewState:
        return replace(self.state)

    def restore(self, snapshot: ViewState) -> None:
        self.state = replace(snapshot)

    # ---- queries --------------------------------------------------------

    def selected_todo(self) -> Todo | None:
        s = self.state
        if s.selected is None or not (0 <= s.selected < len(s.filtered)):
            return None
        return s.filtered[s.selected]

    def selected_id(self) -> int | None:
        t = self.selected_todo()
        return t.id if t is not None else None

    def find(self, todo_id: int) -> Todo | None:
        for t in self.state.todos:
            if t.id == todo_id:
                return t
        return None

    # ---- reconciliation -------------------------------------------------

    def replace_todos(self, todos: Sequence[Todo], keep_id: int | None = None) -> None:
        """Swap in a freshly loaded todo list.

        The selection follows ``keep_id`` while it is still visible and is
        clamped otherwise. A modal whose todo disappeared is closed.
        """
        self.state.todos = tuple(todos)
        self._refilter(keep_id=keep_id)
        self._heal_modal()

    def _refilter(self, *, keep_id: int | None = None) -> None:
        s = self.state
        prev = s.selected
        s.filtered = tuple(fuzzy_filter(s.todos, s.query))
        if not s.filtered:
            s.selected = None
            return
        if keep_id is not None:
            for i, t in enumerate(s.filtered):
                if t.id == keep_id:
                    s.selected = i
                    return
        s.selected = 0 if prev is None else max(0, min(prev, len(s.filtered) - 1))

    def _heal_modal(self) -> None:
        s = self.state
        tid = modal_todo_id(s.modal)
        if tid is None:
            return
        todo = self.find(tid)
        if todo is None:
            s.modal = None
            return
        # subtask 数が変わったら cursor を clamp
        match s.modal:
            case DetailModal() as m:
                s.modal = self._clamp_cursor(m, todo)
            case NoteEditor(parent=p) | SubtaskInput(parent=p):
                s.modal = replace(s.modal, parent=self._clamp_cursor(p, todo))

    @staticmethod
    def _clamp_cursor(m: DetailModal, todo: Todo) -> DetailModal:
        last = max(0, len(todo.subtasks) - 1)
        return replace(m, cursor=max(0, min(m.cursor, last)))

    # ---- dispatch -------------------------------------------------------

    def handle_key(self, event: KeyEvent) -> list[Intent]:
        """Apply one key press.

        Raises:
            ValidationError: the key tried to commit invalid input. The
                caller restores its snapshot and reports the message.
        """
        match self.state.modal:
            case None:
                if self.state.focus == "search":
                    return self._on_search(event)
                return self._on_browsing(event)
            case DetailModal() as m:
                return self._on_detail(m, event)
            case NoteEditor() as m:
                return self._on_note_editor(m, event)
            case SubtaskInput() as m:
                return self._on_subtask_input(m, event)
            case PriorityMenu() as m:
                return self._on_priority_menu(m, event)
            case DeleteConfirm() as m:
                return self._on_delete_confirm(m, event)
            case HelpMenu():
                return self._on_help(event)
            case _:
                return []

    # ---- browsing / search ----------------------------------------------

    def _move(self, delta: int) -> None:
        s = self.state
        if s.selected is None:
            return
        s.selected = max(0, min(s.selected + delta, len(s.filtered) - 1))

    def _jump(self, *, to_end: bool) -> None:
        s = self.state
        if s.filtered:
            s.selected = len(s.filtered) - 1 if to_end else 0

    def _common_move(self, event: KeyEvent) -> bool:
        if event.name == keys.UP or event.is_char("k"):
            self._move(-1)
        elif event.name == keys.DOWN or event.is_char("j"):
            self._move(1)
        elif event.name == keys.HOME:
            self._jump(to_end=False)
        elif event.name == keys.END:
            self._jump(to_end=True)
        else:
            return False
        return True

    def _on_browsing(self, event: KeyEvent) -> list[Intent]:  # noqa: C901, PLR0911
        s = self.state
        if self._common_move(event):
            return []
        if event.is_char("q"):
            s.running = False
            return []
        if event.is_char("i", "/"):
            s.focus = "search"
            return []
        if event.is_char("?", "\\"):
            s.modal = HelpMenu()
            return []
        if event.name == keys.ESC:
            if s.query:
                keep = self.selected_id()
                s.query = ""
                self._refilter(keep_id=keep)
            return []

        # 以下は選択中の todo が必要
        sel = self.selected_todo()
        if sel is None:
            return []
        if event.is_char("d"):
            return [SetStatus(sel.id, "Done")]
        if event.is_char("o"):
            return [SetStatus(sel.id, "Ongoing")]
        if event.is_char("p"):
            return [SetStatus(sel.id, "Pending")]
        if event.is_char("P"):
            s.modal = PriorityMenu(sel.id)
        elif event.name == keys.ENTER:
            s.modal = DetailModal(sel.id)
        elif event.is_char("x") or event.name == keys.DELETE:
            s.modal = DeleteConfirm(sel.id)
        return []

    def _on_search(self, event: KeyEvent) -> list[Intent]:
        s = self.state
        if event.name == keys.CHAR and event.char:
            s.query += event.char
            self._refilter()
        elif event.name == keys.BACKSPACE:
            s.query = s.query[:-1]
            self._refilter()
        elif event.is_ctrl("u"):
            s.query = ""
            self._refilter()
        elif event.name == keys.UP:
            self._move(-1)
        elif event.name == keys.DOWN:
            self._move(1)
        elif event.name == keys.ESC:
            s.focus = "browsing"
        elif event.name == keys.ENTER:
            s.focus = "browsing"
            sel = self.selected_todo()
            if sel is not None:
                s.modal = DetailModal(sel.id)
        return []

    # ---- detail ---------------------------------------------------------

    def _on_detail(self, m: DetailModal, event: KeyEvent) -> list[Intent]:  # noqa: C901, PLR0911
        s = self.state
        todo = self.find(m.todo_id)
        if todo is None:
            s.modal = None
            return []
        last = max(0, len(todo.subtasks) - 1)

        if event.name == keys.ESC or event.is_char("h"):
            s.modal = None
            return []
        if event.name == keys.UP or event.is_char("k"):
            s.modal = replace(m, cursor=max(0, m.cursor - 1))
            return []
        if event.name == keys.DOWN or event.is_char("j"):
            s.modal = replace(m, cursor=min(last, m.cursor + 1))
            return []
        if event.name == keys.TAB:
            s.modal = replace(m, rendered=not m.rendered, scroll=0)
            return []
        if event.name in (keys.PGUP, keys.PGDN):
            # 端末が縮んだ後でも上限を超えないよう両方向で clamp する
            height, width = s.size
            limit = max_note_scroll(todo, m, height, width, s.today)
            step = NOTE_PAGE if event.name == keys.PGDN else -NOTE_PAGE
            s.modal = replace(m, scroll=max(0, min(limit, m.scroll + step)))
            return []
        if event.is_char("a"):
            s.modal = SubtaskInput(parent=m)
            return []
        if event.is_char("N"):
            s.modal = NoteEditor(parent=m, draft=todo.note)
            return []

        if not todo.subtasks:
            return []
        sub = todo.subtasks[min(m.cursor, last)]
        if event.is_char(" ", "d"):
            return [SetSubtaskStatus(todo.id, sub.id, "Pending" if sub.is_done else "Done")]
        if event.is_char("x") or event.name == keys.DELETE:
            return [DeleteSubtask(todo.id, sub.id)]
        return []

    def _on_note_editor(self, m: NoteEditor, event: KeyEvent) -> list[Intent]:
        s = self.state
        if event.is_ctrl("s"):
            s.modal = m.parent
            return [SetNote(m.todo_id, m.draft)]
        if event.name == keys.ESC:
            s.modal = m.parent
        elif event.name == keys.ENTER:
            s.modal = replace(m, draft=m.draft + "\n")
        elif event.name == keys.TAB:
            s.modal = replace(m, draft=m.draft + "    ")
        elif event.name == keys.BACKSPACE:
            s.modal = replace(m, draft=m.draft[:-1])
        elif event.name == keys.CHAR and event.char:
            s.modal = replace(m, draft=m.draft + event.char)
        return []

    def _on_subtask_input(self, m: SubtaskInput, event: KeyEvent) -> list[Intent]:
        s = self.state
        if event.name == keys.ENTER:
            match validate_text(m.draft, field_name="subtask"):
                case Ok(text):
                    s.modal = m.parent
                    return [AddSubtask(m.todo_id, text)]
                case Err(e):
                    raise ValidationError(e)
        if event.name == keys.ESC:
            s.modal = m.parent
        elif event.name == keys.BACKSPACE:
            s.modal = replace(m, draft=m.draft[:-1])
        elif event.is_ctrl("u"):
            s.modal = replace(m, draft="")
        elif event.name == keys.CHAR and event.char:
            s.modal = replace(m, draft=m.draft + event.char)
        return []

    # ---- small menus ----------------------------------------------------

    def _on_priority_menu(self, m: PriorityMenu, event: KeyEvent) -> list[Intent]:
        s = self.state
        if event.name == keys.ESC:
            s.modal = None
            return []
        if event.name == keys.CHAR and event.char and event.char.lower() in _PRIORITY_KEYS:
            s.modal = None
            return [SetPriority(m.todo_id, _PRIORITY_KEYS[event.char.lower()])]
        return []

    def _on_delete_confirm(self, m: DeleteConfirm, event: KeyEvent) -> list[Intent]:
        s = self.state
        if event.is_char("y", "Y"):
            s.modal = None
            return [DeleteTodo(m.todo_id)]
        if event.name == keys.ESC or event.is_char("n", "N"):
            s.modal = None
        return []

    def _on_help(self, event: KeyEvent) -> list[Intent]:
        if event.name in (keys.ESC, keys.ENTER) or event.is_char("q", "?", "\\"):
            self.state.modal = None
        return []
