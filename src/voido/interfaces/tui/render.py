"""Pure projection of a ViewState onto a screen-sized Frame.

Nothing here touches curses or the store, so the whole screen content can be
asserted in tests; ``view.AppView`` only paints what ``project`` returns.
"""

from dataclasses import dataclass
from datetime import date

from voido.core.models import Todo
from voido.interfaces.tui.data import (
    DeleteConfirm,
    DetailModal,
    HelpMenu,
    Modal,
    NoteEditor,
    PriorityMenu,
    SubtaskInput,
    ViewState,
)
from voido.interfaces.tui.helper import _clip, _wrap
from voido.interfaces.tui.style import (
    HELP_LINES,
    MAX_OVERLAY_BOX_WIDTH,
    PRIORITY_MARK_MAP,
    STATUS_MARK_MAP,
    HeaderLines,
)
from voido.util.markdown import render_markdown
from voido.util.time import days_until


@dataclass(frozen=True)
class Row:
    text: str
    style: str  # "done" | "ongoing" | "pending" | "empty"
    selected: bool = False


@dataclass(frozen=True)
class Overlay:
    title: str
    lines: tuple[str, ...]
    hint: str
    cursor: int | None = None  # 強調表示する行 (lines の index)


@dataclass(frozen=True)
class Frame:
    header: tuple[str, ...]
    search: str
    rows: tuple[Row, ...]
    stats: str
    footer: str
    overlay: Overlay | None = None


# header + search + stats + footer 以外がリスト領域
CHROME_HEIGHT = HeaderLines.height() + 3

_FOOTER_HINTS = {
    "browsing": "d/o/p status  P priority  x delete  Enter detail  i search  ? help  q quit",
    "search": "type to filter  ↑/↓ move  Enter open  Ctrl-U clear  Esc back",
}


def project(state: ViewState, height: int, width: int) -> Frame:
    list_height = max(0, height - CHROME_HEIGHT)
    return Frame(
        header=(_clip(HeaderLines.title(), width), _clip(HeaderLines.help(), width)),
        search=_clip(_search_line(state), width),
        rows=_rows(state, list_height, width),
        stats=_clip(_stats_line(state), width),
        footer=_clip(_footer_line(state), width),
        overlay=_overlay(state, state.modal, height, width),
    )


# ---- list -----------------------------------------------------------------


def format_row(t: Todo) -> str:
    status = STATUS_MARK_MAP.get(t.status, "?")
    prio = PRIORITY_MARK_MAP.get(t.priority, "?")
    line = f"[{status}] {prio} #{t.id:<4} {t.description.replace(chr(10), ' ')}"
    done, total = t.subtask_progress()
    if total:
        line += f" ({done}/{total})"
    if t.due:
        line += f"  due {t.due}"
    return line


def _rows(state: ViewState, height: int, width: int) -> tuple[Row, ...]:
    if height <= 0:
        return ()
    if not state.filtered:
        text = "(no matches)" if state.query else "(no todos: add one with `voido add`)"
        return (Row(_clip(text, width), "empty"),)
    sel = state.selected if state.selected is not None else 0
    # 選択行が常に見えるように offset を決める
    offset = max(0, sel - height + 1)
    rows: list[Row] = []
    for idx in range(offset, min(offset + height, len(state.filtered))):
        t = state.filtered[idx]
        rows.append(Row(_clip(format_row(t), width), t.status.lower(), selected=idx == state.selected))
    return tuple(rows)


def _search_line(state: ViewState) -> str:
    if state.focus == "search":
        return f"Search: {state.query}_"
    if state.query:
        return f"Filter: {state.query}  (Esc clears)"
    return "Search: (press i or / to search)"


def _stats_line(state: ViewState) -> str:
    todos = state.todos
    done = sum(1 for t in todos if t.status == "Done")
    ongoing = sum(1 for t in todos if t.status == "Ongoing")
    pending = sum(1 for t in todos if t.status == "Pending")
    line = f"Total {len(todos)}  Done {done}  Ongoing {ongoing}  Pending {pending}"
    if state.query:
        line += f"  | showing {len(state.filtered)}"
    return line


def _footer_line(state: ViewState) -> str:
    if state.banner:
        return state.banner
    return _FOOTER_HINTS[state.focus]


# ---- overlays ---------------------------------------------------------------


def overlay_geometry(height: int, width: int) -> tuple[int, int]:
    """Rows for overlay lines and box width, exactly as ``AppView`` paints them.

    The box sits in the list area and spends 3 rows on title, blank line and hint.
    """
    content_height = max(1, height - CHROME_HEIGHT)
    return max(1, content_height - 3), max(1, min(MAX_OVERLAY_BOX_WIDTH, width - 4))


def _find(state: ViewState, todo_id: int) -> Todo | None:
    for t in state.todos:
        if t.id == todo_id:
            return t
    return None


def _due_label(due: str | None, today: date) -> str:
    days = days_until(due, today=today)
    if due is None:
        return "-"
    if days is None:
        return due
    if days < 0:
        return f"{due} (overdue {-days}d)"
    if days == 0:
        return f"{due} (today)"
    return f"{due} (in {days}d)"


def _detail_head(todo: Todo, m: DetailModal, today: date) -> tuple[list[str], int | None]:
    lines: list[str] = [
        f"Description: {todo.description}",
        f"Status     : {todo.status}    Priority: {todo.priority}",
        f"Topic      : {todo.topic or '-'}",
        f"Owner      : {todo.owner or '-'}",
        f"Due        : {_due_label(todo.due, today)}",
        f"Created    : {todo.created_at}",
    ]
    if todo.detail:
        lines.append(f"Detail     : {todo.detail}")
    lines.append("")

    done, total = todo.subtask_progress()
    lines.append(f"Subtasks ({done}/{total})  [Space/d toggle, x delete, a add]")
    cursor: int | None = None
    if not todo.subtasks:
        lines.append("  (none)")
    for i, s in enumerate(todo.subtasks):
        marker = ">" if i == m.cursor else " "
        box = "[x]" if s.is_done else "[ ]"
        if i == m.cursor:
            cursor = len(lines)
        lines.append(f"{marker} {box} {s.text}")
    lines.append("")

    mode = "rendered" if m.rendered else "raw"
    lines.append(f"Note ({mode})  [N edit, Tab raw/rendered, PgUp/PgDn scroll]")
    return lines, cursor


def _note_lines(todo: Todo, *, rendered: bool, box_width: int) -> list[str]:
    note = render_markdown(todo.note) if rendered else todo.note.splitlines()
    out: list[str] = []
    for line in note:
        out.extend(_wrap(line, box_width))
    return out or ["(empty)"]


def max_note_scroll(todo: Todo, m: DetailModal, height: int, width: int, today: date) -> int:
    """Largest useful ``DetailModal.scroll``: the last note line sits on the last box row."""
    rows, box_width = overlay_geometry(height, width)
    head, _ = _detail_head(todo, m, today)
    room = max(1, rows - len(head))
    return max(0, len(_note_lines(todo, rendered=m.rendered, box_width=box_width)) - room)


def detail_lines(todo: Todo, m: DetailModal, height: int, width: int, today: date) -> tuple[list[str], int | None]:
    """Lines of the detail overlay and the index of the focused subtask line.

    ``height``/``width`` are the screen size. The note is wrapped to the box
    width and ``m.scroll`` is clamped so the note never scrolls past its end.
    """
    _, box_width = overlay_geometry(height, width)
    lines, cursor = _detail_head(todo, m, today)
    scroll = max(0, min(m.scroll, max_note_scroll(todo, m, height, width, today)))
    lines.extend(_note_lines(todo, rendered=m.rendered, box_width=box_width)[scroll:])
    return lines, cursor


def _overlay(state: ViewState, modal: Modal | None, height: int, width: int) -> Overlay | None:  # noqa: PLR0911
    match modal:
        case None:
            return None
        case HelpMenu():
            return Overlay("Keys", HELP_LINES, "[Esc/?/q: close]")
        case DetailModal() as m:
            todo = _find(state, m.todo_id)
            if todo is None:
                return None
            lines, cursor = detail_lines(todo, m, height, width, state.today)
            return Overlay(f"#{todo.id} {todo.description}", tuple(lines), "[Esc/h: back]", cursor)
        case NoteEditor() as m:
            draft_lines = (m.draft + "_").split("\n")
            return Overlay(f"Edit note #{m.todo_id}", tuple(draft_lines), "[Ctrl-S: save, Esc: discard]")
        case SubtaskInput() as m:
            return Overlay(f"Add subtask #{m.todo_id}", (f"> {m.draft}_",), "[Enter: add, Esc: cancel]")
        case PriorityMenu() as m:
            todo = _find(state, m.todo_id)
            current = todo.priority if todo else None
            choices = ("Low", "Medium", "High")
            lines = tuple(f"({p[0]}) {p}" + ("  <- current" if p == current else "") for p in choices)
            cursor = choices.index(current) if current in choices else None
            return Overlay(f"Priority #{m.todo_id}", lines, "[L/M/H: set, Esc: cancel]", cursor)
        case DeleteConfirm() as m:
            todo = _find(state, m.todo_id)
            desc = todo.description if todo else "?"
            return Overlay("Delete", (f"Delete #{m.todo_id} {desc}?", "", "(y) yes   (n) no"), "[y/n]")
        case _:
            return None
