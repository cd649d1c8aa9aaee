from dataclasses import dataclass, field
from datetime import date
from typing import Literal

from voido.core.models import Todo

Focus = Literal[
    "browsing",
    "search",
]


@dataclass(frozen=True)
class DetailModal:
    """Detail view of one todo: subtask checklist and note."""

    todo_id: int
    cursor: int = 0  # フォーカス中の subtask index
    rendered: bool = True  # note を markdown render するか raw で見せるか
    scroll: int = 0  # note の表示オフセット (表示専用)


@dataclass(frozen=True)
class NoteEditor:
    parent: DetailModal
    draft: str

    @property
    def todo_id(self) -> int:
        return self.parent.todo_id


@dataclass(frozen=True)
class SubtaskInput:
    parent: DetailModal
    draft: str = ""

    @property
    def todo_id(self) -> int:
        return self.parent.todo_id


@dataclass(frozen=True)
class PriorityMenu:
    todo_id: int


@dataclass(frozen=True)
class DeleteConfirm:
    todo_id: int


@dataclass(frozen=True)
class HelpMenu:
    pass


Modal = DetailModal | NoteEditor | SubtaskInput | PriorityMenu | DeleteConfirm | HelpMenu


def modal_todo_id(modal: Modal | None) -> int | None:
    """Todo the modal refers to, or None for modals bound to no todo."""
    match modal:
        case DetailModal() | NoteEditor() | SubtaskInput() | PriorityMenu() | DeleteConfirm():
            return modal.todo_id
        case _:
            return None


@dataclass
class ViewState:
    """Interactive session state.

    Every field holds an immutable value (tuples, frozen modals, str) and is
    replaced wholesale on change, so a shallow copy is a complete snapshot.
    """

    todos: tuple[Todo, ...] = ()  # store から読んだ全件 (in-place 変更しない)
    query: str = ""  # 検索バッファ
    filtered: tuple[Todo, ...] = ()  # query で絞り込んだ表示対象
    selected: int | None = None  # filtered 内の index, 空なら None
    focus: Focus = "browsing"
    modal: Modal | None = None

    # UI用
    banner: str | None = None  # フッターメッセージ表示
    running: bool = True
    size: tuple[int, int] = (24, 80)  # 端末の (高さ, 幅), 毎フレーム更新
    today: date = field(default_factory=date.today)  # 期限表示の基準日
