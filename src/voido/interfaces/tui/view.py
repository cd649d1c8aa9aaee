import curses
import locale
from dataclasses import dataclass

from voido.interfaces.tui.render import Frame, Overlay, Row, overlay_geometry
from voido.interfaces.tui.style import (
    BANNER_COLOR,
    COMPLETED_COLOR,
    MAIN_THEME_COLOR,
    OVERLAY_BG_COLOR,
    ROW_STYLE_COLOR_MAP,
    SELECTED_ROW_COLOR,
    SURPRESSED_COLOR,
    WAITING_COLOR,
    WORKING_COLOR,
)

locale.setlocale(locale.LC_ALL, "")


def init_curses(stdscr: curses.window) -> None:
    # 色やキーパッドの設定
    curses.curs_set(0)
    stdscr.keypad(True)  # noqa: FBT003

    if curses.has_colors():
        curses.start_color()
        curses.use_default_colors()
        # color pair indexes (idx, foreground, background) with ANSI color codes
        curses.init_pair(MAIN_THEME_COLOR, 166, -1)  # header
        curses.init_pair(SELECTED_ROW_COLOR, -1, 7)  # selected-row
        curses.init_pair(SURPRESSED_COLOR, 8, -1)  # empty list
        curses.init_pair(COMPLETED_COLOR, 10, -1)  # Done
        curses.init_pair(WORKING_COLOR, 9, -1)  # Ongoing
        curses.init_pair(WAITING_COLOR, 15, -1)  # Pending
        curses.init_pair(OVERLAY_BG_COLOR, -1, 236)  # overlay-bg
        curses.init_pair(BANNER_COLOR, 12, -1)  # footer banner


@dataclass
class AppView:
    """AppView class to paint a Frame on the curses screen.

    Attributes:
        stdscr: curses.window
    """

    stdscr: curses.window

    def draw(self, frame: Frame) -> None:
        """Draw overall app screen."""
        self.stdscr.erase()
        max_y, max_x = self.stdscr.getmaxyx()
        if max_y < 2 or max_x < 2:
            # give up drawing if terminal size is too small
            self.stdscr.refresh()
            return

        y = 0
        for line in frame.header:
            self._addline(y, line, max_x, self._color(MAIN_THEME_COLOR))
            y += 1
        self._addline(y, frame.search, max_x, curses.A_BOLD)
        y += 1
        list_top = y
        for row in frame.rows:
            self._draw_row(y, row, max_x)
            y += 1

        self._addline(max_y - 2, frame.stats, max_x, self._color(MAIN_THEME_COLOR))
        self._addline(max_y - 1, frame.footer, max_x, self._color(BANNER_COLOR))

        if frame.overlay is not None:
            self._draw_overlay(frame.overlay, list_top, max_y, max_x)

        self.stdscr.refresh()

    # ---- primitives -----------------------------------------------------

    @staticmethod
    def _color(pair: int) -> int:
        return curses.color_pair(pair) if curses.has_colors() else 0

    def _safe_addnstr(self, y: int, x: int, s: str, n: int, attr: int = 0) -> None:
        """Add a string to the screen safely."""
        max_y, max_x = self.stdscr.getmaxyx()

        # 画面外なら描かない
        if y < 0 or y >= max_y or x < 0 or x >= max_x:
            return
        # 右端を超えないようにクリップ
        limit = max_x - x
        if limit <= 0 or n <= 0:
            return
        # 最終行では右端1マスを開ける
        if y == max_y - 1 and limit == max_x:
            limit -= 1

        s = s.replace("\t", " ")  # タブがいると幅が読めないので潰す
        n = min(n, len(s), limit)
        if n <= 0:
            return

        # nを減らしながらトライ (例外が発生したら1文字ずつ減らして再試行)
        while n > 0:
            chunk = s[:n]
            try:
                self.stdscr.addnstr(y, x, chunk, n, attr)
            except curses.error:
                n -= 1
            else:
                return

    def _addline(self, y: int, text: str, width: int, attr: int = 0) -> None:
        self._safe_addnstr(y, 0, text.ljust(width), width, attr)

    def _draw_row(self, y: int, row: Row, width: int) -> None:
        attr = self._color(ROW_STYLE_COLOR_MAP.get(row.style, 0))
        if row.selected:
            attr |= curses.A_REVERSE
        self._addline(y, row.text, width, attr)

    # ---- overlay --------------------------------------------------------

    def _draw_overlay(self, ovl: Overlay, content_y: int, max_y: int, max_x: int) -> None:
        """Draw a centred box: title, empty line, content, hint."""
        content_height = max_y - 2 - content_y
        if content_height <= 2:
            return
        attr = self._color(OVERLAY_BG_COLOR)

        # render 側と同じ寸法で描く (折り返し幅と scroll 上限が一致する)
        lines_rows, box_width = overlay_geometry(max_y, max_x)
        box_height = min(len(ovl.lines), lines_rows) + 3

        # cursor 行が見えるようにスクロール
        offset = 0
        if ovl.cursor is not None and ovl.cursor >= lines_rows:
            offset = ovl.cursor - lines_rows + 1

        top = content_y + max(0, (content_height - box_height) // 2)
        left = max(0, (max_x - box_width) // 2)

        # clear box
        for row in range(box_height):
            self._safe_addnstr(top + row, left, " " * box_width, box_width, attr)

        title = f"[{ovl.title}]"
        self._safe_addnstr(top, left, title.ljust(box_width), box_width, attr | curses.A_BOLD)
        self._safe_addnstr(top + 1, left, " " * box_width, box_width, attr)

        row = top + 2
        for idx in range(offset, min(offset + lines_rows, len(ovl.lines))):
            line_attr = attr | curses.A_REVERSE if idx == ovl.cursor else attr
            self._safe_addnstr(row, left, ovl.lines[idx].ljust(box_width), box_width, line_attr)
            row += 1

        self._safe_addnstr(top + box_height - 1, left, ovl.hint.ljust(box_width), box_width, attr)
