STATUS_MARK_MAP = {
    "Pending": "-",
    "Ongoing": "O",
    "Done": "D",
}

PRIORITY_MARK_MAP = {
    "Low": "L",
    "Medium": "M",
    "High": "H",
}

MAIN_THEME_COLOR = 1
SELECTED_ROW_COLOR = 3
SURPRESSED_COLOR = 4
COMPLETED_COLOR = 5
WORKING_COLOR = 6
WAITING_COLOR = 7
OVERLAY_BG_COLOR = 9
BANNER_COLOR = 10

# Row.style -> color pair
ROW_STYLE_COLOR_MAP = {
    "done": COMPLETED_COLOR,
    "ongoing": WORKING_COLOR,
    "pending": WAITING_COLOR,
    "empty": SURPRESSED_COLOR,
}

MAX_OVERLAY_BOX_WIDTH = 100


class HeaderLines:
    """Header lines for the TUI."""

    @classmethod
    def height(cls) -> int:
        return 2

    @classmethod
    def title(cls) -> str:
        _title = "--- voido (TUI) > terminal todo manager ---"
        _title += " [↑/↓ j/k Move] [(?) Help] [(q)uit]"
        return _title

    @classmethod
    def help(cls) -> str:
        return cls._help_line()

    @classmethod
    def _help_line(cls) -> str:
        help_line = "Todo: "
        help_line += "[(d)one] "
        help_line += "[(o)ngoing] "
        help_line += "[(p)ending] "
        help_line += "[(P)riority] "
        help_line += "[(x) delete] "
        help_line += "[Enter: detail] "
        help_line += "[(i) or /: search]"
        return help_line


HELP_LINES = (
    "List",
    "  ↑/↓ j/k      move selection",
    "  Home/End     first / last todo",
    "  d o p        status -> Done / Ongoing / Pending",
    "  P            priority menu (L/M/H)",
    "  x Del        delete todo (y/n confirm)",
    "  Enter        open detail",
    "  i /          focus search (Esc: back, Ctrl-U: clear)",
    "  Esc          clear active filter",
    "  q            quit",
    "",
    "Detail",
    "  ↑/↓ j/k      move subtask cursor",
    "  Space d      toggle subtask",
    "  x Del        delete subtask",
    "  a            add subtask",
    "  N            edit note (Ctrl-S: save, Esc: discard)",
    "  Tab          raw / rendered note",
    "  PgUp/PgDn    scroll note",
    "  Esc h        back to list",
)
