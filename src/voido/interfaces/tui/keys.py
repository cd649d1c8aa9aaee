import curses
from dataclasses import dataclass

# 名前付きキー
UP = "up"
DOWN = "down"
HOME = "home"
END = "end"
PGUP = "pgup"
PGDN = "pgdn"
ENTER = "enter"
ESC = "esc"
TAB = "tab"
BACKSPACE = "backspace"
DELETE = "delete"
RESIZE = "resize"
CHAR = "char"
CTRL = "ctrl"
UNKNOWN = "unknown"

_CURSES_KEYS: dict[int, str] = {
    curses.KEY_UP: UP,
    curses.KEY_DOWN: DOWN,
    curses.KEY_HOME: HOME,
    curses.KEY_END: END,
    curses.KEY_PPAGE: PGUP,
    curses.KEY_NPAGE: PGDN,
    curses.KEY_ENTER: ENTER,
    curses.KEY_BACKSPACE: BACKSPACE,
    curses.KEY_DC: DELETE,
    curses.KEY_RESIZE: RESIZE,
}

_CONTROL_CHARS: dict[str, str] = {
    "\n": ENTER,
    "\r": ENTER,
    "\x1b": ESC,
    "\t": TAB,
    "\x7f": BACKSPACE,
    "\x08": BACKSPACE,
}


@dataclass(frozen=True)
class KeyEvent:
    """A decoded key press.

    - printable character: name="char", char=<the character>
    - control chord (Ctrl-S etc.): name="ctrl", char=<lower-case letter>, ctrl=True
    - everything else: one of the named keys above, char=None
    """

    name: str
    char: str | None = None
    ctrl: bool = False

    def is_char(self, *chars: str) -> bool:
        return self.name == CHAR and self.char in chars

    def is_ctrl(self, letter: str) -> bool:
        return self.ctrl and self.char == letter


def key(name: str) -> KeyEvent:
    return KeyEvent(name)


def char(c: str) -> KeyEvent:
    return KeyEvent(CHAR, c)


def ctrl(letter: str) -> KeyEvent:
    return KeyEvent(CTRL, letter, ctrl=True)


def from_curses(raw: int | str) -> KeyEvent:
    """Convert a ``get_wch()`` result into a KeyEvent."""
    if isinstance(raw, int):
        return KeyEvent(_CURSES_KEYS.get(raw, UNKNOWN))
    if raw in _CONTROL_CHARS:
        return KeyEvent(_CONTROL_CHARS[raw])
    if len(raw) == 1 and ord(raw) < 0x20:
        # Ctrl-A .. Ctrl-Z (raw mode なので Ctrl-S / Ctrl-U も届く)
        return ctrl(chr(ord(raw) + 0x60))
    if raw.isprintable():
        return char(raw)
    return KeyEvent(UNKNOWN)
