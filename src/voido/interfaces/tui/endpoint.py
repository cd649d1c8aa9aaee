import curses
import os

from voido.interfaces.tui.app import App
from voido.interfaces.tui.keys import from_curses
from voido.interfaces.tui.render import project
from voido.interfaces.tui.view import AppView, init_curses
from voido.storage import Store


def main(stdscr: curses.window, app: App) -> int:
    # Ctrl-S / Ctrl-U をアプリで受け取るため raw mode
    curses.raw()
    init_curses(stdscr)
    view = AppView(stdscr)
    while True:
        max_y, max_x = stdscr.getmaxyx()
        app.set_viewport(max_y, max_x)
        view.draw(project(app.state, max_y, max_x))
        key_raw = stdscr.get_wch()
        cont = app.handle_key(from_curses(key_raw))
        if not cont:
            break
    return 0


def run(store: Store) -> int:
    # 画面を取る前に読み込んで、失敗は CLI 側で報告させる
    app = App(store)
    os.environ.setdefault("ESCDELAY", "25")
    return curses.wrapper(main, app)
