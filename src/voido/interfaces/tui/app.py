from collections.abc import Sequence
from datetime import date

from pyresults import Err, Ok

from voido.core.dispatch import apply_and_reload
from voido.core.errors import NotFoundError, OpsError, StoreError, ValidationError
from voido.core.intents import Intent, describe
from voido.core.models import Todo
from voido.interfaces.tui.data import ViewState
from voido.interfaces.tui.keys import KeyEvent
from voido.interfaces.tui.machine import ViewMachine
from voido.storage import Store
from voido.util.logger import setup_logger

logger = setup_logger("voido")


class App:
    """Interactive session: key -> state machine -> store -> reload.

    A key either takes full effect or none: on any failure the view state is
    rolled back to the snapshot taken before the key and only the banner
    reports the error.
    """

    def __init__(self, store: Store) -> None:
        self.store = store
        match store.list_all():
            case Ok(todos):
                self.machine = ViewMachine(todos)
            case Err(e):
                _msg = f"Failed to load todos: {e!s}"
                raise OpsError(_msg) from e
            case _:
                _msg = "Unexpected store result"
                raise OpsError(_msg)

    @property
    def state(self) -> ViewState:
        return self.machine.state

    def set_viewport(self, height: int, width: int) -> None:
        """Record the terminal size and the current date before drawing a frame."""
        self.state.size = (height, width)
        self.state.today = date.today()

    def handle_key(self, event: KeyEvent) -> bool:
        snap = self.machine.snapshot()
        self.machine.state.banner = None
        try:
            intents = self.machine.handle_key(event)
        except ValidationError as e:
            self._fail(snap, f"Invalid input: {e!s}")
            return self.state.running

        keep_id = self.machine.selected_id()
        for intent in intents:
            if not self._dispatch(intent, snap, keep_id):
                break
        return self.state.running

    # ---- internal -------------------------------------------------------

    def _dispatch(self, intent: Intent, snap: ViewState, keep_id: int | None) -> bool:
        match apply_and_reload(intent, self.store):
            case Ok(todos):
                self._replace(todos, keep_id)
                self.state.banner = describe(intent)
                return True
            case Err(e):
                self._fail(snap, f"Error: {e!s}")
                if isinstance(e, NotFoundError):
                    # 他のプロセスに消された todo を参照している modal を閉じる
                    self._reload(keep_id)
                return False
            case _:
                return False

    def _replace(self, todos: Sequence[Todo], keep_id: int | None) -> None:
        self.machine.replace_todos(todos, keep_id=keep_id)

    def _fail(self, snap: ViewState, msg: str) -> None:
        logger.warning(msg)
        self.machine.restore(snap)
        self.state.banner = msg

    def _reload(self, keep_id: int | None) -> None:
        match self.store.list_all():
            case Ok(todos):
                self._replace(todos, keep_id)
            case Err(e):
                self._report_reload_error(e)

    def _report_reload_error(self, e: StoreError) -> None:
        logger.warning("reload failed: %s", e)
        self.state.banner = f"{self.state.banner} (reload failed: {e!s})"
