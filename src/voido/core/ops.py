"""One-shot use cases behind the CLI subcommands.

Every function opens the default store (or the one passed in), performs a
single use case and raises ``OpsError`` on failure, like the CLI expects.
"""

from pathlib import Path
from typing import TypeVar

import yaml  # type: ignore[import-untyped]
from pyresults import Err, Ok, Result

from voido.ai.client import suggest_todos
from voido.core.errors import OpsError, StoreError, ValidationError
from voido.core.models import Subtask, Todo
from voido.core.validate import ensure, parse_due, parse_priority, parse_status, validate_text
from voido.io.json_io import export_json, import_json
from voido.io.xlsx_io import export_xlsx, import_xlsx
from voido.io.yaml_io import export_yaml, import_yaml
from voido.storage import Store, get_store
from voido.util.dirs import DEFAULT_AI_TIMEOUT, load_env, save_env_value
from voido.util.logger import setup_logger

logger = setup_logger("voido")

T = TypeVar("T")

_JSON_SUFFIXES = (".json",)
_YAML_SUFFIXES = (".yaml", ".yml")
_XLSX_SUFFIXES = (".xlsx",)


# ---- 内部ユーティリティ ----------------------------------------------------


def _get_store(store: Store | None) -> Store:
    if store is not None:
        return store
    try:
        return get_store()
    except (ValueError, StoreError) as e:
        raise OpsError(str(e)) from e


def _unwrap(res: Result[object, StoreError]) -> object:
    match res:
        case Ok(value):
            return value
        case Err(e):
            raise OpsError(str(e)) from e
        case _:
            _msg = "Unexpected store result"
            raise OpsError(_msg)


def _check(result: Result[T, str]) -> T:
    """Validation Err -> OpsError."""
    try:
        return ensure(result)
    except ValidationError as e:
        raise OpsError(str(e)) from e


# ---- 一覧取得 / 個別取得 ----------------------------------------------------


def list_todos(*, store: Store | None = None) -> list[Todo]:
    st = _get_store(store)
    return _unwrap(st.list_all())  # type: ignore[return-value]


def get_todo(todo_id: int, *, store: Store | None = None) -> Todo:
    """単一 todo を取得する。見つからない場合は OpsError。"""
    st = _get_store(store)
    return _unwrap(st.get(todo_id))  # type: ignore[return-value]


# ---- 追加 / 更新 -----------------------------------------------------------


def add_todo(
    description: str,
    *,
    detail: str | None = None,
    topic: str | None = None,
    priority: str | None = None,
    owner: str | None = None,
    due: str | None = None,
    subtasks: list[str] | None = None,
    store: Store | None = None,
) -> Todo:
    """新規 todo を追加するユースケース。

    owner を省略した場合は config の USERNAME を使う。
    入力値はすべて Store に渡す前に検証する。
    """
    t = _new_todo(
        description,
        detail=detail,
        topic=topic,
        priority=priority,
        owner=owner,
        due=due,
        subtasks=subtasks,
    )
    st = _get_store(store)
    new_id: int = _unwrap(st.add(t))  # type: ignore[assignment]
    logger.info("added todo #%d", new_id)
    return get_todo(new_id, store=st)


def _new_todo(
    description: str,
    *,
    detail: str | None = None,
    topic: str | None = None,
    priority: str | None = None,
    owner: str | None = None,
    due: str | None = None,
    subtasks: list[str] | None = None,
) -> Todo:
    env = load_env()
    return Todo(
        description=_check(validate_text(description, field_name="description")),
        detail=detail or None,
        topic=topic or None,
        priority=_check(parse_priority(priority or "Medium")),
        owner=owner or env["USERNAME"],
        due=_check(parse_due(due)),
        subtasks=[
            Subtask(id=0, text=_check(validate_text(s, field_name="subtask")))
            for s in subtasks or []
        ],
    )


def set_status(todo_id: int, status: str, *, store: Store | None = None) -> Todo:
    st = _get_store(store)
    _unwrap(st.set_status(todo_id, _check(parse_status(status))))
    return get_todo(todo_id, store=st)


def set_priority(todo_id: int, priority: str, *, store: Store | None = None) -> Todo:
    st = _get_store(store)
    _unwrap(st.set_priority(todo_id, _check(parse_priority(priority))))
    return get_todo(todo_id, store=st)


def append_subtask(todo_id: int, text: str, *, store: Store | None = None) -> Todo:
    st = _get_store(store)
    _unwrap(st.add_subtask(todo_id, _check(validate_text(text, field_name="subtask"))))
    return get_todo(todo_id, store=st)


def set_note(todo_id: int, text: str, *, store: Store | None = None) -> Todo:
    """Note を上書きする (空文字列で消去)."""
    st = _get_store(store)
    _unwrap(st.set_note(todo_id, text))
    return get_todo(todo_id, store=st)


# ---- 削除 ------------------------------------------------------------------


def delete_todo(todo_id: int, *, store: Store | None = None) -> None:
    st = _get_store(store)
    _unwrap(st.delete(todo_id))
    logger.info("deleted todo #%d", todo_id)


def clear_todos(*, store: Store | None = None) -> int:
    st = _get_store(store)
    n: int = _unwrap(st.clear())  # type: ignore[assignment]
    logger.info("cleared %d todos", n)
    return n


# ---- import / export -------------------------------------------------------


def export_todos(path: str, *, store: Store | None = None) -> int:
    """全 todo を path に書き出す。拡張子で JSON / YAML / Excel を切り替える."""
    todos = list_todos(store=store)
    suffix = Path(path).suffix.lower()
    try:
        if suffix in _JSON_SUFFIXES:
            export_json(todos, path)
        elif suffix in _YAML_SUFFIXES:
            export_yaml(todos, path)
        elif suffix in _XLSX_SUFFIXES:
            export_xlsx(todos, path)
        else:
            _msg = f"Unsupported export format: {path} (use .json, .yaml, .yml or .xlsx)"
            raise OpsError(_msg)
    except (FileExistsError, OSError, yaml.YAMLError) as e:
        raise OpsError(str(e)) from e
    return len(todos)


def import_todos(path: str, *, store: Store | None = None) -> list[int]:
    """File の内容で store 全体を置き換える。

    ファイルを全件読み込んで検証してから 1 トランザクションで入れ替えるので、
    途中で失敗しても既存データは残る。
    """
    suffix = Path(path).suffix.lower()
    try:
        if suffix in _JSON_SUFFIXES:
            todos = import_json(path)
        elif suffix in _YAML_SUFFIXES:
            todos = import_yaml(path)
        elif suffix in _XLSX_SUFFIXES:
            todos = import_xlsx(path)
        else:
            _msg = f"Unsupported import format: {path} (use .json, .yaml, .yml or .xlsx)"
            raise OpsError(_msg)
    except (ValidationError, ValueError, TypeError, OSError, yaml.YAMLError) as e:
        # json.JSONDecodeError は ValueError のサブクラス
        raise OpsError(f"Invalid import file {path}: {e!s}") from e
    st = _get_store(store)
    ids: list[int] = _unwrap(st.replace_all(todos))  # type: ignore[assignment]
    logger.info("imported %d todos from %s", len(ids), path)
    return ids


# ---- AI ---------------------------------------------------------------------


def set_api_key(key: str) -> None:
    if not key.strip():
        _msg = "Empty API key"
        raise OpsError(_msg)
    save_env_value("API_KEY", key.strip())


def suggest(prompt: str, *, add: bool = False, store: Store | None = None) -> list[str]:
    """AI にサジェストさせる。add=True ならすべて成功した後にだけ todo として追加する."""
    env = load_env()
    try:
        timeout = float(env["AI_TIMEOUT"])
    except ValueError:
        timeout = float(DEFAULT_AI_TIMEOUT)
    match suggest_todos(prompt, api_key=env["API_KEY"], model=env["AI_MODEL"], timeout=timeout):
        case Ok(items):
            suggestions: list[str] = items
        case Err(e):
            raise OpsError(str(e)) from e
        case _:
            _msg = "Unexpected AI result"
            raise OpsError(_msg)
    if add:
        # 全件を検証してから 1 トランザクションで追加する
        todos = [_new_todo(s) for s in suggestions]
        ids: list[int] = _unwrap(_get_store(store).add_many(todos))  # type: ignore[assignment]
        logger.info("added %d suggested todos", len(ids))
    return suggestions
