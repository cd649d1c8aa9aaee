# ruff: noqa: T201

import argparse
import sys
from importlib.metadata import PackageNotFoundError, version

from voido.core.errors import OpsError, StoreError
from voido.core.ops import (
    add_todo,
    append_subtask,
    clear_todos,
    delete_todo,
    export_todos,
    get_todo,
    import_todos,
    list_todos,
    set_api_key,
    set_note,
    set_priority,
    set_status,
    suggest,
)
from voido.interfaces.tui import endpoint
from voido.io.std_io import format_line, print_todo
from voido.storage import get_store
from voido.util.logger import setup_logger, setup_mode

logger = setup_logger("voido")


def _fail(action: str, e: Exception) -> int:
    _msg = f"An error occurred while {action}: {e!s}"
    logger.exception(_msg)
    print(f"Error: {e!s}", file=sys.stderr)
    return 1


def _confirm(question: str) -> bool:
    try:
        answer = input(f"{question} [y/N] ")
    except EOFError:
        return False
    return answer.strip().lower() in ("y", "yes")


# ---- todo ------------------------------------------------------------------


def cmd_add(args: argparse.Namespace) -> int:
    try:
        t = add_todo(
            " ".join(args.description),
            detail=args.detail,
            topic=args.topic,
            priority=args.priority,
            owner=args.owner,
            due=args.due,
            subtasks=args.sub,
        )
        print(t.id)
    except OpsError as e:
        return _fail("adding a todo", e)
    else:
        return 0


def cmd_delete(args: argparse.Namespace) -> int:
    try:
        delete_todo(args.id)
        print(f"deleted #{args.id}")
    except OpsError as e:
        return _fail("deleting a todo", e)
    else:
        return 0


def cmd_status(args: argparse.Namespace) -> int:
    try:
        t = set_status(args.id, args.status)
        print(f"#{t.id} -> {t.status}")
    except OpsError as e:
        return _fail("setting the status", e)
    else:
        return 0


def cmd_done(args: argparse.Namespace) -> int:
    try:
        t = set_status(args.id, "Done")
        print(f"#{t.id} -> {t.status}")
    except OpsError as e:
        return _fail("marking done", e)
    else:
        return 0


def cmd_priority(args: argparse.Namespace) -> int:
    try:
        t = set_priority(args.id, args.priority)
        print(f"#{t.id} priority -> {t.priority}")
    except OpsError as e:
        return _fail("setting the priority", e)
    else:
        return 0


def cmd_subtask(args: argparse.Namespace) -> int:
    try:
        t = append_subtask(args.id, " ".join(args.text))
        print(f"#{t.id} subtasks: {len(t.subtasks)}")
    except OpsError as e:
        return _fail("adding a subtask", e)
    else:
        return 0


def cmd_note(args: argparse.Namespace) -> int:
    try:
        text = sys.stdin.read() if args.text == ["-"] else " ".join(args.text)
        t = set_note(args.id, text)
        print(f"#{t.id} note saved")
    except OpsError as e:
        return _fail("saving a note", e)
    else:
        return 0


def cmd_list(_args: argparse.Namespace) -> int:
    try:
        todos = list_todos()
    except OpsError as e:
        return _fail("listing todos", e)
    if not todos:
        print("(no todos)")
    for t in todos:
        print(format_line(t))
    return 0


def cmd_show(args: argparse.Namespace) -> int:
    try:
        print_todo(get_todo(args.id))
    except OpsError as e:
        return _fail("showing a todo", e)
    else:
        return 0


def cmd_clear(args: argparse.Namespace) -> int:
    if not args.yes and not _confirm("Delete ALL todos?"):
        print("canceled")
        return 1
    try:
        n = clear_todos()
        print(f"deleted {n} todo(s)")
    except OpsError as e:
        return _fail("clearing todos", e)
    else:
        return 0


# ---- export / import -------------------------------------------------------


def cmd_export(args: argparse.Namespace) -> int:
    try:
        n = export_todos(args.path)
        print(f"exported {n} todo(s) to {args.path}")
    except OpsError as e:
        return _fail("exporting todos", e)
    else:
        return 0


def cmd_import(args: argparse.Namespace) -> int:
    if not args.yes and not _confirm(f"Replace ALL todos with the content of {args.path}?"):
        print("canceled")
        return 1
    try:
        ids = import_todos(args.path)
        print(f"imported {len(ids)} todo(s) from {args.path}")
    except OpsError as e:
        return _fail("importing todos", e)
    else:
        return 0


# ---- AI / config -----------------------------------------------------------


def cmd_suggest(args: argparse.Namespace) -> int:
    try:
        items = suggest(" ".join(args.prompt), add=args.add)
    except OpsError as e:
        return _fail("asking for suggestions", e)
    for s in items:
        print(f"- {s}")
    if args.add:
        print(f"added {len(items)} todo(s)")
    return 0


def cmd_apikey(args: argparse.Namespace) -> int:
    try:
        set_api_key(args.key)
        print("API key saved")
    except (OpsError, OSError) as e:
        return _fail("saving the API key", e)
    else:
        return 0


def cmd_version(_args: argparse.Namespace) -> int:
    try:
        print(f"voido {version('voido')}")
    except PackageNotFoundError:
        print("voido (not installed)")
    return 0


def cmd_tui(_args: argparse.Namespace) -> int:
    try:
        return endpoint.run(get_store())
    except (OpsError, StoreError, ValueError) as e:
        return _fail("running TUI", e)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="voido", description="Terminal todo manager")
    sub = p.add_subparsers(dest="cmd")

    # log (debug mode)
    p.add_argument("--debug", action="store_true", help="debug mode")
    p.set_defaults(func=cmd_tui)

    # tui
    sp = sub.add_parser("tui", help="run TUI (default)")
    sp.set_defaults(func=cmd_tui)

    # add
    sp = sub.add_parser("add", help="add a todo")
    sp.add_argument("description", nargs="+")
    sp.add_argument("--detail")
    sp.add_argument("--topic")
    sp.add_argument("--priority", help="Low / Medium / High")
    sp.add_argument("--owner")
    sp.add_argument("--due", help="YYYY-MM-DD, today or tomorrow")
    sp.add_argument("--sub", nargs="*", help="subtasks")
    sp.set_defaults(func=cmd_add)

    # delete
    sp = sub.add_parser("delete", help="delete a todo")
    sp.add_argument("id", type=int)
    sp.set_defaults(func=cmd_delete)

    # status
    sp = sub.add_parser("status", help="set status (Pending / Ongoing / Done)")
    sp.add_argument("id", type=int)
    sp.add_argument("status")
    sp.set_defaults(func=cmd_status)

    # done
    sp = sub.add_parser("done", help="mark done")
    sp.add_argument("id", type=int)
    sp.set_defaults(func=cmd_done)

    # priority
    sp = sub.add_parser("priority", help="set priority (Low / Medium / High)")
    sp.add_argument("id", type=int)
    sp.add_argument("priority")
    sp.set_defaults(func=cmd_priority)

    # subtask
    sp = sub.add_parser("subtask", help="append a subtask")
    sp.add_argument("id", type=int)
    sp.add_argument("text", nargs="+")
    sp.set_defaults(func=cmd_subtask)

    # note
    sp = sub.add_parser("note", help="replace the note ('-' reads stdin)")
    sp.add_argument("id", type=int)
    sp.add_argument("text", nargs="+")
    sp.set_defaults(func=cmd_note)

    # list / show
    sp = sub.add_parser("list", help="list todos")
    sp.set_defaults(func=cmd_list)

    sp = sub.add_parser("show", help="show a todo")
    sp.add_argument("id", type=int)
    sp.set_defaults(func=cmd_show)

    # clear
    sp = sub.add_parser("clear", help="delete every todo")
    sp.add_argument("--yes", action="store_true", help="do not ask for confirmation")
    sp.set_defaults(func=cmd_clear)

    # export / import
    sp = sub.add_parser("export", help="export to json / yaml / xlsx")
    sp.add_argument("path")
    sp.set_defaults(func=cmd_export)

    sp = sub.add_parser("import", help="replace todos from json / yaml / xlsx")
    sp.add_argument("path")
    sp.add_argument("--yes", action="store_true", help="do not ask for confirmation")
    sp.set_defaults(func=cmd_import)

    # AI
    sp = sub.add_parser("suggest", help="ask the AI for todo suggestions")
    sp.add_argument("prompt", nargs="+")
    sp.add_argument("--add", action="store_true", help="add the suggestions as todos")
    sp.set_defaults(func=cmd_suggest)

    sp = sub.add_parser("apikey", help="store the AI API key in config.env")
    sp.add_argument("key")
    sp.set_defaults(func=cmd_apikey)

    # version
    sp = sub.add_parser("version", help="print version")
    sp.set_defaults(func=cmd_version)

    return p


def main(argv: list[str] | None = None) -> int:
    argv = argv if argv is not None else sys.argv[1:]
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_mode(is_debug=args.debug)
    return args.func(args)  # type: ignore[no-any-return]
