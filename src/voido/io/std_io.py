# ruff: noqa: T201

from voido.core.models import Todo


def format_line(t: Todo) -> str:
    done, total = t.subtask_progress()
    subs = f" [{done}/{total}]" if total else ""
    due = f" due={t.due}" if t.due else ""
    return f"#{t.id:<4} {t.status:<7} {t.priority:<6}{due} | {t.description}{subs}"


def print_todo(t: Todo) -> None:
    print(f"id: {t.id}")
    print(f"description: {t.description}")
    print(f"status: {t.status}  priority: {t.priority}")
    print(f"due: {t.due}  created_at: {t.created_at}")
    if t.topic:
        print(f"topic: {t.topic}")
    if t.owner:
        print(f"owner: {t.owner}")
    if t.detail:
        print(f"detail: {t.detail}")
    if t.subtasks:
        print("subtasks:")
        for s in t.subtasks:
            mark = "x" if s.is_done else " "
            print(f"  [{mark}] {s.id}: {s.text}")
    if t.note:
        print("note:")
        for line in t.note.splitlines():
            print(f"  {line}")
