from pathlib import Path

import yaml  # type: ignore[import-untyped]

from voido.core.models import Todo


def export_yaml(todos: list[Todo], path: str) -> None:
    data = [t.to_dict() for t in todos]
    _path = Path(path)
    if _path.exists():
        _msg = f"File already exists: {_path}"
        raise FileExistsError(_msg)
    with _path.open("w", encoding="utf-8") as f:
        yaml.safe_dump(data, f, allow_unicode=True, sort_keys=False)


def import_yaml(path: str) -> list[Todo]:
    """Read todos from a YAML file.

    Raises:
        FileNotFoundError: path does not exist.
        yaml.YAMLError: the file is not valid YAML.
        ValueError: the document is not a list of todos.
    """
    _path = Path(path)
    if not _path.exists():
        _msg = f"File not found: {_path}"
        raise FileNotFoundError(_msg)
    with _path.open(encoding="utf-8") as f:
        data = yaml.safe_load(f) or []
    if not isinstance(data, list):
        _msg = f"Expected a list of todos in {_path}"
        raise ValueError(_msg)
    return [Todo.from_dict(td) for td in data]
