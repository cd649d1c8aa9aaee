import os
import re
from pathlib import Path

DEFAULT_HOME = os.environ.get("VD_HOME_DIR", (Path.home() / ".voido").as_posix())
DEFAULT_DATA_PATH = (Path(DEFAULT_HOME) / "todos.db").as_posix()
DEFAULT_ENV_PATH = (Path(DEFAULT_HOME) / "config.env").as_posix()
DEFAULT_OWNER = "You"
DEFAULT_AI_MODEL = "gemini-2.0-flash"
DEFAULT_AI_TIMEOUT = "20"

_LINE_RE = re.compile(r"([^=]+)=(.*)")


def get_username(env: dict[str, str]) -> str:
    match os.environ.get("VD_USERNAME"):
        case None:
            match env.get("USERNAME"):
                case None | "":
                    return DEFAULT_OWNER
                case username:
                    return username
        case username:
            return username


def ensure_dirs() -> None:
    _path = Path(DEFAULT_HOME)
    _path.mkdir(parents=True, exist_ok=True)


def read_env_file(path: str = DEFAULT_ENV_PATH) -> dict[str, str]:
    env: dict[str, str] = {}
    _path = Path(path)
    if _path.exists():
        with _path.open(encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if not line or line.startswith("#"):
                    continue
                m = _LINE_RE.match(line)
                if m:
                    env[m.group(1).strip()] = m.group(2).strip()
    return env


def load_env(path: str = DEFAULT_ENV_PATH) -> dict[str, str]:
    env = read_env_file(path)

    # OS環境変数を上書き優先
    env.update(
        {
            "USERNAME": get_username(env),
            "DATA_PATH": os.environ.get("VD_DATA_PATH", env.get("DATA_PATH", DEFAULT_DATA_PATH)),
            "API_KEY": os.environ.get("VD_API_KEY", env.get("API_KEY", "")),
            "AI_MODEL": os.environ.get("VD_AI_MODEL", env.get("AI_MODEL", DEFAULT_AI_MODEL)),
            "AI_TIMEOUT": os.environ.get("VD_AI_TIMEOUT", env.get("AI_TIMEOUT", DEFAULT_AI_TIMEOUT)),
        },
    )
    return env


def save_env_value(key: str, value: str, path: str = DEFAULT_ENV_PATH) -> None:
    """Rewrite a single KEY=VALUE line of config.env, keeping every other line as-is."""
    _path = Path(path)
    _path.parent.mkdir(parents=True, exist_ok=True)
    lines: list[str] = []
    replaced = False
    if _path.exists():
        with _path.open(encoding="utf-8") as f:
            for line in f:
                m = _LINE_RE.match(line.strip())
                if m and m.group(1).strip() == key:
                    lines.append(f"{key}={value}\n")
                    replaced = True
                else:
                    lines.append(line if line.endswith("\n") else line + "\n")
    if not replaced:
        lines.append(f"{key}={value}\n")
    with _path.open("w", encoding="utf-8") as f:
        f.writelines(lines)
