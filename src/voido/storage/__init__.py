from voido.storage.base import Store
from voido.storage.sqlite3_store import StoreToSQLite
from voido.util.dirs import load_env

__all__ = [
    "Store",
    "StoreToSQLite",
    "get_store",
]


def get_store(path: str | None = None) -> Store:
    data_path = path or load_env()["DATA_PATH"]
    if data_path.endswith(".db"):
        return StoreToSQLite(data_path)
    _msg = f"Invalid data path: {data_path}"
    raise ValueError(_msg)
