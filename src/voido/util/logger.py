import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from voido.util.dirs import DEFAULT_HOME, ensure_dirs

_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_mode(*, is_debug: bool, name: str = "voido") -> None:
    level = logging.DEBUG if is_debug else logging.INFO
    logging.basicConfig(level=level)
    logging.getLogger(name).setLevel(level)


def setup_logger(
    name: str,
    *,
    is_stream: bool = False,
    is_file: bool = True,
) -> logging.Logger:
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)
    # 同名loggerを複数モジュールから取得するので二重登録しない
    if logger.handlers:
        return logger

    if is_stream or not is_file:
        stream_handler = logging.StreamHandler()
        stream_handler.setLevel(logging.DEBUG)
        stream_handler.setFormatter(logging.Formatter(_FORMAT))
        logger.addHandler(stream_handler)

    if is_file:
        ensure_dirs()
        time_rotate_file_handler = TimedRotatingFileHandler(
            (Path(DEFAULT_HOME) / f"{name.lower()}.log").as_posix(),
            when="MIDNIGHT",
            interval=1,
            backupCount=7,
            encoding="utf-8",
        )
        time_rotate_file_handler.setLevel(logging.DEBUG)
        time_rotate_file_handler.setFormatter(logging.Formatter(_FORMAT))
        logger.addHandler(time_rotate_file_handler)

    # TUI描画中に root handler へ流れるとcursesの画面が崩れる
    logger.propagate = False
    return logger
