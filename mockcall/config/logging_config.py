import logging
import sys

from mockcall.config.settings import settings

NOISY_LOGGERS = ("uvicorn.access", "httpx", "httpcore", "mistralai")


def setup_logging(level: str | int | None = None) -> logging.Logger:
    level = level or settings.LOG_LEVEL
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logging.basicConfig(
        level=level,
        format='%(asctime)s | %(name)s | %(levelname)s | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        handlers=[logging.StreamHandler(sys.stdout)]
    )

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return logging.getLogger("mockcall")
