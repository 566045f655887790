# luxejewel/utils/logging.py
import logging
import sys

from luxejewel.utils.settings import LOG_LEVEL

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def get_logger(name: str) -> logging.Logger:
    root = logging.getLogger("luxejewel")
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(_FORMAT))
        root.addHandler(handler)
        root.setLevel(LOG_LEVEL.upper())

    if not name.startswith("luxejewel"):
        name = f"luxejewel.{name}"
    return logging.getLogger(name)
