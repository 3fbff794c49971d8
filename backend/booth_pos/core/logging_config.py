"""
Logging setup for the API process
"""
import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """
    Install a single stdout handler on the root logger

    Safe to call more than once (e.g. when the app factory runs in tests);
    previously installed handlers are replaced.

    Args:
        level: Level name such as "DEBUG" or "INFO"
    """
    root = logging.getLogger()
    root.setLevel(level.upper())

    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
