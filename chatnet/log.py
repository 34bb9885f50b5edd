"""Level-filtered console logging."""

import sys
from enum import IntEnum


class LogLevel(IntEnum):
    DEBUG = 0
    ERROR = 1
    SYSTEM = 2


_threshold = LogLevel.ERROR


def set_log_level(level):
    """Set the lowest level that is written; return the previous one."""
    global _threshold
    previous = _threshold
    _threshold = LogLevel(level)
    return previous


def log(message, level=LogLevel.ERROR):
    """Write ``message`` if ``level`` meets the threshold; return whether it was written."""
    if _threshold > LogLevel(level):
        return False
    sys.stdout.write(f"{message} \n")
    return True