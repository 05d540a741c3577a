"""Support functions called by instrumented code.

Generated modules import this as `_tracefn_runtime`; the `trace_fn` decorator
uses it directly. Events go to the standard `logging` logger named after the
instrumented function's module.
"""

import logging
import time
from typing import Any

from tracefn_core.models import Level

ENTRY_FORMAT = '>>> [%s] #Args: %s --- %s:%s'
EXIT_FORMAT = '<<< [%s] #Ret: %r, duration: %s'

clock = time.perf_counter

_UNITS = (
    (1.0, 's'),
    (1e-3, 'ms'),
    (1e-6, 'µs'),
)


def enter(
    logger_name: str, level: str, function: str, arguments: str, file: str, line: int
) -> None:
    """Emit the entry event of an instrumented call."""
    logging.getLogger(logger_name).log(
        Level(level).logging_level, ENTRY_FORMAT, function, arguments, file, line
    )


def leave(
    logger_name: str, level: str, function: str, result: Any, duration: float
) -> None:
    """Emit the exit event of an instrumented call that returned normally."""
    logger = logging.getLogger(logger_name)
    level_number = Level(level).logging_level
    if logger.isEnabledFor(level_number):
        logger.log(
            level_number, EXIT_FORMAT, function, result, format_duration(duration)
        )


def format_duration(seconds: float) -> str:
    """Format an elapsed time with the largest unit that keeps it above one.

    >>> format_duration(0.0012345)
    '1.2345ms'
    >>> format_duration(4.2e-7)
    '420ns'
    """
    for scale, unit in _UNITS:
        if seconds >= scale:
            value = f'{seconds / scale:.6f}'.rstrip('0').rstrip('.')
            return f'{value}{unit}'
    return f'{round(seconds * 1e9)}ns'
