"""Elapsed-time logging for scoring runs"""
import logging
import time
from contextlib import contextmanager
from functools import wraps
from typing import Dict, Optional

@contextmanager
def section_timer(name: str, logger: logging.Logger, level: int = logging.INFO):
    """Log the duration of the block; the yielded dict holds ``elapsed`` on exit."""
    timing: Dict[str, float] = {}
    start = time.perf_counter()
    try:
        yield timing
    finally:
        timing["elapsed"] = time.perf_counter() - start
        logger.log(level, "%s finished in %.3f s", name, timing["elapsed"])

def timeit(logger: logging.Logger, name: Optional[str] = None, level: int = logging.DEBUG):
    def deco(fn):
        label = name or fn.__qualname__
        @wraps(fn)
        def wrapper(*args, **kwargs):
            start = time.perf_counter()
            try:
                return fn(*args, **kwargs)
            finally:
                logger.log(level, "%s finished in %.3f s", label, time.perf_counter() - start)
        return wrapper
    return deco
