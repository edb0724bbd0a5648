from __future__ import annotations
import logging
import time
from functools import wraps
from typing import Any, Callable

_MAX_ARG_REPR = 60


def _short(value: Any) -> str:
    text = repr(value)
    if len(text) > _MAX_ARG_REPR:
        return f"{text[:_MAX_ARG_REPR]}...<{len(text)} chars>"
    return text


def log_calls(logger_name: str | None = None) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Decorator logging calls, elapsed time and failures at DEBUG level.

    Arguments are shortened so whole tree texts or modules do not flood the log.
    """

    def _decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        name = logger_name or func.__module__
        logger = logging.getLogger(name)

        @wraps(func)
        def _wrapper(*args: Any, **kwargs: Any) -> Any:
            shown = [_short(arg) for arg in args]
            shown.extend(f"{key}={_short(value)}" for key, value in kwargs.items())
            logger.debug("Calling %s(%s)", func.__qualname__, ", ".join(shown))
            started = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                logger.debug("%s failed after %.3fs: %s", func.__qualname__, time.perf_counter() - started, e)
                raise
            logger.debug("%s finished in %.3fs", func.__qualname__, time.perf_counter() - started)
            return result

        return _wrapper

    return _decorator
