"""Advisory record of the most recent unhandled asynchronous failure."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

_last_error: Optional[BaseException] = None


def reset() -> None:
    global _last_error
    _last_error = None


def record_unhandled(exc: BaseException) -> None:
    global _last_error
    _last_error = exc
    logger.error("Unhandled failure: %r", exc, exc_info=exc)


def last_error() -> Optional[BaseException]:
    return _last_error


def describe_last_error() -> Optional[str]:
    if _last_error is None:
        return None
    return f"{type(_last_error).__name__}: {_last_error}"


def loop_exception_handler(loop: asyncio.AbstractEventLoop, context: Dict[str, Any]) -> None:
    exc = context.get("exception")
    if exc is None:
        exc = RuntimeError(context.get("message", "unknown asyncio failure"))
    record_unhandled(exc)


def install(loop: asyncio.AbstractEventLoop) -> None:
    reset()
    loop.set_exception_handler(loop_exception_handler)
