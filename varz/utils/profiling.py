"""Stage timing helpers."""

from __future__ import annotations

import contextlib
import time
from typing import Iterator

from .logging import get_logger

logger = get_logger(__name__)


@contextlib.contextmanager
def profile(name: str) -> Iterator[None]:
    """Log how long the wrapped block took.

    Used around each dispatch stage of the assistant so slow collaborators
    (speech engines, editor commands) show up in the JSON log.
    """

    start = time.perf_counter()
    try:
        yield
    finally:
        duration = time.perf_counter() - start
        logger.debug("profile", extra={"event": name, "duration": duration})


__all__ = ["profile"]
