"""Voice capture session state."""
from __future__ import annotations

import asyncio
from enum import Enum
from typing import Optional

from varz.utils.logging import get_logger

logger = get_logger(__name__)


class SessionState(str, Enum):
    IDLE = "idle"
    LISTENING = "listening"


class ListeningSession:
    """Guard that allows a single capture session at a time.

    ``begin`` and ``end`` are serialised by an :class:`asyncio.Lock`; a second
    ``begin`` while listening returns ``None`` and leaves the session alone.
    A successful ``begin`` returns a generation token. Calls that pass a token
    only act while that generation is still the current one, so a capture
    that returns after it was stopped cannot end or hide a newer session.
    The listening indicator is separate from the state: it is a UI hint that
    switches itself off after a timeout even if the capture is still running.
    """

    def __init__(self) -> None:
        self._state = SessionState.IDLE
        self._generation = 0
        self._lock = asyncio.Lock()
        self._indicator = False
        self._indicator_timer: Optional[asyncio.TimerHandle] = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_listening(self) -> bool:
        return self._state is SessionState.LISTENING

    @property
    def indicator_active(self) -> bool:
        return self._indicator

    def is_current(self, token: int) -> bool:
        """Return ``True`` while the session started with ``token`` is still listening."""

        return self.is_listening and token == self._generation

    async def begin(self) -> Optional[int]:
        async with self._lock:
            if self._state is SessionState.LISTENING:
                return None
            self._generation += 1
            self._state = SessionState.LISTENING
            logger.debug(
                "session started",
                extra={"session_state": self._state.value, "generation": self._generation},
            )
            return self._generation

    async def end(self, token: Optional[int] = None) -> None:
        """Return to idle; with a ``token`` only if that session is still current."""

        async with self._lock:
            if token is not None and not self.is_current(token):
                return
            self._state = SessionState.IDLE
            logger.debug(
                "session ended",
                extra={"session_state": self._state.value, "generation": self._generation},
            )

    def show_indicator(self, timeout: float) -> None:
        """Switch the indicator on and schedule it to clear after ``timeout`` seconds."""

        self.clear_indicator()
        self._indicator = True
        loop = asyncio.get_running_loop()
        self._indicator_timer = loop.call_later(timeout, self._expire_indicator)

    def clear_indicator(self, token: Optional[int] = None) -> None:
        if token is not None and token != self._generation:
            return
        if self._indicator_timer is not None:
            self._indicator_timer.cancel()
            self._indicator_timer = None
        self._indicator = False

    def _expire_indicator(self) -> None:
        self._indicator_timer = None
        self._indicator = False
        logger.debug("listening indicator timed out")


__all__ = ["ListeningSession", "SessionState"]
