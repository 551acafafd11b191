# src/predicted_processes/core/cancellation.py

from __future__ import annotations

"""
Cooperative cancellation.

A CancelController owns one CancelSignal. The signal is handed to any number
of consumers (tasks, groups); each consumer subscribes a listener for the
duration of its work and unsubscribes when it is done. Triggering is one-shot.
"""

import asyncio
import logging

from .ports import CancelListener

logger = logging.getLogger(__name__)


class CancelSignal:
    def __init__(self) -> None:
        self._cancelled = False
        self._reason: object | None = None
        self._listeners: list[CancelListener] = []

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def reason(self) -> object | None:
        return self._reason

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def add_listener(self, listener: CancelListener) -> None:
        """Register `listener`. Registering the same callable twice is a no-op."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: CancelListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _trigger(self, reason: object | None) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        self._reason = reason

        listeners = list(self._listeners)
        self._listeners.clear()
        logger.debug("Cancel signal triggered (reason=%r, listeners=%d)", reason, len(listeners))

        for listener in listeners:
            try:
                listener()
            except Exception:
                logger.exception("Cancel listener %r failed", listener)

    def __repr__(self) -> str:
        state = "cancelled" if self._cancelled else "active"
        return f"<CancelSignal {state} listeners={len(self._listeners)}>"


class CancelController:
    """The triggering side of a CancelSignal."""

    def __init__(self) -> None:
        self.signal = CancelSignal()

    def cancel(self, reason: object | None = None) -> None:
        self.signal._trigger(reason)

    def cancel_after(self, seconds: float, reason: object | None = None) -> asyncio.TimerHandle:
        """Schedule cancel() on the running loop. Must be called from a coroutine."""
        loop = asyncio.get_running_loop()
        return loop.call_later(max(0.0, float(seconds)), self.cancel, reason)
