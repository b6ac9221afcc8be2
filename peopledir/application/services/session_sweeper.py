# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import threading
from collections.abc import Callable
from datetime import datetime, timedelta

from peopledir.domain.repositories import SessionRepository
from peopledir.shared.logging import logger
from peopledir.shared.utils.clock import utcnow


class SessionSweeper:
    """Background thread that periodically purges expired sessions.

    A failing sweep is logged and the loop waits for the next tick. ``stop``
    lets an in-flight sweep finish before the thread exits.
    """

    def __init__(
        self,
        sessions: SessionRepository,
        interval: timedelta,
        *,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        if interval <= timedelta(0):
            raise ValueError("sweep interval must be positive")
        self._sessions = sessions
        self._interval = interval.total_seconds()
        self._clock = clock
        self._stop_event = threading.Event()
        self._lock = threading.Lock()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        with self._lock:
            if self._thread is not None:
                logger.debug("session_sweeper: already started")
                return
            self._thread = threading.Thread(
                target=self._run, daemon=True, name="SessionSweeper"
            )
            self._thread.start()
        logger.info(f"session_sweeper: expiring sessions every {self._interval:g}s")

    def stop(self, timeout: float | None = None) -> None:
        with self._lock:
            thread = self._thread
            if thread is None or self._stop_event.is_set():
                return
            self._stop_event.set()
        thread.join(timeout)
        logger.info("session_sweeper: stopped")

    def sweep_once(self) -> int:
        """Run a single sweep; errors are logged, never raised."""

        try:
            removed = self._sessions.expire_sessions(self._clock())
        except Exception:
            logger.exception("session_sweeper: expire_sessions failed")
            return 0
        if removed:
            logger.info(f"session_sweeper: expired {removed} sessions")
        return removed

    def _run(self) -> None:
        while not self._stop_event.wait(self._interval):
            self.sweep_once()
        logger.debug("session_sweeper: loop exited")
