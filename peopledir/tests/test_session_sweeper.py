from __future__ import annotations

import time
from datetime import timedelta

import pytest
from loguru import logger

from peopledir.application.services.session_sweeper import SessionSweeper
from peopledir.domain import Storage
from peopledir.shared.errors import NotFoundError


class FlakySessions:
    def __init__(self) -> None:
        self.calls = 0

    def expire_sessions(self, now) -> int:
        self.calls += 1
        if self.calls == 1:
            raise RuntimeError("database went away")
        return 2


def test_sweep_once_removes_expired_sessions(storage: Storage, clock) -> None:
    session = storage.issue_session("user", timedelta(seconds=300))
    sweeper = SessionSweeper(storage, timedelta(seconds=60), clock=clock)

    assert sweeper.sweep_once() == 0

    clock.advance(timedelta(seconds=301))
    assert sweeper.sweep_once() == 1
    with pytest.raises(NotFoundError):
        storage.find_session(session.token)


def test_sweep_errors_are_logged_and_swallowed(clock) -> None:
    messages: list[str] = []
    handler_id = logger.add(messages.append, level="ERROR", format="{message}")
    try:
        sweeper = SessionSweeper(FlakySessions(), timedelta(seconds=1), clock=clock)

        assert sweeper.sweep_once() == 0
        assert sweeper.sweep_once() == 2
    finally:
        logger.remove(handler_id)

    assert any("expire_sessions failed" in message for message in messages)


def test_background_thread_sweeps_until_stopped(storage: Storage, clock) -> None:
    session = storage.issue_session("user", timedelta(seconds=1))
    clock.advance(timedelta(seconds=2))
    sweeper = SessionSweeper(storage, timedelta(milliseconds=10), clock=clock)

    sweeper.start()
    try:
        deadline = time.monotonic() + 5
        while time.monotonic() < deadline:
            try:
                storage.find_session(session.token)
            except NotFoundError:
                break
            time.sleep(0.01)
        else:
            pytest.fail("session was never swept")
        assert sweeper.running is True
    finally:
        sweeper.stop()

    assert sweeper.running is False


def test_stop_is_idempotent(clock) -> None:
    sweeper = SessionSweeper(FlakySessions(), timedelta(seconds=30), clock=clock)

    sweeper.stop()
    sweeper.start()
    sweeper.stop(timeout=5)
    sweeper.stop(timeout=5)

    assert sweeper.running is False


def test_interval_must_be_positive() -> None:
    with pytest.raises(ValueError):
        SessionSweeper(FlakySessions(), timedelta(0))
