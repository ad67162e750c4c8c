"""Coalesce mutation batches into scan passes.

States and transitions::

    IDLE --mutation--> AWAITING_DEBOUNCE --timer--> SCANNING --done--> IDLE

A mutation while AWAITING_DEBOUNCE restarts the timer (debounce) or is
ignored (throttle). A mutation while SCANNING is ignored. At most one pass
is ever in flight and a running pass is never cancelled.
"""
from __future__ import annotations

import asyncio
from collections.abc import Callable
from enum import StrEnum

import structlog

logger = structlog.get_logger(__name__)


class SchedulerState(StrEnum):
    IDLE = "idle"
    AWAITING_DEBOUNCE = "awaiting_debounce"
    SCANNING = "scanning"


class ScanScheduler:
    """Runs ``run_pass`` at most once per coalesced burst of mutations.

    Timers live on the loop given to ``bind_loop`` or, failing that, on the
    loop running when ``notify`` is called. With neither, the batch is
    logged and dropped.
    """

    def __init__(
        self,
        run_pass: Callable[[], object],
        interval: float,
        *,
        restart_timer_on_mutation: bool = True,
    ):
        self._run_pass = run_pass
        self._interval = interval
        self._restart = restart_timer_on_mutation
        self._state = SchedulerState.IDLE
        self._timer: asyncio.TimerHandle | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._batches = 0
        self.passes_run = 0

    @property
    def state(self) -> SchedulerState:
        return self._state

    def bind_loop(self, loop: asyncio.AbstractEventLoop | None) -> None:
        self._loop = loop

    def notify(self, records: list | None = None) -> None:
        """Mutation feed callback."""
        if self._state == SchedulerState.SCANNING:
            return

        loop = self._loop
        if loop is None or loop.is_closed():
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                logger.warning("mutation_unscheduled", records=len(records or []))
                return

        self._batches += 1
        if self._state == SchedulerState.AWAITING_DEBOUNCE:
            if not self._restart:
                return
            self._timer.cancel()

        self._timer = loop.call_later(self._interval, self._fire)
        self._state = SchedulerState.AWAITING_DEBOUNCE

    def cancel(self) -> None:
        """Drop a pending pass. A pass already running is not affected."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        if self._state == SchedulerState.AWAITING_DEBOUNCE:
            self._state = SchedulerState.IDLE
            self._batches = 0

    def _fire(self) -> None:
        self._timer = None
        logger.debug("mutation_batch_coalesced", batches=self._batches)
        self._batches = 0
        self._state = SchedulerState.SCANNING
        try:
            self._run_pass()
        except Exception:
            # A failed pass leaves the page as it was; the next mutation retries
            logger.exception("scan_pass_failed")
        finally:
            self.passes_run += 1
            self._state = SchedulerState.IDLE
