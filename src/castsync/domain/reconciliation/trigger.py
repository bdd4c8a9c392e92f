"""Debounced trigger: coalesce bursts of upstream changes into one pass.

States::

    IDLE        --change-->            PENDING(now + delay)
    PENDING     --change-->            PENDING(now + delay)   # reset, not accumulate
    PENDING     --deadline reached-->  RECONCILING --pass done--> IDLE
    RECONCILING --change-->            (remembered) --pass done--> PENDING(now + delay)

There is no cancellation: at most one timer is outstanding, and a timer that
fires before the current deadline re-arms itself for that deadline.
"""

from __future__ import annotations

import logging
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

    from castsync.domain.ports import Scheduler

log = logging.getLogger(__name__)


class TriggerState(StrEnum):
    IDLE = "idle"
    PENDING = "pending"
    RECONCILING = "reconciling"


class DebouncedTrigger:
    """Run ``action`` once changes have been quiet for ``delay`` seconds."""

    def __init__(
        self,
        scheduler: Scheduler,
        *,
        delay: float,
        action: Callable[[], object],
        name: str = "trigger",
    ) -> None:
        if delay < 0:
            raise ValueError("delay must be non-negative")
        self.delay = delay
        self.name = name
        self._scheduler = scheduler
        self._action = action
        self._state = TriggerState.IDLE
        self._deadline: float | None = None
        self._timer_armed = False
        self._changed_while_reconciling = False
        self.passes = 0

    @property
    def state(self) -> TriggerState:
        return self._state

    @property
    def deadline(self) -> float | None:
        return self._deadline

    def notify(self) -> None:
        """Record an upstream-visible change."""

        if self._state is TriggerState.RECONCILING:
            self._changed_while_reconciling = True
            return
        self._deadline = self._scheduler.time() + self.delay
        self._state = TriggerState.PENDING
        self._arm(self._deadline)

    def flush(self) -> bool:
        """Run a pending pass now; return whether one ran."""

        if self._state is not TriggerState.PENDING:
            return False
        self._run()
        return True

    def _arm(self, when: float) -> None:
        if self._timer_armed:
            return
        self._timer_armed = True
        self._scheduler.call_at(when, self._on_timer)

    def _on_timer(self) -> None:
        self._timer_armed = False
        if self._state is not TriggerState.PENDING or self._deadline is None:
            return
        if self._scheduler.time() < self._deadline:
            self._arm(self._deadline)
            return
        self._run()

    def _run(self) -> None:
        self._state = TriggerState.RECONCILING
        self._deadline = None
        log.debug("Reconciling via %s", self.name)
        try:
            self._action()
            self.passes += 1
        finally:
            self._state = TriggerState.IDLE
            if self._changed_while_reconciling:
                self._changed_while_reconciling = False
                self.notify()
