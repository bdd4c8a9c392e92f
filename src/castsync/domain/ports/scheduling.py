"""Port for the host event loop used to delay reconciliation passes."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Callable


@runtime_checkable
class Scheduler(Protocol):
    """Subset of ``asyncio.AbstractEventLoop`` the debounced trigger relies on.

    Times are in seconds on the scheduler's own monotonic clock.
    """

    def time(self) -> float: ...

    def call_at(self, when: float, callback: Callable[[], object], /) -> object: ...
