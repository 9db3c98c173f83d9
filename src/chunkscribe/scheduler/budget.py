"""Execution budget lease and its escalation policy.

The host grants a shrinking window of background execution time once work
begins. While a lease is held the monitor polls the remaining time and
escalates: warn, ask for a graceful stop, then force the active job to
suspend before the host kills the process.
"""

from __future__ import annotations

import itertools
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Protocol

from chunkscribe.models.config import BudgetConfig
from chunkscribe.utils.progress import log_error, log_step, log_warning

_lease_ids = itertools.count(1)


@dataclass
class LeaseHandle:
    """Opaque token for a granted lease."""

    tag: str
    id: int = field(default_factory=lambda: next(_lease_ids))


class ExecutionBudgetProvider(Protocol):
    """Host environment that grants execution time."""

    def remaining_time(self) -> float | None:
        """Seconds left, or None when the budget is unlimited."""
        ...

    def begin_lease(self, tag: str, on_expire: Callable[[], None]) -> LeaseHandle | None: ...

    def end_lease(self, handle: LeaseHandle) -> None: ...


class UnlimitedBudgetProvider:
    """Foreground execution: no budget, leases are bookkeeping only."""

    def remaining_time(self) -> float | None:
        return None

    def begin_lease(self, tag: str, on_expire: Callable[[], None]) -> LeaseHandle | None:
        return LeaseHandle(tag)

    def end_lease(self, handle: LeaseHandle) -> None:
        pass


class DeadlineBudgetProvider:
    """Wall-clock budget that starts counting when the provider is created.

    When a lease is still held at the deadline, ``on_expire`` fires from a
    timer thread.
    """

    def __init__(self, seconds: float, *, clock: Callable[[], float] = time.monotonic):
        self.seconds = seconds
        self._clock = clock
        self._deadline = clock() + seconds
        self._timers: dict[int, threading.Timer] = {}
        self._lock = threading.Lock()

    def remaining_time(self) -> float | None:
        return max(self._deadline - self._clock(), 0.0)

    def begin_lease(self, tag: str, on_expire: Callable[[], None]) -> LeaseHandle | None:
        handle = LeaseHandle(tag)
        timer = threading.Timer(self.remaining_time(), on_expire)
        timer.daemon = True
        with self._lock:
            self._timers[handle.id] = timer
        timer.start()
        return handle

    def end_lease(self, handle: LeaseHandle) -> None:
        with self._lock:
            timer = self._timers.pop(handle.id, None)
        if timer is not None:
            timer.cancel()


class ExecutionBudgetMonitor:
    """Holds at most one lease and polls the provider while it is held.

    ``on_force_suspend`` is called (outside the monitor's lock) when the
    remaining time drops below ``force_below`` or the provider expires the
    lease. The callback is expected to end the lease.
    """

    def __init__(
        self,
        provider: ExecutionBudgetProvider | None = None,
        config: BudgetConfig | None = None,
        on_force_suspend: Callable[[], None] | None = None,
    ):
        self.provider = provider or UnlimitedBudgetProvider()
        self.config = config or BudgetConfig()
        self.on_force_suspend = on_force_suspend
        self.graceful_stop_requested = False
        self._lock = threading.RLock()
        self._handle: LeaseHandle | None = None
        self._held = False
        self._tag: str | None = None
        self._warned = False
        self._stop: threading.Event | None = None

    @property
    def lease_held(self) -> bool:
        return self._held

    @property
    def tag(self) -> str | None:
        return self._tag

    def begin_lease(self, tag: str) -> None:
        """Acquire a lease and start polling. No-op when one is held."""
        with self._lock:
            if self._held:
                log_step("Budget", f"Lease already held ({self._tag}), not starting {tag}")
                return

            self._handle = self.provider.begin_lease(tag, self._expired)
            self._held = True
            self._tag = tag
            self._warned = False
            self.graceful_stop_requested = False
            self._stop = threading.Event()

            poller = threading.Thread(
                target=self._poll,
                args=(self._stop,),
                name=f"budget-{tag}",
                daemon=True,
            )
            poller.start()

        log_step("Budget", f"Lease started: {tag}")

    def retag(self, tag: str) -> None:
        """Point the held lease at the work it now covers."""
        with self._lock:
            if not self._held or tag == self._tag:
                return
            previous, self._tag = self._tag, tag
            if self._handle is not None:
                self._handle.tag = tag
        log_step("Budget", f"Lease {previous} now covers {tag}")

    def end_lease(self) -> None:
        """Stop polling and release the lease. Safe to call repeatedly."""
        with self._lock:
            if not self._held:
                return
            if self._stop is not None:
                self._stop.set()
            handle, tag = self._handle, self._tag
            self._held = False
            self._handle = None
            self._tag = None
            self._stop = None

        if handle is not None:
            self.provider.end_lease(handle)
        log_step("Budget", f"Lease released: {tag}")

    def remaining_time(self) -> float | None:
        return self.provider.remaining_time()

    def check(self) -> float | None:
        """Poll the provider once and escalate if time is running out."""
        remaining = self.provider.remaining_time()
        if remaining is None:
            return None

        cfg = self.config
        if remaining < cfg.force_below:
            log_error(f"Only {remaining:.0f}s of execution budget left, suspending current job")
            self._force_suspend()
        elif remaining < cfg.prepare_below:
            if not self.graceful_stop_requested:
                log_warning(f"{remaining:.0f}s of execution budget left, preparing to stop")
            self.graceful_stop_requested = True
        elif remaining < cfg.warn_below and not self._warned:
            log_warning(f"Execution budget running low: {remaining / 60:.1f} minutes left")
            self._warned = True
        return remaining

    def _poll(self, stop: threading.Event) -> None:
        while not stop.wait(self.config.poll_interval):
            self.check()

    def _expired(self) -> None:
        log_error("Execution budget lease expired")
        self._force_suspend()

    def _force_suspend(self) -> None:
        callback = self.on_force_suspend
        if callback is not None:
            callback()
        else:
            self.end_lease()
