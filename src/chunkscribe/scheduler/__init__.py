"""Job queue, execution budget and lifecycle handling."""

from chunkscribe.scheduler.budget import (
    DeadlineBudgetProvider,
    ExecutionBudgetMonitor,
    ExecutionBudgetProvider,
    LeaseHandle,
    UnlimitedBudgetProvider,
)
from chunkscribe.scheduler.lifecycle import LifecycleEvent, LifecycleSignals
from chunkscribe.scheduler.scheduler import JobScheduler

__all__ = [
    "DeadlineBudgetProvider",
    "ExecutionBudgetMonitor",
    "ExecutionBudgetProvider",
    "JobScheduler",
    "LeaseHandle",
    "LifecycleEvent",
    "LifecycleSignals",
    "UnlimitedBudgetProvider",
]
