"""Whether this process currently runs the activity monitor.

Set by the lifespan once the scheduler lease is won, cleared when the lease is
lost or the app shuts down, and read by ``/health``.
"""
from __future__ import annotations

_monitor_running = False


def set_scheduler_active(active: bool) -> None:
    global _monitor_running
    _monitor_running = bool(active)


def is_scheduler_active() -> bool:
    return _monitor_running
