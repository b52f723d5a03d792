"""Service layer exports."""
from .action_log import append_action, query_range, record_action  # noqa: F401
from .activity_monitor import aggregate, list_monitored_users, promote  # noqa: F401
from .errors import DuplicatePromotion, MonitorError, StoreUnavailable  # noqa: F401
from .monitor_worker import ActivityMonitor  # noqa: F401
from .scheduler_lock import (  # noqa: F401
    describe_scheduler_lock,
    refresh_scheduler_lock,
    release_scheduler_lock,
    try_acquire_scheduler_lock,
)
