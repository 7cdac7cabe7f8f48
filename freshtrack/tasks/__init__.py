from freshtrack.tasks.scheduler import (
    start_scheduler,
    stop_scheduler,
    get_scheduler_status,
)
from freshtrack.tasks.expiry_checker import (
    ExpiryAlert,
    check_expiring_products,
    send_daily_reminder,
)

__all__ = [
    "start_scheduler",
    "stop_scheduler",
    "get_scheduler_status",
    "ExpiryAlert",
    "check_expiring_products",
    "send_daily_reminder",
]
