from freshtrack.core.config import settings
from freshtrack.core.database import Base, Database
from freshtrack.core.flow import (
    Flow,
    MutableStateFlow,
    Subscription,
    combine,
)
from freshtrack.core.live_query import InvalidationTracker, LiveQuery

__all__ = [
    "settings",
    "Base",
    "Database",
    "Flow",
    "MutableStateFlow",
    "Subscription",
    "combine",
    "InvalidationTracker",
    "LiveQuery",
]
