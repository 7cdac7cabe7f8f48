from datetime import datetime, timezone
import time

MILLIS_PER_DAY = 24 * 60 * 60 * 1000


def current_millis() -> int:
    return int(time.time() * 1000)


def days_to_millis(days: int) -> int:
    return days * MILLIS_PER_DAY


def whole_days(duration_ms: int) -> int:
    """Nombre de jours entiers, tronqué vers zéro (-23h donne 0, pas -1)"""
    days = abs(duration_ms) // MILLIS_PER_DAY
    return days if duration_ms >= 0 else -days


def days_until_expiry(expiry_ms: int, now_ms: int) -> int:
    return whole_days(expiry_ms - now_ms)


def is_expired(expiry_ms: int, now_ms: int) -> bool:
    return now_ms > expiry_ms


def format_millis(timestamp_ms: int) -> str:
    return datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc).strftime(
        "%d/%m/%Y"
    )
