from freshtrack.utils.date_helpers import (
    MILLIS_PER_DAY,
    current_millis,
    days_to_millis,
    whole_days,
    days_until_expiry,
    is_expired,
    format_millis,
)
from freshtrack.utils.validators import (
    validate_barcode,
    blank_to_none,
)
from freshtrack.utils.exceptions import (
    FreshTrackError,
    ProductValidationError,
    StorageError,
    ProductNotFoundException,
    CategoryNotFoundException,
)

__all__ = [

    "MILLIS_PER_DAY",
    "current_millis",
    "days_to_millis",
    "whole_days",
    "days_until_expiry",
    "is_expired",
    "format_millis",

    "validate_barcode",
    "blank_to_none",

    "FreshTrackError",
    "ProductValidationError",
    "StorageError",
    "ProductNotFoundException",
    "CategoryNotFoundException",
]
