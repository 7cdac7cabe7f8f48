from typing import Optional
import re

COLOR_HEX_PATTERN = r"^#[0-9A-Fa-f]{6}$"


def validate_barcode(barcode: Optional[str]) -> bool:
    if not barcode:
        return True

    return bool(re.match(r"^[\d\-]+$", barcode))


def blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None or not value.strip():
        return None
    return value
