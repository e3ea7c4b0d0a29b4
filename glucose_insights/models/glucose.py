"""Story 2.1: Glucose trend categories.

Trend arrows reported alongside each CGM sample.
"""

import enum


class TrendDirection(str, enum.Enum):
    """Glucose trend direction from CGM."""

    DOUBLE_UP = "double_up"  # Rising fast (>3 mg/dL/min)
    SINGLE_UP = "single_up"  # Rising (2-3 mg/dL/min)
    FORTY_FIVE_UP = "forty_five_up"  # Rising slowly (1-2 mg/dL/min)
    FLAT = "flat"  # Stable (-1 to +1 mg/dL/min)
    FORTY_FIVE_DOWN = "forty_five_down"  # Falling slowly
    SINGLE_DOWN = "single_down"  # Falling
    DOUBLE_DOWN = "double_down"  # Falling fast (<-3 mg/dL/min)
    NONE = "none"  # No arrow reported


# Map vendor trend text and numeric codes to our enum
VENDOR_TREND_MAP: dict[str | int, TrendDirection] = {
    "DoubleUp": TrendDirection.DOUBLE_UP,
    "SingleUp": TrendDirection.SINGLE_UP,
    "FortyFiveUp": TrendDirection.FORTY_FIVE_UP,
    "Flat": TrendDirection.FLAT,
    "FortyFiveDown": TrendDirection.FORTY_FIVE_DOWN,
    "SingleDown": TrendDirection.SINGLE_DOWN,
    "DoubleDown": TrendDirection.DOUBLE_DOWN,
    "NotComputable": TrendDirection.NONE,
    "RateOutOfRange": TrendDirection.NONE,
    "None": TrendDirection.NONE,
    1: TrendDirection.DOUBLE_UP,
    2: TrendDirection.SINGLE_UP,
    3: TrendDirection.FORTY_FIVE_UP,
    4: TrendDirection.FLAT,
    5: TrendDirection.FORTY_FIVE_DOWN,
    6: TrendDirection.SINGLE_DOWN,
    7: TrendDirection.DOUBLE_DOWN,
}


def parse_trend(raw: "str | int | TrendDirection | None") -> TrendDirection:
    """Normalize a vendor trend value into a TrendDirection.

    Accepts our own enum values, vendor CamelCase names (case-insensitive)
    and vendor numeric codes. Anything unrecognized maps to NONE.

    Args:
        raw: Trend value as received.

    Returns:
        The matching TrendDirection.
    """
    if raw is None:
        return TrendDirection.NONE
    if isinstance(raw, TrendDirection):
        return raw
    if isinstance(raw, int):
        return VENDOR_TREND_MAP.get(raw, TrendDirection.NONE)
    if not isinstance(raw, str):
        return TrendDirection.NONE

    text = raw.strip()
    try:
        return TrendDirection(text.lower())
    except ValueError:
        pass
    for key, direction in VENDOR_TREND_MAP.items():
        if isinstance(key, str) and key.lower() == text.lower():
            return direction
    return TrendDirection.NONE
