"""Story 6.1: Projected alert enums."""

import enum


class AlertKind(str, enum.Enum):
    """Which threshold a projected alert is about."""

    HIGH = "high"
    LOW = "low"


class AlertUrgency(str, enum.Enum):
    """Delivery priority requested from the notification collaborator."""

    HIGH = "high"
    MAX = "max"
