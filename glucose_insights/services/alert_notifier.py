"""Story 6.3: Alert text and dispatch seam.

Formats the title and body of projected glucose alerts and defines the
interface of the notification collaborator that delivers them. Delivery
itself (push channels, permissions, sounds) lives outside the engine.
"""

from typing import Protocol

from glucose_insights.models.alert import AlertKind
from glucose_insights.schemas.alert import AlertConfig, AlertRequest, GlucoseProjection

# Alert kind -> headline
ALERT_HEADLINE: dict[AlertKind, str] = {
    AlertKind.HIGH: "\u26a0\ufe0f High Glucose Projected",  # ⚠️
    AlertKind.LOW: "\U0001f6a8 Low Glucose Projected",  # 🚨
}


class AlertDispatcher(Protocol):
    """Notification collaborator that delivers fired alerts."""

    def dispatch(self, alert: AlertRequest) -> None:
        """Deliver one alert. May raise; the engine logs and carries on."""
        ...


def trend_description(trend_rate: float | None) -> str:
    """Convert a trend rate (mg/dL/min) to a human-readable description."""
    if trend_rate is None:
        return "unknown"
    if trend_rate > 3.0:
        return "\u2191\u2191 rising fast"
    if trend_rate > 1.0:
        return "\u2191 rising"
    if trend_rate > 0.5:
        return "\u2197 rising slowly"
    if trend_rate >= -0.5:
        return "\u2192 stable"
    if trend_rate >= -1.0:
        return "\u2198 falling slowly"
    if trend_rate >= -3.0:
        return "\u2193 falling"
    return "\u2193\u2193 falling fast"


def build_alert_title(kind: AlertKind) -> str:
    """Headline for an alert kind."""
    return ALERT_HEADLINE[kind]


def build_alert_body(
    kind: AlertKind,
    projection: GlucoseProjection,
    config: AlertConfig,
) -> str:
    """Format the notification body for a fired alert.

    Args:
        kind: Which threshold was crossed.
        projection: The projection that triggered the alert.
        config: Alert configuration (for the threshold shown to the user).

    Returns:
        Plain-text body.
    """
    current = projection.current_value
    projected = int(projection.projected_value)
    window = projection.projection_minutes

    if kind == AlertKind.HIGH:
        direction = "rising"
        target = f"target <{config.high_threshold}"
    else:
        direction = "dropping"
        target = f"target >{config.low_threshold}"

    return (
        f"Glucose is {current} and {direction}. "
        f"Projected to reach {projected} mg/dL in {window} min ({target}). "
        f"Trend: {trend_description(projection.rate_per_minute)}"
    )
