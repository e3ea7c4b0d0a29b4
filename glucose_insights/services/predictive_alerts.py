"""Story 6.2: Predictive Alert Engine.

Projects glucose a configurable number of minutes ahead from the latest
samples, detects high/low threshold crossings, and holds each alert kind
in cooldown for 30 minutes after it fires so the user is not spammed.

The cooldown state is two last-fired timestamps. Whether a kind is
eligible or cooling down is derived from them on every pass; there is no
running timer.
"""

import time
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from glucose_insights.logging_config import correlation_scope, get_logger
from glucose_insights.models.alert import AlertKind, AlertUrgency
from glucose_insights.schemas.alert import (
    AlertConfig,
    AlertCooldownState,
    AlertRequest,
    GlucoseProjection,
)
from glucose_insights.schemas.glucose import GlucoseSample
from glucose_insights.services.alert_notifier import (
    AlertDispatcher,
    build_alert_body,
    build_alert_title,
)
from glucose_insights.services.alignment import (
    MS_PER_MINUTE,
    minutes,
    require_snapshot,
    sort_samples,
)
from glucose_insights.services.cooldown_store import CooldownStore

logger = get_logger(__name__)

# Only the newest samples feed the rate estimate
RECENT_SAMPLE_COUNT = 4

# Minimum gap between two alerts of the same kind
ALERT_COOLDOWN_MINUTES = 30

# Projected highs this far above the threshold get maximum urgency
URGENT_HIGH_MARGIN = 40  # mg/dL


@dataclass
class AlertCandidate:
    """A threshold crossing before the cooldown check."""

    kind: AlertKind
    urgency: AlertUrgency


def segment_rate(a: GlucoseSample, b: GlucoseSample) -> float | None:
    """Slope between two samples in mg/dL per minute.

    Returns None when b is not strictly later than a.
    """
    elapsed_minutes = (b.timestamp_ms - a.timestamp_ms) / MS_PER_MINUTE
    if elapsed_minutes <= 0:
        return None
    return (b.value - a.value) / elapsed_minutes


def weighted_rate(samples: Sequence[GlucoseSample]) -> float | None:
    """Rate of change from the most recent samples.

    The newest interval is weighted 2:1 against the one before it when a
    third sample is available.

    Args:
        samples: Chronologically sorted samples, oldest first.

    Returns:
        mg/dL per minute, or None with fewer than 2 samples or any
        non-positive interval.
    """
    n = len(samples)
    if n < 2:
        return None

    r1 = segment_rate(samples[n - 2], samples[n - 1])
    if r1 is None:
        return None
    if n < 3:
        return r1

    r2 = segment_rate(samples[n - 3], samples[n - 2])
    if r2 is None:
        return None
    return (2 * r1 + r2) / 3


def calculate_projection(
    samples: Sequence[GlucoseSample],
    projection_minutes: int,
) -> GlucoseProjection | None:
    """Linear projection from the newest samples.

    Args:
        samples: Recent samples in any order.
        projection_minutes: How far ahead to project.

    Returns:
        GlucoseProjection, or None when no rate can be computed.
    """
    recent = sort_samples(samples)[-RECENT_SAMPLE_COUNT:]
    rate = weighted_rate(recent)
    if rate is None:
        return None

    current = recent[-1].value
    return GlucoseProjection(
        current_value=current,
        rate_per_minute=rate,
        projection_minutes=projection_minutes,
        projected_value=current + rate * projection_minutes,
    )


def check_threshold_crossings(
    projection: GlucoseProjection,
    config: AlertConfig,
) -> list[AlertCandidate]:
    """Check the projected value against the enabled thresholds.

    Args:
        projection: The current projection.
        config: Alert configuration.

    Returns:
        Zero or one candidate per kind.
    """
    candidates: list[AlertCandidate] = []
    projected = projection.projected_value

    if config.predict_high_enabled and projected >= config.high_threshold:
        urgency = (
            AlertUrgency.MAX
            if projected >= config.high_threshold + URGENT_HIGH_MARGIN
            else AlertUrgency.HIGH
        )
        candidates.append(AlertCandidate(kind=AlertKind.HIGH, urgency=urgency))

    if config.predict_low_enabled and projected <= config.low_threshold:
        candidates.append(AlertCandidate(kind=AlertKind.LOW, urgency=AlertUrgency.MAX))

    return candidates


def is_cooling_down(state: AlertCooldownState, kind: AlertKind, now_ms: int) -> bool:
    """True while the kind fired within the last 30 minutes."""
    last_fired = state.last_fired(kind)
    if last_fired is None:
        return False
    return now_ms - last_fired <= minutes(ALERT_COOLDOWN_MINUTES)


def evaluate_alerts(
    samples: Iterable[GlucoseSample],
    config: AlertConfig,
    cooldown_store: CooldownStore,
    dispatcher: AlertDispatcher | None = None,
    now_ms: int | None = None,
) -> list[AlertRequest]:
    """Run one alert pass over freshly pulled samples.

    This is the entry point called on every data pull. It:
    1. Takes the newest 4 samples
    2. Computes the weighted rate and projection
    3. Checks the enabled high/low thresholds
    4. Suppresses kinds still in cooldown
    5. Records fired kinds in the cooldown store
    6. Hands each fired alert to the dispatcher

    Args:
        samples: Recent glucose samples in any order.
        config: Alert configuration snapshot.
        cooldown_store: Persistent last-fired timestamps.
        dispatcher: Notification collaborator (optional).
        now_ms: Current epoch milliseconds (defaults to the wall clock).

    Returns:
        The alerts fired during this pass.

    Raises:
        MissingSnapshotError: If samples is None.
    """
    require_snapshot("glucose", samples)
    samples = list(samples)

    with correlation_scope():
        if not config.notifications_enabled:
            logger.debug("Notifications disabled, skipping alert pass")
            return []

        projection = calculate_projection(samples, config.projection_minutes)
        if projection is None:
            logger.debug("Rate undefined, projection suppressed", samples=len(samples))
            return []

        logger.debug(
            "Projected glucose",
            current=projection.current_value,
            rate=round(projection.rate_per_minute, 2),
            minutes=projection.projection_minutes,
            projected=round(projection.projected_value, 1),
        )

        candidates = check_threshold_crossings(projection, config)
        if not candidates:
            return []

        if now_ms is None:
            now_ms = int(time.time() * 1000)

        state = cooldown_store.load()
        fired: list[AlertRequest] = []
        for candidate in candidates:
            if is_cooling_down(state, candidate.kind, now_ms):
                logger.debug(
                    "Alert suppressed by cooldown",
                    kind=candidate.kind.value,
                    last_fired_ms=state.last_fired(candidate.kind),
                )
                continue

            fired.append(
                AlertRequest(
                    kind=candidate.kind,
                    title=build_alert_title(candidate.kind),
                    body=build_alert_body(candidate.kind, projection, config),
                    urgency=candidate.urgency,
                    current_value=projection.current_value,
                    projected_value=projection.projected_value,
                    rate_per_minute=projection.rate_per_minute,
                    projection_minutes=projection.projection_minutes,
                    fired_at_ms=now_ms,
                )
            )
            state = state.mark_fired(candidate.kind, now_ms)

        if not fired:
            return []

        cooldown_store.save(state)

        logger.info(
            "Fired projected glucose alerts",
            alert_count=len(fired),
            kinds=[a.kind.value for a in fired],
            projected=round(projection.projected_value, 1),
        )

        if dispatcher is not None:
            for alert in fired:
                try:
                    dispatcher.dispatch(alert)
                except Exception as e:
                    logger.warning(
                        "Alert dispatch failed",
                        kind=alert.kind.value,
                        error=str(e),
                    )

        return fired
