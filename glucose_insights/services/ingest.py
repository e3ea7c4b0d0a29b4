"""Story 2.3: Record ingestion.

Turns raw records (as read from storage or a vendor pull) into typed
records. A malformed record is logged and dropped; it never aborts the
batch. Also merges freshly pulled glucose samples into the stored log.
"""

from collections.abc import Iterable, Mapping
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from glucose_insights.config import settings
from glucose_insights.logging_config import get_logger
from glucose_insights.schemas.events import FoodEvent, InsulinEvent
from glucose_insights.schemas.glucose import GlucoseSample
from glucose_insights.services.alignment import require_snapshot, sort_samples

logger = get_logger(__name__)

MS_PER_DAY = 86_400_000

RecordT = TypeVar("RecordT", bound=BaseModel)


def _summarize(error: ValidationError) -> str:
    """One-line summary of a validation error, e.g. 'units: ...; timestamp_ms: ...'."""
    parts = []
    for err in error.errors():
        location = ".".join(str(p) for p in err["loc"]) or "record"
        parts.append(f"{location}: {err['msg']}")
    return "; ".join(parts)


def parse_records(
    model: type[RecordT],
    raw_records: Iterable[Mapping[str, Any]],
    kind: str,
) -> list[RecordT]:
    """Validate raw records into model instances, dropping malformed ones.

    Args:
        model: Target pydantic model.
        raw_records: Raw dict records.
        kind: Record kind used in log lines and errors.

    Returns:
        The valid records, in input order.

    Raises:
        MissingSnapshotError: If raw_records is None.
    """
    require_snapshot(kind, raw_records)

    parsed: list[RecordT] = []
    discarded = 0
    for position, raw in enumerate(raw_records):
        try:
            parsed.append(model.model_validate(raw))
        except ValidationError as e:
            discarded += 1
            logger.warning(
                "Discarded malformed record",
                kind=kind,
                index=position,
                error=_summarize(e),
            )

    if discarded:
        logger.info(
            "Parsed records with discards",
            kind=kind,
            accepted=len(parsed),
            discarded=discarded,
        )
    return parsed


def parse_glucose_samples(raw_records: Iterable[Mapping[str, Any]]) -> list[GlucoseSample]:
    """Validate raw glucose records."""
    return parse_records(GlucoseSample, raw_records, "glucose")


def parse_food_events(raw_records: Iterable[Mapping[str, Any]]) -> list[FoodEvent]:
    """Validate raw food log records."""
    return parse_records(FoodEvent, raw_records, "food")


def parse_insulin_events(raw_records: Iterable[Mapping[str, Any]]) -> list[InsulinEvent]:
    """Validate raw insulin log records."""
    return parse_records(InsulinEvent, raw_records, "insulin")


def merge_glucose_samples(
    existing: Iterable[GlucoseSample],
    incoming: Iterable[GlucoseSample],
    now_ms: int,
    retention_days: int | None = None,
) -> list[GlucoseSample]:
    """Merge a fresh pull into the stored glucose log.

    Samples are keyed by timestamp; a re-pulled timestamp keeps the stored
    sample. Samples older than the retention window are pruned.

    Args:
        existing: Stored glucose log.
        incoming: Newly pulled samples.
        now_ms: Current epoch milliseconds.
        retention_days: Days of history to keep (defaults to
            settings.glucose_retention_days).

    Returns:
        The merged log in chronological order.
    """
    require_snapshot("glucose", existing)
    require_snapshot("glucose", incoming)

    by_timestamp: dict[int, GlucoseSample] = {}
    for sample in existing:
        by_timestamp.setdefault(sample.timestamp_ms, sample)

    added = 0
    for sample in incoming:
        if sample.timestamp_ms not in by_timestamp:
            by_timestamp[sample.timestamp_ms] = sample
            added += 1

    if retention_days is None:
        retention_days = settings.glucose_retention_days

    cutoff_ms = now_ms - retention_days * MS_PER_DAY
    kept = [s for s in by_timestamp.values() if s.timestamp_ms >= cutoff_ms]

    logger.debug(
        "Merged glucose samples",
        added=added,
        pruned=len(by_timestamp) - len(kept),
        total=len(kept),
    )
    return sort_samples(kept)
