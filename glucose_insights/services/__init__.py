# Business Logic Services
from glucose_insights.services.ai_prompt import SYSTEM_PROMPT, build_insight_prompt
from glucose_insights.services.alert_notifier import AlertDispatcher
from glucose_insights.services.alignment import MissingSnapshotError, closest_sample
from glucose_insights.services.cooldown_store import (
    CooldownStore,
    InMemoryCooldownStore,
    JsonFileCooldownStore,
)
from glucose_insights.services.ingest import (
    merge_glucose_samples,
    parse_food_events,
    parse_glucose_samples,
    parse_insulin_events,
)
from glucose_insights.services.insights import analyze
from glucose_insights.services.predictive_alerts import (
    calculate_projection,
    evaluate_alerts,
)

__all__ = [
    "SYSTEM_PROMPT",
    "build_insight_prompt",
    "AlertDispatcher",
    "MissingSnapshotError",
    "closest_sample",
    "CooldownStore",
    "InMemoryCooldownStore",
    "JsonFileCooldownStore",
    "merge_glucose_samples",
    "parse_food_events",
    "parse_glucose_samples",
    "parse_insulin_events",
    "analyze",
    "calculate_projection",
    "evaluate_alerts",
]
