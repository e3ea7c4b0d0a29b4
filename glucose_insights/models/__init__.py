# Domain Enums
from glucose_insights.models.alert import AlertKind, AlertUrgency
from glucose_insights.models.events import InsulinType, MealType
from glucose_insights.models.glucose import TrendDirection

__all__ = [
    "AlertKind",
    "AlertUrgency",
    "InsulinType",
    "MealType",
    "TrendDirection",
]
