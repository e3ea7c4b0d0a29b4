"""Story 2.2: Logged event categories."""

import enum


class MealType(str, enum.Enum):
    """Meal category chosen when logging food."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"
    DRINK = "drink"
    OTHER = "other"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class InsulinType(str, enum.Enum):
    """Insulin action profile of a logged dose."""

    RAPID = "rapid"
    LONG = "long"
    OTHER = "other"

    @property
    def label(self) -> str:
        return INSULIN_TYPE_LABELS[self]


INSULIN_TYPE_LABELS: dict[InsulinType, str] = {
    InsulinType.RAPID: "Rapid-acting",
    InsulinType.LONG: "Long-acting",
    InsulinType.OTHER: "Other",
}

# Doses whose action fits the 4-hour post-dose window
RESPONSE_INSULIN_TYPES = frozenset({InsulinType.RAPID, InsulinType.OTHER})
