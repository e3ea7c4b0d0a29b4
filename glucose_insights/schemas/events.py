"""Story 2.2: Food and insulin event schemas.

Records created, edited and deleted by the user through the event logs.
The engine only reads them.
"""

import uuid

from pydantic import BaseModel, ConfigDict, Field

from glucose_insights.models.events import InsulinType, MealType


class FoodEvent(BaseModel):
    """A logged meal, snack or drink."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str = ""
    carbs: float = Field(..., ge=0, description="Carbohydrate grams")
    calories: int | None = Field(default=None, ge=0)
    meal_type: MealType = MealType.OTHER
    timestamp_ms: int = Field(..., gt=0, description="Epoch milliseconds")
    note: str = ""

    @property
    def display_name(self) -> str:
        """Name to show in summaries, falling back to the meal category."""
        return self.name.strip() or self.meal_type.label


class InsulinEvent(BaseModel):
    """A logged insulin dose."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    units: float = Field(..., ge=0, description="Insulin units")
    insulin_type: InsulinType = InsulinType.RAPID
    timestamp_ms: int = Field(..., gt=0, description="Epoch milliseconds")
    note: str = ""
