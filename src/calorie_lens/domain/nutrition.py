"""Nutrition estimate returned by food image analysis."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt


class NutritionEstimate(BaseModel):
    """Aggregate nutrition estimate for the food shown in one image.

    Only ``name`` and ``calories`` are validated. Optional fields keep exactly
    what the model sent, whatever their type: absent stays absent, ints stay
    ints, unknown keys are kept as extras.
    """

    model_config = ConfigDict(
        extra="allow", frozen=True, populate_by_name=True, allow_inf_nan=False
    )

    name: str = Field(min_length=1)
    calories: StrictInt | StrictFloat
    protein: Any = None
    carbs: Any = None
    fat: Any = None
    fiber: Any = None
    confidence: Any = None
    serving_size: Any = Field(default=None, alias="servingSize")

    def to_payload(self) -> dict[str, object]:
        """Return the JSON payload in the wire field names."""
        return self.model_dump(by_alias=True, exclude_unset=True)
