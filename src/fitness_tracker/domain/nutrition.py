"""Nutrition domain models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class NutrientProfile:
    """Normalized nutrient values for a food."""

    calories: float
    protein: float
    carbs: float
    fat: float
    fiber: float
    sugar: float


@dataclass(frozen=True)
class FoodItem:
    """Food search result from FDC."""

    id: str
    source: str
    fdc_id: int
    name: str
    brand: str | None
    category: str | None
    serving_size: float
    serving_unit: str
    nutrients: NutrientProfile


@dataclass(frozen=True)
class FoodPortion:
    """Household portion of a food."""

    amount: float | None
    unit: str
    gram_weight: float | None


@dataclass(frozen=True)
class FoodDetails:
    """Full food details with portions."""

    food: FoodItem
    portions: list[FoodPortion]
