"""Nutrition lookups backed by USDA FDC."""

import asyncio
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

from fitness_tracker.adapters.fdc_client import FdcClient
from fitness_tracker.domain.nutrition import (
    FoodDetails,
    FoodItem,
    FoodPortion,
    NutrientProfile,
)
from fitness_tracker.services.aggregates import number, round_half_up
from fitness_tracker.services.cache import Cache

NUTRIENT_FIELDS = {
    1008: "calories",
    1003: "protein",
    1005: "carbs",
    1004: "fat",
    1079: "fiber",
    2000: "sugar",
}
MIN_QUERY_LENGTH = 2
DEFAULT_SERVING_SIZE = 100
DEFAULT_SERVING_UNIT = "g"

_logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable


def extract_nutrients(
    nutrients: Iterable[Mapping[str, object]] | None,
) -> NutrientProfile:
    """Map FDC `{nutrientId, value}` rows onto the six tracked nutrients.

    Unknown ids are ignored, missing values count as 0 and every mapped value
    is rounded to one decimal place.
    """
    values: dict[str, float] = dict.fromkeys(NUTRIENT_FIELDS.values(), 0)
    for nutrient in nutrients or []:
        if not isinstance(nutrient, Mapping):
            continue
        field = NUTRIENT_FIELDS.get(_nutrient_id(nutrient.get("nutrientId")))
        if field:
            values[field] = round_half_up(number(nutrient.get("value")), 1)
    return NutrientProfile(**values)


@dataclass
class NutritionService:
    """Service for food lookups with caching."""

    fdc_client: FdcClient
    cache: Cache
    search_ttl_seconds: int = 3600
    food_ttl_seconds: int = 86400
    debug: bool = False
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3

    async def search(self, query: str, limit: int = 25) -> list[FoodItem]:
        """Search FDC foods with caching."""
        if len(query.strip()) < MIN_QUERY_LENGTH:
            return []
        cache_key = f"fdc:search:{query.lower()}:{limit}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, list):
            return cached

        payload = await self._call_with_retry(
            lambda: self.fdc_client.search_foods(query, page_size=limit),
            action="search",
        )
        foods = [
            _parse_food(food)
            for food in payload.get("foods") or []
            if isinstance(food, Mapping) and food.get("fdcId") is not None
        ]
        self.cache.set(cache_key, foods, ttl_seconds=self.search_ttl_seconds)
        if self.debug:
            _logger.info("Nutrition search FDC: query=%s results=%s", query, len(foods))
        return foods

    async def get_food(self, fdc_id: int) -> FoodDetails:
        """Retrieve food details and portions from FDC."""
        cache_key = f"fdc:food:{fdc_id}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, FoodDetails):
            return cached

        payload = await self._call_with_retry(
            lambda: self.fdc_client.get_food(fdc_id),
            action=f"get_food:{fdc_id}",
        )
        details = FoodDetails(
            food=_parse_food(payload),
            portions=[
                _parse_portion(portion)
                for portion in payload.get("foodPortions") or []
            ],
        )
        self.cache.set(cache_key, details, ttl_seconds=self.food_ttl_seconds)
        if self.debug:
            _logger.info("Nutrition food FDC: fdc_id=%s", fdc_id)
        return details

    async def _call_with_retry(
        self, func: "Callable[[], Awaitable[dict[str, object]]]", *, action: str
    ) -> dict[str, object]:
        """Call an async function with a short retry."""
        attempt = 0
        while True:
            try:
                return await func()
            except Exception as exc:
                attempt += 1
                status_code = _status_code_from_exception(exc)
                if self.debug:
                    _logger.warning(
                        "Nutrition %s failed (attempt %s/%s, status=%s): %s",
                        action,
                        attempt,
                        self.retry_attempts + 1,
                        status_code,
                        exc,
                    )
                if attempt > self.retry_attempts:
                    raise
                await asyncio.sleep(self.retry_delay_seconds)


def _nutrient_id(value: object) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.isascii() and value.isdigit():
        return int(value)
    return None


def _status_code_from_exception(exc: Exception) -> str:
    """Extract HTTP status code from an exception, if available."""
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return str(status_code)
    return "n/a"


def _parse_food(food: dict[str, object]) -> FoodItem:
    fdc_id = food["fdcId"]
    return FoodItem(
        id=f"usda_{fdc_id}",
        source="usda",
        fdc_id=fdc_id,
        name=food.get("description", ""),
        brand=food.get("brandName") or food.get("brandOwner") or None,
        category=_category_name(food.get("foodCategory")),
        serving_size=food.get("servingSize") or DEFAULT_SERVING_SIZE,
        serving_unit=food.get("servingSizeUnit") or DEFAULT_SERVING_UNIT,
        nutrients=extract_nutrients(
            _flatten_nutrients(food.get("foodNutrients") or [])
        ),
    )


def _category_name(category: object) -> str | None:
    # Search results carry a plain string, detail payloads an object.
    if isinstance(category, Mapping):
        description = category.get("description")
        return description if isinstance(description, str) else None
    return category if isinstance(category, str) and category else None


def _flatten_nutrients(
    food_nutrients: list[dict[str, object]],
) -> list[dict[str, object]]:
    """Normalize search and detail nutrient shapes to `{nutrientId, value}`."""
    flattened = []
    for nutrient in food_nutrients:
        if not isinstance(nutrient, Mapping):
            continue
        nutrient_info = nutrient.get("nutrient") or {}
        nutrient_id = nutrient.get("nutrientId") or nutrient_info.get("id")
        value = nutrient.get("value")
        if value is None:
            value = nutrient.get("amount")
        flattened.append({"nutrientId": nutrient_id, "value": value})
    return flattened


def _parse_portion(portion: dict[str, object]) -> FoodPortion:
    measure_unit = portion.get("measureUnit") or {}
    return FoodPortion(
        amount=portion.get("amount"),
        unit=portion.get("modifier") or measure_unit.get("name") or "serving",
        gram_weight=portion.get("gramWeight"),
    )
