"""Food search endpoints backed by USDA FDC."""

import logging
from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from fitness_tracker.api.auth import require_user
from fitness_tracker.domain.nutrition import FoodDetails, FoodItem

router = APIRouter(
    prefix="/api/foods", tags=["foods"], dependencies=[Depends(require_user)]
)
_logger = logging.getLogger(__name__)


@router.get("/search")
async def search_foods(
    request: Request,
    query: str = "",
    page_size: int = Query(default=25, alias="pageSize", ge=1, le=200),
) -> dict[str, object]:
    """Search foods; upstream failures yield an empty result."""
    container = request.app.state.container
    if not container.settings.food_search_enabled:
        _logger.warning("Food search requested but no FDC API key is configured")
        return {"foods": []}
    try:
        foods = await container.nutrition_service.search(query, limit=page_size)
    except Exception:
        _logger.exception("USDA search failed for query %r", query)
        foods = []
    return {"foods": [_serialize_food(food) for food in foods]}


@router.get("/{food_id}")
async def food_detail(food_id: str, request: Request) -> dict[str, object]:
    """Return a food with nutrients and household portions."""
    source, _, raw_id = food_id.partition("_")
    if source != "usda" or not (raw_id.isascii() and raw_id.isdigit()):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid food ID"
        )
    container = request.app.state.container
    if not container.settings.food_search_enabled:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Food lookup is not configured",
        )
    try:
        details = await container.nutrition_service.get_food(int(raw_id))
    except Exception as exc:
        _logger.exception("Error fetching food details for %s", food_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch food details",
        ) from exc
    return _serialize_details(details)


def _serialize_food(food: FoodItem) -> dict[str, object]:
    return {
        "id": food.id,
        "source": food.source,
        "fdcId": food.fdc_id,
        "name": food.name,
        "brand": food.brand,
        "category": food.category,
        "servingSize": food.serving_size,
        "servingUnit": food.serving_unit,
        "nutrients": asdict(food.nutrients),
    }


def _serialize_details(details: FoodDetails) -> dict[str, object]:
    payload = _serialize_food(details.food)
    payload["portions"] = [
        {
            "amount": portion.amount,
            "unit": portion.unit,
            "gramWeight": portion.gram_weight,
        }
        for portion in details.portions
    ]
    return payload
