from typing import Any, Dict, List
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from fooddelivery.db import get_db
from fooddelivery.models import Restaurant
from fooddelivery.repositories import list_restaurants

router = APIRouter(prefix="/api", tags=["restaurants"])


def _restaurant_to_dict(r: Restaurant) -> Dict[str, Any]:
    return {
        "restaurant_id": r.restaurant_id,
        "name": r.name,
        "cuisine": r.cuisine,
        "location": r.location,
        "rating": r.rating,
        "is_active": r.is_active,
    }


@router.get("/restaurants")
def get_restaurants(
    include_inactive: bool = Query(False, description="Also list deactivated restaurants"),
    db: Session = Depends(get_db),
) -> List[Dict[str, Any]]:
    """List restaurants. Also serves as the smoke test's liveness probe."""
    return [_restaurant_to_dict(r) for r in list_restaurants(db, include_inactive=include_inactive)]
