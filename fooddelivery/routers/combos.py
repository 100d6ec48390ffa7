import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session

from fooddelivery.db import get_db
from fooddelivery.models import COMBO_CATEGORIES, Combo, Restaurant
from fooddelivery.normalizers import ref_id
from fooddelivery.repositories import create_combo, list_combos
from fooddelivery.security import require_token

log = logging.getLogger(__name__)

# --------------------------------------------------------------------
# Router setup
# --------------------------------------------------------------------
router = APIRouter(prefix="/api", tags=["combos"])


# Request schema: camelCase on the wire, as the web front end sends it
class ComboCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    description: Optional[str] = None
    restaurant_id: Any = Field(None, alias="restaurantId")
    items: Union[List[Any], str, None] = None
    combo_price: Optional[float] = Field(None, alias="comboPrice", ge=0)
    original_price: Optional[float] = Field(None, alias="originalPrice", ge=0)
    image: Optional[str] = None
    category: str = "special"
    tags: List[str] = Field(default_factory=list)
    is_featured: bool = Field(False, alias="isFeatured")
    is_active: bool = Field(True, alias="isActive")
    valid_until: Optional[datetime] = Field(None, alias="validUntil")
    max_orders: Optional[int] = Field(None, alias="maxOrders", ge=1)


def combo_to_dict(c: Combo) -> Dict[str, Any]:
    """Serialize a combo; restaurant_id is reported as the id whatever shape it is stored in."""
    return {
        "combo_id": c.combo_id,
        "name": c.name,
        "description": c.description,
        "restaurant_id": ref_id(c.restaurant_id),
        "items": c.items,
        "original_price": c.original_price,
        "combo_price": c.combo_price,
        "discount": c.discount,
        "savings": c.savings,
        "savings_percentage": c.savings_percentage,
        "image": c.image,
        "category": c.category,
        "tags": c.tags or [],
        "is_featured": c.is_featured,
        "is_active": c.is_active,
        "valid_until": c.valid_until,
        "max_orders": c.max_orders,
        "current_orders": c.current_orders,
        "created_at": c.created_at,
    }


@router.get("/combos")
def get_combos(
    restaurant_id: Optional[str] = Query(None, alias="restaurantId"),
    is_featured: Optional[bool] = Query(None, alias="isFeatured"),
    category: Optional[str] = Query(None),
    is_active: bool = Query(True, alias="isActive"),
    limit: int = Query(20, ge=1, le=200),
    skip: int = Query(0, ge=0),
    db: Session = Depends(get_db),
) -> List[Dict[str, Any]]:
    """List valid combos; featured first, then newest."""
    rows = list_combos(
        db,
        restaurant_id=restaurant_id,
        is_featured=is_featured,
        category=category,
        is_active=is_active,
        limit=limit,
        skip=skip,
    )
    return [combo_to_dict(c) for c in rows]


@router.get("/combos/{combo_id}")
def get_combo(combo_id: str, db: Session = Depends(get_db)) -> Dict[str, Any]:
    c = db.get(Combo, combo_id)
    if not c:
        raise HTTPException(404, "Combo not found")
    return combo_to_dict(c)


@router.post("/combos", status_code=201)
def post_combo(
    body: ComboCreate,
    db: Session = Depends(get_db),
    _token: str = Depends(require_token),
) -> Dict[str, Any]:
    """
    Create a combo.

    Requires a bearer token. `restaurantId` may be the id or a restaurant
    object with an `_id`; either way only the id is stored.
    """
    rid = ref_id(body.restaurant_id)
    if not body.name or not body.description or rid is None or not body.items or not body.combo_price:
        log.info("combo rejected: missing required fields (name=%r restaurant_id=%r)", body.name, rid)
        raise HTTPException(400, "Missing required fields")
    if body.category not in COMBO_CATEGORIES:
        raise HTTPException(400, f"category must be one of {', '.join(COMBO_CATEGORIES)}")

    restaurant = db.get(Restaurant, str(rid))
    if restaurant is None:
        raise HTTPException(404, "Restaurant not found")

    data = body.model_dump(exclude={"restaurant_id", "image"}, exclude_none=True)
    data["name"] = body.name.strip()
    data["description"] = body.description.strip()
    data["restaurant_id"] = restaurant.restaurant_id
    if body.image:
        data["image"] = body.image

    combo = create_combo(db, data)
    return combo_to_dict(combo)
