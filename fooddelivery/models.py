import secrets
from datetime import datetime, timezone

from sqlalchemy import Column, String, Integer, Float, Boolean, DateTime, JSON
from .db import Base

COMBO_CATEGORIES = ("family", "couple", "individual", "group", "special")


def new_object_id() -> str:
    """24-hex identifier, same shape as the ids already in production data."""
    return secrets.token_hex(12)


def _utcnow():
    return datetime.now(timezone.utc).replace(tzinfo=None)


def compute_discount(original_price, combo_price) -> int:
    """Percent off the original price, 0 when either price is missing/non-positive."""
    if original_price and combo_price and original_price > 0 and combo_price > 0:
        return round((original_price - combo_price) / original_price * 100)
    return 0


# -----------------------------
# ORM models (tables)
# -----------------------------
class Restaurant(Base):
    __tablename__ = "restaurants"
    restaurant_id = Column(String, primary_key=True, default=new_object_id)
    name          = Column(String, nullable=False)
    cuisine       = Column(String)
    location      = Column(String)
    rating        = Column(Float, default=0)                  # 0..5
    owner_id      = Column(String, index=True)
    is_active     = Column(Boolean, default=True)

    def __repr__(self):
        return f"<Restaurant(restaurant_id={self.restaurant_id}, name={self.name})>"


class Combo(Base):
    __tablename__ = "combos"
    combo_id       = Column(String, primary_key=True, default=new_object_id)
    name           = Column(String, nullable=False)
    description    = Column(String, nullable=False)
    # "mixed" column: canonical value is the restaurant id string, but older
    # rows hold a whole restaurant document here (see maintenance.normalize)
    restaurant_id  = Column(JSON, nullable=False)
    items          = Column(JSON, nullable=False)             # list of items or free text
    original_price = Column(Float, default=0)
    combo_price    = Column(Float, nullable=False)
    discount       = Column(Integer, default=0)               # 0..100
    image          = Column(String, default="images/combo/default-combo.jpg")
    category       = Column(String, default="special")
    tags           = Column(JSON, default=list)
    is_featured    = Column(Boolean, default=False)
    is_active      = Column(Boolean, default=True)
    valid_until    = Column(DateTime)
    max_orders     = Column(Integer)
    current_orders = Column(Integer, default=0)
    created_at     = Column(DateTime, default=_utcnow)
    updated_at     = Column(DateTime, default=_utcnow)            # set by the API only

    @property
    def savings(self) -> float:
        return max(0, (self.original_price or 0) - (self.combo_price or 0))

    @property
    def savings_percentage(self) -> int:
        if self.original_price and self.original_price > 0:
            return round((self.original_price - (self.combo_price or 0)) / self.original_price * 100)
        return 0

    def __repr__(self):
        return f"<Combo(combo_id={self.combo_id}, name={self.name}, restaurant_id={self.restaurant_id!r})>"
