import json
import logging
from copy import deepcopy
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional

from sqlalchemy import JSON, String, or_, select, type_coerce
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from fooddelivery.exceptions import WriteFailure
from fooddelivery.models import Combo, Restaurant, compute_discount
from fooddelivery.normalizers import ref_id

log = logging.getLogger(__name__)

COMBO_FIELDS = [c.name for c in Combo.__table__.columns]
JSON_FIELDS = [c.name for c in Combo.__table__.columns if isinstance(c.type, JSON)]

# set on records whose row could not be decoded; value is the reason
READ_ERROR = "_read_error"


def combo_to_record(c: Combo) -> Dict[str, Any]:
    """Plain-dict copy of a combo row; safe to hand to a normalizer."""
    return {f: deepcopy(getattr(c, f)) for f in COMBO_FIELDS}


class ComboCollection:
    """
    The combo store as seen by batch jobs:
      find_all()            -> every combo as a record dict
      iter_batches(n)       -> the same, n records at a time (keyset paging on combo_id)
      update_by_id(id, {})  -> point update of the given fields only
    """

    def __init__(self, db: Session):
        self.db = db

    def find_all(self) -> List[Dict[str, Any]]:
        return [rec for batch in self.iter_batches() for rec in batch]

    def iter_batches(self, batch_size: int = 500) -> Iterator[List[Dict[str, Any]]]:
        """
        Unreadable rows (a JSON column that doesn't parse) are still yielded,
        as raw records carrying a READ_ERROR message, so one bad row never
        stops the caller.
        """
        if batch_size < 1:
            raise ValueError("batch_size must be >= 1")
        last_id: Optional[str] = None
        while True:
            q = select(Combo).order_by(Combo.combo_id).limit(batch_size)
            if last_id is not None:
                q = q.where(Combo.combo_id > last_id)
            try:
                batch = [combo_to_record(c) for c in self.db.execute(q).scalars().all()]
            except (ValueError, TypeError) as e:
                log.warning("combo batch after %s failed to decode (%s); re-reading row by row", last_id, e)
                batch = self._raw_batch(last_id, batch_size)
            if not batch:
                return
            # read before yielding; the consumer may commit and expire rows
            last_id = batch[-1]["combo_id"]
            yield batch
            if len(batch) < batch_size:
                return

    def _raw_batch(self, last_id: Optional[str], batch_size: int) -> List[Dict[str, Any]]:
        """Same window as iter_batches, but JSON columns come back as text and are parsed per row."""
        cols = [
            type_coerce(c, String).label(c.name) if c.name in JSON_FIELDS else c
            for c in Combo.__table__.columns
        ]
        q = select(*cols).order_by(Combo.combo_id).limit(batch_size)
        if last_id is not None:
            q = q.where(Combo.combo_id > last_id)

        out = []
        for row in self.db.execute(q).mappings():
            rec = dict(row)
            for f in JSON_FIELDS:
                if rec[f] is None:
                    continue
                try:
                    rec[f] = json.loads(rec[f])
                except ValueError as e:
                    log.warning("combo %s (%s): %s is not valid JSON: %s", rec["combo_id"], rec["name"], f, e)
                    rec[READ_ERROR] = f"{f} is not valid JSON: {e}"
                    break
            out.append(rec)
        return out

    def update_by_id(self, combo_id: str, fields: Dict[str, Any]) -> bool:
        """
        Write `fields` onto one combo and commit. Returns False if the combo is gone.
        Raises WriteFailure (after rolling back) if the store rejects the write.
        """
        unknown = set(fields) - set(COMBO_FIELDS) or ({"combo_id"} & set(fields))
        if unknown:
            raise ValueError(f"cannot update fields: {sorted(unknown)}")

        try:
            # per-record savepoint so one bad write doesn’t poison the batch
            with self.db.begin_nested():
                row = self.db.get(Combo, combo_id)
                if row is None:
                    return False
                for k, v in fields.items():
                    setattr(row, k, v)
            self.db.commit()
            return True
        except SQLAlchemyError as e:
            self.db.rollback()
            log.exception("combo update failed: combo_id=%s fields=%s", combo_id, sorted(fields))
            name = fields.get("name")
            raise WriteFailure(combo_id, name, str(e)) from e

    def refresh(self) -> None:
        """Drop cached rows so the next read comes from the store."""
        self.db.expire_all()


# -------------------------------------------------------------------
# Restaurant / combo helpers used by the API
# -------------------------------------------------------------------
def list_restaurants(db: Session, include_inactive: bool = False) -> List[Restaurant]:
    q = db.query(Restaurant)
    if not include_inactive:
        q = q.filter(Restaurant.is_active.is_(True))
    return q.order_by(Restaurant.name).all()


def list_combos(
    db: Session,
    restaurant_id: Optional[str] = None,
    is_featured: Optional[bool] = None,
    category: Optional[str] = None,
    is_active: bool = True,
    limit: int = 20,
    skip: int = 0,
) -> List[Combo]:
    """
    Active, still-valid combos, featured first then newest.
    A restaurant filter matches both the id form and an embedded restaurant
    document, so unrepaired rows are still found.
    """
    now = datetime.now(timezone.utc).replace(tzinfo=None)
    q = db.query(Combo).filter(
        Combo.is_active.is_(is_active),
        or_(Combo.valid_until.is_(None), Combo.valid_until > now),
    )
    if is_featured is not None:
        q = q.filter(Combo.is_featured.is_(is_featured))
    if category and category != "all":
        q = q.filter(Combo.category == category)
    q = q.order_by(Combo.is_featured.desc(), Combo.created_at.desc())

    if restaurant_id is None:
        return q.offset(skip).limit(limit).all()

    # JSON shapes differ per row, so the restaurant match happens here
    matched = [c for c in q.all() if str(ref_id(c.restaurant_id)) == str(restaurant_id)]
    return matched[skip:skip + limit]


def create_combo(db: Session, data: Dict[str, Any]) -> Combo:
    """Insert a combo; `data` is already validated and uses column names."""
    original = data.get("original_price") or 0
    combo = Combo(
        **data,
        discount=compute_discount(original, data.get("combo_price")),
    )
    db.add(combo)
    db.commit()
    db.refresh(combo)
    log.info("combo created: combo_id=%s restaurant_id=%s", combo.combo_id, combo.restaurant_id)
    return combo
