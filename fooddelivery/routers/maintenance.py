from typing import Any, Dict

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from fooddelivery.db import get_db
from fooddelivery.maintenance import normalize
from fooddelivery.repositories import ComboCollection
from fooddelivery.security import require_token
from fooddelivery.settings import REPAIR_BATCH_SIZE

router = APIRouter(prefix="/api/maintenance", tags=["maintenance"])


@router.post("/repair-combos")
def repair_combos(
    batch_size: int = Query(REPAIR_BATCH_SIZE, ge=1, le=10000),
    db: Session = Depends(get_db),
    _token: str = Depends(require_token),
) -> Dict[str, Any]:
    """
    Rewrite embedded restaurant documents in combos to plain ids and
    return the repair report. Safe to call repeatedly.
    """
    report = normalize(ComboCollection(db), batch_size=batch_size)
    return {"ok": report.ok, **report.model_dump()}
