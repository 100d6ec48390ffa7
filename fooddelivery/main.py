from contextlib import asynccontextmanager
import logging

from fastapi import Depends, FastAPI
from sqlalchemy.orm import Session

from fooddelivery.db import engine, Base, check_connection, get_db
from fooddelivery.exceptions import ConnectivityError
from fooddelivery.routers.combos import router as combos_router
from fooddelivery.routers.maintenance import router as maintenance_router
from fooddelivery.routers.restaurants import router as restaurants_router
from fooddelivery.setup_logging import setup_logging
from fooddelivery import models  # noqa: F401  (register tables on Base)

log = logging.getLogger(__name__)

# --------------------------------------------------------------------
# App bootstrap
# --------------------------------------------------------------------
setup_logging() # Init Logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables on startup (no-op when they already exist)."""
    Base.metadata.create_all(bind=engine)
    yield


app = FastAPI(title="Food Delivery API", lifespan=lifespan)


# --------------------------------------------------------------------
# Routes
# --------------------------------------------------------------------
@app.get("/healthz")
def health(db: Session = Depends(get_db)):
    """
    Health probe.
    Returns:
      - ok: True if the app is alive
      - db_ok: True when the data store answers a trivial query
      - db_error: the connection error, if any
    """
    try:
        check_connection(db)
        db_ok, db_error = True, None
    except ConnectivityError as e:
        log.warning("health check: %s", e)
        db_ok, db_error = False, e.reason
    return {"ok": True, "service": "fooddelivery", "db_ok": db_ok, "db_error": db_error}


# Register API routers:
app.include_router(restaurants_router)
app.include_router(combos_router)
app.include_router(maintenance_router)
