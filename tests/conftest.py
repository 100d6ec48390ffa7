# tests/conftest.py
import os
import tempfile
import pytest

# Keep the app's default engine off the developer's real database file
os.environ.setdefault("DATABASE_URL", "sqlite://")

from fastapi.testclient import TestClient
from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker

from fooddelivery.main import app
from fooddelivery.db import Base, get_db
from fooddelivery.models import Combo, Restaurant
from fooddelivery import settings


# --- Temporary SQLite DB file for the whole test session ---
@pytest.fixture(scope="session")
def tmp_db_url():
    fd, path = tempfile.mkstemp(suffix=".db")
    os.close(fd)
    url = f"sqlite:///{path}"
    yield url
    try:
        os.remove(path)
    except OSError:
        pass


@pytest.fixture(scope="session")
def engine(tmp_db_url):
    eng = create_engine(tmp_db_url, connect_args={"check_same_thread": False}, future=True)
    Base.metadata.create_all(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture(scope="function")
def db_session(engine):
    TestingSession = sessionmaker(bind=engine, autocommit=False, autoflush=False, future=True)
    db = TestingSession()
    try:
        yield db
    finally:
        db.rollback()
        db.close()


# --- Override FastAPI's DB dependency to use our test session ---
@pytest.fixture(autouse=True)
def override_get_db(db_session):
    def _get_db():
        try:
            yield db_session
        finally:
            pass
    app.dependency_overrides[get_db] = _get_db
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {settings.API_TOKEN}"}


def _clear_all(db):
    db.execute(text("DELETE FROM combos"))
    db.execute(text("DELETE FROM restaurants"))
    db.commit()


SPICE_HUB_SNAPSHOT = {
    "_id": "R1",
    "name": "Spice Hub",
    "cuisine": "Indian",
    "location": "Hyderabad",
    "rating": 4.4,
}


@pytest.fixture
def seed_sample(db_session):
    """
    Two restaurants and four combos covering every stored restaurant_id shape:
      c1: plain id                      "R1"
      c2: embedded restaurant document  {"_id": "R1", ...}
      c3: extended-JSON _id             {"_id": {"$oid": "R2"}, ...}
      c4: document without an _id       {"name": "Ghost Kitchen"}
    """
    _clear_all(db_session)

    db_session.add_all([
        Restaurant(restaurant_id="R1", name="Spice Hub", cuisine="Indian",
                   location="Hyderabad", rating=4.4, owner_id="O1"),
        Restaurant(restaurant_id="R2", name="Wok Express", cuisine="Chinese",
                   location="Chennai", rating=4.1, owner_id="O2"),
    ])
    db_session.commit()

    db_session.add_all([
        Combo(combo_id="c1", name="Family Feast", description="Biryani for four",
              restaurant_id="R1", items=[{"name": "Biryani", "quantity": 2, "price": 250}],
              original_price=600, combo_price=499, discount=17, category="family",
              tags=["biryani"], is_featured=True),
        Combo(combo_id="c2", name="Couple Treat", description="Two thalis",
              restaurant_id=dict(SPICE_HUB_SNAPSHOT), items="2x Thali, 2x Lassi",
              original_price=500, combo_price=399, discount=20, category="couple",
              tags=["thali", "lassi"]),
        Combo(combo_id="c3", name="Wok Box", description="Noodles and rice",
              restaurant_id={"_id": {"$oid": "R2"}, "name": "Wok Express"},
              items="1x Noodles, 1x Fried Rice", original_price=300, combo_price=249,
              discount=17, category="individual"),
        Combo(combo_id="c4", name="Mystery Meal", description="Chef's choice",
              restaurant_id={"name": "Ghost Kitchen"}, items="1x Surprise",
              original_price=200, combo_price=150, discount=25, category="special"),
    ])
    db_session.commit()


@pytest.fixture
def seed_clean(db_session):
    """Like seed_sample minus the combo that can't be repaired."""
    _clear_all(db_session)
    db_session.add(Restaurant(restaurant_id="R1", name="Spice Hub", cuisine="Indian",
                              location="Hyderabad", owner_id="O1"))
    db_session.add_all([
        Combo(combo_id="c1", name="Family Feast", description="Biryani for four",
              restaurant_id="R1", items="4x Biryani", original_price=600, combo_price=499),
        Combo(combo_id="c2", name="Couple Treat", description="Two thalis",
              restaurant_id=dict(SPICE_HUB_SNAPSHOT), items="2x Thali",
              original_price=500, combo_price=399),
    ])
    db_session.commit()
