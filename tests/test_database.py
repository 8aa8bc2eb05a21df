"""Startup initialization tests."""

from restaurant_pos.core import Base
from restaurant_pos.database import init_db
from restaurant_pos.models.models import UserORM

from conftest import engine, TestingSessionLocal


def test_init_db_creates_tables_and_seeds_users():
    try:
        init_db(bind=engine, session_factory=TestingSessionLocal)
        init_db(bind=engine, session_factory=TestingSessionLocal)

        db = TestingSessionLocal()
        try:
            assert sorted(u.username for u in db.query(UserORM).all()) == ["cashier", "manager", "staff"]
        finally:
            db.close()
    finally:
        Base.metadata.drop_all(bind=engine)


def test_root(client):
    assert client.get("/").json() == {"message": "Restaurant Inventory Backend Running!"}
