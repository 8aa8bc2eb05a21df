import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from restaurant_pos.core import Base
from restaurant_pos.database import get_db
from restaurant_pos.dependencies import sessions
from restaurant_pos.main import app
from restaurant_pos.models import models  # noqa: F401
from restaurant_pos.notifications import NotificationManager, get_notification_manager
from restaurant_pos.user_management import insert_initial_users_if_needed

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
    future=True
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, future=True)


class FakeTimer:
    """Stands in for threading.Timer so tests decide when a notification fires."""

    created = []

    def __init__(self, interval, function, args=None):
        self.interval = interval
        self.function = function
        self.args = args or []
        self.daemon = False
        self.started = False
        self.cancelled = False
        FakeTimer.created.append(self)

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        if not self.cancelled:
            self.function(*self.args)


@pytest.fixture
def db_session():
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def notifier():
    FakeTimer.created = []
    return NotificationManager(delay=1, timer_factory=FakeTimer)


@pytest.fixture
def client(db_session, notifier):
    insert_initial_users_if_needed(db_session)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notification_manager] = lambda: notifier
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
        sessions.clear()


def login(client, username, password):
    response = client.post("/auth/login", json={"username": username, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
def manager(client):
    return login(client, "manager", "manager123")


@pytest.fixture
def staff(client):
    return login(client, "staff", "staff123")


@pytest.fixture
def cashier(client):
    return login(client, "cashier", "cashier123")


@pytest.fixture
def make_product(client, manager):
    def _make(name="Tomatoes", quantity=50, purchase_price=1.5, selling_price=3.0, low_stock_threshold=10):
        response = client.post("/products/", headers=manager, json={
            "name": name,
            "quantity": quantity,
            "purchase_price": purchase_price,
            "selling_price": selling_price,
            "low_stock_threshold": low_stock_threshold,
        })
        assert response.status_code == 201, response.text
        return response.json()
    return _make
