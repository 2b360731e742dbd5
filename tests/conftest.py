import os

# Settings are read once; point them at test-friendly values before import
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["REDIS_URL"] = ""
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient

from foodtruck_pos.database import Database
from foodtruck_pos.main import create_app
from foodtruck_pos.models.user import UserRole
from foodtruck_pos.schemas.user import UserCreate
from foodtruck_pos.services.user_service import UserService
from foodtruck_pos.tasks.celery_app import celery_app
from foodtruck_pos.utils.cache import CacheService


class FakeRedis:
    """In-memory stand-in for the few Redis commands the cache uses."""

    def __init__(self):
        self.store = {}

    def get(self, key):
        return self.store.get(key)

    def setex(self, key, ttl, value):
        self.store[key] = value

    def delete(self, *keys):
        for key in keys:
            self.store.pop(key, None)

    def ping(self):
        return True


@pytest.fixture(autouse=True)
def celery_eager():
    """Run Celery tasks in-process instead of sending them to a broker."""
    celery_app.conf.task_always_eager = True
    yield
    celery_app.conf.task_always_eager = False


@pytest.fixture(scope="function")
def database():
    """Fresh in-memory database for each test."""
    db = Database("sqlite://")
    db.create_all()

    yield db

    db.drop_all()
    db.dispose()


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def cache(fake_redis):
    return CacheService(fake_redis, ttl=60)


@pytest.fixture(scope="function")
def client(database, cache):
    """Create test client bound to the test database and cache."""
    app = create_app(database=database, cache=cache)

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture(scope="function")
def db_session(database):
    """Create database session for direct database access in tests."""
    session = database.session()

    yield session

    session.close()


@pytest.fixture
def admin_user(db_session):
    return UserService(db_session).create_user(
        UserCreate(username="admin", password="admin123", role=UserRole.ADMIN, name="Administrador")
    )


@pytest.fixture
def seller_user(db_session):
    return UserService(db_session).create_user(
        UserCreate(
            username="Patricio",
            password="123456",
            role=UserRole.SELLER,
            name="Vendedor Patricio",
            email="patricio@example.com",
        )
    )


def login(client, username, password):
    response = client.post("/api/auth/login", json={"username": username, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
def admin_headers(client, admin_user):
    return login(client, "admin", "admin123")


@pytest.fixture
def seller_headers(client, seller_user):
    return login(client, "Patricio", "123456")


@pytest.fixture
def create_category(client, admin_headers):
    def _create(name="Comidas"):
        response = client.post("/api/admin/categories", json={"name": name}, headers=admin_headers)
        assert response.status_code == 201, response.text
        return response.json()
    return _create


@pytest.fixture
def create_product(client, admin_headers):
    def _create(name="Empanada", price=2.5, stock=10, min_stock=3, category_id=None, **extra):
        payload = {
            "name": name,
            "price": price,
            "stock": stock,
            "minStock": min_stock,
            "categoryId": category_id,
            **extra,
        }
        response = client.post("/api/admin/products", json=payload, headers=admin_headers)
        assert response.status_code == 201, response.text
        return response.json()
    return _create
