"""Shared fixtures: in-memory database, catalog factories, app client."""

from decimal import Decimal
from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient

from app.data.database import Database
from app.data.models import CategoryModel, ComboItemModel, ProductModel, UserModel
from app.main import create_app
from app.services.notification_service import NotificationService


class FakeViewCache:
    """Dictionary-backed stand-in for the redis view cache."""

    def __init__(self):
        self.store = {}
        self.invalidated = []

    def get(self, view, suffix=None):
        return self.store.get((view, suffix))

    def set(self, view, value, suffix=None):
        self.store[(view, suffix)] = value

    def invalidate(self, view):
        self.invalidated.append(view)
        removed = [key for key in self.store if key[0] == view]
        for key in removed:
            del self.store[key]
        return len(removed)


@pytest.fixture
def database():
    """Fresh in-memory SQLite database with all tables created."""
    db = Database("sqlite://")
    db.create_all()
    yield db
    db.dispose()


@pytest.fixture
def db(database):
    """Session for arranging data and inspecting results."""
    session = database.session()
    yield session
    session.close()


@pytest.fixture
def notifier():
    return Mock(spec=NotificationService)


@pytest.fixture
def waiter(db):
    user = UserModel(name="Luis", email="luis@erp.com", role="WAITER")
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def category(db):
    food = CategoryModel(name="Comida")
    db.add(food)
    db.commit()
    return food


@pytest.fixture
def make_product(db, category):
    """Factory creating a committed product; combos take (product, multiplier) pairs."""

    def _make(name, stock=10, price="5.00", min_stock=5, is_combo=False, components=None, is_active=True):
        product = ProductModel(
            name=name,
            price=Decimal(price),
            stock=0 if is_combo else stock,
            min_stock=min_stock,
            is_active=is_active,
            is_combo=is_combo,
            category_id=category.id,
            combo_items=[
                ComboItemModel(product_id=component.id, quantity=multiplier)
                for component, multiplier in (components or [])
            ],
        )
        db.add(product)
        db.commit()
        return product

    return _make


@pytest.fixture
def view_cache():
    return FakeViewCache()


@pytest.fixture
def client(database, notifier, view_cache):
    """Test client running the app lifespan against the in-memory database."""
    app = create_app(database=database, notifier=notifier, view_cache=view_cache)
    with TestClient(app) as test_client:
        yield test_client
