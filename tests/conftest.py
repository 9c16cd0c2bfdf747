# tests/conftest.py
import os

# must be set before phonedeals reads its settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "1"
os.environ["JWT_SECRET"] = "test-secret-0123456789-abcdefghijklmnop"
os.environ["SEED_CATALOG"] = "0"

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from phonedeals.api.deps import get_lock_service
from phonedeals.data.database import Base, SessionLocal, engine
from phonedeals.data.models import CartItemModel, CartModel, ListingModel
from phonedeals.main import app
from tests.helpers import InProcessLockService, RecordingNotifier


@pytest.fixture
def db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def lock_service():
    return InProcessLockService()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def client(db, lock_service):
    app.dependency_overrides[get_lock_service] = lambda: lock_service
    try:
        with TestClient(app) as c:
            yield c
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_listing(db):
    def _make(title="Galaxy S III", brand="Samsung", price="100.00", stock=5, seller_id="seller-1", **kw):
        listing = ListingModel(
            title=title,
            brand=brand,
            price=Decimal(price),
            stock=stock,
            seller_id=seller_id,
            **kw,
        )
        db.add(listing)
        db.commit()
        db.refresh(listing)
        return listing

    return _make


@pytest.fixture
def fill_cart(db):
    """Put lines straight into a user's cart: (listing, quantity, price)."""

    def _fill(user_id, *lines):
        cart = db.query(CartModel).filter_by(user_id=user_id).one_or_none()
        if cart is None:
            cart = CartModel(user_id=user_id, version=1)
            db.add(cart)
            db.flush()
        for listing, quantity, price in lines:
            db.add(
                CartItemModel(
                    cart_id=cart.id,
                    listing_id=listing.id,
                    title=listing.title,
                    quantity=quantity,
                    price=Decimal(price),
                )
            )
        db.commit()
        return cart

    return _fill

