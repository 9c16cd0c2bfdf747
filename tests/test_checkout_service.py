from decimal import Decimal

import pytest

from phonedeals.data.models import CartItemModel, ListingModel, OrderModel
from phonedeals.domain.errors import (
    ConcurrencyConflict,
    EmptyCart,
    InsufficientStock,
    InvalidAddress,
    ListingNotFound,
    StockLocked,
)
from phonedeals.services.checkout_service import CheckoutService, validate_address
from tests.helpers import VALID_ADDRESS, RecordingNotifier

USER = "user-1"


@pytest.fixture
def svc(db, lock_service, notifier):
    return CheckoutService(db, lock_service=lock_service, notification_service=notifier)


def cart_lines(db, user_id=USER):
    db.expire_all()
    return db.query(CartItemModel).join(CartItemModel.cart).filter_by(user_id=user_id).all()


def reload(db, listing):
    db.expire_all()
    return db.get(ListingModel, listing.id)


def test_checkout_creates_order_commits_stock_and_clears_cart(db, svc, make_listing, fill_cart):
    phone_a = make_listing(price="100.00", stock=5)
    fill_cart(USER, (phone_a, 2, "100.00"))

    order = svc.checkout(USER, VALID_ADDRESS)

    assert order["total_amount"] == Decimal("200.00")
    assert order["user_id"] == USER
    assert order["address"] == VALID_ADDRESS
    assert [(i["phone_id"], i["quantity"]) for i in order["items"]] == [(phone_a.id, 2)]

    listing = reload(db, phone_a)
    assert listing.stock == 3
    assert listing.sales_count == 2
    assert cart_lines(db) == []
    assert db.query(OrderModel).count() == 1


def test_total_is_sum_over_every_line(db, svc, make_listing, fill_cart):
    a = make_listing(title="A", price="10.00", stock=10)
    b = make_listing(title="B", price="20.50", stock=10)
    fill_cart(USER, (a, 3, "10.00"), (b, 2, "20.50"))

    order = svc.checkout(USER, VALID_ADDRESS)

    assert order["total_amount"] == Decimal("71.00")
    assert sum(i["quantity"] * i["price"] for i in order["items"]) == order["total_amount"]


def test_total_uses_cart_price_snapshot_not_live_price(db, svc, make_listing, fill_cart):
    phone = make_listing(price="100.00", stock=5)
    fill_cart(USER, (phone, 1, "100.00"))

    phone.price = Decimal("150.00")
    db.commit()

    order = svc.checkout(USER, VALID_ADDRESS)

    assert order["total_amount"] == Decimal("100.00")
    assert order["items"][0]["price"] == Decimal("100.00")


def test_insufficient_stock_fails_whole_checkout(db, svc, make_listing, fill_cart):
    ok = make_listing(title="A", stock=5)
    short = make_listing(title="B", price="50.00", stock=2)
    fill_cart(USER, (ok, 1, "100.00"), (short, 3, "50.00"))

    with pytest.raises(InsufficientStock) as exc:
        svc.checkout(USER, VALID_ADDRESS)

    assert str(exc.value) == f"Insufficient stock for phone {short.id}"
    assert reload(db, short).stock == 2
    assert reload(db, ok).stock == 5
    assert reload(db, ok).sales_count == 0
    assert db.query(OrderModel).count() == 0
    assert len(cart_lines(db)) == 2


def test_empty_cart_is_rejected(db, svc):
    with pytest.raises(EmptyCart):
        svc.checkout(USER, VALID_ADDRESS)


def test_second_checkout_on_cleared_cart_is_empty(db, svc, make_listing, fill_cart):
    phone = make_listing(stock=5)
    fill_cart(USER, (phone, 1, "100.00"))
    svc.checkout(USER, VALID_ADDRESS)

    for _ in range(2):
        with pytest.raises(EmptyCart):
            svc.checkout(USER, VALID_ADDRESS)

    assert reload(db, phone).stock == 4
    assert db.query(OrderModel).count() == 1


@pytest.mark.parametrize("missing", ["street", "city", "state", "zip", "country"])
def test_every_address_field_is_required(db, svc, make_listing, fill_cart, missing):
    phone = make_listing(stock=5)
    fill_cart(USER, (phone, 1, "100.00"))
    address = {k: v for k, v in VALID_ADDRESS.items() if k != missing}

    with pytest.raises(InvalidAddress):
        svc.checkout(USER, address)

    assert reload(db, phone).stock == 5
    assert len(cart_lines(db)) == 1


def test_blank_address_field_is_invalid():
    with pytest.raises(InvalidAddress):
        validate_address({**VALID_ADDRESS, "city": "   "})
    with pytest.raises(InvalidAddress):
        validate_address(None)
    with pytest.raises(InvalidAddress):
        validate_address("12 Main St")


def test_scalar_address_fields_are_kept_as_text():
    cleaned = validate_address({**VALID_ADDRESS, "zip": 2000, "city": "  Sydney "})

    assert cleaned["zip"] == "2000"
    assert cleaned["city"] == "Sydney"


@pytest.mark.parametrize("value", [True, {"line": "x"}, ["x"]])
def test_structured_address_field_is_invalid(value):
    with pytest.raises(InvalidAddress):
        validate_address({**VALID_ADDRESS, "street": value})


def test_address_is_checked_before_the_cart(db, svc):
    # no cart at all, yet the address error wins
    with pytest.raises(InvalidAddress):
        svc.checkout(USER, {**VALID_ADDRESS, "city": ""})


def test_deleted_listing_fails_with_not_found(db, svc, make_listing, fill_cart):
    phone_a = make_listing(title="A", price="10.00", stock=5)
    phone_c = make_listing(title="C", price="20.00", stock=5)
    fill_cart(USER, (phone_a, 1, "10.00"), (phone_c, 1, "20.00"))
    missing_id = phone_c.id
    db.delete(phone_c)
    db.commit()

    with pytest.raises(ListingNotFound) as exc:
        svc.checkout(USER, VALID_ADDRESS)

    assert str(exc.value) == f"Phone not found: {missing_id}"
    assert reload(db, phone_a).stock == 5
    assert db.query(OrderModel).count() == 0


def test_stock_drained_after_validation_rolls_everything_back(db, svc, make_listing, fill_cart, monkeypatch):
    phone = make_listing(stock=1)
    fill_cart(USER, (phone, 1, "100.00"))

    original = svc.listing_repo.decrement_stock_and_increment_sales

    def drained_by_another_buyer(listing_id, quantity):
        db.query(ListingModel).filter(ListingModel.id == listing_id).update(
            {ListingModel.stock: 0}, synchronize_session=False
        )
        return original(listing_id, quantity)

    monkeypatch.setattr(svc.listing_repo, "decrement_stock_and_increment_sales", drained_by_another_buyer)

    with pytest.raises(InsufficientStock):
        svc.checkout(USER, VALID_ADDRESS)

    assert db.query(OrderModel).count() == 0
    assert len(cart_lines(db)) == 1
    assert reload(db, phone).sales_count == 0


def test_concurrent_cart_change_rolls_back(db, svc, make_listing, fill_cart, monkeypatch):
    phone = make_listing(stock=5)
    fill_cart(USER, (phone, 1, "100.00"))
    monkeypatch.setattr(svc.cart_repo, "update_cart_version", lambda cart_id, old_version: 0)

    with pytest.raises(ConcurrencyConflict):
        svc.checkout(USER, VALID_ADDRESS)

    assert reload(db, phone).stock == 5
    assert db.query(OrderModel).count() == 0
    assert len(cart_lines(db)) == 1


def test_locks_every_purchased_listing(db, svc, lock_service, make_listing, fill_cart):
    a = make_listing(title="A", stock=5)
    b = make_listing(title="B", stock=5)
    fill_cart(USER, (b, 1, "100.00"), (a, 1, "100.00"))

    svc.checkout(USER, VALID_ADDRESS)

    assert lock_service.history == [sorted([a.id, b.id])]
    assert lock_service.held == {}


def test_locked_listing_fails_without_side_effects(db, svc, lock_service, make_listing, fill_cart):
    phone = make_listing(stock=5)
    fill_cart(USER, (phone, 1, "100.00"))
    lock_service.held[phone.id] = "checkout:someone-else"

    with pytest.raises(StockLocked):
        svc.checkout(USER, VALID_ADDRESS)

    assert reload(db, phone).stock == 5
    assert db.query(OrderModel).count() == 0


def test_notification_is_sent_after_commit(db, svc, notifier, make_listing, fill_cart):
    phone = make_listing(stock=5)
    fill_cart(USER, (phone, 2, "100.00"))

    order = svc.checkout(USER, VALID_ADDRESS)

    assert notifier.sent == [(USER, order["id"], "200.00")]


def test_failed_notification_keeps_the_order(db, lock_service, make_listing, fill_cart):
    phone = make_listing(stock=5)
    fill_cart(USER, (phone, 1, "100.00"))
    svc = CheckoutService(db, lock_service=lock_service, notification_service=RecordingNotifier(fail=True))

    order = svc.checkout(USER, VALID_ADDRESS)

    assert db.get(OrderModel, order["id"]) is not None
    assert reload(db, phone).stock == 4
