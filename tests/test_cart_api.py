from decimal import Decimal

from tests.helpers import auth

USER = "user-1"


def test_get_cart_creates_it_lazily(client):
    r = client.get("/api/cart", headers=auth(USER))

    assert r.status_code == 200
    body = r.json()
    assert body["userId"] == USER
    assert body["items"] == []
    assert "_id" in body


def test_add_update_remove_line(client, make_listing):
    phone = make_listing(price="100.00", stock=5)

    body = client.post("/api/cart/items", json={"phoneId": phone.id, "quantity": 1}, headers=auth(USER)).json()
    assert body["items"][0]["phoneId"] == phone.id
    assert body["items"][0]["sellerId"] == "seller-1"

    r = client.patch(f"/api/cart/items/{phone.id}", json={"quantity": 4}, headers=auth(USER))
    assert r.status_code == 200
    assert r.json()["items"][0]["quantity"] == 4
    assert Decimal(str(r.json()["total"])) == Decimal("400.00")

    r = client.delete(f"/api/cart/items/{phone.id}", headers=auth(USER))
    assert r.status_code == 200
    assert r.json()["items"] == []


def test_add_with_bad_quantity(client, make_listing):
    phone = make_listing(stock=5)

    r = client.post("/api/cart/items", json={"phoneId": phone.id, "quantity": 0}, headers=auth(USER))

    assert r.status_code == 400
    assert r.json() == {"success": False, "message": "Quantity must be at least 1"}


def test_add_more_than_stock(client, make_listing):
    phone = make_listing(stock=1)

    r = client.post("/api/cart/items", json={"phoneId": phone.id, "quantity": 2}, headers=auth(USER))

    assert r.status_code == 409
    assert r.json() == {"success": False, "message": "Insufficient stock"}


def test_add_unknown_phone(client):
    r = client.post("/api/cart/items", json={"phoneId": 4242, "quantity": 1}, headers=auth(USER))

    assert r.status_code == 404
    assert r.json() == {"success": False, "message": "Phone not found"}


def test_remove_line_not_in_cart(client, make_listing):
    phone = make_listing(stock=1)

    r = client.delete(f"/api/cart/items/{phone.id}", headers=auth(USER))

    assert r.status_code == 404
    assert r.json()["message"] == "Item not found in cart"


def test_cart_requires_a_token(client):
    r = client.get("/api/cart", headers={"Authorization": "Basic abc"})

    assert r.status_code == 401


def test_add_with_non_numeric_quantity(client, make_listing):
    phone = make_listing(stock=5)

    r = client.post("/api/cart/items", json={"phoneId": phone.id, "quantity": "abc"}, headers=auth(USER))

    assert r.status_code == 400
    assert r.json() == {"success": False, "message": "Quantity must be at least 1"}


def test_add_without_phone_id(client):
    r = client.post("/api/cart/items", json={"quantity": 1}, headers=auth(USER))

    assert r.status_code == 400
    assert r.json() == {"success": False, "message": "Phone ID is required"}


def test_update_with_non_numeric_quantity(client, make_listing):
    phone = make_listing(stock=5)
    client.post("/api/cart/items", json={"phoneId": phone.id, "quantity": 1}, headers=auth(USER))

    r = client.patch(f"/api/cart/items/{phone.id}", json={"quantity": "abc"}, headers=auth(USER))

    assert r.status_code == 400
    assert r.json()["message"] == "Quantity must be at least 1"
