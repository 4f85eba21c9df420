from berryevents.config import CART_SESSION_COOKIE
from berryevents.domain.cart.repository import CartRepository
from berryevents.models import Cart, utcnow

from ..helpers import bearer


def test_get_cart_creates_guest_cart_and_sets_cookie(client):
    resp = client.get("/api/cart")

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "active"
    assert body["items"] == []
    assert body["itemCount"] == 0
    assert body["subtotal"] == "0.00"

    cookie = resp.headers["set-cookie"]
    assert cookie.startswith(f"{CART_SESSION_COOKIE}=")
    assert "HttpOnly" in cookie
    assert "samesite=lax" in cookie.lower()
    assert "Max-Age=1209600" in cookie


def test_get_cart_is_idempotent(client):
    first = client.get("/api/cart").json()
    second = client.get("/api/cart")

    assert second.json()["id"] == first["id"]
    assert second.json()["items"] == first["items"]
    assert "set-cookie" not in second.headers


def test_malformed_cookie_is_ignored(client):
    client.cookies.set(CART_SESSION_COOKIE, "<script>")
    resp = client.get("/api/cart")

    assert resp.status_code == 200
    assert "set-cookie" in resp.headers


def test_add_item_to_guest_cart(client, item_payload):
    resp = client.post("/api/cart/items", json=item_payload())

    assert resp.status_code == 201
    body = resp.json()
    assert body["item"]["serviceType"] == "house-cleaning"
    assert body["item"]["subtotal"] == "200.00"
    assert body["item"]["duration"] == 3
    assert body["cart"]["itemCount"] == 1
    assert body["cart"]["subtotal"] == "200.00"

    cart = client.get("/api/cart").json()
    assert cart["id"] == body["cart"]["id"]
    assert [i["id"] for i in cart["items"]] == [body["item"]["id"]]


def test_fourth_item_is_rejected(client, item_payload):
    for day in (17, 18, 19):
        date = f"2030-05-{day}T09:00:00"
        assert client.post("/api/cart/items", json=item_payload(scheduledDate=date)).status_code == 201

    resp = client.post("/api/cart/items", json=item_payload(scheduledDate="2030-05-20T09:00:00"))

    assert resp.status_code == 400
    assert "Cart limit reached" in resp.json()["detail"]


def test_negative_price_is_a_validation_error(client, item_payload):
    resp = client.post("/api/cart/items", json=item_payload(basePrice="-5"))
    assert resp.status_code == 422


def test_update_item(client, item_payload):
    item_id = client.post("/api/cart/items", json=item_payload()).json()["item"]["id"]

    resp = client.patch(
        f"/api/cart/items/{item_id}",
        json={"scheduledTime": "14:00", "duration": 20, "tipAmount": "15.00"},
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["scheduledTime"] == "14:00"
    assert body["duration"] == 12
    assert body["tipAmount"] == "15.00"
    assert body["subtotal"] == "200.00"


def test_update_unknown_item_is_404(client):
    client.get("/api/cart")
    resp = client.patch("/api/cart/items/does-not-exist", json={"comments": "hi"})
    assert resp.status_code == 404


def test_remove_item(client, item_payload):
    item_id = client.post("/api/cart/items", json=item_payload()).json()["item"]["id"]

    resp = client.delete(f"/api/cart/items/{item_id}")

    assert resp.status_code == 200
    assert resp.json() == {"message": "Item removed from cart"}
    assert client.get("/api/cart").json()["items"] == []


def test_clear_cart_is_idempotent(client, item_payload):
    cart_id = client.post("/api/cart/items", json=item_payload()).json()["cart"]["id"]

    assert client.delete("/api/cart").json() == {"message": "Cart cleared"}
    assert client.delete("/api/cart").status_code == 200

    cart = client.get("/api/cart").json()
    assert cart["id"] == cart_id
    assert cart["items"] == []


def test_authenticated_user_gets_own_cart(client, user, auth_headers):
    resp = client.get("/api/cart", headers=auth_headers)

    assert resp.status_code == 200
    assert resp.json()["userId"] == user.id
    assert "set-cookie" not in resp.headers


def test_guest_cart_follows_user_on_login(client, user, auth_headers, item_payload):
    guest_cart = client.post("/api/cart/items", json=item_payload()).json()["cart"]

    resp = client.get("/api/cart", headers=auth_headers)

    body = resp.json()
    assert body["id"] == guest_cart["id"]
    assert body["userId"] == user.id
    assert len(body["items"]) == 1
    # The session cookie is dropped once the guest cart belongs to the user
    assert f'{CART_SESSION_COOKIE}=""' in resp.headers["set-cookie"]


def test_users_do_not_see_each_others_items(client, make_user, item_payload):
    alice, bob = make_user(), make_user()
    item_id = client.post(
        "/api/cart/items", json=item_payload(), headers=bearer(alice.id)
    ).json()["item"]["id"]

    resp = client.delete(f"/api/cart/items/{item_id}", headers=bearer(bob.id))

    assert resp.status_code == 404
    assert len(client.get("/api/cart", headers=bearer(alice.id)).json()["items"]) == 1


def test_invalid_token_is_rejected_on_cart(client):
    resp = client.get("/api/cart", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401


def test_wrong_method_returns_405_with_allow_header(client):
    resp = client.put("/api/cart")

    assert resp.status_code == 405
    allowed = {m.strip() for m in resp.headers["allow"].split(",")}
    assert {"GET", "DELETE"} <= allowed


def test_405_on_item_route_lists_every_item_method(client):
    resp = client.put("/api/cart/items/some-item")

    assert resp.status_code == 405
    allowed = {m.strip() for m in resp.headers["allow"].split(",")}
    assert {"PATCH", "DELETE"} <= allowed
    assert "GET" not in allowed


def test_cart_responses_are_not_cached(client):
    resp = client.get("/api/cart")
    assert "no-store" in resp.headers["cache-control"]
    assert resp.headers["x-content-type-options"] == "nosniff"


def test_lost_update_is_rejected_with_409(client, session_factory, monkeypatch, auth_headers, item_payload):
    first = client.post("/api/cart/items", json=item_payload(), headers=auth_headers).json()

    original_touch = CartRepository.touch
    raced = {"done": False}

    def racing_touch(cart):
        if not raced["done"]:
            raced["done"] = True
            # Another request commits a change to the same cart first
            other = session_factory()
            try:
                row = other.get(Cart, cart.id)
                row.updated_at = utcnow()
                other.commit()
            finally:
                other.close()
        original_touch(cart)

    monkeypatch.setattr(CartRepository, "touch", staticmethod(racing_touch))

    resp = client.post(
        "/api/cart/items",
        json=item_payload(scheduledDate="2030-05-18T09:00:00"),
        headers=auth_headers,
    )

    assert resp.status_code == 409
    assert "modified by another request" in resp.json()["detail"]

    cart = client.get("/api/cart", headers=auth_headers).json()
    assert [i["id"] for i in cart["items"]] == [first["item"]["id"]]
