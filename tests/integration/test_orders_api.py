import uuid
from datetime import datetime
from decimal import Decimal

import pytest

from berryevents.models import Booking

from ..helpers import bearer


@pytest.fixture()
def checkout(client, item_payload):
    """Check out one cart for the given headers; returns the confirmations"""

    def _checkout(headers, *payloads):
        for payload in payloads or (item_payload(),):
            client.post("/api/cart/items", json=payload, headers=headers)
        resp = client.post("/api/cart/checkout", headers=headers)
        assert resp.status_code == 201
        return resp.json()["confirmations"]

    return _checkout


def test_list_orders_newest_first(client, auth_headers, checkout, item_payload):
    first = checkout(auth_headers)
    second = checkout(auth_headers, item_payload(serviceType="plumbing", serviceName="Plumbing"))

    resp = client.get("/api/orders", headers=auth_headers)

    assert resp.status_code == 200
    ids = [o["id"] for o in resp.json()]
    assert ids == [second[0]["bookingId"], first[0]["bookingId"]]


def test_order_view_fields(client, auth_headers, checkout):
    (confirmation,) = checkout(auth_headers)

    order = client.get(f"/api/orders/{confirmation['bookingId']}", headers=auth_headers).json()

    year = datetime.fromisoformat(order["createdAt"]).year
    assert order["orderNumber"] == f"BE-{year}-{order['id'][-6:]}"
    assert order["subtotal"] == "200.00"
    assert order["platformFee"] == "30.00"
    assert order["totalAmount"] == "230.00"
    assert order["paymentMethod"] == "card"
    assert order["transactionId"].startswith("txn_")

    (item,) = order["items"]
    assert item["serviceType"] == "house-cleaning"
    assert item["scheduledTime"] == "09:00"
    assert item["duration"] == 3
    assert item["basePrice"] == "180.00"
    assert item["addOnsPrice"] == "20.00"
    assert item["comments"] == "Ring the bell twice"
    assert item["providerId"] is None


def test_list_and_detail_agree(client, auth_headers, checkout):
    (confirmation,) = checkout(auth_headers)

    listed = client.get("/api/orders", headers=auth_headers).json()[0]
    single = client.get(f"/api/orders/{confirmation['bookingId']}", headers=auth_headers).json()

    assert listed == single


def test_fee_is_read_from_the_payment(client, db, auth_headers, checkout):
    (confirmation,) = checkout(auth_headers)
    booking = db.get(Booking, confirmation["bookingId"])
    booking.payment.platform_commission = Decimal("12.34")
    db.commit()

    order = client.get(f"/api/orders/{booking.id}", headers=auth_headers).json()

    assert order["platformFee"] == "12.34"
    assert order["totalAmount"] == "212.34"


def test_booking_without_payment_falls_back_to_computed_fee(client, db, user, auth_headers):
    booking = Booking(
        user_id=user.id,
        service_type="gardening",
        service_name="Gardening",
        event_date=datetime(2030, 6, 1, 8, 0),
        total_amount=Decimal("33.33"),
    )
    db.add(booking)
    db.commit()

    order = client.get(f"/api/orders/{booking.id}", headers=auth_headers).json()

    assert order["platformFee"] == "5.00"
    assert order["totalAmount"] == "38.33"
    assert order["paymentStatus"] is None


def test_orders_of_other_users_are_not_found(client, make_user, checkout):
    alice, bob = make_user(), make_user()
    (confirmation,) = checkout(bearer(alice.id))

    resp = client.get(f"/api/orders/{confirmation['bookingId']}", headers=bearer(bob.id))

    assert resp.status_code == 404
    assert client.get("/api/orders", headers=bearer(bob.id)).json() == []


def test_unknown_order_is_404(client, auth_headers):
    assert client.get(f"/api/orders/{uuid.uuid4()}", headers=auth_headers).status_code == 404
    assert client.get("/api/orders/not-a-uuid", headers=auth_headers).status_code == 404


def test_blank_order_id_is_400(client, auth_headers):
    resp = client.get("/api/orders/%20", headers=auth_headers)

    assert resp.status_code == 400
    assert resp.json()["detail"] == "orderId required"


def test_orders_require_authentication(client, user, checkout):
    (confirmation,) = checkout(bearer(user.id))

    assert client.get("/api/orders").status_code == 401
    assert client.get(f"/api/orders/{confirmation['bookingId']}").status_code == 401
