"""Tests for the sale ledger endpoint."""
from unittest.mock import patch

from kombu.exceptions import OperationalError

from foodtruck_pos.models.sale import Sale


def sell(client, headers, product, quantity, payment_method="cash", total=None):
    price = product["price"]
    return client.post(
        "/api/vendedor/sales",
        json={
            "items": [{
                "productId": product["id"],
                "name": product["name"],
                "price": price,
                "quantity": quantity,
            }],
            "total": total if total is not None else price * quantity,
            "paymentMethod": payment_method,
        },
        headers=headers,
    )


def get_stock(client, admin_headers, product_id):
    return client.get(f"/api/admin/products/{product_id}", headers=admin_headers).json()["stock"]


def test_sale_deducts_stock_and_alerts_at_minimum(client, admin_headers, seller_headers, create_product):
    """Stock 10, minimum 3: selling 8 leaves 2 and raises an alert."""
    product = create_product(name="Empanada", stock=10, min_stock=3)

    response = sell(client, seller_headers, product, 8)

    assert response.status_code == 201
    data = response.json()
    assert data["result"]["acknowledged"] is True
    assert data["result"]["insertedId"] > 0
    assert data["alerts"] == ["¡Alerta! Empanada ha alcanzado el stock mínimo (2 restantes)."]
    assert get_stock(client, admin_headers, product["id"]) == 2


def test_overselling_clamps_stock_at_zero(client, admin_headers, seller_headers, create_product):
    """Selling 5 more from a stock of 2 ends at 0, not -3."""
    product = create_product(name="Empanada", stock=10, min_stock=3)
    sell(client, seller_headers, product, 8)

    response = sell(client, seller_headers, product, 5)

    assert response.status_code == 201
    assert response.json()["alerts"] == ["¡Alerta! Empanada ha alcanzado el stock mínimo (0 restantes)."]
    assert get_stock(client, admin_headers, product["id"]) == 0


def test_no_alert_above_minimum(client, admin_headers, seller_headers, create_product):
    product = create_product(stock=10, min_stock=3)

    response = sell(client, seller_headers, product, 6)

    assert response.json()["alerts"] == []
    assert get_stock(client, admin_headers, product["id"]) == 4


def test_alert_exactly_at_minimum(client, seller_headers, create_product):
    product = create_product(stock=10, min_stock=3)

    response = sell(client, seller_headers, product, 7)

    assert len(response.json()["alerts"]) == 1


def test_stock_never_negative_over_many_sales(client, admin_headers, seller_headers, create_product):
    product = create_product(stock=4, min_stock=0)

    for quantity in (3, 3, 1, 10):
        assert sell(client, seller_headers, product, quantity).status_code == 201
        assert get_stock(client, admin_headers, product["id"]) >= 0

    assert get_stock(client, admin_headers, product["id"]) == 0


def test_missing_product_line_is_skipped(client, admin_headers, seller_headers, create_product, db_session):
    product = create_product(stock=10, min_stock=0)

    response = client.post(
        "/api/vendedor/sales",
        json={
            "items": [
                {"productId": 9999, "name": "Borrado", "price": 1.0, "quantity": 1},
                {"productId": product["id"], "name": product["name"], "price": 2.5, "quantity": 2},
            ],
            "total": 6.0,
            "paymentMethod": "card",
        },
        headers=seller_headers,
    )

    assert response.status_code == 201
    assert get_stock(client, admin_headers, product["id"]) == 8

    # Both lines are still recorded on the sale as submitted
    sale = db_session.query(Sale).filter(Sale.id == response.json()["result"]["insertedId"]).first()
    assert [item["productId"] for item in sale.items] == [9999, product["id"]]


def test_same_product_twice_in_cart(client, admin_headers, seller_headers, create_product):
    product = create_product(stock=10, min_stock=0)
    line = {"productId": product["id"], "name": product["name"], "price": 2.5, "quantity": 3}

    response = client.post(
        "/api/vendedor/sales",
        json={"items": [line, line], "total": 15.0, "paymentMethod": "cash"},
        headers=seller_headers,
    )

    assert response.status_code == 201
    assert get_stock(client, admin_headers, product["id"]) == 4


def test_sale_is_stamped_with_seller(client, seller_headers, seller_user, create_product, db_session):
    product = create_product()

    response = sell(client, seller_headers, product, 1, payment_method="transfer")

    sale = db_session.query(Sale).filter(Sale.id == response.json()["result"]["insertedId"]).first()
    assert sale.seller_id == seller_user.id
    assert sale.seller_name == "Vendedor Patricio"
    assert sale.payment_method.value == "transfer"
    assert sale.timestamp is not None


def test_client_total_is_stored_verbatim(client, seller_headers, create_product, db_session):
    """The declared total is not recomputed from prices."""
    product = create_product(price=2.5)

    response = sell(client, seller_headers, product, 2, total=4.0)

    sale = db_session.query(Sale).filter(Sale.id == response.json()["result"]["insertedId"]).first()
    assert sale.total == 4.0


def test_sale_unaffected_by_later_product_edits(client, admin_headers, seller_headers, create_product, db_session):
    product = create_product(name="Empanada", price=2.5, stock=10)
    response = sell(client, seller_headers, product, 2)
    sale_id = response.json()["result"]["insertedId"]

    client.put(
        f"/api/admin/products/{product['id']}",
        json={"name": "Empanada XL", "price": 9.9, "stock": 100},
        headers=admin_headers,
    )
    client.delete(f"/api/admin/products/{product['id']}", headers=admin_headers)

    db_session.expire_all()
    sale = db_session.query(Sale).filter(Sale.id == sale_id).first()
    assert sale.total == 5.0
    assert sale.items == [{"productId": product["id"], "name": "Empanada", "price": 2.5, "quantity": 2}]


def test_sale_requires_items(client, seller_headers):
    response = client.post(
        "/api/vendedor/sales",
        json={"items": [], "total": 0, "paymentMethod": "cash"},
        headers=seller_headers,
    )

    assert response.status_code == 400


def test_sale_rejects_unknown_payment_method(client, seller_headers, create_product):
    product = create_product()

    response = sell(client, seller_headers, product, 1, payment_method="bitcoin")

    assert response.status_code == 400
    assert "paymentMethod" in response.json()["message"]


def test_sale_rejects_zero_quantity(client, seller_headers, create_product):
    product = create_product()

    response = sell(client, seller_headers, product, 0)

    assert response.status_code == 400


def test_sale_rejects_infinite_total(client, admin_headers, seller_headers, create_product):
    """A JSON number too large for a float must not reach the ledger."""
    product = create_product(stock=10)
    body = (
        '{"items": [{"productId": %d, "name": "Empanada", "price": 2.5, "quantity": 1}],'
        ' "total": 1e999, "paymentMethod": "cash"}' % product["id"]
    )

    response = client.post(
        "/api/vendedor/sales",
        content=body,
        headers={**seller_headers, "Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert "total" in response.json()["message"]
    assert get_stock(client, admin_headers, product["id"]) == 10
    assert client.get("/api/admin/sales-report", headers=admin_headers).json() == []


def test_sale_rejects_infinite_line_price(client, seller_headers, create_product):
    product = create_product()
    body = (
        '{"items": [{"productId": %d, "price": 1e999, "quantity": 1}],'
        ' "total": 2.5, "paymentMethod": "cash"}' % product["id"]
    )

    response = client.post(
        "/api/vendedor/sales",
        content=body,
        headers={**seller_headers, "Content-Type": "application/json"},
    )

    assert response.status_code == 400


def test_sale_requires_authentication(client, create_product):
    product = create_product()

    response = sell(client, {}, product, 1)

    assert response.status_code == 401


def test_low_stock_notification_is_queued(client, seller_headers, create_product):
    product = create_product(name="Empanada", stock=4, min_stock=3)

    with patch("foodtruck_pos.api.seller.notify_low_stock.delay") as delay:
        response = sell(client, seller_headers, product, 2)

    sale_id = response.json()["result"]["insertedId"]
    delay.assert_called_once_with(sale_id, ["¡Alerta! Empanada ha alcanzado el stock mínimo (2 restantes)."])


def test_no_notification_without_alerts(client, seller_headers, create_product):
    product = create_product(stock=50, min_stock=3)

    with patch("foodtruck_pos.api.seller.notify_low_stock.delay") as delay:
        sell(client, seller_headers, product, 1)

    delay.assert_not_called()


def test_broker_failure_does_not_fail_committed_sale(client, admin_headers, seller_headers, create_product):
    product = create_product(stock=4, min_stock=3)

    with patch(
        "foodtruck_pos.api.seller.notify_low_stock.delay",
        side_effect=OperationalError("broker down"),
    ):
        response = sell(client, seller_headers, product, 2)

    assert response.status_code == 201
    assert get_stock(client, admin_headers, product["id"]) == 2
