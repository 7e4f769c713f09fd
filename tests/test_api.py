"""HTTP tests for the POS service."""

from http import HTTPStatus
from unittest.mock import patch

from redis.exceptions import ConnectionError as RedisConnectionError

from app.domain.errors import TransactionTimeoutError
from app.services.order_service import OrderService


def order_payload(user_id, items, method="TARJETA", payment=None):
    payload = {"user_id": user_id, "payment_method": method, "items": items}
    if payment is not None:
        payload["payment"] = payment
    return payload


def test_health_check(client):
    response = client.get("/health")
    assert response.status_code == HTTPStatus.OK
    assert response.json() == {"status": "healthy"}


def test_create_and_get_user(client):
    response = client.post("/users/", json={"name": "Camila", "email": "camila@erp.com"})
    assert response.status_code == HTTPStatus.CREATED
    user = response.json()
    assert user["role"] == "WAITER"

    response = client.get(f"/users/{user['id']}")
    assert response.json()["email"] == "camila@erp.com"
    assert client.get("/users/999").status_code == HTTPStatus.NOT_FOUND


def test_place_order(client, notifier, waiter, make_product):
    coffee = make_product("Cafe", stock=10)
    sandwich = make_product("Sandwich", stock=10)

    response = client.post(
        "/orders/",
        json=order_payload(
            waiter.id,
            [
                {"product_id": coffee.id, "quantity": 2, "price": "2.50"},
                {"product_id": sandwich.id, "quantity": 1, "price": "8.00"},
            ],
            method="EFECTIVO",
            payment={"cash_received": "20.00", "change_given": "7.00"},
        ),
    )

    assert response.status_code == HTTPStatus.CREATED
    body = response.json()
    assert body["total"] == 13.0
    assert body["cash_received"] == 20.0
    assert body["change_given"] == 7.0
    assert body["status"] == "COMPLETED"
    assert len(body["items"]) == 2
    notifier.inventory_changed.assert_called_once_with()

    listed = client.get("/orders/", params={"user_id": waiter.id}).json()
    assert [o["id"] for o in listed] == [body["id"]]
    assert client.get(f"/orders/{body['id']}").json()["total"] == 13.0


def test_unknown_payment_method_is_rejected(client, waiter, make_product):
    coffee = make_product("Cafe", stock=10)

    response = client.post(
        "/orders/",
        json=order_payload(waiter.id, [{"product_id": coffee.id, "quantity": 1, "price": "2.50"}], method="CHEQUE"),
    )

    assert response.status_code == HTTPStatus.UNPROCESSABLE_ENTITY


def test_empty_cart_is_rejected(client, waiter):
    response = client.post("/orders/", json=order_payload(waiter.id, []))
    assert response.status_code == HTTPStatus.UNPROCESSABLE_ENTITY


def test_split_payment_without_portions_is_rejected(client, waiter, make_product):
    coffee = make_product("Cafe", stock=10)

    response = client.post(
        "/orders/",
        json=order_payload(
            waiter.id,
            [{"product_id": coffee.id, "quantity": 1, "price": "2.50"}],
            method="MIXTO",
            payment={"cash_amount": "1.00"},
        ),
    )

    assert response.status_code == HTTPStatus.UNPROCESSABLE_ENTITY


def test_transaction_timeout_maps_to_retryable_error(client, waiter, make_product):
    coffee = make_product("Cafe", stock=10)

    with patch.object(OrderService, "place_order", side_effect=TransactionTimeoutError("too slow")):
        response = client.post(
            "/orders/",
            json=order_payload(waiter.id, [{"product_id": coffee.id, "quantity": 1, "price": "2.50"}]),
        )

    assert response.status_code == HTTPStatus.SERVICE_UNAVAILABLE
    assert "too slow" not in response.json()["detail"]


def test_catalog_is_served_from_cache(client, view_cache, make_product):
    wings = make_product("Alitas", stock=9)
    make_product("Combo Alitas", is_combo=True, components=[(wings, 3)])

    first = client.get("/products/catalog")
    assert first.status_code == HTTPStatus.OK
    combo = next(p for p in first.json() if p["name"] == "Combo Alitas")
    assert combo["stock"] == 3
    assert ("inventory", "catalog") in view_cache.store

    view_cache.store[("inventory", "catalog")] = []
    assert client.get("/products/catalog").json() == []


def test_catalog_works_without_redis(client, view_cache, make_product):
    make_product("Alitas", stock=9)

    with patch.object(view_cache, "get", side_effect=RedisConnectionError("down")), \
            patch.object(view_cache, "set", side_effect=RedisConnectionError("down")):
        response = client.get("/products/catalog")

    assert response.status_code == HTTPStatus.OK
    assert [p["name"] for p in response.json()] == ["Alitas"]


def test_product_endpoints(client, category):
    response = client.post(
        "/products",
        json={"name": "Hamburguesa", "price": "18.00", "stock": 3, "category_id": category.id},
    )
    assert response.status_code == HTTPStatus.CREATED
    burger = response.json()

    response = client.post(
        "/products",
        json={
            "name": "Combo",
            "price": "25.00",
            "category_id": category.id,
            "is_combo": True,
            "combo_items": [{"product_id": burger["id"], "quantity": 1}],
        },
    )
    combo = response.json()
    assert combo["stock"] == 0

    response = client.post(
        "/products",
        json={
            "name": "Combo de combos",
            "price": "40.00",
            "category_id": category.id,
            "is_combo": True,
            "combo_items": [{"product_id": combo["id"], "quantity": 1}],
        },
    )
    assert response.status_code == HTTPStatus.BAD_REQUEST

    response = client.patch(f"/products/{burger['id']}", json={"stock": 20})
    assert response.json()["stock"] == 20
    assert client.patch("/products/999", json={"stock": 1}).status_code == HTTPStatus.NOT_FOUND
    assert [p["name"] for p in client.get("/products/low-stock").json()] == []
    assert client.get("/categories").json() == [{"id": category.id, "name": "Comida"}]


def test_sales_history_endpoint(client, waiter, make_product):
    coffee = make_product("Cafe", stock=10)
    client.post(
        "/orders/",
        json=order_payload(
            waiter.id,
            [{"product_id": coffee.id, "quantity": 1, "price": "10.00"}],
            method="MIXTO",
            payment={"cash_amount": "4.00", "card_amount": "6.00"},
        ),
    )
    created = client.get("/orders/").json()[0]["created_at"][:10]

    response = client.get("/sales/history", params={"start": created, "end": created})

    assert response.status_code == HTTPStatus.OK
    assert response.json()["summary"] == {"total": 10.0, "cash": 4.0, "card": 6.0, "count": 1}
    bad = client.get("/sales/history", params={"start": created, "end": "2000-01-01"})
    assert bad.status_code == HTTPStatus.BAD_REQUEST


def test_sub_cent_price_is_rejected(client, waiter, make_product):
    coffee = make_product("Cafe", stock=10)

    response = client.post(
        "/orders/",
        json=order_payload(waiter.id, [{"product_id": coffee.id, "quantity": 2, "price": "0.005"}]),
    )

    assert response.status_code == HTTPStatus.UNPROCESSABLE_ENTITY
    assert client.get("/orders/").json() == []


def test_delete_product_endpoint(client, waiter, make_product):
    coffee = make_product("Cafe", stock=10)
    juice = make_product("Jugo", stock=10)
    client.post("/orders/", json=order_payload(waiter.id, [{"product_id": coffee.id, "quantity": 1, "price": "2.50"}]))

    response = client.delete(f"/products/{coffee.id}")
    assert response.status_code == HTTPStatus.OK
    assert response.json() == {"id": coffee.id, "deleted": False, "is_active": False}
    assert client.get(f"/products/{coffee.id}").json()["is_active"] is False

    assert client.delete(f"/products/{juice.id}").json()["deleted"] is True
    assert client.get(f"/products/{juice.id}").status_code == HTTPStatus.NOT_FOUND
    assert client.delete("/products/999").status_code == HTTPStatus.NOT_FOUND
