"""Cart endpoints."""

import uuid


def test_get_cart_creates_empty_cart(client, customer, auth_headers):
    response = client.get("/api/cart", headers=auth_headers(customer))

    assert response.status_code == 200
    cart = response.json()["cart"]
    assert cart["userId"] == str(customer.id)
    assert cart["items"] == []
    assert cart["totalItems"] == 0
    assert cart["totalPrice"] == 0.0


def test_add_merges_lines_and_recomputes_totals(client, customer, auth_headers, make_product):
    mug = make_product("Mug", price="20.00", stock=10)
    headers = auth_headers(customer)

    client.post("/api/cart/add", json={"productId": str(mug.id), "quantity": 2}, headers=headers)
    response = client.post("/api/cart/add", json={"productId": str(mug.id)}, headers=headers)

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Item added to cart successfully"
    cart = body["cart"]
    assert len(cart["items"]) == 1
    assert cart["items"][0]["quantity"] == 3
    assert cart["items"][0]["product"]["name"] == "Mug"
    assert cart["totalItems"] == 3
    assert cart["totalPrice"] == 60.0


def test_add_checks_stock_against_merged_quantity(client, customer, auth_headers, make_product):
    lamp = make_product("Lamp", stock=3)
    headers = auth_headers(customer)
    client.post("/api/cart/add", json={"productId": str(lamp.id), "quantity": 2}, headers=headers)

    response = client.post("/api/cart/add", json={"productId": str(lamp.id), "quantity": 2}, headers=headers)

    assert response.status_code == 400
    assert response.json()["message"] == "Only 3 items available for Lamp"


def test_add_unknown_or_inactive_product(client, customer, auth_headers, make_product):
    retired = make_product("Retired", is_active=False)
    headers = auth_headers(customer)

    missing = client.post("/api/cart/add", json={"productId": str(uuid.uuid4())}, headers=headers)
    inactive = client.post("/api/cart/add", json={"productId": str(retired.id)}, headers=headers)

    assert missing.status_code == 404
    assert missing.json()["message"] == "Product not found or not available"
    assert inactive.status_code == 404


def test_add_rejects_out_of_range_quantity(client, customer, auth_headers, make_product):
    mug = make_product()

    response = client.post(
        "/api/cart/add",
        json={"productId": str(mug.id), "quantity": 0},
        headers=auth_headers(customer),
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Validation failed"


def test_update_quantity_and_zero_removes(client, customer, auth_headers, make_product, fill_cart):
    mug = make_product("Mug", price="5.00", stock=10)
    lamp = make_product("Lamp", price="30.00", stock=10)
    fill_cart(customer, [(mug, 1), (lamp, 1)])
    headers = auth_headers(customer)

    updated = client.put(
        "/api/cart/update", json={"productId": str(mug.id), "quantity": 4}, headers=headers
    ).json()["cart"]
    assert updated["totalItems"] == 5
    assert updated["totalPrice"] == 50.0

    removed = client.put(
        "/api/cart/update", json={"productId": str(lamp.id), "quantity": 0}, headers=headers
    ).json()["cart"]
    assert [line["product"]["id"] for line in removed["items"]] == [str(mug.id)]
    assert removed["totalPrice"] == 20.0


def test_update_line_not_in_cart(client, customer, auth_headers, make_product, fill_cart):
    fill_cart(customer, [(make_product("Mug"), 1)])
    other = make_product("Other")

    response = client.put(
        "/api/cart/update",
        json={"productId": str(other.id), "quantity": 2},
        headers=auth_headers(customer),
    )

    assert response.status_code == 404
    assert response.json()["message"] == "Product not found in cart"


def test_update_without_cart(client, customer, auth_headers, make_product):
    response = client.put(
        "/api/cart/update",
        json={"productId": str(make_product().id), "quantity": 1},
        headers=auth_headers(customer),
    )

    assert response.status_code == 404
    assert response.json()["message"] == "Cart not found"


def test_remove_and_clear(client, customer, auth_headers, make_product, fill_cart):
    mug = make_product("Mug", price="5.00")
    lamp = make_product("Lamp", price="30.00")
    fill_cart(customer, [(mug, 2), (lamp, 1)])
    headers = auth_headers(customer)

    removed = client.request(
        "DELETE", "/api/cart/remove", json={"productId": str(mug.id)}, headers=headers
    )
    assert removed.status_code == 200
    assert removed.json()["cart"]["totalItems"] == 1

    cleared = client.delete("/api/cart/clear", headers=headers)
    assert cleared.status_code == 200
    assert cleared.json()["message"] == "Cart cleared successfully"
    assert cleared.json()["cart"]["items"] == []

    assert client.get("/api/cart/count", headers=headers).json() == {"count": 0}


def test_count_without_cart_is_zero(client, customer, auth_headers):
    response = client.get("/api/cart/count", headers=auth_headers(customer))

    assert response.json() == {"count": 0}


def test_deactivated_product_shows_placeholder(client, customer, auth_headers, make_product, fill_cart):
    ghost = make_product("Ghost", price="9.99", is_active=False)
    fill_cart(customer, [(ghost, 1)])

    cart = client.get("/api/cart", headers=auth_headers(customer)).json()["cart"]

    line = cart["items"][0]
    assert line["product"]["name"] == "Product not found"
    assert line["product"]["isActive"] is False
    assert line["price"] == 9.99


def test_cart_requires_auth(client):
    assert client.get("/api/cart").status_code == 401
