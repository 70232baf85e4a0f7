import pytest
from decimal import Decimal


def _create_customer(client, name="Api Cloth House", opening="1200"):
    response = client.post(
        "/api/v1/customers",
        json={"name": name, "opening_balance": opening, "opening_date": "2024-01-01"},
    )
    assert response.status_code == 201
    return response.json()


def _create_product(client, stock="100"):
    response = client.post(
        "/api/v1/products",
        json={"name": "Khaddar", "unit": "meter", "unit_price": "40", "current_stock": stock},
    )
    assert response.status_code == 201
    return response.json()


def test_health_endpoints(client):
    assert client.get("/health").json() == {"status": "healthy"}
    assert client.get("/api/v1/health").status_code == 200


def test_create_and_get_customer(client):
    created = _create_customer(client)

    response = client.get(f"/api/v1/customers/{created['id']}")

    assert response.status_code == 200
    assert Decimal(response.json()["current_balance"]) == Decimal("1200")


def test_payment_in_flow_and_statement(client):
    customer = _create_customer(client)

    response = client.post(
        "/api/v1/payments/in",
        json={"customer_id": customer["id"], "payment_date": "2024-01-05", "amount": "500"},
    )
    assert response.status_code == 201
    payment = response.json()
    assert payment["receipt_no"] == "PI-0001"
    assert Decimal(payment["customer_balance"]) == Decimal("700")

    statement = client.get(f"/api/v1/customers/{customer['id']}/statement").json()
    assert [Decimal(line["balance"]) for line in statement["lines"]] == [Decimal("1200"), Decimal("700")]
    assert Decimal(statement["closing_balance"]) == Decimal("700")

    response = client.put(f"/api/v1/payments/in/{payment['id']}", json={"amount": "800"})
    assert response.status_code == 200
    assert Decimal(response.json()["customer_balance"]) == Decimal("400")

    response = client.delete(f"/api/v1/payments/in/{payment['id']}")
    assert response.status_code == 204
    customer = client.get(f"/api/v1/customers/{customer['id']}").json()
    assert Decimal(customer["current_balance"]) == Decimal("1200")


def test_supplier_payment_out(client):
    supplier = client.post("/api/v1/suppliers", json={"name": "Api Yarn", "opening_balance": "1000"}).json()

    response = client.post(
        "/api/v1/payments/out",
        json={"supplier_id": supplier["id"], "payment_date": "2024-01-05", "amount": "250", "payment_method": "cheque"},
    )

    assert response.status_code == 201
    assert Decimal(response.json()["supplier_balance"]) == Decimal("750")
    assert len(client.get(f"/api/v1/payments/out?supplier_id={supplier['id']}").json()) == 1


def test_negative_payment_is_rejected_with_422(client):
    customer = _create_customer(client)

    response = client.post(
        "/api/v1/payments/in",
        json={"customer_id": customer["id"], "payment_date": "2024-01-05", "amount": "-5"},
    )

    assert response.status_code == 422
    assert response.json()["error"] == "validation_error"


@pytest.mark.parametrize("path", ["/api/v1/payments/in", "/api/v1/ledgers/customer/{id}/adjustments"])
def test_amount_with_too_many_digits_returns_422(client, path):
    customer = _create_customer(client)
    payload = {"customer_id": customer["id"], "payment_date": "2024-01-05", "amount": "1e30"}

    response = client.post(path.format(id=customer["id"]), json=payload)

    assert response.status_code == 422
    assert response.json()["error"] == "validation_error"
    assert Decimal(client.get(f"/api/v1/customers/{customer['id']}").json()["current_balance"]) == Decimal("1200")


def test_unknown_customer_returns_404(client):
    response = client.post(
        "/api/v1/payments/in",
        json={"customer_id": 999, "payment_date": "2024-01-05", "amount": "5"},
    )

    assert response.status_code == 404
    body = response.json()
    assert body["error"] == "not_found"
    assert "999" in body["message"]


def test_adjustment_and_verify(client):
    customer = _create_customer(client)

    response = client.post(
        f"/api/v1/ledgers/customer/{customer['id']}/adjustments",
        json={"amount": "-200", "transaction_date": "2024-01-02", "description": "Rate difference"},
    )
    assert response.status_code == 201
    assert Decimal(response.json()["credit"]) == Decimal("200")

    verify = client.get(f"/api/v1/ledgers/customer/{customer['id']}/verify").json()
    assert verify["consistent"] is True
    assert Decimal(verify["current_balance"]) == Decimal("1000")


def test_zero_adjustment_returns_400(client):
    customer = _create_customer(client)

    response = client.post(f"/api/v1/ledgers/customer/{customer['id']}/adjustments", json={"amount": "0"})

    assert response.status_code == 400
    assert response.json()["error"] == "invalid_transaction"


def test_sales_invoice_lifecycle(client):
    customer = _create_customer(client, opening="0")
    product = _create_product(client)

    response = client.post(
        "/api/v1/sales/invoices",
        json={
            "customer_id": customer["id"],
            "invoice_date": "2024-03-01",
            "items": [{"product_id": product["id"], "quantity": "10", "unit_price": "40"}],
            "save_as": "draft",
        },
    )
    assert response.status_code == 201
    invoice = response.json()
    assert invoice["status"] == "draft"

    response = client.post(f"/api/v1/sales/invoices/{invoice['id']}/finalize")
    assert response.status_code == 200
    assert response.json()["status"] == "finalized"
    assert Decimal(client.get(f"/api/v1/customers/{customer['id']}").json()["current_balance"]) == Decimal("400")
    assert Decimal(client.get(f"/api/v1/products/{product['id']}").json()["current_stock"]) == Decimal("90")

    response = client.delete(f"/api/v1/sales/invoices/{invoice['id']}")
    assert response.status_code == 204
    assert Decimal(client.get(f"/api/v1/customers/{customer['id']}").json()["current_balance"]) == Decimal("0")


def test_oversell_returns_400(client):
    customer = _create_customer(client, opening="0")
    product = _create_product(client, stock="5")

    response = client.post(
        "/api/v1/sales/invoices",
        json={
            "customer_id": customer["id"],
            "invoice_date": "2024-03-01",
            "items": [{"product_id": product["id"], "quantity": "6", "unit_price": "40"}],
        },
    )

    assert response.status_code == 400
    assert response.json()["error"] == "insufficient_stock"


def test_purchase_order_credits_supplier(client):
    supplier = client.post("/api/v1/suppliers", json={"name": "Api Dyes"}).json()
    product = _create_product(client)

    response = client.post(
        "/api/v1/purchases/orders",
        json={
            "supplier_id": supplier["id"],
            "po_date": "2024-03-01",
            "items": [{"product_id": product["id"], "quantity": "20", "unit_price": "30"}],
        },
    )

    assert response.status_code == 201
    assert response.json()["po_no"] == "PO-0001"
    assert Decimal(client.get(f"/api/v1/suppliers/{supplier['id']}").json()["current_balance"]) == Decimal("600")


def test_manual_stock_in_and_out(client):
    product = _create_product(client)

    response = client.post(
        "/api/v1/stock/in",
        json={"movement_date": "2024-03-01", "items": [{"product_id": product["id"], "quantity": "5"}]},
    )
    assert response.status_code == 201
    assert response.json()[0]["reference_no"] == "STK-IN-0001"

    response = client.post(
        "/api/v1/stock/out",
        json={"movement_date": "2024-03-02", "items": [{"product_id": product["id"], "quantity": "15"}]},
    )
    assert response.status_code == 201
    assert Decimal(client.get(f"/api/v1/products/{product['id']}").json()["current_stock"]) == Decimal("90")


def test_deactivate_customer(client):
    customer = _create_customer(client)

    response = client.delete(f"/api/v1/customers/{customer['id']}")

    assert response.status_code == 200
    assert response.json()["is_active"] is False
    assert client.get("/api/v1/customers").json() == []


def test_statement_with_bad_range(client):
    customer = _create_customer(client)

    response = client.get(
        f"/api/v1/customers/{customer['id']}/statement?from_date=2024-02-01&to_date=2024-01-01"
    )

    assert response.status_code == 400


def test_configure_sequence(client):
    response = client.put("/api/v1/sequences/payment_in", json={"prefix": "RCPT", "next_number": 10})

    assert response.status_code == 200
    assert response.json()["next_document_no"] == "RCPT-0010"
    assert client.get("/api/v1/sequences/payment_in").json()["prefix"] == "RCPT"
