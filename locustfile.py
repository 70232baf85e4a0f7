"""
Load testing script for the Textile ERP API using Locust.

Run with:
    locust -f locustfile.py --host=http://localhost:8000 --headless -u 50 -r 5 -t 60s

Parameters:
    -u: Number of concurrent users
    -r: Spawn rate (users per second)
    -t: Test duration
"""

from locust import HttpUser, task, between
from datetime import date
import random
import uuid


class LedgerUser(HttpUser):
    """
    Simulates a shop clerk posting against a handful of shared customers.

    Task weights determine request distribution:
    - statements and balance checks (most frequent)
    - payments in
    - sales invoices
    - adjustments
    """

    # Wait 1-3 seconds between requests per user
    wait_time = between(1, 3)

    def on_start(self):
        """Create a customer and a well-stocked product (not counted in stats)"""
        suffix = uuid.uuid4().hex[:8]
        customer = self.client.post(
            "/api/v1/customers",
            json={"name": f"Load Customer {suffix}", "opening_balance": "100000"},
            name="/api/v1/customers (setup)"
        ).json()
        product = self.client.post(
            "/api/v1/products",
            json={"name": f"Load Fabric {suffix}", "unit": "meter", "unit_price": "50", "current_stock": "1000000"},
            name="/api/v1/products (setup)"
        ).json()
        self.customer_id = customer["id"]
        self.product_id = product["id"]

    @task(40)
    def view_statement(self):
        self.client.get(
            f"/api/v1/customers/{self.customer_id}/statement",
            name="/api/v1/customers/:id/statement"
        )

    @task(20)
    def check_balance(self):
        self.client.get(
            f"/api/v1/customers/{self.customer_id}",
            name="/api/v1/customers/:id"
        )

    @task(20)
    def receive_payment(self):
        self.client.post(
            "/api/v1/payments/in",
            json={
                "customer_id": self.customer_id,
                "payment_date": date.today().isoformat(),
                "amount": f"{random.uniform(10.0, 500.0):.2f}"
            },
            name="/api/v1/payments/in"
        )

    @task(10)
    def sales_invoice(self):
        self.client.post(
            "/api/v1/sales/invoices",
            json={
                "customer_id": self.customer_id,
                "invoice_date": date.today().isoformat(),
                "items": [{
                    "product_id": self.product_id,
                    "quantity": str(random.randint(1, 20)),
                    "unit_price": "50"
                }]
            },
            name="/api/v1/sales/invoices"
        )

    @task(5)
    def adjustment(self):
        self.client.post(
            f"/api/v1/ledgers/customer/{self.customer_id}/adjustments",
            json={"amount": f"{random.choice([-1, 1]) * random.uniform(1.0, 50.0):.2f}"},
            name="/api/v1/ledgers/customer/:id/adjustments"
        )

    @task(5)
    def verify_ledger(self):
        self.client.get(
            f"/api/v1/ledgers/customer/{self.customer_id}/verify",
            name="/api/v1/ledgers/customer/:id/verify"
        )

    @task(5)
    def health_check(self):
        """Hit health endpoint"""
        self.client.get("/health", name="/health")
