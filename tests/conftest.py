import os

os.environ.setdefault("APP_ENV", "test")

import pytest
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient
from decimal import Decimal
from datetime import date

from erp.config import settings
from erp.database import Base, build_engine, get_db
from erp.main import app
import erp.models  # noqa: F401
from erp.schemas.party import PartyCreate
from erp.schemas.stock import ProductCreate
from erp.services import party_service, stock_service
from erp.utils.constants import PartyKind

# Use TEST_DATABASE_URL from environment
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", settings.TEST_DATABASE_URL)

# Create test engine
engine = build_engine(TEST_DATABASE_URL)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(autouse=True)
def fresh_schema():
    """
    Rebuild every table before each test.

    Services commit their own unit of work, so a rollback-only session
    cannot isolate tests from each other.
    """
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture(scope="function")
def db_session(fresh_schema):
    """Create a fresh database session for each test."""
    session = TestingSessionLocal()
    yield session
    session.close()


@pytest.fixture
def client(db_session):
    """
    Create a TestClient that uses the test database session.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass  # Don't close, db_session fixture handles it

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def make_party(db, kind, name, opening_balance="0", opening_date=None):
    request = PartyCreate(
        name=name,
        mobile_no="0300-1234567",
        opening_balance=Decimal(opening_balance),
        opening_date=opening_date,
    )
    return party_service.create_party(db, kind, request)


@pytest.fixture
def customer(db_session):
    """Customer with no opening balance."""
    return make_party(db_session, PartyKind.CUSTOMER, "Ali Fabrics")


@pytest.fixture
def customer_1200(db_session):
    """Customer who already owes 1200."""
    return make_party(
        db_session, PartyKind.CUSTOMER, "Noor Textiles", "1200", opening_date=date(2024, 1, 1)
    )


@pytest.fixture
def supplier(db_session):
    return make_party(db_session, PartyKind.SUPPLIER, "Faisalabad Yarn Mills")


@pytest.fixture
def supplier_1200(db_session):
    """Supplier the business already owes 1200."""
    return make_party(
        db_session, PartyKind.SUPPLIER, "Karachi Dyeing Co", "1200", opening_date=date(2024, 1, 1)
    )


@pytest.fixture
def product(db_session):
    """Lawn fabric with 100 meters in stock."""
    return stock_service.create_product(
        db_session,
        ProductCreate(
            name="Lawn Fabric",
            category="Fabric",
            unit="meter",
            unit_price=Decimal("50.00"),
            current_stock=Decimal("100"),
        ),
    )
