"""
Pytest fixtures and configuration for Booth POS backend tests

Every test gets its own SQLite file database (WAL mode, foreign keys on)
seeded with the default catalog.
"""
import pytest
from fastapi.testclient import TestClient

from booth_pos.core.database import init_db, make_engine, make_session_factory
from booth_pos.domain.product import Product, ProductCreate
from booth_pos.main import create_app
from booth_pos.repositories.order_repository import TransactionRepository
from booth_pos.repositories.product_repository import ProductRepository


@pytest.fixture(scope="function")
def database_url(tmp_path):
    return f"sqlite:///{tmp_path / 'pos_test.db'}"


@pytest.fixture(scope="function")
def engine(database_url):
    """
    Provides a fresh, seeded database engine for each test

    Scope: function (new database file per test)
    """
    engine = make_engine(database_url)
    init_db(engine, seed=True)
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(engine):
    return make_session_factory(engine)


@pytest.fixture
def transaction_repo(session_factory):
    return TransactionRepository(session_factory)


@pytest.fixture
def product_repo(session_factory):
    return ProductRepository(session_factory)


@pytest.fixture
def product_a(product_repo) -> Product:
    """Catalog product priced 1.50"""
    return product_repo.create(ProductCreate(name="Product A", unit_price=150, category_id="snack"))


@pytest.fixture
def product_b(product_repo) -> Product:
    """Catalog product priced 2.00"""
    return product_repo.create(
        ProductCreate(name="Product B", unit_price=200, category_id="boisson-sans-alcool")
    )


@pytest.fixture
def client(session_factory):
    """
    Provides an API client bound to the per-test database

    Each client gets a fresh application, so the register cart starts empty.
    """
    app = create_app(session_factory=session_factory)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def sample_commit_lines():
    """
    Two lines as the register would send them: A x2 (150) and B x1 (200)
    """
    return [
        {"product_id": "prod-a", "name": "Product A", "unit_price": 150, "quantity": 2},
        {"product_id": "prod-b", "name": "Product B", "unit_price": 200, "quantity": 1},
    ]
