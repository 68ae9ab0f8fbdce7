"""
Pytest fixtures for stockroom backend tests.

Provides an in-memory database, a per-test wipe of every table, a test
client and a couple of catalog fixtures.
"""

import pytest
from stockroom import create_app
from stockroom.extensions import db
from stockroom.services import catalog_service


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'STORE_TIMEZONE': 'UTC',
        'CURRENCY_SYMBOL': 'R$',
        'DEFAULT_MIN_STOCK_THRESHOLD': 3,
    })

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create fresh database for each test."""
    with app.app_context():
        # Clear all data but keep schema
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        yield db.session

        # Cleanup after test
        db.session.rollback()


def make_draft(**overrides) -> dict:
    """Product draft: 'Basic Tee' with White M (stock 5) and Black L (stock 10)."""
    draft = {
        "name": "Basic Tee",
        "category": "T-Shirts",
        "brand": "Urban Style",
        "sale_price_cents": 7990,
        "cost_price_cents": 3200,
        "min_stock_threshold": 3,
        "variants": [
            {"size": "M", "color": "White", "initial_stock": 5},
            {"size": "L", "color": "Black", "initial_stock": 10},
        ],
    }
    draft.update(overrides)
    return draft


@pytest.fixture(scope='function')
def product(db_session):
    """Basic Tee; variants[0] is White M with 5 units, variants[1] Black L with 10."""
    return catalog_service.add_product(make_draft())


@pytest.fixture(scope='function')
def variant(product):
    return product.variants[0]


@pytest.fixture(scope='function')
def draft_factory():
    """Build product drafts with overrides, e.g. draft_factory(name="Polo")."""
    return make_draft
