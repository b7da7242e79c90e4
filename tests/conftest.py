"""
Shared fixtures.

The app is built with explicit Settings so tests never read the real
environment; upstream clients are patched per test.
"""
import pytest

from dynamic_pricing import create_app
from dynamic_pricing.config import Settings


@pytest.fixture
def settings():
    """Fully configured settings with fake credentials."""
    return Settings(
        shopify_store='test-store',
        shopify_api_key='shpat_test',
        mailerlite_api_key='ml_test',
        openai_api_key='sk-test',
        discount_creation_delay_ms=0,
    )


@pytest.fixture
def app(settings):
    return create_app('testing', settings=settings)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def bare_app():
    """App with no credentials configured."""
    return create_app('testing', settings=Settings())


@pytest.fixture
def bare_client(bare_app):
    return bare_app.test_client()


def _make_raw_customer(customer_id, email=None, orders_count=0, total_spent='0.00',
                       updated_at=None, created_at=None, **extra):
    """Shopify customer record as returned by customers.json."""
    raw = {
        'id': customer_id,
        'email': email,
        'first_name': extra.pop('first_name', None),
        'last_name': extra.pop('last_name', None),
        'orders_count': orders_count,
        'total_spent': total_spent,
        'updated_at': updated_at,
        'created_at': created_at,
        'tags': extra.pop('tags', ''),
        'state': extra.pop('state', 'enabled'),
    }
    raw.update(extra)
    return raw


@pytest.fixture
def raw_customer():
    """Factory for Shopify customer records."""
    return _make_raw_customer
