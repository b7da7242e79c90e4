"""
Tests for the customer metrics reducer.

Tests cover:
- Order count and spend parsing
- Average order value
- Days since last activity (floor, fallback, sentinel, clamping)
- Field defaults and dashboard serialization
"""
import pytest
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from dynamic_pricing.services.customer_metrics import (
    NO_ACTIVITY_DAYS,
    days_since,
    parse_order_count,
    parse_spend,
    parse_timestamp,
    reduce_customer,
    reduce_customers,
)

NOW = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


class TestParsing:
    """Test raw field parsing."""

    @pytest.mark.parametrize('value,expected', [
        (3, 3),
        ('7', 7),
        (None, 0),
        ('abc', 0),
        (-2, 0),
        (True, 0),
    ])
    def test_order_count(self, value, expected):
        assert parse_order_count(value) == expected

    @pytest.mark.parametrize('value,expected', [
        ('150.00', Decimal('150.00')),
        ('  42.5 ', Decimal('42.5')),
        (19.99, Decimal('19.99')),
        (None, Decimal('0.00')),
        ('', Decimal('0.00')),
        ('abc', Decimal('0.00')),
        ('-10.00', Decimal('0.00')),
        ('NaN', Decimal('0.00')),
    ])
    def test_spend(self, value, expected):
        assert parse_spend(value) == expected

    def test_timestamp_with_z_suffix(self):
        assert parse_timestamp('2026-02-01T12:00:00Z') == datetime(2026, 2, 1, 12, tzinfo=timezone.utc)

    def test_timestamp_with_offset(self):
        parsed = parse_timestamp('2026-02-28T07:00:00-05:00')
        assert parsed == datetime(2026, 2, 28, 12, tzinfo=timezone.utc)

    def test_naive_timestamp_is_utc(self):
        assert parse_timestamp('2026-02-01T12:00:00').tzinfo is not None

    @pytest.mark.parametrize('value', [None, '', 'not-a-date', 12345])
    def test_unusable_timestamp(self, value):
        assert parse_timestamp(value) is None


class TestDaysSince:
    """Test the recency computation."""

    def test_whole_days(self):
        assert days_since(NOW - timedelta(days=30), NOW) == 30

    def test_floors_partial_days(self):
        assert days_since(NOW - timedelta(days=29, hours=23), NOW) == 29

    def test_same_moment_is_zero(self):
        assert days_since(NOW, NOW) == 0

    def test_future_clamps_to_zero(self):
        assert days_since(NOW + timedelta(days=3), NOW) == 0

    def test_missing_is_sentinel(self):
        assert days_since(None, NOW) == NO_ACTIVITY_DAYS


class TestReduceCustomer:
    """Test reduce_customer."""

    def test_basic_metrics(self, raw_customer):
        raw = raw_customer(
            1001, email='jane@example.com', orders_count=3, total_spent='150.00',
            updated_at='2026-01-30T12:00:00Z', first_name='Jane', last_name='Doe'
        )

        metrics = reduce_customer(raw, now=NOW)

        assert metrics.id == 1001
        assert metrics.email == 'jane@example.com'
        assert metrics.first_name == 'Jane'
        assert metrics.last_name == 'Doe'
        assert metrics.total_orders == 3
        assert metrics.total_spent == Decimal('150.00')
        assert metrics.average_order_value == Decimal('50.00')
        assert metrics.days_since_last_order == 30
        assert metrics.has_recency_signal

    def test_average_order_value_rounds_to_cents(self, raw_customer):
        metrics = reduce_customer(raw_customer(1, orders_count=3, total_spent='100.00'), now=NOW)
        assert metrics.average_order_value == Decimal('33.33')

    def test_zero_orders_gives_zero_average(self, raw_customer):
        """Spend without orders must not divide by zero."""
        metrics = reduce_customer(raw_customer(1, orders_count=0, total_spent='80.00'), now=NOW)
        assert metrics.total_spent == Decimal('80.00')
        assert metrics.average_order_value == 0

    def test_missing_counts_default_to_zero(self):
        metrics = reduce_customer({'id': 5}, now=NOW)

        assert metrics.total_orders == 0
        assert metrics.total_spent == Decimal('0.00')
        assert metrics.average_order_value == 0
        assert metrics.days_since_last_order == NO_ACTIVITY_DAYS
        assert not metrics.has_recency_signal
        assert metrics.last_order_date is None

    def test_prefers_updated_at(self, raw_customer):
        raw = raw_customer(1, updated_at='2026-02-20T12:00:00Z', created_at='2025-03-01T12:00:00Z')
        assert reduce_customer(raw, now=NOW).days_since_last_order == 9

    def test_falls_back_to_created_at(self, raw_customer):
        raw = raw_customer(1, updated_at=None, created_at='2025-12-01T12:00:00Z')
        assert reduce_customer(raw, now=NOW).days_since_last_order == 90

    def test_unparseable_updated_at_falls_back(self, raw_customer):
        raw = raw_customer(1, updated_at='yesterday', created_at='2026-02-19T12:00:00Z')
        assert reduce_customer(raw, now=NOW).days_since_last_order == 10

    def test_future_timestamp_clamped(self, raw_customer):
        raw = raw_customer(1, updated_at='2026-03-05T12:00:00Z')
        assert reduce_customer(raw, now=NOW).days_since_last_order == 0

    def test_defaults(self, raw_customer):
        metrics = reduce_customer(raw_customer(1, email='', state=None, tags=None), now=NOW)

        assert metrics.email is None
        assert metrics.first_name == 'Customer'
        assert metrics.last_name == ''
        assert metrics.tags == ''
        assert metrics.state == 'active'

    def test_naive_now_is_treated_as_utc(self, raw_customer):
        raw = raw_customer(1, updated_at='2026-02-27T12:00:00Z')
        naive_now = datetime(2026, 3, 1, 12, 0, 0)
        assert reduce_customer(raw, now=naive_now).days_since_last_order == 2


class TestSerialization:
    """Test the dashboard JSON shape."""

    def test_to_dict_uses_camel_case(self, raw_customer):
        raw = raw_customer(
            7, email='a@example.com', orders_count=2, total_spent='45.50',
            updated_at='2026-02-01T12:00:00Z', tags='vip'
        )

        data = reduce_customer(raw, now=NOW).to_dict()

        assert data == {
            'id': 7,
            'email': 'a@example.com',
            'firstName': 'Customer',
            'lastName': '',
            'totalOrders': 2,
            'totalSpent': 45.5,
            'averageOrderValue': 22.75,
            'daysSinceLastOrder': 28,
            'lastOrderDate': '2026-02-01T12:00:00+00:00',
            'tags': 'vip',
            'state': 'enabled',
        }

    def test_reduce_customers_keeps_order(self, raw_customer):
        raws = [raw_customer(i) for i in (3, 1, 2)]
        assert [m.id for m in reduce_customers(raws, now=NOW)] == [3, 1, 2]
