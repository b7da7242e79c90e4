"""
Customer metrics reducer.

Turns a raw Shopify customer record into the fixed metrics shape used by the
dashboard and the tier rule matcher. No per-customer order calls are made:
lifetime order count and spend come straight from the customer object.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional

# Stands in for "no recency signal": either the customer never ordered or the
# record carries no usable timestamp.
NO_ACTIVITY_DAYS = 999

SECONDS_PER_DAY = 86400


@dataclass(frozen=True)
class CustomerMetrics:
    """Aggregate metrics for one customer."""
    id: Any
    email: Optional[str]
    first_name: str
    last_name: str
    total_orders: int
    total_spent: Decimal
    average_order_value: Decimal
    days_since_last_order: int
    last_order_date: Optional[str] = None
    tags: str = ''
    state: str = 'active'

    @property
    def has_recency_signal(self) -> bool:
        return self.days_since_last_order != NO_ACTIVITY_DAYS

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'email': self.email,
            'firstName': self.first_name,
            'lastName': self.last_name,
            'totalOrders': self.total_orders,
            'totalSpent': float(self.total_spent),
            'averageOrderValue': float(self.average_order_value),
            'daysSinceLastOrder': self.days_since_last_order,
            'lastOrderDate': self.last_order_date,
            'tags': self.tags,
            'state': self.state,
        }


def parse_order_count(value) -> int:
    """Order count as a non-negative int; anything unusable is 0."""
    if value is None or isinstance(value, bool):
        return 0
    try:
        count = int(value)
    except (TypeError, ValueError):
        return 0
    return max(count, 0)


def parse_spend(value) -> Decimal:
    """Lifetime spend as a non-negative Decimal; anything unusable is 0.00."""
    if value is None or isinstance(value, bool):
        return Decimal('0.00')
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return Decimal('0.00')
    if not amount.is_finite() or amount < 0:
        return Decimal('0.00')
    return amount


def parse_timestamp(value) -> Optional[datetime]:
    """Parse a Shopify ISO-8601 timestamp into an aware datetime."""
    if not value or not isinstance(value, str):
        return None
    text = value.strip()
    if text.endswith('Z'):
        text = text[:-1] + '+00:00'
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def days_since(timestamp: Optional[datetime], now: datetime) -> int:
    """
    Whole days elapsed since timestamp.

    Future timestamps (clock skew, bad data) clamp to 0 rather than going
    negative, so they never fall through every tier's lower day bound.
    """
    if timestamp is None:
        return NO_ACTIVITY_DAYS
    elapsed = (now - timestamp).total_seconds()
    return max(int(elapsed // SECONDS_PER_DAY), 0)


def reduce_customer(raw: Dict[str, Any], now: datetime = None) -> CustomerMetrics:
    """
    Reduce a raw Shopify customer record to CustomerMetrics.

    Args:
        raw: Customer object from the Admin REST API
        now: Reference time (defaults to current UTC time)

    Returns:
        CustomerMetrics for the record
    """
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    total_orders = parse_order_count(raw.get('orders_count'))
    total_spent = parse_spend(raw.get('total_spent'))

    if total_orders > 0:
        average_order_value = (total_spent / total_orders).quantize(Decimal('0.01'))
    else:
        average_order_value = Decimal('0')

    last_activity = parse_timestamp(raw.get('updated_at')) or parse_timestamp(raw.get('created_at'))

    return CustomerMetrics(
        id=raw.get('id'),
        email=raw.get('email') or None,
        first_name=raw.get('first_name') or 'Customer',
        last_name=raw.get('last_name') or '',
        total_orders=total_orders,
        total_spent=total_spent,
        average_order_value=average_order_value,
        days_since_last_order=days_since(last_activity, now),
        last_order_date=last_activity.isoformat() if last_activity else None,
        tags=raw.get('tags') or '',
        state=raw.get('state') or 'active',
    )


def reduce_customers(raw_customers, now: datetime = None):
    """Reduce a sequence of raw records with a single reference time."""
    if now is None:
        now = datetime.now(timezone.utc)
    return [reduce_customer(raw, now=now) for raw in raw_customers]
