"""
Pricing strategy catalog.

Each strategy carries the name/description sent to the model as the campaign
goal, plus a segment rule the dashboard uses to pre-select customers.
"""
from typing import Any, Callable, Dict, Iterable, List, Optional

from .customer_metrics import CustomerMetrics

STRATEGIES: Dict[str, Dict[str, str]] = {
    'retention': {
        'name': 'Customer Retention',
        'description': 'Reward loyal customers with personalized discounts to increase LTV.',
    },
    'reactivation': {
        'name': 'Win-Back Campaign',
        'description': 'Re-engage inactive customers with compelling offers.',
    },
    'upsell': {
        'name': 'Premium Upsell',
        'description': 'Encourage high-value customers to purchase more.',
    },
    'acquisition': {
        'name': 'New Customer Acquisition',
        'description': 'Competitive pricing for first-time buyers.',
    },
}


def _retention(c: CustomerMetrics) -> bool:
    # Loyal and recently active
    return c.total_orders >= 2 and 0 <= c.days_since_last_order <= 60


def _reactivation(c: CustomerMetrics) -> bool:
    return c.days_since_last_order > 60


def _upsell(c: CustomerMetrics) -> bool:
    return c.total_spent > 100 or c.average_order_value > 50


def _acquisition(c: CustomerMetrics) -> bool:
    # Never purchased, or cold for over a year
    return c.total_orders == 0 or c.days_since_last_order > 365


SEGMENT_RULES: Dict[str, Callable[[CustomerMetrics], bool]] = {
    'retention': _retention,
    'reactivation': _reactivation,
    'upsell': _upsell,
    'acquisition': _acquisition,
}


def get_strategy(key: Optional[str]) -> Optional[Dict[str, str]]:
    return STRATEGIES.get(key) if key else None


def list_strategies() -> List[Dict[str, str]]:
    return [{'key': key, **info} for key, info in STRATEGIES.items()]


def resolve_strategy_info(pricing_strategy: Optional[str], strategy_info: Optional[Dict[str, Any]] = None) -> Dict[str, str]:
    """
    Name and description for the prompt.

    Explicit strategyInfo from the request wins, then the catalog, then
    generic fallbacks.
    """
    strategy_info = strategy_info if isinstance(strategy_info, dict) else {}
    catalog = get_strategy(pricing_strategy) or {}
    return {
        'name': strategy_info.get('name') or catalog.get('name') or pricing_strategy or 'Unknown',
        'description': (
            strategy_info.get('description')
            or catalog.get('description')
            or 'No explicit strategy description was provided.'
        ),
    }


def select_segment(strategy: str, customers: Iterable[CustomerMetrics]) -> List[Any]:
    """
    IDs of the customers a strategy targets by default.

    Raises:
        KeyError: unknown strategy
    """
    rule = SEGMENT_RULES[strategy]
    return [c.id for c in customers if rule(c)]
