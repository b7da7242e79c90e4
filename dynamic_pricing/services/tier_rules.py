"""
Tier rule matching for batch discount assignment.

A RuleConfig is an ordered list of tiers plus an optional default tier.
Each tier bounds lifetime spend and days since last order (both inclusive).
Matching is first-match-wins in list order: tiers may overlap, so order is
significant and is preserved exactly as given.

Usage:
    config = RuleConfig.from_dict(request_json['ruleConfig'])
    recommendations = build_recommendations(customer_metrics, config)
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..utils.exceptions import ValidationError
from .customer_metrics import CustomerMetrics

DEFAULT_CODE_PREFIX = 'WINBACK'

# Business cap on any single discount
MAX_DISCOUNT_PERCENT = 40

DEFAULT_TIER_RATIONALE = 'Default rule applied.'
DEFAULT_TIER_MESSAGING = 'We appreciate you and wanted to send you a special offer.'
MATCHED_TIER_MESSAGING = 'Personalized win-back offer based on your purchase history.'


def _is_number(value) -> bool:
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


def _decimal_field(data: dict, key: str, path: str) -> Optional[Decimal]:
    value = data.get(key)
    if value is None:
        return None
    if not _is_number(value):
        raise ValidationError(f'{path}.{key} must be a number', field=f'{path}.{key}')
    amount = Decimal(str(value))
    if not amount.is_finite():
        # JSON has no infinity; omit the bound instead
        raise ValidationError(f'{path}.{key} must be finite (omit it for no bound)', field=f'{path}.{key}')
    if amount < 0:
        raise ValidationError(f'{path}.{key} must not be negative', field=f'{path}.{key}')
    return amount


def _int_field(data: dict, key: str, path: str) -> Optional[int]:
    value = _decimal_field(data, key, path)
    if value is None:
        return None
    if value != value.to_integral_value():
        raise ValidationError(f'{path}.{key} must be a whole number of days', field=f'{path}.{key}')
    return int(value)


def _text_field(data: dict, key: str, path: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f'{path}.{key} must be a string', field=f'{path}.{key}')
    value = value.strip()
    return value or None


def _format_bound(value) -> str:
    return 'any' if value is None else f'{value}'


@dataclass(frozen=True)
class TierRule:
    """One eligibility tier. A bound of None means unbounded."""
    min_total_spent: Decimal = Decimal('0')
    max_total_spent: Optional[Decimal] = None
    min_days_since_last_order: int = 0
    max_days_since_last_order: Optional[int] = None
    discount_percent: Decimal = Decimal('0')
    discount_code: Optional[str] = None
    discount_code_prefix: str = DEFAULT_CODE_PREFIX
    rationale: Optional[str] = None
    messaging_angle: Optional[str] = None
    expected_value: Optional[float] = None

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        path: str = 'tier',
        max_discount_percent: int = MAX_DISCOUNT_PERCENT
    ) -> 'TierRule':
        """
        Build a tier from its JSON form, validating every field.

        Raises:
            ValidationError: naming the offending field
        """
        if not isinstance(data, dict):
            raise ValidationError(f'{path} must be an object', field=path)

        min_spent = _decimal_field(data, 'minTotalSpent', path)
        max_spent = _decimal_field(data, 'maxTotalSpent', path)
        min_days = _int_field(data, 'minDaysSinceLastOrder', path)
        max_days = _int_field(data, 'maxDaysSinceLastOrder', path)

        min_spent = min_spent if min_spent is not None else Decimal('0')
        min_days = min_days if min_days is not None else 0

        if max_spent is not None and max_spent < min_spent:
            raise ValidationError(f'{path}.maxTotalSpent is below minTotalSpent', field=f'{path}.maxTotalSpent')
        if max_days is not None and max_days < min_days:
            raise ValidationError(
                f'{path}.maxDaysSinceLastOrder is below minDaysSinceLastOrder',
                field=f'{path}.maxDaysSinceLastOrder'
            )

        percent = _decimal_field(data, 'discountPercent', path)
        percent = percent if percent is not None else Decimal('0')
        if percent > max_discount_percent:
            raise ValidationError(
                f'{path}.discountPercent must be between 0 and {max_discount_percent}',
                field=f'{path}.discountPercent'
            )

        expected_value = data.get('expectedValue')
        if expected_value is not None and not _is_number(expected_value):
            raise ValidationError(f'{path}.expectedValue must be a number', field=f'{path}.expectedValue')

        return cls(
            min_total_spent=min_spent,
            max_total_spent=max_spent,
            min_days_since_last_order=min_days,
            max_days_since_last_order=max_days,
            discount_percent=percent,
            discount_code=_text_field(data, 'discountCode', path),
            discount_code_prefix=_text_field(data, 'discountCodePrefix', path) or DEFAULT_CODE_PREFIX,
            rationale=_text_field(data, 'rationale', path),
            messaging_angle=_text_field(data, 'messagingAngle', path),
            expected_value=float(expected_value) if expected_value is not None else None,
        )

    def matches(self, metrics: CustomerMetrics) -> bool:
        """Both spend and recency fall inside this tier's inclusive bounds."""
        spent = metrics.total_spent
        if spent < self.min_total_spent:
            return False
        if self.max_total_spent is not None and spent > self.max_total_spent:
            return False

        days = metrics.days_since_last_order
        if days < self.min_days_since_last_order:
            return False
        if self.max_days_since_last_order is not None and days > self.max_days_since_last_order:
            return False
        return True

    @property
    def percent_value(self):
        """Discount percent as int when whole (20, not 20.0)."""
        if self.discount_percent == self.discount_percent.to_integral_value():
            return int(self.discount_percent)
        return float(self.discount_percent)

    @property
    def code(self) -> str:
        """Explicit code, or prefix + percent upper-cased."""
        if self.discount_code:
            return self.discount_code
        return f'{self.discount_code_prefix}{self.percent_value}'.upper()

    def describe(self) -> str:
        return (
            f'Rule match: spent between {self.min_total_spent}-{_format_bound(self.max_total_spent)}, '
            f'inactive {self.min_days_since_last_order}-{_format_bound(self.max_days_since_last_order)} days.'
        )


@dataclass(frozen=True)
class RuleConfig:
    """Ordered tiers (first match wins) plus an optional catch-all default."""
    tiers: Tuple[TierRule, ...] = field(default_factory=tuple)
    default: Optional[TierRule] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any], max_discount_percent: int = MAX_DISCOUNT_PERCENT) -> 'RuleConfig':
        """
        Validate and build a rule config.

        Expected shape:
        {
            "tiers": [{"minTotalSpent": 0, "maxTotalSpent": 100, "discountPercent": 10}, ...],
            "default": {"discountPercent": 5}
        }
        """
        if not isinstance(data, dict):
            raise ValidationError('ruleConfig must be an object', field='ruleConfig')

        raw_tiers = data.get('tiers', [])
        if raw_tiers is None:
            raw_tiers = []
        if not isinstance(raw_tiers, list):
            raise ValidationError('ruleConfig.tiers must be a list', field='ruleConfig.tiers')

        tiers = tuple(
            TierRule.from_dict(tier, f'ruleConfig.tiers[{i}]', max_discount_percent)
            for i, tier in enumerate(raw_tiers)
        )

        default = None
        if data.get('default') is not None:
            default = TierRule.from_dict(data['default'], 'ruleConfig.default', max_discount_percent)

        if not tiers and default is None:
            raise ValidationError('ruleConfig needs at least one tier or a default', field='ruleConfig')

        return cls(tiers=tiers, default=default)


@dataclass(frozen=True)
class Recommendation:
    """Per-customer discount decision."""
    customer_id: Any
    email: Optional[str]
    discount_percent: Any
    discount_code: str
    rationale: str
    messaging_angle: str
    expected_value: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'customerId': self.customer_id,
            'email': self.email,
            'discountPercent': self.discount_percent,
            'discountCode': self.discount_code,
            'rationale': self.rationale,
            'messagingAngle': self.messaging_angle,
        }
        if self.expected_value is not None:
            data['expectedValue'] = self.expected_value
        return data


def _recommend(metrics: CustomerMetrics, tier: TierRule, rationale: str, messaging_angle: str) -> Recommendation:
    return Recommendation(
        customer_id=metrics.id,
        email=metrics.email,
        discount_percent=tier.percent_value,
        discount_code=tier.code,
        rationale=tier.rationale or rationale,
        messaging_angle=tier.messaging_angle or messaging_angle,
        expected_value=tier.expected_value,
    )


def match_customer(metrics: CustomerMetrics, config: RuleConfig) -> Optional[Recommendation]:
    """
    Pick the first matching tier for a customer.

    Returns:
        Recommendation from the first matching tier, else from the default
        tier, else None (customer excluded)
    """
    for tier in config.tiers:
        if tier.matches(metrics):
            return _recommend(metrics, tier, tier.describe(), MATCHED_TIER_MESSAGING)

    if config.default is not None:
        return _recommend(metrics, config.default, DEFAULT_TIER_RATIONALE, DEFAULT_TIER_MESSAGING)

    return None


def is_deliverable(recommendation: Optional[Recommendation]) -> bool:
    """Only positive discounts with an email address reach Shopify/MailerLite."""
    if recommendation is None:
        return False
    return recommendation.discount_percent > 0 and bool(recommendation.email)


def build_recommendations(customers: Iterable[CustomerMetrics], config: RuleConfig) -> List[Recommendation]:
    """Match every customer and keep the deliverable recommendations, in input order."""
    recommendations = []
    for metrics in customers:
        recommendation = match_customer(metrics, config)
        if is_deliverable(recommendation):
            recommendations.append(recommendation)
    return recommendations
