"""
Batch reactivation workflow.

Fetch customers from Shopify, reduce them to metrics, apply the operator's
tier rules, and optionally push the resulting recommendations into a new
MailerLite group. Runs sequentially in the request thread.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional

from ..config import Settings
from ..utils.exceptions import ConfigurationError, ValidationError
from .customer_metrics import reduce_customers
from .mailerlite_service import MailerLiteService, default_group_name
from .shopify_client import ShopifyClient
from .tier_rules import RuleConfig, build_recommendations

SAMPLE_SIZE = 20


def _optional_text(data: Dict[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f'{key} must be a string', field=key)
    return value.strip() or None


def _max_customers(value) -> Optional[int]:
    """
    Whole, non-negative customer count; absent, empty or 0 means the default.

    Accepts an int or a numeric string. Bools and fractional values are rejected.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValidationError('maxCustomers must be an integer', field='maxCustomers')

    if isinstance(value, str):
        if not value.strip():
            return None
        try:
            amount = Decimal(value.strip())
        except InvalidOperation:
            raise ValidationError('maxCustomers must be an integer', field='maxCustomers')
        if not amount.is_finite() or amount != amount.to_integral_value():
            raise ValidationError('maxCustomers must be an integer', field='maxCustomers')
        value = int(amount)
    elif not isinstance(value, int):
        raise ValidationError('maxCustomers must be an integer', field='maxCustomers')

    if value < 0:
        raise ValidationError('maxCustomers must not be negative', field='maxCustomers')
    return value or None


@dataclass(frozen=True)
class BatchRequest:
    """Validated body of a batch run."""
    rule_config: RuleConfig
    pricing_strategy: str = 'reactivation'
    campaign_name: Optional[str] = None
    max_customers: Optional[int] = None
    send_to_mailerlite: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BatchRequest':
        if not isinstance(data, dict):
            raise ValidationError('Request body must be a JSON object')

        if not data.get('ruleConfig'):
            raise ValidationError('ruleConfig is required to run batch reactivation.', field='ruleConfig')

        send = data.get('sendToMailerLite')
        if send is not None and not isinstance(send, bool):
            raise ValidationError('sendToMailerLite must be true or false', field='sendToMailerLite')

        return cls(
            rule_config=RuleConfig.from_dict(data['ruleConfig']),
            pricing_strategy=_optional_text(data, 'pricingStrategy') or 'reactivation',
            campaign_name=_optional_text(data, 'campaignName'),
            max_customers=_max_customers(data.get('maxCustomers')),
            send_to_mailerlite=bool(send),
        )


class ReactivationService:
    """
    Orchestrates a batch reactivation run.

    Usage:
        service = ReactivationService(settings)
        result = service.run_batch(BatchRequest.from_dict(payload))
    """

    def __init__(
        self,
        settings: Settings,
        shopify: ShopifyClient = None,
        mailerlite: MailerLiteService = None,
        logger: logging.Logger = None,
    ):
        self.settings = settings
        self._shopify = shopify
        self._mailerlite = mailerlite
        self.logger = logger or logging.getLogger(__name__)

    @property
    def shopify(self) -> ShopifyClient:
        if self._shopify is None:
            self._shopify = ShopifyClient.from_settings(self.settings)
        return self._shopify

    @property
    def mailerlite(self) -> MailerLiteService:
        if self._mailerlite is None:
            self._mailerlite = MailerLiteService.from_settings(self.settings)
        return self._mailerlite

    def batch_limit(self, requested: Optional[int]) -> int:
        """Requested size (or the default) capped at the configured maximum."""
        return min(requested or self.settings.default_batch_customers, self.settings.max_batch_customers)

    def _check_credentials(self, request: BatchRequest) -> None:
        if self._shopify is None and not self.settings.has_shopify:
            raise ConfigurationError('Shopify credentials not configured')
        if request.send_to_mailerlite and self._mailerlite is None and not self.settings.has_mailerlite:
            raise ConfigurationError('MAILERLITE_API_KEY not configured, cannot send directly to MailerLite.')

    def run_batch(self, request: BatchRequest, now: datetime = None) -> Dict[str, Any]:
        """
        Run the batch workflow.

        Returns:
            Dict with success, pricingStrategy, totalCustomersFetched,
            totalRecommendations, sampleRecommendations, mailerLiteResult
        """
        self._check_credentials(request)

        limit = self.batch_limit(request.max_customers)
        self.logger.info(
            f"Batch run: strategy={request.pricing_strategy} limit={limit} "
            f"tiers={len(request.rule_config.tiers)} default={request.rule_config.default is not None}"
        )

        raw_customers = self.shopify.fetch_customers(limit)
        customers = reduce_customers(raw_customers, now=now)
        recommendations = [rec.to_dict() for rec in build_recommendations(customers, request.rule_config)]
        self.logger.info(f"Batch run: fetched {len(raw_customers)} customers, {len(recommendations)} recommendations")

        mailerlite_result = None
        if request.send_to_mailerlite:
            group_name = request.campaign_name or default_group_name(request.pricing_strategy, batch=True)
            mailerlite_result = self.mailerlite.push_recommendations(recommendations, group_name)

        return {
            'success': True,
            'pricingStrategy': request.pricing_strategy,
            'totalCustomersFetched': len(raw_customers),
            'totalRecommendations': len(recommendations),
            'sampleRecommendations': recommendations[:SAMPLE_SIZE],
            'mailerLiteResult': mailerlite_result,
        }
