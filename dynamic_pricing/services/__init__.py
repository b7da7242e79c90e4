"""
Business logic services for the Dynamic Pricing AI backend.
"""
from .shopify_client import ShopifyClient
from .mailerlite_service import MailerLiteService
from .pricing_ai import PricingAdvisor
from .reactivation_service import ReactivationService, BatchRequest

__all__ = [
    'ShopifyClient',
    'MailerLiteService',
    'PricingAdvisor',
    'ReactivationService',
    'BatchRequest'
]
