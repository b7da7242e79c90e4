"""
Shopify API endpoints.

Customer metrics for the dashboard and discount code creation for
approved recommendations.
"""
import logging

from flask import Blueprint, request, jsonify

from . import get_settings, get_json_body
from ..services.customer_metrics import reduce_customers
from ..services.shopify_client import ShopifyClient
from ..services.strategies import STRATEGIES, select_segment
from ..utils.exceptions import ValidationError

logger = logging.getLogger(__name__)

shopify_bp = Blueprint('shopify', __name__)


def get_shopify_client() -> ShopifyClient:
    """Shopify client for the configured store; raises if credentials are missing."""
    return ShopifyClient.from_settings(get_settings())


@shopify_bp.route('/customers', methods=['GET'])
def get_customers():
    """
    Fetch customers and reduce them to dashboard metrics.

    Query params:
        strategy: Optional strategy key; adds suggestedCustomerIds for it

    Returns:
        {customers, total, maxAnalyzed[, suggestedCustomerIds]}
    """
    strategy = request.args.get('strategy')
    if strategy and strategy not in STRATEGIES:
        raise ValidationError(f'Unknown strategy: {strategy}', field='strategy')

    settings = get_settings()
    client = get_shopify_client()

    logger.info(f"Fetching up to {settings.max_customers_analyzed} customers from {client.shop_domain}")
    raw_customers = client.fetch_customers(settings.max_customers_analyzed)
    customers = reduce_customers(raw_customers)

    result = {
        'customers': [c.to_dict() for c in customers],
        'total': len(customers),
        'maxAnalyzed': settings.max_customers_analyzed,
    }
    if strategy:
        result['suggestedCustomerIds'] = select_segment(strategy, customers)

    return jsonify(result)


@shopify_bp.route('/discounts', methods=['POST'])
def create_discounts():
    """
    Create one single-use price rule and discount code per unique code.

    Request body:
        recommendations: List of {discountCode, discountPercent, ...}

    Returns:
        {createdCodes, failedCodes}
    """
    data = get_json_body()
    client = get_shopify_client()

    recommendations = data.get('recommendations')
    if not isinstance(recommendations, list) or not recommendations:
        raise ValidationError('No recommendations provided to create discounts.', field='recommendations')

    return jsonify(client.create_discount_codes(recommendations))
