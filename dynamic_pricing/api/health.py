"""
Health and configuration status endpoint.
"""
from flask import Blueprint, jsonify

from . import get_settings

health_bp = Blueprint('health', __name__)


@health_bp.route('/health', methods=['GET'])
def health():
    """
    Report which credentials are configured and the active limits.

    Never calls an upstream service.
    """
    settings = get_settings()
    return jsonify({
        'status': 'ok',
        'message': 'Dynamic Pricing AI Backend is running',
        'hasOpenAIKey': settings.has_openai,
        'hasShopifyKey': bool(settings.shopify_api_key),
        'hasShopifyStore': bool(settings.shopify_store),
        'hasMailerliteKey': settings.has_mailerlite,
        'shopifyStore': settings.shopify_store,
        'openaiModel': settings.openai_model,
        'maxCustomersAnalyzed': settings.max_customers_analyzed,
        'maxCustomersForAI': settings.max_customers_for_ai,
        'maxBatchCustomers': settings.max_batch_customers,
        'missingEnv': settings.missing_env(),
    })
