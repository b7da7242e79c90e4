"""
Batch reactivation endpoint.
"""
from flask import Blueprint, jsonify

from . import get_settings, get_json_body
from ..services.reactivation_service import BatchRequest, ReactivationService

reactivation_bp = Blueprint('reactivation', __name__)


def get_reactivation_service() -> ReactivationService:
    return ReactivationService(get_settings())


@reactivation_bp.route('/batch', methods=['POST'])
def run_batch():
    """
    Apply tier rules to the whole customer base.

    Request body:
        ruleConfig: {tiers: [...], default: {...}} (required)
        pricingStrategy: Strategy key (default 'reactivation')
        campaignName: MailerLite group name (optional)
        maxCustomers: Customers to fetch (default and cap from settings)
        sendToMailerLite: Push recommendations into a new group (default false)
    """
    batch = BatchRequest.from_dict(get_json_body())
    return jsonify(get_reactivation_service().run_batch(batch))
