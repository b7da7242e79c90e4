"""
MailerLite campaign endpoint.
"""
from flask import Blueprint, jsonify

from . import get_settings, get_json_body
from ..services.mailerlite_service import MailerLiteService
from ..utils.exceptions import ValidationError

mailerlite_bp = Blueprint('mailerlite', __name__)


def get_mailerlite_service() -> MailerLiteService:
    """MailerLite service for the configured key; raises if it is missing."""
    return MailerLiteService.from_settings(get_settings())


@mailerlite_bp.route('/campaign', methods=['POST'])
def create_campaign():
    """
    Push approved recommendations to MailerLite and create a campaign.

    Request body:
        campaignName: Group and campaign name (optional)
        pricingStrategy: Strategy key, picks the subject line
        selectedRecommendations: Non-empty list of recommendations

    Returns:
        {success, addedCount, skipped, groupId, campaignId}
    """
    service = get_mailerlite_service()
    data = get_json_body()

    recommendations = data.get('selectedRecommendations')
    if not isinstance(recommendations, list) or not recommendations:
        raise ValidationError('No selected recommendations provided.', field='selectedRecommendations')

    result = service.launch_campaign(
        recommendations,
        data.get('pricingStrategy') or 'reactivation',
        campaign_name=data.get('campaignName') or None
    )
    return jsonify(result)
