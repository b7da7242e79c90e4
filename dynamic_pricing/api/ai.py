"""
OpenAI-backed endpoints: segment analysis and the GLP-1 breakfast planner.
"""
from flask import Blueprint, jsonify

from . import get_settings, get_json_body
from ..services.pricing_ai import PricingAdvisor

ai_bp = Blueprint('ai', __name__)


def get_pricing_advisor() -> PricingAdvisor:
    """Advisor for the configured OpenAI key; raises if it is missing."""
    return PricingAdvisor.from_settings(get_settings())


@ai_bp.route('/ai/analyze', methods=['POST'])
def analyze():
    """
    Ask the model for per-customer discount recommendations.

    Request body:
        customerSegment: Non-empty list of customer metrics
        pricingStrategy: Strategy key (e.g. 'reactivation')
        strategyInfo: Optional {name, description} overriding the catalog

    Returns:
        {customerRecommendations, campaignProjection, strategicInsights}
    """
    advisor = get_pricing_advisor()
    data = get_json_body()
    analysis = advisor.analyze_segment(
        data.get('customerSegment'),
        data.get('pricingStrategy'),
        data.get('strategyInfo')
    )
    return jsonify(analysis)


@ai_bp.route('/glp1/plan', methods=['POST'])
def glp1_plan():
    """
    Generate a GLP-1 friendly breakfast plan.

    Request body:
        profile: {name, medication, primaryGoal, morningTime, flavorPreference,
                  morningFeeling, dietaryConstraints[], freeTextNotes}
        channel: Where the plan is shown (optional)
        meta: {brand} (optional)

    Returns:
        {planHtml}
    """
    advisor = get_pricing_advisor()
    data = get_json_body()
    return jsonify(advisor.plan_breakfast(
        data.get('profile'),
        data.get('channel'),
        data.get('meta')
    ))
