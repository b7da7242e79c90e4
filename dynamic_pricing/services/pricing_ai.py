"""
OpenAI pricing advisor.

Two calls:
- analyze_segment: discount recommendations for a customer segment (JSON)
- plan_breakfast: GLP-1 friendly breakfast plan for a landing page (HTML)
"""
import json
import logging
from typing import Any, Dict, List, Optional

import openai

from ..config import Settings
from ..utils.exceptions import ConfigurationError, MalformedAIResponseError, OpenAIError, ValidationError
from . import prompts
from .strategies import resolve_strategy_info
from .tier_rules import MAX_DISCOUNT_PERCENT


def parse_analysis(raw: Optional[str]) -> Dict[str, Any]:
    """
    Parse the model's JSON reply and check its top-level shape.

    Raises:
        MalformedAIResponseError: empty reply, non-JSON, or missing recommendations
    """
    if not raw:
        raise MalformedAIResponseError('No content returned from OpenAI')
    try:
        analysis = json.loads(raw)
    except ValueError:
        raise MalformedAIResponseError(raw=raw)

    if not isinstance(analysis, dict) or not isinstance(analysis.get('customerRecommendations'), list):
        raise MalformedAIResponseError('OpenAI response is missing customerRecommendations.', raw=raw)

    analysis.setdefault('campaignProjection', {})
    analysis.setdefault('strategicInsights', [])
    return analysis


class PricingAdvisor:
    """
    OpenAI chat-completion wrapper for pricing analysis and content.

    Usage:
        advisor = PricingAdvisor.from_settings(settings)
        analysis = advisor.analyze_segment(customers, 'reactivation')
    """

    def __init__(
        self,
        api_key: str,
        model: str = 'gpt-4.1-mini',
        max_customers: int = 250,
        brand: str = "Daily N'Oats",
        client: openai.OpenAI = None,
        logger: logging.Logger = None,
    ):
        self.model = model
        self.max_customers = max_customers
        self.brand = brand
        self.client = client or openai.OpenAI(api_key=api_key)
        self.logger = logger or logging.getLogger(__name__)

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> 'PricingAdvisor':
        if not settings.has_openai:
            raise ConfigurationError('OpenAI API key (OPENAI_API_KEY) not configured')
        return cls(
            settings.openai_api_key,
            model=settings.openai_model,
            max_customers=settings.max_customers_for_ai,
            brand=settings.brand_name,
            **kwargs
        )

    def _complete(self, messages: List[Dict[str, str]], json_mode: bool = False) -> Optional[str]:
        """Run one chat completion and return the first choice's content."""
        kwargs: Dict[str, Any] = {'model': self.model, 'messages': messages}
        if json_mode:
            kwargs['response_format'] = {'type': 'json_object'}

        try:
            completion = self.client.chat.completions.create(**kwargs)
        except openai.APIStatusError as e:
            raise OpenAIError(f'OpenAI API error: {e.status_code} - {e.message}', status_code=e.status_code, original_error=e)
        except openai.OpenAIError as e:
            raise OpenAIError(f'OpenAI request failed: {e}', original_error=e)

        if not completion.choices:
            return None
        return completion.choices[0].message.content

    def analyze_segment(
        self,
        segment: List[Dict[str, Any]],
        pricing_strategy: str = None,
        strategy_info: Dict[str, Any] = None
    ) -> Dict[str, Any]:
        """
        Ask the model for per-customer discount recommendations.

        Only the first max_customers customers are sent.

        Returns:
            {customerRecommendations, campaignProjection, strategicInsights}
        """
        if not isinstance(segment, list) or not segment:
            raise ValidationError('customerSegment must be a non-empty array', field='customerSegment')

        if len(segment) > self.max_customers:
            self.logger.info(f"AI analyze: received {len(segment)} customers, sampling first {self.max_customers}")
            segment = segment[:self.max_customers]

        strategy = resolve_strategy_info(pricing_strategy, strategy_info)
        messages = [
            {'role': 'system', 'content': prompts.ANALYSIS_SYSTEM_PROMPT.format(brand=self.brand)},
            {'role': 'user', 'content': prompts.ANALYSIS_USER_PROMPT.format(
                segment_json=json.dumps(segment, indent=2, default=str),
                strategy_name=strategy['name'],
                strategy_description=strategy['description'],
                business_context=prompts.BUSINESS_CONTEXT,
                max_discount=MAX_DISCOUNT_PERCENT,
            )},
        ]

        raw = self._complete(messages, json_mode=True)
        try:
            analysis = parse_analysis(raw)
        except MalformedAIResponseError:
            self.logger.error(f"Failed to parse JSON from OpenAI response: {(raw or '')[:500]}")
            raise

        self.logger.info(
            f"AI analysis returned {len(analysis['customerRecommendations'])} recommendations "
            f"for {len(segment)} customers ({strategy['name']})"
        )
        return analysis

    def plan_breakfast(
        self,
        profile: Dict[str, Any] = None,
        channel: str = None,
        meta: Dict[str, Any] = None
    ) -> Dict[str, str]:
        """
        Generate a GLP-1 friendly breakfast plan as HTML.

        Returns:
            {'planHtml': '...'}
        """
        if profile is not None and not isinstance(profile, dict):
            raise ValidationError('profile must be an object', field='profile')
        if meta is not None and not isinstance(meta, dict):
            raise ValidationError('meta must be an object', field='meta')
        profile = profile or {}
        meta = meta or {}

        constraints = profile.get('dietaryConstraints')
        brand = meta.get('brand') or self.brand
        first_name = profile.get('name') or 'Friend'

        messages = [
            {'role': 'system', 'content': prompts.PLANNER_SYSTEM_PROMPT.format(brand=brand)},
            {'role': 'user', 'content': prompts.PLANNER_USER_PROMPT.format(
                brand=brand,
                first_name=first_name,
                medication=profile.get('medication') or 'GLP-1 medication',
                primary_goal=profile.get('primaryGoal') or 'Steady weight loss with muscle preservation',
                morning_time=profile.get('morningTime') or 'about 10 minutes',
                flavor_preference=profile.get('flavorPreference') or 'flexible',
                morning_feeling=profile.get('morningFeeling') or 'varies',
                dietary_constraints=', '.join(str(c) for c in constraints) if isinstance(constraints, list) and constraints else 'none specified',
                notes=profile.get('freeTextNotes') or 'none',
                channel=channel or 'shopify-glp1-planner',
            )},
        ]

        content = self._complete(messages)
        if not content:
            raise MalformedAIResponseError('No content returned from OpenAI')

        self.logger.info(f"Generated GLP-1 breakfast plan for {first_name}")
        return {'planHtml': content}
