"""
Tests for the OpenAI pricing advisor.

The OpenAI client is a MagicMock; SDK error classes are real.
"""
import json
import pytest
from unittest.mock import MagicMock

import httpx
import openai

from dynamic_pricing.config import Settings
from dynamic_pricing.services.pricing_ai import PricingAdvisor, parse_analysis
from dynamic_pricing.utils.exceptions import (
    ConfigurationError,
    MalformedAIResponseError,
    OpenAIError,
    ValidationError,
)

CHAT_URL = 'https://api.openai.com/v1/chat/completions'

ANALYSIS = {
    'customerRecommendations': [
        {'customerId': 1, 'email': 'a@example.com', 'discountPercent': 20, 'discountCode': 'COMEBACK20'}
    ],
    'campaignProjection': {'projectedROI': '3.2x'},
    'strategicInsights': ['Lapsed buyers respond to 20%'],
}


def completion(content):
    message = MagicMock()
    message.content = content
    choice = MagicMock()
    choice.message = message
    result = MagicMock()
    result.choices = [choice]
    return result


def make_advisor(content=None, max_customers=250):
    client = MagicMock()
    client.chat.completions.create.return_value = completion(content)
    return PricingAdvisor('sk-test', model='gpt-4.1-mini', max_customers=max_customers, client=client), client


def sent_messages(client):
    return client.chat.completions.create.call_args[1]['messages']


class TestParseAnalysis:

    def test_valid(self):
        assert parse_analysis(json.dumps(ANALYSIS)) == ANALYSIS

    def test_fills_optional_sections(self):
        analysis = parse_analysis('{"customerRecommendations": []}')
        assert analysis['campaignProjection'] == {}
        assert analysis['strategicInsights'] == []

    @pytest.mark.parametrize('raw', [
        None,
        '',
        'Sure! Here are my recommendations...',
        '["not", "an", "object"]',
        '{"campaignProjection": {}}',
        '{"customerRecommendations": "none"}',
    ])
    def test_malformed(self, raw):
        with pytest.raises(MalformedAIResponseError):
            parse_analysis(raw)


class TestFromSettings:

    def test_missing_key(self):
        with pytest.raises(ConfigurationError, match='OPENAI_API_KEY'):
            PricingAdvisor.from_settings(Settings())

    def test_uses_settings(self, settings):
        advisor = PricingAdvisor.from_settings(settings, client=MagicMock())
        assert advisor.model == 'gpt-4.1-mini'
        assert advisor.max_customers == 250


class TestAnalyzeSegment:

    def test_returns_parsed_analysis(self):
        advisor, client = make_advisor(json.dumps(ANALYSIS))

        result = advisor.analyze_segment([{'id': 1}], 'reactivation')

        assert result == ANALYSIS
        kwargs = client.chat.completions.create.call_args[1]
        assert kwargs['model'] == 'gpt-4.1-mini'
        assert kwargs['response_format'] == {'type': 'json_object'}

    def test_prompt_uses_catalog_strategy(self):
        advisor, client = make_advisor(json.dumps(ANALYSIS))

        advisor.analyze_segment([{'id': 1}], 'reactivation')

        prompt = sent_messages(client)[1]['content']
        assert 'PRICING STRATEGY: Win-Back Campaign' in prompt
        assert 'Re-engage inactive customers' in prompt

    def test_strategy_info_overrides_catalog(self):
        advisor, client = make_advisor(json.dumps(ANALYSIS))

        advisor.analyze_segment([{'id': 1}], 'reactivation', {'name': 'Spring Push', 'description': 'Seasonal'})

        prompt = sent_messages(client)[1]['content']
        assert 'PRICING STRATEGY: Spring Push' in prompt
        assert 'STRATEGY GOAL: Seasonal' in prompt

    def test_unknown_strategy_gets_generic_description(self):
        advisor, client = make_advisor(json.dumps(ANALYSIS))

        advisor.analyze_segment([{'id': 1}], 'mystery')

        prompt = sent_messages(client)[1]['content']
        assert 'PRICING STRATEGY: mystery' in prompt
        assert 'No explicit strategy description' in prompt

    def test_samples_segment(self):
        advisor, client = make_advisor(json.dumps(ANALYSIS), max_customers=2)

        advisor.analyze_segment([{'id': 1}, {'id': 2}, {'id': 3}], 'upsell')

        prompt = sent_messages(client)[1]['content']
        assert '"id": 2' in prompt
        assert '"id": 3' not in prompt

    @pytest.mark.parametrize('segment', [None, [], {'id': 1}])
    def test_rejects_empty_segment(self, segment):
        advisor, client = make_advisor(json.dumps(ANALYSIS))

        with pytest.raises(ValidationError, match='non-empty array'):
            advisor.analyze_segment(segment, 'reactivation')
        client.chat.completions.create.assert_not_called()

    def test_non_json_reply(self):
        advisor, _ = make_advisor('I cannot help with that.')

        with pytest.raises(MalformedAIResponseError) as exc_info:
            advisor.analyze_segment([{'id': 1}], 'reactivation')
        assert exc_info.value.raw == 'I cannot help with that.'

    def test_no_choices(self):
        advisor, client = make_advisor()
        client.chat.completions.create.return_value = MagicMock(choices=[])

        with pytest.raises(MalformedAIResponseError, match='No content'):
            advisor.analyze_segment([{'id': 1}], 'reactivation')

    def test_status_error_wrapped(self):
        advisor, client = make_advisor()
        response = httpx.Response(429, request=httpx.Request('POST', CHAT_URL))
        client.chat.completions.create.side_effect = openai.RateLimitError(
            'Rate limit reached', response=response, body=None
        )

        with pytest.raises(OpenAIError) as exc_info:
            advisor.analyze_segment([{'id': 1}], 'reactivation')
        assert exc_info.value.status_code == 429
        assert exc_info.value.code == 'OPENAI_ERROR'

    def test_connection_error_wrapped(self):
        advisor, client = make_advisor()
        client.chat.completions.create.side_effect = openai.APIConnectionError(
            request=httpx.Request('POST', CHAT_URL)
        )

        with pytest.raises(OpenAIError, match='OpenAI request failed'):
            advisor.analyze_segment([{'id': 1}], 'reactivation')


class TestPlanBreakfast:

    def test_returns_plan_html(self):
        advisor, client = make_advisor('<h3>Hi Sam</h3>')

        result = advisor.plan_breakfast({'name': 'Sam', 'dietaryConstraints': ['dairy-free', 'nut-free']})

        assert result == {'planHtml': '<h3>Hi Sam</h3>'}
        kwargs = client.chat.completions.create.call_args[1]
        assert 'response_format' not in kwargs
        prompt = sent_messages(client)[1]['content']
        assert 'First name: Sam' in prompt
        assert 'dairy-free, nut-free' in prompt

    def test_defaults_for_missing_profile(self):
        advisor, client = make_advisor('<p>plan</p>')

        advisor.plan_breakfast()

        prompt = sent_messages(client)[1]['content']
        assert 'First name: Friend' in prompt
        assert 'Dietary constraints: none specified' in prompt
        assert 'Channel: shopify-glp1-planner' in prompt

    def test_meta_brand(self):
        advisor, client = make_advisor('<p>plan</p>')

        advisor.plan_breakfast({}, 'email', {'brand': 'Oat Co'})

        assert 'Oat Co' in sent_messages(client)[0]['content']

    def test_rejects_non_object_profile(self):
        advisor, _ = make_advisor('<p>plan</p>')

        with pytest.raises(ValidationError):
            advisor.plan_breakfast('Sam')

    def test_empty_reply(self):
        advisor, _ = make_advisor('')

        with pytest.raises(MalformedAIResponseError):
            advisor.plan_breakfast({'name': 'Sam'})
