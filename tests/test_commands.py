"""
Tests for the `flask pricing` CLI commands.
"""
import json
from unittest.mock import patch, MagicMock

from dynamic_pricing.utils.exceptions import ShopifyError


class TestHealthCommand:

    def test_configured(self, app):
        result = app.test_cli_runner().invoke(args=['pricing', 'health'])

        assert result.exit_code == 0
        assert 'Shopify store:  test-store' in result.output
        assert 'Missing' not in result.output

    def test_reports_missing(self, bare_app):
        result = bare_app.test_cli_runner().invoke(args=['pricing', 'health'])

        assert result.exit_code == 0
        assert 'Missing: OPENAI_API_KEY, SHOPIFY_STORE, SHOPIFY_API_KEY, MAILERLITE_API_KEY' in result.output


class TestFetchCustomersCommand:

    @patch('dynamic_pricing.commands.pricing.ShopifyClient')
    def test_summary(self, mock_client_cls, app, raw_customer):
        mock_client_cls.from_settings.return_value.fetch_customers.return_value = [
            raw_customer(1, orders_count=2, total_spent='60.00'),
            raw_customer(2, orders_count=0),
        ]

        result = app.test_cli_runner().invoke(args=['pricing', 'fetch-customers', '--limit', '50', '--strategy', 'acquisition'])

        assert result.exit_code == 0
        mock_client_cls.from_settings.return_value.fetch_customers.assert_called_once_with(50)
        assert 'Customers fetched: 2' in result.output
        assert 'Total spent: $60.00' in result.output
        assert 'New Customer Acquisition: 2 suggested customers' in result.output

    def test_missing_credentials(self, bare_app):
        result = bare_app.test_cli_runner().invoke(args=['pricing', 'fetch-customers'])

        assert result.exit_code != 0
        assert 'Shopify credentials not configured' in result.output

    @patch('dynamic_pricing.commands.pricing.ShopifyClient')
    def test_upstream_error(self, mock_client_cls, app):
        mock_client_cls.from_settings.return_value.fetch_customers.side_effect = ShopifyError('Shopify API error: 503 - down')

        result = app.test_cli_runner().invoke(args=['pricing', 'fetch-customers'])

        assert result.exit_code != 0
        assert '503' in result.output


class TestRunBatchCommand:

    @patch('dynamic_pricing.commands.pricing.ReactivationService')
    def test_dry_run(self, mock_service_cls, app, tmp_path):
        rules = tmp_path / 'rules.json'
        rules.write_text(json.dumps({'default': {'discountPercent': 10}}))
        mock_service_cls.return_value.run_batch.return_value = {
            'success': True,
            'pricingStrategy': 'reactivation',
            'totalCustomersFetched': 3,
            'totalRecommendations': 1,
            'sampleRecommendations': [
                {'email': 'a@example.com', 'discountCode': 'WINBACK10', 'discountPercent': 10}
            ],
            'mailerLiteResult': None,
        }

        result = app.test_cli_runner().invoke(args=['pricing', 'run-batch', '--rules', str(rules), '--max-customers', '25'])

        assert result.exit_code == 0, result.output
        assert '[DRY RUN]' in result.output
        assert 'a@example.com: WINBACK10 (10%)' in result.output
        batch = mock_service_cls.return_value.run_batch.call_args[0][0]
        assert batch.max_customers == 25
        assert batch.send_to_mailerlite is False

    def test_invalid_rules_file(self, app, tmp_path):
        rules = tmp_path / 'rules.json'
        rules.write_text('{not json')

        result = app.test_cli_runner().invoke(args=['pricing', 'run-batch', '--rules', str(rules)])

        assert result.exit_code != 0
        assert 'Invalid rules file' in result.output

    def test_invalid_rule_config(self, app, tmp_path):
        rules = tmp_path / 'rules.json'
        rules.write_text(json.dumps({'tiers': []}))

        result = app.test_cli_runner().invoke(args=['pricing', 'run-batch', '--rules', str(rules)])

        assert result.exit_code != 0
        assert 'at least one tier or a default' in result.output

    @patch('dynamic_pricing.commands.pricing.ReactivationService')
    def test_send(self, mock_service_cls, app, tmp_path):
        rules = tmp_path / 'rules.json'
        rules.write_text(json.dumps({'default': {'discountPercent': 10}}))
        mock_service_cls.return_value.run_batch.return_value = {
            'success': True,
            'pricingStrategy': 'reactivation',
            'totalCustomersFetched': 1,
            'totalRecommendations': 1,
            'sampleRecommendations': [],
            'mailerLiteResult': {'groupId': 'g1', 'addedCount': 1, 'skipped': []},
        }

        result = app.test_cli_runner().invoke(args=['pricing', 'run-batch', '--rules', str(rules), '--send'])

        assert result.exit_code == 0, result.output
        assert 'MailerLite group g1: 1 added, 0 skipped' in result.output
        assert mock_service_cls.return_value.run_batch.call_args[0][0].send_to_mailerlite is True
