"""
CLI commands for operators.

Batch runs can be scheduled from cron instead of the dashboard:

# Weekly win-back push (Mondays at 7 AM)
0 7 * * 1 cd /app && flask pricing run-batch --rules rules/winback.json --send
"""
import json

import click
from flask import current_app
from flask.cli import with_appcontext

from ..services.customer_metrics import reduce_customers
from ..services.reactivation_service import BatchRequest, ReactivationService
from ..services.shopify_client import ShopifyClient
from ..services.strategies import STRATEGIES, get_strategy, select_segment
from ..utils.exceptions import PricingAIError


@click.group('pricing')
def pricing_cli():
    """Dynamic pricing commands."""
    pass


@pricing_cli.command('health')
@with_appcontext
def health():
    """Show which credentials are configured."""
    settings = current_app.config['SETTINGS']

    click.echo(f"Shopify store:  {settings.shopify_store or 'NOT SET'}")
    click.echo(f"Shopify key:    {'set' if settings.shopify_api_key else 'NOT SET'}")
    click.echo(f"MailerLite key: {'set' if settings.has_mailerlite else 'NOT SET'}")
    click.echo(f"OpenAI key:     {'set' if settings.has_openai else 'NOT SET'}")
    click.echo(f"OpenAI model:   {settings.openai_model}")
    click.echo(
        f"Limits: analyzed={settings.max_customers_analyzed} ai={settings.max_customers_for_ai} "
        f"batch={settings.default_batch_customers}/{settings.max_batch_customers}"
    )

    missing = settings.missing_env()
    if missing:
        click.echo(f"\nMissing: {', '.join(missing)}")


@pricing_cli.command('fetch-customers')
@click.option('--limit', type=int, default=None, help='Customers to fetch (default: MAX_CUSTOMERS_ANALYZED)')
@click.option('--strategy', type=click.Choice(sorted(STRATEGIES)), default=None, help='Report the suggested segment')
@with_appcontext
def fetch_customers(limit, strategy):
    """
    Fetch customers and print a metrics summary.
    """
    settings = current_app.config['SETTINGS']
    limit = settings.max_customers_analyzed if limit is None else limit

    try:
        client = ShopifyClient.from_settings(settings)
        customers = reduce_customers(client.fetch_customers(limit))
    except PricingAIError as e:
        raise click.ClickException(e.message)

    total_spent = sum(c.total_spent for c in customers)
    with_recency = [c for c in customers if c.has_recency_signal]

    click.echo(f"\nCustomers fetched: {len(customers)}")
    click.echo(f"  Total spent: ${total_spent:.2f}")
    click.echo(f"  With recency signal: {len(with_recency)}")
    if with_recency:
        avg_days = sum(c.days_since_last_order for c in with_recency) / len(with_recency)
        click.echo(f"  Avg days since last order: {avg_days:.0f}")

    if strategy:
        ids = select_segment(strategy, customers)
        click.echo(f"\n  {get_strategy(strategy)['name']}: {len(ids)} suggested customers")


@pricing_cli.command('run-batch')
@click.option('--rules', 'rules_file', type=click.File('r'), required=True, help='JSON file with the rule config')
@click.option('--strategy', default='reactivation', help='Pricing strategy (default: reactivation)')
@click.option('--max-customers', type=int, default=None, help='Customers to fetch (capped by MAX_BATCH_CUSTOMERS)')
@click.option('--campaign-name', default=None, help='MailerLite group name')
@click.option('--send', is_flag=True, help='Push recommendations to a new MailerLite group')
@with_appcontext
def run_batch(rules_file, strategy, max_customers, campaign_name, send):
    """
    Run the batch reactivation workflow.

    Without --send nothing is written upstream.
    """
    try:
        rule_config = json.load(rules_file)
    except ValueError as e:
        raise click.ClickException(f"Invalid rules file: {e}")

    try:
        batch = BatchRequest.from_dict({
            'ruleConfig': rule_config,
            'pricingStrategy': strategy,
            'campaignName': campaign_name,
            'maxCustomers': max_customers,
            'sendToMailerLite': send,
        })
        result = ReactivationService(current_app.config['SETTINGS']).run_batch(batch)
    except PricingAIError as e:
        raise click.ClickException(e.message)

    click.echo(f"\n{'' if send else '[DRY RUN] '}Batch {result['pricingStrategy']}:")
    click.echo(f"  Customers fetched: {result['totalCustomersFetched']}")
    click.echo(f"  Recommendations: {result['totalRecommendations']}")

    for rec in result['sampleRecommendations'][:5]:
        click.echo(f"    {rec['email']}: {rec['discountCode']} ({rec['discountPercent']}%)")

    pushed = result['mailerLiteResult']
    if pushed:
        click.echo(f"\n  MailerLite group {pushed['groupId']}: {pushed['addedCount']} added, {len(pushed['skipped'])} skipped")


def init_app(app):
    """Register CLI commands with the Flask app."""
    app.cli.add_command(pricing_cli)
