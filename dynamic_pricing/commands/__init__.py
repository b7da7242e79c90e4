"""
CLI Commands for the Dynamic Pricing AI backend.

Usage:
    flask pricing health                                  # Credential and limit status
    flask pricing fetch-customers --limit 500             # Metrics summary
    flask pricing fetch-customers --strategy upsell       # Plus suggested segment size
    flask pricing run-batch --rules rules.json            # Dry batch run
    flask pricing run-batch --rules rules.json --send     # Push to MailerLite
"""
from .pricing import init_app as init_pricing_commands


def init_app(app):
    """Register all CLI commands with the Flask app."""
    init_pricing_commands(app)
