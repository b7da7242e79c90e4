"""
MailerLite Integration Service.

Pushes discount recommendations to MailerLite: one subscriber group per
campaign, one subscriber per recommendation (with the discount as custom
fields) and a regular email campaign targeting the group.

API Documentation: https://developers.mailerlite.com/docs/
"""
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

import requests

from ..config import Settings
from ..utils.exceptions import ConfigurationError, MailerLiteError
from .shopify_client import DISCOUNT_VALIDITY_DAYS

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / 'templates'

SUBJECTS = {
    'reactivation': 'We Miss You!',
}
DEFAULT_SUBJECT = 'Special Offer Just For You'


def default_group_name(pricing_strategy: str, batch: bool = False, today: datetime = None) -> str:
    """Group name used when the operator does not supply a campaign name."""
    today = today or datetime.now()
    label = 'Dynamic Pricing Batch' if batch else 'Dynamic Pricing'
    return f"{label} - {pricing_strategy} - {today.strftime('%Y-%m-%d')}"


def subscriber_fields(rec: Dict[str, Any]) -> Dict[str, str]:
    """Custom fields stored on the subscriber; merge tags in the email read these."""
    def as_text(value) -> str:
        return '' if value is None else str(value)

    return {
        'discount_code': as_text(rec.get('discountCode')),
        'discount_percent': as_text(rec.get('discountPercent')),
        'messaging_angle': rec.get('messagingAngle') or '',
        'expected_value': as_text(rec.get('expectedValue')),
    }


def render_email(template_name: str, data: Dict[str, Any]) -> str:
    """
    Render an HTML email template.

    Uses simple {{variable}} replacement; MailerLite merge tags such as
    {$first_name} are left for MailerLite to fill per subscriber.
    """
    html = (TEMPLATE_DIR / template_name).read_text(encoding='utf-8')
    for key, value in data.items():
        html = html.replace('{{' + key + '}}', str(value if value is not None else ''))
    return html


class MailerLiteService:
    """
    MailerLite API integration for email campaigns.

    Supports:
    - Group creation
    - Subscriber upsert with custom discount fields
    - Regular campaign creation

    Usage:
        service = MailerLiteService.from_settings(settings)
        result = service.launch_campaign(recommendations, 'reactivation')
    """

    BASE_URL = "https://connect.mailerlite.com/api"

    def __init__(
        self,
        api_key: str,
        from_email: str = 'hello@dailynoats.com',
        from_name: str = "Daily N'Oats",
        brand_name: str = "Daily N'Oats",
        store_url: str = 'https://dailynoats.com',
        timeout: int = 10,
        session: requests.Session = None,
        logger: logging.Logger = None,
    ):
        self.api_key = api_key
        self.from_email = from_email
        self.from_name = from_name
        self.brand_name = brand_name
        self.store_url = store_url
        self.timeout = timeout
        self.session = session or requests.Session()
        self.logger = logger or logging.getLogger(__name__)

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> 'MailerLiteService':
        """Create the service from settings, failing if the API key is missing."""
        if not settings.has_mailerlite:
            raise ConfigurationError('MailerLite API key not configured')
        return cls(
            settings.mailerlite_api_key,
            from_email=settings.mailerlite_from_email,
            from_name=settings.mailerlite_from_name,
            brand_name=settings.brand_name,
            store_url=settings.store_url,
            **kwargs
        )

    def _get_headers(self) -> Dict[str, str]:
        """Get headers for MailerLite API requests."""
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json"
        }

    def _post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """POST to the API; any transport failure or non-2xx raises MailerLiteError."""
        try:
            response = self.session.post(
                f"{self.BASE_URL}/{path}",
                headers=self._get_headers(),
                json=payload,
                timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            raise MailerLiteError(f'MailerLite request failed: {e}', original_error=e)

        if not response.ok:
            raise MailerLiteError(
                f'MailerLite API error: {response.status_code} - {response.text}',
                status_code=response.status_code
            )

        try:
            return response.json()
        except ValueError:
            return {}

    # ==================== GROUPS ====================

    def create_group(self, name: str) -> Any:
        """
        Create a subscriber group.

        Returns:
            Group ID
        """
        data = self._post('groups', {'name': name})
        group_id = (data.get('data') or {}).get('id')
        if not group_id:
            raise MailerLiteError(f'Failed to create MailerLite group: {data}')
        self.logger.info(f"Created MailerLite group {group_id} ({name})")
        return group_id

    # ==================== SUBSCRIBERS ====================

    def add_subscriber(self, rec: Dict[str, Any], group_id) -> Dict[str, Any]:
        """Create or update a subscriber in the group with discount fields."""
        return self._post('subscribers', {
            'email': rec.get('email'),
            'groups': [group_id],
            'fields': subscriber_fields(rec),
        })

    def add_subscribers(self, recommendations: Iterable[Dict[str, Any]], group_id) -> Tuple[int, List[Dict[str, str]]]:
        """
        Add every recommendation as a subscriber.

        Failures are collected rather than aborting the loop.

        Returns:
            Tuple of (added_count, skipped) where skipped lists {email, error}
        """
        added = 0
        skipped: List[Dict[str, str]] = []

        for rec in recommendations:
            email = rec.get('email')
            if not email:
                skipped.append({'email': '', 'error': 'Missing email'})
                continue
            try:
                self.add_subscriber(rec, group_id)
                added += 1
            except MailerLiteError as e:
                self.logger.warning(f"Error adding subscriber {email}: {e.message}")
                skipped.append({'email': email, 'error': e.message})

        self.logger.info(f"MailerLite subscribers added: {added}, skipped: {len(skipped)}")
        return added, skipped

    # ==================== CAMPAIGNS ====================

    def subject_for(self, pricing_strategy: str) -> str:
        return SUBJECTS.get(pricing_strategy, DEFAULT_SUBJECT)

    def render_campaign_html(self) -> str:
        return render_email('winback_email.html', {
            'brand_name': self.brand_name,
            'store_url': self.store_url,
            'validity_days': DISCOUNT_VALIDITY_DAYS,
            'year': datetime.now().year,
        })

    def create_campaign(self, name: str, pricing_strategy: str, group_id) -> Optional[Any]:
        """
        Create a regular campaign targeting the group.

        Returns:
            Campaign ID, or None if MailerLite did not return one
        """
        data = self._post('campaigns', {
            'name': name,
            'type': 'regular',
            'emails': [
                {
                    'subject': self.subject_for(pricing_strategy),
                    'from_name': self.from_name,
                    'from': self.from_email,
                    'content': self.render_campaign_html(),
                }
            ],
            'groups': [group_id],
        })
        campaign_id = (data.get('data') or {}).get('id')
        self.logger.info(f"Created MailerLite campaign {campaign_id} for group {group_id}")
        return campaign_id

    def push_recommendations(
        self,
        recommendations: List[Dict[str, Any]],
        group_name: str
    ) -> Dict[str, Any]:
        """Create a group and add the recommendations to it (no campaign)."""
        group_id = self.create_group(group_name)
        added, skipped = self.add_subscribers(recommendations, group_id)
        return {'groupId': group_id, 'addedCount': added, 'skipped': skipped}

    def launch_campaign(
        self,
        recommendations: List[Dict[str, Any]],
        pricing_strategy: str,
        campaign_name: str = None
    ) -> Dict[str, Any]:
        """
        Group -> subscribers -> campaign.

        Returns:
            Dict with success, addedCount, skipped, groupId, campaignId
        """
        group_name = campaign_name or default_group_name(pricing_strategy)
        pushed = self.push_recommendations(recommendations, group_name)
        campaign_id = self.create_campaign(
            campaign_name or f'Dynamic Pricing - {pricing_strategy}',
            pricing_strategy,
            pushed['groupId']
        )
        return {
            'success': True,
            'addedCount': pushed['addedCount'],
            'skipped': pushed['skipped'],
            'groupId': pushed['groupId'],
            'campaignId': campaign_id,
        }
