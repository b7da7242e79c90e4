"""
Shopify Admin REST API client.
Handles customer listing (cursor pagination) and discount code creation.
"""
import logging
import time
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple
from urllib.parse import parse_qs, urlparse

import httpx

from ..config import Settings
from ..utils.exceptions import ConfigurationError, ShopifyError


# Upstream page-size ceiling for REST list endpoints
MAX_PAGE_SIZE = 250

# Fixed business rule for generated codes: single use, valid for a week
DISCOUNT_VALIDITY_DAYS = 7


def parse_next_page_info(link_header: Optional[str]) -> Optional[str]:
    """
    Extract the page_info cursor of the rel="next" entry of a Link header.

    Example header:
        <https://shop.myshopify.com/admin/api/2024-10/customers.json?limit=250&page_info=abc>; rel="next"

    Returns:
        The cursor, or None when there is no next page
    """
    if not link_header:
        return None

    for part in link_header.split(','):
        if 'rel="next"' not in part:
            continue
        start = part.find('<')
        end = part.find('>', start + 1)
        if start == -1 or end == -1:
            return None
        query = parse_qs(urlparse(part[start + 1:end]).query)
        values = query.get('page_info')
        return values[0] if values and values[0] else None

    return None


def normalize_store_domain(store: str) -> str:
    """Accept 'mystore', 'mystore.myshopify.com' or a full URL."""
    domain = store.strip().replace('https://', '').replace('http://', '').rstrip('/')
    if '.' not in domain:
        domain = f'{domain}.myshopify.com'
    return domain


def unique_discount_codes(recommendations: Iterable[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Collapse recommendations to {code: percent}; the first percent seen wins.

    Entries without a code or without a numeric percent are ignored.
    """
    codes: Dict[str, Any] = {}
    for rec in recommendations:
        if not isinstance(rec, dict):
            continue
        code = rec.get('discountCode')
        percent = rec.get('discountPercent')
        if not code or not isinstance(code, str):
            continue
        if isinstance(percent, bool) or not isinstance(percent, (int, float)):
            continue
        codes.setdefault(code, percent)
    return codes


class ShopifyClient:
    """
    Client for the Shopify Admin REST API.

    Supports:
    - Cursor-paginated list endpoints (customers)
    - Price rule + discount code creation

    Usage:
        client = ShopifyClient.from_settings(settings)
        customers = client.fetch_customers(limit_total=1000)
    """

    def __init__(
        self,
        store: str,
        access_token: str,
        api_version: str = '2024-10',
        timeout: float = 30.0,
        discount_delay_ms: int = 500,
        transport: httpx.BaseTransport = None,
        logger: logging.Logger = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.shop_domain = normalize_store_domain(store)
        self.access_token = access_token
        self.api_version = api_version
        self.timeout = timeout
        self.discount_delay_ms = discount_delay_ms
        self.base_url = f'https://{self.shop_domain}/admin/api/{api_version}'
        self._transport = transport
        self._sleep = sleep
        self.logger = logger or logging.getLogger(__name__)

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> 'ShopifyClient':
        """Create a client from settings, failing if credentials are missing."""
        if not settings.has_shopify:
            raise ConfigurationError('Shopify credentials not configured')
        return cls(
            settings.shopify_store,
            settings.shopify_api_key,
            api_version=settings.shopify_api_version,
            discount_delay_ms=settings.discount_creation_delay_ms,
            **kwargs
        )

    def _execute_rest(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        payload: Optional[Dict[str, Any]] = None
    ) -> Tuple[Dict[str, Any], httpx.Headers]:
        """
        Execute a REST call.

        Returns:
            Tuple of (decoded JSON body, response headers)

        Raises:
            ShopifyError: transport failure or non-2xx status (no retry)
        """
        headers = {
            'X-Shopify-Access-Token': self.access_token,
            'Content-Type': 'application/json'
        }

        try:
            with httpx.Client(transport=self._transport, timeout=self.timeout) as client:
                response = client.request(
                    method,
                    f'{self.base_url}/{path}',
                    headers=headers,
                    params=params,
                    json=payload
                )
        except httpx.HTTPError as e:
            raise ShopifyError(f'Shopify request failed: {e}', original_error=e)

        if response.is_error:
            raise ShopifyError(
                f'Shopify API error: {response.status_code} - {response.text}',
                status_code=response.status_code
            )

        try:
            data = response.json() if response.content else {}
        except ValueError as e:
            raise ShopifyError(f'Shopify returned invalid JSON for {path}', original_error=e)

        return data, response.headers

    # ==================== PAGINATION ====================

    def fetch_paginated(self, resource: str, limit_total: int) -> List[Dict[str, Any]]:
        """
        Fetch up to limit_total records from a cursor-paginated list endpoint.

        Follows the page_info cursor of the Link header's rel="next" entry
        until the cap is reached or no further cursor is returned. An empty
        page or a cursor already followed also ends the fetch. Any failed
        page aborts the whole fetch.

        Args:
            resource: List resource name, e.g. 'customers'
            limit_total: Maximum number of records to return

        Returns:
            At most limit_total records, in upstream order
        """
        if limit_total < 0:
            raise ValueError('limit_total must not be negative')

        records: List[Dict[str, Any]] = []
        page_info = None
        seen_cursors = set()

        self.logger.info(f"Fetching Shopify {resource} (limit {limit_total})")

        while len(records) < limit_total:
            per_page = min(MAX_PAGE_SIZE, limit_total - len(records))
            params = {'limit': per_page}
            if page_info:
                params['page_info'] = page_info

            data, headers = self._execute_rest('GET', f'{resource}.json', params=params)
            page = data.get(resource) or []
            records.extend(page)
            self.logger.debug(f"Received {len(page)} {resource} (total {len(records)})")

            next_page_info = parse_next_page_info(headers.get('link'))
            if not next_page_info:
                break
            if not page or next_page_info in seen_cursors:
                self.logger.warning(
                    f"Stopping {resource} pagination: "
                    f"{'empty page' if not page else 'repeated cursor'} with a next link"
                )
                break
            seen_cursors.add(next_page_info)
            page_info = next_page_info

        self.logger.info(f"Fetched {len(records)} Shopify {resource}")
        return records[:limit_total]

    def fetch_customers(self, limit_total: int) -> List[Dict[str, Any]]:
        """Fetch raw customer records."""
        return self.fetch_paginated('customers', limit_total)

    # ==================== DISCOUNTS ====================

    def create_price_rule(self, code: str, percentage, now: datetime = None) -> Any:
        """
        Create a single-use percentage price rule valid for seven days.

        Returns:
            Price rule ID
        """
        now = now or datetime.now(timezone.utc)
        ends_at = now + timedelta(days=DISCOUNT_VALIDITY_DAYS)

        payload = {
            'price_rule': {
                'title': f'{code} - AI Dynamic Pricing',
                'target_type': 'line_item',
                'target_selection': 'all',
                'allocation_method': 'across',
                'value_type': 'percentage',
                'value': f'-{percentage}',
                'customer_selection': 'all',
                'once_per_customer': True,
                'usage_limit': 1,
                'starts_at': now.isoformat(),
                'ends_at': ends_at.isoformat(),
            }
        }

        data, _ = self._execute_rest('POST', 'price_rules.json', payload=payload)
        price_rule_id = (data.get('price_rule') or {}).get('id')
        if not price_rule_id:
            raise ShopifyError(f'Price rule creation returned no id for {code}')
        return price_rule_id

    def create_discount_code(self, price_rule_id, code: str) -> Dict[str, Any]:
        """Attach a discount code to an existing price rule."""
        data, _ = self._execute_rest(
            'POST',
            f'price_rules/{price_rule_id}/discount_codes.json',
            payload={'discount_code': {'code': code}}
        )
        return data.get('discount_code') or {}

    def create_discount_codes(self, recommendations: Iterable[Dict[str, Any]]) -> Dict[str, Any]:
        """
        Create one Shopify discount code per unique recommended code.

        Failures are collected per code and do not stop the batch. A price
        rule whose discount code then fails is left in place.

        Returns:
            {'createdCodes': [...], 'failedCodes': [...]}
        """
        codes = unique_discount_codes(recommendations)
        created: List[Dict[str, Any]] = []
        failed: List[Dict[str, Any]] = []

        for index, (code, percentage) in enumerate(codes.items()):
            if index > 0 and self.discount_delay_ms:
                # Fixed pause to stay under the Admin API rate limit
                self._sleep(self.discount_delay_ms / 1000)

            price_rule_id = None
            try:
                price_rule_id = self.create_price_rule(code, percentage)
                self.create_discount_code(price_rule_id, code)
            except ShopifyError as e:
                self.logger.warning(f"Discount code {code} failed: {e.message}")
                failure = {'code': code, 'error': e.message}
                if price_rule_id:
                    failure['priceRuleId'] = price_rule_id
                failed.append(failure)
                continue

            created.append({'code': code, 'percentage': percentage, 'priceRuleId': price_rule_id})

        self.logger.info(f"Discount codes created: {len(created)}, failed: {len(failed)}")
        return {'createdCodes': created, 'failedCodes': failed}
