"""
Configuration management for the Dynamic Pricing AI backend.

Two layers:
- Flask config classes (per environment), selected by FLASK_ENV.
- Settings: an immutable value built from the environment once at startup
  and handed to every service constructor.
"""
import os
from dataclasses import dataclass
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()


def _env_int(name: str, default: int) -> int:
    """Read a non-negative integer from the environment."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        value = int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}")
    if value < 0:
        raise RuntimeError(f"{name} must not be negative, got {value}")
    return value


@dataclass(frozen=True)
class Settings:
    """Environment-derived settings shared by all services."""

    shopify_store: Optional[str] = None
    shopify_api_key: Optional[str] = None
    shopify_api_version: str = '2024-10'
    mailerlite_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None
    openai_model: str = 'gpt-4.1-mini'

    max_customers_analyzed: int = 1000
    max_customers_for_ai: int = 250
    max_batch_customers: int = 10000
    default_batch_customers: int = 7000
    discount_creation_delay_ms: int = 500

    brand_name: str = "Daily N'Oats"
    store_url: str = 'https://dailynoats.com'
    mailerlite_from_email: str = 'hello@dailynoats.com'
    mailerlite_from_name: str = "Daily N'Oats"

    @classmethod
    def from_env(cls) -> 'Settings':
        """Build settings from environment variables (and .env)."""
        return cls(
            shopify_store=os.getenv('SHOPIFY_STORE') or None,
            shopify_api_key=os.getenv('SHOPIFY_API_KEY') or None,
            shopify_api_version=os.getenv('SHOPIFY_API_VERSION', '2024-10'),
            mailerlite_api_key=os.getenv('MAILERLITE_API_KEY') or None,
            openai_api_key=os.getenv('OPENAI_API_KEY') or None,
            openai_model=os.getenv('OPENAI_MODEL') or 'gpt-4.1-mini',
            max_customers_analyzed=_env_int('MAX_CUSTOMERS_ANALYZED', 1000),
            max_customers_for_ai=_env_int('MAX_CUSTOMERS_FOR_AI', 250),
            max_batch_customers=_env_int('MAX_BATCH_CUSTOMERS', 10000),
            default_batch_customers=_env_int('DEFAULT_BATCH_CUSTOMERS', 7000),
            discount_creation_delay_ms=_env_int('DISCOUNT_CREATION_DELAY_MS', 500),
            brand_name=os.getenv('BRAND_NAME', "Daily N'Oats"),
            store_url=os.getenv('STORE_URL', 'https://dailynoats.com'),
            mailerlite_from_email=os.getenv('MAILERLITE_FROM_EMAIL', 'hello@dailynoats.com'),
            mailerlite_from_name=os.getenv('MAILERLITE_FROM_NAME', "Daily N'Oats"),
        )

    @property
    def has_shopify(self) -> bool:
        return bool(self.shopify_store and self.shopify_api_key)

    @property
    def has_mailerlite(self) -> bool:
        return bool(self.mailerlite_api_key)

    @property
    def has_openai(self) -> bool:
        return bool(self.openai_api_key)

    def missing_env(self) -> List[str]:
        """Names of the credential variables that are not configured."""
        missing = []
        if not self.openai_api_key:
            missing.append('OPENAI_API_KEY')
        if not self.shopify_store:
            missing.append('SHOPIFY_STORE')
        if not self.shopify_api_key:
            missing.append('SHOPIFY_API_KEY')
        if not self.mailerlite_api_key:
            missing.append('MAILERLITE_API_KEY')
        return missing


class BaseConfig:
    """Base configuration."""
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')

    # Large customer segments are posted back by the dashboard
    MAX_CONTENT_LENGTH = 5 * 1024 * 1024

    CORS_ORIGINS = [
        origin.strip()
        for origin in os.getenv('CORS_ORIGINS', '*').split(',')
        if origin.strip()
    ]


class DevelopmentConfig(BaseConfig):
    """Development configuration."""
    DEBUG = True


class ProductionConfig(BaseConfig):
    """Production configuration."""
    DEBUG = False


class TestingConfig(BaseConfig):
    """Testing configuration."""
    TESTING = True


config_map = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig
}


def get_config(config_name: str = 'development'):
    """Get configuration class by name."""
    return config_map.get(config_name, DevelopmentConfig)
