"""
Custom exceptions for the Dynamic Pricing AI backend.

These exceptions provide more specific error handling than generic Exception,
allowing for better error messages and appropriate HTTP status codes.
"""


class PricingAIError(Exception):
    """Base exception for all backend errors."""

    def __init__(self, message: str, code: str = "PRICING_AI_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class ConfigurationError(PricingAIError):
    """A required credential or setting is missing."""

    def __init__(self, message: str):
        super().__init__(message, "CONFIGURATION_ERROR")


class ValidationError(PricingAIError):
    """Invalid input data."""

    def __init__(self, message: str, field: str = None):
        self.field = field
        super().__init__(message, "VALIDATION_ERROR")


class UpstreamError(PricingAIError):
    """Error communicating with a third-party API."""

    service = "upstream"

    def __init__(self, message: str, status_code: int = None, original_error: Exception = None):
        self.status_code = status_code
        self.original_error = original_error
        super().__init__(message, f"{self.service.upper()}_ERROR")


class ShopifyError(UpstreamError):
    """Error communicating with the Shopify Admin API."""

    service = "shopify"


class MailerLiteError(UpstreamError):
    """Error communicating with the MailerLite API."""

    service = "mailerlite"


class OpenAIError(UpstreamError):
    """Error communicating with the OpenAI API."""

    service = "openai"


class MalformedAIResponseError(PricingAIError):
    """The model replied with something other than the expected JSON."""

    def __init__(self, message: str = "OpenAI did not return valid JSON.", raw: str = None):
        self.raw = raw
        super().__init__(message, "MALFORMED_AI_RESPONSE")
