"""
Utility modules for the pricing backend.
"""
from .logging_config import setup_logging
from .errors import (
    ErrorCode,
    error_response,
    bad_request,
    not_found,
    internal_error,
    exception_response
)
from .exceptions import (
    PricingAIError,
    ConfigurationError,
    ValidationError,
    UpstreamError,
    ShopifyError,
    MailerLiteError,
    OpenAIError,
    MalformedAIResponseError
)
