"""
Standardized error response utilities for the pricing API.

Provides consistent error response format across all endpoints:
{
    "error": {
        "message": "User-friendly error message",
        "code": "ERROR_CODE"
    }
}

Usage:
    from dynamic_pricing.utils.errors import error_response, ErrorCode

    return error_response("Shopify credentials not configured", ErrorCode.CONFIGURATION_ERROR, 400)
"""
import logging
from enum import Enum
from flask import jsonify
from typing import Optional

from .exceptions import (
    PricingAIError,
    ConfigurationError,
    ValidationError,
    UpstreamError,
    MalformedAIResponseError,
)

logger = logging.getLogger(__name__)


class ErrorCode(str, Enum):
    """Standardized error codes for API responses."""

    # Validation Errors (400)
    INVALID_REQUEST = "INVALID_REQUEST"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"

    # Not Found (404)
    NOT_FOUND = "NOT_FOUND"

    # External Service Errors
    SHOPIFY_ERROR = "SHOPIFY_ERROR"
    MAILERLITE_ERROR = "MAILERLITE_ERROR"
    OPENAI_ERROR = "OPENAI_ERROR"
    MALFORMED_AI_RESPONSE = "MALFORMED_AI_RESPONSE"

    # Server Errors (500)
    INTERNAL_ERROR = "INTERNAL_ERROR"


def error_response(
    message: str,
    code: ErrorCode = ErrorCode.INTERNAL_ERROR,
    status_code: int = 500,
    log_error: bool = True,
    details: Optional[dict] = None
) -> tuple:
    """
    Create a standardized error response.

    Args:
        message: User-friendly error message
        code: Error code from ErrorCode enum
        status_code: HTTP status code
        log_error: Whether to log the error
        details: Optional additional details (only logged, not returned to user)

    Returns:
        Tuple of (response, status_code) for Flask
    """
    if log_error and status_code >= 500:
        logger.error(f"API Error [{code}]: {message}", extra={"details": details})
    elif log_error and status_code >= 400:
        logger.warning(f"API Error [{code}]: {message}", extra={"details": details})

    response = {
        "error": {
            "message": message,
            "code": code.value if isinstance(code, ErrorCode) else code
        }
    }

    return jsonify(response), status_code


def bad_request(message: str, code: ErrorCode = ErrorCode.INVALID_REQUEST) -> tuple:
    """400 Bad Request error."""
    return error_response(message, code, 400)


def not_found(message: str, code: ErrorCode = ErrorCode.NOT_FOUND) -> tuple:
    """404 Not Found error."""
    return error_response(message, code, 404, log_error=False)


def internal_error(message: str = "An unexpected error occurred", details: Optional[dict] = None) -> tuple:
    """500 Internal Server Error."""
    return error_response(message, ErrorCode.INTERNAL_ERROR, 500, log_error=True, details=details)


def exception_response(error: PricingAIError) -> tuple:
    """Map a backend exception onto its HTTP error response."""
    if isinstance(error, ConfigurationError):
        return error_response(error.message, ErrorCode.CONFIGURATION_ERROR, 400)

    if isinstance(error, ValidationError):
        details = {"field": error.field} if error.field else None
        return error_response(error.message, ErrorCode.VALIDATION_ERROR, 400, details=details)

    if isinstance(error, MalformedAIResponseError):
        return error_response(
            error.message,
            ErrorCode.MALFORMED_AI_RESPONSE,
            500,
            details={"raw": (error.raw or "")[:500]}
        )

    if isinstance(error, UpstreamError):
        return error_response(
            error.message,
            error.code,
            500,
            details={"upstream_status": error.status_code}
        )

    return internal_error(error.message)
