"""
API blueprints for the Dynamic Pricing AI backend.
"""
from flask import current_app, request

from ..config import Settings
from ..utils.exceptions import ValidationError


def get_settings() -> Settings:
    """Settings for the running app."""
    return current_app.config['SETTINGS']


def get_json_body() -> dict:
    """Request JSON as a dict; an absent body counts as empty."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    return data
