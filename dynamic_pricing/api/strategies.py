"""
Pricing strategy catalog endpoint.
"""
from flask import Blueprint, jsonify

from ..services.strategies import list_strategies

strategies_bp = Blueprint('strategies', __name__)


@strategies_bp.route('', methods=['GET'])
def get_strategies():
    """List the strategies the dashboard can pick from."""
    return jsonify({'strategies': list_strategies()})
