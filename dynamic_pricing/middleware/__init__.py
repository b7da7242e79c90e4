"""
Middleware package for the pricing backend.
"""
from .request_id import init_request_id_tracking, REQUEST_ID_HEADER

__all__ = ['init_request_id_tracking', 'REQUEST_ID_HEADER']
