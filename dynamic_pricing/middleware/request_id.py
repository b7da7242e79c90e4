"""
Request ID tracking.

Every request gets an ID (taken from the incoming X-Request-ID header or
generated) that is stored on flask.g for log records and echoed back in the
response headers.
"""
import logging
import time
import uuid

from flask import Flask, g, request

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = 'X-Request-ID'


def init_request_id_tracking(app: Flask) -> None:
    """Register request ID hooks on the app."""

    @app.before_request
    def assign_request_id():
        incoming = request.headers.get(REQUEST_ID_HEADER, '').strip()
        g.request_id = incoming[:64] if incoming else uuid.uuid4().hex[:16]
        g.request_started = time.monotonic()

    @app.after_request
    def echo_request_id(response):
        request_id = getattr(g, 'request_id', None)
        if request_id:
            response.headers[REQUEST_ID_HEADER] = request_id
        started = getattr(g, 'request_started', None)
        if started is not None and request.path.startswith('/api/'):
            elapsed_ms = (time.monotonic() - started) * 1000
            logger.info(f"{request.method} {request.path} -> {response.status_code} ({elapsed_ms:.0f}ms)")
        return response
