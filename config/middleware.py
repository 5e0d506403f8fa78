"""
Custom middleware for piano-diary-back.
"""
import logging
import time

from django.utils.deprecation import MiddlewareMixin

logger = logging.getLogger(__name__)


class RequestTimingMiddleware(MiddlewareMixin):
    """
    Log method, path, status and duration of every /api/ request.
    Slow requests (over SLOW_REQUEST_MS) are logged at WARNING.
    """
    SLOW_REQUEST_MS = 1000
    LOGGED_PREFIXES = ('/api/',)

    def process_request(self, request):
        request._started_at = time.monotonic()

    def process_response(self, request, response):
        started = getattr(request, '_started_at', None)
        if started is None or not request.path.startswith(self.LOGGED_PREFIXES):
            return response

        elapsed_ms = (time.monotonic() - started) * 1000
        user_id = getattr(getattr(request, 'user', None), 'id', None)
        level = logging.WARNING if elapsed_ms > self.SLOW_REQUEST_MS else logging.INFO
        logger.log(
            level,
            f"[request] {request.method} {request.path} -> {response.status_code} "
            f"({elapsed_ms:.1f} ms, user={user_id})",
        )
        return response
