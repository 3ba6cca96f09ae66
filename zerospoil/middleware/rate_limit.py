import time
import logging
from collections import defaultdict
from typing import Sequence
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.status import HTTP_429_TOO_MANY_REQUESTS

from zerospoil.utils.error_handler import format_error_response

logger = logging.getLogger(__name__)

class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Per-IP rate limiting for the paths under `path_prefixes`.
    Uses an in-memory sliding window of request timestamps.
    """

    def __init__(self, app, requests_per_minute: int = 60, path_prefixes: Sequence[str] = ("/api/auth",)):
        super().__init__(app)
        self.requests_per_minute = requests_per_minute
        self.path_prefixes = tuple(path_prefixes)
        self.request_timestamps = defaultdict(list)
        logger.info(f"Rate limit middleware initialized: {requests_per_minute} requests per minute "
                    f"on {', '.join(self.path_prefixes)}")

    async def dispatch(self, request: Request, call_next):
        if not request.url.path.startswith(self.path_prefixes):
            return await call_next(request)

        client_ip = self._get_client_ip(request)
        current_time = time.time()

        # Drop timestamps older than the window
        self.request_timestamps[client_ip] = [
            timestamp for timestamp in self.request_timestamps[client_ip]
            if current_time - timestamp < 60
        ]

        if len(self.request_timestamps[client_ip]) >= self.requests_per_minute:
            logger.warning(f"Rate limit exceeded for IP: {client_ip}")
            return JSONResponse(
                status_code=HTTP_429_TOO_MANY_REQUESTS,
                content=format_error_response("Too many requests. Please try again in a moment."),
            )

        self.request_timestamps[client_ip].append(current_time)
        return await call_next(request)

    def _get_client_ip(self, request: Request) -> str:
        """
        Get the client IP address, handling proxies.
        """
        forwarded = request.headers.get("X-Forwarded-For")
        if forwarded:
            return forwarded.split(",")[0].strip()
        return request.client.host if request.client else "unknown"
