import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("notes_api.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs method, path, status and duration of every request.
    Headers are never logged since they carry the api-token.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"

        try:
            response = await call_next(request)
        except Exception:
            # The catch-all handler outside this middleware turns it into a 500
            self._log(request, 500, start_time, client_ip)
            raise

        self._log(request, response.status_code, start_time, client_ip)
        return response

    @staticmethod
    def _log(request: Request, status: int, start_time: float, client_ip: str) -> None:
        duration_ms = (time.perf_counter() - start_time) * 1000
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s %d %.1fms from %s",
            request.method,
            request.url.path,
            status,
            duration_ms,
            client_ip,
        )
