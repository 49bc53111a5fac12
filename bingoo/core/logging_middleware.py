import logging
import time
import uuid

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

logger = logging.getLogger("bingoo")

REQUEST_ID_HEADER = "X-Request-ID"


def _level_for(status_code: int) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    return logging.INFO


class LoggingMiddleware(BaseHTTPMiddleware):
    """Access log with a per-request id.

    The id is taken from the incoming ``X-Request-ID`` header when present and
    echoed back on the response so client and server logs can be joined.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:12]
        request.state.request_id = request_id
        label = f"[{request_id}] {request.method} {request.url.path}"
        client = request.client.host if request.client else "-"

        started = time.perf_counter()
        logger.info(f"{label} from {client}")
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(f"{label} failed")
            raise

        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.log(
            _level_for(response.status_code),
            f"{label} -> {response.status_code} in {elapsed_ms:.1f}ms",
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
