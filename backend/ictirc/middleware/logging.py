"""Request logging middleware that binds a request id per request."""

import time
from uuid import uuid4

from fastapi import Request

from ictirc.utils.logger import get_logger, set_request_id

log = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


async def logging_middleware(request: Request, call_next):
    """Tag the request with an id, echo it back and log the outcome."""
    request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
    set_request_id(request_id)
    start = time.perf_counter()

    response = await call_next(request)

    response.headers[REQUEST_ID_HEADER] = request_id
    log.info(
        "request completed",
        method=request.method,
        path=request.url.path,
        status_code=response.status_code,
        duration_ms=round((time.perf_counter() - start) * 1000, 2),
    )
    return response
