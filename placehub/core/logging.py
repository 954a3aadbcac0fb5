"""
Logging setup - stdlib logging with one console format for the whole app.
"""

import logging
import time
from fastapi import Request


def setup_logging(level: str = "INFO"):
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    )
    # pymongo is chatty at INFO (topology / heartbeat events)
    logging.getLogger("pymongo").setLevel(logging.WARNING)


async def log_requests_middleware(request: Request, call_next):
    logger = logging.getLogger("placehub.http")
    start = time.time()

    response = await call_next(request)

    duration = (time.time() - start) * 1000
    logger.info(
        f"{request.method} {request.url.path} -> {response.status_code} ({duration:.1f} ms)"
    )
    return response
