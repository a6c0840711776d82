"""
Observability hooks for outgoing API requests.

Adds correlation IDs and structured logging context to every request the
frontend makes against the backend.
"""

import time
import uuid
import logging
from typing import Dict

import httpx

# Configure structured logger
logger = logging.getLogger("logistics")

CORRELATION_HEADER = "X-Correlation-ID"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Set up the root logger once for the whole frontend."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


class RequestLogger:
    """
    httpx event hooks that stamp and log each request.

    Usage:
        hooks = RequestLogger()
        client = httpx.AsyncClient(event_hooks=hooks.event_hooks())
    """

    def __init__(self):
        self._started: Dict[str, float] = {}

    def event_hooks(self) -> dict:
        return {"request": [self.on_request], "response": [self.on_response]}

    async def on_request(self, request: httpx.Request) -> None:
        # 1. Generate or keep Correlation ID
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())
        request.headers[CORRELATION_HEADER] = correlation_id

        # 2. Start Timer
        self._started[correlation_id] = time.time()

    async def on_response(self, response: httpx.Response) -> None:
        request = response.request
        correlation_id = request.headers.get(CORRELATION_HEADER, "unknown")
        started = self._started.pop(correlation_id, None)
        duration_ms = (time.time() - started) * 1000 if started else 0.0

        log_data = {
            "correlation_id": correlation_id,
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "duration_ms": round(duration_ms, 2),
        }

        # Log level based on status
        if response.status_code >= 500:
            logger.error("API Request Failed", extra=log_data)
        elif response.status_code >= 400:
            logger.warning("API Request Error", extra=log_data)
        else:
            logger.info("API Request", extra=log_data)

    def discard(self, request: httpx.Request) -> None:
        """Forget the timer of a request that never got a response."""
        self._started.pop(request.headers.get(CORRELATION_HEADER, ""), None)
