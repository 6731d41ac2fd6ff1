# app/core/logging.py
"""
Request logging.
Logs one line per API call: method, path, status, outcome and duration.
"""
import logging
import time

from fastapi import FastAPI, Request

logger = logging.getLogger("uvicorn.error")


def outcome_for(status_code: int) -> str:
    return "SUCCESS" if 200 <= status_code < 400 else "FAIL"


def install_request_logging(app: FastAPI) -> None:
    """Register the HTTP middleware that logs every request once it finishes."""

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = int((time.perf_counter() - start) * 1000)
        path = request.url.path
        if request.url.query:
            path = f"{path}?{request.url.query}"
        logger.info(
            "%s %s - %d (%s) - %dms",
            request.method, path, response.status_code, outcome_for(response.status_code), duration_ms,
        )
        return response
