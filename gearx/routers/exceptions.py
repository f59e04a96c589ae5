from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from gearx.core.errors import DomainError
from gearx.core.logging import get_correlation_id, get_logger

logger = get_logger("gearx.routers.exceptions", component="http")


def register_exception_handlers(app: FastAPI) -> None:
    """Translate domain-layer exceptions into JSON error responses."""

    @app.exception_handler(DomainError)
    async def _handle_domain_error(request: Request, exc: DomainError) -> JSONResponse:
        if isinstance(exc.detail, dict):
            detail_payload: dict[str, Any] = {**exc.detail}
            detail_payload.setdefault("message", exc.message)
        elif exc.detail is not None:
            detail_payload = {"message": exc.message, "extra": exc.detail}
        else:
            detail_payload = {"message": exc.message}
        payload: dict[str, Any] = {
            "error": exc.error_code,
            "detail": detail_payload,
        }
        correlation_id = get_correlation_id()
        if correlation_id:
            payload["correlation_id"] = correlation_id
        logger.info(
            "domain_error",
            extra={"structured_data": {"error": exc.error_code, "path": request.url.path}},
        )
        return JSONResponse(status_code=getattr(exc, "status_code", 400), content=payload)
