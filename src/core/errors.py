# src/core/errors.py
import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

GENERIC_ERROR_DETAIL = "An error occurred while processing your request"

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    # Детали остаются в логах, клиенту уходит только общий ответ
    logger.error(f"Unhandled exception on {request.method} {request.url.path}: {exc}", exc_info=exc)
    # Ответ 500 собирается снаружи http middleware, заголовки ставим здесь
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": GENERIC_ERROR_DETAIL},
        headers=SECURITY_HEADERS,
    )


def register_error_handling(app: FastAPI) -> None:
    app.add_exception_handler(Exception, unhandled_exception_handler)

    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers[name] = value
        return response
