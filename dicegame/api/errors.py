"""HTTP error mapping for API routes."""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from dicegame.games.errors import GameError


def api_error(*, code: str, message: str, detail: dict[str, Any] | None = None) -> dict[str, Any]:
    """Build a unified API error payload."""
    return {"error": message, "code": code, "detail": detail or {}}


async def handle_game_error(_: Request, exc: GameError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=api_error(code=exc.code, message=exc.message, detail=exc.detail),
    )


async def handle_request_validation_error(_: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed request bodies as 400 with the first failing field."""
    errors = exc.errors()
    message = "invalid request"
    fields: list[str] = []
    if errors:
        first = errors[0]
        fields = [str(part) for part in first.get("loc", ()) if part != "body"]
        message = f"{'.'.join(fields) or 'body'}: {first.get('msg', message)}"
    return JSONResponse(
        status_code=400,
        content=api_error(code="INVALID_REQUEST", message=message, detail={"fields": fields}),
    )


async def handle_http_exception(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Unify HTTP errors to the {error, code, detail} payload."""
    if isinstance(exc.detail, dict) and {"error", "code", "detail"} <= set(exc.detail):
        content = exc.detail
    else:
        content = api_error(
            code="HTTP_ERROR",
            message=str(exc.detail),
        )
    return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(GameError, handle_game_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
