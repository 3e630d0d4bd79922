"""
FastAPI application entry point for the DevConnector API.
"""

from __future__ import annotations

import logging
import os
from typing import Optional, get_type_hints

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel, ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from devconnector.config import get_settings
from devconnector.routes import router

logger = logging.getLogger(__name__)


def _error_item(error: dict, loc: tuple) -> dict:
    # Field validators carry the user-facing message on the ValueError.
    raised = (error.get("ctx") or {}).get("error")
    return {
        "msg": str(raised) if raised else error.get("msg"),
        "param": str(loc[-1]) if len(loc) > 1 else "",
        "location": loc[0] if loc else "body",
    }


def _body_model(request: Request) -> Optional[type[BaseModel]]:
    endpoint = request.scope.get("endpoint")
    if endpoint is None:
        return None
    hints = get_type_hints(endpoint)
    hints.pop("return", None)
    for hint in hints.values():
        if isinstance(hint, type) and issubclass(hint, BaseModel):
            return hint
    return None


def _empty_body_items(request: Request) -> Optional[list[dict]]:
    """Validate an empty object so a missing body reports every required field."""
    model = _body_model(request)
    if model is None:
        return None
    try:
        model.model_validate({})
    except ValidationError as exc:
        return [
            _error_item(error, ("body",) + tuple(error.get("loc") or ()))
            for error in exc.errors()
        ]
    return None


def _validation_error_items(
    request: Request, exc: RequestValidationError
) -> list[dict]:
    items = []
    for error in exc.errors():
        loc = tuple(error.get("loc") or ())
        if error.get("type") == "missing" and loc == ("body",):
            expanded = _empty_body_items(request)
            if expanded:
                items.extend(expanded)
                continue
        items.append(_error_item(error, loc))
    return items


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return JSONResponse(
        status_code=400, content={"errors": _validation_error_items(request, exc)}
    )


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    if isinstance(exc.detail, list):
        content = {"errors": exc.detail}
    else:
        content = {"msg": exc.detail}
    return JSONResponse(
        status_code=exc.status_code, content=content, headers=exc.headers
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"msg": "Server error"})


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(level=logging.INFO)

    app = FastAPI(title="DevConnector API", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
    app.include_router(router, prefix=settings.api_prefix)

    if settings.client_build_dir and os.path.isdir(settings.client_build_dir):
        app.mount(
            "/",
            StaticFiles(directory=settings.client_build_dir, html=True),
            name="client",
        )
    return app


app = create_app()


def run() -> None:
    settings = get_settings()
    logger.info("Starting server on port %s", settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port)
