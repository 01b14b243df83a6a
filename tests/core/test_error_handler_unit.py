"""Focused unit tests for global exception handling behaviors.

These tests exercise the public contract via a small FastAPI app using the
installed exception handler and ExceptionNormalizationMiddleware.
"""

from __future__ import annotations

from collections.abc import Generator
from unittest.mock import patch

import pytest
from fastapi import FastAPI, HTTPException, status
from fastapi.exceptions import RequestValidationError
from fastapi.testclient import TestClient
from pydantic import BaseModel, Field
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.error_handler import (
    ExceptionNormalizationMiddleware,
    global_exception_handler,
)
from core.middleware import CorrelationIdMiddleware


class Item(BaseModel):
    name: str = Field(min_length=3)


def _build_app() -> FastAPI:
    app = FastAPI()
    app.add_middleware(ExceptionNormalizationMiddleware)
    app.add_middleware(CorrelationIdMiddleware)
    app.add_exception_handler(Exception, global_exception_handler)
    app.add_exception_handler(StarletteHTTPException, global_exception_handler)
    app.add_exception_handler(RequestValidationError, global_exception_handler)

    @app.post("/items")
    async def create_item(item: Item):  # pragma: no cover - executed via client
        return {"ok": True}

    @app.get("/boom")
    async def boom():
        raise RuntimeError("Exploded with secret=should_not_leak")

    @app.get("/teapot")
    async def teapot():
        raise HTTPException(status_code=status.HTTP_418_IM_A_TEAPOT, detail="Short")

    return app


@pytest.fixture(params=["production", "development"])
def env_client(
    request: pytest.FixtureRequest,
) -> Generator[tuple[str, TestClient], None, None]:
    with patch("core.error_handler.get_settings") as mocked:
        mocked.return_value.ENVIRONMENT = request.param
        yield request.param, TestClient(_build_app())


def test_generic_exception_production(env_client) -> None:
    env, client = env_client
    resp = client.get("/boom")
    assert resp.status_code == 500
    body = resp.json()
    assert body["error"] == "An internal error occurred"
    if env == "production":
        assert "details" not in body
        assert "should_not_leak" not in resp.text
    else:
        assert body["details"]["exception_type"] == "RuntimeError"
        assert "traceback" in body["details"]


def test_http_exception_keeps_status_and_detail(env_client) -> None:
    _, client = env_client
    resp = client.get("/teapot")
    assert resp.status_code == 418
    assert resp.json() == {"error": "Short"}


def test_unknown_route_uses_error_body(env_client) -> None:
    _, client = env_client
    resp = client.get("/missing")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Not Found"}


def test_request_validation_is_bad_request(env_client) -> None:
    _, client = env_client
    resp = client.post("/items", json={"name": "ab"})
    assert resp.status_code == 400
    body = resp.json()
    assert body["error"] == "Validation failed"
    assert body["details"][0]["loc"] == ["body", "name"]


def test_correlation_id_is_echoed(env_client) -> None:
    _, client = env_client
    resp = client.get("/teapot", headers={"X-Correlation-ID": "abc-123"})
    assert resp.headers["X-Correlation-ID"] == "abc-123"


def test_correlation_id_is_generated(env_client) -> None:
    _, client = env_client
    resp = client.get("/boom")
    assert resp.headers["X-Correlation-ID"]
