"""Unit tests for the request context middleware."""

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from catalog.api.constants import CORRELATION_ID_HEADER
from catalog.api.middleware.request_context import RequestContextMiddleware
from catalog.core.context import RequestContext


@pytest.fixture
def app() -> FastAPI:
    app = FastAPI()
    app.add_middleware(RequestContextMiddleware)

    @app.get("/echo")
    async def echo() -> dict[str, str | None]:
        return {"correlation_id": RequestContext.get_correlation_id()}

    return app


@pytest.mark.unit
@pytest.mark.asyncio
class TestRequestContextMiddleware:
    """Tests for correlation ID handling."""

    async def test_uses_incoming_header(self, app: FastAPI) -> None:
        async with AsyncClient(
            transport=ASGITransport(app=app), base_url="http://test"
        ) as client:
            response = await client.get(
                "/echo", headers={CORRELATION_ID_HEADER: "abc-123"}
            )

        assert response.json() == {"correlation_id": "abc-123"}
        assert response.headers[CORRELATION_ID_HEADER] == "abc-123"

    async def test_generates_when_missing(self, app: FastAPI) -> None:
        async with AsyncClient(
            transport=ASGITransport(app=app), base_url="http://test"
        ) as client:
            response = await client.get("/echo")

        generated = response.headers[CORRELATION_ID_HEADER]
        assert generated
        assert response.json() == {"correlation_id": generated}
