import httpx
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from fastapi_sparql.core.config import Settings
from fastapi_sparql.main import create_app

ENDPOINT_URL = "http://example.org/sparql"


# Stand-in SPARQL endpoint: answers 202 with a JSON echo of the request it got
def echo_endpoint(request: httpx.Request) -> httpx.Response:
    return httpx.Response(
        202,
        json={
            "method": request.method,
            "url": str(request.url),
            "headers": dict(request.headers),
            "content": request.content.decode(),
        },
    )


@pytest.fixture(scope="function")
def settings():
    return Settings(_env_file=None, SPARQL_ENDPOINT_URL=ENDPOINT_URL)


# Tests override this to simulate other endpoint behaviour
@pytest.fixture(scope="function")
def endpoint_handler():
    return echo_endpoint


@pytest_asyncio.fixture(scope="function")
async def app(settings, endpoint_handler):
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(endpoint_handler))
    yield create_app(settings, http_client)
    await http_client.aclose()


# Client
@pytest_asyncio.fixture(scope="function")
async def client(app):
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac
