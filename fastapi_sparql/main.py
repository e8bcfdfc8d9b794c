import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI

from fastapi_sparql.api.router import build_api_router
from fastapi_sparql.core.client import SparqlClient
from fastapi_sparql.core.config import Settings, get_settings
from fastapi_sparql.core.schemas import WelcomeResponse


# Close the SPARQL client once the app shuts down
@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await app.state.sparql_client.aclose()


def create_app(
    settings: Optional[Settings] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> FastAPI:
    """
    Build the API.

    Run with: uvicorn fastapi_sparql.main:create_app --factory

    More query routes can be added afterwards with
    fastapi_sparql.api.routes.add_sparql_route(app.router, ...).
    """
    settings = settings or get_settings()
    logging.basicConfig(level=settings.LOG_LEVEL)

    app = FastAPI(title="SPARQL Query API", lifespan=lifespan)
    app.state.settings = settings
    app.state.sparql_client = SparqlClient.from_settings(settings, http_client)

    # Include the master router containing the configured query routes
    app.include_router(build_api_router(settings))

    @app.get("/", response_model=WelcomeResponse)
    async def root():
        return {
            "message": "Welcome to the SPARQL Query API",
            "endpoint_url": settings.SPARQL_ENDPOINT_URL,
        }

    return app
