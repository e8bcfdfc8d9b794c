from fastapi import APIRouter

from fastapi_sparql.api.endpoints import queries
from fastapi_sparql.core.config import Settings


def build_api_router(settings: Settings) -> APIRouter:
    api_router = APIRouter()

    # Routes declared in the routes file, if one is configured
    if settings.QUERY_ROUTES_FILE is not None:
        definitions = queries.load_route_definitions(settings.QUERY_ROUTES_FILE)
        api_router.include_router(queries.build_query_router(definitions))

    return api_router
