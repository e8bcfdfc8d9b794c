import logging
import re
from pathlib import Path
from typing import Iterable, List, Union

from fastapi import APIRouter

from fastapi_sparql.api.routes import add_sparql_route
from fastapi_sparql.core.resolver import params_model_from_kinds
from fastapi_sparql.core.schemas import RouteDefinition, RoutesFile

logger = logging.getLogger(__name__)


def load_route_definitions(path: Union[str, Path]) -> List[RouteDefinition]:
    """
    Read query routes from a JSON file.

    Example file:
        {
          "routes": [
            {
              "path": "/labels",
              "type": "select",
              "query": "SELECT ?label WHERE { ?s rdfs:label ?label }",
              "params": {"s": "uri-reference"}
            }
          ]
        }
    """
    raw = Path(path).read_text(encoding="utf-8")
    routes = RoutesFile.model_validate_json(raw).routes
    logger.info(f"Loaded {len(routes)} query routes from {path}")
    return routes


def _model_name(path: str) -> str:
    return "QueryParams" + re.sub(r"\W+", "_", path).rstrip("_")


def build_query_router(definitions: Iterable[RouteDefinition]) -> APIRouter:
    router = APIRouter(tags=["SPARQL"])

    for definition in definitions:
        params_model = None
        if definition.params:
            params_model = params_model_from_kinds(
                _model_name(definition.path), definition.params
            )

        add_sparql_route(
            router,
            definition.path,
            definition.type,
            definition.query,
            params_model=params_model,
            placeholders=definition.placeholders,
            accept=definition.accept,
            headers=definition.headers,
            summary=definition.summary,
        )

    return router
