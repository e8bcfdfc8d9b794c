import logging
from typing import Annotated, Any, Dict, Iterable, Optional, Type

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from pydantic import BaseModel

from fastapi_sparql.core.binding import bind_all
from fastapi_sparql.core.client import QueryType, SparqlClient
from fastapi_sparql.core.exceptions import UnsupportedTypeError, UnsupportedValueError
from fastapi_sparql.core.resolver import ModelTypeResolver

logger = logging.getLogger(__name__)


# The app-wide client, set up in create_app()
def get_sparql_client(request: Request) -> SparqlClient:
    return request.app.state.sparql_client


client_dep = Annotated[SparqlClient, Depends(get_sparql_client)]


def add_sparql_route(
    router: APIRouter,
    path: str,
    query_type: QueryType,
    query: str,
    params_model: Optional[Type[BaseModel]] = None,
    placeholders: Optional[Iterable[str]] = None,
    accept: Optional[str] = None,
    headers: Optional[Dict[str, str]] = None,
    **route_kwargs,
):
    """
    Register a GET route that runs a parameterized SPARQL query.

    Query string parameters are validated with params_model (FastAPI answers
    422 on bad input), bound into the query and sent to the endpoint. The
    endpoint's body, status and content type are relayed back.

    Args:
        router: Router (or app.router) to add the route to
        path: Route path
        query_type: select, construct or update
        query: Query template with ?name placeholders
        params_model: Pydantic model of the accepted query parameters,
            without one nothing is bound
        placeholders: Only bind these parameter names
        accept: Accept sent to the endpoint when the request asks for */*
        headers: Extra headers added to every response of the route
        **route_kwargs: Passed on to router.add_api_route (summary, tags...)
    """
    query_type = QueryType(query_type)
    placeholders = list(placeholders) if placeholders is not None else None
    headers = dict(headers) if headers else None
    resolver = ModelTypeResolver(params_model) if params_model is not None else None

    async def run_query(
        request: Request, client: SparqlClient, params: Dict[str, Any]
    ) -> Response:
        try:
            sparql_query = (
                bind_all(query, params, resolver, placeholders)
                if resolver is not None
                else query
            )
        except UnsupportedValueError as error:
            raise HTTPException(status.HTTP_400_BAD_REQUEST, str(error))
        except UnsupportedTypeError as error:
            logger.error(f"Cannot bind parameters for {path}: {error}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(error)
            )

        # */* falls back to the route's accept, then to the query type default
        requested = request.headers.get("accept")
        if not requested or requested == "*/*":
            requested = accept

        response = await client.send(query_type, sparql_query, accept=requested)
        logger.debug(f"accept: {requested}")

        if response.status_code >= 300:
            logger.error(f"results body:\n{response.text}")
            raise HTTPException(status_code=response.status_code, detail=response.text)

        logger.debug(f"results body:\n{response.text}")
        return Response(
            content=response.content,
            status_code=response.status_code,
            headers=headers,
            media_type=response.headers.get("content-type"),
        )

    if params_model is None:

        async def sparql_endpoint(request: Request, client: client_dep):
            return await run_query(request, client, {})

    else:

        async def sparql_endpoint(
            request: Request,
            client: client_dep,
            params: Annotated[params_model, Query()],
        ):
            return await run_query(request, client, params.model_dump())

    router.add_api_route(path, sparql_endpoint, methods=["GET"], **route_kwargs)
