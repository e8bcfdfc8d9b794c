import logging
from enum import Enum
from typing import Dict, Optional

import httpx

from fastapi_sparql.core.config import Settings

logger = logging.getLogger(__name__)


class QueryType(str, Enum):
    SELECT = "select"
    CONSTRUCT = "construct"
    UPDATE = "update"


DEFAULT_ACCEPT: Dict[QueryType, str] = {
    QueryType.SELECT: "application/sparql-results+json",
    QueryType.CONSTRUCT: "application/n-triples",
    QueryType.UPDATE: "*/*",
}


class SparqlClient:
    """
    Minimal SPARQL protocol client.

    SELECT and CONSTRUCT go out as GET <endpoint>?query=..., UPDATE as a
    form-encoded POST to the update URL. The endpoint's response is returned
    untouched, transport errors propagate to the caller.
    """

    def __init__(
        self,
        endpoint_url: str,
        update_url: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = 30.0,
    ):
        logger.info("Initializing connection to SPARQL server...")
        self.endpoint_url = endpoint_url
        self.update_url = update_url or endpoint_url
        self._owns_http_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=timeout)

    @classmethod
    def from_settings(
        cls, settings: Settings, http_client: Optional[httpx.AsyncClient] = None
    ) -> "SparqlClient":
        return cls(
            endpoint_url=settings.SPARQL_ENDPOINT_URL,
            update_url=settings.SPARQL_UPDATE_URL,
            http_client=http_client,
            timeout=settings.REQUEST_TIMEOUT,
        )

    async def send(
        self, query_type: QueryType, query: str, accept: Optional[str] = None
    ) -> httpx.Response:
        query_type = QueryType(query_type)
        headers = {"Accept": accept or DEFAULT_ACCEPT[query_type]}
        logger.debug(f"query ({query_type.value}): {query}")

        if query_type is QueryType.UPDATE:
            return await self._http.post(
                self.update_url, data={"query": query}, headers=headers
            )

        return await self._http.get(
            self.endpoint_url, params={"query": query}, headers=headers
        )

    async def aclose(self):
        if self._owns_http_client:
            await self._http.aclose()
