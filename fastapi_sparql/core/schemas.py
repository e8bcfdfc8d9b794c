from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fastapi_sparql.core.client import QueryType
from fastapi_sparql.core.types import ParamType


# =========================
# ROUTE DEFINITIONS
# =========================
class RouteDefinition(BaseModel):
    path: str = Field(pattern=r"^/")
    type: QueryType
    query: str = Field(min_length=1)
    params: Dict[str, ParamType] = {}
    placeholders: Optional[List[str]] = None
    accept: Optional[str] = None
    headers: Dict[str, str] = {}
    summary: Optional[str] = None

    model_config = ConfigDict(extra="forbid")

    @field_validator("params")
    @classmethod
    def check_param_names(cls, params: Dict[str, ParamType]):
        for name in params:
            # pydantic keeps _names as private attributes, never as fields
            if not name.isidentifier() or name.startswith("_"):
                raise ValueError(f"Invalid parameter name: {name!r}")
        return params


class RoutesFile(BaseModel):
    routes: List[RouteDefinition] = []


# =========================
# RESPONSES
# =========================
class WelcomeResponse(BaseModel):
    message: str
    endpoint_url: str
