"""Endpoint models derived from an OpenAPI document.

The catalog builder converts each (method, path) operation into these
models once per document load; they are not mutated afterwards.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, computed_field


class Param(BaseModel):
    """A single declared operation parameter."""

    model_config = ConfigDict(frozen=True)

    name: str
    location: str = "query"  # query / path / header / cookie
    required: bool = False
    param_type: str = "string"  # string / integer / number / boolean / array / object
    description: str = ""
    default: Any = None
    constraints: dict = {}  # minimum, maximum, pattern, enum, etc.


class ApiEndpoint(BaseModel):
    """One operation of the document, identified by (method, path)."""

    model_config = ConfigDict(frozen=True)

    method: str  # GET / POST / PUT / DELETE / PATCH ...
    path: str  # /api/users/{id}
    summary: str
    parameters: list[Param] = []
    request_body: Any = None  # application/json schema, $ref not yet resolved
    content_type: str = "application/json"
    tags: list[str] = []
    operation_id: str = ""
    deprecated: bool = False

    @computed_field
    @property
    def key(self) -> str:
        return f"{self.method} {self.path}"

    def param(self, name: str) -> Param | None:
        for p in self.parameters:
            if p.name == name:
                return p
        return None

    def __hash__(self) -> int:
        return hash((self.method, self.path))
