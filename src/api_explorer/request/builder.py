"""Turns form state into a concrete HTTP request description.

Building is pure: no I/O, and missing optional values are skipped rather
than raising.
"""

import json
from typing import Any
from urllib.parse import quote, urlencode

from pydantic import BaseModel, ConfigDict

from api_explorer.form.model import FormState
from api_explorer.parser.base import ApiEndpoint

DEFAULT_HEADERS = {"Content-Type": "application/json"}

# characters encodeURIComponent leaves alone
_COMPONENT_SAFE = "-_.!~*'()"


class RequestDescriptor(BaseModel):
    """Ready-to-send request: method, full URL, headers and optional JSON body."""

    model_config = ConfigDict(frozen=True)

    method: str
    url: str
    headers: dict[str, str] = {}
    body: dict[str, Any] | None = None


def to_text(value: Any) -> str:
    """String form of a form value as it appears in a URL."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, list):
        return ",".join(to_text(v) for v in value)
    if isinstance(value, dict):
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    return str(value)


def json_value(value: Any) -> Any:
    """Copy of a JSON value with whole-number floats written as ints."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, list):
        return [json_value(v) for v in value]
    if isinstance(value, dict):
        return {k: json_value(v) for k, v in value.items()}
    return value


def _has_value(value: Any) -> bool:
    return value is not None and not (isinstance(value, str) and value == "")


def build_request(base_url: str, endpoint: ApiEndpoint, state: FormState) -> RequestDescriptor:
    """Assemble the request for ``endpoint`` from the current form values.

    Any query value whose name appears as a ``{name}`` placeholder in the path
    is substituted into the path, whatever its declared location, and is then
    left out of the query string. Remaining declared parameters with a value
    go into the query string.
    """
    path = endpoint.path
    consumed = set()
    for key, value in state.query.items():
        placeholder = f"{{{key}}}"
        if placeholder in path and _has_value(value):
            path = path.replace(placeholder, quote(to_text(value), safe=_COMPONENT_SAFE), 1)
            consumed.add(key)

    query_params = []
    for param in endpoint.parameters:
        if param.name in consumed:
            continue
        value = state.query.get(param.name)
        if _has_value(value):
            query_params.append((param.name, to_text(value)))

    url = base_url + path
    if query_params:
        url += ("&" if "?" in url else "?") + urlencode(query_params)

    body = None
    if endpoint.method != "GET" and state.body:
        body = json_value(state.body)

    return RequestDescriptor(
        method=endpoint.method,
        url=url,
        headers=dict(DEFAULT_HEADERS),
        body=body,
    )
