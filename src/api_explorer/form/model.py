"""Editable form state for a selected endpoint.

``query`` holds every declared parameter (path placeholders included) and
``body`` holds the properties of the resolved JSON body schema. Values are
either coerced (int / float / bool) or the raw text the user typed, so an
invalid entry stays visible in the request preview.
"""

import re
from typing import Any

from pydantic import BaseModel, ConfigDict

from api_explorer.parser.base import ApiEndpoint
from api_explorer.parser.resolver import body_properties, body_required

SECTIONS = ("query", "body")

REQUIRED_MESSAGE = "required field"
INTEGER_MESSAGE = "enter an integer"
NUMBER_MESSAGE = "enter a number"
BOOLEAN_MESSAGE = "enter true or false"

INTEGER_RE = re.compile(r"-?[0-9]+")
NUMBER_RE = re.compile(r"-?[0-9]+(\.[0-9]+)?")
BOOLEAN_RE = re.compile(r"true|false", re.IGNORECASE)


class FormState(BaseModel):
    """Current input for one endpoint plus per-field error messages."""

    model_config = ConfigDict(frozen=True)

    query: dict[str, Any] = {}
    body: dict[str, Any] = {}
    errors: dict[str, str] = {}

    def section(self, name: str) -> dict[str, Any]:
        if name not in SECTIONS:
            raise ValueError(f"Unknown form section: {name!r}")
        return getattr(self, name)


def default_for_type(schema_type: Any) -> Any:
    """Blank value for a body property without an explicit default."""
    if schema_type in ("integer", "number"):
        return ""
    if schema_type == "boolean":
        return False
    if schema_type == "array":
        return []
    if schema_type == "object":
        return {}
    return ""


def initialize_form(endpoint: ApiEndpoint, document: Any) -> FormState:
    """Fresh form for ``endpoint`` with declared defaults applied."""
    query = {
        p.name: p.default if p.default is not None else ""
        for p in endpoint.parameters
    }

    body = {}
    for key, prop in body_properties(endpoint.request_body, document).items():
        if "default" in prop:
            body[key] = prop["default"]
        else:
            body[key] = default_for_type(prop.get("type"))

    return FormState(query=query, body=body)


def coerce_value(raw: Any, param_type: str) -> tuple[Any, str | None]:
    """Convert ``raw`` to ``param_type``.

    Returns ``(value, error)``. On error the raw input is returned as the
    value. Types other than integer, number and boolean pass through.
    """
    if param_type == "integer":
        text = raw if isinstance(raw, str) else str(raw)
        if not INTEGER_RE.fullmatch(text):
            return raw, INTEGER_MESSAGE
        return int(text), None

    if param_type == "number":
        text = raw if isinstance(raw, str) else str(raw)
        if not NUMBER_RE.fullmatch(text):
            return raw, NUMBER_MESSAGE
        return float(text), None

    if param_type == "boolean":
        if isinstance(raw, str):
            if not BOOLEAN_RE.fullmatch(raw):
                return raw, BOOLEAN_MESSAGE
            return raw.lower() == "true", None
        return raw, None

    return raw, None


def field_spec(endpoint: ApiEndpoint, document: Any, section: str, key: str) -> tuple[str, bool]:
    """Declared ``(type, required)`` of a field; unknown fields are optional strings."""
    if section == "query":
        param = endpoint.param(key)
        if param is None:
            return "string", False
        return param.param_type, param.required

    prop = body_properties(endpoint.request_body, document).get(key)
    if prop is None:
        return "string", False
    required = key in body_required(endpoint.request_body, document)
    return prop.get("type") or "string", required


def update_field(
    state: FormState,
    endpoint: ApiEndpoint,
    document: Any,
    section: str,
    key: str,
    raw: Any,
) -> tuple[FormState, str | None]:
    """Apply one edit and re-validate only that field."""
    values = state.section(section)
    param_type, required = field_spec(endpoint, document, section, key)

    value, error = raw, None
    if isinstance(raw, str) and raw == "":
        if required:
            error = REQUIRED_MESSAGE
    else:
        value, error = coerce_value(raw, param_type)

    errors = {k: v for k, v in state.errors.items() if k != key}
    if error:
        errors[key] = error

    new_state = state.model_copy(update={section: {**values, key: value}, "errors": errors})
    return new_state, error


def _is_blank(value: Any) -> bool:
    # 0 and False count as provided
    return value is None or (isinstance(value, str) and value == "")


def missing_fields(state: FormState, endpoint: ApiEndpoint, document: Any) -> dict[str, str]:
    """Required fields that have no value, mapped to the required message."""
    missing = {}
    for param in endpoint.parameters:
        if param.required and _is_blank(state.query.get(param.name)):
            missing[param.name] = REQUIRED_MESSAGE

    for key in body_required(endpoint.request_body, document):
        if _is_blank(state.body.get(key)):
            missing[key] = REQUIRED_MESSAGE
    return missing


def validate_all(state: FormState, endpoint: ApiEndpoint, document: Any) -> bool:
    return not missing_fields(state, endpoint, document)


def with_required_errors(state: FormState, endpoint: ApiEndpoint, document: Any) -> FormState:
    """Copy of ``state`` with errors for every missing required field added."""
    missing = missing_fields(state, endpoint, document)
    if not missing:
        return state
    return state.model_copy(update={"errors": {**state.errors, **missing}})
