"""Single-hop ``$ref`` resolution inside a loaded OpenAPI document.

Resolution is permissive: a dangling or malformed pointer yields ``None``
instead of raising, and a target that is itself a ``$ref`` is returned
as-is. Callers must tolerate a "resolved schema" that is not a mapping.
"""

from typing import Any

JSON_CONTENT_TYPE = "application/json"


def resolve_schema(schema: Any, document: Any) -> Any:
    """Follow ``schema['$ref']`` one hop into ``document``.

    Schemas without a ``$ref`` (and ``None``) are returned unchanged.
    """
    if not isinstance(schema, dict) or "$ref" not in schema or document is None:
        return schema

    ref = schema["$ref"]
    if not isinstance(ref, str):
        return None

    # "#/components/schemas/Pet" -> ["components", "schemas", "Pet"]
    parts = ref.split("/")
    if parts and parts[0] == "#":
        parts = parts[1:]

    result = document
    for part in parts:
        result = result.get(part) if isinstance(result, dict) else None
        if result is None:
            break
    return result


def request_body_schema(request_body: Any, document: Any) -> dict | None:
    """Resolve an endpoint's JSON body schema, or None if it is not an object schema."""
    if request_body is None:
        return None
    resolved = resolve_schema(request_body, document)
    return resolved if isinstance(resolved, dict) else None


def body_properties(request_body: Any, document: Any) -> dict[str, dict]:
    """Property name -> property schema for the resolved body schema.

    Properties whose schema is not a mapping are dropped.
    """
    schema = request_body_schema(request_body, document)
    if schema is None:
        return {}
    properties = schema.get("properties")
    if not isinstance(properties, dict):
        return {}
    return {k: v for k, v in properties.items() if isinstance(v, dict)}


def body_required(request_body: Any, document: Any) -> list[str]:
    schema = request_body_schema(request_body, document)
    if schema is None:
        return []
    required = schema.get("required")
    if not isinstance(required, list):
        return []
    return [name for name in required if isinstance(name, str)]
