"""OpenAPI document loading and endpoint catalog construction."""

import logging
from pathlib import Path
from typing import Any

import requests
import yaml
from pydantic import ValidationError

from api_explorer.errors import DocumentFetchError

from .base import ApiEndpoint, Param
from .resolver import JSON_CONTENT_TYPE, resolve_schema

logger = logging.getLogger(__name__)

DEFAULT_DOCS_PATH = "/v3/api-docs"

HTTP_METHODS = ("GET", "PUT", "POST", "DELETE", "OPTIONS", "HEAD", "PATCH", "TRACE")


def fetch_document(
    base_url: str,
    docs_path: str = DEFAULT_DOCS_PATH,
    http: requests.Session | None = None,
    timeout: float | None = None,
) -> dict:
    """GET ``{base_url}{docs_path}`` and return the decoded JSON document."""
    url = f"{base_url}{docs_path}"
    http = http or requests.Session()
    logger.debug("Fetching API document from %s", url)
    try:
        resp = http.get(url, timeout=timeout)
        resp.raise_for_status()
        doc = resp.json()
    except requests.RequestException as e:
        raise DocumentFetchError(url, str(e)) from e
    except ValueError as e:
        raise DocumentFetchError(url, f"invalid JSON: {e}") from e

    if not isinstance(doc, dict):
        raise DocumentFetchError(url, "document is not a JSON object")
    return doc


def load_document(file_path: Path) -> dict:
    """Read a local OpenAPI document (JSON or YAML)."""
    try:
        text = file_path.read_text(encoding="utf-8")
        doc = yaml.safe_load(text)
    except (OSError, yaml.YAMLError) as e:
        raise DocumentFetchError(str(file_path), str(e)) from e

    if not isinstance(doc, dict):
        raise DocumentFetchError(str(file_path), "document is not a mapping")
    return doc


def build_catalog(doc: dict) -> list[ApiEndpoint]:
    """Flatten ``doc['paths']`` into endpoints, in document order."""
    endpoints = []
    paths = doc.get("paths") or {}

    for path, methods in paths.items():
        if not isinstance(methods, dict):
            continue
        for method, operation in methods.items():
            if not isinstance(method, str) or method.upper() not in HTTP_METHODS or not isinstance(operation, dict):
                continue

            method = method.upper()
            tags = operation.get("tags")
            if not isinstance(tags, list):
                tags = []
            try:
                endpoint = ApiEndpoint(
                    method=method,
                    path=path,
                    summary=_text(operation.get("summary")) or f"{method} {path}",
                    parameters=_parse_parameters(operation.get("parameters") or [], doc),
                    request_body=_parse_request_body(operation.get("requestBody"), doc),
                    content_type=_detect_content_type(operation.get("requestBody"), doc),
                    tags=[_text(t) for t in tags if _text(t)],
                    operation_id=_text(operation.get("operationId")),
                    deprecated=bool(operation.get("deprecated", False)),
                )
            except ValidationError as e:
                logger.warning("Skipping %s %s: %s", method, path, e)
                continue
            endpoints.append(endpoint)

    logger.debug("Catalog built with %d endpoints", len(endpoints))
    return endpoints


def _parse_parameters(params: list, doc: dict) -> list[Param]:
    result = []
    for p in params:
        p = resolve_schema(p, doc)
        if not isinstance(p, dict) or not _text(p.get("name")):
            continue
        schema = resolve_schema(p.get("schema"), doc)
        if not isinstance(schema, dict):
            schema = {}
        constraints = {}
        for key in ("minimum", "maximum", "minLength", "maxLength", "pattern", "enum"):
            if key in schema:
                constraints[key] = schema[key]

        try:
            param = Param(
                name=_text(p["name"]),
                location=_text(p.get("in")) or "query",
                required=bool(p.get("required", False)),
                param_type=_schema_type(schema.get("type")),
                description=_text(p.get("description")),
                default=schema.get("default"),
                constraints=constraints,
            )
        except ValidationError as e:
            logger.warning("Skipping parameter %r: %s", p.get("name"), e)
            continue
        result.append(param)
    return result


def _parse_request_body(body: Any, doc: dict) -> Any:
    body = resolve_schema(body, doc)
    if not isinstance(body, dict):
        return None
    content = body.get("content") or {}
    media = content.get(JSON_CONTENT_TYPE)
    if not isinstance(media, dict):
        return None
    return media.get("schema")


def _detect_content_type(body: Any, doc: dict) -> str:
    body = resolve_schema(body, doc)
    if not isinstance(body, dict):
        return JSON_CONTENT_TYPE
    content = body.get("content") or {}
    if content and JSON_CONTENT_TYPE not in content:
        return next(iter(content))
    return JSON_CONTENT_TYPE


def _text(value: Any) -> str:
    """String form of a scalar document value; "" for missing or structured values."""
    if value is None or isinstance(value, (dict, list)):
        return ""
    return str(value)


def _schema_type(value: Any) -> str:
    # OpenAPI 3.1 allows a list of types, e.g. ["integer", "null"]
    if isinstance(value, list):
        value = next((t for t in value if isinstance(t, str) and t != "null"), None)
    return value if isinstance(value, str) and value else "string"
