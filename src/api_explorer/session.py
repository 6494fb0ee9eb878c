"""Explorer session: the state one user works with.

Holds the loaded document, its catalog, the selected endpoint with its
form, the last response and the request history. All transitions go
through methods here; the form and history objects themselves are
immutable and replaced on change.
"""

import logging
import time
from typing import Any

import requests

from api_explorer.config import ExplorerConfig
from api_explorer.errors import DocumentFetchError, RequestExecutionError, SessionBusyError
from api_explorer.form.model import (
    FormState,
    initialize_form,
    update_field,
    validate_all,
    with_required_errors,
)
from api_explorer.history import HistoryEntry, HistoryLog
from api_explorer.parser.base import ApiEndpoint
from api_explorer.parser.swagger import build_catalog, fetch_document
from api_explorer.request.builder import RequestDescriptor, build_request
from api_explorer.request.curl import to_curl
from api_explorer.request.executor import HttpExecutor, RequestExecutor

logger = logging.getLogger(__name__)


class ExplorerSession:
    """Interactive state for exploring one API."""

    def __init__(self, config: ExplorerConfig | None = None, executor: RequestExecutor | None = None):
        self.config = config or ExplorerConfig.from_env()
        self.executor = executor or HttpExecutor(timeout=self.config.timeout)
        self.document: dict | None = None
        self.endpoints: list[ApiEndpoint] = []
        self.selected: ApiEndpoint | None = None
        self.form = FormState()
        self.response: Any = None
        self.error: str | None = None
        self.history = HistoryLog()
        self.busy = False

    @property
    def base_url(self) -> str:
        return self.config.base_url

    def load(self, document: dict) -> list[ApiEndpoint]:
        """Replace the current document and rebuild the catalog."""
        endpoints = build_catalog(document)
        self.document = document
        self.endpoints = endpoints
        self.select_endpoint(None)
        logger.info("Loaded API document with %d endpoints", len(endpoints))
        return endpoints

    def fetch_docs(self, http: requests.Session | None = None) -> list[ApiEndpoint]:
        """Fetch the document from the configured server.

        On failure the previous document and catalog are kept, ``error`` is
        set and DocumentFetchError propagates.
        """
        self.error = None
        try:
            document = fetch_document(
                self.config.base_url,
                self.config.docs_path,
                http=http,
                timeout=self.config.timeout,
            )
        except DocumentFetchError as e:
            logger.warning("%s", e)
            self.error = str(e)
            raise
        return self.load(document)

    def find_endpoint(self, method: str, path: str) -> ApiEndpoint | None:
        method = method.upper()
        for endpoint in self.endpoints:
            if endpoint.method == method and endpoint.path == path:
                return endpoint
        return None

    def select(self, method: str, path: str) -> ApiEndpoint:
        endpoint = self.find_endpoint(method, path)
        if endpoint is None:
            raise KeyError(f"No endpoint {method.upper()} {path}")
        self.select_endpoint(endpoint)
        return endpoint

    def select_endpoint(self, endpoint: ApiEndpoint | None) -> None:
        """Select ``endpoint`` with a fresh form, or clear the selection."""
        self.selected = endpoint
        self.form = initialize_form(endpoint, self.document) if endpoint else FormState()
        self.response = None
        self.error = None

    def update(self, section: str, key: str, raw: Any) -> str | None:
        """Edit one field; returns its validation error, if any."""
        endpoint = self._require_selection()
        self.form, error = update_field(self.form, endpoint, self.document, section, key, raw)
        return error

    def validate(self) -> bool:
        endpoint = self._require_selection()
        valid = validate_all(self.form, endpoint, self.document)
        if not valid:
            self.form = with_required_errors(self.form, endpoint, self.document)
        return valid

    @property
    def preview(self) -> RequestDescriptor | None:
        if self.selected is None:
            return None
        return build_request(self.base_url, self.selected, self.form)

    def curl(self) -> str | None:
        request = self.preview
        return to_curl(request) if request else None

    def submit(self) -> HistoryEntry | None:
        """Validate, send and record the current request.

        Returns the new history entry, or None when validation fails.
        """
        endpoint = self._require_selection()
        if self.busy:
            raise SessionBusyError("A request is already in flight")
        if not self.validate():
            logger.info("Not sending %s: required fields missing", endpoint.key)
            return None

        request = build_request(self.base_url, endpoint, self.form)
        self.busy = True
        self.error = None
        self.response = None
        start = time.perf_counter()
        try:
            result = self.executor.send(request)
        except RequestExecutionError as e:
            logger.warning("%s %s failed: %s", request.method, request.url, e)
            self.error = str(e)
            raise
        finally:
            self.busy = False
        duration_ms = round((time.perf_counter() - start) * 1000)

        self.response = result.data
        entry = self.history.create_entry(
            endpoint,
            self.form,
            response=result.data,
            status=result.status,
            duration_ms=duration_ms,
        )
        self.history = self.history.record(entry)
        logger.info("%s %s -> %d %s (%dms)", request.method, request.url, result.status, result.status_text, duration_ms)
        return entry

    def load_from_history(self, entry: HistoryEntry | int) -> None:
        """Restore endpoint, form and response from a history entry."""
        if isinstance(entry, int):
            found = self.history.get(entry)
            if found is None:
                raise KeyError(f"No history entry {entry}")
            entry = found
        self.selected, self.form = self.history.replay(entry)
        self.response = entry.response
        self.error = None

    def _require_selection(self) -> ApiEndpoint:
        if self.selected is None:
            raise ValueError("No endpoint selected")
        return self.selected
