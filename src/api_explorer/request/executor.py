"""HTTP transport for built requests."""

import logging
from typing import Any, Protocol

import requests
from pydantic import BaseModel

from api_explorer.errors import RequestExecutionError

from .builder import RequestDescriptor

logger = logging.getLogger(__name__)


class ExecutionResult(BaseModel):
    """Successful response of an executed request."""

    status: int
    status_text: str = ""
    data: Any = None


class RequestExecutor(Protocol):
    def send(self, request: RequestDescriptor) -> ExecutionResult:
        """Send ``request``; raise RequestExecutionError on failure."""
        ...


class HttpExecutor:
    """Sends requests with a ``requests.Session``.

    Non-2xx answers are failures carrying the status code, as are transport
    errors (without one).
    """

    def __init__(self, http: requests.Session | None = None, timeout: float | None = None):
        self.http = http or requests.Session()
        self.timeout = timeout

    def send(self, request: RequestDescriptor) -> ExecutionResult:
        logger.debug("%s %s", request.method, request.url)
        try:
            resp = self.http.request(
                request.method,
                request.url,
                headers=request.headers,
                json=request.body,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise RequestExecutionError(str(e)) from e

        if not 200 <= resp.status_code < 300:
            raise RequestExecutionError(resp.reason or "HTTP error", status_code=resp.status_code)

        return ExecutionResult(
            status=resp.status_code,
            status_text=resp.reason or "",
            data=_decode_body(resp),
        )


def _decode_body(resp: requests.Response) -> Any:
    if not resp.content:
        return None
    try:
        return resp.json()
    except ValueError:
        return resp.text
