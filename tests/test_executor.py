from unittest.mock import MagicMock

import pytest
import requests

from api_explorer.errors import RequestExecutionError
from api_explorer.request.builder import RequestDescriptor
from api_explorer.request.executor import ExecutionResult, HttpExecutor

REQUEST = RequestDescriptor(
    method="POST",
    url="http://h/pets",
    headers={"Content-Type": "application/json"},
    body={"name": "Rex"},
)


def _response(status: int, reason: str = "OK", payload=None, content: bytes = b"{}") -> MagicMock:
    resp = MagicMock()
    resp.status_code = status
    resp.reason = reason
    resp.content = content
    resp.json.return_value = payload
    return resp


class TestHttpExecutor:
    def test_success_returns_decoded_json(self):
        http = MagicMock()
        http.request.return_value = _response(201, "Created", {"id": 1})

        result = HttpExecutor(http=http).send(REQUEST)

        assert result == ExecutionResult(status=201, status_text="Created", data={"id": 1})

    def test_passes_request_fields(self):
        http = MagicMock()
        http.request.return_value = _response(200, payload={})

        HttpExecutor(http=http, timeout=5).send(REQUEST)

        args, kwargs = http.request.call_args
        assert args == ("POST", "http://h/pets")
        assert kwargs["headers"] == {"Content-Type": "application/json"}
        assert kwargs["json"] == {"name": "Rex"}
        assert kwargs["timeout"] == 5

    def test_non_json_body_returned_as_text(self):
        resp = _response(200, content=b"pong")
        resp.json.side_effect = ValueError("no json")
        resp.text = "pong"
        http = MagicMock()
        http.request.return_value = resp

        assert HttpExecutor(http=http).send(REQUEST).data == "pong"

    def test_empty_body_is_none(self):
        http = MagicMock()
        http.request.return_value = _response(204, "No Content", content=b"")

        assert HttpExecutor(http=http).send(REQUEST).data is None

    def test_error_status_carries_code(self):
        http = MagicMock()
        http.request.return_value = _response(404, "Not Found")

        with pytest.raises(RequestExecutionError) as exc:
            HttpExecutor(http=http).send(REQUEST)
        assert exc.value.status_code == 404
        assert str(exc.value).startswith("404 ")

    def test_transport_error_has_no_status(self):
        http = MagicMock()
        http.request.side_effect = requests.ConnectionError("connection refused")

        with pytest.raises(RequestExecutionError) as exc:
            HttpExecutor(http=http).send(REQUEST)
        assert exc.value.status_code is None
        assert str(exc.value) == "connection refused"
