"""curl rendering of a request descriptor for copy-and-paste."""

import json

from .builder import RequestDescriptor, json_value


def to_curl(request: RequestDescriptor) -> str:
    curl = f'curl -X {request.method} "{request.url}"'

    for key, value in request.headers.items():
        curl += f' \\\n  -H "{key}: {value}"'

    if request.body:
        payload = json.dumps(json_value(request.body), separators=(",", ":"), ensure_ascii=False)
        curl += f" \\\n  -d '{payload}'"

    return curl
