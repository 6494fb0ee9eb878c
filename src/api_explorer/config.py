"""Explorer settings with environment overrides."""

import os

from pydantic import BaseModel

from api_explorer.parser.swagger import DEFAULT_DOCS_PATH

DEFAULT_BASE_URL = "http://localhost:8080"


class ExplorerConfig(BaseModel):
    base_url: str = DEFAULT_BASE_URL
    docs_path: str = DEFAULT_DOCS_PATH
    timeout: float | None = None  # seconds; None waits indefinitely

    @classmethod
    def from_env(cls) -> "ExplorerConfig":
        """Read API_BASE_URL, API_DOCS_PATH and API_TIMEOUT."""
        timeout = os.getenv("API_TIMEOUT")
        return cls(
            base_url=os.getenv("API_BASE_URL", DEFAULT_BASE_URL),
            docs_path=os.getenv("API_DOCS_PATH", DEFAULT_DOCS_PATH),
            timeout=float(timeout) if timeout else None,
        )
