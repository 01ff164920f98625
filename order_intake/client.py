"""
HTTP client for the order backend.

The backend performs extraction, catalog matching and persistence. This
module only shapes requests and responses; every non-2xx status and every
transport failure surfaces as RequestError.
"""

from typing import Any, Dict, List, Optional

import requests

from order_intake.config import get_config
from order_intake.errors import RequestError
from order_intake.utils.logging import setup_logging


logger = setup_logging(__name__)
config = get_config()


class BackendClient:
    """Thin wrapper over the /extract, /match, /finalize and /orders endpoints."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = (base_url or config.BACKEND_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else config.REQUEST_TIMEOUT
        self.session = session or requests.Session()

    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = f"{self.base_url}{path}"
        logger.debug(f"{method} {url}")

        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.exceptions.RequestException as e:
            raise RequestError(None, f"Request to {path} failed: {e}") from e

        if not 200 <= response.status_code < 300:
            raise RequestError(response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise RequestError(
                response.status_code, f"Invalid JSON from {path}: {e}"
            ) from e

    def extract(self, filename: str, data: bytes, content_type: str = "application/pdf") -> List[Dict[str, Any]]:
        """Upload a PDF and return the raw extracted records."""
        payload = self._request(
            "POST",
            "/extract",
            files={"file": (filename, data, content_type)},
        )
        if not isinstance(payload, list):
            raise RequestError(None, "Unexpected extraction response shape")
        return payload

    def match(self, queries: List[str]) -> Dict[str, Any]:
        """Ask the matching service for ranked catalog candidates per query."""
        return self._request("POST", "/match", json=list(queries))

    def finalize(self, order: Dict[str, Any]) -> Dict[str, Any]:
        """Persist a finalized order; returns the backend confirmation."""
        return self._request("POST", "/finalize", json=order)

    def list_orders(self) -> List[Dict[str, Any]]:
        """Fetch all persisted orders."""
        payload = self._request("GET", "/orders")
        if not isinstance(payload, list):
            raise RequestError(None, "Unexpected orders response shape")
        return payload

    def close(self) -> None:
        self.session.close()
