"""
Figma REST API access.

Read-only wrapper around the endpoints the generator needs. HTTP failures are
re-raised as ``FigmaAPIError`` with a stable ``code`` so callers can print a
useful message.
"""

import re
from typing import Optional, Tuple
from urllib.parse import parse_qs, urlparse

import requests

from .transformer import unwrap_nodes_response


class FigmaAPIError(Exception):
    """A failed Figma API call."""

    def __init__(self, message: str, code: str = "API_ERROR", status: Optional[int] = None):
        super().__init__(message)
        self.code = code
        self.status = status


_STATUS_CODES = {
    401: "INVALID_TOKEN",
    403: "INVALID_TOKEN",
    404: "NODE_NOT_FOUND",
    429: "RATE_LIMITED",
}

_FILE_URL_RE = re.compile(r"/(?:file|design|proto)/([A-Za-z0-9]+)")


def parse_figma_url(url: str) -> Tuple[str, Optional[str]]:
    """'https://www.figma.com/design/KEY/Name?node-id=1-2' → ('KEY', '1:2')."""
    parsed = urlparse(url)
    m = _FILE_URL_RE.search(parsed.path)
    if not m:
        raise ValueError(f"not a Figma file URL: {url}")
    node_ids = parse_qs(parsed.query).get("node-id")
    node_id = node_ids[0].replace("-", ":") if node_ids else None
    return m.group(1), node_id


class FigmaAPIClient:
    """Figma REST API read-only wrapper."""

    BASE_URL = "https://api.figma.com/v1"

    def __init__(self, token: str, timeout: float = 30.0):
        self.token = token
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({
            "X-Figma-Token": token,
            "Content-Type": "application/json",
        })

    def _get(self, path: str, params: Optional[dict] = None) -> dict:
        try:
            resp = self.session.get(f"{self.BASE_URL}{path}", params=params, timeout=self.timeout)
            resp.raise_for_status()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            code = _STATUS_CODES.get(status, "API_ERROR")
            raise FigmaAPIError(f"Figma API {status}: {path}", code=code, status=status) from e
        except requests.RequestException as e:
            raise FigmaAPIError(f"Figma API request failed: {e}", code="NETWORK_ERROR") from e
        return resp.json()

    def get_file_nodes(self, file_key: str, node_ids: list) -> dict:
        return self._get(f"/files/{file_key}/nodes", {"ids": ",".join(node_ids)})

    def fetch_node(self, file_key: str, node_id: str) -> dict:
        """Raw ``document`` of one node, ready for the transformer."""
        response = self.get_file_nodes(file_key, [node_id])
        try:
            return unwrap_nodes_response(response, node_id)
        except ValueError as e:
            raise FigmaAPIError(str(e), code="NODE_NOT_FOUND") from e
