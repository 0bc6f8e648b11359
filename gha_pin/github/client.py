"""
Minimal GitHub REST client: `get(path)` returns decoded JSON.

404 responses raise NotFoundError so the resolver can treat them as a
control signal; every other failure raises TransportError.
"""

import logging
import os
from typing import Any, Optional

import requests

from gha_pin.errors import NotFoundError, TransportError

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"
API_VERSION = "2022-11-28"
USER_AGENT = "gha-pin"


def token_from_env() -> Optional[str]:
    """Return the GitHub token from GITHUB_TOKEN or GH_TOKEN, if set."""
    for name in ("GITHUB_TOKEN", "GH_TOKEN"):
        value = (os.environ.get(name) or "").strip()
        if value:
            return value
    return None


class GitHubClient:
    def __init__(
        self,
        token: Optional[str] = None,
        api_url: str = DEFAULT_API_URL,
        timeout: int = 30,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.api_url = api_url.rstrip("/")
        self.token = (token or "").strip() or None
        self.timeout = timeout
        self.session = session or requests.Session()

    def _headers(self) -> dict[str, str]:
        h = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": API_VERSION,
            "User-Agent": USER_AGENT,
        }
        if self.token:
            h["Authorization"] = f"Bearer {self.token}"
        return h

    def get(self, path: str) -> Any:
        url = f"{self.api_url}/{path.lstrip('/')}"
        logger.debug("GET %s", url)
        try:
            resp = self.session.get(url, headers=self._headers(), timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(f"GET {path} failed: {e}") from e

        if resp.status_code == 404:
            raise NotFoundError(f"GET {path}: 404 Not Found")
        try:
            resp.raise_for_status()
        except requests.HTTPError as e:
            raise TransportError(
                f"GET {path}: HTTP {resp.status_code}", status_code=resp.status_code
            ) from e

        try:
            return resp.json()
        except ValueError as e:
            raise TransportError(
                f"GET {path}: invalid JSON response", status_code=resp.status_code
            ) from e
