"""
Thin HTTP client for the ARA REST API.

Goals:
- One place that builds headers (User-Agent, optional HTTP Basic auth).
- Map failures to typed errors (HttpError / NetworkError / ResponseDecodeError).
- Trace every call at debug level with credentials redacted.

No retries: a failed call surfaces immediately to its caller.
"""

from __future__ import annotations

import base64
import logging
from typing import Any

import requests

from ara_common.telemetry import redact_secrets
from ara_config.settings import AraSettings
from ara_mcp.errors import HttpError, NetworkError, ResponseDecodeError


logger = logging.getLogger(__name__)


def basic_auth_value(username: str, password: str) -> str:
    token = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
    return f"Basic {token}"


class AraHttpClient:
    """A small wrapper around `requests.Session` bound to one ARA server."""

    def __init__(self, settings: AraSettings, *, session: requests.Session | None = None) -> None:
        self.settings = settings
        self.session = session or requests.Session()

    @property
    def base_url(self) -> str:
        return self.settings.api_server.rstrip("/")

    def url_for(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def build_headers(self) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "User-Agent": self.settings.user_agent,
        }
        if self.settings.has_credentials:
            headers["Authorization"] = basic_auth_value(self.settings.username, self.settings.password)
        return headers

    def request(self, method: str, path: str, body: Any | None = None) -> Any:
        """Perform an HTTP request and return the decoded JSON body."""
        method = method.upper()
        url = self.url_for(path)
        headers = self.build_headers()

        logger.debug("Fetching URL: %s %s", method, url)
        logger.debug("Headers: %s", redact_secrets(headers))

        try:
            resp = self.session.request(
                method=method,
                url=url,
                headers=headers,
                json=body if (body is not None and method == "POST") else None,
                timeout=self.settings.http_timeout,
            )
        except requests.RequestException as e:
            logger.warning("HTTP %s %s failed: %s", method, url, e)
            raise NetworkError(url, e) from e

        logger.debug("Response status: %s", resp.status_code)

        if not 200 <= resp.status_code < 300:
            raise HttpError(resp.status_code, resp.reason or "", url)

        try:
            return resp.json()
        except ValueError as e:
            raise ResponseDecodeError(url, resp.status_code) from e

    def get(self, path: str) -> Any:
        return self.request("GET", path)
