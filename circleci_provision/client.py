"""Minimal HTTP transport for the CircleCI REST API."""

from __future__ import annotations

import logging
import urllib.parse
from typing import Any

import requests

from circleci_provision.errors import RequestError
from circleci_provision.models import DEFAULT_API_URL, DEFAULT_TIMEOUT


class CircleCIClient:
    """Thin wrapper around requests that prefixes relative paths with the API base URL."""

    def __init__(self, base_url: str = DEFAULT_API_URL, timeout: float = DEFAULT_TIMEOUT):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({"Accept": "application/json"})
        self.logger = logging.getLogger("circleci-provision")

    def url_for(self, url: str) -> str:
        if url.startswith(self.base_url):
            return url
        return f"{self.base_url}/{url.lstrip('/')}"

    def _request(self, method: str, url: str, **kwargs) -> requests.Response:
        """Issue a single request. Status codes are left to the caller to interpret."""
        url = self.url_for(url)
        # Query string carries the token and bodies carry secrets; log the path only
        path = urllib.parse.urlsplit(url).path
        self.logger.debug(f"{method} {path}")
        try:
            resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise RequestError(method, path, e) from e

        if resp.status_code >= 400:
            self.logger.error(f"API error {resp.status_code}: {resp.text[:500]}")
        return resp

    def get(self, url: str) -> requests.Response:
        return self._request("GET", url)

    def post(self, url: str, data: Any = None) -> requests.Response:
        return self._request("POST", url, json=data)

    def delete(self, url: str, data: Any = None) -> requests.Response:
        return self._request("DELETE", url, json=data)
