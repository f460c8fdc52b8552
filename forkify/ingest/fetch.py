"""HTTP fetcher for the recipe API."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

import requests

from forkify.errors import MalformedResponseError, NetworkError


logger = logging.getLogger(__name__)


class Fetcher:
    """Performs one request and returns the decoded JSON body.

    GET when `body` is None, POST with a JSON body otherwise. The blocking
    requests call runs in a worker thread so callers can await it.

    Overlapping requests run in separate threads, so by default each one goes
    through `requests.get` / `requests.post` instead of a shared Session. A
    session passed in must be safe to use from several threads.
    """

    def __init__(self, timeout: float = 10, session: Optional[requests.Session] = None):
        self.timeout = timeout
        self.session = session

    async def request(self, url: str, body: Any = None) -> Any:
        return await asyncio.to_thread(self._send, url, body)

    def _send(self, url: str, body: Any) -> Any:
        method = "GET" if body is None else "POST"
        http = self.session if self.session is not None else requests
        # the query string carries the access key
        logger.debug("%s %s", method, url.split("?", 1)[0])
        try:
            if body is None:
                resp = http.get(url, timeout=self.timeout)
            else:
                resp = http.post(url, json=body, timeout=self.timeout)
        except requests.Timeout as exc:
            raise NetworkError(f"Request took too long! Timeout after {self.timeout} seconds") from exc
        except requests.RequestException as exc:
            raise NetworkError(f"Request failed: {exc}") from exc

        try:
            data = resp.json()
        except ValueError as exc:
            if not resp.ok:
                raise NetworkError(f"HTTP {resp.status_code}", status_code=resp.status_code) from exc
            raise MalformedResponseError("Response body is not JSON") from exc

        if not resp.ok:
            message = data.get("message") if isinstance(data, dict) else None
            raise NetworkError(f"{message or 'Request failed'} ({resp.status_code})", status_code=resp.status_code)

        logger.info("%s %s -> status %s", method, url.split("?", 1)[0], resp.status_code)
        return data
