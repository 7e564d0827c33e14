"""Blocking HTTP requests whose bodies are fed line by line to a callback."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass

import requests

LineCallback = Callable[[str], bool]


@dataclass(frozen=True)
class HttpResponse:
    """Outcome of a request: ok is False on network failure or when stopped early."""

    ok: bool
    status_code: int


class HttpClient:
    """Sends requests with fixed headers.

    A callback receives each body line (without its newline) and returns
    True to keep reading or False to stop, which ends the request.
    """

    def __init__(
        self,
        headers: Mapping[str, str] | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self._headers = dict(headers or {})
        self._session = session if session is not None else requests.Session()

    def stream(self, url: str, callback: LineCallback | None = None) -> HttpResponse:
        """GET a URL, passing the body to the callback as it arrives."""
        return self._perform("GET", url, callback)

    def post(
        self,
        url: str,
        body: Mapping[str, str] | None = None,
        callback: LineCallback | None = None,
    ) -> HttpResponse:
        """POST a form-encoded body, passing the response body to the callback."""
        return self._perform("POST", url, callback, dict(body or {}))

    def close(self) -> None:
        self._session.close()

    def _perform(self, method, url, callback, data=None) -> HttpResponse:
        status = 0
        try:
            with self._session.request(
                method, url, headers=self._headers, data=data, stream=True
            ) as response:
                status = response.status_code
                if callback is None:
                    response.content  # drain the body
                    return HttpResponse(True, status)
                for raw in response.iter_lines():
                    if not callback(raw.decode("utf-8", errors="replace")):
                        return HttpResponse(False, status)
        except requests.RequestException:
            return HttpResponse(False, status)
        return HttpResponse(True, status)