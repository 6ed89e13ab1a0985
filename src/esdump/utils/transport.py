"""
HTTP transport for the search backend.

Sends exactly one request per call and hands back the raw status and body;
interpreting the JSON is left to the callers. Network problems (refused
connections, timeouts, TLS errors) are raised as ``TransportFailure``.
Retries are not attempted here.
"""

import json
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from esdump.constants import DEFAULT_HEADERS, DEFAULT_REQUEST_TIMEOUT
from esdump.errors import TransportFailure
from esdump.logging import get_logger, log_api_call


@dataclass(frozen=True)
class TransportResponse:
    status: int
    body: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class SearchTransport:
    """Point-in-time and search calls over a single ``httpx.Client``"""

    def __init__(
        self,
        base_url: str,
        auth: Optional[httpx.Auth] = None,
        headers: Optional[Dict[str, str]] = None,
        verify: bool = True,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        client: Optional[httpx.Client] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.logger = get_logger("esdump.utils.transport")
        self._client = client or httpx.Client(
            base_url=self.base_url,
            auth=auth,
            headers={**DEFAULT_HEADERS, **(headers or {})},
            verify=verify,
            timeout=timeout,
        )

    def __enter__(self) -> "SearchTransport":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def open_point_in_time(
        self, index: str, keep_alive: str, timeout: Optional[float] = None
    ) -> TransportResponse:
        """``POST /<index>/_pit?keep_alive=<keep_alive>``"""
        return self._send(
            "POST",
            f"/{quote(index, safe='')}/_pit",
            params={"keep_alive": keep_alive},
            timeout=timeout,
            index=index,
        )

    def search(
        self,
        body: Dict[str, Any],
        timeout: Optional[float] = None,
        index: Optional[str] = None,
    ) -> TransportResponse:
        """``POST /_search`` with a point-in-time search body"""
        return self._send("POST", "/_search", body=body, timeout=timeout, index=index)

    def close_point_in_time(
        self, pit_id: str, timeout: Optional[float] = None, index: Optional[str] = None
    ) -> TransportResponse:
        """``DELETE /_pit`` releasing a snapshot before its keep-alive runs out"""
        return self._send(
            "DELETE", "/_pit", body={"id": pit_id}, timeout=timeout, index=index
        )

    def _send(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, str]] = None,
        body: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None,
        index: Optional[str] = None,
    ) -> TransportResponse:
        url = f"{self.base_url}{path}"
        content = json.dumps(body).encode("utf-8") if body is not None else None
        request_timeout = self.timeout if timeout is None else timeout
        start_time = time.time()

        self.logger.debug(f"Starting {method} request to {url}")

        try:
            response = self._client.request(
                method,
                path,
                params=params,
                content=content,
                timeout=request_timeout,
            )
        except httpx.TransportError as e:
            error_msg = f"{type(e).__name__}: {e}" if str(e) else type(e).__name__
            log_api_call(
                method=method,
                url=url,
                duration=time.time() - start_time,
                request_size=len(content) if content else None,
                index=index,
                error=error_msg,
            )
            raise TransportFailure(
                f"{method} {url} failed: {error_msg}", method=method, url=url
            ) from e

        log_api_call(
            method=method,
            url=url,
            status_code=response.status_code,
            duration=time.time() - start_time,
            request_size=len(content) if content else None,
            response_size=len(response.content) if response.content else None,
            index=index,
        )
        return TransportResponse(status=response.status_code, body=response.text)
