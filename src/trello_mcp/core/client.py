import asyncio
import logging
import math
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional
from urllib.parse import unquote, urlencode, urlsplit

import httpx

from .cache import DEFAULT_MAX_ENTRIES, DEFAULT_TTL_SECONDS, ResponseCache
from .config import TRELLO_BASE_URL, TrelloSettings
from .errors import AttachmentError, TrelloAPIError
from .observability import log_event

ALLOWED_METHODS = frozenset({"GET", "POST", "PUT", "DELETE"})


@dataclass(frozen=True)
class RequestPolicy:
    pacing_delay_seconds: float = 0.5  # before every transport call
    cache_ttl_seconds: float = DEFAULT_TTL_SECONDS
    default_retry_after_seconds: float = 1.0  # 429 without a usable retry-after
    cache_max_entries: int = DEFAULT_MAX_ENTRIES


def _param_value(value: Any) -> Any:
    if isinstance(value, bool):
        return "true" if value else "false"
    return value


def _clean_params(params: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    if not params:
        return {}
    return {k: _param_value(v) for k, v in params.items() if v is not None}


@dataclass(frozen=True)
class RequestDescriptor:
    """One remote call. Credentials are never part of a descriptor."""

    method: str
    path: str
    params: Optional[Mapping[str, Any]] = None
    body: Optional[Mapping[str, Any]] = None

    def __post_init__(self) -> None:
        method = (self.method or "").upper()
        if method not in ALLOWED_METHODS:
            raise ValueError(f"Unsupported method: {self.method!r}")
        object.__setattr__(self, "method", method)

        path = self.path or ""
        if not path.startswith("/") or path.startswith("//") or "://" in path:
            raise ValueError(f"path must be a relative resource path: {path!r}")
        if "?" in path or "#" in path:
            raise ValueError(f"path must not carry a query or fragment: {path!r}")
        for segment in path[1:].split("/"):
            if unquote(segment) in ("", ".", ".."):
                raise ValueError(f"path has an empty or dot segment: {path!r}")

    @property
    def is_read(self) -> bool:
        return self.method == "GET"

    def cache_key(self) -> str:
        params = _clean_params(self.params)
        if not params:
            return self.path
        return f"{self.path}?{urlencode(sorted(params.items()))}"


@dataclass(frozen=True)
class AttachmentData:
    data: bytes
    mime_type: Optional[str] = None
    file_name: Optional[str] = None


def parse_retry_after(value: Optional[str], default: float) -> float:
    """Seconds to wait from a retry-after header; default when absent or unparsable."""
    if value is None:
        return default
    try:
        seconds = float(value.strip())
    except ValueError:
        return default
    if not math.isfinite(seconds) or seconds < 0:
        return default
    return seconds


def parse_disposition_filename(content_disposition: Optional[str]) -> Optional[str]:
    if not content_disposition:
        return None
    for part in content_disposition.split(";"):
        part = part.strip()
        if part.lower().startswith("filename="):
            val = part.split("=", 1)[1].strip().strip('"')
            return val or None
    return None


class TrelloClient:
    """
    Request execution layer for the Trello REST API.
    - Injects key/token as query parameters on every call
    - Serves fresh GET responses from an in-process cache
    - Waits a fixed pacing delay before every transport call
    - Retries a 429 exactly once after the retry-after delay
    - Raises TrelloAPIError for non-2xx responses, timeouts and network errors
    """

    def __init__(
        self,
        *,
        api_key: str,
        token: str,
        base_url: str = TRELLO_BASE_URL,
        timeout_seconds: float = 10.0,
        policy: Optional[RequestPolicy] = None,
        logger: Optional[logging.Logger] = None,
        http: Optional[httpx.AsyncClient] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        api_key = (api_key or "").strip()
        token = (token or "").strip()
        if not api_key:
            raise ValueError("api_key must be provided.")
        if not token:
            raise ValueError("token must be provided.")

        self._api_key = api_key
        self._token = token
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.policy = policy if policy is not None else RequestPolicy()
        self.log = logger or logging.getLogger("trello_mcp.client")
        self._sleep = sleep
        self.cache = ResponseCache(
            ttl_seconds=self.policy.cache_ttl_seconds,
            max_entries=self.policy.cache_max_entries,
            clock=clock,
        )

        self._owns_http = http is None
        self.http = http or httpx.AsyncClient(
            base_url=self.base_url,
            headers={"Accept": "application/json"},
            timeout=timeout_seconds,
        )

    @classmethod
    def from_settings(cls, settings: TrelloSettings, **kwargs: Any) -> "TrelloClient":
        return cls(
            api_key=settings.api_key,
            token=settings.token,
            timeout_seconds=settings.timeout_seconds,
            **kwargs,
        )

    async def aclose(self) -> None:
        if self._owns_http:
            await self.http.aclose()

    async def __aenter__(self) -> "TrelloClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    # --- Core ----------------------------------------------------------- #

    async def execute(
        self, descriptor: RequestDescriptor, *, tool: Optional[str] = None
    ) -> Any:
        """Run one logical call; returns the decoded JSON payload (None for empty bodies)."""
        key = descriptor.cache_key() if descriptor.is_read else None
        if key is not None:
            entry = self.cache.get(key)
            if entry is not None:
                self.log.debug(
                    "trello.cache_hit",
                    extra={"tool": tool, "path": descriptor.path, "cache": "hit"},
                )
                return entry.payload

        params = {
            **_clean_params(descriptor.params),
            "key": self._api_key,
            "token": self._token,
        }
        await self._sleep(self.policy.pacing_delay_seconds)
        resp = await self._send_with_retry(
            descriptor.method,
            descriptor.path,
            log_path=descriptor.path,
            tool=tool,
            params=params,
            json=dict(descriptor.body) if descriptor.body is not None else None,
        )
        payload = self._decode(resp, descriptor)

        if key is not None:
            self.cache.set(key, payload)
        return payload

    async def get(
        self,
        path: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        tool: Optional[str] = None,
    ) -> Any:
        return await self.execute(RequestDescriptor("GET", path, params=params), tool=tool)

    async def post(
        self,
        path: str,
        *,
        json: Optional[Mapping[str, Any]] = None,
        params: Optional[Mapping[str, Any]] = None,
        tool: Optional[str] = None,
    ) -> Any:
        return await self.execute(
            RequestDescriptor("POST", path, params=params, body=json), tool=tool
        )

    async def put(
        self,
        path: str,
        *,
        json: Optional[Mapping[str, Any]] = None,
        params: Optional[Mapping[str, Any]] = None,
        tool: Optional[str] = None,
    ) -> Any:
        return await self.execute(
            RequestDescriptor("PUT", path, params=params, body=json), tool=tool
        )

    async def delete(self, path: str, *, tool: Optional[str] = None) -> Any:
        return await self.execute(RequestDescriptor("DELETE", path), tool=tool)

    async def fetch_attachment(
        self, url: str, *, tool: Optional[str] = None
    ) -> AttachmentData:
        """
        Download raw attachment bytes from an absolute URL.
        Trello download endpoints want OAuth-style header credentials rather
        than query parameters. Paced and retried like execute(); never cached.
        """
        parts = urlsplit(url or "")
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise AttachmentError(f"Attachment URL must be absolute http(s): {url!r}")

        headers = {
            "Authorization": (
                f'OAuth oauth_consumer_key="{self._api_key}", '
                f'oauth_token="{self._token}"'
            ),
            "Accept": "*/*",
        }
        await self._sleep(self.policy.pacing_delay_seconds)
        resp = await self._send_with_retry(
            "GET",
            url,
            log_path=parts.path or "/",
            tool=tool,
            headers=headers,
            follow_redirects=True,
        )

        content_type = resp.headers.get("content-type")
        mime_type = content_type.split(";", 1)[0].strip() if content_type else None
        return AttachmentData(
            data=resp.content,
            mime_type=mime_type or None,
            file_name=parse_disposition_filename(
                resp.headers.get("content-disposition")
            ),
        )

    # --- Internals ------------------------------------------------------ #

    async def _send_with_retry(
        self,
        method: str,
        url: str,
        *,
        log_path: str,
        tool: Optional[str],
        **kwargs: Any,
    ) -> httpx.Response:
        resp = await self._send_once(
            method, url, log_path=log_path, tool=tool, attempt=0, **kwargs
        )
        if resp.status_code == 429:
            delay = parse_retry_after(
                resp.headers.get("retry-after"),
                self.policy.default_retry_after_seconds,
            )
            self.log.warning(
                "trello.throttled",
                extra={
                    "tool": tool,
                    "method": method,
                    "path": log_path,
                    "retry_after": delay,
                },
            )
            await self._sleep(delay)
            # Single retry; a second 429 surfaces as an error below.
            resp = await self._send_once(
                method, url, log_path=log_path, tool=tool, attempt=1, **kwargs
            )

        if resp.status_code < 200 or resp.status_code >= 300:
            raise self._to_api_error(resp, method=method, path=log_path)
        return resp

    async def _send_once(
        self,
        method: str,
        url: str,
        *,
        log_path: str,
        tool: Optional[str],
        attempt: int,
        **kwargs: Any,
    ) -> httpx.Response:
        start = time.perf_counter()
        try:
            resp = await self.http.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            log_event(
                "trello_call",
                tool=tool,
                method=method,
                path=log_path,
                status="exception",
                error_type=type(exc).__name__,
                duration_ms=int((time.perf_counter() - start) * 1000),
                attempt=attempt,
            )
            raise self._transport_error(exc, method=method, path=log_path) from exc

        log_event(
            "trello_call",
            tool=tool,
            method=method,
            path=log_path,
            status=resp.status_code,
            duration_ms=int((time.perf_counter() - start) * 1000),
            attempt=attempt,
        )
        return resp

    @staticmethod
    def _transport_error(
        exc: httpx.HTTPError, *, method: str, path: str
    ) -> TrelloAPIError:
        if isinstance(exc, httpx.TimeoutException):
            message = "Request timeout"
        elif isinstance(exc, httpx.ConnectError):
            # DNS failures and refused connections both land here
            message = "Network connection error"
        else:
            message = str(exc) or "Unknown error"
        return TrelloAPIError(
            message, status_code=500, method=method, path=path, cause=exc
        )

    @staticmethod
    def _to_api_error(
        resp: httpx.Response, *, method: str, path: str
    ) -> TrelloAPIError:
        message: Optional[str] = None
        try:
            parsed = resp.json()
        except ValueError:
            # Trello often answers with a bare text body ("invalid id")
            message = (resp.text or "").strip()[:500] or None
        else:
            if isinstance(parsed, dict):
                message = parsed.get("message") or parsed.get("error")
            elif isinstance(parsed, str):
                message = parsed

        return TrelloAPIError(
            str(message) if message else "Unknown API error",
            status_code=resp.status_code,
            method=method,
            path=path,
        )

    @staticmethod
    def _decode(resp: httpx.Response, descriptor: RequestDescriptor) -> Any:
        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as exc:
            raise TrelloAPIError(
                "Invalid JSON in response",
                status_code=502,
                method=descriptor.method,
                path=descriptor.path,
                cause=exc,
            ) from exc


__all__ = [
    "AttachmentData",
    "RequestDescriptor",
    "RequestPolicy",
    "TrelloClient",
    "parse_disposition_filename",
    "parse_retry_after",
]
