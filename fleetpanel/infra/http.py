from __future__ import annotations

from typing import Any, Literal

import aiohttp
from loguru import logger

from fleetpanel.core.exceptions import HttpStatusError, ResponseDecodeError, TransportError

type JsonBody = dict[str, Any] | list[Any]
type Method = Literal["GET", "POST", "PATCH", "DELETE"]


class HttpClient:
    """Session-owning JSON client for a single base URL.

    Every failure surfaces as a ``TransportError``: non-2xx answers as
    ``HttpStatusError``, unreadable bodies as ``ResponseDecodeError`` and
    connection problems or timeouts as a plain ``TransportError``.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 30,
        default_headers: dict[str, str] | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._default_headers = {"Accept": "application/json", **(default_headers or {})}
        self._session: aiohttp.ClientSession | None = None
        self._log = logger.bind(component="http")

    @property
    def base_url(self) -> str:
        return self._base_url

    def _url(self, path: str) -> str:
        return f"{self._base_url}{path}"

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
        return self._session

    async def request(self, method: Method, path: str, *, json: JsonBody | None = None) -> Any:
        session = await self._ensure_session()
        self._log.debug("{method} {path}", method=method, path=path)

        try:
            async with session.request(
                method, self._url(path), headers=self._default_headers, json=json
            ) as resp:
                return await self._parse(resp)
        except aiohttp.ClientResponseError as e:
            raise HttpStatusError(status=e.status, body=e.message) from e
        except aiohttp.ClientError as e:
            raise TransportError(f"{method} {path} failed: {e}") from e
        except TimeoutError as e:
            raise TransportError(f"{method} {path} timed out") from e

    async def _parse(self, resp: aiohttp.ClientResponse) -> Any:
        if resp.status >= 400:
            body = await resp.text()
            self._log.warning(
                "HTTP {status} from {url}: {body}",
                status=resp.status, url=str(resp.url), body=body[:500],
            )
            raise HttpStatusError(status=resp.status, body=body)

        raw = await resp.read()
        if not raw:
            return None
        try:
            return await resp.json(content_type=None)
        except ValueError as e:
            raise ResponseDecodeError(f"Invalid JSON from {resp.url}: {raw[:200]!r}") from e

    async def get(self, path: str) -> Any:
        return await self.request("GET", path)

    async def post(self, path: str, json: JsonBody) -> Any:
        return await self.request("POST", path, json=json)

    async def patch(self, path: str, json: JsonBody) -> Any:
        return await self.request("PATCH", path, json=json)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)

    # ─── Lifecycle ───────────────────────────────────────────────────

    async def close(self) -> None:
        if self._session and not self._session.closed:
            self._log.debug("Closing HTTP session")
            await self._session.close()

    async def __aenter__(self) -> HttpClient:
        await self._ensure_session()
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.close()
