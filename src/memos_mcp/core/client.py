from __future__ import annotations

import logging
import time
from typing import Any, Dict, Optional, Protocol, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from .observability import log_event

T = TypeVar("T", bound=BaseModel)


class MemosClientError(Exception):
    """Base error for client failures."""


class MemosHTTPError(MemosClientError):
    def __init__(
        self,
        *,
        status_code: int,
        method: str,
        url: str,
        reason: str = "",
        response_text: str = "",
    ):
        status = f"{status_code} {reason}".strip()
        super().__init__(f"Request failed: {status} - {response_text}")
        self.status_code = status_code
        self.method = method
        self.url = url
        self.response_text = response_text


class MemosParseError(MemosClientError):
    pass


class MemosModelValidationError(MemosClientError):
    pass


class MemosContractError(MemosClientError, ValueError):
    """Raised when a caller omits a field the operation needs."""


class Transport(Protocol):
    """What the resource services need from a session."""

    @property
    def base_url(self) -> str: ...

    async def request(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
        tool: Optional[str] = None,
    ) -> Dict[str, Any]: ...

    async def request_model(
        self, model: Type[T], method: str, url: str, **kwargs: Any
    ) -> T: ...

    async def request_empty(self, method: str, url: str, **kwargs: Any) -> None: ...

    def derive(self, token: str) -> "MemosClient": ...


class MemosClient:
    """
    Authenticated session against a Memos server (``/api/v1``).
    - Owns base URL and bearer token; both are read-only once constructed
    - Returns raw dict payloads or pydantic-validated models
    - No retries; non-2xx responses become MemosHTTPError
    - A derived session (from sign-in) signs out on cleanup()
    """

    def __init__(
        self,
        *,
        base_url: str,
        token: str,
        derived: bool = False,
        timeout_seconds: Optional[float] = None,
        logger: Optional[logging.Logger] = None,
    ):
        base_url = (base_url or "").rstrip("/")
        token = token or ""

        if not base_url:
            raise ValueError("base_url must be provided.")
        if not token:
            raise ValueError("token must be provided.")

        self._base_url = base_url
        self._token = token
        self._derived = derived
        self._signed_out = False
        self.timeout_seconds = timeout_seconds
        self.log = logger or logging.getLogger("memos_mcp.client")

        client_kwargs: Dict[str, Any] = {}
        if timeout_seconds is not None:
            client_kwargs["timeout"] = timeout_seconds

        self.http = httpx.AsyncClient(
            base_url=self._base_url,
            headers={
                "Accept": "application/json",
                "Content-Type": "application/json",
                "Authorization": f"Bearer {token}",
            },
            **client_kwargs,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def token(self) -> str:
        return self._token

    @property
    def derived(self) -> bool:
        return self._derived

    def __repr__(self) -> str:
        return f"MemosClient(base_url={self._base_url!r}, derived={self._derived})"

    def derive(self, token: str) -> "MemosClient":
        """New session on the same server, holding a sign-in credential."""
        return MemosClient(
            base_url=self._base_url,
            token=token,
            derived=True,
            timeout_seconds=self.timeout_seconds,
            logger=self.log,
        )

    async def cleanup(self) -> None:
        """
        Release the credential of a derived session (remote sign-out).
        Root sessions are left alone. Best-effort: upstream failures are
        logged, not raised.
        """
        if not self._derived or self._signed_out:
            return
        self._signed_out = True
        try:
            await self.request_empty("POST", "auth/signout", json={}, tool="auth")
        except MemosClientError as exc:
            self.log.warning("Sign-out of derived session failed: %s", exc)

    async def aclose(self) -> None:
        await self.http.aclose()

    async def __aenter__(self) -> "MemosClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        try:
            await self.cleanup()
        finally:
            await self.aclose()

    async def _send(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
        tool: Optional[str] = None,
    ) -> httpx.Response:
        method = method.upper()
        start = time.perf_counter()
        try:
            resp = await self.http.request(method, url, params=params, json=json)
        except httpx.HTTPError as exc:
            log_event(
                "op_call",
                tool=tool,
                method=method,
                endpoint=url,
                status="exception",
                duration_ms=int((time.perf_counter() - start) * 1000),
                error_type=type(exc).__name__,
            )
            raise MemosClientError(
                f"HTTP error calling {method} {url}: {exc}"
            ) from exc

        log_event(
            "op_call",
            tool=tool,
            method=method,
            endpoint=url,
            status=resp.status_code,
            duration_ms=int((time.perf_counter() - start) * 1000),
        )

        if not resp.is_success:
            raise MemosHTTPError(
                status_code=resp.status_code,
                method=method,
                url=str(resp.request.url),
                reason=resp.reason_phrase,
                response_text=resp.text or "",
            )
        return resp

    async def request(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
        tool: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Core request method.
        - url is relative to base_url ("memos", "memos/abc/comments")
        - Raises MemosHTTPError on non-2xx HTTP responses
        - Raises MemosClientError on network/timeout errors
        - Raises MemosParseError if the body isn't a JSON object
        - Returns parsed JSON dict on success ({} for an empty body)
        """
        resp = await self._send(method, url, params=params, json=json, tool=tool)
        return self._safe_json(resp)

    async def request_empty(self, method: str, url: str, **kwargs: Any) -> None:
        """Like request(), for operations whose response body is irrelevant."""
        await self._send(method, url, **kwargs)

    def _safe_json(self, resp: httpx.Response) -> Dict[str, Any]:
        if not resp.content:
            return {}

        try:
            data = resp.json()
        except ValueError as exc:
            snippet = (resp.text or "")[:500]
            raise MemosParseError(
                f"Expected JSON from {resp.request.method} "
                f"{resp.request.url}, got non-JSON body snippet: "
                f"{snippet!r}"
            ) from exc

        if not isinstance(data, dict):
            raise MemosParseError(
                f"Expected top-level JSON object from "
                f"{resp.request.method} {resp.request.url}, "
                f"got {type(data).__name__}"
            )
        return data

    async def get(
        self,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        tool: Optional[str] = None,
    ) -> Dict[str, Any]:
        return await self.request("GET", url, params=params, tool=tool)

    async def post(
        self, url: str, *, json: Dict[str, Any], tool: Optional[str] = None
    ) -> Dict[str, Any]:
        return await self.request("POST", url, json=json, tool=tool)

    async def patch(
        self,
        url: str,
        *,
        json: Dict[str, Any],
        params: Optional[Dict[str, Any]] = None,
        tool: Optional[str] = None,
    ) -> Dict[str, Any]:
        return await self.request("PATCH", url, params=params, json=json, tool=tool)

    async def delete(self, url: str, *, tool: Optional[str] = None) -> None:
        await self.request_empty("DELETE", url, tool=tool)

    async def request_model(
        self, model: Type[T], method: str, url: str, **kwargs: Any
    ) -> T:
        payload = await self.request(method, url, **kwargs)
        try:
            return model.model_validate(payload)
        except ValidationError as exc:
            raise MemosModelValidationError(
                f"Response did not match model {model.__name__}: {exc}"
            ) from exc
