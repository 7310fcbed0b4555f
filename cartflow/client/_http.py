"""
Backend transport — httpx with the request policy every call shares.

    * per-attempt timeout (``request_timeout_sec``)
    * one automatic retry on timeout / network failure, never on a response
    * 401 outside ``/auth/`` becomes ``SESSION_EXPIRED``
    * ``{"data": ...}`` envelope stripped, payload validated by the caller's model
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from kungfu import Error, LazyCoroResult, Ok
from pydantic import BaseModel, ValidationError
import combinators as C

from cartflow.config import Settings
from cartflow.errors import CheckoutError, ErrorKind
from cartflow.client._schemas import ErrorOut
from cartflow.lift import as_checkout_error

logger = logging.getLogger(__name__)

RETRYABLE = frozenset({ErrorKind.TIMEOUT, ErrorKind.NETWORK})

type Files = dict[str, tuple[str, bytes, str]]


def _retryable(error: CheckoutError) -> bool:
    return error.kind in RETRYABLE


def _widen_timeout(error: CheckoutError | C.TimeoutError) -> CheckoutError:
    if isinstance(error, C.TimeoutError):
        return CheckoutError(ErrorKind.TIMEOUT, f"Request timed out after {error.seconds:g}s")
    return error


def _response_error(path: str, response: httpx.Response) -> CheckoutError:
    status = response.status_code
    try:
        message = ErrorOut.model_validate(response.json()).message
    except (ValueError, ValidationError):
        message = ""
    message = message or response.reason_phrase or f"HTTP {status}"

    if status == 401 and not path.startswith("/auth/"):
        return CheckoutError(ErrorKind.SESSION_EXPIRED, "Your session has expired, please sign in again", status=status)
    if status == 404:
        return CheckoutError(ErrorKind.NOT_FOUND, message, status=status)
    if status >= 500:
        return CheckoutError(ErrorKind.SERVER, message, status=status)
    return CheckoutError(ErrorKind.REJECTED, message, status=status)


class BackendClient:
    def __init__(
        self,
        settings: Settings,
        *,
        token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._settings = settings
        self._http = httpx.AsyncClient(
            base_url=settings.base_api_url,
            headers=headers,
            timeout=settings.request_timeout_sec,
            transport=transport,
        )
        self._policy = C.RetryPolicy.fixed(times=settings.request_attempts, retry_on=_retryable)

    async def __aenter__(self) -> BackendClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    # ═══════════════════════════════════════════════════════════════════════════
    # Requests
    # ═══════════════════════════════════════════════════════════════════════════

    def call(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        body: BaseModel | None = None,
        files: Files | None = None,
    ) -> LazyCoroResult[Any, CheckoutError]:
        """Lazy request returning the unwrapped ``data`` payload."""

        async def send() -> Any:
            json = body.model_dump(mode="json", by_alias=True, exclude_none=True) if body is not None else None
            try:
                response = await self._http.request(method, path, params=params, json=json, files=files)
            except httpx.TimeoutException as exc:
                raise CheckoutError(ErrorKind.TIMEOUT, f"{method} {path} timed out") from exc
            except httpx.TransportError as exc:
                raise CheckoutError(ErrorKind.NETWORK, f"{method} {path} failed: {exc}") from exc

            if response.is_error:
                raise _response_error(path, response)
            if response.status_code == 204 or not response.content:
                return None
            try:
                payload = response.json()
            except ValueError as exc:
                raise CheckoutError(ErrorKind.BAD_RESPONSE, f"{method} {path} returned invalid JSON") from exc
            if not isinstance(payload, dict) or "data" not in payload:
                raise CheckoutError(ErrorKind.BAD_RESPONSE, f"{method} {path} response has no data envelope")
            return payload["data"]

        attempt = C.timeout(
            C.catching_async(send, on_error=as_checkout_error),
            seconds=self._settings.request_timeout_sec,
        ).map_err(_widen_timeout)
        return C.retry(attempt, policy=self._policy)

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        body: BaseModel | None = None,
        files: Files | None = None,
    ) -> Any:
        """Send and return the payload, raising ``CheckoutError`` once retries are spent."""
        match await self.call(method, path, params=params, body=body, files=files):
            case Ok(payload):
                return payload
            case Error(e):
                logger.warning("%s %s failed: %s (%s)", method, path, e.message, e.kind.name)
                raise e

    async def fetch[M: BaseModel](
        self,
        model: type[M],
        method: str,
        path: str,
        **kwargs: Any,
    ) -> M:
        payload = await self.request(method, path, **kwargs)
        try:
            return model.model_validate(payload)
        except ValidationError as exc:
            raise CheckoutError(ErrorKind.BAD_RESPONSE, f"{method} {path}: unexpected {model.__name__}") from exc

    async def fetch_many[M: BaseModel](
        self,
        model: type[M],
        method: str,
        path: str,
        **kwargs: Any,
    ) -> list[M]:
        payload = await self.request(method, path, **kwargs)
        if not isinstance(payload, list):
            raise CheckoutError(ErrorKind.BAD_RESPONSE, f"{method} {path}: expected a list of {model.__name__}")
        try:
            return [model.model_validate(item) for item in payload]
        except ValidationError as exc:
            raise CheckoutError(ErrorKind.BAD_RESPONSE, f"{method} {path}: unexpected {model.__name__}") from exc


__all__ = ("BackendClient", "RETRYABLE")
