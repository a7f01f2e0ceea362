"""Resilient Employee Client — speaks the upstream envelope protocol with retry and error mapping.

Invariants:
    - Rate limits (429): exponential backoff, initial 2s, max 5 retries (6 calls), respects
      Retry-After up to max_delay_ms
    - Employee ids are percent-encoded into a single path segment
    - Every other HTTP error: immediate failure, no retry (5xx included)
    - 404 becomes None for get_by_id only; everywhere else it is an UpstreamHttpError
    - Envelope status is checked on every 2xx: "Failed to process request." is an error
    - All failures mapped to UpstreamError subclasses (core/errors.py)
    - CancelledError is never caught: caller cancellation aborts I/O and backoff sleeps

Design Decisions:
    - One httpx.AsyncClient per process: the connection pool is the only shared state
    - Jitter only stretches the delay (factor 1.0 to 1.0 + jitter): the schedule
      is a lower bound the upstream can rely on
    - Transport errors are not retried: only an explicit 429 proves the upstream is
      alive and asking us to slow down
"""

import asyncio
import logging
import random
from functools import lru_cache
from typing import Any, TypeVar
from urllib.parse import quote

import httpx
from pydantic import TypeAdapter, ValidationError

from employee_api.config import Settings
from employee_api.core.domain_types import EmployeeId, UpstreamOperation
from employee_api.core.errors import (
    ErrorContext,
    UpstreamConnectionError,
    UpstreamDecodeError,
    UpstreamHttpError,
    UpstreamLogicalError,
    UpstreamTimeoutError,
    UpstreamUnavailable,
)
from employee_api.schemas.employee import DeleteInput, Employee, EmployeeInput
from employee_api.schemas.envelope import Envelope

logger = logging.getLogger(__name__)

T = TypeVar("T")

_TOO_MANY_REQUESTS = 429
_NOT_FOUND = 404


def _employee_path(employee_id: str) -> str:
    """/employee/{id} with the id confined to one path segment.

    Dots are escaped too: httpx collapses literal "." and ".." segments.
    """
    return "/employee/" + quote(employee_id, safe="").replace(".", "%2E")


@lru_cache
def _adapter(data_type: Any) -> TypeAdapter:
    return TypeAdapter(data_type)


class EmployeeClient:
    """Wraps httpx.AsyncClient with the upstream's envelope, retry, and error contract."""

    def __init__(
        self,
        base_url: str,
        max_retries: int = 5,
        base_delay_ms: int = 2000,
        max_delay_ms: int = 60_000,
        jitter: float = 0.25,
        connect_timeout_seconds: float = 5.0,
        read_timeout_seconds: float = 30.0,
        call_timeout_seconds: float | None = None,
        max_connections: int = 20,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.client = httpx.AsyncClient(
            base_url=base_url,
            timeout=httpx.Timeout(read_timeout_seconds, connect=connect_timeout_seconds),
            limits=httpx.Limits(max_connections=max_connections),
            headers={"Accept": "application/json"},
            transport=transport,
        )
        self.max_retries = max_retries
        self.base_delay_ms = base_delay_ms
        self.max_delay_ms = max_delay_ms
        self.jitter = jitter
        self.call_timeout_seconds = call_timeout_seconds

    @classmethod
    def from_settings(
        cls, settings: Settings, transport: httpx.AsyncBaseTransport | None = None,
    ) -> "EmployeeClient":
        return cls(
            settings.upstream_base_url,
            max_retries=settings.upstream_max_retries,
            base_delay_ms=settings.upstream_base_delay_ms,
            max_delay_ms=settings.upstream_max_delay_ms,
            jitter=settings.upstream_jitter,
            connect_timeout_seconds=settings.upstream_connect_timeout_seconds,
            read_timeout_seconds=settings.upstream_read_timeout_seconds,
            call_timeout_seconds=settings.upstream_call_timeout_seconds,
            max_connections=settings.upstream_max_connections,
            transport=transport,
        )

    async def __aenter__(self) -> "EmployeeClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()

    # ─── Operations ─────────────────────────────────────────────

    async def get_by_id(self, employee_id: EmployeeId) -> Employee | None:
        """GET /employee/{id}. None when the upstream answers 404."""
        return await self._call(
            UpstreamOperation.GET_BY_ID, "GET", _employee_path(employee_id),
            Employee, employee_id=employee_id, allow_not_found=True,
        )

    async def get_all(self) -> list[Employee]:
        """GET /employee. Order is whatever the upstream returns."""
        return await self._call(
            UpstreamOperation.GET_ALL, "GET", "/employee",
            list[Employee],
        )

    async def create(self, employee_input: EmployeeInput) -> Employee:
        """POST /employee."""
        return await self._call(
            UpstreamOperation.CREATE, "POST", "/employee",
            Employee, body=employee_input.model_dump(mode="json"),
        )

    async def delete(self, delete_input: DeleteInput) -> bool:
        """DELETE /employee with a JSON body. Returns the upstream's success flag."""
        return await self._call(
            UpstreamOperation.DELETE, "DELETE", "/employee",
            bool, body=delete_input.model_dump(mode="json"),
        )

    # ─── Request pipeline ───────────────────────────────────────

    async def _call(
        self,
        operation: UpstreamOperation,
        method: str,
        path: str,
        data_type: type[T],
        *,
        body: dict[str, Any] | None = None,
        employee_id: str | None = None,
        allow_not_found: bool = False,
    ) -> Any:
        """Send with retry, then unwrap the envelope. Applies the per-call deadline."""
        context = ErrorContext(operation=operation.value, employee_id=employee_id)
        send = self._send_with_retry(method, path, body, context, allow_not_found)
        if self.call_timeout_seconds is None:
            response = await send
        else:
            try:
                response = await asyncio.wait_for(send, self.call_timeout_seconds)
            except asyncio.TimeoutError:
                logger.error(
                    f"Upstream {operation.value} exceeded {self.call_timeout_seconds}s",
                    extra={"operation": operation.value, "attempt": context.attempt},
                )
                raise UpstreamTimeoutError(
                    f"exceeded {self.call_timeout_seconds}s deadline", context=context,
                )
        if response is None:
            return None
        return self._unwrap(response, data_type, context)

    async def _send_with_retry(
        self,
        method: str,
        path: str,
        body: dict[str, Any] | None,
        context: ErrorContext,
        allow_not_found: bool,
    ) -> httpx.Response | None:
        for attempt in range(self.max_retries + 1):
            context.attempt = attempt + 1
            response = await self._send(method, path, body, context)

            if response.status_code == _NOT_FOUND and allow_not_found:
                logger.info(
                    f"Upstream has no employee at {path}",
                    extra={"operation": context.operation, "employee_id": context.employee_id},
                )
                return None

            if response.status_code == _TOO_MANY_REQUESTS:
                await self._handle_rate_limit(response, attempt, context)
                continue

            if response.is_error:
                logger.error(
                    f"Error response from upstream: {response.text}",
                    extra={
                        "operation": context.operation,
                        "status_code": response.status_code,
                        "attempt": context.attempt,
                    },
                )
                raise UpstreamHttpError(response.status_code, response.text, context)

            self._log_success(response, context)
            return response

    async def _send(
        self,
        method: str,
        path: str,
        body: dict[str, Any] | None,
        context: ErrorContext,
    ) -> httpx.Response:
        """Issue one HTTP request, mapping transport failures."""
        try:
            return await self.client.request(method, path, json=body)
        except httpx.TimeoutException as e:
            logger.error(f"Upstream {method} {path} timed out: {e!r}")
            raise UpstreamTimeoutError(type(e).__name__, context=context)
        except httpx.TransportError as e:
            logger.error(f"Upstream {method} {path} transport failure: {e!r}")
            raise UpstreamConnectionError(str(e) or type(e).__name__, context=context)

    def _unwrap(
        self,
        response: httpx.Response,
        data_type: type[T],
        context: ErrorContext,
    ) -> T:
        """Decode the envelope and return its data, or raise on error status.

        Status is read before data is typed: an error envelope is a logical
        failure whatever its data holds.
        """
        try:
            envelope = Envelope[Any].model_validate_json(response.content)
        except ValidationError as e:
            self._log_undecodable(response, context)
            raise UpstreamDecodeError(
                f"{e.error_count()} validation error(s)", response.text, context,
            )
        if not envelope.is_handled:
            logger.error(
                f"API returned error: {envelope.error}",
                extra={"operation": context.operation},
            )
            raise UpstreamLogicalError(envelope, context)
        if envelope.data is None:
            raise UpstreamDecodeError(
                "handled response carried no data", response.text, context,
            )
        try:
            return _adapter(data_type).validate_python(envelope.data)
        except ValidationError as e:
            self._log_undecodable(response, context)
            raise UpstreamDecodeError(
                f"{e.error_count()} validation error(s) in data", response.text, context,
            )

    def _log_undecodable(self, response: httpx.Response, context: ErrorContext) -> None:
        logger.error(
            f"Undecodable upstream response: {response.text}",
            extra={"operation": context.operation},
        )

    def _log_success(self, response: httpx.Response, context: ErrorContext) -> None:
        logger.debug(
            "Upstream call succeeded",
            extra={
                "operation": context.operation,
                "status_code": response.status_code,
                "attempt": context.attempt,
            },
        )

    # ─── Backoff ────────────────────────────────────────────────

    async def _handle_rate_limit(
        self, response: httpx.Response, attempt: int, context: ErrorContext,
    ) -> None:
        """Sleep before the next attempt, or raise once the budget is spent."""
        retry_after_ms = self._extract_retry_after(response)
        context.retry_after_ms = retry_after_ms
        if attempt >= self.max_retries:
            last_error = UpstreamHttpError(
                response.status_code, response.text,
                ErrorContext(
                    operation=context.operation,
                    employee_id=context.employee_id,
                    attempt=context.attempt,
                ),
            )
            logger.error(
                f"Upstream rate limit persisted after {attempt + 1} attempts",
                extra={"operation": context.operation, "attempt": context.attempt},
            )
            raise UpstreamUnavailable(attempt + 1, last_error, context) from last_error
        delay = max(
            self._backoff(attempt), min(retry_after_ms or 0, self.max_delay_ms),
        )
        logger.warning(
            f"Rate limit hit, retry after {delay}ms (attempt {attempt + 1})",
            extra={"operation": context.operation, "attempt": context.attempt},
        )
        await self._sleep(delay)

    async def _sleep(self, delay_ms: int) -> None:
        await asyncio.sleep(delay_ms / 1000)

    def _backoff(self, attempt: int) -> int:
        """Exponential backoff with upward-only jitter."""
        delay = min(self.max_delay_ms, (2 ** attempt) * self.base_delay_ms)
        return int(delay * random.uniform(1.0, 1.0 + self.jitter))  # nosec B311

    def _extract_retry_after(self, response: httpx.Response) -> int | None:
        """Extract Retry-After header in milliseconds (delta-seconds form only)."""
        val = response.headers.get("retry-after")
        if val and val.strip().isdigit():
            return int(val.strip()) * 1000
        return None


# Singleton (initialized on startup)
upstream_client: EmployeeClient | None = None


def init_upstream_client(
    settings: Settings, transport: httpx.AsyncBaseTransport | None = None,
) -> EmployeeClient:
    global upstream_client
    upstream_client = EmployeeClient.from_settings(settings, transport=transport)
    return upstream_client


async def close_upstream_client() -> None:
    global upstream_client
    if upstream_client is not None:
        await upstream_client.aclose()
        upstream_client = None


def get_upstream_client() -> EmployeeClient:
    """FastAPI dependency for the shared upstream client."""
    if not upstream_client:
        raise RuntimeError("Upstream client not initialized")
    return upstream_client
