"""
JobPoller - follows an asynchronously accepted call to completion
"""

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable

import httpx

from x402_memeputer.exceptions import TransportError
from x402_memeputer.types import JobHandle, JobState, JobStatus

logger = logging.getLogger(__name__)

SUCCEEDED_STATUSES = frozenset({"completed", "succeeded", "success", "done"})
FAILED_STATUSES = frozenset({"failed", "error", "cancelled", "canceled"})

TIMEOUT_CODE = "timeout"

ProgressCallback = Callable[[int, JobStatus], Any]
SleepFunc = Callable[[float], Awaitable[Any]]


def classify_status(raw_status: str | None) -> JobState:
    """Map a server status word onto processing/succeeded/failed"""
    status = (raw_status or "").strip().lower()
    if status in SUCCEEDED_STATUSES:
        return JobState.SUCCEEDED
    if status in FAILED_STATUSES:
        return JobState.FAILED
    return JobState.PROCESSING


def _text(value: Any) -> str | None:
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, dict):
        return value.get("message") or str(value)
    return str(value)


def status_from_body(body: Any) -> JobStatus:
    """Build a JobStatus from a status resource body (``{"data": ...}`` is unwrapped)"""
    data = body if isinstance(body, dict) else {}
    if isinstance(data.get("data"), dict):
        data = data["data"]

    raw_status = data.get("status") or data.get("state") or "pending"
    return JobStatus(
        state=classify_status(str(raw_status)),
        raw_status=str(raw_status),
        message=_text(data.get("message")),
        result=data.get("result"),
        image_url=data.get("imageUrl") or data.get("image_url"),
        media_url=data.get("mediaUrl") or data.get("media_url"),
        error=_text(data.get("error")),
        data=data or None,
    )


class JobPoller:
    """Polls a job's status resource until it reaches a terminal state.

    Args:
        http_client: Shared httpx client; one is created (and owned) if omitted
        sleep: Async sleep used between attempts
        headers: Extra headers sent with every status request
    """

    DEFAULT_MAX_ATTEMPTS = 60
    DEFAULT_INTERVAL_SECONDS = 5.0

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        *,
        sleep: SleepFunc = asyncio.sleep,
        headers: dict[str, str] | None = None,
    ) -> None:
        self._owns_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(timeout=30.0)
        self._sleep = sleep
        self._headers = headers or {}

    async def check_status(self, status_url: str) -> JobStatus:
        """Fetch one observation of the status resource.

        An HTTP error whose body is JSON is reported as a failed status.

        Raises:
            TransportError: Network failure, or an error response without a JSON body
        """
        try:
            response = await self._http_client.get(status_url, headers=self._headers)
        except httpx.HTTPError as e:
            raise TransportError(f"Status check failed for {status_url}: {e}") from e

        try:
            body = response.json()
        except ValueError:
            body = None

        if response.is_success:
            if body is None:
                raise TransportError(
                    f"Status resource returned a non-JSON body: {response.text[:200]!r}",
                    status_code=response.status_code,
                    body=response.text,
                )
            status = status_from_body(body)
        elif body is not None:
            data = body.get("data", body) if isinstance(body, dict) else {}
            error = _text(data.get("error")) if isinstance(data, dict) else None
            status = JobStatus(
                state=JobState.FAILED,
                raw_status="failed",
                error=error or "Status check failed",
                code=str(response.status_code),
            )
        else:
            raise TransportError(
                f"Status check failed with HTTP {response.status_code}",
                status_code=response.status_code,
                body=response.text,
            )

        logger.debug(f"Status of {status_url}: {status.raw_status} -> {status.state.value}")
        return status

    async def poll(
        self,
        handle: JobHandle | str,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        interval: float | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> JobStatus:
        """Check the status resource until it succeeds, fails or the budget runs out.

        The wait between attempts is *interval* if given, else the handle's
        suggested interval, else DEFAULT_INTERVAL_SECONDS. Running out of
        attempts returns a failed status with ``code == "timeout"``.
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

        if isinstance(handle, str):
            handle = JobHandle(status_url=handle)

        if interval is None:
            interval = handle.poll_interval_seconds or self.DEFAULT_INTERVAL_SECONDS

        for attempt in range(1, max_attempts + 1):
            status = await self.check_status(handle.status_url)

            if on_progress is not None:
                progress = on_progress(attempt, status)
                if inspect.isawaitable(progress):
                    await progress

            if status.is_terminal:
                logger.info(
                    f"Job {handle.status_url} finished as {status.state.value} "
                    f"after {attempt} check(s)"
                )
                return status

            if attempt < max_attempts:
                await self._sleep(interval)

        logger.warning(f"Job {handle.status_url} still processing after {max_attempts} checks")
        return JobStatus(
            state=JobState.FAILED,
            raw_status=TIMEOUT_CODE,
            error="Timeout waiting for completion",
            code=TIMEOUT_CODE,
        )

    async def close(self) -> None:
        if self._owns_client:
            await self._http_client.aclose()

    async def __aenter__(self) -> "JobPoller":
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()
