import asyncio
import logging
import math
from collections.abc import Awaitable, Callable
from datetime import date, datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any

import httpx
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_incrementing,
)
from tenacity.wait import wait_base

from picksync.config import Settings, get_settings
from picksync.utils.dates import format_espn_date

logger = logging.getLogger(__name__)


class TransientResponseError(Exception):
    """ESPN answered with a status worth retrying (429 or 5xx)."""

    def __init__(self, status_code: int, url: str, retry_after: float | None = None):
        super().__init__(f"ESPN API returned {status_code} for {url}")
        self.status_code = status_code
        self.url = url
        self.retry_after = retry_after


# Exceptions to retry on
RETRYABLE_EXCEPTIONS = (
    httpx.TimeoutException,
    httpx.ConnectError,
    httpx.ReadError,
    httpx.RemoteProtocolError,
    TransientResponseError,
)

# Longest Retry-After hint honoured; larger values are capped
MAX_RETRY_AFTER_SECONDS = 300.0


def parse_retry_after(value: str | None) -> float | None:
    """
    Parse a Retry-After header (delta-seconds or HTTP-date) into seconds.

    Returns None for a missing or unusable value; the result is capped at
    MAX_RETRY_AFTER_SECONDS.
    """
    if not value:
        return None
    value = value.strip()
    try:
        seconds = float(value)
    except ValueError:
        pass
    else:
        if not math.isfinite(seconds):
            return None
        return min(max(seconds, 0.0), MAX_RETRY_AFTER_SECONDS)
    try:
        retry_at = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if retry_at.tzinfo is None:
        retry_at = retry_at.replace(tzinfo=timezone.utc)
    seconds = (retry_at - datetime.now(timezone.utc)).total_seconds()
    return min(max(seconds, 0.0), MAX_RETRY_AFTER_SECONDS)


class wait_retry_after(wait_base):
    """Wait for the provider's Retry-After hint when given, else defer to `fallback`."""

    def __init__(self, fallback: wait_base):
        self.fallback = fallback

    def __call__(self, retry_state: RetryCallState) -> float:
        outcome = retry_state.outcome
        if outcome is not None and outcome.failed:
            exc = outcome.exception()
            if isinstance(exc, TransientResponseError) and exc.retry_after is not None:
                return exc.retry_after
        return self.fallback(retry_state)


class EspnClient:
    """
    Client for the public ESPN NFL APIs.

    `fetch_resource` never raises for upstream problems: transient failures
    (timeouts, connection errors, 429, 5xx) are retried with a linear backoff
    of attempt x `espn_retry_delay_ms`; other 4xx responses and exhausted
    retries return None, meaning "no data available".
    """

    def __init__(
        self,
        settings: Settings | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.settings = settings or get_settings()
        self.site_base_url = self.settings.espn_site_base_url.rstrip("/")
        self.core_base_url = self.settings.espn_core_base_url.rstrip("/")
        self.timeout = self.settings.espn_timeout_seconds
        self.max_retries = self.settings.espn_max_retries
        self.retry_delay = self.settings.espn_retry_delay_ms / 1000
        self._sleep = sleep

    def _retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            stop=stop_after_attempt(self.max_retries + 1),
            wait=wait_retry_after(
                wait_incrementing(start=self.retry_delay, increment=self.retry_delay)
            ),
            retry=retry_if_exception_type(RETRYABLE_EXCEPTIONS),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            sleep=self._sleep,
            reraise=True,
        )

    async def _get_once(self, url: str, params: dict | None) -> Any:
        async with httpx.AsyncClient(follow_redirects=True, timeout=self.timeout) as client:
            response = await client.get(url, params=params)

        status = response.status_code
        if status == 429 or status >= 500:
            retry_after = None
            if status == 429:
                retry_after = parse_retry_after(response.headers.get("Retry-After"))
            raise TransientResponseError(status, url, retry_after)

        if 400 <= status < 500:
            # Permanent: usually parameters (e.g. a date range) outside what ESPN serves
            logger.warning("ESPN API returned %s for %s %s: %s", status, url, params, response.text[:200])
            return None

        try:
            return response.json()
        except ValueError:
            logger.warning("ESPN API returned invalid JSON for %s", url)
            return None

    async def fetch_resource(
        self,
        path: str,
        params: dict | None = None,
        *,
        base_url: str | None = None,
    ) -> Any:
        """
        GET a JSON resource relative to `base_url` (site API by default).

        Returns the decoded payload, or None when no data is available.
        """
        url = f"{(base_url or self.site_base_url)}/{path.lstrip('/')}"
        try:
            async for attempt in self._retrying():
                with attempt:
                    return await self._get_once(url, params)
        except RETRYABLE_EXCEPTIONS as exc:
            logger.error(
                "ESPN API request failed after %s attempts: %s (%s)",
                self.max_retries + 1, url, exc,
            )
            return None
        except httpx.HTTPError as exc:
            logger.error("ESPN API request error for %s: %s", url, exc)
            return None

    # ==================== Endpoints ====================

    async def get_teams(self) -> dict | None:
        """Get all teams (nested sports -> leagues -> teams)."""
        logger.info("Fetching teams from ESPN API")
        return await self.fetch_resource("/teams")

    async def get_scoreboard(self, start_date: date, end_date: date) -> dict | None:
        """Get scoreboard events for an inclusive date range."""
        dates = f"{format_espn_date(start_date)}-{format_espn_date(end_date)}"
        logger.info("Fetching ESPN scoreboard for %s", dates)
        return await self.fetch_resource(
            "/scoreboard",
            {"limit": self.settings.scoreboard_limit, "dates": dates},
        )

    async def get_season(self, year: int) -> dict | None:
        """Get authoritative season info (start/end dates) from the core API."""
        logger.info("Fetching ESPN season info for %s", year)
        return await self.fetch_resource(f"/seasons/{year}", base_url=self.core_base_url)


# Singleton instance
_espn_client: EspnClient | None = None


def get_espn_client() -> EspnClient:
    global _espn_client
    if _espn_client is None:
        _espn_client = EspnClient()
    return _espn_client
