"""
Handles the low-level downloading of archive payloads over HTTP, retrying
failed requests with exponential backoff and jitter.
"""

import asyncio
import logging

import aiohttp

from asset_sync.exceptions import RetryExhaustedError
from asset_sync.utils.retry import RetryPolicy

log = logging.getLogger(__name__)


def create_connection_pool(
    max_workers: int = 8, request_timeout: float = 120.0
) -> aiohttp.ClientSession:
    """
    Creates the aiohttp ClientSession shared by every request of a run.

    Args:
        max_workers: Maximum concurrent downloads (should match config.max_workers).
        request_timeout: Upper bound in seconds for a single request.
    """
    connector = aiohttp.TCPConnector(
        limit=max_workers * 2,  # Manifest requests share the pool
        limit_per_host=max_workers,
        ttl_dns_cache=600,
        keepalive_timeout=30,
        enable_cleanup_closed=True,
    )
    timeout = aiohttp.ClientTimeout(
        total=request_timeout or None, sock_connect=15, sock_read=90
    )
    session = aiohttp.ClientSession(
        connector=connector,
        timeout=timeout,
        headers={"Accept-Encoding": "gzip, deflate"},
    )
    log.debug(f"Created download pool with limit_per_host={max_workers}")
    return session


class Downloader:
    """Fetches whole response bodies, re-attempting transport and status failures."""

    def __init__(self, session: aiohttp.ClientSession, retry_policy: RetryPolicy):
        self._session = session
        self.retry_policy = retry_policy

    async def _fetch_once(self, url: str) -> bytes:
        async with self._session.get(url) as response:
            response.raise_for_status()
            return await response.read()

    async def fetch_bytes(self, url: str) -> bytes:
        """
        Downloads ``url`` into memory.

        Raises:
            RetryExhaustedError: Every attempt allowed by the retry policy failed.
        """
        policy = self.retry_policy
        last_exception: BaseException | None = None
        attempt = 0
        while True:
            attempt += 1
            try:
                return await self._fetch_once(url)
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                last_exception = e
                if not policy.should_retry(attempt):
                    break
                delay = policy.compute_delay(attempt)
                log.debug(
                    f"Download attempt {attempt}/{policy.max_attempts} for "
                    f"'{url}' failed: {e!r}. Retrying in {delay:.1f}s..."
                )
                await asyncio.sleep(delay)

        log.warning(
            f"[red]Download of '{url}' failed after {attempt} attempts.[/red]"
        )
        raise RetryExhaustedError(url, attempt, last_exception) from last_exception
