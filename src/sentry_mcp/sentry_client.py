"""Sentry REST API client with retry/backoff."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, List, Optional
from urllib.parse import quote

import httpx

from .errors import NotFoundError, UpstreamError
from .models import Release, RetryState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    max_retries: int = 3
    backoff_seconds: float = 1.0

    def delay(self, attempt: int) -> float:
        return attempt * self.backoff_seconds

    def new_state(self) -> RetryState:
        return RetryState(max_retries=self.max_retries, delay=self.delay)


class SentryClient:
    def __init__(
        self,
        base_url: str,
        auth_token: str,
        timeout_seconds: float = 10,
        retry_policy: Optional[RetryPolicy] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.base_url = base_url
        self.auth_token = auth_token
        self.timeout_seconds = timeout_seconds
        self.retry_policy = retry_policy or RetryPolicy()
        self._transport = transport
        self._sleep = sleep

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.auth_token}",
            "Content-Type": "application/json",
        }

    async def request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        state = self.retry_policy.new_state()
        while True:
            try:
                return await self._send(method, path, params)
            except UpstreamError as exc:
                if state.exhausted:
                    raise
                delay = state.next_delay()
                logger.warning(
                    "Sentry request failed (retry %s/%s). Retrying in %ss. %s %s: %s",
                    state.attempt_count,
                    state.max_retries,
                    delay,
                    method.upper(),
                    path,
                    exc,
                )
                await self._sleep(delay)

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("GET", path, params)

    async def _send(self, method: str, path: str, params: Optional[Dict[str, Any]]) -> Any:
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                headers=self._headers(),
                timeout=self.timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.request(method, path, params=params)
                response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise UpstreamError(
                f"Request failed with status code {exc.response.status_code}: "
                f"{_error_detail(exc.response)}",
                status_code=exc.response.status_code,
                url=str(exc.request.url),
            ) from exc
        except httpx.HTTPError as exc:
            raise UpstreamError(f"Request failed: {exc!r}", url=path) from exc

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamError(
                "Sentry returned a non-JSON response",
                status_code=response.status_code,
                url=str(response.request.url),
            ) from exc

    async def get_latest_release_version(self, org_slug: str, project_slug: str) -> str:
        """Return the version of the first release in Sentry's own ordering."""
        path = f"projects/{org_slug}/{project_slug}/releases/"
        logger.debug("Fetching latest release from: %s", path)
        payload = await self.get(path)
        if not isinstance(payload, list) or not payload or not payload[0].get("version"):
            raise NotFoundError(f"No releases found for project {project_slug}")
        version = payload[0]["version"]
        logger.debug("Using latest release version: %s", version)
        return version

    async def get_sorted_releases(self, org_slug: str, project_slug: str) -> List[Release]:
        """Return all releases, newest first by ``dateCreated``."""
        payload = await self.get(f"projects/{org_slug}/{project_slug}/releases/")
        releases = [
            Release(
                version=item.get("version"),
                date_created=item.get("dateCreated"),
                new_groups=item.get("newGroups"),
            )
            for item in payload or []
        ]
        # Unparseable dates sort last; ties keep upstream order.
        return sorted(releases, key=_release_sort_key)

    async def get_release(self, org_slug: str, project_slug: str, version: str) -> Dict[str, Any]:
        path = f"projects/{org_slug}/{project_slug}/releases/{quote(version, safe='')}/"
        logger.debug("Fetching release health from: %s", path)
        return await self.get(path) or {}

    async def get_project(self, org_slug: str, project_slug: str) -> Dict[str, Any]:
        return await self.get(f"projects/{org_slug}/{project_slug}/") or {}

    async def get_issue(self, issue_id: str) -> Dict[str, Any]:
        return await self.get(f"issues/{quote(issue_id, safe='')}/") or {}

    async def search_issues(self, org_slug: str, project_id: Any, query: str) -> List[Dict[str, Any]]:
        params = {"project": project_id, "query": query}
        logger.debug("Fetching issues for org=%s with params: %s", org_slug, params)
        return await self.get(f"organizations/{org_slug}/issues/", params=params) or []


def _release_sort_key(release: Release) -> tuple[int, float]:
    timestamp = _parse_timestamp(release.date_created)
    if timestamp is None:
        return (1, 0.0)
    return (0, -timestamp)


def _parse_timestamp(value: Any) -> Optional[float]:
    if not value or not isinstance(value, str):
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).timestamp()
    except (TypeError, ValueError):
        return None


def _error_detail(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text[:200] or response.reason_phrase
    if isinstance(payload, dict) and payload.get("detail"):
        return str(payload["detail"])
    return response.reason_phrase
