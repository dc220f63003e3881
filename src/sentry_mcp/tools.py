"""Sentry tool operations."""

from __future__ import annotations

import logging
import os
import platform
import sys
from typing import Any, Dict, List, Optional

from . import diagnostics
from .config import Settings
from .models import (
    GetIssueArgs,
    GetReleaseHealthArgs,
    GetReleaseIssuesArgs,
    GetReleasesArgs,
    Issue,
    ListRecentReleasesArgs,
)
from .sentry_client import SentryClient

logger = logging.getLogger(__name__)

DEFAULT_RELEASE_COUNT = 5


def _max_rss_kb() -> Optional[int]:
    # resource is POSIX-only.
    try:
        import resource
    except ImportError:
        return None
    return resource.getrusage(resource.RUSAGE_SELF).ru_maxrss


def release_type(version: str) -> str:
    return "mobile" if "mobile" in (version or "") else "desktop"


class SentryTools:
    def __init__(self, settings: Settings, client: SentryClient) -> None:
        self.settings = settings
        self.client = client

    def _org(self, org_slug: Optional[str]) -> str:
        return org_slug or self.settings.sentry_org_slug

    async def inspect_sentry(self, capabilities: List[str]) -> Dict[str, Any]:
        return {
            "configuration": {
                "base_url": self.settings.sentry_base_url,
                "auth_token_configured": bool(self.settings.sentry_auth_token),
                "default_org": self.settings.sentry_org_slug,
            },
            "capabilities": capabilities,
            "environment": {
                "python_version": platform.python_version(),
                "platform": sys.platform,
                "pid": os.getpid(),
                "max_rss_kb": _max_rss_kb(),
            },
            "diagnostics": {"last_error": diagnostics.describe_last_error()},
        }

    async def list_recent_releases(self, args: ListRecentReleasesArgs) -> List[Dict[str, Any]]:
        count = int(args.count or DEFAULT_RELEASE_COUNT)
        releases = await self.client.get_sorted_releases(self._org(args.org_slug), args.project_slug)
        return [
            {
                "version": release.version,
                "date": release.date_created,
                "new_issues": release.new_groups,
                "type": release_type(release.version),
            }
            for release in releases[:count]
        ]

    async def get_releases(self, args: GetReleasesArgs) -> List[Dict[str, Any]]:
        releases = await self.client.get_sorted_releases(self._org(args.org_slug), args.project_slug)
        return [release.to_dict() for release in releases]

    async def _resolve_version(self, org_slug: str, project_slug: str, version: Optional[str]) -> str:
        if version:
            logger.debug("Using provided release version: %s", version)
            return version
        return await self.client.get_latest_release_version(org_slug, project_slug)

    async def get_release_health(self, args: GetReleaseHealthArgs) -> Dict[str, Any]:
        org_slug = self._org(args.org_slug)
        version = await self._resolve_version(org_slug, args.project_slug, args.release_version)
        release = await self.client.get_release(org_slug, args.project_slug, version)
        return {
            "version": version,
            "new_issues": release.get("new_groups"),
            "crash_free_rate": release.get("crash_free_rate"),
            "sessions": release.get("sessions"),
            "stats": release.get("stats"),
        }

    async def get_issue(self, args: GetIssueArgs) -> Dict[str, Any]:
        payload = await self.client.get_issue(args.issue_id)
        return Issue.from_payload(payload).to_dict()

    async def get_release_issues(self, args: GetReleaseIssuesArgs) -> List[Dict[str, Any]]:
        org_slug = self._org(args.org_slug)
        version = await self._resolve_version(org_slug, args.project_slug, args.release_version)
        project = await self.client.get_project(org_slug, args.project_slug)
        issues = await self.client.search_issues(
            org_slug, project.get("id"), f'release:"{version}"'
        )
        return [Issue.from_payload(issue).to_dict() for issue in issues]
