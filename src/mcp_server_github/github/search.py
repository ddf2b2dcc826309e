"""Search, license and enterprise tools"""

import logging
from typing import Any, Dict, List

from ..error_handling import ErrorKind, GitHubToolError
from .client import GitHubClient
from .models import GetEnterpriseStats, GetLicenseInfo, SearchCode, SearchIssues, SearchUsers
from .projections import labels, pick, pull_request_link, repository_ref, search_page, user

logger = logging.getLogger(__name__)

# Statuses for which the enterprise stats endpoint is treated as unavailable
_STATS_UNAVAILABLE = (ErrorKind.UNAUTHORIZED, ErrorKind.FORBIDDEN, ErrorKind.NOT_FOUND)


def _query(args) -> Dict[str, Any]:
    return args.model_dump(exclude_none=True)


async def search_code(client: GitHubClient, args: SearchCode) -> Dict[str, Any]:
    data = await client.get("/search/code", params=_query(args))
    items = []
    for item in data.get("items", []):
        hit = pick(item, "name", "path", "sha")
        hit["url"] = item.get("html_url")
        hit["repository"] = repository_ref(item.get("repository"))
        hit["score"] = item.get("score")
        items.append(hit)
    return search_page(data, items)


async def search_issues(client: GitHubClient, args: SearchIssues) -> Dict[str, Any]:
    data = await client.get("/search/issues", params=_query(args))
    items = [
        {
            "id": item.get("id"),
            "number": item.get("number"),
            "title": item.get("title"),
            "state": item.get("state"),
            "locked": item.get("locked"),
            "repository": repository_ref(item.get("repository")),
            "user": user(item.get("user"), with_type=False),
            "labels": labels(item.get("labels")),
            "comments": item.get("comments"),
            "created_at": item.get("created_at"),
            "updated_at": item.get("updated_at"),
            "closed_at": item.get("closed_at"),
            "body": item.get("body"),
            "url": item.get("html_url"),
            "pull_request": pull_request_link(item.get("pull_request")),
            "score": item.get("score"),
        }
        for item in data.get("items", [])
    ]
    return search_page(data, items)


async def search_users(client: GitHubClient, args: SearchUsers) -> Dict[str, Any]:
    data = await client.get("/search/users", params=_query(args))
    items = [
        pick(item, "login", "id", "avatar_url", "html_url", "type", "site_admin", "score")
        for item in data.get("items", [])
    ]
    return search_page(data, items)


async def get_license_info(client: GitHubClient, args: GetLicenseInfo) -> List[Dict[str, Any]]:
    data = await client.get("/licenses")
    return [pick(item, "key", "name", "spdx_id", "url", "node_id") for item in data]


async def get_enterprise_stats(client: GitHubClient, args: GetEnterpriseStats) -> Dict[str, Any]:
    """
    Raw enterprise statistics.

    Against the public API this reports that the tool does not apply; an
    enterprise endpoint that refuses the request yields an explanatory
    message instead of an error.
    """
    if not client.config.is_enterprise:
        return {"error": "This function is only available for GitHub Enterprise"}

    try:
        return await client.get("/enterprise/stats/all")
    except GitHubToolError as e:
        if e.kind not in _STATS_UNAVAILABLE:
            raise
        logger.warning(f"⚠️ Enterprise stats unavailable at {client.config.api_url}: {e.message}")
        return {
            "message": "Enterprise stats not available or insufficient permissions",
            "api_url": client.config.api_url,
        }
