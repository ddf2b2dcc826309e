"""Issue tools"""

import logging
from typing import Any, Dict, List, Optional

from .client import GitHubClient
from .models import AddIssueComment, CreateIssue, GetIssue, ListIssues, UpdateIssue
from .projections import labels, pick, pull_request_link, user, users

logger = logging.getLogger(__name__)


def _milestone(data: Optional[Dict[str, Any]], detailed: bool = True) -> Optional[Dict[str, Any]]:
    if not data:
        return None
    if detailed:
        return pick(data, "id", "number", "title", "description", "state")
    return pick(data, "number", "title")


def issue_detail(issue: Dict[str, Any]) -> Dict[str, Any]:
    """Full issue projection shared by list-issues and get-issue."""
    return {
        "id": issue.get("id"),
        "number": issue.get("number"),
        "title": issue.get("title"),
        "state": issue.get("state"),
        "locked": issue.get("locked"),
        "assignees": users(issue.get("assignees")),
        "user": user(issue.get("user")),
        "labels": labels(issue.get("labels"), with_description=True),
        "milestone": _milestone(issue.get("milestone")),
        "comments": issue.get("comments"),
        "created_at": issue.get("created_at"),
        "updated_at": issue.get("updated_at"),
        "closed_at": issue.get("closed_at"),
        "body": issue.get("body"),
        "url": issue.get("html_url"),
        "pull_request": pull_request_link(issue.get("pull_request")),
    }


async def list_issues(client: GitHubClient, args: ListIssues) -> List[Dict[str, Any]]:
    data = await client.get(
        f"/repos/{args.owner}/{args.repo}/issues",
        params={
            "state": args.state,
            "labels": ",".join(args.labels) if args.labels else None,
            "sort": args.sort,
            "direction": args.direction,
            "since": args.since,
            "page": args.page,
            "per_page": args.per_page,
        },
    )
    return [issue_detail(issue) for issue in data]


async def get_issue(client: GitHubClient, args: GetIssue) -> Dict[str, Any]:
    data = await client.get(f"/repos/{args.owner}/{args.repo}/issues/{args.issue_number}")
    return issue_detail(data)


async def create_issue(client: GitHubClient, args: CreateIssue) -> Dict[str, Any]:
    data = await client.post(
        f"/repos/{args.owner}/{args.repo}/issues",
        json=args.model_dump(exclude={"owner", "repo"}, exclude_none=True),
    )
    logger.info(f"🐛 Created issue #{data.get('number')} in {args.owner}/{args.repo}")
    return {
        "id": data.get("id"),
        "number": data.get("number"),
        "title": data.get("title"),
        "state": data.get("state"),
        "assignees": users(data.get("assignees"), with_type=False),
        "user": user(data.get("user"), with_type=False),
        "labels": labels(data.get("labels")),
        "milestone": _milestone(data.get("milestone"), detailed=False),
        "created_at": data.get("created_at"),
        "updated_at": data.get("updated_at"),
        "body": data.get("body"),
        "url": data.get("html_url"),
    }


async def update_issue(client: GitHubClient, args: UpdateIssue) -> Dict[str, Any]:
    data = await client.patch(
        f"/repos/{args.owner}/{args.repo}/issues/{args.issue_number}",
        json=args.model_dump(exclude={"owner", "repo", "issue_number"}, exclude_none=True),
    )
    return {
        "id": data.get("id"),
        "number": data.get("number"),
        "title": data.get("title"),
        "state": data.get("state"),
        "assignees": users(data.get("assignees"), with_type=False),
        "labels": labels(data.get("labels")),
        "milestone": _milestone(data.get("milestone"), detailed=False),
        "updated_at": data.get("updated_at"),
        "body": data.get("body"),
        "url": data.get("html_url"),
    }


async def add_issue_comment(client: GitHubClient, args: AddIssueComment) -> Dict[str, Any]:
    data = await client.post(
        f"/repos/{args.owner}/{args.repo}/issues/{args.issue_number}/comments",
        json={"body": args.body},
    )
    return {
        "id": data.get("id"),
        "user": user(data.get("user"), with_type=False),
        "created_at": data.get("created_at"),
        "updated_at": data.get("updated_at"),
        "body": data.get("body"),
        "url": data.get("html_url"),
    }
