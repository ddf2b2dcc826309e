"""Pull request tools"""

import logging
from typing import Any, Dict, List

from .client import GitHubClient
from .models import (
    CreatePullRequest,
    CreatePullRequestReview,
    GetPullRequest,
    GetPullRequestComments,
    GetPullRequestFiles,
    GetPullRequestReviews,
    GetPullRequestStatus,
    ListPullRequests,
    MergePullRequest,
    UpdatePullRequestBranch,
)
from .projections import git_ref, pick, repository_ref, user

logger = logging.getLogger(__name__)


def _pulls(args) -> str:
    return f"/repos/{args.owner}/{args.repo}/pulls"


def pull_request_summary(pr: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": pr.get("id"),
        "number": pr.get("number"),
        "title": pr.get("title"),
        "state": pr.get("state"),
        "locked": pr.get("locked"),
        "user": user(pr.get("user")),
        "created_at": pr.get("created_at"),
        "updated_at": pr.get("updated_at"),
        "closed_at": pr.get("closed_at"),
        "merged_at": pr.get("merged_at"),
        "merge_commit_sha": pr.get("merge_commit_sha"),
        "draft": pr.get("draft"),
        "head": git_ref(pr.get("head")),
        "base": git_ref(pr.get("base")),
        "body": pr.get("body"),
        "url": pr.get("html_url"),
    }


def _review(data: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": data.get("id"),
        "user": user(data.get("user"), with_type=False),
        "body": data.get("body"),
        "state": data.get("state"),
        "commit_id": data.get("commit_id"),
        "submitted_at": data.get("submitted_at"),
        "url": data.get("html_url"),
    }


async def list_pull_requests(client: GitHubClient, args: ListPullRequests) -> List[Dict[str, Any]]:
    data = await client.get(
        _pulls(args),
        params=args.model_dump(exclude={"owner", "repo"}, exclude_none=True),
    )
    return [pull_request_summary(pr) for pr in data]


async def get_pull_request(client: GitHubClient, args: GetPullRequest) -> Dict[str, Any]:
    data = await client.get(f"{_pulls(args)}/{args.pull_number}")
    result = pull_request_summary(data)
    result.update(pick(data, "mergeable", "mergeable_state", "merged"))
    result["merged_by"] = user(data.get("merged_by"), with_type=False)
    result.update(
        pick(data, "comments", "review_comments", "commits", "additions", "deletions", "changed_files")
    )
    return result


async def create_pull_request(client: GitHubClient, args: CreatePullRequest) -> Dict[str, Any]:
    data = await client.post(
        _pulls(args),
        json=args.model_dump(exclude={"owner", "repo"}, exclude_none=True),
    )
    logger.info(f"🔀 Opened pull request #{data.get('number')} in {args.owner}/{args.repo}")
    return {
        "id": data.get("id"),
        "number": data.get("number"),
        "title": data.get("title"),
        "state": data.get("state"),
        "user": user(data.get("user"), with_type=False),
        "created_at": data.get("created_at"),
        "updated_at": data.get("updated_at"),
        "head": git_ref(data.get("head"), with_owner=False),
        "base": git_ref(data.get("base"), with_owner=False),
        "body": data.get("body"),
        "draft": data.get("draft"),
        "url": data.get("html_url"),
    }


async def create_pull_request_review(
    client: GitHubClient, args: CreatePullRequestReview
) -> Dict[str, Any]:
    data = await client.post(
        f"{_pulls(args)}/{args.pull_number}/reviews",
        json=args.model_dump(exclude={"owner", "repo", "pull_number"}, exclude_none=True),
    )
    return _review(data)


async def merge_pull_request(client: GitHubClient, args: MergePullRequest) -> Dict[str, Any]:
    data = await client.put(
        f"{_pulls(args)}/{args.pull_number}/merge",
        json=args.model_dump(exclude={"owner", "repo", "pull_number"}, exclude_none=True),
    )
    logger.info(f"🔀 Merged pull request #{args.pull_number} in {args.owner}/{args.repo}")
    return pick(data, "merged", "message", "sha")


async def get_pull_request_files(client: GitHubClient, args: GetPullRequestFiles) -> List[Dict[str, Any]]:
    data = await client.get(f"{_pulls(args)}/{args.pull_number}/files")
    return [
        pick(
            item,
            "sha",
            "filename",
            "status",
            "additions",
            "deletions",
            "changes",
            "blob_url",
            "raw_url",
            "contents_url",
            "patch",
        )
        for item in data
    ]


async def get_pull_request_status(client: GitHubClient, args: GetPullRequestStatus) -> Dict[str, Any]:
    """Combined commit status of the pull request's current head."""
    pr = await client.get(f"{_pulls(args)}/{args.pull_number}")
    head_sha = pr["head"]["sha"]
    data = await client.get(f"/repos/{args.owner}/{args.repo}/commits/{head_sha}/status")
    return {
        "state": data.get("state"),
        "statuses": [
            pick(status, "context", "state", "description", "target_url", "created_at", "updated_at")
            for status in data.get("statuses", [])
        ],
        "sha": data.get("sha"),
        "total_count": data.get("total_count"),
        "repository": repository_ref(data.get("repository")),
    }


async def update_pull_request_branch(
    client: GitHubClient, args: UpdatePullRequestBranch
) -> Dict[str, Any]:
    data = await client.put(
        f"{_pulls(args)}/{args.pull_number}/update-branch",
        json={"expected_head_sha": args.expected_head_sha},
    )
    return pick(data, "message", "url")


async def get_pull_request_comments(
    client: GitHubClient, args: GetPullRequestComments
) -> List[Dict[str, Any]]:
    data = await client.get(f"{_pulls(args)}/{args.pull_number}/comments")
    return [
        {
            "id": comment.get("id"),
            "user": user(comment.get("user"), with_type=False),
            "body": comment.get("body"),
            "created_at": comment.get("created_at"),
            "updated_at": comment.get("updated_at"),
            "path": comment.get("path"),
            "position": comment.get("position"),
            "commit_id": comment.get("commit_id"),
            "url": comment.get("html_url"),
        }
        for comment in data
    ]


async def get_pull_request_reviews(
    client: GitHubClient, args: GetPullRequestReviews
) -> List[Dict[str, Any]]:
    data = await client.get(f"{_pulls(args)}/{args.pull_number}/reviews")
    return [_review(review) for review in data]
