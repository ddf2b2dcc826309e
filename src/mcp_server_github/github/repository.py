"""Repository, branch, commit and workflow tools"""

import logging
from typing import Any, Dict, List

from .branches import ensure_branch
from .client import GitHubClient
from .models import (
    CreateBranch,
    CreateRepository,
    DeleteRepository,
    ListCommits,
    ListWorkflowRuns,
    ListWorkflows,
    SearchRepositories,
    TriggerWorkflow,
    UpdateRepository,
)
from .projections import pick, search_page, user

logger = logging.getLogger(__name__)


async def search_repositories(client: GitHubClient, args: SearchRepositories) -> Dict[str, Any]:
    data = await client.get(
        "/search/repositories",
        params={"q": args.query, "page": args.page, "per_page": args.per_page},
    )
    items = []
    for repo in data.get("items", []):
        item = pick(repo, "id", "name", "full_name")
        item["owner"] = user(repo.get("owner"))
        item.update(
            pick(
                repo,
                "private",
                "description",
                "fork",
                "created_at",
                "updated_at",
                "pushed_at",
                "homepage",
                "size",
                "stargazers_count",
                "watchers_count",
                "language",
                "forks_count",
                "open_issues_count",
                "default_branch",
            )
        )
        item["url"] = repo.get("html_url")
        items.append(item)
    return search_page(data, items)


async def create_repository(client: GitHubClient, args: CreateRepository) -> Dict[str, Any]:
    """Create under ``org`` when given, otherwise for the authenticated user."""
    body = {
        "name": args.name,
        "description": args.description,
        "private": args.private,
        "auto_init": args.auto_init,
    }
    endpoint = f"/orgs/{args.org}/repos" if args.org else "/user/repos"
    data = await client.post(endpoint, json=body)
    logger.info(f"📁 Created repository {data.get('full_name')}")
    return pick(
        data,
        "id",
        "name",
        "full_name",
        "private",
        "description",
        "html_url",
        "clone_url",
        "ssh_url",
        "created_at",
        "updated_at",
        "default_branch",
    )


async def update_repository(client: GitHubClient, args: UpdateRepository) -> Dict[str, Any]:
    body = args.model_dump(exclude={"owner", "repo"}, exclude_none=True)
    data = await client.patch(f"/repos/{args.owner}/{args.repo}", json=body)
    return pick(
        data,
        "id",
        "name",
        "full_name",
        "private",
        "description",
        "html_url",
        "default_branch",
        "has_issues",
        "has_projects",
        "has_wiki",
        "archived",
        "updated_at",
    )


async def delete_repository(client: GitHubClient, args: DeleteRepository) -> Dict[str, Any]:
    await client.delete(f"/repos/{args.owner}/{args.repo}")
    logger.warning(f"🗑️ Deleted repository {args.owner}/{args.repo}")
    return {
        "success": True,
        "message": f"Repository {args.owner}/{args.repo} has been deleted",
    }


async def create_branch(client: GitHubClient, args: CreateBranch) -> Dict[str, Any]:
    """
    Create ``branch`` from ``from_branch`` or the default branch.

    An existing branch is reported as ``success: false`` rather than an error.
    """
    status = await ensure_branch(client, args.owner, args.repo, args.branch, args.from_branch)
    if status.existed:
        return {
            "success": False,
            "message": f"Branch '{args.branch}' already exists in {args.owner}/{args.repo}",
        }

    data = status.created
    return {
        "success": True,
        "ref": data.get("ref"),
        "url": data.get("url"),
        "object": pick(data.get("object"), "sha", "type", "url"),
        "message": f"Branch '{args.branch}' created from '{status.source}' in {args.owner}/{args.repo}",
    }


async def list_commits(client: GitHubClient, args: ListCommits) -> List[Dict[str, Any]]:
    data = await client.get(
        f"/repos/{args.owner}/{args.repo}/commits",
        params={"sha": args.sha, "page": args.page, "per_page": args.per_page},
    )
    return [
        {
            "sha": commit.get("sha"),
            "commit": pick(commit.get("commit"), "author", "committer", "message"),
            "author": user(commit.get("author")),
            "committer": user(commit.get("committer")),
            "html_url": commit.get("html_url"),
        }
        for commit in data
    ]


async def list_workflows(client: GitHubClient, args: ListWorkflows) -> Dict[str, Any]:
    data = await client.get(
        f"/repos/{args.owner}/{args.repo}/actions/workflows",
        params={"page": args.page, "per_page": args.per_page},
    )
    workflows = []
    for workflow in data.get("workflows", []):
        item = pick(workflow, "id", "name", "path", "state", "created_at", "updated_at")
        item["url"] = workflow.get("html_url")
        workflows.append(item)
    return {"total_count": data.get("total_count"), "workflows": workflows}


async def list_workflow_runs(client: GitHubClient, args: ListWorkflowRuns) -> Dict[str, Any]:
    """Runs of one workflow when ``workflow_id`` is given, otherwise of the whole repository."""
    if args.workflow_id is not None:
        endpoint = f"/repos/{args.owner}/{args.repo}/actions/workflows/{args.workflow_id}/runs"
    else:
        endpoint = f"/repos/{args.owner}/{args.repo}/actions/runs"

    data = await client.get(
        endpoint,
        params={
            "branch": args.branch,
            "status": args.status,
            "page": args.page,
            "per_page": args.per_page,
        },
    )
    runs = []
    for run in data.get("workflow_runs", []):
        item = pick(
            run,
            "id",
            "name",
            "workflow_id",
            "head_branch",
            "head_sha",
            "run_number",
            "event",
            "status",
            "conclusion",
            "created_at",
            "updated_at",
        )
        item["url"] = run.get("html_url")
        runs.append(item)
    return {"total_count": data.get("total_count"), "workflow_runs": runs}


async def trigger_workflow(client: GitHubClient, args: TriggerWorkflow) -> Dict[str, Any]:
    data = await client.post(
        f"/repos/{args.owner}/{args.repo}/actions/workflows/{args.workflow_id}/dispatches",
        json={"ref": args.ref, "inputs": args.inputs},
    )
    logger.info(f"🚀 Dispatched workflow {args.workflow_id} on {args.owner}/{args.repo}@{args.ref}")
    return {
        "success": True,
        "message": f"Workflow dispatch event created for workflow {args.workflow_id} on ref {args.ref}",
        "data": data,
    }
