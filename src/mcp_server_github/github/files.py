"""File content tools"""

import logging
from typing import Any, Dict, List, Union

from . import commits
from .branches import ensure_branch
from .client import GitHubClient, decode_content
from .models import CreateOrUpdateFile, ForkRepository, GetFileContents, PushFiles
from .projections import pick, repository_ref, user

logger = logging.getLogger(__name__)

_ENTRY_FIELDS = ("name", "path", "sha", "size", "type")


async def create_or_update_file(client: GitHubClient, args: CreateOrUpdateFile) -> Dict[str, Any]:
    await ensure_branch(client, args.owner, args.repo, args.branch)

    data = await client.put_content(
        args.owner,
        args.repo,
        args.path,
        args.content,
        args.message,
        args.branch,
        sha=args.sha,
    )
    content = data.get("content") or {}
    commit = data.get("commit") or {}
    logger.info(f"📝 Wrote {args.path} to {args.owner}/{args.repo}:{args.branch}")
    return {
        "content": {
            "name": content.get("name"),
            "path": content.get("path"),
            "sha": content.get("sha"),
            "size": content.get("size"),
            "url": content.get("html_url"),
        },
        "commit": {
            "sha": commit.get("sha"),
            "url": commit.get("html_url"),
            "message": commit.get("message"),
            "author": commit.get("author"),
            "committer": commit.get("committer"),
        },
    }


async def push_files(client: GitHubClient, args: PushFiles) -> Dict[str, Any]:
    return await commits.push_files(
        client, args.owner, args.repo, args.branch, args.files, args.message
    )


async def get_file_contents(
    client: GitHubClient, args: GetFileContents
) -> Union[List[Dict[str, Any]], Dict[str, Any]]:
    """
    Directories come back as a list of entries, files with their decoded
    text, and symlinks or submodules without content.
    """
    data = await client.get_content(args.owner, args.repo, args.path, ref=args.branch)

    if isinstance(data, list):
        entries = []
        for item in data:
            entry = pick(item, *_ENTRY_FIELDS)
            entry["url"] = item.get("html_url")
            entry["download_url"] = item.get("download_url")
            entries.append(entry)
        return entries

    result = pick(data, *_ENTRY_FIELDS)
    result["url"] = data.get("html_url")
    if data.get("type") == "file":
        raw = data.get("content")
        result["content"] = decode_content(raw) if raw else None
        result["encoding"] = data.get("encoding")
    return result


async def fork_repository(client: GitHubClient, args: ForkRepository) -> Dict[str, Any]:
    data = await client.post(
        f"/repos/{args.owner}/{args.repo}/forks",
        json={"organization": args.organization},
    )
    logger.info(f"🍴 Forked {args.owner}/{args.repo} to {data.get('full_name')}")
    return {
        "id": data.get("id"),
        "name": data.get("name"),
        "full_name": data.get("full_name"),
        "owner": user(data.get("owner")),
        "private": data.get("private"),
        "html_url": data.get("html_url"),
        "description": data.get("description"),
        "fork": data.get("fork"),
        "created_at": data.get("created_at"),
        "updated_at": data.get("updated_at"),
        "pushed_at": data.get("pushed_at"),
        "default_branch": data.get("default_branch"),
        "parent": repository_ref(data.get("parent")),
        "source": repository_ref(data.get("source")),
    }
