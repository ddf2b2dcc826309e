"""Multi-file commits built from git data primitives"""

import logging
from typing import Any, Dict, List, Sequence

from ..error_handling import InvalidParamsError
from .branches import ensure_branch
from .client import REGULAR_FILE_MODE, GitHubClient
from .models import FileToPush

logger = logging.getLogger(__name__)


def build_tree_entries(files: Sequence[FileToPush]) -> List[Dict[str, Any]]:
    """One whole-content blob entry per file, in input order.

    Paths that already exist in the base tree are replaced and new paths are
    created, so no per-file existence probe is needed.
    """
    return [
        {"path": f.path, "mode": REGULAR_FILE_MODE, "type": "blob", "content": f.content}
        for f in files
    ]


async def push_files(
    client: GitHubClient,
    owner: str,
    repo: str,
    branch: str,
    files: Sequence[FileToPush],
    message: str,
) -> Dict[str, Any]:
    """
    Write every file in ``files`` to ``branch`` as one commit.

    The head read, tree creation, commit creation and ref update run strictly
    in that order. The ref update is not forced, so if another writer moved
    the branch in between the remote rejects it and the error propagates
    unchanged. Until that last call succeeds the branch is untouched; any
    tree or commit created before a failure is left unreachable.

    Returns:
        ``{success, branch, commit: {sha, message, url}, files}``
    """
    if not files:
        raise InvalidParamsError("push-files requires at least one file")

    status = await ensure_branch(client, owner, repo, branch)
    parent_sha = status.sha

    parent = await client.get_commit(owner, repo, parent_sha)
    base_tree_sha = parent["tree"]["sha"]

    tree = await client.create_tree(owner, repo, base_tree_sha, build_tree_entries(files))
    commit = await client.create_commit(owner, repo, message, tree["sha"], [parent_sha])

    await client.update_ref(owner, repo, branch, commit["sha"], force=False)

    paths = [f.path for f in files]
    logger.info(
        f"📦 Committed {len(paths)} file(s) to {owner}/{repo}:{branch} as {commit['sha'][:8]}"
    )
    return {
        "success": True,
        "branch": branch,
        "commit": {
            "sha": commit["sha"],
            "message": message,
            "url": commit.get("html_url"),
        },
        "files": paths,
    }
