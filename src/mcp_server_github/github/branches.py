"""Idempotent branch creation for file-mutating tools"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..error_handling import ErrorKind, GitHubToolError
from .client import GitHubClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BranchStatus:
    """Result of ensure_branch.

    ``sha`` is the branch head: the looked-up commit when the branch existed,
    otherwise the commit the new branch was created at, with the raw ref
    payload in ``created``.
    """

    branch: str
    existed: bool
    sha: str
    source: Optional[str] = None
    created: Optional[Dict[str, Any]] = None


async def ensure_branch(
    client: GitHubClient,
    owner: str,
    repo: str,
    branch: str,
    from_branch: Optional[str] = None,
) -> BranchStatus:
    """
    Make sure ``branch`` exists, creating it from ``from_branch`` (or the
    repository's default branch) when it does not.

    Only a missing ref counts as "does not exist"; any other lookup failure
    propagates unchanged. A missing repository surfaces as NOT_FOUND from the
    default-branch or source-ref lookup, before any ref is created.
    """
    lookup = await client.get_ref(owner, repo, branch)
    if lookup.found:
        logger.debug(f"Branch {owner}/{repo}:{branch} already exists at {lookup.sha}")
        return BranchStatus(branch=branch, existed=True, sha=lookup.sha)

    source = from_branch or await client.get_default_branch(owner, repo)
    source_ref = await client.get_ref(owner, repo, source)
    if not source_ref.found:
        raise GitHubToolError(
            ErrorKind.NOT_FOUND,
            f"Source branch '{source}' not found in {owner}/{repo}",
            status=404,
        )

    created = await client.create_ref(owner, repo, branch, source_ref.sha)
    created = created or {}
    sha = (created.get("object") or {}).get("sha") or source_ref.sha
    logger.info(f"🌿 Created branch {owner}/{repo}:{branch} from {source} at {sha}")
    return BranchStatus(branch=branch, existed=False, sha=sha, source=source, created=created)
