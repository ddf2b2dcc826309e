"""GitHub API client and authentication"""

import asyncio
import base64
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import aiohttp

from ..configuration import ServerConfig
from ..error_handling import ErrorKind, GitHubToolError, error_from_response

logger = logging.getLogger(__name__)

REGULAR_FILE_MODE = "100644"


@dataclass(frozen=True)
class RefLookup:
    """Outcome of a branch reference lookup: found with a commit sha, or not found."""

    ref: str
    found: bool
    sha: Optional[str] = None

    @classmethod
    def not_found(cls, ref: str) -> "RefLookup":
        return cls(ref=ref, found=False)


def _clean_params(params: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Drop unset values and render booleans the way the API expects them."""
    if not params:
        return None
    cleaned = {}
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        cleaned[key] = value
    return cleaned or None


def _clean_body(body: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if body is None:
        return None
    return {key: value for key, value in body.items() if value is not None}


class GitHubClient:
    """GitHub API client bound to one configured endpoint and credential.

    Every call is a single HTTP round trip. Non-2xx responses are classified
    once, here, into a GitHubToolError; nothing is retried.
    """

    def __init__(self, config: ServerConfig, session: aiohttp.ClientSession):
        self.config = config
        self.session = session

    @property
    def headers(self) -> Dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self.config.token}",
            "Accept": "application/vnd.github+json",
            "User-Agent": self.config.user_agent,
        }
        if self.config.api_version:
            headers["X-GitHub-Api-Version"] = self.config.api_version
        return headers

    def url(self, endpoint: str) -> str:
        return f"{self.config.api_url}/{endpoint.lstrip('/')}"

    async def request(
        self,
        method: str,
        endpoint: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Make an authenticated request and return the decoded JSON body.

        Returns:
            Decoded JSON, or None for empty responses (204 No Content)

        Raises:
            GitHubToolError: classified from the status code, TIMEOUT when the
                configured deadline expires, INTERNAL for transport failures
        """
        url = self.url(endpoint)
        timeout = aiohttp.ClientTimeout(total=self.config.request_timeout)
        logger.debug(f"🌐 {method} {url}")

        try:
            async with self.session.request(
                method,
                url,
                headers=self.headers,
                params=_clean_params(params),
                json=_clean_body(json),
                timeout=timeout,
            ) as response:
                text = await response.text()
                status = response.status
        except asyncio.TimeoutError as e:
            raise GitHubToolError(
                ErrorKind.TIMEOUT,
                f"GitHub API request timed out after {self.config.request_timeout}s: {method} {endpoint}",
            ) from e
        except aiohttp.ClientError as e:
            raise GitHubToolError(
                ErrorKind.INTERNAL, f"GitHub API request failed: {method} {endpoint}: {e}"
            ) from e

        payload = _decode_body(text)
        if status >= 400:
            logger.debug(f"❌ {method} {endpoint} -> {status}")
            raise error_from_response(status, payload)
        return payload

    async def get(self, endpoint: str, **kwargs) -> Any:
        return await self.request("GET", endpoint, **kwargs)

    async def post(self, endpoint: str, **kwargs) -> Any:
        return await self.request("POST", endpoint, **kwargs)

    async def patch(self, endpoint: str, **kwargs) -> Any:
        return await self.request("PATCH", endpoint, **kwargs)

    async def put(self, endpoint: str, **kwargs) -> Any:
        return await self.request("PUT", endpoint, **kwargs)

    async def delete(self, endpoint: str, **kwargs) -> Any:
        return await self.request("DELETE", endpoint, **kwargs)

    # Repository metadata

    async def get_repository(self, owner: str, repo: str) -> Dict[str, Any]:
        return await self.get(f"/repos/{owner}/{repo}")

    async def get_default_branch(self, owner: str, repo: str) -> str:
        data = await self.get_repository(owner, repo)
        return data["default_branch"]

    # Git data primitives

    async def get_ref(self, owner: str, repo: str, branch: str) -> RefLookup:
        """Look up ``heads/<branch>``; absence is a value, not an error."""
        ref = f"heads/{branch}"
        try:
            data = await self.get(f"/repos/{owner}/{repo}/git/ref/{ref}")
        except GitHubToolError as e:
            if e.kind is ErrorKind.NOT_FOUND:
                return RefLookup.not_found(ref)
            raise
        return RefLookup(ref=ref, found=True, sha=data["object"]["sha"])

    async def create_ref(self, owner: str, repo: str, branch: str, sha: str) -> Dict[str, Any]:
        return await self.post(
            f"/repos/{owner}/{repo}/git/refs",
            json={"ref": f"refs/heads/{branch}", "sha": sha},
        )

    async def update_ref(
        self, owner: str, repo: str, branch: str, sha: str, force: bool = False
    ) -> Dict[str, Any]:
        """Move ``heads/<branch>`` to ``sha``; rejected remotely unless a fast-forward."""
        return await self.patch(
            f"/repos/{owner}/{repo}/git/refs/heads/{branch}",
            json={"sha": sha, "force": force},
        )

    async def get_commit(self, owner: str, repo: str, sha: str) -> Dict[str, Any]:
        return await self.get(f"/repos/{owner}/{repo}/git/commits/{sha}")

    async def create_tree(
        self, owner: str, repo: str, base_tree: str, tree: List[Dict[str, Any]]
    ) -> Dict[str, Any]:
        return await self.post(
            f"/repos/{owner}/{repo}/git/trees",
            json={"base_tree": base_tree, "tree": tree},
        )

    async def create_commit(
        self, owner: str, repo: str, message: str, tree: str, parents: List[str]
    ) -> Dict[str, Any]:
        return await self.post(
            f"/repos/{owner}/{repo}/git/commits",
            json={"message": message, "tree": tree, "parents": parents},
        )

    # Contents API

    async def get_content(
        self, owner: str, repo: str, path: str, ref: Optional[str] = None
    ) -> Any:
        return await self.get(
            f"/repos/{owner}/{repo}/contents/{path.lstrip('/')}", params={"ref": ref}
        )

    async def put_content(
        self,
        owner: str,
        repo: str,
        path: str,
        content: str,
        message: str,
        branch: str,
        sha: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Create or update one file; ``content`` is UTF-8 text, encoded here."""
        return await self.put(
            f"/repos/{owner}/{repo}/contents/{path.lstrip('/')}",
            json={
                "message": message,
                "content": encode_content(content),
                "branch": branch,
                "sha": sha,
            },
        )


def encode_content(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def decode_content(data: str) -> str:
    # The contents API wraps base64 at 60 columns; b64decode skips the newlines.
    # Bytes that are not UTF-8 (binary files) become U+FFFD.
    return base64.b64decode(data).decode("utf-8", errors="replace")


def _decode_body(text: str) -> Any:
    if not text or not text.strip():
        return None
    try:
        return json.loads(text)
    except ValueError:
        return text
