"""Tests for idempotent branch creation."""

import pytest

from fixtures.github_responses import FakeGitHubClient
from mcp_server_github.error_handling import ErrorKind, GitHubToolError, error_from_response
from mcp_server_github.github.branches import ensure_branch


@pytest.mark.asyncio
async def test_second_call_reports_existing_branch(fake_client, remote):
    first = await ensure_branch(fake_client, "acme", "widgets", "feature-x")
    second = await ensure_branch(fake_client, "acme", "widgets", "feature-x")

    assert first.existed is False
    assert first.source == "main"
    assert first.sha == remote.head("main")
    assert second.existed is True
    assert second.sha == first.sha
    assert len(fake_client.calls_to("POST", "/repos/acme/widgets/git/refs")) == 1


@pytest.mark.asyncio
async def test_existing_branch_is_a_single_lookup(fake_client, remote):
    status = await ensure_branch(fake_client, "acme", "widgets", "main")

    assert status.existed is True
    assert status.sha == remote.head("main")
    assert fake_client.call_signatures == [("GET", "/repos/acme/widgets/git/ref/heads/main")]


@pytest.mark.asyncio
async def test_creates_from_default_branch(fake_client, remote):
    await ensure_branch(fake_client, "acme", "widgets", "feature-x")

    assert fake_client.call_signatures == [
        ("GET", "/repos/acme/widgets/git/ref/heads/feature-x"),
        ("GET", "/repos/acme/widgets"),
        ("GET", "/repos/acme/widgets/git/ref/heads/main"),
        ("POST", "/repos/acme/widgets/git/refs"),
    ]
    assert fake_client.calls[-1].json == {"ref": "refs/heads/feature-x", "sha": remote.head("main")}
    assert remote.refs["feature-x"] == remote.head("main")


@pytest.mark.asyncio
async def test_creates_from_explicit_source(fake_client, remote):
    develop_head = remote.advance("develop", {"dev.txt": "work in progress"})

    status = await ensure_branch(fake_client, "acme", "widgets", "hotfix", from_branch="develop")

    assert status.source == "develop"
    assert status.sha == develop_head
    # The default branch is never consulted when a source is given
    assert fake_client.call_signatures[-3:] == [
        ("GET", "/repos/acme/widgets/git/ref/heads/hotfix"),
        ("GET", "/repos/acme/widgets/git/ref/heads/develop"),
        ("POST", "/repos/acme/widgets/git/refs"),
    ]


@pytest.mark.asyncio
async def test_missing_source_branch(fake_client):
    with pytest.raises(GitHubToolError) as exc_info:
        await ensure_branch(fake_client, "acme", "widgets", "hotfix", from_branch="nope")

    assert exc_info.value.kind is ErrorKind.NOT_FOUND
    assert "Source branch 'nope' not found" in exc_info.value.message
    assert not fake_client.calls_to("POST")


@pytest.mark.asyncio
async def test_missing_repository_never_creates_a_ref():
    client = FakeGitHubClient()

    with pytest.raises(GitHubToolError) as exc_info:
        await ensure_branch(client, "acme", "ghost", "feature-x")

    assert exc_info.value.kind is ErrorKind.NOT_FOUND
    assert client.call_signatures == [
        ("GET", "/repos/acme/ghost/git/ref/heads/feature-x"),
        ("GET", "/repos/acme/ghost"),
    ]


@pytest.mark.asyncio
async def test_lookup_errors_other_than_not_found_propagate(fake_client):
    fake_client.route(
        "GET",
        "/repos/acme/widgets/git/ref/heads/feature-x",
        error_from_response(401, {"message": "Bad credentials"}),
    )

    with pytest.raises(GitHubToolError) as exc_info:
        await ensure_branch(fake_client, "acme", "widgets", "feature-x")

    assert exc_info.value.kind is ErrorKind.UNAUTHORIZED
    assert len(fake_client.calls) == 1


@pytest.mark.asyncio
async def test_ref_creation_conflict_propagates_unmodified(fake_client):
    conflict = error_from_response(409, {"message": "Reference update conflict"})
    fake_client.route("POST", "/repos/acme/widgets/git/refs", conflict)

    with pytest.raises(GitHubToolError) as exc_info:
        await ensure_branch(fake_client, "acme", "widgets", "feature-x")

    assert exc_info.value is conflict
