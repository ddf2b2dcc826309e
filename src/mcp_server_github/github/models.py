"""Pydantic models for GitHub API tools

Every model is closed (unknown fields are rejected) and uses strict primitive
types, so a string is never coerced into a number or a number into a bool.
Field names are the wire names; camelCase names go through aliases.
"""

import logging
from typing import Annotated, Any, Dict, List, Literal, Optional, Type, TypeVar, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictInt,
    StringConstraints,
    ValidationError,
    field_validator,
)

from ..error_handling import InvalidParamsError

logger = logging.getLogger(__name__)

RequiredStr = Annotated[str, StringConstraints(strict=True, min_length=1)]
OptionalStr = Optional[Annotated[str, StringConstraints(strict=True)]]
PositiveInt = Annotated[StrictInt, Field(gt=0)]
Page = Annotated[StrictInt, Field(ge=1)]
PerPage = Annotated[StrictInt, Field(ge=1, le=100)]
Direction = Literal["asc", "desc"]
StringList = List[Annotated[str, StringConstraints(strict=True)]]
WorkflowId = Union[StrictInt, RequiredStr]

WORKFLOW_RUN_STATUSES = (
    "completed",
    "action_required",
    "cancelled",
    "failure",
    "neutral",
    "skipped",
    "stale",
    "success",
    "timed_out",
    "in_progress",
    "queued",
    "requested",
    "waiting",
)


class ToolArguments(BaseModel):
    """Base for every tool input schema."""

    model_config = ConfigDict(extra="forbid", populate_by_name=False, frozen=True)


class OwnerRepo(ToolArguments):
    owner: RequiredStr = Field(description="Repository owner (username or organization)")
    repo: RequiredStr = Field(description="Repository name")


class PullRequestRef(OwnerRepo):
    pull_number: PositiveInt = Field(description="Pull request number")


class IssueRef(OwnerRepo):
    issue_number: PositiveInt = Field(description="Issue number")


# Repository tools


class SearchRepositories(ToolArguments):
    query: RequiredStr = Field(description="Search query (see GitHub search syntax)")
    page: Optional[StrictInt] = Field(None, description="Page number for pagination (default: 1)")
    per_page: Optional[PerPage] = Field(
        None, alias="perPage", description="Number of results per page (default: 30, max: 100)"
    )


class CreateRepository(ToolArguments):
    name: RequiredStr = Field(description="Repository name")
    description: OptionalStr = Field(None, description="Repository description")
    private: Optional[StrictBool] = Field(None, description="Whether the repository should be private")
    auto_init: Optional[StrictBool] = Field(None, alias="autoInit", description="Initialize with README.md")
    org: OptionalStr = Field(None, description="Organization to create the repository in")


class UpdateRepository(OwnerRepo):
    description: OptionalStr = Field(None, description="New description")
    private: Optional[StrictBool] = Field(None, description="Change privacy setting")
    default_branch: OptionalStr = Field(None, description="Change default branch")
    has_issues: Optional[StrictBool] = Field(None, description="Enable/disable issues")
    has_projects: Optional[StrictBool] = Field(None, description="Enable/disable projects")
    has_wiki: Optional[StrictBool] = Field(None, description="Enable/disable wiki")
    archived: Optional[StrictBool] = Field(None, description="Archive/unarchive repository")


class DeleteRepository(OwnerRepo):
    confirm: StrictBool = Field(description="Confirmation for deletion (must be true)")

    @field_validator("confirm")
    @classmethod
    def must_confirm(cls, value: bool) -> bool:
        if value is not True:
            raise ValueError("You must confirm deletion by setting confirm to true")
        return value


class CreateBranch(OwnerRepo):
    branch: RequiredStr = Field(description="Name for the new branch")
    from_branch: OptionalStr = Field(
        None, description="Source branch to create from (defaults to the repository's default branch)"
    )


class ListCommits(OwnerRepo):
    sha: OptionalStr = Field(None, description="Branch name or commit SHA to start listing from")
    page: Optional[StrictInt] = None
    per_page: Optional[StrictInt] = Field(None, alias="perPage")


class ListWorkflows(OwnerRepo):
    page: Optional[StrictInt] = Field(None, description="Page number")
    per_page: Optional[StrictInt] = Field(None, alias="perPage", description="Items per page")


class ListWorkflowRuns(OwnerRepo):
    workflow_id: Optional[WorkflowId] = Field(None, description="Workflow ID or file name")
    branch: OptionalStr = Field(None, description="Filter by branch name")
    status: Optional[Literal[WORKFLOW_RUN_STATUSES]] = Field(None, description="Filter by run status")
    page: Optional[StrictInt] = Field(None, description="Page number")
    per_page: Optional[StrictInt] = Field(None, alias="perPage", description="Items per page")


class TriggerWorkflow(OwnerRepo):
    workflow_id: WorkflowId = Field(description="Workflow ID or file name")
    ref: RequiredStr = Field(description="Git reference (branch, tag, SHA)")
    inputs: Optional[Dict[str, Annotated[str, StringConstraints(strict=True)]]] = Field(
        None, description="Workflow inputs"
    )


# File tools


class CreateOrUpdateFile(OwnerRepo):
    path: RequiredStr = Field(description="Path where to create/update the file")
    content: RequiredStr = Field(description="Content of the file")
    message: RequiredStr = Field(description="Commit message")
    branch: RequiredStr = Field(description="Branch to create/update the file in")
    sha: OptionalStr = Field(
        None, description="SHA of the file being replaced (required when updating existing files)"
    )


class FileToPush(ToolArguments):
    path: RequiredStr
    content: RequiredStr


class PushFiles(OwnerRepo):
    branch: RequiredStr = Field(description="Branch to push to (e.g., 'main' or 'master')")
    files: List[FileToPush] = Field(min_length=1, description="Array of files to push")
    message: RequiredStr = Field(description="Commit message")


class GetFileContents(OwnerRepo):
    path: RequiredStr = Field(description="Path to the file or directory")
    branch: OptionalStr = Field(None, description="Branch to get contents from")


class ForkRepository(OwnerRepo):
    organization: OptionalStr = Field(
        None, description="Optional: organization to fork to (defaults to your personal account)"
    )


# Issue tools


class ListIssues(OwnerRepo):
    state: Optional[Literal["open", "closed", "all"]] = None
    labels: Optional[StringList] = None
    sort: Optional[Literal["created", "updated", "comments"]] = None
    direction: Optional[Direction] = None
    since: OptionalStr = None
    page: Optional[StrictInt] = None
    per_page: Optional[StrictInt] = None


class GetIssue(IssueRef):
    pass


class CreateIssue(OwnerRepo):
    title: RequiredStr
    body: OptionalStr = None
    assignees: Optional[StringList] = None
    milestone: Optional[StrictInt] = None
    labels: Optional[StringList] = None


class UpdateIssue(IssueRef):
    title: OptionalStr = None
    body: OptionalStr = None
    assignees: Optional[StringList] = None
    milestone: Optional[StrictInt] = None
    labels: Optional[StringList] = None
    state: Optional[Literal["open", "closed"]] = None


class AddIssueComment(IssueRef):
    body: RequiredStr


# Pull request tools


class ListPullRequests(OwnerRepo):
    state: Optional[Literal["open", "closed", "all"]] = Field(
        None, description="State of the pull requests to return"
    )
    head: OptionalStr = Field(None, description="Filter by head user or head organization and branch name")
    base: OptionalStr = Field(None, description="Filter by base branch name")
    sort: Optional[Literal["created", "updated", "popularity", "long-running"]] = Field(
        None, description="What to sort results by"
    )
    direction: Optional[Direction] = Field(None, description="The direction of the sort")
    per_page: Optional[StrictInt] = Field(None, description="Results per page (max 100)")
    page: Optional[StrictInt] = Field(None, description="Page number of the results")


class GetPullRequest(PullRequestRef):
    pass


class CreatePullRequest(OwnerRepo):
    title: RequiredStr = Field(description="Pull request title")
    head: RequiredStr = Field(description="The name of the branch where your changes are implemented")
    base: RequiredStr = Field(description="The name of the branch you want the changes pulled into")
    body: OptionalStr = Field(None, description="Pull request body/description")
    draft: Optional[StrictBool] = Field(None, description="Whether to create the pull request as a draft")
    maintainer_can_modify: Optional[StrictBool] = Field(
        None, description="Whether maintainers can modify the pull request"
    )


class ReviewComment(ToolArguments):
    path: RequiredStr = Field(description="The relative path to the file being commented on")
    position: PositiveInt = Field(description="The position in the diff where you want to add a review comment")
    body: RequiredStr = Field(description="Text of the review comment")


class CreatePullRequestReview(PullRequestRef):
    body: RequiredStr = Field(description="The body text of the review")
    event: Literal["APPROVE", "REQUEST_CHANGES", "COMMENT"] = Field(description="The review action to perform")
    commit_id: OptionalStr = Field(None, description="The SHA of the commit that needs a review")
    comments: Optional[List[ReviewComment]] = Field(
        None, description="Comments to post as part of the review"
    )


class MergePullRequest(PullRequestRef):
    commit_title: OptionalStr = Field(None, description="Title for the automatic commit message")
    commit_message: OptionalStr = Field(None, description="Extra detail to append to automatic commit message")
    merge_method: Optional[Literal["merge", "squash", "rebase"]] = Field(None, description="Merge method to use")


class GetPullRequestFiles(PullRequestRef):
    pass


class GetPullRequestStatus(PullRequestRef):
    pass


class UpdatePullRequestBranch(PullRequestRef):
    expected_head_sha: OptionalStr = Field(None, description="The expected SHA of the pull request's HEAD ref")


class GetPullRequestComments(PullRequestRef):
    pass


class GetPullRequestReviews(PullRequestRef):
    pass


# Search tools


class SearchCode(ToolArguments):
    q: RequiredStr
    order: Optional[Direction] = None
    page: Optional[Page] = None
    per_page: Optional[PerPage] = None


class SearchIssues(ToolArguments):
    q: RequiredStr
    sort: Optional[
        Literal[
            "comments",
            "reactions",
            "reactions-+1",
            "reactions--1",
            "reactions-smile",
            "reactions-thinking_face",
            "reactions-heart",
            "reactions-tada",
            "interactions",
            "created",
            "updated",
        ]
    ] = None
    order: Optional[Direction] = None
    page: Optional[Page] = None
    per_page: Optional[PerPage] = None


class SearchUsers(ToolArguments):
    q: RequiredStr
    sort: Optional[Literal["followers", "repositories", "joined"]] = None
    order: Optional[Direction] = None
    page: Optional[Page] = None
    per_page: Optional[PerPage] = None


class GetLicenseInfo(ToolArguments):
    pass


class GetEnterpriseStats(ToolArguments):
    pass


T = TypeVar("T", bound=ToolArguments)


def format_validation_error(error: ValidationError) -> str:
    """Render every failed field as ``<field>: <reason>``."""
    problems = []
    for detail in error.errors():
        location = ".".join(str(part) for part in detail.get("loc", ())) or "arguments"
        problems.append(f"{location}: {detail.get('msg', 'invalid value')}")
    return "; ".join(problems)


def validate_arguments(model: Type[T], operation: str, arguments: Dict[str, Any]) -> T:
    """
    Validate a raw argument bag against a tool schema.

    Args:
        model: Tool input schema
        operation: Tool name, used in the error message
        arguments: Untrusted argument mapping

    Returns:
        The fully typed argument record

    Raises:
        InvalidParamsError: naming each offending field and the violated constraint
    """
    try:
        return model.model_validate(arguments)
    except ValidationError as e:
        logger.debug(f"Validation failed for {operation}: {e}")
        raise InvalidParamsError(
            f"Invalid arguments for {operation}: {format_validation_error(e)}"
        ) from e
