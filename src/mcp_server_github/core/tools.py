"""Tool registry for MCP GitHub Server"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Type

from mcp.types import Tool

from ..github import files, issues, pull_requests, repository, search
from ..github import models
from ..github.client import GitHubClient
from ..github.models import ToolArguments

logger = logging.getLogger(__name__)

ToolHandler = Callable[[GitHubClient, Any], Awaitable[Any]]


class GitHubTools(str, Enum):
    """Enumeration of all available GitHub tools"""

    # Repository operations
    SEARCH_REPOSITORIES = "search-repositories"
    CREATE_REPOSITORY = "create-repository"
    UPDATE_REPOSITORY = "update-repository"
    DELETE_REPOSITORY = "delete-repository"
    CREATE_BRANCH = "create-branch"
    LIST_COMMITS = "list-commits"
    LIST_WORKFLOWS = "list-workflows"
    LIST_WORKFLOW_RUNS = "list-workflow-runs"
    TRIGGER_WORKFLOW = "trigger-workflow"

    # File operations
    CREATE_OR_UPDATE_FILE = "create-or-update-file"
    PUSH_FILES = "push-files"
    GET_FILE_CONTENTS = "get-file-contents"
    FORK_REPOSITORY = "fork-repository"

    # Issue operations
    LIST_ISSUES = "list-issues"
    GET_ISSUE = "get-issue"
    CREATE_ISSUE = "create-issue"
    UPDATE_ISSUE = "update-issue"
    ADD_ISSUE_COMMENT = "add-issue-comment"

    # Pull request operations
    LIST_PULL_REQUESTS = "list-pull-requests"
    GET_PULL_REQUEST = "get-pull-request"
    CREATE_PULL_REQUEST = "create-pull-request"
    CREATE_PULL_REQUEST_REVIEW = "create-pull-request-review"
    MERGE_PULL_REQUEST = "merge-pull-request"
    GET_PULL_REQUEST_FILES = "get-pull-request-files"
    GET_PULL_REQUEST_STATUS = "get-pull-request-status"
    UPDATE_PULL_REQUEST_BRANCH = "update-pull-request-branch"
    GET_PULL_REQUEST_COMMENTS = "get-pull-request-comments"
    GET_PULL_REQUEST_REVIEWS = "get-pull-request-reviews"

    # Search and metadata
    SEARCH_CODE = "search-code"
    SEARCH_ISSUES = "search-issues"
    SEARCH_USERS = "search-users"
    GET_LICENSE_INFO = "get-license-info"
    GET_ENTERPRISE_STATS = "get-enterprise-stats"


class ToolCategory(str, Enum):
    """Tool categories for organization"""

    REPOSITORY = "repository"
    FILES = "files"
    ISSUES = "issues"
    PULL_REQUESTS = "pull_requests"
    SEARCH = "search"


@dataclass(frozen=True)
class ToolDefinition:
    """Complete tool definition with metadata"""

    name: str
    category: ToolCategory
    description: str
    schema: Type[ToolArguments]
    handler: ToolHandler
    mutates_files: bool = False

    def to_mcp_tool(self) -> Tool:
        return Tool(
            name=self.name,
            description=self.description,
            inputSchema=self.schema.model_json_schema(by_alias=True),
        )


class ToolRegistry:
    """Central registry for all MCP GitHub Server tools"""

    def __init__(self):
        self.tools: Dict[str, ToolDefinition] = {}

    def register(self, tool_def: ToolDefinition):
        """Register a tool in the registry"""
        if tool_def.name in self.tools:
            raise ValueError(f"Tool already registered: {tool_def.name}")
        self.tools[tool_def.name] = tool_def
        logger.debug(f"Registered tool: {tool_def.name} ({tool_def.category.value})")

    def get_tool(self, name: str) -> Optional[ToolDefinition]:
        """Get tool definition by name"""
        return self.tools.get(name)

    def list_tools(self) -> List[Tool]:
        """Get all tools as MCP Tool objects"""
        return [tool_def.to_mcp_tool() for tool_def in self.tools.values()]

    def __contains__(self, name: str) -> bool:
        return name in self.tools

    def __len__(self) -> int:
        return len(self.tools)


def _definition(
    tool: GitHubTools,
    category: ToolCategory,
    description: str,
    schema: Type[ToolArguments],
    handler: ToolHandler,
    mutates_files: bool = False,
) -> ToolDefinition:
    return ToolDefinition(
        name=tool.value,
        category=category,
        description=description,
        schema=schema,
        handler=handler,
        mutates_files=mutates_files,
    )


def build_default_registry() -> ToolRegistry:
    """Build the registry holding the full GitHub tool catalog"""
    repo, file_ops = ToolCategory.REPOSITORY, ToolCategory.FILES
    issue_ops, pr_ops, search_ops = ToolCategory.ISSUES, ToolCategory.PULL_REQUESTS, ToolCategory.SEARCH

    definitions = [
        _definition(
            GitHubTools.SEARCH_REPOSITORIES, repo,
            "Search for GitHub repositories",
            models.SearchRepositories, repository.search_repositories,
        ),
        _definition(
            GitHubTools.CREATE_REPOSITORY, repo,
            "Create a new GitHub repository in your account or an organization",
            models.CreateRepository, repository.create_repository,
        ),
        _definition(
            GitHubTools.UPDATE_REPOSITORY, repo,
            "Update an existing GitHub repository",
            models.UpdateRepository, repository.update_repository,
        ),
        _definition(
            GitHubTools.DELETE_REPOSITORY, repo,
            "Delete a GitHub repository (requires confirm: true)",
            models.DeleteRepository, repository.delete_repository,
        ),
        _definition(
            GitHubTools.CREATE_BRANCH, repo,
            "Create a new branch in a GitHub repository",
            models.CreateBranch, repository.create_branch,
        ),
        _definition(
            GitHubTools.LIST_COMMITS, repo,
            "Get list of commits of a branch in a GitHub repository",
            models.ListCommits, repository.list_commits,
        ),
        _definition(
            GitHubTools.LIST_WORKFLOWS, repo,
            "List workflows in a GitHub repository",
            models.ListWorkflows, repository.list_workflows,
        ),
        _definition(
            GitHubTools.LIST_WORKFLOW_RUNS, repo,
            "List workflow runs in a GitHub repository",
            models.ListWorkflowRuns, repository.list_workflow_runs,
        ),
        _definition(
            GitHubTools.TRIGGER_WORKFLOW, repo,
            "Trigger a workflow run in a GitHub repository",
            models.TriggerWorkflow, repository.trigger_workflow,
        ),
        _definition(
            GitHubTools.CREATE_OR_UPDATE_FILE, file_ops,
            "Create or update a single file in a GitHub repository",
            models.CreateOrUpdateFile, files.create_or_update_file,
            mutates_files=True,
        ),
        _definition(
            GitHubTools.PUSH_FILES, file_ops,
            "Push multiple files to a GitHub repository in a single commit",
            models.PushFiles, files.push_files,
            mutates_files=True,
        ),
        _definition(
            GitHubTools.GET_FILE_CONTENTS, file_ops,
            "Get the contents of a file or directory from a GitHub repository",
            models.GetFileContents, files.get_file_contents,
        ),
        _definition(
            GitHubTools.FORK_REPOSITORY, repo,
            "Fork a GitHub repository to your account or specified organization",
            models.ForkRepository, files.fork_repository,
        ),
        _definition(
            GitHubTools.LIST_ISSUES, issue_ops,
            "List and filter repository issues",
            models.ListIssues, issues.list_issues,
        ),
        _definition(
            GitHubTools.GET_ISSUE, issue_ops,
            "Get details of a specific issue in a GitHub repository",
            models.GetIssue, issues.get_issue,
        ),
        _definition(
            GitHubTools.CREATE_ISSUE, issue_ops,
            "Create a new issue in a GitHub repository",
            models.CreateIssue, issues.create_issue,
        ),
        _definition(
            GitHubTools.UPDATE_ISSUE, issue_ops,
            "Update an existing issue in a GitHub repository",
            models.UpdateIssue, issues.update_issue,
        ),
        _definition(
            GitHubTools.ADD_ISSUE_COMMENT, issue_ops,
            "Add a comment to an existing issue",
            models.AddIssueComment, issues.add_issue_comment,
        ),
        _definition(
            GitHubTools.LIST_PULL_REQUESTS, pr_ops,
            "List and filter repository pull requests",
            models.ListPullRequests, pull_requests.list_pull_requests,
        ),
        _definition(
            GitHubTools.GET_PULL_REQUEST, pr_ops,
            "Get details of a specific pull request",
            models.GetPullRequest, pull_requests.get_pull_request,
        ),
        _definition(
            GitHubTools.CREATE_PULL_REQUEST, pr_ops,
            "Create a new pull request in a GitHub repository",
            models.CreatePullRequest, pull_requests.create_pull_request,
        ),
        _definition(
            GitHubTools.CREATE_PULL_REQUEST_REVIEW, pr_ops,
            "Create a review on a pull request",
            models.CreatePullRequestReview, pull_requests.create_pull_request_review,
        ),
        _definition(
            GitHubTools.MERGE_PULL_REQUEST, pr_ops,
            "Merge a pull request",
            models.MergePullRequest, pull_requests.merge_pull_request,
        ),
        _definition(
            GitHubTools.GET_PULL_REQUEST_FILES, pr_ops,
            "Get the list of files changed in a pull request",
            models.GetPullRequestFiles, pull_requests.get_pull_request_files,
        ),
        _definition(
            GitHubTools.GET_PULL_REQUEST_STATUS, pr_ops,
            "Get the combined status of all status checks for a pull request",
            models.GetPullRequestStatus, pull_requests.get_pull_request_status,
        ),
        _definition(
            GitHubTools.UPDATE_PULL_REQUEST_BRANCH, pr_ops,
            "Update a pull request branch with the latest changes from the base branch",
            models.UpdatePullRequestBranch, pull_requests.update_pull_request_branch,
        ),
        _definition(
            GitHubTools.GET_PULL_REQUEST_COMMENTS, pr_ops,
            "Get the review comments on a pull request",
            models.GetPullRequestComments, pull_requests.get_pull_request_comments,
        ),
        _definition(
            GitHubTools.GET_PULL_REQUEST_REVIEWS, pr_ops,
            "Get the reviews on a pull request",
            models.GetPullRequestReviews, pull_requests.get_pull_request_reviews,
        ),
        _definition(
            GitHubTools.SEARCH_CODE, search_ops,
            "Search for code across GitHub repositories",
            models.SearchCode, search.search_code,
        ),
        _definition(
            GitHubTools.SEARCH_ISSUES, search_ops,
            "Search for issues and pull requests across GitHub repositories",
            models.SearchIssues, search.search_issues,
        ),
        _definition(
            GitHubTools.SEARCH_USERS, search_ops,
            "Search for users on GitHub",
            models.SearchUsers, search.search_users,
        ),
        _definition(
            GitHubTools.GET_LICENSE_INFO, search_ops,
            "Get information about commonly used licenses on GitHub",
            models.GetLicenseInfo, search.get_license_info,
        ),
        _definition(
            GitHubTools.GET_ENTERPRISE_STATS, search_ops,
            "Get GitHub Enterprise statistics (only available for GitHub Enterprise)",
            models.GetEnterpriseStats, search.get_enterprise_stats,
        ),
    ]

    registry = ToolRegistry()
    for tool_def in definitions:
        registry.register(tool_def)

    logger.info(f"Initialized tool registry with {len(registry)} tools")
    return registry
