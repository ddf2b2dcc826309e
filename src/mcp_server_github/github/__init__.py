"""GitHub integration for MCP GitHub Server"""

from .branches import BranchStatus, ensure_branch
from .client import GitHubClient, RefLookup, decode_content, encode_content
from .commits import push_files
from .models import ToolArguments, validate_arguments

__all__ = [
    "GitHubClient",
    "RefLookup",
    "encode_content",
    "decode_content",
    # Branch and commit composition
    "BranchStatus",
    "ensure_branch",
    "push_files",
    # Validation
    "ToolArguments",
    "validate_arguments",
]
