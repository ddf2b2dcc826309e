"""Error taxonomy and classification for MCP GitHub Server."""

import json
import logging
from enum import Enum
from typing import Any, Dict, Optional

from mcp.types import ErrorData

logger = logging.getLogger(__name__)


class ErrorKind(Enum):
    """Classification of every failure a tool call can surface."""

    CONFIGURATION = "configuration"  # Missing credential, process must not start
    INVALID_PARAMS = "invalid_params"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    TIMEOUT = "timeout"
    INTERNAL = "internal"
    METHOD_NOT_FOUND = "method_not_found"


ERROR_CODES: Dict[ErrorKind, int] = {
    ErrorKind.CONFIGURATION: -32000,
    ErrorKind.UNAUTHORIZED: -32001,
    ErrorKind.FORBIDDEN: -32003,
    ErrorKind.NOT_FOUND: -32004,
    ErrorKind.TIMEOUT: -32008,
    ErrorKind.CONFLICT: -32009,
    ErrorKind.METHOD_NOT_FOUND: -32601,
    ErrorKind.INVALID_PARAMS: -32602,
    ErrorKind.INTERNAL: -32603,
}

_STATUS_KINDS: Dict[int, ErrorKind] = {
    400: ErrorKind.INVALID_PARAMS,
    401: ErrorKind.UNAUTHORIZED,
    403: ErrorKind.FORBIDDEN,
    404: ErrorKind.NOT_FOUND,
    409: ErrorKind.CONFLICT,
    422: ErrorKind.INVALID_PARAMS,
}


class GitHubToolError(Exception):
    """A classified, terminal error for a single tool call."""

    def __init__(self, kind: ErrorKind, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status = status

    @property
    def code(self) -> int:
        return ERROR_CODES[self.kind]

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "kind": self.kind.value,
            "code": self.code,
            "message": self.message,
        }
        if self.status is not None:
            data["status"] = self.status
        return data

    def to_json(self) -> str:
        """Render as the ``{"error": {...}}`` text returned to the client."""
        return json.dumps({"error": self.to_dict()}, indent=2, ensure_ascii=False)

    def to_error_data(self, message: Optional[str] = None) -> ErrorData:
        """Convert to the MCP error payload sent back over the transport."""
        data: Dict[str, Any] = {"kind": self.kind.value}
        if self.status is not None:
            data["status"] = self.status
        return ErrorData(code=self.code, message=message or self.message, data=data)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind.value!r}, message={self.message!r}, status={self.status!r})"


class ConfigurationError(GitHubToolError):
    """Raised at startup when the server cannot be configured."""

    def __init__(self, message: str):
        super().__init__(ErrorKind.CONFIGURATION, message)


class InvalidParamsError(GitHubToolError):
    """Raised when an argument bag fails validation or cannot be decoded."""

    def __init__(self, message: str):
        super().__init__(ErrorKind.INVALID_PARAMS, message)


class MethodNotFoundError(GitHubToolError):
    def __init__(self, name: str):
        super().__init__(ErrorKind.METHOD_NOT_FOUND, f"Unknown tool: {name}")


def classify_status(status: int) -> ErrorKind:
    """Map a remote HTTP status code onto the error taxonomy."""
    return _STATUS_KINDS.get(status, ErrorKind.INTERNAL)


def error_from_response(
    status: int, payload: Any = None, fallback: str = "Unknown GitHub API error"
) -> GitHubToolError:
    """
    Build a classified error from a failed remote response.

    Args:
        status: HTTP status returned by the remote API
        payload: Decoded response body (dict, text or None)
        fallback: Message used when the body carries none

    Returns:
        GitHubToolError with the kind derived from ``status``
    """
    message = fallback
    details = []

    if isinstance(payload, dict):
        message = payload.get("message") or fallback
        for entry in payload.get("errors") or []:
            if isinstance(entry, dict):
                detail = entry.get("message") or entry.get("code")
                if detail:
                    details.append(str(detail))
            elif entry:
                details.append(str(entry))
    elif isinstance(payload, str) and payload.strip():
        message = payload.strip()[:500]

    text = f"GitHub API error {status}: {message}"
    if details:
        text += f" - {'; '.join(details)}"

    return GitHubToolError(classify_status(status), text, status=status)


def ensure_classified(error: Exception, operation: str = "") -> GitHubToolError:
    """
    Return ``error`` unchanged if it is already classified, otherwise wrap it
    as an internal error.

    Classification happens exactly once; callers never re-wrap a
    GitHubToolError so the original kind survives end to end.
    """
    if isinstance(error, GitHubToolError):
        return error

    logger.error(
        f"Unexpected {type(error).__name__} in {operation or 'tool call'}: {error}",
        exc_info=error,
    )
    prefix = f"Error executing tool {operation}" if operation else "Error executing tool"
    return GitHubToolError(ErrorKind.INTERNAL, f"{prefix}: {error}")
