"""Configuration for MCP GitHub Server.

Configuration is read once at startup from environment variables (optionally
seeded from ``.env`` files) into an immutable ``ServerConfig`` which is then
handed explicitly to the GitHub client and the dispatcher.

Environment variables:
    GITHUB_PERSONAL_ACCESS_TOKEN: access credential (required; GITHUB_TOKEN
        is accepted as a fallback)
    GITHUB_API_URL: API base endpoint, e.g. https://ghe.example.com/api/v3
        (defaults to the public endpoint)
    GITHUB_API_VERSION: value sent as the X-GitHub-Api-Version header
    GITHUB_REQUEST_TIMEOUT: per-request deadline in seconds (default 30)
"""

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import dotenv_values, load_dotenv

from ..error_handling import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_REQUEST_TIMEOUT = 30.0
DEFAULT_USER_AGENT = "MCP-GitHub-Server/1.0.0"

TOKEN_VARIABLES = ("GITHUB_PERSONAL_ACCESS_TOKEN", "GITHUB_TOKEN")

# Values MCP clients commonly leave in generated config files
TOKEN_PLACEHOLDERS = ("", "YOUR_TOKEN_HERE", "REPLACE_ME", "TODO", "CHANGEME")

_TOKEN_PATTERNS = (
    r"^ghp_[a-zA-Z0-9]{36}$",  # Personal access tokens (classic)
    r"^github_pat_[a-zA-Z0-9_]{82}$",  # Fine-grained personal access tokens
    r"^gho_[a-zA-Z0-9]{36}$",  # OAuth tokens
    r"^ghs_[a-zA-Z0-9]{36}$",  # GitHub App installation tokens
    r"^ghu_[a-zA-Z0-9]{36}$",  # GitHub App user tokens
)


def is_placeholder_token(token: Optional[str]) -> bool:
    """Check whether a credential value is missing or an obvious placeholder."""
    if token is None:
        return True
    return token.strip() in TOKEN_PLACEHOLDERS


def looks_like_github_token(token: str) -> bool:
    return any(re.match(pattern, token.strip()) for pattern in _TOKEN_PATTERNS)


@dataclass(frozen=True)
class ServerConfig:
    """Immutable connection settings for the remote GitHub API."""

    token: str
    api_url: str = DEFAULT_API_URL
    api_version: Optional[str] = None
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT

    def __post_init__(self):
        if is_placeholder_token(self.token):
            raise ConfigurationError("GitHub Personal Access Token is required")
        if self.request_timeout <= 0:
            raise ConfigurationError(
                f"Request timeout must be positive, got {self.request_timeout}"
            )
        object.__setattr__(self, "api_url", self.api_url.rstrip("/"))

    @property
    def is_enterprise(self) -> bool:
        """True when pointed at anything other than the public github.com API."""
        return self.api_url != DEFAULT_API_URL

    def __repr__(self) -> str:
        return (
            f"ServerConfig(api_url={self.api_url!r}, api_version={self.api_version!r}, "
            f"request_timeout={self.request_timeout!r}, token='***')"
        )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ServerConfig":
        """
        Build the configuration from environment variables.

        Raises:
            ConfigurationError: If no usable credential is set or a value is malformed
        """
        env = os.environ if environ is None else environ

        token = None
        for variable in TOKEN_VARIABLES:
            candidate = env.get(variable)
            if not is_placeholder_token(candidate):
                token = candidate.strip()
                break

        if token is None:
            raise ConfigurationError(
                "GITHUB_PERSONAL_ACCESS_TOKEN environment variable is required"
            )

        if not looks_like_github_token(token):
            logger.warning("⚠️ GitHub token format not recognized, using it as-is")

        api_url = (env.get("GITHUB_API_URL") or "").strip() or DEFAULT_API_URL
        api_version = (env.get("GITHUB_API_VERSION") or "").strip() or None

        raw_timeout = (env.get("GITHUB_REQUEST_TIMEOUT") or "").strip()
        if raw_timeout:
            try:
                request_timeout = float(raw_timeout)
            except ValueError as e:
                raise ConfigurationError(
                    f"GITHUB_REQUEST_TIMEOUT must be a number, got {raw_timeout!r}"
                ) from e
        else:
            request_timeout = DEFAULT_REQUEST_TIMEOUT

        config = cls(
            token=token,
            api_url=api_url,
            api_version=api_version,
            request_timeout=request_timeout,
        )
        logger.debug(f"✅ Loaded configuration: {config!r}")
        return config


def _load_env_file(env_file: Path) -> None:
    token_before = {variable: os.getenv(variable) for variable in TOKEN_VARIABLES}
    load_dotenv(env_file, override=False)  # Never override real environment values

    # Empty or placeholder credentials from the client environment lose to the file
    values = dotenv_values(env_file)
    for variable in TOKEN_VARIABLES:
        file_value = values.get(variable)
        if is_placeholder_token(token_before[variable]) and not is_placeholder_token(file_value):
            os.environ[variable] = file_value


def load_environment_variables(env_file: Optional[Path] = None) -> list[str]:
    """Load environment variables from .env files.

    Order of precedence:
    1. System environment variables (never overridden, except credentials)
    2. Project-specific .env file (current working directory)
    3. Explicit env file passed on the command line

    Empty, whitespace-only and placeholder credentials (YOUR_TOKEN_HERE,
    REPLACE_ME, TODO, CHANGEME) are replaced by a real value from a file.

    Returns:
        Paths of the files that were loaded
    """
    loaded_files: list[str] = []
    candidates = [Path.cwd() / ".env"]
    if env_file is not None:
        candidates.append(Path(env_file))

    for candidate in candidates:
        if not candidate.exists() or str(candidate) in loaded_files:
            continue
        try:
            _load_env_file(candidate)
            loaded_files.append(str(candidate))
            logger.info(f"Loaded environment variables from {candidate}")
        except OSError as e:
            logger.warning(f"Failed to load .env file {candidate}: {e}")

    if not loaded_files:
        logger.info("No .env files found, using system environment variables only")

    return loaded_files


__all__ = [
    "DEFAULT_API_URL",
    "DEFAULT_REQUEST_TIMEOUT",
    "ServerConfig",
    "is_placeholder_token",
    "load_environment_variables",
    "looks_like_github_token",
]
