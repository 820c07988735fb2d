"""Data models and constants for circleci-provision."""

from __future__ import annotations

from dataclasses import dataclass, field

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DEFAULT_API_URL = "https://circleci.com/api/v1.1"
TOKEN_QUERY_PARAM = "circle-token"
DEFAULT_TIMEOUT = 30.0  # seconds

PROJECT_RESOURCE = "project"
BUILD_CREATED_STATUS = 200
BUILD_CREATED_BODY = "Build created"

# Environment variables backing the CLI flags
TOKEN_ENV_VAR = "CIRCLECI_TOKEN"
CONFIG_ENV_VAR = "CIRCLECI_CONFIG"
CANONICAL_ENV_VAR = "CIRCLECI_CANONICAL"
TRIGGER_ENV_VAR = "CIRCLECI_TRIGGER"
UNFOLLOW_ENV_VAR = "CIRCLECI_UNFOLLOW"
API_URL_ENV_VAR = "CIRCLECI_API_URL"
TIMEOUT_ENV_VAR = "CIRCLECI_TIMEOUT"


# ---------------------------------------------------------------------------
# Data Classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Config:
    """Desired state of a single CircleCI project, as read from the config file."""

    vcs_type: str
    owner: str
    project_name: str
    env_vars: dict[str, str] = field(default_factory=dict)
    ssh_keys: dict[str, str] = field(default_factory=dict)  # name -> private key path


@dataclass(frozen=True)
class Settings:
    """Run settings resolved from CLI flags and the environment."""

    token: str
    config_path: str
    canonical: bool = False
    trigger: bool = False
    unfollow: bool = False
    api_url: str = DEFAULT_API_URL
    timeout: float = DEFAULT_TIMEOUT
    verbose: bool = False
    json_output: bool = False


@dataclass(frozen=True)
class SSHKey:
    hostname: str
    fingerprint: str


@dataclass
class ActionResult:
    """Result of a single provisioning step."""

    project: str
    operation: str
    action: str  # "applied", "removed", "triggered"
    detail: str = ""

    def to_dict(self) -> dict:
        return {
            "project": self.project,
            "operation": self.operation,
            "action": self.action,
            "detail": self.detail,
        }
