"""Exception hierarchy for circleci-provision."""

from __future__ import annotations


class ProvisionError(Exception):
    pass


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class ConfigError(ProvisionError):
    pass


class ConfigReadError(ConfigError):
    def __init__(self, path: str, cause: Exception):
        super().__init__(f"could not read config file {path}: {cause}")
        self.path = path
        self.cause = cause


class ConfigParseError(ConfigError):
    def __init__(self, path: str, reason: str):
        super().__init__(f"could not parse config file {path}: {reason}")
        self.path = path
        self.reason = reason


class SSHKeyReadError(ProvisionError):
    def __init__(self, name: str, path: str, cause: Exception):
        super().__init__(f"could not read ssh key {name} from {path}: {cause}")
        self.name = name
        self.path = path
        self.cause = cause


# ---------------------------------------------------------------------------
# Transport
# ---------------------------------------------------------------------------


class RequestError(ProvisionError):
    """The request never produced a response (DNS, connect, timeout...)."""

    def __init__(self, method: str, path: str, cause: Exception):
        super().__init__(f"{method} {path} failed: {cause}")
        self.method = method
        self.path = path
        self.cause = cause


class UnexpectedStatusError(ProvisionError):
    def __init__(self, expected: int, actual: int, body: str = ""):
        message = f"expected status {expected}, found {actual}"
        if body:
            message += f": {body[:200]}"
        super().__init__(message)
        self.expected = expected
        self.status_code = actual
        self.body = body


class ResponseParseError(ProvisionError):
    def __init__(self, reason: str, status_code: int | None = None):
        super().__init__(f"unexpected response body: {reason}")
        self.reason = reason
        self.status_code = status_code


# ---------------------------------------------------------------------------
# Project operations
# ---------------------------------------------------------------------------


class ProjectOperationError(ProvisionError):
    """Base for errors raised by a single project operation.

    ``cause`` is the underlying transport, status, parse or nested operation
    error; ``status_code`` is the HTTP status when a response was received.
    """

    operation = "operation"

    def __init__(self, project: str, subject: str = "", cause: Exception | None = None):
        message = f"{self.operation} failed for project {project}"
        if subject:
            message = f"{self.operation} of {subject} failed for project {project}"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)
        self.project = project
        self.subject = subject
        self.cause = cause
        self.status_code = getattr(cause, "status_code", None)


class FollowError(ProjectOperationError):
    operation = "follow"


class UnfollowError(ProjectOperationError):
    operation = "unfollow"


class EnvSetError(ProjectOperationError):
    operation = "set environment variable"


class EnvGetError(ProjectOperationError):
    operation = "get environment variable"


class EnvListError(ProjectOperationError):
    operation = "list environment variables"


class EnvDeleteError(ProjectOperationError):
    operation = "delete environment variable"


class ClearEnvError(ProjectOperationError):
    operation = "clear environment variables"


class SSHKeyAddError(ProjectOperationError):
    operation = "add ssh key"


class SSHKeyListError(ProjectOperationError):
    operation = "list ssh keys"


class SSHKeyFingerprintError(ProjectOperationError):
    operation = "look up ssh key fingerprint"


class SSHKeyRemoveError(ProjectOperationError):
    operation = "remove ssh key"


class ClearSSHKeysError(ProjectOperationError):
    operation = "clear ssh keys"


class TriggerError(ProjectOperationError):
    operation = "trigger build"
