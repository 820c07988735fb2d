"""CircleCI project client: one method per API action."""

from __future__ import annotations

import urllib.parse
from abc import ABC, abstractmethod
from http import HTTPStatus
from typing import Any

import requests

from circleci_provision.client import CircleCIClient
from circleci_provision.errors import (
    ClearEnvError,
    ClearSSHKeysError,
    EnvDeleteError,
    EnvGetError,
    EnvListError,
    EnvSetError,
    FollowError,
    RequestError,
    ResponseParseError,
    SSHKeyAddError,
    SSHKeyFingerprintError,
    SSHKeyListError,
    SSHKeyRemoveError,
    TriggerError,
    UnexpectedStatusError,
    UnfollowError,
)
from circleci_provision.models import (
    BUILD_CREATED_BODY,
    BUILD_CREATED_STATUS,
    PROJECT_RESOURCE,
    TOKEN_QUERY_PARAM,
    SSHKey,
)

# Failures a single request can produce before the operation wraps them
_REQUEST_FAILURES = (RequestError, UnexpectedStatusError, ResponseParseError)


# ---------------------------------------------------------------------------
# Project interface
# ---------------------------------------------------------------------------


class Project(ABC):
    """Capabilities the provisioner needs from a CI project."""

    @property
    @abstractmethod
    def full_name(self) -> str: ...

    @abstractmethod
    def follow(self) -> None: ...

    @abstractmethod
    def unfollow(self) -> None: ...

    @abstractmethod
    def set_env(self, name: str, value: str) -> None: ...

    @abstractmethod
    def get_env(self, name: str) -> str: ...

    @abstractmethod
    def get_envs(self) -> dict[str, str]: ...

    @abstractmethod
    def delete_env(self, name: str) -> None: ...

    @abstractmethod
    def clear_env(self) -> None: ...

    @abstractmethod
    def add_ssh_key(self, name: str, private_key: str) -> None: ...

    @abstractmethod
    def list_ssh_keys(self) -> list[SSHKey]: ...

    @abstractmethod
    def get_ssh_key_fingerprint(self, name: str) -> str: ...

    @abstractmethod
    def remove_ssh_key(self, name: str) -> None: ...

    @abstractmethod
    def clear_ssh_keys(self) -> None: ...

    @abstractmethod
    def trigger(self) -> None: ...


# ---------------------------------------------------------------------------
# Response helpers
# ---------------------------------------------------------------------------


def _expect_status(resp: requests.Response, expected: int) -> None:
    if resp.status_code != expected:
        raise UnexpectedStatusError(int(expected), resp.status_code, resp.text)


def _json_body(resp: requests.Response) -> Any:
    try:
        return resp.json()
    except ValueError as e:
        raise ResponseParseError(f"invalid JSON ({e})", resp.status_code) from e


def _json_object(resp: requests.Response) -> dict:
    body = _json_body(resp)
    if not isinstance(body, dict):
        raise ResponseParseError(f"expected a JSON object, found {type(body).__name__}", resp.status_code)
    return body


# ---------------------------------------------------------------------------
# CircleCI implementation
# ---------------------------------------------------------------------------


class CircleCIProject(Project):
    """A single CircleCI project, addressed by VCS type, owner and name."""

    def __init__(
        self,
        vcs_type: str,
        owner: str,
        project_name: str,
        token: str,
        client: CircleCIClient | None = None,
    ):
        self.vcs_type = vcs_type
        self.owner = owner
        self.project_name = project_name
        self.token = token
        self.client = client or CircleCIClient()

    def __repr__(self) -> str:
        return f"CircleCIProject({self.vcs_type!r}, {self.owner!r}, {self.project_name!r})"

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.project_name}"

    def fmt_uri(self, resource: str, action: str, *extra: str) -> str:
        """
        Build an authenticated API URI for this project.

        Path is ``{base}/{resource}/{vcs}/{owner}/{name}/{action}[/{extra}...]``;
        every segment is percent-encoded on its own so reserved characters
        (including ``/``) cannot change the path structure.
        """
        segments = [resource, self.vcs_type, self.owner, self.project_name, action, *extra]
        path = "/".join(urllib.parse.quote(segment, safe="") for segment in segments)
        query = urllib.parse.urlencode({TOKEN_QUERY_PARAM: self.token}, quote_via=urllib.parse.quote)
        return f"{self.client.base_url}/{path}?{query}"

    # -- Following --

    def follow(self) -> None:
        try:
            resp = self.client.post(self.fmt_uri(PROJECT_RESOURCE, "follow"))
            _expect_status(resp, HTTPStatus.CREATED)
        except _REQUEST_FAILURES as e:
            raise FollowError(self.full_name, cause=e) from e

    def unfollow(self) -> None:
        try:
            resp = self.client.post(self.fmt_uri(PROJECT_RESOURCE, "unfollow"))
            _expect_status(resp, HTTPStatus.OK)
        except _REQUEST_FAILURES as e:
            raise UnfollowError(self.full_name, cause=e) from e

    # -- Environment variables --

    def set_env(self, name: str, value: str) -> None:
        try:
            resp = self.client.post(self.fmt_uri(PROJECT_RESOURCE, "envvar"), data={"name": name, "value": value})
            _expect_status(resp, HTTPStatus.CREATED)
        except _REQUEST_FAILURES as e:
            raise EnvSetError(self.full_name, name, e) from e

    def get_env(self, name: str) -> str:
        """Return the value of a variable. CircleCI masks values, so this is usually ``xxxx`` + suffix."""
        try:
            resp = self.client.get(self.fmt_uri(PROJECT_RESOURCE, "envvar", name))
            _expect_status(resp, HTTPStatus.OK)
            body = _json_object(resp)
            value = body.get("value")
            if not isinstance(value, str):
                raise ResponseParseError("missing string 'value'", resp.status_code)
        except _REQUEST_FAILURES as e:
            raise EnvGetError(self.full_name, name, e) from e
        return value

    def get_envs(self) -> dict[str, str]:
        try:
            resp = self.client.get(self.fmt_uri(PROJECT_RESOURCE, "envvar"))
            _expect_status(resp, HTTPStatus.OK)
            records = _json_body(resp)
            if not isinstance(records, list):
                raise ResponseParseError(f"expected a JSON list, found {type(records).__name__}", resp.status_code)
            env_vars = {}
            for record in records:
                if not isinstance(record, dict) or not isinstance(record.get("name"), str):
                    raise ResponseParseError(f"malformed environment variable record: {record!r}", resp.status_code)
                value = record.get("value")
                env_vars[record["name"]] = "" if value is None else str(value)
        except _REQUEST_FAILURES as e:
            raise EnvListError(self.full_name, cause=e) from e
        return env_vars

    def delete_env(self, name: str) -> None:
        try:
            resp = self.client.delete(self.fmt_uri(PROJECT_RESOURCE, "envvar", name))
            _expect_status(resp, HTTPStatus.OK)
            message = _json_object(resp).get("message")
            if message != "ok":
                raise ResponseParseError(f"expected message 'ok' but found {message!r}", resp.status_code)
        except _REQUEST_FAILURES as e:
            raise EnvDeleteError(self.full_name, name, e) from e

    def clear_env(self) -> None:
        """Delete every environment variable, stopping at the first failure."""
        try:
            names = list(self.get_envs())
            for name in names:
                self.delete_env(name)
        except (EnvListError, EnvDeleteError) as e:
            raise ClearEnvError(self.full_name, cause=e) from e

    # -- SSH keys --

    def add_ssh_key(self, name: str, private_key: str) -> None:
        try:
            resp = self.client.post(
                self.fmt_uri(PROJECT_RESOURCE, "ssh-key"),
                data={"hostname": name, "private_key": private_key},
            )
            _expect_status(resp, HTTPStatus.CREATED)
        except _REQUEST_FAILURES as e:
            raise SSHKeyAddError(self.full_name, name, e) from e

    def list_ssh_keys(self) -> list[SSHKey]:
        """List keys from the project settings document."""
        try:
            resp = self.client.get(self.fmt_uri(PROJECT_RESOURCE, "settings"))
            _expect_status(resp, HTTPStatus.OK)
            records = _json_object(resp).get("ssh_keys") or []
            if not isinstance(records, list):
                raise ResponseParseError("'ssh_keys' is not a list", resp.status_code)
            keys = []
            for record in records:
                if not isinstance(record, dict) or not isinstance(record.get("fingerprint"), str):
                    raise ResponseParseError(f"malformed ssh key record: {record!r}", resp.status_code)
                keys.append(SSHKey(hostname=record.get("hostname") or "", fingerprint=record["fingerprint"]))
        except _REQUEST_FAILURES as e:
            raise SSHKeyListError(self.full_name, cause=e) from e
        return keys

    def get_ssh_key_fingerprint(self, name: str) -> str:
        try:
            keys = self.list_ssh_keys()
        except SSHKeyListError as e:
            raise SSHKeyFingerprintError(self.full_name, name, e) from e
        for key in keys:
            if key.hostname == name:
                return key.fingerprint
        raise SSHKeyFingerprintError(self.full_name, name, LookupError(f"no ssh key named {name}"))

    def remove_ssh_key(self, name: str) -> None:
        try:
            fingerprint = self.get_ssh_key_fingerprint(name)
        except SSHKeyFingerprintError as e:
            raise SSHKeyRemoveError(self.full_name, name, e) from e
        self._delete_ssh_key(SSHKey(hostname=name, fingerprint=fingerprint))

    def _delete_ssh_key(self, key: SSHKey) -> None:
        try:
            resp = self.client.delete(
                self.fmt_uri(PROJECT_RESOURCE, "ssh-key"),
                data={"fingerprint": key.fingerprint, "hostname": key.hostname},
            )
            _expect_status(resp, HTTPStatus.OK)
        except _REQUEST_FAILURES as e:
            raise SSHKeyRemoveError(self.full_name, key.hostname or key.fingerprint, e) from e

    def clear_ssh_keys(self) -> None:
        """Remove every SSH key, stopping at the first failure."""
        try:
            for key in self.list_ssh_keys():
                self._delete_ssh_key(key)
        except (SSHKeyListError, SSHKeyRemoveError) as e:
            raise ClearSSHKeysError(self.full_name, cause=e) from e

    # -- Builds --

    def trigger(self) -> None:
        try:
            resp = self.client.post(self.fmt_uri(PROJECT_RESOURCE, "build"))
            _expect_status(resp, HTTPStatus.CREATED)
            message = _json_object(resp)
            if message.get("status") != BUILD_CREATED_STATUS:
                raise ResponseParseError(
                    f"expected message status {BUILD_CREATED_STATUS} but found {message.get('status')!r}",
                    resp.status_code,
                )
            if message.get("body") != BUILD_CREATED_BODY:
                raise ResponseParseError(
                    f"expected message body {BUILD_CREATED_BODY!r} but found {message.get('body')!r}",
                    resp.status_code,
                )
        except _REQUEST_FAILURES as e:
            raise TriggerError(self.full_name, cause=e) from e
