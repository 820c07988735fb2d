"""Applies a config to a project in a fixed, fail-fast order."""

from __future__ import annotations

import logging

from circleci_provision.errors import SSHKeyReadError
from circleci_provision.models import ActionResult, Config
from circleci_provision.project import Project


def read_ssh_key(name: str, path: str) -> str:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise SSHKeyReadError(name, path, e) from e


class Provisioner:
    """
    Drives a Project towards the state described by a Config.

    Steps run in order and the first failure propagates to the caller:
    follow, (canonical) clear env vars and ssh keys, set env vars,
    add ssh keys, (optional) trigger a build.
    """

    def __init__(self, project: Project, config: Config, canonical: bool = False, trigger: bool = False):
        self.project = project
        self.config = config
        self.canonical = canonical
        self.should_trigger = trigger
        self.logger = logging.getLogger("circleci-provision")
        self.results: list[ActionResult] = []

    def run(self) -> list[ActionResult]:
        name = self.project.full_name

        self.logger.info(f"Following {name}")
        self.project.follow()
        self._record(ActionResult(name, "follow", "applied"))

        if self.canonical:
            self.logger.info(f"Project config is canonical, removing all environment variables and ssh keys from {name}")
            self.project.clear_env()
            self._record(ActionResult(name, "clear-env", "removed"))
            self.project.clear_ssh_keys()
            self._record(ActionResult(name, "clear-ssh-keys", "removed"))

        for env_name, value in self.config.env_vars.items():
            self.logger.info(f"Setting environment variable {env_name} for project {name}")
            self.project.set_env(env_name, value)
            self._record(ActionResult(name, "set-env", "applied", detail=env_name))

        for key_name, path in self.config.ssh_keys.items():
            self.logger.info(f"Adding ssh key {key_name} from {path} for project {name}")
            self.project.add_ssh_key(key_name, read_ssh_key(key_name, path))
            self._record(ActionResult(name, "add-ssh-key", "applied", detail=key_name))

        if self.should_trigger:
            self.logger.info(f"Triggering build of {name}")
            self.project.trigger()
            self._record(ActionResult(name, "trigger", "triggered"))

        return self.results

    def unfollow(self) -> list[ActionResult]:
        name = self.project.full_name
        self.logger.info(f"Unfollowing {name}")
        self.project.unfollow()
        self._record(ActionResult(name, "unfollow", "removed"))
        return self.results

    def _record(self, result: ActionResult) -> ActionResult:
        self.results.append(result)
        icon = {
            "applied": "\u2713",
            "removed": "\u2212",
            "triggered": "\u25b6",
        }.get(result.action, "?")

        handler = self.logger.handlers[0] if self.logger.handlers else None
        if handler and getattr(handler.formatter, "json_mode", False):
            record = self.logger.makeRecord("circleci-provision", logging.INFO, "", 0, "", (), None)
            record.action_result = result
            self.logger.handle(record)
        else:
            self.logger.info(
                f"{icon} {result.project}: {result.operation} \u2192 {result.action}"
                f"{' (' + result.detail + ')' if result.detail else ''}"
            )
        return result
