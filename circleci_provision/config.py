"""Loading of the declarative project config file."""

from __future__ import annotations

import logging
from typing import Any

import yaml

from circleci_provision.errors import ConfigParseError, ConfigReadError
from circleci_provision.models import Config

logger = logging.getLogger("circleci-provision")

REQUIRED_FIELDS = {
    "vcsType": "vcs_type",
    "owner": "owner",
    "projectName": "project_name",
}


def load_config(path: str) -> Config:
    """
    Read a YAML config file describing a CircleCI project.

    Expected format::

        vcsType: github
        owner: myorg
        projectName: myproject
        envVars:
          FOO: bar
        sshKeys:
          deploy.example.com: /path/to/id_rsa

    Missing ``envVars`` / ``sshKeys`` are treated as empty.

    Raises:
        ConfigReadError: the file could not be opened or read
        ConfigParseError: the content is not valid YAML or does not match the format above
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
    except OSError as e:
        raise ConfigReadError(path, e) from e
    except UnicodeDecodeError as e:
        raise ConfigParseError(path, f"not valid UTF-8: {e}") from e

    try:
        document = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigParseError(path, f"invalid YAML: {e}") from e

    if not isinstance(document, dict):
        raise ConfigParseError(path, "expected a mapping at the top level")

    fields: dict[str, Any] = {}
    for key, attr in REQUIRED_FIELDS.items():
        value = document.get(key)
        if not isinstance(value, str) or not value.strip():
            raise ConfigParseError(path, f"'{key}' is required and must be a non-empty string")
        fields[attr] = value.strip()

    fields["env_vars"] = _string_mapping(path, document, "envVars")
    fields["ssh_keys"] = _string_mapping(path, document, "sshKeys")

    config = Config(**fields)
    logger.debug(
        f"Loaded config for {config.owner}/{config.project_name}: "
        f"{len(config.env_vars)} env vars, {len(config.ssh_keys)} ssh keys"
    )
    return config


def _string_mapping(path: str, document: dict, key: str) -> dict[str, str]:
    """Validate an optional name -> scalar mapping, stringifying scalar values."""
    raw = document.get(key)
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigParseError(path, f"'{key}' must be a mapping")

    result = {}
    for name, value in raw.items():
        if not isinstance(name, str):
            raise ConfigParseError(path, f"'{key}' has a non-string key: {name!r}")
        if isinstance(value, bool):
            result[name] = "true" if value else "false"
        elif isinstance(value, (str, int, float)):
            result[name] = str(value)
        else:
            raise ConfigParseError(path, f"'{key}.{name}' must be a scalar value")
    return result
