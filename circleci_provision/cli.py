"""CLI entry point for circleci-provision."""

from __future__ import annotations

import argparse
import os
import sys
from typing import Mapping, Sequence

from circleci_provision.client import CircleCIClient
from circleci_provision.config import load_config
from circleci_provision.errors import ConfigError, ProvisionError
from circleci_provision.logging_utils import set_project_context, setup_logging
from circleci_provision.models import (
    API_URL_ENV_VAR,
    CANONICAL_ENV_VAR,
    CONFIG_ENV_VAR,
    DEFAULT_API_URL,
    DEFAULT_TIMEOUT,
    TIMEOUT_ENV_VAR,
    TOKEN_ENV_VAR,
    TRIGGER_ENV_VAR,
    UNFOLLOW_ENV_VAR,
    Settings,
)
from circleci_provision.project import CircleCIProject
from circleci_provision.provisioner import Provisioner

_TRUE_VALUES = {"1", "t", "T", "TRUE", "true", "True"}


def env_bool(environ: Mapping[str, str], name: str) -> bool:
    """Parse a boolean environment variable; unset or unrecognised values are False."""
    return environ.get(name, "") in _TRUE_VALUES


def positive_float(value: str) -> float:
    """argparse type for timeouts. Also applied to a string default taken from the environment."""
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"must be a number, got {value!r}") from None
    if not number > 0:
        raise argparse.ArgumentTypeError(f"must be greater than 0, got {value!r}")
    return number


def build_parser(environ: Mapping[str, str] | None = None) -> argparse.ArgumentParser:
    """Build the argument parser. Defaults come from the environment so flags take precedence."""
    environ = os.environ if environ is None else environ

    parser = argparse.ArgumentParser(
        prog="circleci-provision",
        description="Provision a CircleCI project from a declarative YAML config.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Follows the project described in the config, sets its environment variables,
adds its ssh keys and optionally triggers a build.

Environment (overridden by the matching flag):
    {TOKEN_ENV_VAR:<19} - CircleCI API token (required)
    {CONFIG_ENV_VAR:<19} - Path to the provisioning config (required)
    {CANONICAL_ENV_VAR:<19} - Treat the config as the complete project state
    {TRIGGER_ENV_VAR:<19} - Trigger a build once the project is set up
    {UNFOLLOW_ENV_VAR:<19} - Unfollow the project instead of provisioning it
    {API_URL_ENV_VAR:<19} - API base URL (default: {DEFAULT_API_URL})
    {TIMEOUT_ENV_VAR:<19} - Request timeout in seconds (default: {DEFAULT_TIMEOUT:g})

Example config:
    vcsType: github
    owner: myorg
    projectName: myproject
    envVars:
      DEPLOY_ENV: staging
    sshKeys:
      deploy.example.com: ./keys/deploy_rsa

Examples:
    circleci-provision --token "$TOKEN" --config project.yml
    circleci-provision --config project.yml --canonical --trigger
    circleci-provision --config project.yml --unfollow
""",
    )
    parser.add_argument("--token", default=environ.get(TOKEN_ENV_VAR), help="CircleCI API token")
    parser.add_argument("--config", default=environ.get(CONFIG_ENV_VAR), help="CircleCI provisioning config")
    parser.add_argument(
        "--canonical",
        action=argparse.BooleanOptionalAction,
        default=env_bool(environ, CANONICAL_ENV_VAR),
        help="Project should be exactly as described in the config. "
        "WARNING: This removes environment variables and ssh keys not listed in the config",
    )
    parser.add_argument(
        "--trigger",
        action=argparse.BooleanOptionalAction,
        default=env_bool(environ, TRIGGER_ENV_VAR),
        help="Trigger a build of the project once it is set up",
    )
    parser.add_argument(
        "--unfollow",
        action=argparse.BooleanOptionalAction,
        default=env_bool(environ, UNFOLLOW_ENV_VAR),
        help="Unfollow the project described in the config",
    )
    parser.add_argument(
        "--api-url",
        default=environ.get(API_URL_ENV_VAR) or DEFAULT_API_URL,
        help=f"CircleCI API base URL (default: {DEFAULT_API_URL})",
    )
    parser.add_argument(
        "--timeout",
        type=positive_float,
        # A string default is only converted when the flag is absent
        default=environ.get(TIMEOUT_ENV_VAR) or DEFAULT_TIMEOUT,
        help=f"Request timeout in seconds (default: {DEFAULT_TIMEOUT:g})",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--json", action="store_true", dest="json_output", help="Output results as JSON lines (to stderr)"
    )
    return parser


def build_settings(args: argparse.Namespace) -> Settings:
    return Settings(
        token=args.token or "",
        config_path=args.config or "",
        canonical=args.canonical,
        trigger=args.trigger,
        unfollow=args.unfollow,
        api_url=args.api_url,
        timeout=args.timeout,
        verbose=args.verbose,
        json_output=args.json_output,
    )


def run(settings: Settings) -> int:
    """Provision according to already-resolved settings. Returns the process exit code."""
    logger = setup_logging(json_mode=settings.json_output, verbose=settings.verbose)

    if not settings.token:
        logger.error(f"--token or {TOKEN_ENV_VAR} is required")
        return 1
    if not settings.config_path:
        logger.error(f"--config or {CONFIG_ENV_VAR} is required")
        return 1

    try:
        config = load_config(settings.config_path)
    except ConfigError as e:
        logger.error(f"Could not read config file {settings.config_path}: {e}")
        return 1

    client = CircleCIClient(base_url=settings.api_url, timeout=settings.timeout)
    project = CircleCIProject(config.vcs_type, config.owner, config.project_name, settings.token, client=client)
    provisioner = Provisioner(project, config, canonical=settings.canonical, trigger=settings.trigger)
    set_project_context(logger, project.full_name)

    try:
        if settings.unfollow:
            provisioner.unfollow()
        else:
            provisioner.run()
    except ProvisionError as e:
        logger.error(f"Could not provision {project.full_name}: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130

    logger.info(f"Done: {len(provisioner.results)} steps completed for {project.full_name}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    return run(build_settings(args))


if __name__ == "__main__":
    sys.exit(main())
