"""
circleci-provision: Provision a CircleCI project from a declarative config file.

Follows the project, sets its environment variables, adds its SSH keys and
optionally triggers a build, all through the CircleCI v1.1 REST API.

Environment:
    CIRCLECI_TOKEN  - CircleCI API token (required unless --token is given)
    CIRCLECI_CONFIG - Path to the provisioning config (required unless --config is given)
"""

from circleci_provision.cli import main
from circleci_provision.client import CircleCIClient
from circleci_provision.config import load_config
from circleci_provision.models import DEFAULT_API_URL, Config, Settings
from circleci_provision.project import CircleCIProject, Project
from circleci_provision.provisioner import Provisioner

__version__ = "0.1.0"
__all__ = [
    "main",
    "__version__",
    "CircleCIClient",
    "CircleCIProject",
    "Config",
    "DEFAULT_API_URL",
    "Project",
    "Provisioner",
    "Settings",
    "load_config",
]
