"""Shared test fixtures for circleci-provision tests."""

import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from circleci_provision.client import CircleCIClient
from circleci_provision.models import Config
from circleci_provision.project import CircleCIProject, Project

# Constants for use in tests - pytest makes conftest.py fixtures available,
# but these constants need to be imported directly from tests
MOCK_API_URL = "https://circleci.example.com/api/v1.1"
MOCK_PROJECT_URL = f"{MOCK_API_URL}/project/github/myorg/myproject"


@pytest.fixture
def mock_client():
    """CircleCIClient pointing at mock server."""
    return CircleCIClient(MOCK_API_URL, timeout=5)


@pytest.fixture
def project(mock_client):
    """CircleCIProject for github/myorg/myproject on the mock server."""
    return CircleCIProject("github", "myorg", "myproject", "test-token", client=mock_client)


@pytest.fixture
def sample_config() -> Config:
    return Config(
        vcs_type="github",
        owner="myorg",
        project_name="myproject",
        env_vars={"FOO": "bar", "DEPLOY_ENV": "staging"},
        ssh_keys={},
    )


@pytest.fixture
def write_config(tmp_path):
    """Write YAML text to a config file and return its path."""

    def _write(text: str, name: str = "project.yml") -> str:
        path = tmp_path / name
        path.write_text(text)
        return str(path)

    return _write


class FakeProject(Project):
    """In-memory Project double that records calls in order."""

    def __init__(self, full_name="myorg/myproject", fail_on=None, error=None):
        self._full_name = full_name
        self.calls = []
        self.fail_on = fail_on
        self.error = error

    @property
    def full_name(self):
        return self._full_name

    def _call(self, name, *args):
        self.calls.append((name, *args))
        if name == self.fail_on:
            raise self.error

    def follow(self):
        self._call("follow")

    def unfollow(self):
        self._call("unfollow")

    def set_env(self, name, value):
        self._call("set_env", name, value)

    def get_env(self, name):
        self._call("get_env", name)
        return ""

    def get_envs(self):
        self._call("get_envs")
        return {}

    def delete_env(self, name):
        self._call("delete_env", name)

    def clear_env(self):
        self._call("clear_env")

    def add_ssh_key(self, name, private_key):
        self._call("add_ssh_key", name, private_key)

    def list_ssh_keys(self):
        self._call("list_ssh_keys")
        return []

    def get_ssh_key_fingerprint(self, name):
        self._call("get_ssh_key_fingerprint", name)
        return ""

    def remove_ssh_key(self, name):
        self._call("remove_ssh_key", name)

    def clear_ssh_keys(self):
        self._call("clear_ssh_keys")

    def trigger(self):
        self._call("trigger")


@pytest.fixture
def fake_project():
    return FakeProject()
