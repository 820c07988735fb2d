"""Unit tests for CircleCIProject.fmt_uri()."""

import pytest

from circleci_provision.client import CircleCIClient
from circleci_provision.models import DEFAULT_API_URL
from circleci_provision.project import CircleCIProject


class TestFmtUri:
    """Tests for API URI construction."""

    def test_basic(self):
        """Default base URL, plain segments."""
        project = CircleCIProject("git", "test", "test", "token")
        assert project.fmt_uri("project", "follow") == f"{DEFAULT_API_URL}/project/git/test/test/follow?circle-token=token"

    def test_project_name_with_spaces(self):
        """Spaces in a segment are encoded as %20."""
        project = CircleCIProject("git", "owner", "project name", "token")
        assert (
            project.fmt_uri("resource", "action")
            == "https://circleci.com/api/v1.1/resource/git/owner/project%20name/action?circle-token=token"
        )

    @pytest.mark.parametrize(
        "owner,name,expected_path",
        [
            ("my org", "proj", "my%20org/proj"),
            ("org", "a/b", "org/a%2Fb"),
            ("org", "x?y#z", "org/x%3Fy%23z"),
            ("org", "100%", "org/100%25"),
        ],
    )
    def test_reserved_characters_are_encoded(self, owner, name, expected_path):
        """Reserved characters in identity segments cannot change the path structure."""
        project = CircleCIProject("github", owner, name, "token")
        assert project.fmt_uri("project", "envvar") == (
            f"{DEFAULT_API_URL}/project/github/{expected_path}/envvar?circle-token=token"
        )

    def test_token_is_query_encoded(self):
        """Token with reserved characters is encoded in the query string."""
        project = CircleCIProject("github", "org", "proj", "a&b=c d")
        assert project.fmt_uri("project", "follow").endswith("?circle-token=a%26b%3Dc%20d")

    def test_extra_segments_appended(self):
        """Extra segments (e.g. a variable name) come after the action."""
        project = CircleCIProject("github", "org", "proj", "token")
        assert project.fmt_uri("project", "envvar", "MY VAR") == (
            f"{DEFAULT_API_URL}/project/github/org/proj/envvar/MY%20VAR?circle-token=token"
        )

    def test_uses_client_base_url(self):
        """Base URL comes from the client, without a trailing slash."""
        client = CircleCIClient("https://circleci.example.com/api/v1.1/")
        project = CircleCIProject("github", "org", "proj", "token", client=client)
        assert project.fmt_uri("project", "build") == (
            "https://circleci.example.com/api/v1.1/project/github/org/proj/build?circle-token=token"
        )


class TestFullName:
    def test_full_name(self):
        assert CircleCIProject("github", "myorg", "myproject", "token").full_name == "myorg/myproject"
