"""
Unit tests for the jenkins-hooks-admin CLI.
"""

import json

import pytest
from click.testing import CliRunner

from hooks_admin.cli import cli


@pytest.fixture
def runner():
    return CliRunner()


def invoke(runner, config_path, *args):
    return runner.invoke(cli, ["--config", str(config_path), *args])


class TestCheck:
    """Test suite for the check command."""

    def test_valid_config(self, runner, config_path):
        result = invoke(runner, config_path, "check")

        assert result.exit_code == 0
        assert "✓ Configuration valid" in result.output
        assert "https://jenkins.example.com:8443" in result.output
        assert "Folders:  2" in result.output
        assert "Projects: 3" in result.output
        assert "Jobs:     5" in result.output
        assert "TLS" not in result.output

    def test_invalid_config(self, runner, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text('[jenkins]\nurl = ""\n')

        result = invoke(runner, path, "check")

        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_missing_config(self, runner, tmp_path):
        result = invoke(runner, tmp_path / "missing.toml", "check")

        assert result.exit_code == 1
        assert "Failed to read config file" in result.output

    def test_tls_warning(self, runner, tmp_path, config_path):
        path = tmp_path / "config.toml"
        path.write_text(
            config_path.read_text().replace(
                'username = "hooks-bot"', 'username = "hooks-bot"\nverify_tls = false'
            )
        )

        result = invoke(runner, path, "check")

        assert result.exit_code == 0
        assert "TLS certificate verification is disabled" in result.output

    def test_config_from_env(self, runner, config_path):
        result = runner.invoke(
            cli, ["check"], env={"JENKINS_HOOKS_CONFIG": str(config_path)}
        )

        assert result.exit_code == 0


class TestList:
    """Test suite for the list command."""

    def test_table_output(self, runner, config_path):
        result = invoke(runner, config_path, "list")

        assert result.exit_code == 0
        assert "FOLDER" in result.output
        assert "build, deploy" in result.output
        assert "(root)" in result.output

    def test_json_output(self, runner, config_path):
        result = invoke(runner, config_path, "list", "--json")

        assert result.exit_code == 0
        rows = json.loads(result.output)
        assert rows[0] == {
            "folder": "team-a",
            "project": "service",
            "branch": "main",
            "jobs": ["build", "deploy"],
        }
        assert {"folder": None, "project": "legacy", "branch": "master",
                "jobs": ["legacy-build"]} in rows


class TestResolve:
    """Test suite for the resolve command."""

    def test_matching_push(self, runner, config_path):
        result = invoke(runner, config_path, "resolve", "service", "refs/heads/main")

        assert result.exit_code == 0
        assert "service/main" in result.output
        lines = [line.strip() for line in result.output.splitlines()]
        assert lines[1:] == [
            "GET https://jenkins.example.com:8443/job/team-a/build/buildWithParameters",
            "GET https://jenkins.example.com:8443/job/team-a/deploy/buildWithParameters",
        ]
        assert "secret-token" not in result.output

    def test_no_match(self, runner, config_path):
        result = invoke(runner, config_path, "resolve", "service", "refs/heads/dev")

        assert result.exit_code == 0
        assert "No jobs for service/dev" in result.output

    def test_json_output(self, runner, config_path):
        result = invoke(
            runner, config_path, "resolve", "service", "refs/heads/feature/x", "--json"
        )

        data = json.loads(result.output)
        assert data["branch"] == "feature/x"
        assert data["jobs"] == [
            {
                "folder": "team-a",
                "job": "build",
                "url": "https://jenkins.example.com:8443/job/team-a/build/buildWithParameters",
            }
        ]
