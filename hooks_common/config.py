"""
Configuration loading for the webhook relay.

The configuration is a TOML document with a [jenkins] connection section and
a job table. Two job table layouts are accepted:

    [folders.<folder>.<project>]
    <branch> = ["job-a", "job-b"]

and the older flat layout, where jobs live at the top level of Jenkins:

    [repos.<project>.branch_job_mapping]
    <branch> = "job"

Both are loaded into the same JobMapping. Any problem with the file raises
ConfigError; the service must not start without a valid configuration.

The default file is config.toml next to the running program (sys.argv[0]).
Under "python -m hooks_server" that program is the package's own __main__.py,
so the default then points inside the installed package; pass --config or
set JENKINS_HOOKS_CONFIG in that case.
"""

import os
import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Any

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    StringConstraints,
    ValidationError,
    model_validator,
)

from .models import CIConnection, JobMapping

CONFIG_FILE_NAME = "config.toml"


class ConfigError(Exception):
    """Raised when the configuration file is unreadable or invalid."""


@dataclass(frozen=True)
class RelayConfig:
    """Validated, immutable configuration handed to the application."""

    connection: CIConnection
    mapping: JobMapping


def _not_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be empty")
    return value


def _latin1(value: str) -> str:
    # requests encodes basic-auth credentials as latin-1
    try:
        value.encode("latin-1")
    except UnicodeEncodeError as e:
        raise ValueError("must only contain latin-1 characters") from e
    return value


def _as_job_list(value: Any) -> Any:
    """Allow a single job name where a list is expected."""
    if isinstance(value, str):
        return [value]
    return value


Name = Annotated[str, AfterValidator(_not_blank)]
Setting = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
Credential = Annotated[Setting, AfterValidator(_latin1)]
JobList = Annotated[list[Name], BeforeValidator(_as_job_list), Field(min_length=1)]
BranchTable = Annotated[dict[Name, JobList], Field(min_length=1)]
ProjectTable = Annotated[dict[Name, BranchTable], Field(min_length=1)]


class JenkinsSection(BaseModel):
    """The [jenkins] section: where and as whom to trigger builds."""

    model_config = ConfigDict(strict=True, extra="ignore")

    url: Setting = Field(description="Scheme and host of the Jenkins server")
    port: int = Field(ge=1, le=65535, description="Jenkins port")
    api: Credential = Field(description="API token, also sent as the token parameter")
    username: Credential = Field(description="User for basic auth")
    verify_tls: bool = Field(default=True, description="Verify the server certificate")


class FlatRepo(BaseModel):
    """A [repos.<name>] entry of the flat layout: one job per branch."""

    model_config = ConfigDict(strict=True, extra="ignore")

    branch_job_mapping: Annotated[dict[Name, Name], Field(min_length=1)]


class ConfigFile(BaseModel):
    """Root of the TOML document."""

    model_config = ConfigDict(strict=True, extra="ignore")

    jenkins: JenkinsSection
    folders: dict[Name, ProjectTable] = Field(default_factory=dict)
    repos: dict[Name, FlatRepo] | None = None

    @model_validator(mode="after")
    def check_projects(self) -> "ConfigFile":
        """Require at least one project and at most one owner per project."""
        if self.repos is not None and not self.repos:
            raise ValueError("The 'repos' field must not be empty")

        owners: list[tuple[str | None, str]] = [
            (folder, project)
            for folder, projects in self.folders.items()
            for project in projects
        ]
        owners.extend((None, repo) for repo in self.repos or {})

        if not owners:
            raise ValueError(
                "The configuration must define at least one project in 'folders' or 'repos'"
            )

        seen: dict[str, str | None] = {}
        for folder, project in owners:
            if project in seen:
                first = seen[project] or "(root)"
                raise ValueError(
                    f"Project '{project}' is configured in both "
                    f"'{first}' and '{folder or '(root)'}'"
                )
            seen[project] = folder
        return self

    def to_relay_config(self) -> RelayConfig:
        jenkins = self.jenkins
        connection = CIConnection(
            url=jenkins.url,
            port=jenkins.port,
            api_token=jenkins.api,
            username=jenkins.username,
            verify_tls=jenkins.verify_tls,
        )

        table: dict[str | None, dict[str, dict[str, tuple[str, ...]]]] = {
            folder: {
                project: {branch: tuple(jobs) for branch, jobs in branches.items()}
                for project, branches in projects.items()
            }
            for folder, projects in self.folders.items()
        }
        if self.repos:
            table[None] = {
                name: {branch: (job,) for branch, job in repo.branch_job_mapping.items()}
                for name, repo in self.repos.items()
            }

        return RelayConfig(connection=connection, mapping=JobMapping(table))


def get_default_config_path() -> Path:
    """
    Get the configuration path from environment or use the default.

    Returns:
        Path to the TOML configuration file

    Environment variables:
    - JENKINS_HOOKS_CONFIG: Custom configuration path
    """
    env_path = os.environ.get("JENKINS_HOOKS_CONFIG")
    if env_path:
        return Path(env_path)
    return Path(sys.argv[0]).resolve().parent / CONFIG_FILE_NAME


def load_config(path: Path | str | None = None) -> RelayConfig:
    """
    Read, parse and validate the configuration file.

    Args:
        path: Path to the TOML file (default: get_default_config_path())

    Returns:
        RelayConfig with the CI connection and job mapping

    Raises:
        ConfigError: If the file cannot be read, is not TOML, or is invalid
    """
    config_path = Path(path) if path is not None else get_default_config_path()

    try:
        content = config_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Failed to read config file at {config_path}: {e}") from e

    try:
        data = tomllib.loads(content)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Failed to parse config file {config_path} as TOML: {e}") from e

    return parse_config(data)


def parse_config(data: dict[str, Any]) -> RelayConfig:
    """
    Validate an already-parsed configuration document.

    Args:
        data: Parsed TOML document

    Returns:
        RelayConfig with the CI connection and job mapping

    Raises:
        ConfigError: If any required field is missing, empty, or mistyped
    """
    try:
        config_file = ConfigFile.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {_describe(e)}") from e
    return config_file.to_relay_config()


def _describe(error: ValidationError) -> str:
    """Render validation errors as 'jenkins.port: message' entries."""
    parts = []
    for detail in error.errors():
        location = ".".join(str(item) for item in detail["loc"])
        message = detail["msg"]
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts)
