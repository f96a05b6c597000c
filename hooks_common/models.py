"""
Data models for the webhook relay.

These models represent the domain objects used throughout the application,
independent of how the configuration was read or how requests arrive.
"""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType

BRANCH_REF_PREFIX = "refs/heads/"


@dataclass(frozen=True)
class CIConnection:
    """
    Connection details for the Jenkins server that receives build triggers.

    A single shared credential pair is used for every trigger call. TLS
    verification stays on unless the configuration explicitly turns it off.
    """

    url: str  # Scheme and host, e.g. "https://jenkins.internal"
    port: int
    api_token: str
    username: str
    verify_tls: bool = True

    @property
    def base_url(self) -> str:
        """Server root including the port, without a trailing slash."""
        return f"{self.url.rstrip('/')}:{self.port}"

    def trigger_url(self, folder: str | None, job: str) -> str:
        """
        Build the "build with parameters" URL for a job.

        Args:
            folder: Jenkins folder owning the job, or None for top-level jobs
            job: Job identifier inside the folder

        Returns:
            URL in the form <base>/job/<folder>/<job>/buildWithParameters
        """
        if folder is None:
            return f"{self.base_url}/job/{job}/buildWithParameters"
        return f"{self.base_url}/job/{folder}/{job}/buildWithParameters"


@dataclass(frozen=True)
class PushEvent:
    """A push notification reduced to the two fields routing needs."""

    repository: str
    branch: str

    @classmethod
    def from_ref(cls, repository: str, ref: str) -> "PushEvent":
        """Create an event from a git ref, stripping the refs/heads/ prefix."""
        return cls(repository=repository, branch=branch_from_ref(ref))


@dataclass(frozen=True)
class JobTarget:
    """A single job to trigger, tagged with the folder used for its URL."""

    folder: str | None
    job: str


@dataclass
class TriggerOutcome:
    """
    Result of one trigger call.

    success only reflects whether the request reached the server; the HTTP
    status is kept separately so non-2xx answers remain visible in logs.
    """

    job: str
    folder: str | None
    success: bool
    status_code: int | None = None
    error: str | None = None


def branch_from_ref(ref: str) -> str:
    """Strip a leading refs/heads/ from a ref; other refs are returned as-is."""
    if ref.startswith(BRANCH_REF_PREFIX):
        return ref[len(BRANCH_REF_PREFIX) :]
    return ref


# folder (None for the flat profile) -> project -> branch -> jobs
RawMapping = Mapping[str | None, Mapping[str, Mapping[str, tuple[str, ...]]]]


class JobMapping:
    """
    Read-only folder -> project -> branch -> jobs table.

    Built once at startup by the config loader and shared by every request.
    Iteration order always follows the order of declaration in the
    configuration file.
    """

    def __init__(self, table: RawMapping):
        self._table = MappingProxyType(
            {
                folder: MappingProxyType(
                    {
                        project: MappingProxyType(
                            {branch: tuple(jobs) for branch, jobs in branches.items()}
                        )
                        for project, branches in projects.items()
                    }
                )
                for folder, projects in table.items()
            }
        )

    def folders(self) -> frozenset[str]:
        """Names of the Jenkins folders; flat-profile projects have none."""
        return frozenset(folder for folder in self._table if folder is not None)

    def projects_in(self, folder: str | None) -> frozenset[str] | None:
        projects = self._table.get(folder)
        if projects is None:
            return None
        return frozenset(projects)

    def branches_in(self, folder: str | None, project: str) -> frozenset[str] | None:
        projects = self._table.get(folder)
        if projects is None or project not in projects:
            return None
        return frozenset(projects[project])

    def resolve(
        self, folder: str | None, project: str, branch: str
    ) -> tuple[str, ...] | None:
        """Return the jobs for an exact (folder, project, branch), or None."""
        projects = self._table.get(folder)
        if projects is None:
            return None
        branches = projects.get(project)
        if branches is None:
            return None
        return branches.get(branch)

    def find_project(self, repository: str) -> tuple[str | None, str] | None:
        """
        Find the folder owning a project named after a repository.

        The first match in declaration order wins.

        Returns:
            (folder, project) tuple, or None if no project has that name
        """
        for folder, projects in self._table.items():
            if repository in projects:
                return folder, repository
        return None

    def repositories(self) -> list[str]:
        """All project names, in declaration order."""
        return [project for projects in self._table.values() for project in projects]

    def entries(self) -> Iterator[tuple[str | None, str, str, tuple[str, ...]]]:
        """Yield (folder, project, branch, jobs) rows in declaration order."""
        for folder, projects in self._table.items():
            for project, branches in projects.items():
                for branch, jobs in branches.items():
                    yield folder, project, branch, jobs

    def job_count(self) -> int:
        return sum(len(jobs) for *_, jobs in self.entries())

    def __len__(self) -> int:
        return len(self.repositories())

    def __repr__(self) -> str:
        return f"JobMapping({len(self.folders())} folders, {len(self)} projects)"
