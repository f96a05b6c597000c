"""
Resolution of push events to the Jenkins jobs they should trigger.
"""

import logging

from hooks_common.models import JobMapping, JobTarget, PushEvent

logger = logging.getLogger(__name__)


def resolve_jobs(event: PushEvent, mapping: JobMapping) -> list[JobTarget]:
    """
    Look up the jobs configured for a pushed repository and branch.

    An empty list means there is nothing to trigger. Both "unknown
    repository" and "unknown branch" are normal outcomes and are only
    logged at INFO level.

    Args:
        event: Decoded push event
        mapping: Job table from the configuration

    Returns:
        Jobs in configured order, each tagged with its folder
    """
    owner = mapping.find_project(event.repository)
    if owner is None:
        logger.info(f"No project configured for repository '{event.repository}'")
        return []

    folder, project = owner
    jobs = mapping.resolve(folder, project, event.branch)
    if jobs is None:
        logger.info(
            f"No job configured for branch '{event.branch}' "
            f"of repository '{event.repository}'"
        )
        return []

    return [JobTarget(folder=folder, job=job) for job in jobs]
