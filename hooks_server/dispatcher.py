"""
Trigger calls to Jenkins.

Each resolved job gets exactly one GET to its buildWithParameters URL. Calls
are made one after another in configured order; a failing call is logged and
never stops the remaining ones. There are no retries.
"""

import asyncio
import logging

import requests

from hooks_common.models import CIConnection, JobTarget, TriggerOutcome

logger = logging.getLogger(__name__)

TRIGGER_TIMEOUT = 30  # seconds
LOGGED_BODY_LIMIT = 500


class TriggerDispatcher:
    """
    Sends authenticated build triggers for resolved jobs.

    The dispatcher only holds the immutable connection settings, so one
    instance can be shared by every request.
    """

    def __init__(self, connection: CIConnection, timeout: float = TRIGGER_TIMEOUT):
        self.connection = connection
        self.timeout = timeout

    def dispatch(self, target: JobTarget) -> TriggerOutcome:
        """
        Trigger a single job.

        Args:
            target: Job and folder to trigger

        Returns:
            TriggerOutcome; success is False only on transport errors
        """
        url = self.connection.trigger_url(target.folder, target.job)
        try:
            response = requests.get(
                url,
                auth=(self.connection.username, self.connection.api_token),
                params={"token": self.connection.api_token},
                verify=self.connection.verify_tls,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"Failed to trigger build for {target.job}: {e}")
            return TriggerOutcome(
                job=target.job, folder=target.folder, success=False, error=str(e)
            )

        # Non-2xx answers still count as triggered; only the log level differs
        if response.ok:
            logger.info(
                f"Build '{target.job}' triggered (HTTP {response.status_code})"
            )
        else:
            logger.warning(
                f"Build '{target.job}' trigger answered with HTTP "
                f"{response.status_code}"
            )
        logger.debug(f"Response body: {response.text[:LOGGED_BODY_LIMIT]}")

        return TriggerOutcome(
            job=target.job,
            folder=target.folder,
            success=True,
            status_code=response.status_code,
        )

    async def dispatch_all(self, targets: list[JobTarget]) -> list[TriggerOutcome]:
        """
        Trigger every job in order, waiting for each call before the next.

        Blocking HTTP calls run in a worker thread so the event loop keeps
        serving other webhooks meanwhile.

        Args:
            targets: Jobs in configured order

        Returns:
            One outcome per target, in the same order
        """
        outcomes = []
        for target in targets:
            outcomes.append(await asyncio.to_thread(self.dispatch, target))
        return outcomes
