"""
FastAPI application receiving GitHub push webhooks.

The configuration is built once before the app is created and handed to it
explicitly; request handlers read it through a dependency and never modify it.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request

from hooks_common.config import RelayConfig

from .dispatcher import TriggerDispatcher
from .resolver import resolve_jobs
from .webhook import WebhookRejected, decode_push_event

logger = logging.getLogger(__name__)


def create_app(
    config: RelayConfig, dispatcher: TriggerDispatcher | None = None
) -> FastAPI:
    """
    Create the webhook application for a loaded configuration.

    Args:
        config: Validated relay configuration
        dispatcher: Trigger dispatcher (default: one built from config.connection)

    Returns:
        FastAPI application with POST / and GET /health
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Log what the relay serves once the server is up."""
        connection = config.connection
        logger.info(
            f"Relaying pushes for {len(config.mapping)} repositories "
            f"to {connection.base_url}"
        )
        if not connection.verify_tls:
            logger.warning(
                "TLS certificate verification is disabled for Jenkins calls"
            )
        yield

    app = FastAPI(lifespan=lifespan)
    app.state.config = config
    app.state.dispatcher = dispatcher or TriggerDispatcher(config.connection)

    app.post("/")(handle_hook)
    app.get("/health")(health_check)

    return app


def get_config(request: Request) -> RelayConfig:
    """Get the configuration attached to the running app."""
    return request.app.state.config


def get_dispatcher(request: Request) -> TriggerDispatcher:
    """Get the trigger dispatcher attached to the running app."""
    return request.app.state.dispatcher


async def handle_hook(
    request: Request,
    config: RelayConfig = Depends(get_config),
    dispatcher: TriggerDispatcher = Depends(get_dispatcher),
) -> dict[str, str]:
    """
    Receive a webhook and trigger the jobs mapped to the pushed branch.

    The sender always gets the same answer: rejected events, unmapped
    branches and failed triggers are only visible in the server logs.
    """
    body = await request.body()

    try:
        event = decode_push_event(request.headers, body)
    except WebhookRejected as e:
        logger.warning(f"Ignoring webhook: {e.reason}")
        return {"status": "received"}

    targets = resolve_jobs(event, config.mapping)
    if not targets:
        return {"status": "received"}

    logger.info(
        f"Push to {event.repository}/{event.branch} maps to "
        f"{len(targets)} job(s): {', '.join(t.job for t in targets)}"
    )
    await dispatcher.dispatch_all(targets)

    return {"status": "received"}


async def health_check() -> dict[str, str]:
    """
    Health check endpoint.

    Returns:
        Dictionary with status="ok" if server is running
    """
    return {"status": "ok"}
