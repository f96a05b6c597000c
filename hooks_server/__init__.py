"""
Hooks Server module.

This module contains the FastAPI application that receives push webhooks,
resolves them to Jenkins jobs and dispatches the build triggers.
"""

from .app import create_app
from .dispatcher import TriggerDispatcher
from .resolver import resolve_jobs
from .webhook import WebhookRejected, decode_push_event

__all__ = [
    "TriggerDispatcher",
    "WebhookRejected",
    "create_app",
    "decode_push_event",
    "resolve_jobs",
]
