"""
Decoding of inbound GitHub push webhooks.

Only the event header and the ref/repository fields of the body are looked
at. The sender is not authenticated: anyone able to reach the endpoint can
trigger builds, so network access must be restricted at deployment time.
"""

import json
from collections.abc import Mapping
from typing import Any

from hooks_common.models import PushEvent

EVENT_HEADER = "X-GitHub-Event"
PUSH_EVENT = "push"


class WebhookRejected(Exception):
    """Raised when a request is not a well-formed push event."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


def _get_header(headers: Mapping[str, str], name: str) -> str | None:
    # Starlette headers are case-insensitive already; plain dicts are not
    value = headers.get(name)
    if value is not None:
        return value
    lowered = name.lower()
    for key, candidate in headers.items():
        if key.lower() == lowered:
            return candidate
    return None


def decode_push_event(headers: Mapping[str, str], raw_body: bytes) -> PushEvent:
    """
    Validate a webhook request and extract the pushed repository and branch.

    Args:
        headers: Request headers
        raw_body: Raw request body

    Returns:
        PushEvent with the repository name and branch

    Raises:
        WebhookRejected: If the event header is missing or not "push", or the
            body lacks a string "ref" and a "repository" object with a name
    """
    event = _get_header(headers, EVENT_HEADER)
    if event is None:
        raise WebhookRejected(f"Missing {EVENT_HEADER} header")
    if event != PUSH_EVENT:
        raise WebhookRejected(f"GitHub event is not a push: {event!r}")

    try:
        payload: Any = json.loads(raw_body)
    except (ValueError, RecursionError) as e:
        # ValueError covers JSONDecodeError and UnicodeDecodeError
        raise WebhookRejected(f"Failed to parse JSON payload: {e}") from e

    if not isinstance(payload, dict):
        raise WebhookRejected("Payload is not a JSON object")

    ref = payload.get("ref")
    if not isinstance(ref, str):
        raise WebhookRejected("Payload has no string 'ref' field")

    repository = payload.get("repository")
    if not isinstance(repository, dict) or not isinstance(repository.get("name"), str):
        raise WebhookRejected("Payload has no 'repository.name' field")

    return PushEvent.from_ref(repository["name"], ref)
