"""
Unit tests for hooks_server.webhook.

Tests header checks, payload shape validation and branch extraction.
"""

import json

import pytest

from hooks_common.models import PushEvent
from hooks_server.webhook import WebhookRejected, decode_push_event

PUSH_HEADERS = {"X-GitHub-Event": "push"}


def make_body(ref="refs/heads/main", name="service", **extra):
    payload = {"ref": ref, "repository": {"name": name, "full_name": f"org/{name}"}}
    payload.update(extra)
    return json.dumps(payload).encode()


class TestEventHeader:
    """Test suite for the event type header."""

    def test_push_event_accepted(self):
        event = decode_push_event(PUSH_HEADERS, make_body())
        assert event == PushEvent(repository="service", branch="main")

    def test_header_name_case_insensitive(self):
        """Test that header names match regardless of case."""
        event = decode_push_event({"x-github-event": "push"}, make_body())
        assert event.repository == "service"

    def test_missing_header(self):
        with pytest.raises(WebhookRejected, match="Missing X-GitHub-Event"):
            decode_push_event({}, make_body())

    def test_other_event_rejected(self):
        with pytest.raises(WebhookRejected, match="not a push"):
            decode_push_event({"X-GitHub-Event": "pull_request"}, make_body())

    def test_header_value_case_sensitive(self):
        """Test that the event value must be exactly "push"."""
        with pytest.raises(WebhookRejected):
            decode_push_event({"X-GitHub-Event": "Push"}, make_body())

    def test_header_checked_before_body(self):
        """Test that a wrong event is rejected without parsing the body."""
        with pytest.raises(WebhookRejected, match="not a push"):
            decode_push_event({"X-GitHub-Event": "ping"}, b"not json")


class TestPayloadShape:
    """Test suite for body validation."""

    def test_invalid_json(self):
        with pytest.raises(WebhookRejected, match="Failed to parse JSON"):
            decode_push_event(PUSH_HEADERS, b"{not json")

    def test_invalid_utf8(self):
        with pytest.raises(WebhookRejected):
            decode_push_event(PUSH_HEADERS, b"\xff\xfe\x00")

    def test_empty_body(self):
        with pytest.raises(WebhookRejected):
            decode_push_event(PUSH_HEADERS, b"")

    def test_not_an_object(self):
        with pytest.raises(WebhookRejected, match="not a JSON object"):
            decode_push_event(PUSH_HEADERS, b"[1, 2]")

    def test_missing_ref(self):
        body = json.dumps({"repository": {"name": "service"}}).encode()
        with pytest.raises(WebhookRejected, match="'ref'"):
            decode_push_event(PUSH_HEADERS, body)

    def test_ref_not_string(self):
        body = json.dumps({"ref": 5, "repository": {"name": "service"}}).encode()
        with pytest.raises(WebhookRejected, match="'ref'"):
            decode_push_event(PUSH_HEADERS, body)

    def test_missing_repository(self):
        body = json.dumps({"ref": "refs/heads/main"}).encode()
        with pytest.raises(WebhookRejected, match="repository.name"):
            decode_push_event(PUSH_HEADERS, body)

    def test_repository_without_name(self):
        body = json.dumps({"ref": "refs/heads/main", "repository": {}}).encode()
        with pytest.raises(WebhookRejected, match="repository.name"):
            decode_push_event(PUSH_HEADERS, body)

    def test_extra_fields_ignored(self):
        body = make_body(commits=[{"id": "abc"}], pusher={"name": "alice"})
        assert decode_push_event(PUSH_HEADERS, body).branch == "main"

    def test_deeply_nested_body(self):
        """Test that nesting beyond the parser's recursion limit is rejected."""
        body = b"[" * 100000 + b"]" * 100000
        with pytest.raises(WebhookRejected, match="Failed to parse JSON"):
            decode_push_event(PUSH_HEADERS, body)


class TestBranchExtraction:
    """Test suite for deriving the branch from the ref."""

    def test_nested_branch_name(self):
        event = decode_push_event(PUSH_HEADERS, make_body(ref="refs/heads/feature/x"))
        assert event.branch == "feature/x"

    def test_ref_without_prefix_used_verbatim(self):
        event = decode_push_event(PUSH_HEADERS, make_body(ref="custom-ref"))
        assert event.branch == "custom-ref"
