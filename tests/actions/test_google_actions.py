"""Tests for GoogleActions against a mocked Google API."""

import json

import httpx
import pytest

from frontdesk.actions.google import NOT_CONNECTED_MESSAGE, GoogleActions
from frontdesk.clients.google import RECONNECT_MESSAGE, GoogleBusinessClient
from frontdesk.models.action import ActionContext
from frontdesk.services.quota import UsageGuard


LOCATION = "accounts/1/locations/2"


class FakeGoogle:
    """Mock transport handler recording requests."""

    def __init__(self, reviews=None, token_ok=True, reply_status=200, patch_status=200):
        self.reviews = reviews or []
        self.token_ok = token_ok
        self.reply_status = reply_status
        self.patch_status = patch_status
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.host == "oauth2.googleapis.com":
            if self.token_ok:
                return httpx.Response(200, json={"access_token": "fresh-token"})
            return httpx.Response(400, json={"error": "invalid_grant"})
        if request.method == "GET" and request.url.path.endswith("/reviews"):
            return httpx.Response(200, json={"reviews": self.reviews})
        if request.method == "PUT":
            return httpx.Response(self.reply_status, json={})
        if request.method == "PATCH":
            return httpx.Response(self.patch_status, json={})
        return httpx.Response(404)

    def replies(self):
        return [json.loads(r.content) for r in self.requests if r.method == "PUT"]


@pytest.fixture
def connected(store, make_project):
    project = make_project(
        enabled_features=["google_review_reply"],
        google_connected=True,
        google_refresh_token="refresh",
        google_location_id=LOCATION,
    )
    store.projects.create(project)
    return project


def _actions(store, clock, fake, provider):
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(fake))
    client = GoogleBusinessClient(store, "cid", "secret", http_client=http_client)
    return GoogleActions(client, store, provider, UsageGuard(store, daily_limit=300, clock=clock))


def _review(review_id, replied=False):
    review = {"reviewId": review_id, "comment": "Great gym", "starRating": "FIVE"}
    if replied:
        review["reviewReply"] = {"comment": "Thanks!"}
    return review


class TestReplyToReviews:
    """SUT: GoogleActions.reply_to_reviews"""

    async def test_replies_to_unreplied(self, store, clock, connected, scripted_provider):
        fake = FakeGoogle(reviews=[_review("r1"), _review("r2", replied=True), _review("r3")])
        provider = scripted_provider("Thank you **so much**!", "Thanks for visiting!")
        actions = _actions(store, clock, fake, provider)

        result = await actions.reply_to_reviews({}, ActionContext(project=connected, chat_id=42))

        assert result.success is True
        assert result.message == "✅ Replied to 2 of 2 reviews successfully."
        assert fake.replies() == [{"comment": "Thank you so much!"}, {"comment": "Thanks for visiting!"}]
        stored = await store.get_project("p1")
        assert stored.google_access_token == "fresh-token"
        assert stored.google_last_validated_at is not None

    async def test_limit_and_skipped_generation(self, store, clock, connected, scripted_provider):
        """The payload limit caps the batch; failed generations are skipped."""
        fake = FakeGoogle(reviews=[_review("r1"), _review("r2"), _review("r3")])
        provider = scripted_provider(None, "Thanks!")
        actions = _actions(store, clock, fake, provider)

        result = await actions.reply_to_reviews({"limit": 2}, ActionContext(project=connected, chat_id=42))
        assert result.message == "✅ Replied to 1 of 2 reviews successfully."
        assert result.data == {"replied_count": 1, "total_unreplied": 3}

    async def test_stops_at_usage_limit(self, store, clock, connected, scripted_provider):
        fake = FakeGoogle(reviews=[_review("r1"), _review("r2")])
        provider = scripted_provider("one", "two")
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(fake))
        client = GoogleBusinessClient(store, "cid", "secret", http_client=http_client)
        actions = GoogleActions(client, store, provider, UsageGuard(store, daily_limit=1, clock=clock))

        result = await actions.reply_to_reviews({}, ActionContext(project=connected, chat_id=42))
        assert result.message == "✅ Replied to 1 of 2 reviews successfully."
        assert len(provider.calls) == 1

    async def test_all_replied(self, store, clock, connected, scripted_provider):
        fake = FakeGoogle(reviews=[_review("r1", replied=True)])
        result = await _actions(store, clock, fake, scripted_provider()).reply_to_reviews(
            {}, ActionContext(project=connected, chat_id=42)
        )
        assert result.message == "✅ All reviews are already replied to. No action needed."

    async def test_not_connected(self, store, clock, make_project, scripted_provider):
        """Missing credentials should fail before any HTTP call."""
        fake = FakeGoogle()
        project = make_project(enabled_features=["google_review_reply"], google_connected=True)
        result = await _actions(store, clock, fake, scripted_provider()).reply_to_reviews(
            {}, ActionContext(project=project, chat_id=42)
        )
        assert result.success is False
        assert result.message == NOT_CONNECTED_MESSAGE
        assert fake.requests == []

    async def test_refresh_rejected_marks_disconnected(self, store, clock, connected, scripted_provider):
        fake = FakeGoogle(token_ok=False)
        result = await _actions(store, clock, fake, scripted_provider()).reply_to_reviews(
            {}, ActionContext(project=connected, chat_id=42)
        )
        assert result.success is False
        assert result.message == RECONNECT_MESSAGE
        assert (await store.get_project("p1")).google_connected is False


class TestUpdateDescription:
    """SUT: GoogleActions.update_description"""

    async def test_success_writes_back(self, store, clock, connected, scripted_provider):
        fake = FakeGoogle()
        result = await _actions(store, clock, fake, scripted_provider()).update_description(
            {"description": "New copy"}, ActionContext(project=connected, chat_id=42)
        )
        assert result.success is True
        patch = [r for r in fake.requests if r.method == "PATCH"][0]
        assert patch.url.params["updateMask"] == "profile.description"
        assert json.loads(patch.content) == {"profile": {"description": "New copy"}}
        assert (await store.get_project("p1")).business_description == "New copy"

    async def test_missing_description(self, store, clock, connected, scripted_provider):
        result = await _actions(store, clock, FakeGoogle(), scripted_provider()).update_description(
            {}, ActionContext(project=connected, chat_id=42)
        )
        assert result.success is False
        assert result.message == "❌ No description provided."

    async def test_api_failure(self, store, clock, connected, scripted_provider):
        fake = FakeGoogle(patch_status=403)
        result = await _actions(store, clock, fake, scripted_provider()).update_description(
            {"description": "New copy"}, ActionContext(project=connected, chat_id=42)
        )
        assert result.success is False
        assert (await store.get_project("p1")).business_description == "Strength training for everyone."
