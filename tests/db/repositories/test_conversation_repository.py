"""Tests for ConversationRepository."""

import pytest

from frontdesk.db.database_models import ConversationDO
from frontdesk.db.repositories import ConversationRepository


@pytest.fixture
def repo(db):
    """Provide a ConversationRepository."""
    return ConversationRepository(db.conn)


def _make_conv(**overrides):
    """Factory for ConversationDO with sensible defaults."""
    defaults = dict(
        id="c1",
        project_id="p1",
        chat_id="42",
        messages=[{"role": "user", "content": "hi"}],
    )
    defaults.update(overrides)
    return ConversationDO(**defaults)


class TestConversationRepository:
    """Tests for ConversationRepository."""

    class TestCreate:
        """SUT: ConversationRepository.create"""

        def test_returns_true(self, repo):
            """create() should return True on success."""
            assert repo.create(_make_conv()) is True

        def test_one_per_chat(self, repo):
            """A second row for the same project and chat should be rejected."""
            repo.create(_make_conv())
            assert repo.create(_make_conv(id="c2")) is False

    class TestGetByChat:
        """SUT: ConversationRepository.get_by_chat"""

        def test_found(self, repo):
            """The transcript should round-trip in order."""
            messages = [
                {"role": "user", "content": "hi"},
                {"role": "assistant", "content": "hello"},
            ]
            repo.create(_make_conv(messages=messages))
            conv = repo.get_by_chat("p1", "42")
            assert conv is not None
            assert conv.id == "c1"
            assert conv.messages == messages

        def test_scoped_by_project(self, repo):
            """The same chat id under another project should not match."""
            repo.create(_make_conv())
            assert repo.get_by_chat("p2", "42") is None

    class TestUpdateMessages:
        """SUT: ConversationRepository.update_messages"""

        def test_replaces_transcript(self, repo):
            repo.create(_make_conv())
            new_messages = [{"role": "assistant", "content": "bye"}]
            assert repo.update_messages("c1", new_messages) is True
            assert repo.get_by_chat("p1", "42").messages == new_messages
