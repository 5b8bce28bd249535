"""Tests for ConversationRepository."""

import pytest
from datetime import datetime, timedelta

from sales_assistant.db.repositories.conversation import ConversationRepository
from sales_assistant.db.repositories.message import MessageRepository
from sales_assistant.db.database_models.conversation import ConversationDO
from sales_assistant.db.database_models.message import MessageDO


@pytest.fixture
def repo(db_conn):
    """Provide a ConversationRepository."""
    return ConversationRepository(db_conn.conn)


@pytest.fixture
def message_repo(db_conn):
    return MessageRepository(db_conn.conn)


def _make_conv(**overrides):
    """Factory for ConversationDO with sensible defaults."""
    defaults = dict(id="c1", user_id="u1", title="Laptop Shopping")
    defaults.update(overrides)
    return ConversationDO(**defaults)


class TestConversationRepository:
    """Tests for ConversationRepository."""

    class TestCreate:
        """SUT: ConversationRepository.create"""

        def test_returns_true(self, repo):
            assert repo.create(_make_conv()) is True

        def test_fields_persisted(self, repo):
            """Created conversation should be retrievable with all fields."""
            repo.create(_make_conv())
            result = repo.get("c1")
            assert result is not None
            assert result.user_id == "u1"
            assert result.title == "Laptop Shopping"
            assert result.messages_since_synthesis == 2
            assert result.metadata["saleStatus"] == "exploring"
            assert result.metadata["offeredProducts"] == []
            assert result.metadata["lastIntent"] is None

        def test_duplicate_id_returns_false(self, repo):
            repo.create(_make_conv())
            assert repo.create(_make_conv()) is False

    class TestGet:
        """SUT: ConversationRepository.get"""

        def test_not_found(self, repo):
            assert repo.get("nonexistent") is None

    class TestGetForOwner:
        """SUT: ConversationRepository.get_for_owner"""

        def test_owner_match(self, repo):
            repo.create(_make_conv())
            assert repo.get_for_owner("c1", "u1").id == "c1"

        def test_other_owner(self, repo):
            """A conversation is invisible to users other than its owner."""
            repo.create(_make_conv())
            assert repo.get_for_owner("c1", "u2") is None

    class TestExists:
        """SUT: ConversationRepository.exists"""

        def test_exists(self, repo):
            repo.create(_make_conv())
            assert repo.exists("c1") is True
            assert repo.exists("c2") is False

    class TestListByOwner:
        """SUT: ConversationRepository.list_by_owner"""

        def test_ordered_by_updated_at_desc(self, repo):
            now = datetime.utcnow()
            repo.create(_make_conv(id="c1", updated_at=now - timedelta(hours=1)))
            repo.create(_make_conv(id="c2", updated_at=now))

            results = repo.list_by_owner("u1")
            assert [c.id for c in results] == ["c2", "c1"]

        def test_filters_by_owner(self, repo):
            repo.create(_make_conv(id="c1"))
            repo.create(_make_conv(id="c2", user_id="u2"))
            assert [c.id for c in repo.list_by_owner("u2")] == ["c2"]

        def test_empty(self, repo):
            assert repo.list_by_owner("nobody") == []

    class TestUpdate:
        """SUT: ConversationRepository.update"""

        def test_update_title(self, repo):
            repo.create(_make_conv())
            assert repo.update("c1", {"title": "Gaming laptops"}) is True
            assert repo.get("c1").title == "Gaming laptops"

        def test_update_metadata_and_counter(self, repo):
            repo.create(_make_conv())
            metadata = {
                "interests": ["laptop"],
                "offeredProducts": [],
                "rejectedProducts": ["mac"],
                "saleStatus": "interested",
                "lastIntent": "wants a laptop",
            }
            repo.update("c1", {"metadata": metadata, "messages_since_synthesis": 0})
            result = repo.get("c1")
            assert result.metadata == metadata
            assert result.messages_since_synthesis == 0

        def test_updated_at_advances(self, repo):
            """Every update touches updated_at."""
            past = datetime.utcnow() - timedelta(days=1)
            repo.create(_make_conv(updated_at=past))
            repo.update("c1", {"messages_since_synthesis": 4})
            assert repo.get("c1").updated_at > past

    class TestDelete:
        """SUT: ConversationRepository.delete"""

        def test_delete_removes_messages(self, repo, message_repo):
            """Deleting a conversation also deletes its messages."""
            repo.create(_make_conv())
            message_repo.add(MessageDO(id="m1", conversation_id="c1", sender="user", content="hi"))

            assert repo.delete("c1") is True
            assert repo.get("c1") is None
            assert len(message_repo.get_by_conversation("c1")) == 0

        def test_delete_leaves_other_conversations(self, repo, message_repo):
            repo.create(_make_conv(id="c1"))
            repo.create(_make_conv(id="c2"))
            message_repo.add(MessageDO(id="m2", conversation_id="c2", sender="user", content="hi"))

            repo.delete("c1")
            assert repo.exists("c2")
            assert len(message_repo.get_by_conversation("c2")) == 1

    class TestInTransaction:
        """SUT: ConversationRepository with in_transaction=True"""

        def test_commit_left_to_owner(self, db_conn):
            """Writes through a transaction cursor land only when it commits."""
            with pytest.raises(RuntimeError):
                with db_conn.transaction() as cursor:
                    ConversationRepository(cursor, in_transaction=True).create(_make_conv())
                    raise RuntimeError("abort")
            assert ConversationRepository(db_conn.conn).get("c1") is None

        def test_committed(self, db_conn):
            with db_conn.transaction() as cursor:
                ConversationRepository(cursor, in_transaction=True).create(_make_conv())
            assert ConversationRepository(db_conn.conn).exists("c1")
