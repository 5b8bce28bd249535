"""Tests for MessageRepository."""

import pytest
from datetime import datetime, timedelta

from sales_assistant.db.repositories.message import MessageRepository
from sales_assistant.db.database_models.message import MessageDO


@pytest.fixture
def repo(db_conn):
    """Provide a MessageRepository."""
    return MessageRepository(db_conn.conn)


def _add(repo, message_id, conversation_id="c1", sender="user", content="hello", created_at=None):
    message = MessageDO(
        id=message_id,
        conversation_id=conversation_id,
        sender=sender,
        content=content,
        created_at=created_at or datetime.utcnow()
    )
    repo.add(message)
    return message


class TestMessageRepository:
    """Tests for MessageRepository."""

    class TestAdd:
        """SUT: MessageRepository.add"""

        def test_returns_sequence(self, repo):
            message = MessageDO(id="m1", conversation_id="c1", sender="user", content="hi")
            seq = repo.add(message)
            assert seq is not None
            assert message.seq == seq

        def test_sequence_increases(self, repo):
            first = _add(repo, "m1")
            second = _add(repo, "m2")
            assert second.seq > first.seq

        def test_duplicate_id_returns_none(self, repo):
            _add(repo, "m1")
            duplicate = MessageDO(id="m1", conversation_id="c1", sender="bot", content="again")
            assert repo.add(duplicate) is None

    class TestGetByConversation:
        """SUT: MessageRepository.get_by_conversation"""

        def test_chronological(self, repo):
            now = datetime.utcnow()
            _add(repo, "m2", created_at=now)
            _add(repo, "m1", created_at=now - timedelta(seconds=5))
            assert [m.id for m in repo.get_by_conversation("c1")] == ["m1", "m2"]

        def test_same_timestamp_keeps_insertion_order(self, repo):
            """Messages sharing a timestamp come back in the order they were added."""
            now = datetime.utcnow()
            _add(repo, "user-1", sender="user", created_at=now)
            _add(repo, "bot-1", sender="bot", created_at=now)
            messages = repo.get_by_conversation("c1")
            assert [m.sender for m in messages] == ["user", "bot"]

        def test_only_this_conversation(self, repo):
            _add(repo, "m1", conversation_id="c1")
            _add(repo, "m2", conversation_id="c2")
            assert [m.id for m in repo.get_by_conversation("c2")] == ["m2"]

    class TestGetRecent:
        """SUT: MessageRepository.get_recent"""

        def test_returns_last_n_oldest_first(self, repo):
            now = datetime.utcnow()
            for i in range(8):
                _add(repo, f"m{i}", content=f"message {i}", created_at=now + timedelta(seconds=i))

            recent = repo.get_recent("c1", 4)
            assert [m.id for m in recent] == ["m4", "m5", "m6", "m7"]

        def test_fewer_than_limit(self, repo):
            _add(repo, "m1")
            _add(repo, "m2")
            assert len(repo.get_recent("c1", 6)) == 2

        def test_empty(self, repo):
            assert repo.get_recent("c1", 6) == []

    class TestDeleteByConversation:
        """SUT: MessageRepository.delete_by_conversation"""

        def test_delete(self, repo):
            _add(repo, "m1")
            _add(repo, "m2", conversation_id="c2")
            assert repo.delete_by_conversation("c1") is True
            assert repo.get_by_conversation("c1") == []
            assert len(repo.get_by_conversation("c2")) == 1

        def test_deferred_to_transaction(self, db_conn):
            """Inside a transaction the delete lands only on commit."""
            _add(MessageRepository(db_conn.conn), "m1")
            with pytest.raises(RuntimeError):
                with db_conn.transaction() as cursor:
                    MessageRepository(cursor, in_transaction=True).delete_by_conversation("c1")
                    raise RuntimeError("abort")
            assert len(MessageRepository(db_conn.conn).get_by_conversation("c1")) == 1
