"""Message repository for database operations."""

from typing import Optional, List
from .base import BaseRepository
from ..database_models.message import MessageDO


_COLUMNS = "seq, id, conversation_id, sender, content, created_at"


class MessageRepository(BaseRepository):
    """Repository for Message operations. Messages are append-only."""

    @staticmethod
    def _to_do(row) -> MessageDO:
        return MessageDO(
            seq=row[0],
            id=row[1],
            conversation_id=row[2],
            sender=row[3],
            content=row[4],
            created_at=row[5]
        )

    def add(self, message: MessageDO) -> Optional[int]:
        """
        Append a message.

        Args:
            message: MessageDO instance

        Returns:
            Insertion sequence number if successful, None otherwise
        """
        try:
            result = self.conn.execute("""
                INSERT INTO messages (seq, id, conversation_id, sender, content, created_at)
                VALUES (nextval('messages_seq'), ?, ?, ?, ?, ?)
                RETURNING seq
            """, [
                message.id,
                message.conversation_id,
                message.sender,
                message.content,
                message.created_at
            ]).fetchone()

            seq = result[0] if result else None
            if seq is not None:
                message.seq = seq
                self._commit()
                self.logger.debug(f"Added message {message.id} to conversation {message.conversation_id}")
            return seq
        except Exception as e:
            self.logger.error(f"Failed to add message: {e}")
            return None

    def get_by_conversation(self, conversation_id: str) -> List[MessageDO]:
        """
        Get all messages for a conversation.

        Args:
            conversation_id: Conversation ID

        Returns:
            List of MessageDO instances (chronological order)
        """
        try:
            results = self.conn.execute(f"""
                SELECT {_COLUMNS}
                FROM messages
                WHERE conversation_id = ?
                ORDER BY created_at ASC, seq ASC
            """, [conversation_id]).fetchall()

            return [self._to_do(row) for row in results]
        except Exception as e:
            self.logger.error(f"Failed to get conversation messages: {e}")
            return []

    def get_recent(self, conversation_id: str, limit: int) -> List[MessageDO]:
        """
        Get the most recent messages for a conversation.

        Args:
            conversation_id: Conversation ID
            limit: Maximum number of messages to return

        Returns:
            List of MessageDO instances (chronological order)
        """
        try:
            results = self.conn.execute(f"""
                SELECT {_COLUMNS}
                FROM messages
                WHERE conversation_id = ?
                ORDER BY created_at DESC, seq DESC
                LIMIT ?
            """, [conversation_id, limit]).fetchall()

            messages = [self._to_do(row) for row in results]

            # Reverse to get chronological order
            messages.reverse()
            return messages
        except Exception as e:
            self.logger.error(f"Failed to get recent messages: {e}")
            return []

    def delete_by_conversation(self, conversation_id: str) -> bool:
        """
        Delete all messages for a conversation.

        Args:
            conversation_id: Conversation ID

        Returns:
            True if successful, False otherwise
        """
        try:
            self.conn.execute("DELETE FROM messages WHERE conversation_id = ?", [conversation_id])
            self._commit()
            return True
        except Exception as e:
            self.logger.error(f"Failed to delete messages: {e}")
            return False
