"""Conversation repository for database operations."""

import json
from datetime import datetime
from typing import Optional, List, Dict, Any
from .base import BaseRepository
from ..database_models.conversation import ConversationDO
from .message import MessageRepository


_COLUMNS = "id, user_id, title, metadata, messages_since_synthesis, created_at, updated_at"


class ConversationRepository(BaseRepository):
    """Repository for Conversation CRUD operations."""

    @staticmethod
    def _to_do(row) -> ConversationDO:
        metadata = row[3]
        return ConversationDO(
            id=row[0],
            user_id=row[1],
            title=row[2],
            metadata=json.loads(metadata) if isinstance(metadata, str) else (metadata or {}),
            messages_since_synthesis=row[4],
            created_at=row[5],
            updated_at=row[6]
        )

    def create(self, conversation: ConversationDO) -> bool:
        """
        Create a new conversation record.

        Args:
            conversation: ConversationDO instance

        Returns:
            True if successful, False otherwise
        """
        try:
            self.conn.execute(f"""
                INSERT INTO conversations ({_COLUMNS})
                VALUES (?, ?, ?, ?, ?, ?, ?)
            """, [
                conversation.id,
                conversation.user_id,
                conversation.title,
                json.dumps(conversation.metadata),
                conversation.messages_since_synthesis,
                conversation.created_at,
                conversation.updated_at
            ])
            self._commit()
            self.logger.info(f"Created conversation record: {conversation.id}")
            return True
        except Exception as e:
            self.logger.error(f"Failed to create conversation: {e}")
            return False

    def get(self, conversation_id: str) -> Optional[ConversationDO]:
        """
        Get conversation by ID, regardless of owner.

        Args:
            conversation_id: Conversation ID

        Returns:
            ConversationDO instance or None
        """
        try:
            result = self.conn.execute(f"""
                SELECT {_COLUMNS}
                FROM conversations
                WHERE id = ?
            """, [conversation_id]).fetchone()

            return self._to_do(result) if result else None
        except Exception as e:
            self.logger.error(f"Failed to get conversation {conversation_id}: {e}")
            return None

    def get_for_owner(self, conversation_id: str, user_id: str) -> Optional[ConversationDO]:
        """
        Get conversation by ID, only if it belongs to the given user.

        Args:
            conversation_id: Conversation ID
            user_id: Owner ID

        Returns:
            ConversationDO instance or None
        """
        try:
            result = self.conn.execute(f"""
                SELECT {_COLUMNS}
                FROM conversations
                WHERE id = ? AND user_id = ?
            """, [conversation_id, user_id]).fetchone()

            return self._to_do(result) if result else None
        except Exception as e:
            self.logger.error(f"Failed to get conversation {conversation_id}: {e}")
            return None

    def exists(self, conversation_id: str) -> bool:
        """Check whether a conversation with this ID exists."""
        try:
            result = self.conn.execute(
                "SELECT 1 FROM conversations WHERE id = ? LIMIT 1", [conversation_id]
            ).fetchone()
            return result is not None
        except Exception as e:
            self.logger.error(f"Failed to check conversation existence: {e}")
            return False

    def list_by_owner(self, user_id: str) -> List[ConversationDO]:
        """
        List conversations for a user, most recently active first.

        Args:
            user_id: Owner ID

        Returns:
            List of ConversationDO instances
        """
        try:
            results = self.conn.execute(f"""
                SELECT {_COLUMNS}
                FROM conversations
                WHERE user_id = ?
                ORDER BY updated_at DESC
            """, [user_id]).fetchall()

            return [self._to_do(row) for row in results]
        except Exception as e:
            self.logger.error(f"Failed to list conversations: {e}")
            return []

    def update(self, conversation_id: str, updates: Dict[str, Any]) -> bool:
        """
        Update conversation fields. ``updated_at`` always advances.

        Args:
            conversation_id: Conversation ID
            updates: Dictionary of fields to update (title, metadata,
                messages_since_synthesis, updated_at)

        Returns:
            True if successful, False otherwise
        """
        try:
            set_clauses = []
            params = []

            if 'title' in updates:
                set_clauses.append("title = ?")
                params.append(updates['title'])

            if 'metadata' in updates:
                set_clauses.append("metadata = ?")
                params.append(json.dumps(updates['metadata']))

            if 'messages_since_synthesis' in updates:
                set_clauses.append("messages_since_synthesis = ?")
                params.append(updates['messages_since_synthesis'])

            set_clauses.append("updated_at = ?")
            params.append(updates.get('updated_at') or datetime.utcnow())

            params.append(conversation_id)
            query = f"UPDATE conversations SET {', '.join(set_clauses)} WHERE id = ?"

            self.conn.execute(query, params)
            self._commit()
            return True
        except Exception as e:
            self.logger.error(f"Failed to update conversation: {e}")
            return False

    def delete(self, conversation_id: str) -> bool:
        """
        Delete conversation by ID together with its messages.

        Args:
            conversation_id: Conversation ID

        Returns:
            True if successful, False otherwise
        """
        cursor = self.conn if self.in_transaction else self.conn.cursor()
        try:
            if not self.in_transaction:
                cursor.begin()
            if not MessageRepository(cursor, in_transaction=True).delete_by_conversation(conversation_id):
                raise RuntimeError(f"messages of {conversation_id} were not deleted")
            cursor.execute("DELETE FROM conversations WHERE id = ?", [conversation_id])
            if not self.in_transaction:
                cursor.commit()
            self.logger.info(f"Deleted conversation record: {conversation_id}")
            return True
        except Exception as e:
            if not self.in_transaction:
                cursor.rollback()
            self.logger.error(f"Failed to delete conversation: {e}")
            return False
        finally:
            if not self.in_transaction:
                cursor.close()
