# backend/roomtracker/services/message_manager.py
from __future__ import annotations

import uuid
from typing import List

from roomtracker.core.clock import utcnow_iso
from roomtracker.core.errors import InvalidMessage, MessageNotFound, NotMessageAuthor
from roomtracker.core.logging import get_logger
from roomtracker.models.models import Message, MessageWithProfile, unknown_profile
from roomtracker.services.storage import Database

logger = get_logger(__name__)

MESSAGE_MAX_LENGTH = 2000
DEFAULT_MESSAGE_LIMIT = 50

# ============================================================================
# ROOM CHAT MESSAGES
# ============================================================================

class MessageManager:
    """
    Stores and reads the chat history of each room.

    Deleting a message only stamps ``deleted_at``; deleted messages drop out
    of ``get_messages`` but stay in storage. Membership is checked by the
    caller, the same way room details are.
    """

    def __init__(self, db: Database):
        self.db = db

    @staticmethod
    def _clean(content: str) -> str:
        if not isinstance(content, str) or not content.strip() or len(content) > MESSAGE_MAX_LENGTH:
            raise InvalidMessage()
        return content.strip()

    def _with_profile(self, message: Message) -> MessageWithProfile:
        user = self.db.profiles.get(message.user_id) or unknown_profile(
            message.user_id, message.created_at
        )
        return MessageWithProfile(**message.model_dump(), user=user)

    def get_messages(self, room_id: str, limit: int = DEFAULT_MESSAGE_LIMIT) -> List[MessageWithProfile]:
        """
        The latest ``limit`` live messages of a room, oldest first.

        Args:
            room_id: UUID of the room
            limit: Maximum number of messages returned (default 50)
        """
        with self.db.lock:
            live = [
                m for m in self.db.messages.values()
                if m.room_id == room_id and m.deleted_at is None
            ]
            live.sort(key=lambda m: m.created_at)
            latest = live[-limit:] if limit > 0 else []
            return [self._with_profile(m) for m in latest]

    def send_message(self, room_id: str, user_id: str, content: str) -> MessageWithProfile:
        """
        Post a message to a room.

        Raises:
            InvalidMessage: if the content is blank or longer than 2000 characters
        """
        message = Message(
            id=str(uuid.uuid4()),
            room_id=room_id,
            user_id=user_id,
            content=self._clean(content),
            created_at=utcnow_iso(),
        )
        with self.db.write() as db:
            db.messages[message.id] = message
            result = self._with_profile(message)
        logger.info(f"✓ Message {message.id} posted to room {room_id}")
        return result

    def _own_message(self, room_id: str, message_id: str, user_id: str) -> Message:
        message = self.db.messages.get(message_id)
        if message is None or message.room_id != room_id or message.deleted_at is not None:
            raise MessageNotFound()
        if message.user_id != user_id:
            raise NotMessageAuthor()
        return message

    def edit_message(self, room_id: str, message_id: str, user_id: str, content: str) -> MessageWithProfile:
        """
        Replace the content of one of the caller's messages.

        Raises:
            InvalidMessage: if the new content is blank or too long
            MessageNotFound: if the message is not a live message of the room
            NotMessageAuthor: if someone else wrote it
        """
        cleaned = self._clean(content)
        with self.db.write() as db:
            message = self._own_message(room_id, message_id, user_id)
            edited = message.model_copy(update={"content": cleaned, "edited_at": utcnow_iso()})
            db.messages[message_id] = edited
            result = self._with_profile(edited)
        logger.info(f"✓ Message {message_id} edited")
        return result

    def delete_message(self, room_id: str, message_id: str, user_id: str) -> None:
        """Soft-delete one of the caller's messages."""
        with self.db.write() as db:
            message = self._own_message(room_id, message_id, user_id)
            db.messages[message_id] = message.model_copy(update={"deleted_at": utcnow_iso()})
        logger.info(f"✓ Message {message_id} deleted")
