# backend/roomtracker/core/errors.py

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """What went wrong, independent of the message shown to the caller."""

    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"
    INVALID = "invalid"
    INTERNAL = "internal"


class AppError(Exception):
    """
    Base class for failures the API layer knows how to report.

    Routes classify errors by ``kind``; ``message`` is surfaced to the
    caller verbatim in the error envelope.
    """

    kind: ErrorKind = ErrorKind.INTERNAL
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthorized(AppError):
    kind = ErrorKind.UNAUTHORIZED
    default_message = "Unauthorized: No authenticated user"


class RoomNotFound(AppError):
    kind = ErrorKind.NOT_FOUND
    default_message = "Room not found"


class NotAMember(AppError):
    kind = ErrorKind.FORBIDDEN
    default_message = "User is not a member of this room"


class AlreadyMember(AppError):
    kind = ErrorKind.INVALID
    default_message = "User is already a member of this room"


class OwnerCannotLeave(AppError):
    kind = ErrorKind.INVALID
    default_message = "Room owner cannot leave while other members exist"


class InvalidPeriod(AppError):
    kind = ErrorKind.INVALID
    default_message = "Invalid period. Must be one of: day, week, month, all-time"


class MessageNotFound(AppError):
    kind = ErrorKind.NOT_FOUND
    default_message = "Message not found"


class NotMessageAuthor(AppError):
    kind = ErrorKind.FORBIDDEN
    default_message = "Only the author can change this message"


class InvalidMessage(AppError):
    kind = ErrorKind.INVALID
    default_message = "Message must be between 1 and 2000 characters"


class StorageError(AppError):
    kind = ErrorKind.INTERNAL
    default_message = "Storage failure"
