"""
Database models for the task board application.

This module defines SQLAlchemy models for the two document collections
the service persists: users and tasks. Rows serialize to the document
shape existing clients expect (``_id`` identifiers, a ``timestamp``
sort value), so the relational layout stays an implementation detail.
"""

import time
from datetime import datetime, timezone
from typing import Any

from bson import ObjectId

from taskboard import db

DEFAULT_CATEGORY = "To-Do"
TITLE_MAX_LENGTH = 50
DESCRIPTION_MAX_LENGTH = 200


def new_object_id() -> str:
    """Generate a fresh ObjectId as its 24-character hexadecimal string."""
    return str(ObjectId())


def is_valid_object_id(value: Any) -> bool:
    """Return True when ``value`` is a well-formed identifier string."""
    return isinstance(value, str) and ObjectId.is_valid(value)


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string with millisecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def epoch_millis() -> int:
    """Current time in milliseconds since the epoch."""
    return int(time.time() * 1000)


class User(db.Model):
    """
    User record keyed by email.

    Attributes:
        id: Unique identifier for the record.
        email: Email address; at most one record per email.
        profile: Arbitrary profile fields supplied on first registration.
        created_at: Creation time in epoch milliseconds.
    """

    __tablename__ = "users"

    id: str = db.Column("_id", db.String(24), primary_key=True, default=new_object_id)
    email: str = db.Column(db.Text, nullable=False, unique=True, index=True)
    profile: dict = db.Column(db.JSON, nullable=False, default=dict)
    created_at: int = db.Column(db.BigInteger, nullable=False, default=epoch_millis)

    def to_dict(self) -> dict[str, Any]:
        """Flatten the profile fields into the stored document shape."""
        return {
            **(self.profile or {}),
            "_id": self.id,
            "email": self.email,
            "timestamp": self.created_at,
        }

    def __repr__(self) -> str:
        return f"<User {self.email}>"


class Task(db.Model):
    """
    Task model representing a card on the board.

    Attributes:
        id: Unique identifier for the task.
        title: Short title describing the task (1-50 characters).
        description: Optional longer text (up to 200 characters).
        category: Board column the task belongs to.
        timestamp: Sort value; an ISO string on creation, or whatever
            the client supplied on the last reorder.
    """

    __tablename__ = "tasks"

    id: str = db.Column("_id", db.String(24), primary_key=True, default=new_object_id)
    title: str = db.Column(db.String(TITLE_MAX_LENGTH), nullable=False)
    description: str = db.Column(db.String(DESCRIPTION_MAX_LENGTH), nullable=False, default="")
    category: str = db.Column(db.Text, nullable=False, default=DEFAULT_CATEGORY)
    timestamp: Any = db.Column(db.JSON, nullable=True, default=utc_now_iso)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert the task to its document representation.

        Returns:
            Dictionary containing all task fields.
        """
        return {
            "_id": self.id,
            "title": self.title,
            "description": self.description,
            "category": self.category,
            "timestamp": self.timestamp,
        }

    def __repr__(self) -> str:
        """Return string representation of the task."""
        return f"<Task {self.id}: {self.title}>"
