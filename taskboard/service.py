"""
Task service: validation, persistence and change notification.

Every mutating operation follows the same sequence: validate the input
(raising :class:`ValidationError` before the store is touched), perform
exactly one store operation, and publish one change notification only
when that operation changed something.

Partial updates are truthiness based: a field that is missing, empty or
otherwise falsy is treated as "not provided" and left untouched. Clients
rely on this, so an empty description cannot be used to clear one.
"""

import logging
from collections.abc import Sequence
from typing import Any

from taskboard.broadcast import Broadcaster
from taskboard.errors import MalformedBatchError, StorageError, ValidationError
from taskboard.models import (
    DEFAULT_CATEGORY,
    DESCRIPTION_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    Task,
    User,
    is_valid_object_id,
    utc_now_iso,
)
from taskboard.store import TaskStore

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("title", "description", "category")


def validate_title(title: Any) -> None:
    """Title must be a non-empty string of at most 50 characters."""
    if not title or not isinstance(title, str) or len(title) > TITLE_MAX_LENGTH:
        raise ValidationError("title", f"Title must be under {TITLE_MAX_LENGTH} characters.")


def validate_description(description: Any) -> None:
    """Description, when given, must be a string of at most 200 characters."""
    if not description:
        return
    if not isinstance(description, str) or len(description) > DESCRIPTION_MAX_LENGTH:
        raise ValidationError(
            "description", f"Description must be under {DESCRIPTION_MAX_LENGTH} characters."
        )


def validate_category(category: Any) -> None:
    if category and not isinstance(category, str):
        raise ValidationError("category", "Category must be a string.")


def validate_task_id(task_id: Any) -> None:
    if not is_valid_object_id(task_id):
        raise ValidationError("id", "Invalid task ID!")


class TaskService:
    """
    Operations behind the HTTP API.

    Args:
        store: Document store holding the user and task collections.
        broadcaster: Publisher told about every successful task mutation.
    """

    def __init__(self, store: TaskStore, broadcaster: Broadcaster) -> None:
        self.store = store
        self.broadcaster = broadcaster

    def register_user(self, email: str, profile: dict[str, Any]) -> User:
        """
        Return the user for ``email``, creating it on first sight.

        A second call with different profile fields leaves the stored
        record untouched.
        """
        existing = self.store.find_user(email)
        if existing is not None:
            return existing

        fields = {key: value for key, value in profile.items() if key not in ("_id", "email")}
        user = self.store.insert_user(email, fields)
        if user is None:
            # Lost a race against a concurrent registration of the same email
            user = self.store.find_user(email)
            if user is None:
                raise StorageError(f"User {email} was neither inserted nor found")
        logger.info("Registered user %s", email)
        return user

    def list_tasks(self) -> Sequence[Task]:
        return self.store.find_tasks()

    def create_task(
        self,
        title: Any,
        description: Any = None,
        category: Any = None,
    ) -> Task:
        """
        Validate and insert a new task, then notify clients.

        Raises:
            ValidationError: Title or description out of bounds.
            StorageError: The insert failed; no notification is sent.
        """
        validate_title(title)
        validate_description(description)
        validate_category(category)

        task = self.store.insert_task(
            title=title,
            description=description or "",
            category=category or DEFAULT_CATEGORY,
            timestamp=utc_now_iso(),
        )
        logger.info("Created task %s", task.id)
        self.broadcaster.publish()
        return task

    def update_task(self, task_id: Any, changes: dict[str, Any]) -> bool:
        """
        Apply the truthy editable fields of ``changes`` to a task.

        Returns:
            True when the task was modified. False covers both an unknown
            identifier and an update that changed nothing.
        """
        validate_task_id(task_id)

        fields = {name: changes[name] for name in EDITABLE_FIELDS if changes.get(name)}
        if "title" in fields:
            validate_title(fields["title"])
        validate_description(fields.get("description"))
        validate_category(fields.get("category"))

        if self.store.update_task(task_id, fields) == 0:
            return False

        logger.info("Updated task %s fields %s", task_id, sorted(fields))
        self.broadcaster.publish()
        return True

    def delete_task(self, task_id: Any) -> bool:
        """Delete a task; False when nothing matched the identifier."""
        validate_task_id(task_id)

        if self.store.delete_task(task_id) == 0:
            return False

        logger.info("Deleted task %s", task_id)
        self.broadcaster.publish()
        return True

    def reorder_tasks(self, reordered: Any) -> int:
        """
        Move tasks to new sort positions and categories in one batch.

        Items are applied independently; one that fails does not undo
        the others. A single notification is published once the batch
        has run, whether or not every item succeeded.

        Args:
            reordered: List of ``{"_id", "timestamp", "category"}`` dicts.

        Returns:
            Number of tasks matched by the batch.

        Raises:
            MalformedBatchError: The payload cannot be turned into a batch,
                or the store rejected every item.
        """
        operations = _build_reorder_operations(reordered)

        result = self.store.bulk_update_tasks(operations)
        if result.failed_ids and len(result.failed_ids) == len(operations):
            raise MalformedBatchError("Failed to reorder tasks")
        if result.failed_ids:
            logger.warning("Reorder left %d task(s) unchanged: %s",
                           len(result.failed_ids), result.failed_ids)

        logger.info("Reordered %d matched task(s)", result.matched_count)
        self.broadcaster.publish()
        return result.matched_count


def _build_reorder_operations(reordered: Any) -> list[tuple[str, dict[str, Any]]]:
    if not isinstance(reordered, list) or not reordered:
        raise MalformedBatchError("reorderedTasks must be a non-empty list")

    operations = []
    for item in reordered:
        if not isinstance(item, dict) or not is_valid_object_id(item.get("_id")):
            raise MalformedBatchError(f"Invalid reorder entry: {item!r}")
        if not item.get("category") or not isinstance(item["category"], str):
            raise MalformedBatchError(f"Reorder entry {item['_id']} has no category")
        operations.append(
            (item["_id"], {"timestamp": item.get("timestamp"), "category": item["category"]})
        )
    return operations
