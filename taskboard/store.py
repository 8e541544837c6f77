"""
Document store for users and tasks.

A thin collection-style layer over the SQLAlchemy session: find, insert,
update, delete and bulk-write, each returning the counts a document
database would report. Every driver failure is rolled back and re-raised
as :class:`StorageError`, so callers never see SQLAlchemy exceptions.
"""

import logging
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import delete, or_, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, scoped_session

from taskboard.errors import StorageError
from taskboard.models import Task, User

logger = logging.getLogger(__name__)


@dataclass
class BulkWriteResult:
    """Outcome of a bulk update; failed items are listed by identifier."""

    matched_count: int = 0
    failed_ids: list[str] = field(default_factory=list)


class TaskStore:
    """
    Collection operations backed by a SQLAlchemy session.

    Args:
        session: Session (or scoped session) used for every operation.
    """

    def __init__(self, session: Session | scoped_session) -> None:
        self.session = session

    @contextmanager
    def _guard(self, action: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error("Database %s error: %s", action, exc)
            raise StorageError(f"Failed to {action}") from exc

    # -------------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------------

    def find_user(self, email: str) -> User | None:
        with self._guard("find user"):
            return self.session.scalars(select(User).where(User.email == email)).first()

    def insert_user(self, email: str, profile: dict[str, Any]) -> User | None:
        """
        Insert a user record.

        Returns:
            The stored user, or None when another record already holds
            the email (unique-key violation).
        """
        user = User(email=email, profile=profile)
        try:
            self.session.add(user)
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            logger.info("User %s was registered concurrently", email)
            return None
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error("Database insert user error: %s", exc)
            raise StorageError("Failed to insert user") from exc
        return user

    # -------------------------------------------------------------------------
    # Tasks
    # -------------------------------------------------------------------------

    def find_tasks(self) -> Sequence[Task]:
        with self._guard("fetch tasks"):
            return self.session.scalars(select(Task)).all()

    def insert_task(self, **fields: Any) -> Task:
        task = Task(**fields)
        with self._guard("insert task"):
            self.session.add(task)
            self.session.commit()
        return task

    def update_task(self, task_id: str, fields: dict[str, Any]) -> int:
        """
        Set ``fields`` on one task.

        The statement only matches when at least one field differs from
        the stored value, so the returned count is the number of
        documents actually modified (0 or 1).
        """
        if not fields:
            return 0

        stmt = (
            update(Task)
            .where(Task.id == task_id)
            .where(or_(*(getattr(Task, name) != value for name, value in fields.items())))
            .values(**fields)
        )
        with self._guard("update task"):
            result = self.session.execute(stmt)
            self.session.commit()
        return result.rowcount

    def delete_task(self, task_id: str) -> int:
        with self._guard("delete task"):
            result = self.session.execute(delete(Task).where(Task.id == task_id))
            self.session.commit()
        return result.rowcount

    def bulk_update_tasks(self, operations: Sequence[tuple[str, dict[str, Any]]]) -> BulkWriteResult:
        """
        Apply a batch of ``(task_id, fields)`` updates.

        Each update is committed on its own: a failing item is rolled
        back and recorded, earlier items stay applied and later items
        are still attempted.
        """
        outcome = BulkWriteResult()
        for task_id, fields in operations:
            stmt = update(Task).where(Task.id == task_id).values(**fields)
            try:
                result = self.session.execute(stmt)
                self.session.commit()
            except SQLAlchemyError as exc:
                self.session.rollback()
                logger.warning("Bulk update of task %s failed: %s", task_id, exc)
                outcome.failed_ids.append(task_id)
                continue
            outcome.matched_count += result.rowcount
        return outcome
