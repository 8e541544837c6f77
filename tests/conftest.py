"""
Shared pytest fixtures for the task board test suite.

This module contains fixtures that are shared across all test modules.
Fixtures follow the Arrange-Act-Assert (AAA) pattern and ensure
test isolation by providing fresh data for each test.

Key Concepts Demonstrated:
- Fixture scopes (function, session)
- Injecting a recording broadcaster through the app factory
- Test data factories
- Database setup/teardown
"""

import os
import pytest
from typing import Any
from faker import Faker

# Set testing environment before importing app
os.environ["FLASK_ENV"] = "testing"

from taskboard import SERVICE_EXTENSION_KEY, create_app, db
from taskboard.models import Task, new_object_id
from tests.fakes import RecordingBroadcaster


# Initialize Faker for generating test data
fake = Faker()


# -----------------------------------------------------------------------------
# Application Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture(scope="session")
def broadcaster() -> RecordingBroadcaster:
    """Broadcaster shared by the session app; reset by ``notifications``."""
    return RecordingBroadcaster()


@pytest.fixture(scope="session")
def app(broadcaster):
    """
    Create application instance for the test session.

    The app is wired with a recording broadcaster instead of the
    Socket.IO channel so tests can count change notifications.

    Yields:
        Flask application instance configured for testing.
    """
    application = create_app("testing", broadcaster=broadcaster)
    yield application


@pytest.fixture(scope="function")
def client(app):
    """
    Create a test client for making HTTP requests.

    Yields:
        Flask test client for making HTTP requests.
    """
    with app.test_client() as test_client:
        yield test_client


@pytest.fixture(scope="function")
def db_session(app):
    """
    Create a fresh database for each test.

    Creates all tables before the test and drops them afterwards so
    every test starts from empty collections.

    Yields:
        SQLAlchemy extension instance.
    """
    with app.app_context():
        db.create_all()
        yield db
        db.session.rollback()
        db.drop_all()


@pytest.fixture(scope="function")
def notifications(broadcaster) -> RecordingBroadcaster:
    """Recording broadcaster with its counter reset for this test."""
    broadcaster.reset()
    return broadcaster


@pytest.fixture
def service(app):
    """The task service wired into the test application."""
    return app.extensions[SERVICE_EXTENSION_KEY]


# -----------------------------------------------------------------------------
# Test Data Factory Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture
def task_factory(db_session):
    """
    Factory fixture for inserting Task rows directly.

    Rows are written through the session, bypassing the service, so
    creating fixtures never produces notifications.

    Example:
        def test_something(task_factory):
            task = task_factory(title="My Task")
            assert task.id is not None
    """

    def _create_task(
        title: str | None = None,
        description: str = "",
        category: str = "To-Do",
        timestamp: Any = None,
    ) -> Task:
        task = Task(
            title=title or fake.sentence(nb_words=3)[:50],
            description=description,
            category=category,
            timestamp=timestamp if timestamp is not None else fake.iso8601() + "Z",
        )
        db_session.session.add(task)
        db_session.session.commit()
        return task

    return _create_task


@pytest.fixture
def sample_task(task_factory) -> Task:
    """A single task with known values."""
    return task_factory(
        title="Sample Task",
        description="This is a sample task for testing",
        category="To-Do",
    )


@pytest.fixture
def board_tasks(task_factory) -> list[Task]:
    """Tasks spread over the three board columns."""
    return [
        task_factory(title="Write report", category="To-Do", timestamp=1),
        task_factory(title="Review PR", category="In Progress", timestamp=2),
        task_factory(title="Deploy", category="Done", timestamp=3),
    ]


# -----------------------------------------------------------------------------
# Test Data Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture
def valid_task_data() -> dict[str, Any]:
    """Valid task payload with every field."""
    return {
        "title": "Test Task",
        "description": "This is a test task description",
        "category": "In Progress",
    }


@pytest.fixture
def minimal_task_data() -> dict[str, str]:
    """Task payload with only the required title."""
    return {"title": "Minimal Task"}


@pytest.fixture
def unknown_task_id() -> str:
    """Well-formed identifier that matches no task."""
    return new_object_id()


@pytest.fixture
def api_headers() -> dict[str, str]:
    """Common headers for JSON requests."""
    return {
        "Content-Type": "application/json",
        "Accept": "application/json"
    }
