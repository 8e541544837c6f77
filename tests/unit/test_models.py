"""
Unit tests for model helpers and serialization.
"""

import pytest
from bson import ObjectId

from taskboard.models import Task, User, is_valid_object_id, new_object_id


pytestmark = pytest.mark.unit


def test_new_object_id_is_24_hex_characters():
    object_id = new_object_id()

    assert len(object_id) == 24
    assert is_valid_object_id(object_id)


def test_new_object_ids_are_unique():
    ids = {new_object_id() for _ in range(100)}

    assert len(ids) == 100


@pytest.mark.parametrize("value", [
    "reorder",
    "",
    "123",
    "zzzzzzzzzzzzzzzzzzzzzzzz",
    "65f1c2a9e4b0a1b2c3d4e5f6a",
    None,
    12345,
])
def test_is_valid_object_id_rejects_malformed_values(value):
    assert not is_valid_object_id(value)


def test_is_valid_object_id_accepts_uppercase_hex():
    assert is_valid_object_id("65F1C2A9E4B0A1B2C3D4E5F6")


def test_task_defaults_and_to_dict(db_session):
    task = Task(title="Test Task")
    db_session.session.add(task)
    db_session.session.commit()

    data = task.to_dict()

    assert data["title"] == "Test Task"
    assert data["description"] == ""
    assert data["category"] == "To-Do"
    assert is_valid_object_id(data["_id"])
    assert data["timestamp"].endswith("Z")


def test_task_timestamp_keeps_numeric_sort_value(db_session):
    """Sort values set by clients round-trip with their original type."""
    # Arrange
    task = Task(title="Numeric", timestamp=1712345678901)
    db_session.session.add(task)
    db_session.session.commit()
    db_session.session.expire_all()

    # Act
    data = db_session.session.get(Task, task.id).to_dict()

    # Assert
    assert data["timestamp"] == 1712345678901


def test_user_to_dict_flattens_profile(db_session):
    user = User(email="ada@example.com", profile={"name": "Ada", "photo": "a.png"})
    db_session.session.add(user)
    db_session.session.commit()

    data = user.to_dict()

    assert data["email"] == "ada@example.com"
    assert data["name"] == "Ada"
    assert data["photo"] == "a.png"
    assert isinstance(data["timestamp"], int)
    assert is_valid_object_id(data["_id"])


def test_new_object_id_round_trips_through_bson():
    object_id = new_object_id()

    assert str(ObjectId(object_id)) == object_id


@pytest.mark.parametrize("column", [Task.__table__.c.category, User.__table__.c.email])
def test_free_text_columns_have_no_length_limit(column):
    """Databases that enforce VARCHAR limits must accept any category or email."""
    assert getattr(column.type, "length", None) is None
