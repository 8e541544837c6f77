"""
HTTP endpoints for users and tasks.

Handlers parse the request, call the task service held by the
application and shape the JSON response. Service errors are turned
into responses by the blueprint error handlers at the bottom.

Endpoints:
    GET    /                  - Liveness check (plain text)
    POST   /users/<email>     - Register a user if the email is new
    GET    /tasks             - List all tasks
    POST   /api/tasks         - Create a task
    PATCH  /tasks/reorder     - Batch update sort positions and categories
    PATCH  /tasks/<id>        - Partially update a task
    DELETE /tasks/<id>        - Delete a task
"""

import logging
from typing import Any

from flask import Blueprint, Response, current_app, jsonify, request

from taskboard import SERVICE_EXTENSION_KEY
from taskboard.errors import StorageError, ValidationError
from taskboard.service import TaskService

logger = logging.getLogger(__name__)

api_bp = Blueprint("api", __name__)

LIVENESS_MESSAGE = "task management server is running"


# -----------------------------------------------------------------------------
# Helper Functions
# -----------------------------------------------------------------------------

def get_service() -> TaskService:
    """Return the task service wired into the current application."""
    return current_app.extensions[SERVICE_EXTENSION_KEY]


def json_body() -> dict[str, Any]:
    """Request body as a dict; anything else counts as an empty object."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


# -----------------------------------------------------------------------------
# API Endpoints
# -----------------------------------------------------------------------------

@api_bp.route("/", methods=["GET"])
def liveness() -> tuple[str, int, dict[str, str]]:
    """Liveness probe."""
    return LIVENESS_MESSAGE, 200, {"Content-Type": "text/plain; charset=utf-8"}


@api_bp.route("/users/<email>", methods=["POST"])
def save_user(email: str) -> tuple[Response, int]:
    """
    Save user info unless the email is already known.

    Returns:
        The existing record when the email was seen before, otherwise
        the newly created one. Both with 200.
    """
    logger.info("POST /users/%s - Saving user", email)

    user = get_service().register_user(email, json_body())
    return jsonify(user.to_dict()), 200


@api_bp.route("/tasks", methods=["GET"])
def get_tasks() -> tuple[Response, int]:
    """Return every task in store order."""
    logger.info("GET /tasks - Fetching all tasks")

    tasks = get_service().list_tasks()
    logger.info("Found %d tasks", len(tasks))
    return jsonify([task.to_dict() for task in tasks]), 200


@api_bp.route("/api/tasks", methods=["POST"])
def create_task() -> tuple[Response, int]:
    """
    Create a new task.

    Request Body (JSON):
        title: Task title (required, at most 50 characters)
        description: Task description (optional, at most 200 characters)
        category: Board column (optional, default: To-Do)

    Returns:
        ``{message, task}`` with 201, or an error with 400/500.
    """
    logger.info("POST /api/tasks - Creating new task")

    data = json_body()
    task = get_service().create_task(
        data.get("title"),
        description=data.get("description"),
        category=data.get("category"),
    )
    return jsonify({"message": "Task added successfully", "task": task.to_dict()}), 201


@api_bp.route("/tasks/reorder", methods=["PATCH"])
def reorder_tasks() -> tuple[Response, int]:
    """
    Reorder tasks, possibly moving them between categories.

    Request Body (JSON):
        reorderedTasks: list of ``{_id, timestamp, category}``
    """
    logger.info("PATCH /tasks/reorder - Reordering tasks")

    get_service().reorder_tasks(json_body().get("reorderedTasks"))
    return jsonify({"message": "Tasks reordered successfully"}), 200


@api_bp.route("/tasks/<task_id>", methods=["PATCH"])
def update_task(task_id: str) -> tuple[Response, int]:
    """
    Edit a task's title, description or category.

    Only non-empty fields are applied. A 404 is returned both for an
    unknown task and for an edit that changes nothing.
    """
    logger.info("PATCH /tasks/%s - Updating task", task_id)

    if not get_service().update_task(task_id, json_body()):
        logger.warning("Task %s not found or unchanged", task_id)
        return jsonify({"error": "Task not found!"}), 404

    return jsonify({"message": "Task updated successfully"}), 200


@api_bp.route("/tasks/<task_id>", methods=["DELETE"])
def delete_task(task_id: str) -> tuple[Response, int]:
    """Delete a task."""
    logger.info("DELETE /tasks/%s - Deleting task", task_id)

    if not get_service().delete_task(task_id):
        logger.warning("Task %s not found", task_id)
        return jsonify({"error": "Task not found!"}), 404

    return jsonify({"message": "Task deleted successfully"}), 200


# -----------------------------------------------------------------------------
# Error Handlers
# -----------------------------------------------------------------------------

@api_bp.errorhandler(ValidationError)
def validation_failed(error: ValidationError) -> tuple[Response, int]:
    """Handle input rejected by the service."""
    logger.warning("Validation failed on %s: %s", error.field, error.message)
    return jsonify({"error": error.message}), 400


@api_bp.errorhandler(StorageError)
def storage_failed(error: StorageError) -> tuple[Response, int]:
    """Handle document store failures."""
    logger.error("Storage error: %s", error)
    return jsonify({"error": "Internal Server Error"}), 500
