"""Socket.IO connection handlers for the task change channel."""

import logging

from flask import request

from taskboard import socketio

logger = logging.getLogger(__name__)


@socketio.on("connect")
def handle_connect(auth=None) -> None:
    logger.info("A user connected: %s", request.sid)


@socketio.on("disconnect")
def handle_disconnect(*args) -> None:
    logger.info("A user disconnected: %s", request.sid)
