"""
Change-notification publishers.

The task service depends on the :class:`Broadcaster` protocol only; the
application wires in :class:`SocketIOBroadcaster`, tests substitute a
recording fake, and :class:`NullBroadcaster` switches notifications off.
"""

import logging
from typing import Protocol

from flask_socketio import SocketIO

logger = logging.getLogger(__name__)


class Broadcaster(Protocol):
    """Tell every connected client that task state changed."""

    def publish(self) -> None: ...


class SocketIOBroadcaster:
    """
    Emit a payload-free event to all Socket.IO clients.

    Delivery is fire-and-forget: the emit is not acknowledged, and a
    failure is logged rather than propagated to the request that
    triggered it.

    Args:
        socketio: Initialized Socket.IO extension.
        event: Event name clients listen for.
    """

    def __init__(self, socketio: SocketIO, event: str = "task-updated") -> None:
        self.socketio = socketio
        self.event = event

    def publish(self) -> None:
        try:
            self.socketio.emit(self.event)
        except Exception as exc:
            logger.warning("Failed to broadcast %s: %s", self.event, exc)
        else:
            logger.debug("Broadcast %s", self.event)


class NullBroadcaster:
    """Broadcaster that drops every notification."""

    def publish(self) -> None:
        return None
