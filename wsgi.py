"""WSGI entry point for the task board service."""

import os

from taskboard import create_app, socketio

app = create_app(os.getenv("FLASK_ENV", "production"))


if __name__ == "__main__":
    # Development server only; production runs `app` under a WSGI server
    socketio.run(app, host=app.config["HOST"], port=app.config["PORT"],
                 allow_unsafe_werkzeug=app.debug)
