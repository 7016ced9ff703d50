from __future__ import annotations

from fastapi.requests import HTTPConnection

from app.session_manager import SessionManager


def get_session_manager(conn: HTTPConnection) -> SessionManager:
    """The app-wide manager, created by `create_app` and kept on `app.state`."""

    manager = getattr(conn.app.state, "session_manager", None)
    if manager is None:
        raise RuntimeError("Session manager not initialized. Build the app with create_app().")
    return manager
