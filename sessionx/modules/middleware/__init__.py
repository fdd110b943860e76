"""
Session Middleware Module - Black Box Interface

Purpose: Attach a SessionManager to the FastAPI request/response cycle
Interface: SessionMiddleware, get_session(), require_session(), destroy_session()
Hidden: Cookie extraction, rotation policy, the single commit point

The middleware owns the commit point: the session is saved exactly once,
after the endpoint returns and before the response leaves the server.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse

from ..session import Session, SessionError, SessionManager

logger = logging.getLogger(__name__)


class SessionMiddleware:
    """
    Session middleware for FastAPI applications.

    Loads the session into ``request.state.session`` before the endpoint
    runs, then rotates (when due), saves or destroys it and appends the
    resulting ``Set-Cookie`` header.
    """

    def __init__(
        self,
        manager: SessionManager,
        skip_paths: Optional[Dict[str, list]] = None,
        auto_rotate: bool = True,
        fail_on_save_error: bool = True,
        log_attempts: bool = True,
    ):
        """
        Initialize session middleware.

        Args:
            manager: SessionManager shared by all requests
            skip_paths: Dict of {path: [methods]} that bypass sessions entirely
            auto_rotate: Rotate the identifier when the rotation interval is due
            fail_on_save_error: Replace the response with a 500 when saving fails
            log_attempts: Whether to log per-request session activity
        """
        self.manager = manager
        self.skip_paths = skip_paths or {}
        self.auto_rotate = auto_rotate
        self.fail_on_save_error = fail_on_save_error
        self.log_attempts = log_attempts

    def should_skip(self, request: Request) -> bool:
        """Check if sessions should be skipped for this request."""
        path = str(request.url.path)
        method = request.method.upper()

        if path in self.skip_paths:
            allowed_methods = self.skip_paths[path]
            if "*" in allowed_methods or method in allowed_methods:
                return True

        return False

    def format_error(self, status_code: int, message: str) -> Dict[str, Any]:
        return {"error": message, "status": status_code}

    async def __call__(self, request: Request, call_next):
        """Process the request through the session middleware."""
        if self.should_skip(request):
            return await call_next(request)

        cookie_value = request.cookies.get(self.manager.config.cookie_name)
        session = await self.manager.load(cookie_value)
        request.state.session = session
        request.state.session_destroyed = False

        response = await call_next(request)

        try:
            if request.state.session_destroyed:
                directive = await self.manager.destroy(session)
                if self.log_attempts:
                    logger.info(f"Session destroyed for {request.method} {request.url.path}")
            else:
                if self.auto_rotate and self.manager.should_rotate(session):
                    self.manager.rotate(session)
                    if self.log_attempts:
                        logger.info(f"Rotation interval elapsed, session rotated on {request.url.path}")
                directive = await self.manager.save(session)
        except SessionError as e:
            logger.error(f"Failed to commit session on {request.method} {request.url.path}: {e}")
            if self.fail_on_save_error:
                return JSONResponse(
                    status_code=500,
                    content=self.format_error(500, "Internal error while saving session"),
                )
            return response

        response.headers.append("set-cookie", directive.to_header())
        return response


def get_session(request: Request) -> Optional[Session]:
    """Return the session loaded by SessionMiddleware, if any."""
    return getattr(request.state, "session", None)


def require_session(request: Request) -> Session:
    """
    FastAPI dependency returning the current session.

    Raises:
        HTTPException: 500 if SessionMiddleware is not installed
    """
    session = get_session(request)
    if session is None:
        logger.error("Session is missing - check middleware configuration")
        raise HTTPException(status_code=500, detail="Session not available")
    return session


def destroy_session(request: Request) -> None:
    """Mark the current session for destruction at the commit point."""
    if get_session(request) is None:
        raise RuntimeError("No session on this request - is SessionMiddleware installed?")
    request.state.session_destroyed = True


def create_session_middleware(manager: SessionManager, **kwargs) -> SessionMiddleware:
    """
    Factory function to create session middleware.

    Args:
        manager: SessionManager instance
        **kwargs: SessionMiddleware options (skip_paths, auto_rotate, ...)

    Returns:
        Configured SessionMiddleware instance
    """
    return SessionMiddleware(manager, **kwargs)


__all__ = [
    "SessionMiddleware",
    "create_session_middleware",
    "get_session",
    "require_session",
    "destroy_session",
]
