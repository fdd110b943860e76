#!/usr/bin/env python3
"""
sessionx - Demo Service Entry Point

This is the thin orchestration layer that:
1. Loads configuration
2. Builds the session stack
3. Runs a small FastAPI app exercising sessions, rotation and flashes

All session logic is in the modules, following black box principles.
"""

import logging
import logging.config as log_config
from contextlib import asynccontextmanager
from typing import Any, Optional

import redis.asyncio as redis
import uvicorn
from fastapi import Depends, FastAPI, HTTPException, Request

from sessionx.config.provider import ConfigProvider, EnvConfigProvider
from sessionx.logging_config import get_logging_config
from sessionx.modules.api import (
    DashboardResponse,
    LoginRequest,
    MessageResponse,
    SessionInfo,
    VisitResponse,
)
from sessionx.modules.middleware import SessionMiddleware, destroy_session, require_session
from sessionx.modules.session import Session, SessionManager
from sessionx.modules.session.factory import SessionFactory

logger = logging.getLogger(__name__)


def get_redis_client(config_provider: ConfigProvider) -> redis.Redis:
    """Create Redis client from configuration."""
    redis_config = config_provider.get_redis_config()
    return redis.from_url(
        redis_config.url,
        password=redis_config.password,
        encoding="utf-8",
        decode_responses=True,
    )


def create_app(manager: SessionManager, redis_client: Optional[Any] = None) -> FastAPI:
    """
    Build the demo application around a session manager.

    Args:
        manager: Configured SessionManager
        redis_client: Redis client to close on shutdown, if any
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting sessionx demo service...")
        yield
        logger.info("Shutting down sessionx demo service...")
        if redis_client:
            await redis_client.close()

    app = FastAPI(
        title="sessionx demo",
        description="Encrypted cookie sessions with rotation and flash messages",
        version="1.0.0",
        lifespan=lifespan,
    )

    session_middleware = SessionMiddleware(manager, skip_paths={"/health": ["GET"]})

    @app.middleware("http")
    async def add_session(request: Request, call_next):
        return await session_middleware(request, call_next)

    @app.get("/health")
    async def health():
        return {"status": "healthy"}

    @app.get("/", response_model=VisitResponse)
    async def visit(session: Session = Depends(require_session)):
        count, _ = session.get_int("visits")
        session.set("visits", (count or 0) + 1)
        return VisitResponse(visits=session.get("visits"), session_id=session.id)

    @app.post("/login", response_model=MessageResponse)
    async def login(body: LoginRequest, session: Session = Depends(require_session)):
        session.set("username", body.username)
        session.set("logged_in", True)

        # New identity, new identifier
        manager.rotate(session)
        session.add_flash("success", f"Welcome back, {body.username}!")
        logger.info("Visitor logged in, session rotated")
        return MessageResponse(message="Logged in")

    @app.get("/dashboard", response_model=DashboardResponse)
    async def dashboard(session: Session = Depends(require_session)):
        logged_in, ok = session.get_bool("logged_in")
        if not ok or not logged_in:
            session.add_flash("error", "Please log in first")
            raise HTTPException(status_code=401, detail="Unauthorized")

        username, _ = session.get_string("username")
        notice, _ = session.get_flash("success")
        return DashboardResponse(username=username or "", notice=notice, flashes=session.get_flashes())

    @app.post("/logout", response_model=MessageResponse)
    async def logout(request: Request):
        destroy_session(request)
        return MessageResponse(message="Logged out")

    @app.get("/session", response_model=SessionInfo)
    async def session_info(session: Session = Depends(require_session)):
        return SessionInfo(
            session_id=session.id,
            created_at=session.created_at,
            updated_at=session.updated_at,
            rotated_at=session.rotated_at,
            keys=session.keys(),
        )

    return app


def main() -> None:
    config_provider = EnvConfigProvider()
    api_config = config_provider.get_api_config()
    session_config = config_provider.get_session_config()

    logging_config = get_logging_config(api_config.log_level, session_config.cookie_name)
    log_config.dictConfig(logging_config)

    redis_client = None
    if config_provider.get_store_config().is_remote:
        redis_client = get_redis_client(config_provider)

    manager = SessionFactory.build(config_provider, redis_client)
    app = create_app(manager, redis_client)

    uvicorn.run(app, host=api_config.host, port=api_config.port, log_config=logging_config)


if __name__ == "__main__":
    main()
