"""
Demo service data models.

Request and response shapes for the example endpoints in ``sessionx.main``.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Request to log a visitor in."""

    username: str = Field(..., description="Display name to remember", min_length=1, max_length=64)


class SessionInfo(BaseModel):
    """Public view of the current session."""

    session_id: str
    created_at: datetime
    updated_at: datetime
    rotated_at: datetime
    keys: list = Field(default_factory=list, description="User data keys, flashes excluded")


class VisitResponse(BaseModel):
    visits: int
    session_id: str


class DashboardResponse(BaseModel):
    """Dashboard payload, including flash messages consumed by this request."""

    username: str
    flashes: Dict[str, Any] = Field(default_factory=dict)
    notice: Optional[str] = None


class MessageResponse(BaseModel):
    message: str
