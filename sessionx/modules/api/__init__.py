"""
API Module - Demo service models
"""

from .models import (
    DashboardResponse,
    LoginRequest,
    MessageResponse,
    SessionInfo,
    VisitResponse,
)

__all__ = [
    "DashboardResponse",
    "LoginRequest",
    "MessageResponse",
    "SessionInfo",
    "VisitResponse",
]
