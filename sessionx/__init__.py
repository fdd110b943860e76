"""
sessionx - Encrypted Cookie Sessions

Stateless, AES-GCM encrypted, cookie-carried sessions for FastAPI services,
with optional server-side storage.

Architecture:
- Each module is self-contained with clear interfaces
- Modules are completely replaceable
- No module knows the internals of another
- All communication through defined interfaces

Modules:
- session: Session entity, flash messages, manager and cipher
- storage: Optional session persistence (in-memory, Redis)
- middleware: FastAPI request/response binding
- api: Demo service models
"""

__version__ = "1.0.0"
