"""
Authentication and authorization for the StreamHub API.

- session_manager: access/refresh token pairs and rotation
- guard: ownership-based mutation rights
- passwords: password hashing
"""

from auth.guard import Action, AuthorizationGuard, guard
from auth.session_manager import Identity, SessionManager, TokenPair

__all__ = [
    "Action",
    "AuthorizationGuard",
    "guard",
    "Identity",
    "SessionManager",
    "TokenPair",
]
