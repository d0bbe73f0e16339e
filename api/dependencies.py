"""
FastAPI dependencies: session manager, blob store and the current actor.

The access token is read from `Authorization: Bearer ...` first and falls
back to the `accessToken` cookie.
"""

from functools import lru_cache
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from api.errors import UnauthorizedError
from auth.session_manager import Identity, SessionManager
from config import config
from storage.blob_store import BlobStore, build_blob_store

ACCESS_COOKIE = "accessToken"
REFRESH_COOKIE = "refreshToken"

bearer_scheme = HTTPBearer(auto_error=False)


@lru_cache(maxsize=1)
def get_session_manager() -> SessionManager:
    return SessionManager.from_config(config.auth)


@lru_cache(maxsize=1)
def get_blob_store() -> BlobStore:
    return build_blob_store(config.storage)


def _access_token(
    request: Request, credentials: Optional[HTTPAuthorizationCredentials]
) -> Optional[str]:
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(ACCESS_COOKIE)


def get_current_identity(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    sessions: SessionManager = Depends(get_session_manager),
) -> Identity:
    """Require a valid access token (401 otherwise)."""
    return sessions.authenticate(_access_token(request, credentials))


def get_optional_identity(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    sessions: SessionManager = Depends(get_session_manager),
) -> Optional[Identity]:
    """Identity when a valid access token is present, otherwise anonymous."""
    token = _access_token(request, credentials)
    if not token:
        return None
    try:
        return sessions.authenticate(token)
    except UnauthorizedError:
        return None


def reset_cached_dependencies() -> None:
    get_session_manager.cache_clear()
    get_blob_store.cache_clear()
