"""
Session Manager - paired access/refresh tokens bound to a user identity.

Responsibilities:
- issue: mint an access + refresh pair and store the refresh token in the
  user's single refresh-token slot (latest issue wins)
- refresh: verify a presented refresh token and rotate both tokens with a
  compare-and-swap on the slot, so a rotated-out token can never be reused
- invalidate: clear the slot (logout)
- authenticate: stateless access-token verification

Access tokens are not checked against the store. A logged-out user's access
token stays valid until it expires; only the refresh flow sees revocation.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import jwt
from sqlalchemy import update
from sqlalchemy.orm import Session

from api.errors import UnauthorizedError
from config import AuthConfig
from db.models.user import User

logger = logging.getLogger(__name__)

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


@dataclass(frozen=True)
class Identity:
    """Authenticated actor derived from an access token."""

    user_id: uuid.UUID
    username: str


@dataclass(frozen=True)
class TokenPair:
    """Access + refresh token pair returned by issue/refresh."""

    access_token: str
    refresh_token: str

    def to_dict(self) -> dict[str, str]:
        return {
            "accessToken": self.access_token,
            "refreshToken": self.refresh_token,
        }


class RefreshTokenSlot:
    """
    The one-slot-per-user refresh token table (users.refresh_token).

    Every write is a single UPDATE statement so the store serializes
    concurrent writers; compare_and_swap is the only way to rotate.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def store(self, user_id: uuid.UUID, token: str) -> bool:
        """Overwrite the slot unconditionally. Returns False if the user is gone."""
        result = self.db.execute(
            update(User).where(User.id == user_id).values(refresh_token=token)
        )
        self.db.commit()
        return result.rowcount == 1

    def clear(self, user_id: uuid.UUID) -> None:
        self.db.execute(
            update(User).where(User.id == user_id).values(refresh_token=None)
        )
        self.db.commit()

    def compare_and_swap(self, user_id: uuid.UUID, expected: str, new: str) -> bool:
        """
        Replace the slot value only if it still equals `expected`.

        Args:
            user_id: Owner of the slot.
            expected: Token the caller presented.
            new: Rotated token to store.

        Returns:
            True if exactly one row was updated, False if the slot had moved on.
        """
        result = self.db.execute(
            update(User)
            .where(User.id == user_id, User.refresh_token == expected)
            .values(refresh_token=new)
        )
        self.db.commit()
        return result.rowcount == 1


class SessionManager:
    """
    Issues, validates and rotates access/refresh token pairs.

    Usage:
        manager = SessionManager.from_config(config.auth)
        pair = manager.issue(db, user)
        identity = manager.authenticate(pair.access_token)
        pair = manager.refresh(db, pair.refresh_token)
    """

    def __init__(
        self,
        access_secret: str,
        refresh_secret: str,
        access_ttl: timedelta,
        refresh_ttl: timedelta,
        algorithm: str = "HS256",
    ) -> None:
        self.access_secret = access_secret
        self.refresh_secret = refresh_secret
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl
        self.algorithm = algorithm

    @classmethod
    def from_config(cls, auth: AuthConfig) -> "SessionManager":
        return cls(
            access_secret=auth.access_token_secret,
            refresh_secret=auth.refresh_token_secret,
            access_ttl=timedelta(minutes=auth.access_token_expiry_minutes),
            refresh_ttl=timedelta(days=auth.refresh_token_expiry_days),
            algorithm=auth.algorithm,
        )

    # -------------------------------------------------------------------------
    # TOKEN ENCODING
    # -------------------------------------------------------------------------

    def _encode(self, claims: dict[str, Any], secret: str, ttl: timedelta) -> str:
        now = datetime.now(timezone.utc)
        payload = {**claims, "iat": now, "exp": now + ttl}
        return jwt.encode(payload, secret, algorithm=self.algorithm)

    def _decode(self, token: str, secret: str, expected_type: str) -> dict[str, Any]:
        try:
            claims = jwt.decode(token, secret, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            raise UnauthorizedError(f"{expected_type.capitalize()} token has expired")
        except jwt.InvalidTokenError:
            raise UnauthorizedError(f"Invalid {expected_type} token")

        if claims.get("type") != expected_type:
            raise UnauthorizedError(f"Invalid {expected_type} token")
        return claims

    @staticmethod
    def _subject(claims: dict[str, Any]) -> uuid.UUID:
        try:
            return uuid.UUID(str(claims.get("sub")))
        except ValueError:
            raise UnauthorizedError("Invalid token subject")

    def create_access_token(self, user_id: uuid.UUID, username: str) -> str:
        return self._encode(
            {"sub": str(user_id), "username": username, "type": ACCESS_TOKEN_TYPE},
            self.access_secret,
            self.access_ttl,
        )

    def create_refresh_token(self, user_id: uuid.UUID) -> str:
        return self._encode(
            {"sub": str(user_id), "type": REFRESH_TOKEN_TYPE, "jti": uuid.uuid4().hex},
            self.refresh_secret,
            self.refresh_ttl,
        )

    # -------------------------------------------------------------------------
    # SESSION OPERATIONS
    # -------------------------------------------------------------------------

    def issue(self, db: Session, user: User) -> TokenPair:
        """
        Mint a fresh pair and store its refresh token, replacing any prior one.

        Args:
            db: Database session.
            user: The authenticated user.

        Returns:
            The new TokenPair.
        """
        pair = TokenPair(
            access_token=self.create_access_token(user.id, user.username),
            refresh_token=self.create_refresh_token(user.id),
        )
        if not RefreshTokenSlot(db).store(user.id, pair.refresh_token):
            raise UnauthorizedError("User no longer exists")
        logger.info(f"Session issued for user={user.id}")
        return pair

    def refresh(self, db: Session, presented: Optional[str]) -> TokenPair:
        """
        Exchange a refresh token for a rotated pair.

        The presented token must verify and must still be the value held in
        the user's slot; the swap to the new value happens in one statement,
        so of two concurrent calls with the same token exactly one succeeds.

        Args:
            db: Database session.
            presented: Refresh token sent by the client.

        Returns:
            The rotated TokenPair.

        Raises:
            UnauthorizedError: Missing, malformed, expired, or rotated-out token.
        """
        if not presented:
            raise UnauthorizedError("Refresh token is required")

        claims = self._decode(presented, self.refresh_secret, REFRESH_TOKEN_TYPE)
        user_id = self._subject(claims)

        user = db.get(User, user_id)
        if user is None:
            raise UnauthorizedError("Invalid refresh token")

        pair = TokenPair(
            access_token=self.create_access_token(user.id, user.username),
            refresh_token=self.create_refresh_token(user.id),
        )
        if not RefreshTokenSlot(db).compare_and_swap(user_id, presented, pair.refresh_token):
            logger.warning(f"Rejected stale or reused refresh token for user={user_id}")
            raise UnauthorizedError("Refresh token is expired or used")

        logger.info(f"Session rotated for user={user_id}")
        return pair

    def invalidate(self, db: Session, user_id: uuid.UUID) -> None:
        """Clear the user's refresh token so later refresh calls fail."""
        RefreshTokenSlot(db).clear(user_id)
        logger.info(f"Session invalidated for user={user_id}")

    def authenticate(self, access_token: Optional[str]) -> Identity:
        """
        Verify an access token without consulting the store.

        Raises:
            UnauthorizedError: Missing, malformed or expired token.
        """
        if not access_token:
            raise UnauthorizedError("Unauthorized request")

        claims = self._decode(access_token, self.access_secret, ACCESS_TOKEN_TYPE)
        return Identity(user_id=self._subject(claims), username=claims.get("username", ""))
