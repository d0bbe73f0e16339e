"""
Unit tests for the Session Manager (auth/session_manager.py).

Tests cover:
- Issue / authenticate round trip
- Refresh rotation and reuse detection
- Logout invalidation
- Token type confusion and expiry
- Concurrent refresh with the same token
"""

import threading
import uuid
from datetime import timedelta

import jwt
import pytest
from sqlalchemy import select

from api.errors import UnauthorizedError
from auth.passwords import hash_password
from auth.session_manager import RefreshTokenSlot, SessionManager
from db.models import User
from db.session import SessionLocal

from conftest import PASSWORD


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def user(db):
    """A persisted user with no active session."""
    account = User(
        username="alice",
        email="alice@example.com",
        full_name="Alice",
        password_hash=hash_password(PASSWORD),
    )
    db.add(account)
    db.commit()
    return account


def stored_refresh_token(db, user_id):
    return db.execute(select(User.refresh_token).where(User.id == user_id)).scalar_one()


# =============================================================================
# Issue & Authenticate Tests
# =============================================================================

class TestIssue:
    """Tests for issuing a token pair."""

    def test_issue_stores_refresh_token(self, db, sessions, user):
        """Test that the issued refresh token occupies the user's slot."""
        pair = sessions.issue(db, user)
        assert stored_refresh_token(db, user.id) == pair.refresh_token

    def test_access_token_authenticates(self, db, sessions, user):
        pair = sessions.issue(db, user)
        identity = sessions.authenticate(pair.access_token)
        assert identity.user_id == user.id
        assert identity.username == "alice"

    def test_latest_issue_wins(self, db, sessions, user):
        """Test that a new login supersedes the previous refresh token."""
        first = sessions.issue(db, user)
        second = sessions.issue(db, user)

        with pytest.raises(UnauthorizedError):
            sessions.refresh(db, first.refresh_token)
        assert sessions.refresh(db, second.refresh_token).refresh_token

    def test_to_dict_uses_wire_names(self, db, sessions, user):
        pair = sessions.issue(db, user)
        assert set(pair.to_dict()) == {"accessToken", "refreshToken"}


class TestAuthenticate:
    """Tests for stateless access token verification."""

    def test_missing_token(self, sessions):
        with pytest.raises(UnauthorizedError, match="Unauthorized request"):
            sessions.authenticate(None)

    def test_malformed_token(self, sessions):
        with pytest.raises(UnauthorizedError):
            sessions.authenticate("not-a-jwt")

    def test_token_signed_with_other_secret(self, sessions, user):
        forged = jwt.encode(
            {"sub": str(user.id), "type": "access"},
            "some-other-secret-0123456789abcdef",
            algorithm="HS256",
        )
        with pytest.raises(UnauthorizedError):
            sessions.authenticate(forged)

    def test_refresh_token_is_not_an_access_token(self, db, sessions, user):
        """Test that token types cannot be swapped."""
        pair = sessions.issue(db, user)
        with pytest.raises(UnauthorizedError):
            sessions.authenticate(pair.refresh_token)

    def test_expired_access_token(self, db, user):
        expired = SessionManager(
            access_secret="test-access-secret-0123456789abcdef0123",
            refresh_secret="test-refresh-secret-0123456789abcdef012",
            access_ttl=timedelta(seconds=-30),
            refresh_ttl=timedelta(days=1),
        )
        pair = expired.issue(db, user)
        with pytest.raises(UnauthorizedError, match="expired"):
            expired.authenticate(pair.access_token)


# =============================================================================
# Refresh Tests
# =============================================================================

class TestRefresh:
    """Tests for rotation via compare-and-swap."""

    def test_refresh_rotates_both_tokens(self, db, sessions, user):
        pair = sessions.issue(db, user)
        rotated = sessions.refresh(db, pair.refresh_token)

        assert rotated.refresh_token != pair.refresh_token
        assert stored_refresh_token(db, user.id) == rotated.refresh_token
        assert sessions.authenticate(rotated.access_token).user_id == user.id

    def test_rotated_out_token_is_rejected(self, db, sessions, user):
        """Test that replaying a used refresh token fails."""
        pair = sessions.issue(db, user)
        sessions.refresh(db, pair.refresh_token)

        with pytest.raises(UnauthorizedError, match="expired or used"):
            sessions.refresh(db, pair.refresh_token)

    def test_replay_does_not_disturb_current_session(self, db, sessions, user):
        pair = sessions.issue(db, user)
        rotated = sessions.refresh(db, pair.refresh_token)

        with pytest.raises(UnauthorizedError):
            sessions.refresh(db, pair.refresh_token)
        assert stored_refresh_token(db, user.id) == rotated.refresh_token

    def test_missing_refresh_token(self, db, sessions):
        with pytest.raises(UnauthorizedError, match="required"):
            sessions.refresh(db, None)

    def test_access_token_cannot_refresh(self, db, sessions, user):
        pair = sessions.issue(db, user)
        with pytest.raises(UnauthorizedError):
            sessions.refresh(db, pair.access_token)

    def test_refresh_after_invalidate_fails(self, db, sessions, user):
        """Test that logout clears the slot."""
        pair = sessions.issue(db, user)
        sessions.invalidate(db, user.id)

        assert stored_refresh_token(db, user.id) is None
        with pytest.raises(UnauthorizedError):
            sessions.refresh(db, pair.refresh_token)

    def test_access_token_survives_logout_until_expiry(self, db, sessions, user):
        """Test that access tokens are verified without the store."""
        pair = sessions.issue(db, user)
        sessions.invalidate(db, user.id)
        assert sessions.authenticate(pair.access_token).user_id == user.id

    def test_concurrent_refresh_has_exactly_one_winner(self, db, sessions, user):
        """Test that two simultaneous refreshes with one token cannot both succeed."""
        pair = sessions.issue(db, user)
        barrier = threading.Barrier(2)
        outcomes = []
        lock = threading.Lock()

        def attempt():
            session = SessionLocal()
            try:
                barrier.wait()
                sessions.refresh(session, pair.refresh_token)
                outcome = "rotated"
            except UnauthorizedError:
                outcome = "rejected"
            finally:
                session.close()
            with lock:
                outcomes.append(outcome)

        threads = [threading.Thread(target=attempt) for _ in range(2)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=30)

        assert sorted(outcomes) == ["rejected", "rotated"]


class TestRefreshTokenSlot:
    """Tests for the slot primitives."""

    def test_compare_and_swap_requires_expected_value(self, db, user):
        slot = RefreshTokenSlot(db)
        slot.store(user.id, "token-a")

        assert not slot.compare_and_swap(user.id, "token-b", "token-c")
        assert slot.compare_and_swap(user.id, "token-a", "token-c")
        assert stored_refresh_token(db, user.id) == "token-c"

    def test_store_for_missing_user(self, db):
        assert not RefreshTokenSlot(db).store(uuid.uuid4(), "token")
