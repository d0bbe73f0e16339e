"""
Unit tests for the Authorization Guard (auth/guard.py).

Tests cover:
- Ownership rules per resource kind
- Comment moderation by the parent video's owner
- NotFound-before-Forbidden ordering
- Self-subscription rejection
"""

import uuid

import pytest

from api.errors import ForbiddenError, NotFoundError, ValidationError
from auth.guard import Action, AuthorizationGuard
from db.models import Comment, Playlist, Subscription, Tweet, Video


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def guard():
    return AuthorizationGuard()


@pytest.fixture
def owner_id():
    return uuid.uuid4()


@pytest.fixture
def stranger_id():
    return uuid.uuid4()


# =============================================================================
# Ownership Rule Tests
# =============================================================================

class TestOwnershipRules:
    """Tests for can_mutate across resource kinds."""

    @pytest.mark.parametrize("model", [Video, Playlist, Tweet])
    def test_owner_may_mutate(self, guard, owner_id, model):
        """Test that the owner may update and delete owned resources."""
        resource = model(owner_id=owner_id)
        assert guard.can_mutate(owner_id, resource, Action.UPDATE)
        assert guard.can_mutate(owner_id, resource, Action.DELETE)

    @pytest.mark.parametrize("model", [Video, Playlist, Tweet])
    def test_non_owner_may_not_mutate(self, guard, owner_id, stranger_id, model):
        """Test that anyone else is refused."""
        resource = model(owner_id=owner_id)
        assert not guard.can_mutate(stranger_id, resource, Action.UPDATE)
        assert not guard.can_mutate(stranger_id, resource, Action.DELETE)

    def test_subscription_belongs_to_subscriber(self, guard, owner_id, stranger_id):
        """Test that only the subscriber controls a subscription row."""
        subscription = Subscription(subscriber_id=owner_id, channel_id=stranger_id)
        assert guard.can_mutate(owner_id, subscription, Action.DELETE)
        assert not guard.can_mutate(stranger_id, subscription, Action.DELETE)

    def test_unknown_resource_type_raises(self, guard, owner_id):
        """Test that resources without a rule are a programming error."""
        with pytest.raises(TypeError):
            guard.can_mutate(owner_id, object())


class TestCommentRules:
    """Tests for comment author and video-owner moderation rights."""

    def test_author_may_update_and_delete(self, guard, owner_id, stranger_id):
        comment = Comment(owner_id=owner_id, video=Video(owner_id=stranger_id))
        assert guard.can_mutate(owner_id, comment, Action.UPDATE)
        assert guard.can_mutate(owner_id, comment, Action.DELETE)

    def test_video_owner_may_delete_but_not_edit(self, guard, owner_id, stranger_id):
        """Test that the parent video's owner moderates but cannot rewrite."""
        comment = Comment(owner_id=stranger_id, video=Video(owner_id=owner_id))
        assert guard.can_mutate(owner_id, comment, Action.DELETE)
        assert not guard.can_mutate(owner_id, comment, Action.UPDATE)

    def test_third_party_refused(self, guard, owner_id, stranger_id):
        comment = Comment(owner_id=owner_id, video=Video(owner_id=owner_id))
        assert not guard.can_mutate(stranger_id, comment, Action.DELETE)

    def test_comment_without_loaded_video(self, guard, owner_id, stranger_id):
        """Test that a missing parent video grants no moderation right."""
        comment = Comment(owner_id=owner_id)
        assert not guard.can_mutate(stranger_id, comment, Action.DELETE)


# =============================================================================
# Authorize Tests
# =============================================================================

class TestAuthorize:
    """Tests for the exists -> owner sequence."""

    def test_missing_resource_is_not_found_even_for_strangers(self, guard, stranger_id):
        """Test that NotFound is raised before any ownership check."""
        with pytest.raises(NotFoundError) as exc_info:
            guard.authorize(stranger_id, None, "Video not found")
        assert exc_info.value.status_code == 404
        assert exc_info.value.message == "Video not found"

    def test_non_owner_is_forbidden(self, guard, owner_id, stranger_id):
        with pytest.raises(ForbiddenError) as exc_info:
            guard.authorize(stranger_id, Video(owner_id=owner_id), "Video not found")
        assert exc_info.value.status_code == 403

    def test_owner_gets_resource_back(self, guard, owner_id):
        video = Video(owner_id=owner_id)
        assert guard.authorize(owner_id, video, "Video not found") is video

    def test_custom_forbidden_message(self, guard, owner_id, stranger_id):
        with pytest.raises(ForbiddenError, match="Only the owner"):
            guard.authorize(
                stranger_id,
                Playlist(owner_id=owner_id),
                "Playlist not found",
                forbidden_message="Only the owner can edit this playlist",
            )


class TestSelfSubscription:
    """Tests for the self-subscription check."""

    def test_self_subscription_rejected(self, guard, owner_id):
        with pytest.raises(ValidationError) as exc_info:
            guard.ensure_not_self_subscription(owner_id, owner_id)
        assert exc_info.value.status_code == 400

    def test_other_channel_allowed(self, guard, owner_id, stranger_id):
        guard.ensure_not_self_subscription(owner_id, stranger_id)
