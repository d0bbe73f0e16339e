"""
Authorization Guard - ownership-based mutation rights.

Single capability check parameterized by resource kind, so every
controller composes the same sequence:

    load -> exists? (NotFound) -> authorized? (Forbidden) -> act

Ownership rules:
- Video, Playlist, Tweet: resource.owner_id == actor
- Comment: comment owner may update or delete; the parent video's owner may
  additionally delete (moderation). The comment's video must be loaded.
- Subscription: the actor must be the subscriber; subscribing to yourself
  is rejected before any store read.
"""

import logging
import uuid
from enum import Enum
from typing import Any, Callable, Optional, TypeVar

from api.errors import ForbiddenError, NotFoundError, ValidationError
from db.models.comment import Comment
from db.models.playlist import Playlist
from db.models.subscription import Subscription
from db.models.tweet import Tweet
from db.models.video import Video

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Action(str, Enum):
    """Mutation being attempted."""
    UPDATE = "update"
    DELETE = "delete"


def _owned(actor_id: uuid.UUID, resource: Any, action: Action) -> bool:
    return resource.owner_id == actor_id


def _comment_rule(actor_id: uuid.UUID, comment: Comment, action: Action) -> bool:
    if comment.owner_id == actor_id:
        return True
    if action is Action.DELETE:
        return comment.video is not None and comment.video.owner_id == actor_id
    return False


def _subscription_rule(actor_id: uuid.UUID, subscription: Subscription, action: Action) -> bool:
    return subscription.subscriber_id == actor_id


class AuthorizationGuard:
    """
    Pure decision functions over ownership fields. No side effects.

    Usage:
        video = guard.authorize(actor_id, db.get(Video, video_id), "Video not found")
    """

    RULES: dict[type, Callable[[uuid.UUID, Any, Action], bool]] = {
        Video: _owned,
        Playlist: _owned,
        Tweet: _owned,
        Comment: _comment_rule,
        Subscription: _subscription_rule,
    }

    def can_mutate(
        self, actor_id: uuid.UUID, resource: Any, action: Action = Action.UPDATE
    ) -> bool:
        """
        Decide whether the actor may mutate the resource.

        Args:
            actor_id: Authenticated user id.
            resource: Loaded ORM entity.
            action: UPDATE or DELETE (only matters for comments).

        Returns:
            True if permitted.
        """
        rule = self.RULES.get(type(resource))
        if rule is None:
            raise TypeError(f"No ownership rule for {type(resource).__name__}")
        return rule(actor_id, resource, action)

    def ensure_exists(self, resource: Optional[T], message: str) -> T:
        """Raise NotFound when the resource did not load."""
        if resource is None:
            raise NotFoundError(message)
        return resource

    def authorize(
        self,
        actor_id: uuid.UUID,
        resource: Optional[T],
        not_found_message: str,
        action: Action = Action.UPDATE,
        forbidden_message: str = "You are not allowed to perform this action",
    ) -> T:
        """
        Existence first, then ownership.

        A non-owner probing a missing id always gets NotFound, never Forbidden.

        Raises:
            NotFoundError: resource is None.
            ForbiddenError: actor lacks ownership.
        """
        found = self.ensure_exists(resource, not_found_message)
        if not self.can_mutate(actor_id, found, action):
            logger.warning(
                f"Forbidden {action.value} on {type(found).__name__} by user={actor_id}"
            )
            raise ForbiddenError(forbidden_message)
        return found

    def ensure_not_self_subscription(self, actor_id: uuid.UUID, channel_id: uuid.UUID) -> None:
        """Reject subscribing to your own channel. Runs before any store read."""
        if actor_id == channel_id:
            raise ValidationError("You cannot subscribe to your own channel")


# Global instance for convenience
guard = AuthorizationGuard()
