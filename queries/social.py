"""
Channel-level views: channel profile, liked videos, tweets and the
owner dashboard.
"""

import uuid
from typing import Any, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session, aliased

from api.errors import NotFoundError
from db.models.like import Like
from db.models.subscription import Subscription
from db.models.tweet import Tweet
from db.models.user import User
from db.models.video import Video
from queries.pipeline import Pipeline, inner_join, lookup, match, sort, with_columns
from queries.projections import (
    profile_columns,
    public_profile,
    tweet_with_owner,
    video_with_owner,
)
from queries.videos import video_likes_count


def channel_profile(
    db: Session, username: str, viewer_id: Optional[uuid.UUID] = None
) -> dict[str, Any]:
    """
    Public channel page for `username` with follower counts.

    `isSubscribed` is relative to the viewer and False for anonymous viewers.
    """
    user = db.execute(
        select(User).where(User.username == username.strip().lower())
    ).scalar_one_or_none()
    if user is None:
        raise NotFoundError("Channel does not exist")

    subscribers_count = db.execute(
        select(func.count(Subscription.id)).where(Subscription.channel_id == user.id)
    ).scalar_one()
    subscribed_to_count = db.execute(
        select(func.count(Subscription.id)).where(Subscription.subscriber_id == user.id)
    ).scalar_one()

    is_subscribed = False
    if viewer_id is not None:
        is_subscribed = db.execute(
            select(Subscription.id).where(
                Subscription.channel_id == user.id,
                Subscription.subscriber_id == viewer_id,
            )
        ).first() is not None

    return {
        **public_profile(user),
        "coverImage": user.cover_image,
        "subscribersCount": subscribers_count,
        "channelsSubscribedToCount": subscribed_to_count,
        "isSubscribed": is_subscribed,
    }


def liked_videos(db: Session, user_id: uuid.UUID) -> list[dict[str, Any]]:
    """Videos the user liked, most recently liked first.

    Another owner's unpublished videos are hidden; the user's own are kept.
    """
    owner = aliased(User)
    return (
        Pipeline(Video)
        .pipe(
            inner_join(Like, Like.video_id == Video.id),
            lookup(owner, owner.id == Video.owner_id, *profile_columns(owner)),
            match(
                Like.liked_by_id == user_id,
                or_(Video.is_published.is_(True), Video.owner_id == user_id),
            ),
            sort(Like.created_at.desc(), Like.id.asc()),
        )
        .reshape(video_with_owner)
        .all(db)
    )


def user_tweets(db: Session, user_id: uuid.UUID) -> list[dict[str, Any]]:
    """A user's tweets, newest first, with like counts."""
    if db.get(User, user_id) is None:
        raise NotFoundError("User not found")

    likes_count = (
        select(func.count(Like.id))
        .where(Like.tweet_id == Tweet.id)
        .correlate(Tweet)
        .scalar_subquery()
        .label("likes_count")
    )
    owner = aliased(User)
    return (
        Pipeline(Tweet)
        .pipe(
            lookup(owner, owner.id == Tweet.owner_id, *profile_columns(owner)),
            with_columns(likes_count),
            match(Tweet.owner_id == user_id),
            sort(Tweet.created_at.desc(), Tweet.id.asc()),
        )
        .reshape(tweet_with_owner)
        .all(db)
    )


# =============================================================================
# Dashboard
# =============================================================================

def channel_stats(db: Session, user_id: uuid.UUID) -> dict[str, int]:
    """Totals for the owner's channel across all of their videos."""
    totals = db.execute(
        select(func.count(Video.id), func.coalesce(func.sum(Video.views), 0))
        .where(Video.owner_id == user_id)
    ).one()
    total_subscribers = db.execute(
        select(func.count(Subscription.id)).where(Subscription.channel_id == user_id)
    ).scalar_one()
    total_likes = db.execute(
        select(func.count(Like.id))
        .join(Video, Like.video_id == Video.id)
        .where(Video.owner_id == user_id)
    ).scalar_one()

    return {
        "totalVideos": totals[0],
        "totalViews": int(totals[1]),
        "totalSubscribers": total_subscribers,
        "totalLikes": total_likes,
    }


def channel_videos(db: Session, user_id: uuid.UUID) -> list[dict[str, Any]]:
    """All of the owner's videos in any publish state, newest first."""
    owner = aliased(User)
    return (
        Pipeline(Video)
        .pipe(
            lookup(owner, owner.id == Video.owner_id, *profile_columns(owner)),
            with_columns(video_likes_count()),
            match(Video.owner_id == user_id),
            sort(Video.created_at.desc(), Video.id.asc()),
        )
        .reshape(video_with_owner)
        .all(db)
    )
