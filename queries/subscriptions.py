"""
Subscription views: who follows a channel, and whom a user follows.

Not paginated; fan-out per user is bounded in this domain.
"""

import uuid
from typing import Any

from sqlalchemy.engine import Row
from sqlalchemy.orm import Session, aliased

from api.errors import NotFoundError
from db.models.subscription import Subscription
from db.models.user import User
from queries.pipeline import Pipeline, lookup, match, sort
from queries.projections import profile_columns, profile_from_row


def _counterparty(row: Row) -> dict[str, Any]:
    subscription: Subscription = row[0]
    profile = profile_from_row(row, "user") or {}
    return {**profile, "subscribedAt": subscription.created_at}


def subscribers_of_channel(db: Session, channel_id: uuid.UUID) -> list[dict[str, Any]]:
    """Public profiles of everyone subscribed to `channel_id`, newest first."""
    if db.get(User, channel_id) is None:
        raise NotFoundError("Channel not found")

    subscriber = aliased(User)
    return (
        Pipeline(Subscription)
        .pipe(
            lookup(subscriber, subscriber.id == Subscription.subscriber_id,
                   *profile_columns(subscriber, prefix="user")),
            match(Subscription.channel_id == channel_id),
            sort(Subscription.created_at.desc(), Subscription.id.asc()),
        )
        .reshape(_counterparty)
        .all(db)
    )


def channels_subscribed_by(db: Session, subscriber_id: uuid.UUID) -> list[dict[str, Any]]:
    """Public profiles of every channel `subscriber_id` follows, newest first."""
    if db.get(User, subscriber_id) is None:
        raise NotFoundError("Subscriber not found")

    channel = aliased(User)
    return (
        Pipeline(Subscription)
        .pipe(
            lookup(channel, channel.id == Subscription.channel_id,
                   *profile_columns(channel, prefix="user")),
            match(Subscription.subscriber_id == subscriber_id),
            sort(Subscription.created_at.desc(), Subscription.id.asc()),
        )
        .reshape(_counterparty)
        .all(db)
    )
