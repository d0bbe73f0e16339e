"""
Subscription controller.

A (subscriber, channel) row either exists or it does not; toggling flips
that. Subscribing to yourself is rejected before the store is touched.
"""

import logging
import uuid

from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from api.envelope import ApiResponse, ok
from api.errors import NotFoundError
from auth.guard import guard
from auth.session_manager import Identity
from controllers.common import commit
from db.models.subscription import Subscription
from db.models.user import User
from queries import subscriptions as subscription_views

logger = logging.getLogger(__name__)


def toggle_subscription(db: Session, actor: Identity, channel_id: uuid.UUID) -> ApiResponse:
    """
    Subscribe if not subscribed, unsubscribe otherwise. Unsubscribing is a
    single DELETE scoped to the actor's own row.

    Returns:
        Envelope with `{"subscribed": bool}` reflecting the new state.
    """
    guard.ensure_not_self_subscription(actor.user_id, channel_id)

    if db.get(User, channel_id) is None:
        raise NotFoundError("Channel does not exist")

    removed = db.execute(
        delete(Subscription).where(
            Subscription.subscriber_id == actor.user_id,
            Subscription.channel_id == channel_id,
        )
    )

    if removed.rowcount:
        commit(db)
        subscribed = False
    else:
        db.add(Subscription(subscriber_id=actor.user_id, channel_id=channel_id))
        try:
            db.commit()
        except IntegrityError:
            # Another request created the same row first.
            db.rollback()
        subscribed = True

    state = "subscribed" if subscribed else "unsubscribed"
    logger.info(f"User {actor.user_id} {state} channel {channel_id}")
    return ok({"subscribed": subscribed}, f"Channel {state} successfully")


def get_channel_subscribers(db: Session, channel_id: uuid.UUID) -> ApiResponse:
    return ok(
        {"subscribers": subscription_views.subscribers_of_channel(db, channel_id)},
        "Channel subscribers fetched successfully",
    )


def get_subscribed_channels(db: Session, subscriber_id: uuid.UUID) -> ApiResponse:
    return ok(
        {"channels": subscription_views.channels_subscribed_by(db, subscriber_id)},
        "Subscribed channels fetched successfully",
    )
