"""Tweet controller: short owner-only channel posts."""

import logging
import uuid
from typing import Optional

from sqlalchemy.orm import Session

from api.envelope import ApiResponse, ok
from auth.guard import Action, guard
from auth.session_manager import Identity
from controllers.common import commit, required_text
from db.models.tweet import Tweet
from queries.projections import tweet_fields
from queries.social import user_tweets

logger = logging.getLogger(__name__)


def create_tweet(db: Session, actor: Identity, content: Optional[str]) -> ApiResponse:
    tweet = Tweet(content=required_text(content, "Tweet content is required"), owner_id=actor.user_id)
    db.add(tweet)
    commit(db)
    logger.info(f"Tweet {tweet.id} created by user={actor.user_id}")
    return ok({"tweet": tweet_fields(tweet)}, "Tweet created successfully")


def get_user_tweets(db: Session, user_id: uuid.UUID) -> ApiResponse:
    return ok({"tweets": user_tweets(db, user_id)}, "User tweets fetched successfully")


def update_tweet(
    db: Session, actor: Identity, tweet_id: uuid.UUID, content: Optional[str]
) -> ApiResponse:
    text = required_text(content, "Tweet content is required")
    tweet = guard.authorize(actor.user_id, db.get(Tweet, tweet_id), "Tweet not found")
    tweet.content = text
    commit(db)
    return ok({"tweet": tweet_fields(tweet)}, "Tweet updated successfully")


def delete_tweet(db: Session, actor: Identity, tweet_id: uuid.UUID) -> ApiResponse:
    tweet = guard.authorize(
        actor.user_id, db.get(Tweet, tweet_id), "Tweet not found", action=Action.DELETE
    )
    db.delete(tweet)
    commit(db)
    return ok({}, "Tweet deleted successfully")
