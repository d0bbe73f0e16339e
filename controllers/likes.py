"""
Like controller: toggle likes on videos, comments and tweets.
"""

import logging
import uuid
from typing import Any

from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from api.envelope import ApiResponse, ok
from api.errors import NotFoundError
from auth.session_manager import Identity
from controllers.common import commit
from db.models.comment import Comment
from db.models.like import Like
from db.models.tweet import Tweet
from db.models.video import Video
from queries.social import liked_videos

logger = logging.getLogger(__name__)


def _toggle(
    db: Session, actor: Identity, model: type, target_field: str, target_id: uuid.UUID
) -> ApiResponse:
    name = model.__name__
    if db.get(model, target_id) is None:
        raise NotFoundError(f"{name} not found")

    column: Any = getattr(Like, target_field)
    removed = db.execute(
        delete(Like).where(Like.liked_by_id == actor.user_id, column == target_id)
    )

    if removed.rowcount:
        commit(db)
        liked = False
    else:
        db.add(Like(liked_by_id=actor.user_id, **{target_field: target_id}))
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
        liked = True

    logger.info(f"User {actor.user_id} {'liked' if liked else 'unliked'} {name.lower()} {target_id}")
    return ok({"liked": liked}, f"{name} {'liked' if liked else 'unliked'} successfully")


def toggle_video_like(db: Session, actor: Identity, video_id: uuid.UUID) -> ApiResponse:
    return _toggle(db, actor, Video, "video_id", video_id)


def toggle_comment_like(db: Session, actor: Identity, comment_id: uuid.UUID) -> ApiResponse:
    return _toggle(db, actor, Comment, "comment_id", comment_id)


def toggle_tweet_like(db: Session, actor: Identity, tweet_id: uuid.UUID) -> ApiResponse:
    return _toggle(db, actor, Tweet, "tweet_id", tweet_id)


def get_liked_videos(db: Session, actor: Identity) -> ApiResponse:
    return ok({"videos": liked_videos(db, actor.user_id)}, "Liked videos fetched successfully")
