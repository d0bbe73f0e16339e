"""
Comments-for-video view.
"""

import uuid
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session, aliased

from api.errors import NotFoundError
from db.models.comment import Comment
from db.models.like import Like
from db.models.user import User
from db.models.video import Video
from queries.pipeline import PageRequest, Page, Pipeline, lookup, match, sort, with_columns
from queries.projections import COMPACT_PROFILE_FIELDS, comment_with_owner, profile_columns


def comment_likes_count() -> Any:
    return (
        select(func.count(Like.id))
        .where(Like.comment_id == Comment.id)
        .correlate(Comment)
        .scalar_subquery()
        .label("likes_count")
    )


def comments_for_video(db: Session, video_id: uuid.UUID, page: PageRequest) -> Page:
    """
    Newest-first page of a video's comments, each joined to its author's
    username and avatar.

    Raises:
        NotFoundError: The video does not exist (checked before the join runs).
    """
    if db.get(Video, video_id) is None:
        raise NotFoundError("Video not found")

    author = aliased(User)
    return (
        Pipeline(Comment)
        .pipe(
            lookup(author, author.id == Comment.owner_id,
                   *profile_columns(author, fields=COMPACT_PROFILE_FIELDS)),
            with_columns(comment_likes_count()),
            match(Comment.video_id == video_id),
            sort(Comment.created_at.desc(), Comment.id.asc()),
        )
        .reshape(comment_with_owner)
        .paginate(db, page)
    )
