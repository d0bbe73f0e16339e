"""
Comment controller.

A comment may be edited only by its author. It may be deleted by its
author or by the owner of the video it was posted on.
"""

import logging
import uuid
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from api.envelope import ApiResponse, ok
from api.errors import NotFoundError
from auth.guard import Action, guard
from auth.session_manager import Identity
from controllers.common import commit, required_text
from db.models.comment import Comment
from db.models.video import Video
from queries.comments import comments_for_video
from queries.pipeline import PageRequest
from queries.projections import comment_fields

logger = logging.getLogger(__name__)


def get_video_comments(db: Session, video_id: uuid.UUID, page: PageRequest) -> ApiResponse:
    comments = comments_for_video(db, video_id, page)
    return ok({"comments": comments.to_dict()}, "Video comments fetched successfully")


def add_comment(
    db: Session, actor: Identity, video_id: uuid.UUID, content: Optional[str]
) -> ApiResponse:
    text = required_text(content, "Comment content is required")
    if db.get(Video, video_id) is None:
        raise NotFoundError("Video not found")

    comment = Comment(content=text, video_id=video_id, owner_id=actor.user_id)
    db.add(comment)
    commit(db)

    logger.info(f"Comment {comment.id} added to video {video_id}")
    return ok({"comment": comment_fields(comment)}, "Comment added successfully")


def update_comment(
    db: Session, actor: Identity, comment_id: uuid.UUID, content: Optional[str]
) -> ApiResponse:
    text = required_text(content, "Comment content is required")
    comment = guard.authorize(actor.user_id, db.get(Comment, comment_id), "Comment not found")

    comment.content = text
    commit(db)
    return ok({"comment": comment_fields(comment)}, "Comment updated successfully")


def delete_comment(db: Session, actor: Identity, comment_id: uuid.UUID) -> ApiResponse:
    """Comment author or parent video owner only."""
    loaded = db.execute(
        select(Comment)
        .options(selectinload(Comment.video))
        .where(Comment.id == comment_id)
    ).scalar_one_or_none()
    comment = guard.authorize(
        actor.user_id, loaded, "Comment not found", action=Action.DELETE
    )

    db.delete(comment)
    commit(db)

    logger.info(f"Comment {comment_id} deleted by user={actor.user_id}")
    return ok({}, "Comment deleted successfully")
