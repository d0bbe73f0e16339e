"""
Video read views: public/owner feed, per-user listing and video detail.
"""

import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session, aliased

from api.errors import NotFoundError, ValidationError
from db.models.like import Like
from db.models.user import User
from db.models.video import Video
from queries.pipeline import PageRequest, Page, Pipeline, lookup, match, sort, with_columns
from queries.projections import COMPACT_PROFILE_FIELDS, profile_columns, video_with_owner

logger = logging.getLogger(__name__)

SORT_FIELDS = {
    "createdAt": Video.created_at,
    "views": Video.views,
    "title": Video.title,
}
SORT_DIRECTIONS = ("asc", "desc")


def escape_like(text: str) -> str:
    """Escape LIKE wildcards so user text matches literally."""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def video_likes_count() -> Any:
    return (
        select(func.count(Like.id))
        .where(Like.video_id == Video.id)
        .correlate(Video)
        .scalar_subquery()
        .label("likes_count")
    )


@dataclass
class FeedQuery:
    """
    Inputs of the video feed.

    When `owner_id` is set the feed is that owner's own listing and includes
    unpublished videos; otherwise only published videos are visible.
    """

    search_text: str = ""
    sort_field: str = "createdAt"
    sort_direction: str = "desc"
    page: PageRequest = field(default_factory=PageRequest)
    owner_id: Optional[uuid.UUID] = None

    def __post_init__(self) -> None:
        if self.sort_field not in SORT_FIELDS:
            raise ValidationError(
                f"sortBy must be one of {', '.join(SORT_FIELDS)}"
            )
        if self.sort_direction not in SORT_DIRECTIONS:
            raise ValidationError("sortType must be 'asc' or 'desc'")
        self.search_text = (self.search_text or "").strip()


def feed(db: Session, query: FeedQuery) -> Page:
    """
    Filtered, sorted, paginated video listing.

    Matching is a case-insensitive substring match on title OR description;
    an empty search matches everything. Ties on the sort key are broken by id
    so pages never overlap.
    """
    owner = aliased(User)

    search = None
    if query.search_text:
        pattern = f"%{escape_like(query.search_text)}%"
        search = or_(
            Video.title.ilike(pattern, escape="\\"),
            Video.description.ilike(pattern, escape="\\"),
        )

    if query.owner_id is not None:
        visibility = Video.owner_id == query.owner_id
    else:
        visibility = Video.is_published.is_(True)

    column = SORT_FIELDS[query.sort_field]
    ordering = column.asc() if query.sort_direction == "asc" else column.desc()

    pipeline = (
        Pipeline(Video)
        .pipe(
            lookup(owner, owner.id == Video.owner_id, *profile_columns(owner)),
            match(visibility, search),
            sort(ordering, Video.id.asc()),
        )
        .reshape(video_with_owner)
    )
    return pipeline.paginate(db, query.page)


def user_videos(db: Session, user_id: uuid.UUID) -> list[dict[str, Any]]:
    """Every video a user owns, any publish state, newest first."""
    if db.get(User, user_id) is None:
        raise NotFoundError("User not found")

    owner = aliased(User)
    return (
        Pipeline(Video)
        .pipe(
            lookup(owner, owner.id == Video.owner_id,
                   *profile_columns(owner, fields=COMPACT_PROFILE_FIELDS)),
            match(Video.owner_id == user_id),
            sort(Video.created_at.desc(), Video.id.asc()),
        )
        .reshape(video_with_owner)
        .all(db)
    )


def video_detail(db: Session, video_id: uuid.UUID) -> dict[str, Any]:
    """Video joined to its owner's public profile and like count."""
    owner = aliased(User)
    detail = (
        Pipeline(Video)
        .pipe(
            lookup(owner, owner.id == Video.owner_id, *profile_columns(owner)),
            with_columns(video_likes_count()),
            match(Video.id == video_id),
        )
        .reshape(video_with_owner)
        .first(db)
    )
    if detail is None:
        raise NotFoundError("Video not found")
    return detail
