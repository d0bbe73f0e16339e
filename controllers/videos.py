"""
Video controller.

Mutations follow load -> exists -> owner -> act. Blob ordering rules:
- update: a replaced thumbnail is deleted only after the new record commits
- delete: blobs are deleted only after the record deletion commits
"""

import logging
import uuid
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from api.envelope import ApiResponse, ok
from api.errors import NotFoundError, ValidationError
from auth.guard import Action, guard
from auth.session_manager import Identity
from controllers.common import Upload, clean_text, commit, has_file, store_upload
from db.models.video import Video
from queries import videos as video_views
from queries.pipeline import PageRequest
from queries.projections import video_fields
from storage.blob_store import BlobStore

logger = logging.getLogger(__name__)


def get_all_videos(
    db: Session,
    *,
    query: Optional[str],
    sort_by: str,
    sort_type: str,
    page: PageRequest,
    user_id: Optional[uuid.UUID] = None,
) -> ApiResponse:
    feed = video_views.feed(
        db,
        video_views.FeedQuery(
            search_text=query or "",
            sort_field=sort_by,
            sort_direction=sort_type,
            page=page,
            owner_id=user_id,
        ),
    )
    return ok(feed.to_dict(), "Videos fetched successfully")


def publish_video(
    db: Session,
    blobs: BlobStore,
    actor: Identity,
    *,
    title: Optional[str],
    description: Optional[str],
    video_file: Optional[Upload],
    thumbnail: Optional[Upload],
) -> ApiResponse:
    """
    Upload both binaries and create the video record (published by default).

    Raises:
        ValidationError: Missing title, description, video file or thumbnail.
    """
    if not clean_text(title) or not clean_text(description):
        raise ValidationError("Video title and description are required")
    if not has_file(video_file):
        raise ValidationError("Video file is missing")
    if not has_file(thumbnail):
        raise ValidationError("Thumbnail file is missing")

    stored_thumbnail = store_upload(blobs, thumbnail, "thumbnails")
    stored_video = store_upload(blobs, video_file, "videos")

    video = Video(
        title=clean_text(title),
        description=clean_text(description),
        video_file=stored_video.url,
        thumbnail=stored_thumbnail.url,
        duration=stored_video.duration,
        owner_id=actor.user_id,
        is_published=True,
    )
    db.add(video)
    commit(db)

    logger.info(f"Video created: id={video.id} owner={actor.user_id}")
    return ok({"video": video_fields(video)}, "Video uploaded successfully")


def get_video_by_id(db: Session, video_id: uuid.UUID) -> ApiResponse:
    return ok({"video": video_views.video_detail(db, video_id)}, "Video fetched successfully")


def update_video(
    db: Session,
    blobs: BlobStore,
    actor: Identity,
    video_id: uuid.UUID,
    *,
    title: Optional[str] = None,
    description: Optional[str] = None,
    thumbnail: Optional[Upload] = None,
) -> ApiResponse:
    """
    Update title/description and optionally replace the thumbnail.

    The old thumbnail blob is deleted only after the updated record has been
    committed. If the commit fails the active thumbnail is left untouched
    and the newly uploaded one is removed.
    """
    new_title = clean_text(title)
    new_description = clean_text(description)
    if not new_title and not new_description and not has_file(thumbnail):
        raise ValidationError("Provide a title, description or thumbnail to update")

    video = guard.authorize(actor.user_id, db.get(Video, video_id), "Video not found")

    old_thumbnail = video.thumbnail
    replaced = None
    if has_file(thumbnail):
        replaced = store_upload(blobs, thumbnail, "thumbnails")
        video.thumbnail = replaced.url
    if new_title:
        video.title = new_title
    if new_description:
        video.description = new_description
    try:
        commit(db)
    except SQLAlchemyError:
        if replaced is not None:
            blobs.delete(replaced.url)
        raise

    if replaced is not None:
        blobs.delete(old_thumbnail)

    logger.info(f"Video updated: id={video.id}")
    return ok({"video": video_fields(video)}, "Video updated successfully")


def delete_video(db: Session, blobs: BlobStore, actor: Identity, video_id: uuid.UUID) -> ApiResponse:
    """
    Delete the record, then its video and thumbnail blobs.

    If the record deletion fails nothing is removed from the blob store.
    """
    video = guard.authorize(
        actor.user_id, db.get(Video, video_id), "Video not found", action=Action.DELETE
    )
    media = (video.video_file, video.thumbnail)

    db.delete(video)
    commit(db)

    for url in media:
        blobs.delete(url)

    logger.info(f"Video deleted: id={video_id} by user={actor.user_id}")
    return ok({}, "Video deleted successfully")


def toggle_publish_status(db: Session, actor: Identity, video_id: uuid.UUID) -> ApiResponse:
    """Flip isPublished. Not idempotent: every call flips."""
    video = guard.authorize(actor.user_id, db.get(Video, video_id), "Video not found")

    video.is_published = not video.is_published
    commit(db)

    status = "Published" if video.is_published else "Unpublished"
    logger.info(f"Video {video.id} is now {status.lower()}")
    return ok(
        {"video": video_fields(video), "status": status},
        f"Video has been {status.lower()} successfully",
    )


def get_user_videos(db: Session, user_id: uuid.UUID) -> ApiResponse:
    return ok({"videos": video_views.user_videos(db, user_id)}, "User videos fetched successfully")


def record_view(db: Session, video_id: uuid.UUID) -> ApiResponse:
    """Increment the view counter in one UPDATE so concurrent views never collide."""
    result = db.execute(
        update(Video).where(Video.id == video_id).values(views=Video.views + 1)
    )
    if result.rowcount == 0:
        db.rollback()
        raise NotFoundError("Video not found")
    commit(db)

    views = db.execute(select(Video.views).where(Video.id == video_id)).scalar_one()
    return ok({"views": views}, "View recorded")
