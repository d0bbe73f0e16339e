"""
Playlist controller.

Only the owner may rename, delete, or change a playlist's videos. Adding a
video already in the playlist is a no-op.
"""

import logging
import uuid
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from api.envelope import ApiResponse, ok
from api.errors import NotFoundError, ValidationError
from auth.guard import Action, guard
from auth.session_manager import Identity
from controllers.common import clean_text, commit, required_text
from db.models.playlist import Playlist, PlaylistEntry
from db.models.video import Video
from queries import playlists as playlist_views
from queries.projections import playlist_fields

logger = logging.getLogger(__name__)


def create_playlist(
    db: Session, actor: Identity, name: Optional[str], description: Optional[str]
) -> ApiResponse:
    message = "Playlist name and description are both required"
    playlist = Playlist(
        name=required_text(name, message),
        description=required_text(description, message),
        owner_id=actor.user_id,
    )
    db.add(playlist)
    commit(db)

    logger.info(f"Playlist created: id={playlist.id} owner={actor.user_id}")
    return ok({"playlist": playlist_fields(playlist)}, "Playlist created successfully")


def get_user_playlists(db: Session, user_id: uuid.UUID) -> ApiResponse:
    return ok(
        {"playlists": playlist_views.user_playlists(db, user_id)},
        "User playlists fetched successfully",
    )


def get_playlist_by_id(db: Session, playlist_id: uuid.UUID) -> ApiResponse:
    return ok(
        {"playlist": playlist_views.playlist_detail(db, playlist_id)},
        "Playlist fetched successfully",
    )


def add_video_to_playlist(
    db: Session, actor: Identity, playlist_id: uuid.UUID, video_id: uuid.UUID
) -> ApiResponse:
    """Set-like add: the video appears at most once, at the end of the list."""
    playlist = guard.authorize(actor.user_id, db.get(Playlist, playlist_id), "Playlist not found")
    if db.get(Video, video_id) is None:
        raise NotFoundError("Video not found")

    if video_id not in playlist.video_ids:
        next_position = db.execute(
            select(func.coalesce(func.max(PlaylistEntry.position), -1) + 1)
            .where(PlaylistEntry.playlist_id == playlist_id)
        ).scalar_one()
        playlist.entries.append(
            PlaylistEntry(playlist_id=playlist_id, video_id=video_id, position=next_position)
        )
        try:
            db.commit()
        except IntegrityError:
            # A concurrent add of the same video won; the entry exists either way.
            db.rollback()
            logger.info(f"Video {video_id} already added to playlist {playlist_id}")
        db.refresh(playlist)

    return ok({"playlist": playlist_fields(playlist)}, "Video added to playlist successfully")


def remove_video_from_playlist(
    db: Session, actor: Identity, playlist_id: uuid.UUID, video_id: uuid.UUID
) -> ApiResponse:
    playlist = guard.authorize(actor.user_id, db.get(Playlist, playlist_id), "Playlist not found")

    playlist.entries = [entry for entry in playlist.entries if entry.video_id != video_id]
    commit(db)
    return ok({"playlist": playlist_fields(playlist)}, "Video removed from playlist successfully")


def update_playlist(
    db: Session,
    actor: Identity,
    playlist_id: uuid.UUID,
    name: Optional[str],
    description: Optional[str],
) -> ApiResponse:
    new_name = clean_text(name)
    new_description = clean_text(description)
    if not new_name and not new_description:
        raise ValidationError("Provide a name or description to update")

    playlist = guard.authorize(actor.user_id, db.get(Playlist, playlist_id), "Playlist not found")
    if new_name:
        playlist.name = new_name
    if new_description:
        playlist.description = new_description
    commit(db)
    return ok({"playlist": playlist_fields(playlist)}, "Playlist updated successfully")


def delete_playlist(db: Session, actor: Identity, playlist_id: uuid.UUID) -> ApiResponse:
    playlist = guard.authorize(
        actor.user_id, db.get(Playlist, playlist_id), "Playlist not found", action=Action.DELETE
    )
    db.delete(playlist)
    commit(db)

    logger.info(f"Playlist {playlist_id} deleted")
    return ok({}, "Playlist deleted successfully")
