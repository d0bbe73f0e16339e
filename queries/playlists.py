"""
Playlist views: playlist detail and a user's playlists.

`videoCount` is always derived from the playlist's entries, never stored.
"""

import uuid
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.engine import Row
from sqlalchemy.orm import Session, aliased

from api.errors import NotFoundError
from db.models.playlist import Playlist, PlaylistEntry
from db.models.user import User
from db.models.video import Video
from queries.pipeline import Pipeline, inner_join, lookup, match, sort, with_columns
from queries.projections import profile_columns, profile_from_row, video_with_owner


def _playlist_summary(row: Row) -> dict[str, Any]:
    playlist: Playlist = row[0]
    return {
        "id": playlist.id,
        "name": playlist.name,
        "description": playlist.description,
        "videoCount": row._mapping["video_count"],
        "createdAt": playlist.created_at,
        "updatedAt": playlist.updated_at,
    }


def _playlist_header(row: Row) -> dict[str, Any]:
    playlist: Playlist = row[0]
    return {
        "id": playlist.id,
        "name": playlist.name,
        "description": playlist.description,
        "owner": profile_from_row(row, "owner"),
        "createdAt": playlist.created_at,
        "updatedAt": playlist.updated_at,
    }


def playlist_detail(db: Session, playlist_id: uuid.UUID) -> dict[str, Any]:
    """
    Playlist joined to its owner's public profile and to its videos.

    Each video carries its own owner's public profile; videos are newest
    first.

    Raises:
        NotFoundError: The playlist id does not resolve.
    """
    playlist_owner = aliased(User)
    header = (
        Pipeline(Playlist)
        .pipe(
            lookup(playlist_owner, playlist_owner.id == Playlist.owner_id,
                   *profile_columns(playlist_owner)),
            match(Playlist.id == playlist_id),
        )
        .reshape(_playlist_header)
        .first(db)
    )
    if header is None:
        raise NotFoundError("Playlist not found")

    video_owner = aliased(User)
    videos = (
        Pipeline(Video)
        .pipe(
            inner_join(PlaylistEntry, PlaylistEntry.video_id == Video.id),
            lookup(video_owner, video_owner.id == Video.owner_id,
                   *profile_columns(video_owner)),
            match(PlaylistEntry.playlist_id == playlist_id),
            sort(Video.created_at.desc(), Video.id.asc()),
        )
        .reshape(video_with_owner)
        .all(db)
    )

    header["videos"] = videos
    header["videoCount"] = len(videos)
    return header


def user_playlists(db: Session, user_id: uuid.UUID) -> list[dict[str, Any]]:
    """A user's playlists, newest first, each with its derived videoCount."""
    if db.get(User, user_id) is None:
        raise NotFoundError("User not found")

    video_count = (
        select(func.count(PlaylistEntry.video_id))
        .where(PlaylistEntry.playlist_id == Playlist.id)
        .correlate(Playlist)
        .scalar_subquery()
        .label("video_count")
    )
    return (
        Pipeline(Playlist)
        .pipe(
            with_columns(video_count),
            match(Playlist.owner_id == user_id),
            sort(Playlist.created_at.desc(), Playlist.id.asc()),
        )
        .reshape(_playlist_summary)
        .all(db)
    )
