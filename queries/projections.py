"""
Field sets and row reshapers for read views.

Joins only ever pull the public profile field set (id, username, fullName,
avatar) from users, so password hashes and refresh tokens can never leak
through a nested join.
"""

from typing import Any, Optional

from sqlalchemy.engine import Row

from db.models.comment import Comment
from db.models.playlist import Playlist
from db.models.tweet import Tweet
from db.models.user import User
from db.models.video import Video

PUBLIC_PROFILE_FIELDS = ("id", "username", "full_name", "avatar")
COMPACT_PROFILE_FIELDS = ("id", "username", "avatar")

_WIRE_NAMES = {"full_name": "fullName"}


def profile_columns(user: Any, prefix: str = "owner", fields: tuple[str, ...] = PUBLIC_PROFILE_FIELDS) -> list[Any]:
    """Labeled columns `<prefix>__<field>` for a (possibly aliased) User."""
    return [getattr(user, name).label(f"{prefix}__{name}") for name in fields]


def profile_from_row(row: Row, prefix: str = "owner") -> Optional[dict[str, Any]]:
    """Collect `<prefix>__*` columns of a row into a profile dict."""
    mapping = row._mapping
    marker = f"{prefix}__"
    profile = {
        _WIRE_NAMES.get(key[len(marker):], key[len(marker):]): value
        for key, value in mapping.items()
        if isinstance(key, str) and key.startswith(marker)
    }
    if profile.get("id") is None:
        return None
    return profile


# =============================================================================
# Entity field sets
# =============================================================================

def public_profile(user: User) -> dict[str, Any]:
    return {
        "id": user.id,
        "username": user.username,
        "fullName": user.full_name,
        "avatar": user.avatar,
    }


def account(user: User) -> dict[str, Any]:
    """The user's own view of their account. Never includes credentials."""
    return {
        **public_profile(user),
        "email": user.email,
        "coverImage": user.cover_image,
        "createdAt": user.created_at,
        "updatedAt": user.updated_at,
    }


def video_fields(video: Video) -> dict[str, Any]:
    return {
        "id": video.id,
        "title": video.title,
        "description": video.description,
        "videoFile": video.video_file,
        "thumbnail": video.thumbnail,
        "duration": video.duration,
        "views": video.views,
        "isPublished": video.is_published,
        "ownerId": video.owner_id,
        "createdAt": video.created_at,
        "updatedAt": video.updated_at,
    }


def comment_fields(comment: Comment) -> dict[str, Any]:
    return {
        "id": comment.id,
        "content": comment.content,
        "videoId": comment.video_id,
        "ownerId": comment.owner_id,
        "createdAt": comment.created_at,
        "updatedAt": comment.updated_at,
    }


def playlist_fields(playlist: Playlist) -> dict[str, Any]:
    return {
        "id": playlist.id,
        "name": playlist.name,
        "description": playlist.description,
        "ownerId": playlist.owner_id,
        "videos": playlist.video_ids,
        "createdAt": playlist.created_at,
        "updatedAt": playlist.updated_at,
    }


def tweet_fields(tweet: Tweet) -> dict[str, Any]:
    return {
        "id": tweet.id,
        "content": tweet.content,
        "ownerId": tweet.owner_id,
        "createdAt": tweet.created_at,
        "updatedAt": tweet.updated_at,
    }


# =============================================================================
# Row reshapers
# =============================================================================

def video_with_owner(row: Row) -> dict[str, Any]:
    """Video entity in column 0 plus `owner__*` profile columns."""
    shaped = video_fields(row[0])
    shaped["owner"] = profile_from_row(row, "owner")
    if "likes_count" in row._mapping:
        shaped["likesCount"] = row._mapping["likes_count"]
    return shaped


def comment_with_owner(row: Row) -> dict[str, Any]:
    shaped = comment_fields(row[0])
    shaped["owner"] = profile_from_row(row, "owner")
    if "likes_count" in row._mapping:
        shaped["likesCount"] = row._mapping["likes_count"]
    return shaped


def tweet_with_owner(row: Row) -> dict[str, Any]:
    shaped = tweet_fields(row[0])
    shaped["owner"] = profile_from_row(row, "owner")
    shaped["likesCount"] = row._mapping.get("likes_count", 0)
    return shaped
