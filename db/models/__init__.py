"""
SQLAlchemy models for the StreamHub API.

Models:
- User: Accounts (every user is also a channel)
- Video: Uploaded videos with blob-store references
- Comment: Comments on videos
- Playlist / PlaylistEntry: Ordered, duplicate-free video collections
- Subscription: Subscriber -> channel follow rows
- Like: Likes on videos, comments or tweets
- Tweet: Short channel posts
"""

from db.models.user import User
from db.models.video import Video
from db.models.comment import Comment
from db.models.playlist import Playlist, PlaylistEntry
from db.models.subscription import Subscription
from db.models.like import Like
from db.models.tweet import Tweet

__all__ = [
    "User",
    "Video",
    "Comment",
    "Playlist",
    "PlaylistEntry",
    "Subscription",
    "Like",
    "Tweet",
]
