"""Dashboard controller: the signed-in owner's channel overview."""

from sqlalchemy.orm import Session

from api.envelope import ApiResponse, ok
from auth.session_manager import Identity
from queries.social import channel_stats, channel_videos


def get_channel_stats(db: Session, actor: Identity) -> ApiResponse:
    return ok(channel_stats(db, actor.user_id), "Channel stats fetched successfully")


def get_channel_videos(db: Session, actor: Identity) -> ApiResponse:
    return ok({"videos": channel_videos(db, actor.user_id)}, "Channel videos fetched successfully")
