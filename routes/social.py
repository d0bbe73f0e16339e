import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from api.dependencies import get_current_identity
from api.envelope import ApiResponse
from api.schemas import TweetRequest
from auth.session_manager import Identity
from controllers import dashboard, likes, tweets
from db.session import get_db

likes_router = APIRouter(prefix="/likes", tags=["Likes"])
tweets_router = APIRouter(prefix="/tweets", tags=["Tweets"])
dashboard_router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


# =============================================================================
# Likes
# =============================================================================

@likes_router.post("/toggle/v/{video_id}", response_model=ApiResponse)
def toggle_video_like(
    video_id: uuid.UUID,
    actor: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> ApiResponse:
    return likes.toggle_video_like(db, actor, video_id)


@likes_router.post("/toggle/c/{comment_id}", response_model=ApiResponse)
def toggle_comment_like(
    comment_id: uuid.UUID,
    actor: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> ApiResponse:
    return likes.toggle_comment_like(db, actor, comment_id)


@likes_router.post("/toggle/t/{tweet_id}", response_model=ApiResponse)
def toggle_tweet_like(
    tweet_id: uuid.UUID,
    actor: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> ApiResponse:
    return likes.toggle_tweet_like(db, actor, tweet_id)


@likes_router.get("/videos", response_model=ApiResponse)
def get_liked_videos(
    actor: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> ApiResponse:
    return likes.get_liked_videos(db, actor)


# =============================================================================
# Tweets
# =============================================================================

@tweets_router.post("", response_model=ApiResponse)
def create_tweet(
    payload: TweetRequest,
    actor: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> ApiResponse:
    return tweets.create_tweet(db, actor, payload.content)


@tweets_router.get("/user/{user_id}", response_model=ApiResponse)
def get_user_tweets(user_id: uuid.UUID, db: Session = Depends(get_db)) -> ApiResponse:
    return tweets.get_user_tweets(db, user_id)


@tweets_router.patch("/{tweet_id}", response_model=ApiResponse)
def update_tweet(
    tweet_id: uuid.UUID,
    payload: TweetRequest,
    actor: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> ApiResponse:
    return tweets.update_tweet(db, actor, tweet_id, payload.content)


@tweets_router.delete("/{tweet_id}", response_model=ApiResponse)
def delete_tweet(
    tweet_id: uuid.UUID,
    actor: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> ApiResponse:
    return tweets.delete_tweet(db, actor, tweet_id)


# =============================================================================
# Dashboard
# =============================================================================

@dashboard_router.get("/stats", response_model=ApiResponse)
def get_channel_stats(
    actor: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> ApiResponse:
    return dashboard.get_channel_stats(db, actor)


@dashboard_router.get("/videos", response_model=ApiResponse)
def get_channel_videos(
    actor: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> ApiResponse:
    return dashboard.get_channel_videos(db, actor)
