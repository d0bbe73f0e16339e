import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from api.dependencies import get_current_identity
from api.envelope import ApiResponse
from auth.session_manager import Identity
from controllers import subscriptions as controller
from db.session import get_db

router = APIRouter(prefix="/subscription", tags=["Subscriptions"])


@router.post("/c/{channel_id}", response_model=ApiResponse)
def toggle_subscription(
    channel_id: uuid.UUID,
    actor: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> ApiResponse:
    return controller.toggle_subscription(db, actor, channel_id)


@router.get("/c/{channel_id}", response_model=ApiResponse)
def get_channel_subscribers(channel_id: uuid.UUID, db: Session = Depends(get_db)) -> ApiResponse:
    return controller.get_channel_subscribers(db, channel_id)


@router.get("/u/{subscriber_id}", response_model=ApiResponse)
def get_subscribed_channels(subscriber_id: uuid.UUID, db: Session = Depends(get_db)) -> ApiResponse:
    return controller.get_subscribed_channels(db, subscriber_id)
