import uuid
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from api.dependencies import get_current_identity
from api.envelope import ApiResponse
from api.schemas import CommentRequest
from auth.session_manager import Identity
from config import config
from controllers import comments as controller
from db.session import get_db
from queries.pipeline import PageRequest

router = APIRouter(prefix="/comments", tags=["Comments"])


@router.get("/{video_id}", response_model=ApiResponse)
def get_video_comments(
    video_id: uuid.UUID,
    page: int = 1,
    limit: Optional[int] = None,
    db: Session = Depends(get_db),
) -> ApiResponse:
    page_request = PageRequest.parse(
        page,
        limit if limit is not None else config.pagination.default_page_size,
        config.pagination.max_page_size,
    )
    return controller.get_video_comments(db, video_id, page_request)


@router.post("/{video_id}", response_model=ApiResponse)
def add_comment(
    video_id: uuid.UUID,
    payload: CommentRequest,
    actor: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> ApiResponse:
    return controller.add_comment(db, actor, video_id, payload.content)


@router.patch("/{comment_id}", response_model=ApiResponse)
def update_comment(
    comment_id: uuid.UUID,
    payload: CommentRequest,
    actor: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> ApiResponse:
    return controller.update_comment(db, actor, comment_id, payload.content)


@router.delete("/{comment_id}", response_model=ApiResponse)
def delete_comment(
    comment_id: uuid.UUID,
    actor: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> ApiResponse:
    return controller.delete_comment(db, actor, comment_id)
