import uuid
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from sqlalchemy.orm import Session

from api.dependencies import get_blob_store, get_current_identity
from api.envelope import ApiResponse
from auth.session_manager import Identity
from config import config
from controllers import videos as controller
from db.session import get_db
from queries.pipeline import PageRequest
from storage.blob_store import BlobStore

router = APIRouter(prefix="/videos", tags=["Videos"])


@router.get("", response_model=ApiResponse)
def get_all_videos(
    page: int = 1,
    limit: Optional[int] = None,
    query: Optional[str] = None,
    sort_by: str = Query("createdAt", alias="sortBy"),
    sort_type: str = Query("desc", alias="sortType"),
    user_id: Optional[uuid.UUID] = Query(None, alias="userId"),
    db: Session = Depends(get_db),
) -> ApiResponse:
    """Public feed, or a single owner's full listing when `userId` is given."""
    page_request = PageRequest.parse(
        page,
        limit if limit is not None else config.pagination.default_page_size,
        config.pagination.max_page_size,
    )
    return controller.get_all_videos(
        db,
        query=query,
        sort_by=sort_by,
        sort_type=sort_type,
        page=page_request,
        user_id=user_id,
    )


@router.post("", response_model=ApiResponse)
def publish_video(
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    video_file: Optional[UploadFile] = File(None, alias="videoFile"),
    thumbnail: Optional[UploadFile] = File(None),
    actor: Identity = Depends(get_current_identity),
    blobs: BlobStore = Depends(get_blob_store),
    db: Session = Depends(get_db),
) -> ApiResponse:
    return controller.publish_video(
        db,
        blobs,
        actor,
        title=title,
        description=description,
        video_file=video_file,
        thumbnail=thumbnail,
    )


@router.patch("/toggle-publish/{video_id}", response_model=ApiResponse)
def toggle_publish_status(
    video_id: uuid.UUID,
    actor: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> ApiResponse:
    return controller.toggle_publish_status(db, actor, video_id)


@router.get("/user/{user_id}", response_model=ApiResponse)
def get_user_videos(user_id: uuid.UUID, db: Session = Depends(get_db)) -> ApiResponse:
    return controller.get_user_videos(db, user_id)


@router.get("/{video_id}", response_model=ApiResponse)
def get_video_by_id(video_id: uuid.UUID, db: Session = Depends(get_db)) -> ApiResponse:
    return controller.get_video_by_id(db, video_id)


@router.patch("/{video_id}", response_model=ApiResponse)
def update_video(
    video_id: uuid.UUID,
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    thumbnail: Optional[UploadFile] = File(None),
    actor: Identity = Depends(get_current_identity),
    blobs: BlobStore = Depends(get_blob_store),
    db: Session = Depends(get_db),
) -> ApiResponse:
    return controller.update_video(
        db, blobs, actor, video_id,
        title=title, description=description, thumbnail=thumbnail,
    )


@router.delete("/{video_id}", response_model=ApiResponse)
def delete_video(
    video_id: uuid.UUID,
    actor: Identity = Depends(get_current_identity),
    blobs: BlobStore = Depends(get_blob_store),
    db: Session = Depends(get_db),
) -> ApiResponse:
    return controller.delete_video(db, blobs, actor, video_id)


@router.post("/{video_id}/views", response_model=ApiResponse)
def record_view(video_id: uuid.UUID, db: Session = Depends(get_db)) -> ApiResponse:
    return controller.record_view(db, video_id)
