import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from api.dependencies import get_current_identity
from api.envelope import ApiResponse
from api.schemas import PlaylistRequest
from auth.session_manager import Identity
from controllers import playlists as controller
from db.session import get_db

router = APIRouter(prefix="/playlists", tags=["Playlists"])


@router.post("", response_model=ApiResponse)
def create_playlist(
    payload: PlaylistRequest,
    actor: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> ApiResponse:
    return controller.create_playlist(db, actor, payload.name, payload.description)


@router.get("/user/{user_id}", response_model=ApiResponse)
def get_user_playlists(user_id: uuid.UUID, db: Session = Depends(get_db)) -> ApiResponse:
    return controller.get_user_playlists(db, user_id)


@router.patch("/add/{video_id}/{playlist_id}", response_model=ApiResponse)
def add_video_to_playlist(
    video_id: uuid.UUID,
    playlist_id: uuid.UUID,
    actor: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> ApiResponse:
    return controller.add_video_to_playlist(db, actor, playlist_id, video_id)


@router.patch("/remove/{video_id}/{playlist_id}", response_model=ApiResponse)
def remove_video_from_playlist(
    video_id: uuid.UUID,
    playlist_id: uuid.UUID,
    actor: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> ApiResponse:
    return controller.remove_video_from_playlist(db, actor, playlist_id, video_id)


@router.get("/{playlist_id}", response_model=ApiResponse)
def get_playlist_by_id(playlist_id: uuid.UUID, db: Session = Depends(get_db)) -> ApiResponse:
    return controller.get_playlist_by_id(db, playlist_id)


@router.patch("/{playlist_id}", response_model=ApiResponse)
def update_playlist(
    playlist_id: uuid.UUID,
    payload: PlaylistRequest,
    actor: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> ApiResponse:
    return controller.update_playlist(db, actor, playlist_id, payload.name, payload.description)


@router.delete("/{playlist_id}", response_model=ApiResponse)
def delete_playlist(
    playlist_id: uuid.UUID,
    actor: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> ApiResponse:
    return controller.delete_playlist(db, actor, playlist_id)
