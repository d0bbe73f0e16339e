from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, File, Form, Request, Response, UploadFile, status
from sqlalchemy.orm import Session

from api.dependencies import (
    ACCESS_COOKIE,
    REFRESH_COOKIE,
    get_blob_store,
    get_current_identity,
    get_optional_identity,
    get_session_manager,
)
from api.envelope import ApiResponse
from api.schemas import (
    ChangePasswordRequest,
    LoginRequest,
    RefreshTokenRequest,
    UpdateAccountRequest,
)
from auth.session_manager import Identity, SessionManager
from config import config
from controllers import users as controller
from db.session import get_db
from storage.blob_store import BlobStore

router = APIRouter(prefix="/users", tags=["Users"])


def _set_session_cookies(response: Response, data: dict[str, Any]) -> None:
    options = {"httponly": True, "secure": config.auth.cookie_secure, "samesite": "lax"}
    response.set_cookie(ACCESS_COOKIE, data["accessToken"], **options)
    response.set_cookie(REFRESH_COOKIE, data["refreshToken"], **options)


def _clear_session_cookies(response: Response) -> None:
    response.delete_cookie(ACCESS_COOKIE)
    response.delete_cookie(REFRESH_COOKIE)


@router.post("/register", response_model=ApiResponse, status_code=status.HTTP_201_CREATED)
def register_user(
    username: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    full_name: Optional[str] = Form(None, alias="fullName"),
    password: Optional[str] = Form(None),
    avatar: Optional[UploadFile] = File(None),
    cover_image: Optional[UploadFile] = File(None, alias="coverImage"),
    blobs: BlobStore = Depends(get_blob_store),
    db: Session = Depends(get_db),
) -> ApiResponse:
    return controller.register_user(
        db,
        blobs,
        username=username,
        email=email,
        full_name=full_name,
        password=password,
        avatar=avatar,
        cover_image=cover_image,
    )


@router.post("/login", response_model=ApiResponse)
def login_user(
    payload: LoginRequest,
    response: Response,
    sessions: SessionManager = Depends(get_session_manager),
    db: Session = Depends(get_db),
) -> ApiResponse:
    result = controller.login_user(
        db, sessions,
        username=payload.username, email=payload.email, password=payload.password,
    )
    _set_session_cookies(response, result.data)
    return result


@router.post("/logout", response_model=ApiResponse)
def logout_user(
    response: Response,
    actor: Identity = Depends(get_current_identity),
    sessions: SessionManager = Depends(get_session_manager),
    db: Session = Depends(get_db),
) -> ApiResponse:
    result = controller.logout_user(db, sessions, actor)
    _clear_session_cookies(response)
    return result


@router.post("/refresh-token", response_model=ApiResponse)
def refresh_access_token(
    request: Request,
    response: Response,
    payload: Optional[RefreshTokenRequest] = Body(None),
    sessions: SessionManager = Depends(get_session_manager),
    db: Session = Depends(get_db),
) -> ApiResponse:
    """Rotate the session. The body value wins over the cookie."""
    presented = (payload.refresh_token if payload else None) or request.cookies.get(REFRESH_COOKIE)
    result = controller.refresh_access_token(db, sessions, presented)
    _set_session_cookies(response, result.data)
    return result


@router.get("/current-user", response_model=ApiResponse)
def get_current_user(
    actor: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> ApiResponse:
    return controller.get_current_user(db, actor)


@router.post("/change-password", response_model=ApiResponse)
def change_password(
    payload: ChangePasswordRequest,
    actor: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> ApiResponse:
    return controller.change_password(db, actor, payload.old_password, payload.new_password)


@router.patch("/update-account", response_model=ApiResponse)
def update_account(
    payload: UpdateAccountRequest,
    actor: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> ApiResponse:
    return controller.update_account(db, actor, payload.full_name, payload.email)


@router.patch("/avatar", response_model=ApiResponse)
def update_avatar(
    avatar: Optional[UploadFile] = File(None),
    actor: Identity = Depends(get_current_identity),
    blobs: BlobStore = Depends(get_blob_store),
    db: Session = Depends(get_db),
) -> ApiResponse:
    return controller.update_user_image(db, blobs, actor, avatar, "avatar")


@router.patch("/cover-image", response_model=ApiResponse)
def update_cover_image(
    cover_image: Optional[UploadFile] = File(None, alias="coverImage"),
    actor: Identity = Depends(get_current_identity),
    blobs: BlobStore = Depends(get_blob_store),
    db: Session = Depends(get_db),
) -> ApiResponse:
    return controller.update_user_image(db, blobs, actor, cover_image, "cover_image")


@router.get("/c/{username}", response_model=ApiResponse)
def get_channel_profile(
    username: str,
    viewer: Optional[Identity] = Depends(get_optional_identity),
    db: Session = Depends(get_db),
) -> ApiResponse:
    return controller.get_channel_profile(db, username, viewer)
