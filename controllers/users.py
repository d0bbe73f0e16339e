"""
User controller: registration, session lifecycle and account management.

Session operations delegate to SessionManager; this module only resolves
users and shapes responses. Password hashes and refresh tokens never leave
this layer.
"""

import logging
from typing import Optional

from pydantic import EmailStr, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from api.envelope import ApiResponse, ok
from api.errors import ConflictError, NotFoundError, UnauthorizedError, ValidationError
from auth.passwords import hash_password, verify_password
from auth.session_manager import Identity, SessionManager
from controllers.common import Upload, clean_text, commit, has_file, required_text, store_upload
from db.models.user import User
from queries.projections import account
from queries.social import channel_profile
from storage.blob_store import BlobStore

logger = logging.getLogger(__name__)


def _load_actor(db: Session, actor: Identity) -> User:
    user = db.get(User, actor.user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


_email_adapter = TypeAdapter(EmailStr)


def _validate_email(email: str) -> str:
    try:
        return _email_adapter.validate_python(email).lower()
    except PydanticValidationError:
        raise ValidationError("A valid email is required")


# =============================================================================
# Registration & Sessions
# =============================================================================

def register_user(
    db: Session,
    blobs: BlobStore,
    *,
    username: Optional[str],
    email: Optional[str],
    full_name: Optional[str],
    password: Optional[str],
    avatar: Optional[Upload] = None,
    cover_image: Optional[Upload] = None,
) -> ApiResponse:
    """
    Create an account. Usernames are stored lowercased.

    Raises:
        ValidationError: Missing field or malformed email.
        ConflictError: Username or email already registered.
    """
    message = "username, email, fullName and password are required"
    username = required_text(username, message).lower()
    email = _validate_email(required_text(email, message))
    full_name = required_text(full_name, message)
    if not password:
        raise ValidationError(message)

    taken = db.execute(
        select(User.id).where(or_(User.username == username, User.email == email))
    ).first()
    if taken is not None:
        raise ConflictError("User with this username or email already exists")

    avatar_url = store_upload(blobs, avatar, "avatars").url if has_file(avatar) else None
    cover_url = store_upload(blobs, cover_image, "covers").url if has_file(cover_image) else None

    user = User(
        username=username,
        email=email,
        full_name=full_name,
        password_hash=hash_password(password),
        avatar=avatar_url,
        cover_image=cover_url,
    )
    db.add(user)
    commit(db)

    logger.info(f"User registered: id={user.id}")
    return ok({"user": account(user)}, "User registered successfully", status_code=201)


def login_user(
    db: Session,
    sessions: SessionManager,
    *,
    username: Optional[str],
    email: Optional[str],
    password: Optional[str],
) -> ApiResponse:
    """
    Verify credentials and issue a fresh session pair.

    Raises:
        ValidationError: Neither username nor email, or no password.
        NotFoundError: No such user.
        UnauthorizedError: Wrong password.
    """
    login = clean_text(username).lower() or clean_text(email).lower()
    if not login:
        raise ValidationError("username or email is required")
    if not password:
        raise ValidationError("password is required")

    user = db.execute(
        select(User).where(or_(User.username == login, User.email == login))
    ).scalar_one_or_none()
    if user is None:
        raise NotFoundError("User does not exist")
    if not verify_password(password, user.password_hash):
        logger.warning(f"Failed login for user={user.id}")
        raise UnauthorizedError("Invalid user credentials")

    pair = sessions.issue(db, user)
    return ok({"user": account(user), **pair.to_dict()}, "User logged in successfully")


def logout_user(db: Session, sessions: SessionManager, actor: Identity) -> ApiResponse:
    sessions.invalidate(db, actor.user_id)
    return ok({}, "User logged out successfully")


def refresh_access_token(
    db: Session, sessions: SessionManager, refresh_token: Optional[str]
) -> ApiResponse:
    pair = sessions.refresh(db, refresh_token)
    return ok(pair.to_dict(), "Access token refreshed")


# =============================================================================
# Account
# =============================================================================

def get_current_user(db: Session, actor: Identity) -> ApiResponse:
    return ok({"user": account(_load_actor(db, actor))}, "Current user fetched successfully")


def change_password(
    db: Session,
    actor: Identity,
    old_password: Optional[str],
    new_password: Optional[str],
) -> ApiResponse:
    if not old_password or not new_password:
        raise ValidationError("oldPassword and newPassword are required")

    user = _load_actor(db, actor)
    if not verify_password(old_password, user.password_hash):
        raise ValidationError("Invalid old password")

    user.password_hash = hash_password(new_password)
    commit(db)
    logger.info(f"Password changed for user={user.id}")
    return ok({}, "Password changed successfully")


def update_account(
    db: Session, actor: Identity, full_name: Optional[str], email: Optional[str]
) -> ApiResponse:
    new_full_name = clean_text(full_name)
    new_email = clean_text(email)
    if not new_full_name and not new_email:
        raise ValidationError("Provide fullName or email to update")

    user = _load_actor(db, actor)
    if new_email:
        new_email = _validate_email(new_email)
        clash = db.execute(
            select(User.id).where(User.email == new_email, User.id != user.id)
        ).first()
        if clash is not None:
            raise ConflictError("Email is already in use")
        user.email = new_email
    if new_full_name:
        user.full_name = new_full_name
    commit(db)
    return ok({"user": account(user)}, "Account details updated successfully")


def update_user_image(
    db: Session,
    blobs: BlobStore,
    actor: Identity,
    upload: Optional[Upload],
    attribute: str,
) -> ApiResponse:
    """
    Replace the avatar or cover image; the old blob is deleted after commit.

    Args:
        attribute: "avatar" or "cover_image".
    """
    label = "Avatar" if attribute == "avatar" else "Cover image"
    if not has_file(upload):
        raise ValidationError(f"{label} file is missing")

    user = _load_actor(db, actor)
    old_url = getattr(user, attribute)
    stored = store_upload(blobs, upload, "avatars" if attribute == "avatar" else "covers")
    setattr(user, attribute, stored.url)
    commit(db)

    if old_url:
        blobs.delete(old_url)
    return ok({"user": account(user)}, f"{label} updated successfully")


def get_channel_profile(db: Session, username: str, viewer: Optional[Identity]) -> ApiResponse:
    channel = channel_profile(db, username, viewer.user_id if viewer else None)
    return ok({"channel": channel}, "Channel profile fetched successfully")
