"""
Pydantic request schemas for the StreamHub API.

Fields are optional at this layer. Controllers own the "required, trimmed,
non-empty" checks and their resource-specific 400 messages.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CamelModel(BaseModel):
    """Accepts both camelCase wire names and snake_case attribute names."""

    model_config = ConfigDict(populate_by_name=True)


# =============================================================================
# Users & Sessions
# =============================================================================

class LoginRequest(CamelModel):
    """Credentials for /users/login. Either username or email identifies the user."""

    username: Optional[str] = Field(default=None, examples=["alice"])
    email: Optional[str] = Field(default=None, examples=["alice@example.com"])
    password: Optional[str] = Field(default=None, examples=["s3cret-pass"])


class RefreshTokenRequest(CamelModel):
    """Refresh token sent in the body when the cookie is not available."""

    refresh_token: Optional[str] = Field(default=None, alias="refreshToken")


class ChangePasswordRequest(CamelModel):
    old_password: Optional[str] = Field(default=None, alias="oldPassword")
    new_password: Optional[str] = Field(default=None, alias="newPassword")


class UpdateAccountRequest(CamelModel):
    full_name: Optional[str] = Field(default=None, alias="fullName")
    email: Optional[str] = None


# =============================================================================
# Content
# =============================================================================

class CommentRequest(CamelModel):
    content: Optional[str] = Field(default=None, examples=["Great video!"])


class PlaylistRequest(CamelModel):
    name: Optional[str] = Field(default=None, examples=["Watch later"])
    description: Optional[str] = Field(default=None, examples=["Things to catch up on"])


class TweetRequest(CamelModel):
    content: Optional[str] = Field(default=None, examples=["New upload tomorrow"])
