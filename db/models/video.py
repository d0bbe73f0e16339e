import uuid

from sqlalchemy import (
    String, Text, Float, Integer, Boolean, Uuid, ForeignKey, Index,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.base import Base, TimestampMixin


class Video(Base, TimestampMixin):
    """Uploaded video and its blob-store references.

    `owner_id` never changes after creation. Unpublished videos are hidden
    from the public feed but still listed on the owner's own feed.
    """

    __tablename__ = "videos"
    __table_args__ = (
        Index("idx_videos_owner_id", "owner_id"),
        Index("idx_videos_published_created", "is_published", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4)
    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    video_file: Mapped[str] = mapped_column(Text, nullable=False)
    thumbnail: Mapped[str] = mapped_column(Text, nullable=False)
    duration: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    views: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_published: Mapped[bool] = mapped_column(
        Boolean, default=True, nullable=False)

    owner = relationship("User")
    comments = relationship(
        "Comment", back_populates="video", cascade="all, delete-orphan")
    likes = relationship("Like", cascade="all, delete-orphan")
    playlist_entries = relationship(
        "PlaylistEntry", back_populates="video", cascade="all, delete-orphan")
