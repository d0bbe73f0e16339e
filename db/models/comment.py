import uuid

from sqlalchemy import Text, Uuid, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.base import Base, TimestampMixin


class Comment(Base, TimestampMixin):
    """Comment left on a video. `video_id` and `owner_id` are immutable."""

    __tablename__ = "comments"
    __table_args__ = (
        Index("idx_comments_video_created", "video_id", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    video_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("videos.id", ondelete="CASCADE"), nullable=False)
    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    video = relationship("Video", back_populates="comments")
    owner = relationship("User")
    likes = relationship("Like", cascade="all, delete-orphan")
