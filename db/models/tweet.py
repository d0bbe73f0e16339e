import uuid

from sqlalchemy import Text, Uuid, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.base import Base, TimestampMixin


class Tweet(Base, TimestampMixin):
    """Short text post on a user's channel."""

    __tablename__ = "tweets"
    __table_args__ = (
        Index("idx_tweets_owner_created", "owner_id", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    owner = relationship("User")
    likes = relationship("Like", cascade="all, delete-orphan")
