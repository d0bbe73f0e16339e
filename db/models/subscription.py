import uuid

from sqlalchemy import Uuid, ForeignKey, Index, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.base import Base, TimestampMixin


class Subscription(Base, TimestampMixin):
    """A subscriber following a channel. Row existence is the whole state."""

    __tablename__ = "subscriptions"
    __table_args__ = (
        Index("idx_subscriptions_channel_id", "channel_id"),
        UniqueConstraint(
            "subscriber_id", "channel_id",
            name="uq_subscriptions_subscriber_channel",
        ),
        CheckConstraint("subscriber_id <> channel_id", name="not_self"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4)
    subscriber_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    channel_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    subscriber = relationship("User", foreign_keys=[subscriber_id])
    channel = relationship("User", foreign_keys=[channel_id])
