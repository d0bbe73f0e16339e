import uuid

from sqlalchemy import String, Text, Integer, Uuid, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.base import Base, TimestampMixin


class Playlist(Base, TimestampMixin):
    """Owner-curated ordered collection of videos.

    Videos are held through `PlaylistEntry` rows; the composite primary key
    keeps each video at most once per playlist.
    """

    __tablename__ = "playlists"
    __table_args__ = (
        Index("idx_playlists_owner_id", "owner_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    owner = relationship("User")
    entries = relationship(
        "PlaylistEntry",
        back_populates="playlist",
        cascade="all, delete-orphan",
        order_by="PlaylistEntry.position",
    )

    @property
    def video_ids(self) -> list[uuid.UUID]:
        return [entry.video_id for entry in self.entries]


class PlaylistEntry(Base, TimestampMixin):
    """Position of one video inside one playlist."""

    __tablename__ = "playlist_videos"

    playlist_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("playlists.id", ondelete="CASCADE"), primary_key=True)
    video_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("videos.id", ondelete="CASCADE"), primary_key=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False)

    playlist = relationship("Playlist", back_populates="entries")
    video = relationship("Video", back_populates="playlist_entries")
