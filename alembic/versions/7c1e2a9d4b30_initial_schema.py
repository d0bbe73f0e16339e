"""initial schema

Revision ID: 7c1e2a9d4b30
Revises: 
Create Date: 2026-10-12 09:14:27.518203

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '7c1e2a9d4b30'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    """Create all tables from scratch."""

    # ── users ──────────────────────────────────────────────────────────
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('username', sa.String(64), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('full_name', sa.String(255), nullable=False),
        sa.Column('avatar', sa.Text(), nullable=True),
        sa.Column('cover_image', sa.Text(), nullable=True),
        sa.Column('password_hash', sa.Text(), nullable=False),
        sa.Column('refresh_token', sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_users')),
        sa.UniqueConstraint('username', name=op.f('uq_users_username')),
        sa.UniqueConstraint('email', name=op.f('uq_users_email')),
    )

    # ── videos ─────────────────────────────────────────────────────────
    op.create_table(
        'videos',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('owner_id', sa.Uuid(), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('video_file', sa.Text(), nullable=False),
        sa.Column('thumbnail', sa.Text(), nullable=False),
        sa.Column('duration', sa.Float(), nullable=False),
        sa.Column('views', sa.Integer(), nullable=False),
        sa.Column('is_published', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_videos')),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id'],
                                name=op.f('fk_videos_owner_id_users'),
                                ondelete='CASCADE'),
    )
    op.create_index('idx_videos_owner_id', 'videos', ['owner_id'])
    op.create_index('idx_videos_published_created', 'videos',
                    ['is_published', 'created_at'])

    # ── comments ───────────────────────────────────────────────────────
    op.create_table(
        'comments',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('video_id', sa.Uuid(), nullable=False),
        sa.Column('owner_id', sa.Uuid(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_comments')),
        sa.ForeignKeyConstraint(['video_id'], ['videos.id'],
                                name=op.f('fk_comments_video_id_videos'),
                                ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id'],
                                name=op.f('fk_comments_owner_id_users'),
                                ondelete='CASCADE'),
    )
    op.create_index('idx_comments_video_created', 'comments',
                    ['video_id', 'created_at'])

    # ── tweets ─────────────────────────────────────────────────────────
    op.create_table(
        'tweets',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('owner_id', sa.Uuid(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_tweets')),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id'],
                                name=op.f('fk_tweets_owner_id_users'),
                                ondelete='CASCADE'),
    )
    op.create_index('idx_tweets_owner_created', 'tweets',
                    ['owner_id', 'created_at'])

    # ── playlists ──────────────────────────────────────────────────────
    op.create_table(
        'playlists',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('owner_id', sa.Uuid(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_playlists')),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id'],
                                name=op.f('fk_playlists_owner_id_users'),
                                ondelete='CASCADE'),
    )
    op.create_index('idx_playlists_owner_id', 'playlists', ['owner_id'])

    op.create_table(
        'playlist_videos',
        sa.Column('playlist_id', sa.Uuid(), nullable=False),
        sa.Column('video_id', sa.Uuid(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('playlist_id', 'video_id',
                                name=op.f('pk_playlist_videos')),
        sa.ForeignKeyConstraint(['playlist_id'], ['playlists.id'],
                                name=op.f('fk_playlist_videos_playlist_id_playlists'),
                                ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['video_id'], ['videos.id'],
                                name=op.f('fk_playlist_videos_video_id_videos'),
                                ondelete='CASCADE'),
    )

    # ── subscriptions ──────────────────────────────────────────────────
    op.create_table(
        'subscriptions',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('subscriber_id', sa.Uuid(), nullable=False),
        sa.Column('channel_id', sa.Uuid(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_subscriptions')),
        sa.ForeignKeyConstraint(['subscriber_id'], ['users.id'],
                                name=op.f('fk_subscriptions_subscriber_id_users'),
                                ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['channel_id'], ['users.id'],
                                name=op.f('fk_subscriptions_channel_id_users'),
                                ondelete='CASCADE'),
        sa.UniqueConstraint('subscriber_id', 'channel_id',
                            name='uq_subscriptions_subscriber_channel'),
        sa.CheckConstraint('subscriber_id <> channel_id',
                           name=op.f('ck_subscriptions_not_self')),
    )
    op.create_index('idx_subscriptions_channel_id', 'subscriptions', ['channel_id'])

    # ── likes ──────────────────────────────────────────────────────────
    op.create_table(
        'likes',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('liked_by_id', sa.Uuid(), nullable=False),
        sa.Column('video_id', sa.Uuid(), nullable=True),
        sa.Column('comment_id', sa.Uuid(), nullable=True),
        sa.Column('tweet_id', sa.Uuid(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_likes')),
        sa.ForeignKeyConstraint(['liked_by_id'], ['users.id'],
                                name=op.f('fk_likes_liked_by_id_users'),
                                ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['video_id'], ['videos.id'],
                                name=op.f('fk_likes_video_id_videos'),
                                ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['comment_id'], ['comments.id'],
                                name=op.f('fk_likes_comment_id_comments'),
                                ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['tweet_id'], ['tweets.id'],
                                name=op.f('fk_likes_tweet_id_tweets'),
                                ondelete='CASCADE'),
        sa.UniqueConstraint('liked_by_id', 'video_id', name='uq_likes_user_video'),
        sa.UniqueConstraint('liked_by_id', 'comment_id', name='uq_likes_user_comment'),
        sa.UniqueConstraint('liked_by_id', 'tweet_id', name='uq_likes_user_tweet'),
        sa.CheckConstraint(
            "(CASE WHEN video_id IS NULL THEN 0 ELSE 1 END)"
            " + (CASE WHEN comment_id IS NULL THEN 0 ELSE 1 END)"
            " + (CASE WHEN tweet_id IS NULL THEN 0 ELSE 1 END) = 1",
            name=op.f('ck_likes_single_target'),
        ),
    )


def downgrade() -> None:
    """Drop all tables in reverse dependency order."""
    op.drop_table('likes')
    op.drop_index('idx_subscriptions_channel_id', table_name='subscriptions')
    op.drop_table('subscriptions')
    op.drop_table('playlist_videos')
    op.drop_index('idx_playlists_owner_id', table_name='playlists')
    op.drop_table('playlists')
    op.drop_index('idx_tweets_owner_created', table_name='tweets')
    op.drop_table('tweets')
    op.drop_index('idx_comments_video_created', table_name='comments')
    op.drop_table('comments')
    op.drop_index('idx_videos_published_created', table_name='videos')
    op.drop_index('idx_videos_owner_id', table_name='videos')
    op.drop_table('videos')
    op.drop_table('users')
