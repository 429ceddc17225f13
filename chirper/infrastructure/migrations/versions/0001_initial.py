"""initial schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-18 12:00:00

"""
from alembic import op
import sqlalchemy as sa

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade():
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        *_timestamps(),
        sa.Column("name", sa.String(64), nullable=False, server_default=""),
        sa.Column("handle", sa.String(64), nullable=False, server_default=""),
        sa.Column("bio", sa.String(640), nullable=False, server_default=""),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("avatar", sa.String(255), nullable=False, server_default=""),
        sa.Column("header", sa.String(255), nullable=False, server_default=""),
        sa.Column("password_hash", sa.String(255), nullable=False, server_default=""),
        sa.Column("remember_hash", sa.String(255), nullable=False),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_handle", "users", ["handle"])
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_remember_hash", "users", ["remember_hash"], unique=True)
    op.create_index("ix_users_deleted_at", "users", ["deleted_at"])

    op.create_table(
        "tweets",
        sa.Column("id", sa.Integer(), primary_key=True),
        *_timestamps(),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("content", sa.String(1120), nullable=False, server_default=""),
        sa.Column("replies_to_id", sa.Integer(), sa.ForeignKey("tweets.id"), nullable=True),
        sa.Column("retweets_id", sa.Integer(), sa.ForeignKey("tweets.id"), nullable=True),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_tweets_id", "tweets", ["id"])
    op.create_index("ix_tweets_user_id", "tweets", ["user_id"])
    op.create_index("ix_tweets_replies_to_id", "tweets", ["replies_to_id"])
    op.create_index("ix_tweets_retweets_id", "tweets", ["retweets_id"])
    op.create_index("ix_tweets_deleted_at", "tweets", ["deleted_at"])
    op.create_index("idx_tweets_user_created", "tweets", ["user_id", "created_at"])

    op.create_table(
        "follows",
        sa.Column("id", sa.Integer(), primary_key=True),
        *_timestamps(),
        sa.Column("follower_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("followed_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.UniqueConstraint("follower_id", "followed_id", name="uq_follows_follower_followed"),
    )
    op.create_index("ix_follows_id", "follows", ["id"])
    op.create_index("ix_follows_follower_id", "follows", ["follower_id"])
    op.create_index("ix_follows_followed_id", "follows", ["followed_id"])

    op.create_table(
        "likes",
        sa.Column("id", sa.Integer(), primary_key=True),
        *_timestamps(),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("tweet_id", sa.Integer(), sa.ForeignKey("tweets.id"), nullable=False),
        sa.UniqueConstraint("user_id", "tweet_id", name="uq_likes_user_tweet"),
    )
    op.create_index("ix_likes_id", "likes", ["id"])
    op.create_index("ix_likes_user_id", "likes", ["user_id"])
    op.create_index("ix_likes_tweet_id", "likes", ["tweet_id"])

    op.create_table(
        "oauths",
        sa.Column("id", sa.Integer(), primary_key=True),
        *_timestamps(),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("provider", sa.String(32), nullable=False),
        sa.Column("provider_user_id", sa.String(255), nullable=False),
        sa.Column("access_token", sa.String(512), nullable=False, server_default=""),
        sa.Column("token_type", sa.String(32), nullable=False, server_default=""),
        sa.Column("refresh_token", sa.String(512), nullable=False, server_default=""),
        sa.Column("expiry", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("user_id", "provider", name="uq_oauths_user_provider"),
        sa.UniqueConstraint("provider", "provider_user_id", name="uq_oauths_provider_identity"),
    )
    op.create_index("ix_oauths_id", "oauths", ["id"])
    op.create_index("ix_oauths_user_id", "oauths", ["user_id"])


def downgrade():
    op.drop_table("oauths")
    op.drop_table("likes")
    op.drop_table("follows")
    op.drop_table("tweets")
    op.drop_table("users")
