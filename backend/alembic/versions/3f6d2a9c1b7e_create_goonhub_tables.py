"""create goonhub tables

Revision ID: 3f6d2a9c1b7e
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3f6d2a9c1b7e"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _created_at(nullable: bool = True) -> sa.Column:
    return sa.Column(
        "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=nullable
    )


def upgrade() -> None:
    """Upgrade schema: users, content, commerce, social, chat and streaming tables."""
    # Users
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("goon_username", sa.String(length=50), nullable=True),
        sa.Column("handle", sa.String(length=64), nullable=True),
        sa.Column("avatar_url", sa.String(), nullable=True),
        sa.Column("banner_url", sa.String(), nullable=True),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("is_creator", sa.Boolean(), nullable=False),
        sa.Column("age_verified", sa.Boolean(), nullable=False),
        sa.Column("solana_address", sa.String(length=64), nullable=True),
        _created_at(),
        sa.Column("last_active", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("goon_username"),
    )
    op.create_index(op.f("ix_users_handle"), "users", ["handle"], unique=False)
    op.create_index(op.f("ix_users_created_at"), "users", ["created_at"], unique=False)

    # Posts and likes
    op.create_table(
        "posts",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("creator_id", sa.String(length=64), nullable=False),
        sa.Column("media_url", sa.String(), nullable=False),
        sa.Column("thumb_url", sa.String(), nullable=False),
        sa.Column("caption", sa.Text(), nullable=False),
        sa.Column("price_lamports", sa.BigInteger(), nullable=False),
        sa.Column("visibility", sa.String(length=32), nullable=False),
        sa.Column("status", sa.String(length=32), nullable=False),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("solana_address", sa.String(length=64), nullable=True),
        sa.Column("is_live", sa.Boolean(), nullable=False),
        sa.Column("views", sa.Integer(), nullable=False),
        sa.Column("likes", sa.Integer(), nullable=False),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_posts_creator_id"), "posts", ["creator_id"], unique=False)
    op.create_index(op.f("ix_posts_status"), "posts", ["status"], unique=False)
    op.create_index(op.f("ix_posts_created_at"), "posts", ["created_at"], unique=False)

    op.create_table(
        "post_likes",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("post_id", sa.String(length=64), nullable=False),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        _created_at(),
        sa.ForeignKeyConstraint(["post_id"], ["posts.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("post_id", "user_id", name="uq_post_likes_post_user"),
    )
    op.create_index(op.f("ix_post_likes_post_id"), "post_likes", ["post_id"], unique=False)

    # Purchases, tokens and tips
    op.create_table(
        "purchases",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("post_id", sa.String(length=64), nullable=False),
        sa.Column("amount_lamports", sa.BigInteger(), nullable=False),
        sa.Column("txn_sig", sa.String(length=128), nullable=False),
        _created_at(),
        sa.ForeignKeyConstraint(["post_id"], ["posts.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "post_id", name="uq_purchases_user_post"),
    )
    op.create_index(op.f("ix_purchases_user_id"), "purchases", ["user_id"], unique=False)
    op.create_index(op.f("ix_purchases_post_id"), "purchases", ["post_id"], unique=False)
    op.create_index(op.f("ix_purchases_created_at"), "purchases", ["created_at"], unique=False)

    op.create_table(
        "tokens",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("creator_id", sa.String(length=64), nullable=True),
        sa.Column("mint_address", sa.String(length=64), nullable=False),
        sa.Column("name", sa.String(length=64), nullable=False),
        sa.Column("symbol", sa.String(length=16), nullable=False),
        sa.Column("supply", sa.BigInteger(), nullable=False),
        sa.Column("image_url", sa.String(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_tokens_creator_id"), "tokens", ["creator_id"], unique=False)
    op.create_index(op.f("ix_tokens_created_at"), "tokens", ["created_at"], unique=False)

    op.create_table(
        "tips",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("from_user", sa.String(length=64), nullable=False),
        sa.Column("to_user", sa.String(length=64), nullable=False),
        sa.Column("amount_lamports", sa.BigInteger(), nullable=False),
        sa.Column("message", sa.String(length=500), nullable=True),
        sa.Column("txn_sig", sa.String(length=128), nullable=False),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_tips_from_user"), "tips", ["from_user"], unique=False)
    op.create_index(op.f("ix_tips_to_user"), "tips", ["to_user"], unique=False)
    op.create_index(op.f("ix_tips_created_at"), "tips", ["created_at"], unique=False)

    # Follow graph and activity feed
    op.create_table(
        "follows",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("follower_id", sa.String(length=64), nullable=False),
        sa.Column("following_id", sa.String(length=64), nullable=False),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "follower_id", "following_id", name="uq_follows_follower_following"
        ),
    )
    op.create_index(op.f("ix_follows_follower_id"), "follows", ["follower_id"], unique=False)
    op.create_index(op.f("ix_follows_following_id"), "follows", ["following_id"], unique=False)

    op.create_table(
        "activities",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("type", sa.String(length=32), nullable=False),
        sa.Column("user_id", sa.String(length=64), nullable=True),
        sa.Column("target_user_id", sa.String(length=64), nullable=True),
        sa.Column("post_id", sa.String(length=64), nullable=True),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("metadata", sa.JSON(), nullable=False),
        sa.Column("is_read", sa.Boolean(), nullable=False),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_activities_user_id"), "activities", ["user_id"], unique=False)
    op.create_index(
        op.f("ix_activities_target_user_id"), "activities", ["target_user_id"], unique=False
    )
    op.create_index(op.f("ix_activities_created_at"), "activities", ["created_at"], unique=False)

    # AI personas and persona chat
    op.create_table(
        "ai_personas",
        sa.Column("creator_id", sa.String(length=64), nullable=False),
        sa.Column("system_prompt", sa.Text(), nullable=False),
        sa.Column("price_per_message", sa.BigInteger(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        _created_at(),
        sa.PrimaryKeyConstraint("creator_id"),
    )

    op.create_table(
        "chat_messages",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("creator_id", sa.String(length=64), nullable=False),
        sa.Column("role", sa.String(length=16), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("txn_sig", sa.String(length=128), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_chat_messages_user_creator", "chat_messages", ["user_id", "creator_id"], unique=False
    )
    op.create_index(
        op.f("ix_chat_messages_created_at"), "chat_messages", ["created_at"], unique=False
    )

    # Live streams and live chat
    op.create_table(
        "live_streams",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("creator_id", sa.String(length=64), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=16), nullable=False),
        sa.Column("stream_key", sa.String(length=128), nullable=False),
        sa.Column("viewer_count", sa.Integer(), nullable=False),
        sa.Column("max_viewers", sa.Integer(), nullable=False),
        sa.Column("duration", sa.Integer(), nullable=False),
        sa.Column("metadata", sa.JSON(), nullable=False),
        _created_at(),
        sa.Column("ended_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_live_streams_creator_id"), "live_streams", ["creator_id"], unique=False)
    op.create_index(op.f("ix_live_streams_status"), "live_streams", ["status"], unique=False)
    op.create_index(op.f("ix_live_streams_created_at"), "live_streams", ["created_at"], unique=False)

    op.create_table(
        "live_chat_messages",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("stream_id", sa.String(length=64), nullable=False),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("message", sa.String(length=1000), nullable=False),
        sa.Column("type", sa.String(length=16), nullable=False),
        sa.Column("metadata", sa.JSON(), nullable=False),
        _created_at(),
        sa.ForeignKeyConstraint(["stream_id"], ["live_streams.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_live_chat_messages_stream_id"), "live_chat_messages", ["stream_id"], unique=False
    )
    op.create_index(
        op.f("ix_live_chat_messages_created_at"), "live_chat_messages", ["created_at"], unique=False
    )


def downgrade() -> None:
    """Downgrade schema: drop every table, children before parents."""
    op.drop_index(op.f("ix_live_chat_messages_created_at"), table_name="live_chat_messages")
    op.drop_index(op.f("ix_live_chat_messages_stream_id"), table_name="live_chat_messages")
    op.drop_table("live_chat_messages")
    op.drop_index(op.f("ix_live_streams_created_at"), table_name="live_streams")
    op.drop_index(op.f("ix_live_streams_status"), table_name="live_streams")
    op.drop_index(op.f("ix_live_streams_creator_id"), table_name="live_streams")
    op.drop_table("live_streams")
    op.drop_index(op.f("ix_chat_messages_created_at"), table_name="chat_messages")
    op.drop_index("ix_chat_messages_user_creator", table_name="chat_messages")
    op.drop_table("chat_messages")
    op.drop_table("ai_personas")
    op.drop_index(op.f("ix_activities_created_at"), table_name="activities")
    op.drop_index(op.f("ix_activities_target_user_id"), table_name="activities")
    op.drop_index(op.f("ix_activities_user_id"), table_name="activities")
    op.drop_table("activities")
    op.drop_index(op.f("ix_follows_following_id"), table_name="follows")
    op.drop_index(op.f("ix_follows_follower_id"), table_name="follows")
    op.drop_table("follows")
    op.drop_index(op.f("ix_tips_created_at"), table_name="tips")
    op.drop_index(op.f("ix_tips_to_user"), table_name="tips")
    op.drop_index(op.f("ix_tips_from_user"), table_name="tips")
    op.drop_table("tips")
    op.drop_index(op.f("ix_tokens_created_at"), table_name="tokens")
    op.drop_index(op.f("ix_tokens_creator_id"), table_name="tokens")
    op.drop_table("tokens")
    op.drop_index(op.f("ix_purchases_created_at"), table_name="purchases")
    op.drop_index(op.f("ix_purchases_post_id"), table_name="purchases")
    op.drop_index(op.f("ix_purchases_user_id"), table_name="purchases")
    op.drop_table("purchases")
    op.drop_index(op.f("ix_post_likes_post_id"), table_name="post_likes")
    op.drop_table("post_likes")
    op.drop_index(op.f("ix_posts_created_at"), table_name="posts")
    op.drop_index(op.f("ix_posts_status"), table_name="posts")
    op.drop_index(op.f("ix_posts_creator_id"), table_name="posts")
    op.drop_table("posts")
    op.drop_index(op.f("ix_users_created_at"), table_name="users")
    op.drop_index(op.f("ix_users_handle"), table_name="users")
    op.drop_table("users")
