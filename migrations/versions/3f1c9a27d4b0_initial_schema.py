"""initial_schema

Create the schema for Quill:
- Users (post authors)
- Post status and post type lookup tables
- Posts (unique slug, guid, status/type codes)
- Post info (key/value sidecar, JSONB values)
- Tags and the tag2post association
- Comments

Revision ID: 3f1c9a27d4b0
Revises:
Create Date: 2026-09-28 10:12:44.318204

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "3f1c9a27d4b0"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("username", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("username"),
    )

    op.create_table(
        "poststatus",
        sa.Column("id", sa.Integer(), autoincrement=False, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )

    op.create_table(
        "posttype",
        sa.Column("id", sa.Integer(), autoincrement=False, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )

    op.create_table(
        "posts",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("slug", sa.String(255), nullable=False),
        sa.Column("guid", sa.String(255), nullable=False),
        sa.Column("title", sa.String(255), nullable=False, server_default=""),
        sa.Column("content", sa.Text(), nullable=False, server_default=""),
        sa.Column("cached_content", sa.Text(), nullable=False, server_default=""),
        sa.Column("user_id", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("status", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("content_type", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("pubdate", sa.TIMESTAMP(timezone=False), nullable=False),
        sa.Column("updated", sa.TIMESTAMP(timezone=False), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        # Backstop for slug allocation races; the post repository maps a
        # violation of this constraint to a retryable conflict
        sa.UniqueConstraint("slug", name="uq_posts_slug"),
    )
    op.create_index("idx_posts_pubdate", "posts", [sa.text("pubdate DESC")])
    op.create_index("idx_posts_status", "posts", ["status"])

    op.create_table(
        "postinfo",
        sa.Column("post_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("value", postgresql.JSONB(), nullable=True),
        sa.ForeignKeyConstraint(["post_id"], ["posts.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("post_id", "name", name="pk_postinfo"),
    )

    op.create_table(
        "tags",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("tag_text", sa.String(255), nullable=False),
        sa.Column("tag_slug", sa.String(255), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("tag_text"),
    )
    op.create_index("idx_tags_slug", "tags", ["tag_slug"])

    op.create_table(
        "tag2post",
        sa.Column("tag_id", sa.Integer(), nullable=False),
        sa.Column("post_id", sa.Integer(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.ForeignKeyConstraint(["tag_id"], ["tags.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["post_id"], ["posts.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("tag_id", "post_id", name="uq_tag2post"),
    )
    op.create_index("idx_tag2post_post_id", "tag2post", ["post_id"])

    op.create_table(
        "comments",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("post_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False, server_default=""),
        sa.Column("content", sa.Text(), nullable=False, server_default=""),
        sa.Column("date", sa.TIMESTAMP(timezone=False), nullable=False),
        sa.ForeignKeyConstraint(["post_id"], ["posts.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_comments_post_id", "comments", ["post_id"])


def downgrade() -> None:
    """Downgrade schema."""
    # Drop tables (in reverse order of dependencies)
    op.drop_index("idx_comments_post_id", table_name="comments")
    op.drop_table("comments")
    op.drop_index("idx_tag2post_post_id", table_name="tag2post")
    op.drop_table("tag2post")
    op.drop_index("idx_tags_slug", table_name="tags")
    op.drop_table("tags")
    op.drop_table("postinfo")
    op.drop_index("idx_posts_status", table_name="posts")
    op.drop_index("idx_posts_pubdate", table_name="posts")
    op.drop_table("posts")
    op.drop_table("posttype")
    op.drop_table("poststatus")
    op.drop_table("users")
