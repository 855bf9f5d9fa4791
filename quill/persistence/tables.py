"""SQLAlchemy table definitions for Quill.

These table definitions are used with SQLAlchemy Core.
They match the schema defined in Alembic migrations.
"""

from sqlalchemy import (
    Column,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    PrimaryKeyConstraint,
    String,
    Table,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import JSONB, TIMESTAMP

# Metadata object for all tables
metadata = MetaData()

# Name of the unique constraint on posts.slug; a violation of it means a
# concurrent writer claimed the slug first.
POSTS_SLUG_CONSTRAINT = "uq_posts_slug"

# ============================================================================
# USERS TABLE
# ============================================================================
users_table = Table(
    "users",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("username", String(255), nullable=False, unique=True),
    Column("email", String(255), nullable=True),
)

# ============================================================================
# LOOKUP TABLES
# ============================================================================
poststatus_table = Table(
    "poststatus",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=False),
    Column("name", String(255), nullable=False, unique=True),
)

posttype_table = Table(
    "posttype",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=False),
    Column("name", String(255), nullable=False, unique=True),
)

# ============================================================================
# POSTS TABLE
# ============================================================================
posts_table = Table(
    "posts",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("slug", String(255), nullable=False),
    Column("guid", String(255), nullable=False),
    Column("title", String(255), nullable=False, server_default=""),
    Column("content", Text, nullable=False, server_default=""),
    Column("cached_content", Text, nullable=False, server_default=""),
    Column("user_id", Integer, nullable=False, server_default="0"),
    Column("status", Integer, nullable=False, server_default="0"),
    Column("content_type", Integer, nullable=False, server_default="0"),
    Column("pubdate", TIMESTAMP(timezone=False), nullable=False),
    Column("updated", TIMESTAMP(timezone=False), nullable=False),
    UniqueConstraint("slug", name=POSTS_SLUG_CONSTRAINT),
)

Index("idx_posts_pubdate", posts_table.c.pubdate.desc())
Index("idx_posts_status", posts_table.c.status)

# ============================================================================
# POSTINFO TABLE (sidecar key/value attributes)
# ============================================================================
postinfo_table = Table(
    "postinfo",
    metadata,
    Column("post_id", Integer, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False),
    Column("name", String(255), nullable=False),
    Column("value", JSONB, nullable=True),
    PrimaryKeyConstraint("post_id", "name", name="pk_postinfo"),
)

# ============================================================================
# TAGS TABLE
# ============================================================================
tags_table = Table(
    "tags",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("tag_text", String(255), nullable=False, unique=True),
    Column("tag_slug", String(255), nullable=False),
)

Index("idx_tags_slug", tags_table.c.tag_slug)

# ============================================================================
# TAG2POST TABLE (junction table for many-to-many relationship)
# ============================================================================
tag2post_table = Table(
    "tag2post",
    metadata,
    Column("tag_id", Integer, ForeignKey("tags.id", ondelete="CASCADE"), nullable=False),
    Column("post_id", Integer, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False),
    # Order of the tag within its post's tag set
    Column("position", Integer, nullable=False, server_default="0"),
    UniqueConstraint("tag_id", "post_id", name="uq_tag2post"),
)

Index("idx_tag2post_post_id", tag2post_table.c.post_id)

# ============================================================================
# COMMENTS TABLE
# ============================================================================
comments_table = Table(
    "comments",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("post_id", Integer, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False),
    Column("name", String(255), nullable=False, server_default=""),
    Column("content", Text, nullable=False, server_default=""),
    Column("date", TIMESTAMP(timezone=False), nullable=False),
)

Index("idx_comments_post_id", comments_table.c.post_id)
