"""seed_post_statuses_and_types

Revision ID: 9b47e0d2c813
Revises: 3f1c9a27d4b0
Create Date: 2026-09-28 10:31:02.774915

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "9b47e0d2c813"
down_revision: Union[str, Sequence[str], None] = "3f1c9a27d4b0"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

STATUSES = [(1, "draft"), (2, "published"), (3, "scheduled"), (4, "deleted")]
TYPES = [(1, "entry"), (2, "page")]


def upgrade() -> None:
    """Seed post statuses and post types."""
    poststatus_table = sa.table(
        "poststatus",
        sa.column("id", sa.Integer),
        sa.column("name", sa.String),
    )
    posttype_table = sa.table(
        "posttype",
        sa.column("id", sa.Integer),
        sa.column("name", sa.String),
    )

    op.bulk_insert(
        poststatus_table, [{"id": code, "name": name} for code, name in STATUSES]
    )
    op.bulk_insert(posttype_table, [{"id": code, "name": name} for code, name in TYPES])


def downgrade() -> None:
    """Remove seeded statuses and types."""
    op.execute(
        "DELETE FROM poststatus WHERE name IN ('draft', 'published', 'scheduled', 'deleted')"
    )
    op.execute("DELETE FROM posttype WHERE name IN ('entry', 'page')")
