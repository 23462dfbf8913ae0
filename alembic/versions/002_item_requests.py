"""Item requests and items.request_id

Revision ID: 002
Revises: 001
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "item_requests",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("requestor_id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["requestor_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_item_requests_requestor_id", "item_requests", ["requestor_id"], unique=False)

    with op.batch_alter_table("items") as batch_op:
        batch_op.add_column(sa.Column("request_id", sa.Integer(), nullable=True))
        batch_op.create_foreign_key("fk_items_request_id", "item_requests", ["request_id"], ["id"])
        batch_op.create_index("ix_items_request_id", ["request_id"], unique=False)


def downgrade() -> None:
    with op.batch_alter_table("items") as batch_op:
        batch_op.drop_index("ix_items_request_id")
        batch_op.drop_constraint("fk_items_request_id", type_="foreignkey")
        batch_op.drop_column("request_id")

    op.drop_index("ix_item_requests_requestor_id", table_name="item_requests")
    op.drop_table("item_requests")
