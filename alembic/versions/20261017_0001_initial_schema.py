"""Initial schema

Revision ID: 20261017_0001
Revises:
Create Date: 2026-10-17 09:00:00
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "20261017_0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


role_enum = sa.Enum("student", "teacher", "admin", name="role_enum", native_enum=False)


def _id_col() -> sa.Column:
    return sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True, nullable=False)


def _created_col() -> sa.Column:
    return sa.Column("created_at", sa.DateTime(timezone=True), nullable=False)


def _updated_col() -> sa.Column:
    return sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False)


def upgrade() -> None:
    op.create_table(
        "users",
        _id_col(),
        _created_col(),
        _updated_col(),
        sa.Column("username", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=128), nullable=False),
        sa.Column("role", role_enum, nullable=False),
        sa.Column("department", sa.String(length=128), nullable=True),
        sa.UniqueConstraint("username", name="uq_users_username"),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )

    op.create_table(
        "teachers",
        _id_col(),
        _created_col(),
        _updated_col(),
        sa.Column("name", sa.String(length=128), nullable=False),
        sa.Column("department", sa.String(length=128), nullable=False),
        sa.Column("subject", sa.String(length=128), nullable=False),
        sa.Column("average_rating", sa.Float(), nullable=False, server_default="0"),
        sa.Column("total_feedback", sa.Integer(), nullable=False, server_default="0"),
    )
    op.create_index("ix_teachers_name", "teachers", ["name"], unique=False)

    op.create_table(
        "feedback",
        _id_col(),
        _created_col(),
        _updated_col(),
        sa.Column("teacher_id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("student_id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("student_name", sa.String(length=128), nullable=False),
        sa.Column("subject", sa.String(length=128), nullable=True),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("comment", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(
            ["teacher_id"],
            ["teachers.id"],
            name="fk_feedback_teacher_id_teachers",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["student_id"],
            ["users.id"],
            name="fk_feedback_student_id_users",
            ondelete="CASCADE",
        ),
        sa.UniqueConstraint("teacher_id", "student_id", name="uq_feedback_teacher_student"),
    )
    op.create_index("ix_feedback_teacher_id", "feedback", ["teacher_id"], unique=False)
    op.create_index("ix_feedback_student_id", "feedback", ["student_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_feedback_student_id", table_name="feedback")
    op.drop_index("ix_feedback_teacher_id", table_name="feedback")
    op.drop_table("feedback")

    op.drop_index("ix_teachers_name", table_name="teachers")
    op.drop_table("teachers")

    op.drop_table("users")
