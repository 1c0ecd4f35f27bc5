"""Identity ORM models."""

from __future__ import annotations

from sqlalchemy import Enum as SAEnum, String
from sqlalchemy.orm import Mapped, mapped_column

from edufeedback.core.database import Base, BaseModelMixin
from edufeedback.core.enums import RoleEnum


class User(BaseModelMixin, Base):
    """Platform user model."""

    __tablename__ = "users"

    username: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    role: Mapped[RoleEnum] = mapped_column(
        SAEnum(
            RoleEnum,
            name="role_enum",
            native_enum=False,
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
        ),
        default=RoleEnum.STUDENT,
        nullable=False,
    )
    department: Mapped[str | None] = mapped_column(String(128), nullable=True)
