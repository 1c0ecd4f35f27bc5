"""Core enums used across modules."""

from enum import StrEnum


class RoleEnum(StrEnum):
    """System roles."""

    STUDENT = "student"
    TEACHER = "teacher"
    ADMIN = "admin"


SELF_SIGNUP_ROLES = (RoleEnum.STUDENT, RoleEnum.TEACHER)
