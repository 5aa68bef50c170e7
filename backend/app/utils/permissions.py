"""Permissions 관련 공용 유틸리티 헬퍼입니다."""

from typing import Iterable

from app.models.user import User


ADMIN = "ADMIN"
OFFICER = "OFFICER"

ALL_ROLES = (ADMIN, OFFICER)


def is_role_allowed(role: str | None, allowed: Iterable[str]) -> bool:
    """호출자 역할이 라우트가 허용하는 역할 집합에 속하는지 판단한다."""
    if not role:
        return False
    return role in set(allowed)


def is_admin(user: User) -> bool:
    return user.role == ADMIN


def is_officer(user: User) -> bool:
    return user.role == OFFICER
