"""
Role Hierarchy - 역할 서열 및 역할 부여 가능 표

역할 간 관계는 단순한 일렬 서열이 아닌 부분 순서이므로
절차적으로 추론하지 않고 명시적인 표로 관리한다.
"""
from typing import Any, Dict, FrozenSet, List, Optional

from loguru import logger

from .models import Role


# 표시/권한 순서 (높은 순)
ROLE_ORDER: List[Role] = [
    Role.SYSTEM_ADMIN,
    Role.ADMIN,
    Role.CLUB_PRESIDENT,
    Role.CHAIRMAN,
    Role.VICE_CHAIRMAN,
    Role.CLUB_OFFICER,
    Role.TEAM_LEADER,
    Role.MEMBER,
]

# 클럽 소속과 무관하게 행사 가능한 역할
UNSCOPED_ROLES: FrozenSet[Role] = frozenset({
    Role.SYSTEM_ADMIN,
    Role.ADMIN,
    Role.CLUB_PRESIDENT,
    Role.CHAIRMAN,
})

# 자기 클럽 리소스에만 행사 가능한 역할
CLUB_SCOPED_ROLES: FrozenSet[Role] = frozenset({
    Role.VICE_CHAIRMAN,
    Role.CLUB_OFFICER,
    Role.TEAM_LEADER,
})

# 사용자 삭제 사다리 (0 = 최상위)
DELETION_LADDER: List[Role] = [
    Role.SYSTEM_ADMIN,
    Role.ADMIN,
    Role.CLUB_PRESIDENT,
    Role.CHAIRMAN,
]

_ALL_ROLES = frozenset(ROLE_ORDER)

# 역할별 부여 가능한 역할
ASSIGNABLE_ROLES: Dict[Role, FrozenSet[Role]] = {
    Role.SYSTEM_ADMIN: _ALL_ROLES,
    Role.ADMIN: _ALL_ROLES - {Role.SYSTEM_ADMIN},
    Role.CLUB_PRESIDENT: _ALL_ROLES - {Role.SYSTEM_ADMIN, Role.ADMIN},
    Role.CHAIRMAN: _ALL_ROLES - {Role.SYSTEM_ADMIN, Role.ADMIN, Role.CLUB_PRESIDENT},
    Role.VICE_CHAIRMAN: frozenset({Role.MEMBER, Role.TEAM_LEADER, Role.CLUB_OFFICER}),
    Role.CLUB_OFFICER: frozenset({Role.MEMBER, Role.TEAM_LEADER}),
    Role.TEAM_LEADER: frozenset({Role.MEMBER}),
    Role.MEMBER: frozenset(),
}


def as_role(value: Any) -> Optional[Role]:
    """역할 값 정규화 (알 수 없으면 None)"""
    role = Role.from_value(value)
    if role is None and value is not None:
        logger.debug(f"알 수 없는 역할 값: {value!r}")
    return role


def can_assign_role(current_role: Any, target_role: Any) -> bool:
    """
    current_role 보유자가 target_role 을 부여할 수 있는지

    Args:
        current_role: 부여하는 쪽 역할
        target_role: 부여하려는 역할

    Returns:
        허용이면 True, 알 수 없는 역할은 항상 False
    """
    current = as_role(current_role)
    target = as_role(target_role)
    if current is None or target is None:
        return False
    return target in ASSIGNABLE_ROLES.get(current, frozenset())


def assignable_roles(role: Any) -> List[Role]:
    """부여 가능한 역할 목록 (서열 순)"""
    current = as_role(role)
    if current is None:
        return []
    allowed = ASSIGNABLE_ROLES.get(current, frozenset())
    return [r for r in ROLE_ORDER if r in allowed]


def is_unscoped(role: Any) -> bool:
    return as_role(role) in UNSCOPED_ROLES


def is_club_scoped(role: Any) -> bool:
    return as_role(role) in CLUB_SCOPED_ROLES


def ladder_tier(role: Any) -> Optional[int]:
    """삭제 사다리 단계 (사다리 밖 역할은 None)"""
    current = as_role(role)
    if current in DELETION_LADDER:
        return DELETION_LADDER.index(current)
    return None


def same_club(actor_club_id: Optional[int], target_club_id: Optional[int]) -> bool:
    """클럽 범위 일치 여부 (어느 한쪽이라도 소속이 없으면 불일치)"""
    if actor_club_id is None or target_club_id is None:
        return False
    return actor_club_id == target_club_id
