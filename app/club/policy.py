"""
Permission Policy - 역할 기반 권한 판정

(행위자 역할, 행위자 클럽, 대상 종류, 액션, 대상 역할, 대상 클럽) → 허용 여부.
리소스의 상태(날짜, 활성 여부 등)는 보지 않는다. 상태 판정은 rules.py 담당.
"""
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from loguru import logger

from .hierarchy import (
    CLUB_SCOPED_ROLES,
    ROLE_ORDER,
    UNSCOPED_ROLES,
    as_role,
    can_assign_role,
    same_club,
)
from .models import Action, ResourceKind, Role


class Scope(str, Enum):
    """권한 적용 범위"""
    ANY = "any"             # 클럽 무관
    OWN_CLUB = "own_club"   # 자기 클럽 리소스만


def _grant(roles, scope: Scope) -> Dict[Role, Scope]:
    return {role: scope for role in roles}


_GLOBAL_ADMINS = (Role.SYSTEM_ADMIN, Role.ADMIN)
_CLUB_LEADERS = (Role.CLUB_PRESIDENT, Role.CHAIRMAN)

# 클럽 무관 4개 역할 + 클럽 한정 3개 역할 (일반 회원 제외)
_STAFF = {
    **_grant(UNSCOPED_ROLES, Scope.ANY),
    **_grant(CLUB_SCOPED_ROLES, Scope.OWN_CLUB),
}
_EVERYONE = _grant(ROLE_ORDER, Scope.ANY)

# (리소스 종류, 액션) → 역할별 적용 범위. 표에 없으면 거부
PERMISSION_MATRIX: Dict[Tuple[ResourceKind, Action], Dict[Role, Scope]] = {
    # 사용자
    (ResourceKind.USER, Action.CREATE): {
        **_grant(UNSCOPED_ROLES, Scope.ANY),
        **_grant((Role.VICE_CHAIRMAN, Role.CLUB_OFFICER), Scope.OWN_CLUB),
    },
    (ResourceKind.USER, Action.EDIT): {
        **_grant(UNSCOPED_ROLES, Scope.ANY),
        **_grant((Role.VICE_CHAIRMAN, Role.CLUB_OFFICER), Scope.OWN_CLUB),
    },
    (ResourceKind.USER, Action.DELETE): _grant(UNSCOPED_ROLES, Scope.ANY),
    (ResourceKind.USER, Action.ASSIGN_ROLE): dict(_STAFF),
    (ResourceKind.USER, Action.VIEW_DETAILS): dict(_STAFF),

    # 클럽
    (ResourceKind.CLUB, Action.CREATE): _grant(_GLOBAL_ADMINS, Scope.ANY),
    (ResourceKind.CLUB, Action.EDIT): {
        **_grant(_GLOBAL_ADMINS, Scope.ANY),
        **_grant(_CLUB_LEADERS + (Role.VICE_CHAIRMAN,), Scope.OWN_CLUB),
    },
    (ResourceKind.CLUB, Action.DELETE): _grant(_GLOBAL_ADMINS, Scope.ANY),
    (ResourceKind.CLUB, Action.VIEW_DETAILS): {
        **_EVERYONE,
        Role.MEMBER: Scope.OWN_CLUB,
    },

    # 행사
    (ResourceKind.EVENT, Action.CREATE): dict(_STAFF),
    (ResourceKind.EVENT, Action.EDIT): dict(_STAFF),
    (ResourceKind.EVENT, Action.DELETE): dict(_STAFF),
    (ResourceKind.EVENT, Action.MARK_ATTENDANCE): dict(_STAFF),
    (ResourceKind.EVENT, Action.REGISTER): dict(_EVERYONE),
    (ResourceKind.EVENT, Action.VIEW_DETAILS): dict(_EVERYONE),

    # 리포트
    (ResourceKind.REPORT, Action.GENERATE): dict(_STAFF),
    (ResourceKind.REPORT, Action.EXPORT): dict(_STAFF),
    (ResourceKind.REPORT, Action.VIEW_DETAILS): dict(_STAFF),
}

# 대상 사용자의 현재 역할까지 비교하는 액션 (삭제는 rules.py 사다리가 담당)
_HOLDER_CHECKED_ACTIONS = frozenset({Action.EDIT, Action.ASSIGN_ROLE, Action.VIEW_DETAILS})


def scope_for(actor_role: Any, kind: Any, action: Any) -> Optional[Scope]:
    """역할이 (종류, 액션)에 대해 가진 범위 (없으면 None)"""
    role = as_role(actor_role)
    kind = ResourceKind.from_value(kind)
    action = Action.from_value(action)
    if role is None or kind is None or action is None:
        return None
    return PERMISSION_MATRIX.get((kind, action), {}).get(role)


def is_permitted(
    actor_role: Any,
    actor_club_id: Optional[int],
    kind: Any,
    action: Any,
    target_role: Any = None,
    target_club_id: Optional[int] = None,
) -> bool:
    """
    역할 기반 권한 판정

    Args:
        actor_role: 행위자 역할
        actor_club_id: 행위자 소속 클럽
        kind: 대상 리소스 종류 (user, club, event, report)
        action: 요청 액션
        target_role: 대상 사용자의 현재 역할 (사용자 대상일 때)
        target_club_id: 대상 리소스의 소속 클럽

    Returns:
        허용이면 True. 표에 없는 조합, 알 수 없는 값은 False
    """
    scope = scope_for(actor_role, kind, action)
    if scope is None:
        logger.debug(f"권한 없음: role={actor_role!r} kind={kind!r} action={action!r}")
        return False

    if scope == Scope.OWN_CLUB and not same_club(actor_club_id, target_club_id):
        return False

    if (
        ResourceKind.from_value(kind) == ResourceKind.USER
        and Action.from_value(action) in _HOLDER_CHECKED_ACTIONS
        and target_role is not None
    ):
        return can_assign_role(actor_role, target_role)

    return True


def permitted_actions(actor_role: Any) -> List[Dict[str, str]]:
    """역할이 보유한 (종류, 액션, 범위) 목록"""
    role = as_role(actor_role)
    if role is None:
        return []
    return [
        {"kind": kind.value, "action": action.value, "scope": grants[role].value}
        for (kind, action), grants in PERMISSION_MATRIX.items()
        if role in grants
    ]
