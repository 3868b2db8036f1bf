"""
Business Rules - 리소스 상태를 반영한 최종 판정

역할 정책(policy.py)에 대상의 상태(행사 일시, 활성 여부, 본인 여부)를 더해
구체적인 작업(사용자 삭제, 행사 삭제, 역할 부여, 리포트 생성)의 허용 여부를 결정한다.
모든 함수는 입력을 변경하지 않으며, 판단할 수 없는 입력은 거부(False)로 처리한다.
"""
from datetime import datetime
from typing import Any, Dict, FrozenSet, Optional

from loguru import logger

from .hierarchy import CLUB_SCOPED_ROLES, UNSCOPED_ROLES, as_role, can_assign_role, same_club
from .models import Action, ReportType, ResourceKind, Role
from .policy import is_permitted


# 삭제 시 보호되는 대상 역할 (사다리 상 자신 및 상위)
DELETE_PROTECTED_ROLES: Dict[Role, FrozenSet[Role]] = {
    Role.SYSTEM_ADMIN: frozenset({Role.SYSTEM_ADMIN}),
    Role.ADMIN: frozenset({Role.SYSTEM_ADMIN, Role.ADMIN}),
    Role.CLUB_PRESIDENT: frozenset({Role.SYSTEM_ADMIN, Role.ADMIN, Role.CLUB_PRESIDENT}),
    Role.CHAIRMAN: frozenset({
        Role.SYSTEM_ADMIN, Role.ADMIN, Role.CLUB_PRESIDENT, Role.CHAIRMAN
    }),
}

_ALL_REPORTS = frozenset(ReportType)

# 역할별 생성 가능한 리포트 유형 (표에 없는 역할은 없음)
REPORT_ACCESS: Dict[Role, FrozenSet[ReportType]] = {
    Role.SYSTEM_ADMIN: _ALL_REPORTS,
    Role.ADMIN: _ALL_REPORTS,
    Role.CLUB_PRESIDENT: _ALL_REPORTS,
    Role.CHAIRMAN: _ALL_REPORTS,
    Role.VICE_CHAIRMAN: _ALL_REPORTS - {ReportType.SEMESTER_SUMMARY},
    Role.CLUB_OFFICER: frozenset({ReportType.EVENT_OUTCOMES, ReportType.ACTIVITY_TRACKING}),
    Role.TEAM_LEADER: frozenset({ReportType.EVENT_OUTCOMES, ReportType.ACTIVITY_TRACKING}),
    Role.MEMBER: frozenset(),
}


def _user_id(user: Any) -> Optional[int]:
    """Actor.user_id 또는 UserRef.id"""
    user_id = getattr(user, "user_id", None)
    if user_id is None:
        user_id = getattr(user, "id", None)
    return user_id


def _is_active(obj: Any) -> bool:
    return getattr(obj, "is_active", False) is True


def _is_past(moment: Any, now: Optional[datetime]) -> Optional[bool]:
    """moment <= now 여부 (비교 불가면 None)"""
    if not isinstance(moment, datetime):
        return None
    now = now or datetime.now(moment.tzinfo)
    try:
        return moment <= now
    except TypeError as e:
        logger.warning(f"일시 비교 실패: {e}")
        return None


# =============================================
# 사용자
# =============================================

def can_delete_user(target: Any, actor: Any) -> bool:
    """
    사용자 삭제 가능 여부

    1. 본인 삭제 불가
    2. SystemAdmin: SystemAdmin 외 모두
    3. Admin: SystemAdmin, Admin 외 모두
    4. ClubPresident: 위 + ClubPresident 외 모두
    5. Chairman: 위 + Chairman 외 모두
    6. 그 외 역할: 불가

    Args:
        target: 삭제 대상 사용자 (UserRef)
        actor: 행위자 (Actor 또는 UserRef)
    """
    if target is None or actor is None:
        return False

    target_id = _user_id(target)
    actor_id = _user_id(actor)
    if target_id is None or actor_id is None:
        logger.debug("사용자 삭제 판정: ID 누락")
        return False
    if target_id == actor_id:
        return False

    actor_role = as_role(getattr(actor, "role", None))
    target_role = as_role(getattr(target, "role", None))
    if actor_role is None or target_role is None:
        return False

    protected = DELETE_PROTECTED_ROLES.get(actor_role)
    if protected is None:
        return False
    return target_role not in protected


def can_edit_user(target: Any, actor: Any) -> bool:
    """본인 정보는 항상 수정 가능, 그 외에는 역할 정책을 따른다"""
    if target is None or actor is None or not _is_active(actor):
        return False

    actor_id = _user_id(actor)
    if actor_id is not None and actor_id == _user_id(target):
        return True

    target_role = as_role(getattr(target, "role", None))
    if target_role is None:
        return False
    return is_permitted(
        getattr(actor, "role", None),
        getattr(actor, "club_id", None),
        ResourceKind.USER,
        Action.EDIT,
        target_role=target_role,
        target_club_id=getattr(target, "club_id", None),
    )


def can_promote_user(actor: Any, target: Any, new_role: Any) -> bool:
    """역할 변경: 양쪽 모두 활성 + 부여 가능한 역할"""
    if actor is None or target is None:
        return False
    if not (_is_active(actor) and _is_active(target)):
        return False
    return can_assign_role(getattr(actor, "role", None), new_role)


def can_deactivate_user(actor: Any, target: Any) -> bool:
    """비활성화: 대상이 활성 상태 + 삭제 권한"""
    if actor is None or target is None or not _is_active(target):
        return False
    return can_delete_user(target, actor)


def can_transfer_membership(user: Any, target_club: Any) -> bool:
    """다른 (활성) 클럽으로 소속 이전"""
    if user is None or target_club is None:
        return False
    if not (_is_active(user) and _is_active(target_club)):
        return False
    return getattr(user, "club_id", None) != getattr(target_club, "club_id", None)


def can_user_perform_action(user: Any, action: Any) -> bool:
    """활성 사용자 + 비어 있지 않은 액션"""
    if user is None or not _is_active(user):
        return False
    if isinstance(action, str):
        return bool(action.strip())
    return action is not None


# =============================================
# 행사
# =============================================

def can_delete_event(event: Any, actor: Any, now: Optional[datetime] = None) -> bool:
    """
    행사 삭제 가능 여부

    - 지난 행사(event_date <= now)는 삭제 불가. 정확히 지금 시작하는 행사도 불가
    - SystemAdmin, Admin, ClubPresident, Chairman: 모든 행사
    - ViceChairman, ClubOfficer, TeamLeader: 자기 클럽 행사만
    """
    if event is None or actor is None:
        return False

    past = _is_past(getattr(event, "event_date", None), now)
    if past is None or past:
        return False

    role = as_role(getattr(actor, "role", None))
    if role in UNSCOPED_ROLES:
        return True
    if role in CLUB_SCOPED_ROLES:
        return same_club(getattr(actor, "club_id", None), getattr(event, "club_id", None))
    return False


def can_edit_event(event: Any, actor: Any, now: Optional[datetime] = None) -> bool:
    """지난 행사는 수정 불가, 그 외에는 역할 정책을 따른다"""
    if event is None or actor is None:
        return False

    past = _is_past(getattr(event, "event_date", None), now)
    if past is None or past:
        return False

    return is_permitted(
        getattr(actor, "role", None),
        getattr(actor, "club_id", None),
        ResourceKind.EVENT,
        Action.EDIT,
        target_club_id=getattr(event, "club_id", None),
    )


# =============================================
# 리포트
# =============================================

def can_generate_report(report_type: Any, actor: Any) -> bool:
    """
    리포트 생성 가능 여부

    | 역할 | 허용 유형 |
    | SystemAdmin, Admin, ClubPresident, Chairman | 전체 |
    | ViceChairman | SemesterSummary 제외 |
    | ClubOfficer, TeamLeader | EventOutcomes, ActivityTracking |
    | Member | 없음 |
    """
    if actor is None:
        return False
    report = ReportType.from_value(report_type)
    role = as_role(getattr(actor, "role", None))
    if report is None or role is None:
        return False
    return report in REPORT_ACCESS.get(role, frozenset())
