"""
Decision Engine - 검증 → 정책 → 비즈니스 규칙 순서의 종합 판정

호출자는 행위자, 대상 리소스, 액션(필요하면 변경 데이터)을 넘기고
Decision 을 돌려받는다. 어떤 입력에도 예외를 던지지 않는다 (fail-closed).
"""
from datetime import datetime
from typing import Any, Callable, Dict, Optional, Tuple

from loguru import logger

from . import validation
from .hierarchy import as_role
from .models import (
    Action,
    ClubCreate,
    Decision,
    DecisionStage,
    EventCreate,
    ReportRequest,
    ResourceKind,
    UserCreate,
    UserUpdate,
)
from .policy import is_permitted
from .rules import (
    can_delete_event,
    can_delete_user,
    can_edit_event,
    can_edit_user,
    can_generate_report,
    can_promote_user,
)


# 변경 데이터 타입별 구조 검증
_CHANGE_VALIDATORS: Dict[type, Callable[..., bool]] = {
    UserCreate: validation.is_valid_user_creation,
    UserUpdate: validation.is_valid_user_update,
    ClubCreate: validation.is_valid_club_creation,
    EventCreate: validation.is_valid_event_creation,
    ReportRequest: validation.is_valid_report_request,
}


def _validate_changes(changes: Any, now: Optional[datetime]) -> Optional[Decision]:
    if changes is None:
        return None
    validator = _CHANGE_VALIDATORS.get(type(changes))
    if validator is None:
        return Decision.deny(DecisionStage.VALIDATION, f"지원하지 않는 변경 데이터: {type(changes).__name__}")
    if isinstance(changes, EventCreate):
        valid = validator(changes, now=now)
    else:
        valid = validator(changes)
    if not valid:
        return Decision.deny(DecisionStage.VALIDATION, f"{type(changes).__name__} 검증 실패")
    return None


def _target_of(resource: Any) -> Tuple[Optional[ResourceKind], Any, Optional[int]]:
    """(종류, 대상 역할, 대상 클럽)"""
    kind = ResourceKind.from_value(getattr(resource, "kind", None))
    target_role = getattr(resource, "role", None) if kind == ResourceKind.USER else None
    return kind, target_role, getattr(resource, "club_id", None)


def _apply_rules(
    kind: ResourceKind,
    action: Action,
    actor: Any,
    resource: Any,
    new_role: Any,
    now: Optional[datetime],
) -> Optional[Decision]:
    """상태 기반 규칙 (통과하면 None)"""
    if kind == ResourceKind.USER:
        if action == Action.DELETE and not can_delete_user(resource, actor):
            return Decision.deny(DecisionStage.BUSINESS_RULE, "삭제할 수 없는 사용자")
        if action == Action.EDIT and not can_edit_user(resource, actor):
            return Decision.deny(DecisionStage.BUSINESS_RULE, "수정할 수 없는 사용자")
        if action == Action.ASSIGN_ROLE:
            if new_role is None:
                return Decision.deny(DecisionStage.INPUT, "부여할 역할이 지정되지 않음")
            if not can_promote_user(actor, resource, new_role):
                return Decision.deny(DecisionStage.BUSINESS_RULE, "부여할 수 없는 역할")

    elif kind == ResourceKind.EVENT:
        event_date = resource.event_date
        moment = now or datetime.now(event_date.tzinfo)
        if action == Action.DELETE and not can_delete_event(resource, actor, now=now):
            return Decision.deny(DecisionStage.BUSINESS_RULE, "삭제할 수 없는 행사")
        if action == Action.EDIT and not can_edit_event(resource, actor, now=now):
            return Decision.deny(DecisionStage.BUSINESS_RULE, "지난 행사는 수정할 수 없음")
        if action == Action.REGISTER and not validation.can_register_for_event(event_date, moment):
            return Decision.deny(DecisionStage.BUSINESS_RULE, "등록 마감")
        if action == Action.MARK_ATTENDANCE and not validation.can_mark_attendance(event_date, moment):
            return Decision.deny(DecisionStage.BUSINESS_RULE, "출석 체크 가능 시간이 아님")

    elif kind == ResourceKind.REPORT:
        if action in (Action.GENERATE, Action.EXPORT) and not can_generate_report(resource.report_type, actor):
            return Decision.deny(DecisionStage.BUSINESS_RULE, "생성할 수 없는 리포트 유형")

    elif kind == ResourceKind.CLUB:
        if action == Action.EDIT and not getattr(resource, "is_active", False):
            return Decision.deny(DecisionStage.BUSINESS_RULE, "비활성 클럽은 수정할 수 없음")

    return None


def authorize(
    actor: Any,
    resource: Any,
    action: Any,
    *,
    new_role: Any = None,
    changes: Any = None,
    now: Optional[datetime] = None,
) -> Decision:
    """
    종합 판정

    Args:
        actor: 행위자 (Actor)
        resource: 대상 (UserRef, ClubRef, EventRef, ReportRef)
        action: 요청 액션 (Action 또는 문자열)
        new_role: ASSIGN_ROLE 시 부여할 역할
        changes: 신규/변경 데이터 (UserCreate, UserUpdate, ClubCreate, EventCreate, ReportRequest)
        now: 기준 시각 (기본값: 현재)

    Returns:
        Decision (allowed=False 이면 stage/reason 에 거부 사유)
    """
    try:
        return _authorize(actor, resource, action, new_role, changes, now)
    except Exception as e:
        logger.warning(f"판정 중 예외 발생, 거부 처리: {e}")
        return Decision.deny(DecisionStage.INPUT, "판정할 수 없는 입력")


def _authorize(
    actor: Any,
    resource: Any,
    action: Any,
    new_role: Any,
    changes: Any,
    now: Optional[datetime],
) -> Decision:
    if actor is None or resource is None:
        return Decision.deny(DecisionStage.INPUT, "행위자 또는 대상 누락")

    actor_role = as_role(getattr(actor, "role", None))
    if actor_role is None:
        return Decision.deny(DecisionStage.INPUT, "알 수 없는 행위자 역할")
    if not getattr(actor, "is_active", False):
        return Decision.deny(DecisionStage.INPUT, "비활성 사용자")

    requested = Action.from_value(action)
    kind, target_role, target_club_id = _target_of(resource)
    if requested is None or kind is None:
        return Decision.deny(DecisionStage.INPUT, "알 수 없는 액션 또는 리소스")
    if kind == ResourceKind.USER and as_role(target_role) is None:
        return Decision.deny(DecisionStage.INPUT, "알 수 없는 대상 역할")

    denied = _validate_changes(changes, now)
    if denied is not None:
        return denied

    if not is_permitted(
        actor_role,
        getattr(actor, "club_id", None),
        kind,
        requested,
        target_role=target_role,
        target_club_id=target_club_id,
    ):
        # 본인 정보 수정은 역할 정책과 무관하게 rules 에서 판단
        self_edit = (
            kind == ResourceKind.USER
            and requested == Action.EDIT
            and can_edit_user(resource, actor)
        )
        if not self_edit:
            return Decision.deny(DecisionStage.POLICY, f"{actor_role.value} 역할에 {kind.value}:{requested.value} 권한 없음")

    denied = _apply_rules(kind, requested, actor, resource, new_role, now)
    if denied is not None:
        return denied

    logger.debug(f"허용: {actor_role.value} {kind.value}:{requested.value}")
    return Decision.allow()


def is_allowed(actor: Any, resource: Any, action: Any, **kwargs) -> bool:
    """authorize() 의 bool 버전"""
    return authorize(actor, resource, action, **kwargs).allowed
