"""
Club Governance Router

클럽 관리 권한/비즈니스 규칙 판정 API
- 역할 서열 조회
- 개별 판정 (역할 부여, 사용자 삭제, 행사 삭제, 리포트 생성)
- 종합 판정 (검증 → 정책 → 규칙)
- 필드 검증
"""

from typing import Any, Dict, List, Optional, Type

from fastapi import APIRouter, Depends, HTTPException
from loguru import logger
from pydantic import BaseModel, ValidationError

from .dependencies import get_current_actor, require_permission, require_roles
from .engine import authorize
from .hierarchy import ROLE_ORDER, assignable_roles, can_assign_role, is_club_scoped, ladder_tier
from .models import (
    Action,
    Actor,
    ActorPermissions,
    AssignRoleCheck,
    AuthorizeRequest,
    CheckResponse,
    ClubCreate,
    Decision,
    DecisionStage,
    DeleteEventCheck,
    DeleteUserCheck,
    EventCreate,
    FieldValidationRequest,
    FieldValidationResponse,
    GenerateReportCheck,
    PermissionEntry,
    ReportRequest,
    ReportType,
    ResourceKind,
    Role,
    RoleInfo,
    UserCreate,
    UserUpdate,
)
from .policy import PERMISSION_MATRIX, permitted_actions
from .rules import can_delete_event, can_delete_user, can_generate_report
from .validation import VALIDATORS, validate_field

router = APIRouter(prefix="/club", tags=["Club Governance"])

# (종류, 액션) → 변경 데이터 모델
CHANGE_MODELS: Dict[tuple, Type[BaseModel]] = {
    (ResourceKind.USER, Action.CREATE): UserCreate,
    (ResourceKind.USER, Action.EDIT): UserUpdate,
    (ResourceKind.CLUB, Action.CREATE): ClubCreate,
    (ResourceKind.CLUB, Action.EDIT): ClubCreate,
    (ResourceKind.EVENT, Action.CREATE): EventCreate,
    (ResourceKind.REPORT, Action.GENERATE): ReportRequest,
    (ResourceKind.REPORT, Action.EXPORT): ReportRequest,
}


# =============================================
# Hierarchy
# =============================================

@router.get("/roles", response_model=List[RoleInfo])
async def list_roles():
    """역할 서열 및 역할별 부여 가능 역할"""
    return [
        RoleInfo(
            role=role,
            ladder_tier=ladder_tier(role),
            club_scoped=is_club_scoped(role),
            assignable_roles=assignable_roles(role),
        )
        for role in ROLE_ORDER
    ]


@router.get("/matrix")
async def get_permission_matrix(
    actor: Actor = Depends(require_roles([Role.SYSTEM_ADMIN, Role.ADMIN]))
):
    """전체 권한 표 (관리자 전용)"""
    return [
        {
            "kind": kind.value,
            "action": action.value,
            "grants": {role.value: scope.value for role, scope in grants.items()},
        }
        for (kind, action), grants in PERMISSION_MATRIX.items()
    ]


@router.get("/me/permissions", response_model=ActorPermissions)
async def get_my_permissions(actor: Actor = Depends(get_current_actor)):
    """현재 행위자가 가진 권한 요약"""
    return ActorPermissions(
        role=actor.role,
        club_id=actor.club_id,
        permissions=[PermissionEntry(**entry) for entry in permitted_actions(actor.role)],
        report_types=[r for r in ReportType if can_generate_report(r, actor)],
    )


@router.get("/clubs/{club_id}/report-types", response_model=List[ReportType])
async def list_club_report_types(
    club_id: int,
    actor: Actor = Depends(require_permission(ResourceKind.REPORT, Action.GENERATE))
):
    """해당 클럽에 대해 생성 가능한 리포트 유형"""
    return [r for r in ReportType if can_generate_report(r, actor)]


# =============================================
# Decisions
# =============================================

@router.post("/decisions/assign-role", response_model=CheckResponse)
async def check_assign_role(body: AssignRoleCheck):
    allowed = can_assign_role(body.current_role, body.target_role)
    logger.info(f"역할 부여 판정: {body.current_role} → {body.target_role} = {allowed}")
    return CheckResponse(allowed=allowed)


@router.post("/decisions/delete-user", response_model=CheckResponse)
async def check_delete_user(body: DeleteUserCheck):
    allowed = can_delete_user(body.target, body.actor)
    logger.info(f"사용자 삭제 판정: actor={body.actor.user_id} target={body.target.id} = {allowed}")
    return CheckResponse(allowed=allowed)


@router.post("/decisions/delete-event", response_model=CheckResponse)
async def check_delete_event(body: DeleteEventCheck):
    allowed = can_delete_event(body.event, body.actor, now=body.now)
    logger.info(f"행사 삭제 판정: event={body.event.id} = {allowed}")
    return CheckResponse(allowed=allowed)


@router.post("/decisions/generate-report", response_model=CheckResponse)
async def check_generate_report(body: GenerateReportCheck):
    allowed = can_generate_report(body.report_type, body.actor)
    logger.info(f"리포트 생성 판정: {body.report_type} = {allowed}")
    return CheckResponse(allowed=allowed)


def _parse_changes(kind: Optional[ResourceKind], action: Optional[Action], raw: Optional[Dict[str, Any]]):
    """변경 데이터 dict → 모델 (실패 시 ValueError)"""
    if raw is None:
        return None
    model = CHANGE_MODELS.get((kind, action))
    if model is None:
        raise ValueError(f"{action} 액션은 변경 데이터를 받지 않습니다")
    try:
        return model(**raw)
    except ValidationError as e:
        raise ValueError(f"변경 데이터 형식 오류: {e.error_count()}건") from e


@router.post("/decisions/authorize", response_model=Decision)
async def check_authorize(body: AuthorizeRequest):
    """
    종합 판정

    변경 데이터 형식이 잘못되면 422 가 아닌 검증 단계 거부로 응답합니다.
    """
    kind = ResourceKind.from_value(body.resource.kind)
    action = Action.from_value(body.action)
    try:
        changes = _parse_changes(kind, action, body.changes)
    except ValueError as e:
        decision = Decision.deny(DecisionStage.VALIDATION, str(e))
    else:
        decision = authorize(
            body.actor,
            body.resource,
            body.action,
            new_role=body.new_role,
            changes=changes,
            now=body.now,
        )

    logger.info(
        f"종합 판정: role={body.actor.role} {body.resource.kind}:{body.action} "
        f"= {decision.allowed} ({decision.stage})"
    )
    return decision


# =============================================
# Validation
# =============================================

@router.get("/validate", response_model=List[str])
async def list_validators():
    """사용 가능한 필드 검증기 이름"""
    return sorted(VALIDATORS)


@router.post("/validate", response_model=FieldValidationResponse)
async def validate_single_field(body: FieldValidationRequest):
    valid = validate_field(body.field, body.value)
    if valid is None:
        raise HTTPException(status_code=404, detail=f"알 수 없는 검증 필드: {body.field}")
    return FieldValidationResponse(field=body.field, valid=valid)
