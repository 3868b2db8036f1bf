"""
Club Governance Models

역할/리포트/액션 Enum 및 판정 입력용 Pydantic 값 객체 정의
"""

from datetime import date, datetime
from typing import Annotated, Any, Dict, List, Optional, Union, Literal
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================
# Enums
# =============================================

class _LookupEnum(str, Enum):
    """값/이름 어느 쪽으로도 조회 가능한 Enum"""

    @classmethod
    def from_value(cls, value: Any):
        """
        문자열(값 또는 멤버 이름)에서 Enum 추출

        "system_admin", "SYSTEM_ADMIN", "SystemAdmin" 모두 허용.
        알 수 없는 값은 None (fail-closed)
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None

        key = value.strip().replace("-", "_").replace(" ", "_")
        if not key:
            return None

        for member in cls:
            if key.lower() == member.value or key.upper() == member.name:
                return member

        # CamelCase (SystemAdmin → system_admin)
        compact = key.replace("_", "").lower()
        for member in cls:
            if compact == member.value.replace("_", ""):
                return member
        return None


class Role(_LookupEnum):
    """클럽 관리 시스템 역할 (권한 높은 순)"""
    SYSTEM_ADMIN = "system_admin"       # 시스템 관리자
    ADMIN = "admin"                     # 관리자
    CLUB_PRESIDENT = "club_president"   # 클럽 회장
    CHAIRMAN = "chairman"               # 의장
    VICE_CHAIRMAN = "vice_chairman"     # 부의장 (클럽 한정)
    CLUB_OFFICER = "club_officer"       # 임원 (클럽 한정)
    TEAM_LEADER = "team_leader"         # 팀장 (클럽 한정)
    MEMBER = "member"                   # 일반 회원


class ReportType(_LookupEnum):
    """리포트 유형"""
    MEMBER_STATISTICS = "member_statistics"   # 회원 통계
    EVENT_OUTCOMES = "event_outcomes"         # 행사 결과
    ACTIVITY_TRACKING = "activity_tracking"   # 활동 추적
    SEMESTER_SUMMARY = "semester_summary"     # 학기 요약


class Action(_LookupEnum):
    """요청 액션"""
    CREATE = "create"
    EDIT = "edit"
    DELETE = "delete"
    ASSIGN_ROLE = "assign_role"
    GENERATE = "generate"
    EXPORT = "export"
    REGISTER = "register"
    MARK_ATTENDANCE = "mark_attendance"
    VIEW_DETAILS = "view_details"


class ResourceKind(_LookupEnum):
    """대상 리소스 종류"""
    USER = "user"
    CLUB = "club"
    EVENT = "event"
    REPORT = "report"


# =============================================
# Value Objects (판정 입력 - 불변)
# =============================================

class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class Actor(_Frozen):
    """액션을 수행하는 사용자"""
    user_id: Optional[int] = None
    role: Optional[Role]
    club_id: Optional[int] = None
    is_active: bool = True

    @field_validator("role", mode="before")
    @classmethod
    def coerce_role(cls, v):
        # 알 수 없는 역할은 None 으로 남겨 판정 단계에서 거부
        return Role.from_value(v)


class UserRef(_Frozen):
    """대상 사용자"""
    kind: Literal["user"] = "user"
    id: int
    role: Optional[Role]
    club_id: Optional[int] = None
    is_active: bool = True

    @field_validator("role", mode="before")
    @classmethod
    def coerce_role(cls, v):
        # 알 수 없는 역할은 None 으로 남겨 판정 단계에서 거부
        return Role.from_value(v)

    def as_actor(self) -> Actor:
        """이 사용자를 행위자로 변환"""
        return Actor(
            user_id=self.id,
            role=self.role,
            club_id=self.club_id,
            is_active=self.is_active
        )


class ClubRef(_Frozen):
    """대상 클럽"""
    kind: Literal["club"] = "club"
    id: int
    is_active: bool = True

    @property
    def club_id(self) -> int:
        return self.id


class EventRef(_Frozen):
    """대상 행사"""
    kind: Literal["event"] = "event"
    id: Optional[int] = None
    club_id: Optional[int] = None
    event_date: datetime


class ReportRef(_Frozen):
    """대상 리포트"""
    kind: Literal["report"] = "report"
    id: Optional[int] = None
    club_id: Optional[int] = None  # None = 시스템 전체 리포트
    report_type: Optional[ReportType]

    @field_validator("report_type", mode="before")
    @classmethod
    def coerce_report_type(cls, v):
        return ReportType.from_value(v)


Resource = Annotated[
    Union[UserRef, ClubRef, EventRef, ReportRef],
    Field(discriminator="kind")
]


# =============================================
# Change Payloads (ValidationGate 입력)
# =============================================

class UserCreate(BaseModel):
    """사용자 생성 요청"""
    full_name: str
    email: str
    student_id: str
    password: str
    role: Role = Role.MEMBER
    club_id: Optional[int] = None


class UserUpdate(BaseModel):
    """사용자 수정 요청 (지정된 필드만 검증)"""
    full_name: Optional[str] = None
    email: Optional[str] = None
    student_id: Optional[str] = None


class ClubCreate(BaseModel):
    """클럽 생성/수정 요청"""
    name: str
    description: str
    established_date: Optional[date] = None


class EventCreate(BaseModel):
    """행사 생성 요청"""
    name: str
    event_date: datetime
    location: str
    club_id: Optional[int] = None


class ReportRequest(BaseModel):
    """리포트 생성 요청"""
    title: str
    report_type: ReportType
    semester: Optional[str] = None
    from_date: Optional[datetime] = None
    to_date: Optional[datetime] = None


# =============================================
# Decision
# =============================================

class DecisionStage(str, Enum):
    """거부가 발생한 판정 단계"""
    INPUT = "input"               # 입력 누락/형식 오류
    VALIDATION = "validation"     # ValidationGate
    POLICY = "policy"             # PermissionPolicy
    BUSINESS_RULE = "business_rule"  # BusinessRuleEvaluator


class Decision(_Frozen):
    """최종 판정 결과"""
    allowed: bool
    stage: Optional[DecisionStage] = None
    reason: Optional[str] = None

    def __bool__(self) -> bool:
        return self.allowed

    @classmethod
    def allow(cls) -> "Decision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, stage: DecisionStage, reason: str) -> "Decision":
        return cls(allowed=False, stage=stage, reason=reason)


# =============================================
# Request / Response Models (HTTP)
# =============================================

class AssignRoleCheck(BaseModel):
    """역할 부여 가능 여부 요청 (알 수 없는 역할은 거부로 응답)"""
    current_role: str
    target_role: str


class DeleteUserCheck(BaseModel):
    actor: Actor
    target: UserRef


class DeleteEventCheck(BaseModel):
    actor: Actor
    event: EventRef
    now: Optional[datetime] = None


class GenerateReportCheck(BaseModel):
    actor: Actor
    report_type: str


class AuthorizeRequest(BaseModel):
    """종합 판정 요청"""
    actor: Actor
    resource: Resource
    action: str
    new_role: Optional[str] = None
    changes: Optional[Dict[str, Any]] = Field(None, description="신규/변경 데이터")
    now: Optional[datetime] = None


class CheckResponse(BaseModel):
    allowed: bool


class FieldValidationRequest(BaseModel):
    field: str
    value: Any = None


class FieldValidationResponse(BaseModel):
    field: str
    valid: bool


class RoleInfo(BaseModel):
    """역할 서열 정보"""
    role: Role
    ladder_tier: Optional[int] = None  # 삭제 사다리 단계 (0 = 최상위)
    club_scoped: bool
    assignable_roles: List[Role] = []


class PermissionEntry(BaseModel):
    kind: ResourceKind
    action: Action
    scope: str


class ActorPermissions(BaseModel):
    """행위자 권한 요약"""
    role: Role
    club_id: Optional[int] = None
    permissions: List[PermissionEntry] = []
    report_types: List[ReportType] = []
