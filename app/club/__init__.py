"""
Club Governance Module

클럽 관리 시스템 권한/비즈니스 규칙 판정 엔진
- 역할 서열 (8단계, 부분 순서)
- 필드 구조 검증
- 역할 기반 권한 정책 (클럽 범위 포함)
- 리소스 상태 기반 비즈니스 규칙
"""

from .router import router as club_router
from .models import (
    Role,
    ReportType,
    Action,
    ResourceKind,
    Actor,
    UserRef,
    ClubRef,
    EventRef,
    ReportRef,
    Decision,
)
from .hierarchy import can_assign_role
from .policy import is_permitted
from .rules import (
    can_delete_user,
    can_delete_event,
    can_generate_report,
    can_promote_user,
    can_deactivate_user,
    can_transfer_membership,
)
from .engine import authorize, is_allowed

__all__ = [
    "club_router",
    "Role",
    "ReportType",
    "Action",
    "ResourceKind",
    "Actor",
    "UserRef",
    "ClubRef",
    "EventRef",
    "ReportRef",
    "Decision",
    "can_assign_role",
    "is_permitted",
    "can_delete_user",
    "can_delete_event",
    "can_generate_report",
    "can_promote_user",
    "can_deactivate_user",
    "can_transfer_membership",
    "authorize",
    "is_allowed",
]
