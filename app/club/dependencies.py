"""
Club Governance Dependencies

요청에서 행위자(Actor) 추출 및 권한 체크 의존성.
행위자 신원은 상위 게이트웨이가 헤더로 전달한다 (토큰 발급/검증은 하지 않음).
"""

from typing import List, Optional
from fastapi import Depends, HTTPException, Request, status
from loguru import logger

from .models import Action, Actor, ResourceKind, Role
from .policy import is_permitted

ACTOR_ID_HEADER = "X-Actor-Id"
ACTOR_ROLE_HEADER = "X-Actor-Role"
ACTOR_CLUB_HEADER = "X-Actor-Club-Id"


def _optional_int(raw: Optional[str], header: str) -> Optional[int]:
    if raw is None or not str(raw).strip():
        return None
    try:
        return int(str(raw).strip())
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{header} 헤더는 정수여야 합니다"
        )


async def get_current_actor(request: Request) -> Actor:
    """
    현재 행위자 정보

    - X-Actor-Role 없음 → 401
    - 알 수 없는 역할 → 403
    """
    raw_role = request.headers.get(ACTOR_ROLE_HEADER)
    if not raw_role:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="행위자 정보가 필요합니다"
        )

    role = Role.from_value(raw_role)
    if role is None:
        logger.info(f"알 수 없는 역할 헤더: {raw_role!r}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="알 수 없는 역할입니다"
        )

    return Actor(
        user_id=_optional_int(request.headers.get(ACTOR_ID_HEADER), ACTOR_ID_HEADER),
        role=role,
        club_id=_optional_int(request.headers.get(ACTOR_CLUB_HEADER), ACTOR_CLUB_HEADER),
    )


def require_permission(kind: ResourceKind, action: Action):
    """
    (리소스 종류, 액션) 권한 필요

    클럽 한정 역할은 경로 파라미터 club_id 가 자기 클럽일 때만 통과
    """
    def _check(request: Request, actor: Actor = Depends(get_current_actor)) -> Actor:
        club_id = _optional_int(request.path_params.get("club_id"), "club_id")
        if not is_permitted(actor.role, actor.club_id, kind, action, target_club_id=club_id):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"{kind.value}:{action.value} 권한이 필요합니다"
            )
        return actor
    return _check


def require_roles(allowed_roles: List[Role]):
    """특정 역할 필요"""
    def _check(actor: Actor = Depends(get_current_actor)) -> Actor:
        if actor.role not in allowed_roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"허용된 역할: {', '.join([r.value for r in allowed_roles])}"
            )
        return actor
    return _check
