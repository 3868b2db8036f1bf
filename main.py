"""
클럽 관리 권한 판정 CLI

사용 예:
    python main.py --mode roles
    python main.py --mode assign vice_chairman club_officer
    python main.py --mode report team_leader event_outcomes
    python main.py --mode validate semester "Fall 2024"
"""
import sys
from typing import List, Optional
from loguru import logger

from app.club.hierarchy import ROLE_ORDER, assignable_roles, can_assign_role, ladder_tier, is_club_scoped
from app.club.models import Actor
from app.club.rules import can_generate_report
from app.club.validation import VALIDATORS, validate_field


# 로깅 설정
logger.remove()
logger.add(
    sys.stderr,
    format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
    level="WARNING"
)


def print_roles() -> int:
    """역할 서열 출력"""
    print("\n=== 역할 서열 ===")
    for role in ROLE_ORDER:
        tier = ladder_tier(role)
        scope = "클럽 한정" if is_club_scoped(role) else "전체"
        assignable = ", ".join(r.value for r in assignable_roles(role)) or "-"
        tier_label = f"삭제 사다리 {tier}" if tier is not None else "삭제 권한 없음"
        print(f"  {role.value:<16} [{scope}] ({tier_label}) → {assignable}")
    return 0


def check_assign(current_role: str, target_role: str) -> int:
    allowed = can_assign_role(current_role, target_role)
    print(f"{current_role} → {target_role}: {'허용' if allowed else '거부'}")
    return 0 if allowed else 1


def check_report(role: str, report_type: str) -> int:
    actor = Actor(role=role)
    allowed = can_generate_report(report_type, actor)
    print(f"{role} / {report_type}: {'허용' if allowed else '거부'}")
    return 0 if allowed else 1


def check_field(field: str, value: str) -> int:
    valid = validate_field(field, value)
    if valid is None:
        print(f"알 수 없는 필드: {field} (사용 가능: {', '.join(sorted(VALIDATORS))})")
        return 2
    print(f"{field}={value!r}: {'유효' if valid else '무효'}")
    return 0 if valid else 1


def main(argv: Optional[List[str]] = None) -> int:
    """메인 함수"""
    import argparse

    parser = argparse.ArgumentParser(description="클럽 관리 권한 판정")
    parser.add_argument(
        "--mode",
        choices=["roles", "assign", "report", "validate"],
        default="roles",
        help="실행 모드"
    )
    parser.add_argument(
        "args",
        nargs="*",
        help="모드별 인자 (assign: 현재역할 대상역할, report: 역할 유형, validate: 필드 값)"
    )

    args = parser.parse_args(argv)

    if args.mode == "roles":
        return print_roles()

    if len(args.args) != 2:
        parser.error(f"{args.mode} 모드는 인자 2개가 필요합니다")

    first, second = args.args
    if args.mode == "assign":
        return check_assign(first, second)
    elif args.mode == "report":
        return check_report(first, second)
    else:
        return check_field(first, second)


if __name__ == "__main__":
    sys.exit(main())
