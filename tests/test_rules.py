"""
Business Rules Tests - 사용자/행사/리포트 비즈니스 규칙 테스트
"""
import pytest
from datetime import datetime, timedelta, timezone

from app.club.hierarchy import DELETION_LADDER, ROLE_ORDER
from app.club.models import Actor, ClubRef, EventRef, ReportType, Role, UserRef
from app.club.rules import (
    DELETE_PROTECTED_ROLES,
    REPORT_ACCESS,
    can_deactivate_user,
    can_delete_event,
    can_delete_user,
    can_edit_event,
    can_edit_user,
    can_generate_report,
    can_promote_user,
    can_transfer_membership,
    can_user_perform_action,
)

HOME_CLUB = 2
OTHER_CLUB = 5

SA, AD, CP, CH, VC, CO, TL, MB = ROLE_ORDER

# 행위자 역할별 삭제 가능한 대상 역할
EXPECTED_DELETABLE = {
    SA: {AD, CP, CH, VC, CO, TL, MB},
    AD: {CP, CH, VC, CO, TL, MB},
    CP: {CH, VC, CO, TL, MB},
    CH: {VC, CO, TL, MB},
    VC: set(),
    CO: set(),
    TL: set(),
    MB: set(),
}

EXPECTED_REPORTS = {
    SA: set(ReportType),
    AD: set(ReportType),
    CP: set(ReportType),
    CH: set(ReportType),
    VC: {ReportType.MEMBER_STATISTICS, ReportType.EVENT_OUTCOMES, ReportType.ACTIVITY_TRACKING},
    CO: {ReportType.EVENT_OUTCOMES, ReportType.ACTIVITY_TRACKING},
    TL: {ReportType.EVENT_OUTCOMES, ReportType.ACTIVITY_TRACKING},
    MB: set(),
}


class TestDeleteUser:
    """사용자 삭제 사다리"""

    @pytest.mark.parametrize("actor_role", ROLE_ORDER)
    @pytest.mark.parametrize("target_role", ROLE_ORDER)
    def test_full_table(self, make_actor, make_user, actor_role, target_role):
        actor = make_actor(actor_role, user_id=1)
        target = make_user(target_role, user_id=2)
        assert can_delete_user(target, actor) is (target_role in EXPECTED_DELETABLE[actor_role])

    @pytest.mark.parametrize("role", ROLE_ORDER)
    def test_self_delete_denied(self, make_actor, make_user, role):
        assert can_delete_user(make_user(role, user_id=7), make_actor(role, user_id=7)) is False

    def test_system_admin_cannot_delete_self_even_as_user_ref(self, make_user):
        """UserRef 를 행위자로 넘겨도 동일"""
        admin = make_user(Role.SYSTEM_ADMIN, user_id=1)
        assert can_delete_user(admin, admin) is False

    def test_chairman_vs_admin(self, make_actor, make_user):
        """의장은 관리자를 삭제할 수 없다"""
        chairman = make_actor(Role.CHAIRMAN, user_id=1)
        admin = make_user(Role.ADMIN, user_id=2)
        assert can_delete_user(admin, chairman) is False

    def test_monotonic_ladder(self):
        """사다리 아래 단계일수록 보호 대상이 늘어남"""
        for upper, lower in zip(DELETION_LADDER, DELETION_LADDER[1:]):
            assert DELETE_PROTECTED_ROLES[upper] < DELETE_PROTECTED_ROLES[lower]

    def test_missing_inputs(self, make_actor, make_user):
        actor = make_actor(Role.SYSTEM_ADMIN)
        target = make_user(Role.MEMBER)
        assert can_delete_user(None, actor) is False
        assert can_delete_user(target, None) is False
        assert can_delete_user(target, Actor(role=Role.SYSTEM_ADMIN)) is False  # 행위자 ID 없음

    def test_unknown_roles(self, make_actor, make_user):
        assert can_delete_user(make_user("wizard"), make_actor(Role.SYSTEM_ADMIN)) is False
        assert can_delete_user(make_user(Role.MEMBER), make_actor("wizard")) is False

    def test_club_does_not_matter(self, make_actor, make_user):
        chairman = make_actor(Role.CHAIRMAN, club_id=HOME_CLUB)
        assert can_delete_user(make_user(Role.MEMBER, club_id=OTHER_CLUB), chairman) is True


class TestDeleteEvent:
    """행사 삭제"""

    def test_past_event(self, make_actor, now):
        """지난 행사는 누구도 삭제 불가"""
        event = EventRef(club_id=HOME_CLUB, event_date=now - timedelta(days=1))
        for role in ROLE_ORDER:
            assert can_delete_event(event, make_actor(role), now=now) is False

    def test_event_starting_now(self, make_actor, now):
        event = EventRef(club_id=HOME_CLUB, event_date=now)
        assert can_delete_event(event, make_actor(Role.SYSTEM_ADMIN), now=now) is False

    def test_future_event_other_club(self, make_actor, now):
        """클럽 한정 역할은 다른 클럽 행사 삭제 불가"""
        event = EventRef(club_id=OTHER_CLUB, event_date=now + timedelta(days=1))
        assert can_delete_event(event, make_actor(Role.TEAM_LEADER, club_id=HOME_CLUB), now=now) is False
        assert can_delete_event(event, make_actor(Role.CHAIRMAN, club_id=HOME_CLUB), now=now) is True

    @pytest.mark.parametrize("role,expected", [
        (SA, True), (AD, True), (CP, True), (CH, True),
        (VC, True), (CO, True), (TL, True), (MB, False),
    ])
    def test_future_event_own_club(self, make_actor, now, role, expected):
        event = EventRef(club_id=HOME_CLUB, event_date=now + timedelta(hours=2))
        assert can_delete_event(event, make_actor(role), now=now) is expected

    def test_default_now(self, make_actor):
        future = EventRef(club_id=HOME_CLUB, event_date=datetime.now() + timedelta(days=1))
        past = EventRef(club_id=HOME_CLUB, event_date=datetime.now() - timedelta(days=1))
        assert can_delete_event(future, make_actor(Role.ADMIN)) is True
        assert can_delete_event(past, make_actor(Role.ADMIN)) is False

    def test_timezone_aware(self, make_actor):
        event = EventRef(club_id=HOME_CLUB, event_date=datetime.now(timezone.utc) + timedelta(hours=1))
        assert can_delete_event(event, make_actor(Role.ADMIN)) is True

    def test_mixed_timezones(self, make_actor, now):
        event = EventRef(club_id=HOME_CLUB, event_date=datetime(2030, 1, 1, tzinfo=timezone.utc))
        assert can_delete_event(event, make_actor(Role.ADMIN), now=now) is False

    def test_missing_inputs(self, make_actor, now):
        event = EventRef(club_id=HOME_CLUB, event_date=now + timedelta(days=1))
        assert can_delete_event(None, make_actor(Role.ADMIN), now=now) is False
        assert can_delete_event(event, None, now=now) is False
        assert can_delete_event(event, make_actor("wizard"), now=now) is False


class TestEditEvent:
    """행사 수정"""

    def test_future_own_club(self, make_actor, now):
        event = EventRef(club_id=HOME_CLUB, event_date=now + timedelta(days=1))
        assert can_edit_event(event, make_actor(Role.CLUB_OFFICER), now=now) is True
        assert can_edit_event(event, make_actor(Role.CLUB_OFFICER, club_id=OTHER_CLUB), now=now) is False
        assert can_edit_event(event, make_actor(Role.MEMBER), now=now) is False

    def test_past_event(self, make_actor, now):
        event = EventRef(club_id=HOME_CLUB, event_date=now - timedelta(minutes=1))
        assert can_edit_event(event, make_actor(Role.SYSTEM_ADMIN), now=now) is False


class TestGenerateReport:
    """리포트 생성 권한"""

    @pytest.mark.parametrize("role", ROLE_ORDER)
    @pytest.mark.parametrize("report_type", list(ReportType))
    def test_full_table(self, make_actor, role, report_type):
        assert can_generate_report(report_type, make_actor(role)) is (report_type in EXPECTED_REPORTS[role])

    def test_table_matches(self):
        assert {role: set(types) for role, types in REPORT_ACCESS.items()} == EXPECTED_REPORTS

    def test_string_types(self, make_actor):
        assert can_generate_report("SemesterSummary", make_actor(Role.CHAIRMAN)) is True
        assert can_generate_report("semester_summary", make_actor(Role.VICE_CHAIRMAN)) is False

    def test_unknown_inputs(self, make_actor):
        assert can_generate_report("quarterly", make_actor(Role.SYSTEM_ADMIN)) is False
        assert can_generate_report(ReportType.EVENT_OUTCOMES, make_actor("wizard")) is False
        assert can_generate_report(ReportType.EVENT_OUTCOMES, None) is False
        assert can_generate_report(None, make_actor(Role.ADMIN)) is False


class TestEditUser:
    """사용자 정보 수정"""

    def test_self_edit(self, make_actor, make_user):
        member = make_actor(Role.MEMBER, user_id=10)
        assert can_edit_user(make_user(Role.MEMBER, user_id=10), member) is True

    def test_inactive_self_edit(self, make_actor, make_user):
        member = make_actor(Role.MEMBER, user_id=10, is_active=False)
        assert can_edit_user(make_user(Role.MEMBER, user_id=10), member) is False

    def test_other_user(self, make_actor, make_user):
        officer = make_actor(Role.CLUB_OFFICER, user_id=1)
        assert can_edit_user(make_user(Role.MEMBER, user_id=2), officer) is True
        assert can_edit_user(make_user(Role.MEMBER, user_id=2, club_id=OTHER_CLUB), officer) is False
        assert can_edit_user(make_user(Role.VICE_CHAIRMAN, user_id=2), officer) is False
        assert can_edit_user(make_user(Role.MEMBER, user_id=2), make_actor(Role.MEMBER, user_id=1)) is False


class TestPromoteUser:
    """역할 변경"""

    def test_active_both(self, make_actor, make_user):
        vc = make_actor(Role.VICE_CHAIRMAN)
        assert can_promote_user(vc, make_user(Role.MEMBER), Role.CLUB_OFFICER) is True
        assert can_promote_user(vc, make_user(Role.MEMBER), Role.CHAIRMAN) is False

    def test_inactive(self, make_actor, make_user):
        vc = make_actor(Role.VICE_CHAIRMAN)
        assert can_promote_user(vc, make_user(Role.MEMBER, is_active=False), Role.TEAM_LEADER) is False
        inactive_vc = make_actor(Role.VICE_CHAIRMAN, is_active=False)
        assert can_promote_user(inactive_vc, make_user(Role.MEMBER), Role.TEAM_LEADER) is False

    def test_unknown_new_role(self, make_actor, make_user):
        assert can_promote_user(make_actor(Role.SYSTEM_ADMIN), make_user(Role.MEMBER), "wizard") is False
        assert can_promote_user(None, make_user(Role.MEMBER), Role.MEMBER) is False


class TestDeactivateUser:
    """비활성화"""

    def test_active_target(self, make_actor, make_user):
        assert can_deactivate_user(make_actor(Role.ADMIN, user_id=1), make_user(Role.MEMBER, user_id=2)) is True

    def test_already_inactive(self, make_actor, make_user):
        target = make_user(Role.MEMBER, user_id=2, is_active=False)
        assert can_deactivate_user(make_actor(Role.ADMIN, user_id=1), target) is False

    def test_follows_delete_ladder(self, make_actor, make_user):
        assert can_deactivate_user(make_actor(Role.CHAIRMAN, user_id=1), make_user(Role.ADMIN, user_id=2)) is False
        assert can_deactivate_user(make_actor(Role.ADMIN, user_id=3), make_user(Role.ADMIN, user_id=3)) is False


class TestTransferMembership:
    """소속 이전"""

    def test_to_other_active_club(self, make_user):
        assert can_transfer_membership(make_user(Role.MEMBER, club_id=HOME_CLUB), ClubRef(id=OTHER_CLUB)) is True

    def test_same_club(self, make_user):
        assert can_transfer_membership(make_user(Role.MEMBER, club_id=HOME_CLUB), ClubRef(id=HOME_CLUB)) is False

    def test_inactive(self, make_user):
        assert can_transfer_membership(make_user(Role.MEMBER), ClubRef(id=OTHER_CLUB, is_active=False)) is False
        assert can_transfer_membership(make_user(Role.MEMBER, is_active=False), ClubRef(id=OTHER_CLUB)) is False
        assert can_transfer_membership(None, ClubRef(id=OTHER_CLUB)) is False


class TestUserPerformAction:
    """활성 사용자 + 액션"""

    def test_active(self, make_actor):
        assert can_user_perform_action(make_actor(Role.MEMBER), "register") is True

    def test_blank_action(self, make_actor):
        assert can_user_perform_action(make_actor(Role.MEMBER), "  ") is False
        assert can_user_perform_action(make_actor(Role.MEMBER), None) is False

    def test_inactive(self, make_actor):
        assert can_user_perform_action(make_actor(Role.ADMIN, is_active=False), "edit") is False
        assert can_user_perform_action(None, "edit") is False


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
