"""
Pytest configuration and fixtures for Club Governance tests
"""

import pytest
import sys
from datetime import datetime
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.club.config import get_club_settings
from app.club.models import Actor, Role, UserRef


HOME_CLUB = 2
OTHER_CLUB = 5


@pytest.fixture(scope="session")
def now():
    """고정 기준 시각"""
    return datetime(2025, 3, 10, 12, 0, 0)


@pytest.fixture(scope="function")
def make_actor():
    """역할/클럽별 행위자 생성"""
    def _make(role, club_id=HOME_CLUB, user_id=1, is_active=True):
        return Actor(user_id=user_id, role=role, club_id=club_id, is_active=is_active)
    return _make


@pytest.fixture(scope="function")
def make_user():
    """대상 사용자 생성"""
    def _make(role, user_id=100, club_id=HOME_CLUB, is_active=True):
        return UserRef(id=user_id, role=role, club_id=club_id, is_active=is_active)
    return _make


@pytest.fixture(scope="function")
def member(make_actor):
    return make_actor(Role.MEMBER)


@pytest.fixture(scope="function")
def vice_chairman(make_actor):
    return make_actor(Role.VICE_CHAIRMAN)


@pytest.fixture(autouse=True)
def reset_settings_cache():
    """환경변수 재정의 테스트가 다른 테스트에 영향을 주지 않도록"""
    get_club_settings.cache_clear()
    yield
    get_club_settings.cache_clear()
