"""
Club Config - 검증 한도 및 시간 임계값 설정

환경변수(CLUB_ 접두사) 또는 .env 로 재정의 가능.
값이 바뀌어도 판정 함수의 계약은 그대로 유지된다.
"""
from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings


class ClubSettings(BaseSettings):
    """클럽 거버넌스 엔진 설정"""

    # 사용자
    FULL_NAME_MIN_LENGTH: int = 2
    FULL_NAME_MAX_LENGTH: int = 100
    PASSWORD_MIN_LENGTH: int = 8
    STUDENT_ID_MIN_DIGITS: int = 8
    STUDENT_ID_MAX_DIGITS: int = 10

    # 클럽
    CLUB_NAME_MIN_LENGTH: int = 3
    CLUB_NAME_MAX_LENGTH: int = 100
    DESCRIPTION_MIN_LENGTH: int = 10
    DESCRIPTION_MAX_LENGTH: int = 1000
    EARLIEST_ESTABLISHED_YEAR: int = 1900

    # 행사
    EVENT_NAME_MIN_LENGTH: int = 3
    EVENT_NAME_MAX_LENGTH: int = 200
    LOCATION_MIN_LENGTH: int = 3
    LOCATION_MAX_LENGTH: int = 200
    EVENT_MIN_LEAD_HOURS: float = Field(default=1.0, description="신규 행사 최소 준비 시간")
    REGISTRATION_CUTOFF_HOURS: float = Field(default=1.0, description="행사 시작 전 등록 마감")
    ATTENDANCE_OPENS_HOURS_BEFORE: float = 1.0
    ATTENDANCE_CLOSES_HOURS_AFTER: float = 24.0

    # 리포트
    REPORT_TITLE_MIN_LENGTH: int = 5
    REPORT_TITLE_MAX_LENGTH: int = 200
    REPORT_CONTENT_MAX_LENGTH: int = 50000  # 50KB

    # 페이지네이션
    MAX_PAGE_SIZE: int = 100

    class Config:
        env_prefix = "CLUB_"
        env_file = ".env"
        extra = "ignore"


@lru_cache()
def get_club_settings() -> ClubSettings:
    return ClubSettings()
