"""
Validation Gate - 필드 단위 구조 검증

정책 판정 이전에 신규/변경 데이터의 형식을 확인한다.
모든 함수는 bool 만 반환하며 예외를 밖으로 던지지 않는다.
"""
import re
from datetime import date, datetime, timedelta
from typing import Any, Callable, Dict, Mapping, Optional, Union

from loguru import logger
from pydantic import EmailStr, TypeAdapter, ValidationError

from .config import get_club_settings

DateLike = Union[date, datetime]

_EMAIL_ADAPTER = TypeAdapter(EmailStr)

_FULL_NAME_PATTERN = re.compile(r"[a-zA-Z\s\-']+")
_SEMESTER_PATTERN = re.compile(r"(Spring|Summer|Fall) [0-9]{4}")
_UPPER = re.compile(r"[A-Z]")
_LOWER = re.compile(r"[a-z]")
_DIGIT = re.compile(r"\d")
_SPECIAL = re.compile(r"[^\w\s]")


def _is_blank(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


def _length_between(value: Any, minimum: int, maximum: int) -> bool:
    if _is_blank(value):
        return False
    return minimum <= len(value) <= maximum


def _now_like(value: DateLike) -> DateLike:
    """비교 대상과 같은 종류(타임존 포함)의 현재 시각"""
    if isinstance(value, datetime):
        return datetime.now(value.tzinfo)
    return date.today()


def _is_datetime(value: Any) -> bool:
    return isinstance(value, datetime)


# =============================================
# 사용자
# =============================================

def is_valid_email(email: Any) -> bool:
    """RFC 메일박스 형식의 이메일인지"""
    if _is_blank(email):
        return False
    try:
        _EMAIL_ADAPTER.validate_python(email)
        return True
    except ValidationError:
        return False
    except Exception as e:
        logger.warning(f"이메일 검증 중 예외 발생: {e}")
        return False


def is_valid_student_id(student_id: Any) -> bool:
    """학번: 숫자 8~10자리"""
    if _is_blank(student_id):
        return False
    settings = get_club_settings()
    pattern = rf"[0-9]{{{settings.STUDENT_ID_MIN_DIGITS},{settings.STUDENT_ID_MAX_DIGITS}}}"
    return re.fullmatch(pattern, student_id) is not None


def is_valid_password(password: Any) -> bool:
    """
    비밀번호 강도 확인

    8자 이상 + 대문자, 소문자, 숫자, 특수문자 각 1개 이상
    """
    if _is_blank(password):
        return False
    if len(password) < get_club_settings().PASSWORD_MIN_LENGTH:
        return False
    return all(
        pattern.search(password)
        for pattern in (_UPPER, _LOWER, _DIGIT, _SPECIAL)
    )


def is_valid_full_name(full_name: Any) -> bool:
    """이름: 2~100자, 영문/공백/하이픈/아포스트로피만"""
    settings = get_club_settings()
    if not _length_between(full_name, settings.FULL_NAME_MIN_LENGTH, settings.FULL_NAME_MAX_LENGTH):
        return False
    return _FULL_NAME_PATTERN.fullmatch(full_name) is not None


# =============================================
# 클럽
# =============================================

def is_valid_club_name(name: Any) -> bool:
    settings = get_club_settings()
    return _length_between(name, settings.CLUB_NAME_MIN_LENGTH, settings.CLUB_NAME_MAX_LENGTH)


def is_valid_description(description: Any) -> bool:
    settings = get_club_settings()
    return _length_between(description, settings.DESCRIPTION_MIN_LENGTH, settings.DESCRIPTION_MAX_LENGTH)


def is_valid_established_date(established: Any) -> bool:
    """설립일: 1900-01-01 이후, 미래 불가"""
    if not isinstance(established, date):
        return False
    earliest_year = get_club_settings().EARLIEST_ESTABLISHED_YEAR
    try:
        if _is_datetime(established):
            earliest = datetime(earliest_year, 1, 1, tzinfo=established.tzinfo)
        else:
            earliest = date(earliest_year, 1, 1)
        return earliest <= established <= _now_like(established)
    except (TypeError, ValueError) as e:
        logger.warning(f"설립일 비교 실패: {e}")
        return False


# =============================================
# 행사
# =============================================

def is_valid_event_name(name: Any) -> bool:
    settings = get_club_settings()
    return _length_between(name, settings.EVENT_NAME_MIN_LENGTH, settings.EVENT_NAME_MAX_LENGTH)


def is_valid_location(location: Any) -> bool:
    settings = get_club_settings()
    return _length_between(location, settings.LOCATION_MIN_LENGTH, settings.LOCATION_MAX_LENGTH)


def is_valid_event_date(event_date: Any, now: Optional[datetime] = None) -> bool:
    """신규 행사는 최소 1시간 이후 시작"""
    if not _is_datetime(event_date):
        return False
    now = now or _now_like(event_date)
    lead = timedelta(hours=get_club_settings().EVENT_MIN_LEAD_HOURS)
    try:
        return event_date >= now + lead
    except TypeError as e:
        logger.warning(f"행사 일시 비교 실패: {e}")
        return False


def is_event_upcoming(event_date: Any, now: Optional[datetime] = None) -> bool:
    if not _is_datetime(event_date):
        return False
    now = now or _now_like(event_date)
    try:
        return event_date > now
    except TypeError as e:
        logger.warning(f"행사 일시 비교 실패: {e}")
        return False


def can_register_for_event(event_date: Any, registration_date: Any) -> bool:
    """등록은 행사 시작 1시간 전까지"""
    if not (_is_datetime(event_date) and _is_datetime(registration_date)):
        return False
    cutoff = timedelta(hours=get_club_settings().REGISTRATION_CUTOFF_HOURS)
    try:
        return registration_date <= event_date - cutoff
    except TypeError as e:
        logger.warning(f"등록 일시 비교 실패: {e}")
        return False


def can_mark_attendance(event_date: Any, attendance_date: Any) -> bool:
    """출석 체크는 행사 1시간 전부터 24시간 후까지"""
    if not (_is_datetime(event_date) and _is_datetime(attendance_date)):
        return False
    settings = get_club_settings()
    opens = event_date - timedelta(hours=settings.ATTENDANCE_OPENS_HOURS_BEFORE)
    closes = event_date + timedelta(hours=settings.ATTENDANCE_CLOSES_HOURS_AFTER)
    try:
        return opens <= attendance_date <= closes
    except TypeError as e:
        logger.warning(f"출석 일시 비교 실패: {e}")
        return False


# =============================================
# 리포트
# =============================================

def is_valid_report_title(title: Any) -> bool:
    settings = get_club_settings()
    return _length_between(title, settings.REPORT_TITLE_MIN_LENGTH, settings.REPORT_TITLE_MAX_LENGTH)


def is_valid_semester(semester: Any) -> bool:
    """학기 형식: "Spring 2024", "Summer 2024", "Fall 2024" """
    if _is_blank(semester):
        return False
    return _SEMESTER_PATTERN.fullmatch(semester) is not None


def is_valid_report_content(content: Any) -> bool:
    if _is_blank(content):
        return False
    return len(content) <= get_club_settings().REPORT_CONTENT_MAX_LENGTH


# =============================================
# 공통
# =============================================

def is_valid_id(value: Any) -> bool:
    """양의 정수 ID"""
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def is_valid_pagination_parameters(page: Any, page_size: Any) -> bool:
    if not (is_valid_id(page) and is_valid_id(page_size)):
        return False
    return page_size <= get_club_settings().MAX_PAGE_SIZE


def is_valid_date_range(from_date: Optional[DateLike], to_date: Optional[DateLike]) -> bool:
    """한쪽이라도 비어 있으면 유효, 둘 다 있으면 from <= to"""
    if from_date is None or to_date is None:
        return True
    try:
        return from_date <= to_date
    except TypeError as e:
        logger.warning(f"기간 비교 실패: {e}")
        return False


# =============================================
# 복합 검증 (요청 페이로드)
# =============================================

def _field(data: Any, name: str) -> Any:
    if isinstance(data, Mapping):
        return data.get(name)
    return getattr(data, name, None)


def is_valid_user_creation(data: Any) -> bool:
    """사용자 생성 요청 (UserCreate 또는 dict)"""
    if data is None:
        return False
    return (
        is_valid_email(_field(data, "email"))
        and is_valid_full_name(_field(data, "full_name"))
        and is_valid_student_id(_field(data, "student_id"))
        and is_valid_password(_field(data, "password"))
    )


def is_valid_user_update(data: Any) -> bool:
    """사용자 수정 요청 - 지정된 필드만 검증"""
    if data is None:
        return False
    checks = {
        "email": is_valid_email,
        "full_name": is_valid_full_name,
        "student_id": is_valid_student_id,
    }
    for name, check in checks.items():
        value = _field(data, name)
        if value is not None and not check(value):
            return False
    return True


def is_valid_club_creation(data: Any) -> bool:
    if data is None:
        return False
    established = _field(data, "established_date")
    return (
        is_valid_club_name(_field(data, "name"))
        and is_valid_description(_field(data, "description"))
        and (established is None or is_valid_established_date(established))
    )


def is_valid_event_creation(data: Any, now: Optional[datetime] = None) -> bool:
    """행사 생성 요청 (EventCreate 또는 dict)"""
    if data is None:
        return False
    return (
        is_valid_event_name(_field(data, "name"))
        and is_valid_event_date(_field(data, "event_date"), now=now)
        and is_valid_location(_field(data, "location"))
    )


def is_valid_report_request(data: Any) -> bool:
    if data is None:
        return False
    semester = _field(data, "semester")
    return (
        is_valid_report_title(_field(data, "title"))
        and (semester is None or is_valid_semester(semester))
        and is_valid_date_range(_field(data, "from_date"), _field(data, "to_date"))
    )


# 이름으로 단일 필드 검증기 조회 (HTTP/CLI 용)
VALIDATORS: Dict[str, Callable[[Any], bool]] = {
    "email": is_valid_email,
    "student_id": is_valid_student_id,
    "password": is_valid_password,
    "full_name": is_valid_full_name,
    "club_name": is_valid_club_name,
    "description": is_valid_description,
    "event_name": is_valid_event_name,
    "location": is_valid_location,
    "report_title": is_valid_report_title,
    "semester": is_valid_semester,
    "report_content": is_valid_report_content,
}


def validate_field(field: str, value: Any) -> Optional[bool]:
    """등록된 검증기로 값 검증 (알 수 없는 필드는 None)"""
    validator = VALIDATORS.get(field)
    if validator is None:
        return None
    return validator(value)
