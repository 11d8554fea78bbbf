"""
시간 관련 유틸리티 함수
"""
from datetime import datetime, timezone
from typing import Callable

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """현재 UTC 시각 (timezone-aware)"""
    return datetime.now(timezone.utc)


def to_iso(dt: datetime) -> str:
    """
    datetime을 ISO-8601 문자열로 변환합니다.

    UTC 시각은 밀리초 정밀도와 `Z` 접미사로 표기합니다 (JavaScript
    `Date.toISOString()`과 같은 형식). naive datetime은 UTC로 간주합니다.

    Examples:
        >>> to_iso(datetime(2024, 1, 1, tzinfo=timezone.utc))
        '2024-01-01T00:00:00.000Z'
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt = dt.astimezone(timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"
