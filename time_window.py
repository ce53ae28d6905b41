"""
시간 구간(TimeWindow) 유틸리티

모든 비교는 UTC 기준으로 합니다. 타임존은 화면에 보여줄 때만 씁니다.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo


class InvalidTimeWindowError(ValueError):
    """종료 시각이 시작 시각보다 늦지 않은 구간"""


def to_utc(value: datetime, tz: str = "UTC") -> datetime:
    """
    datetime을 UTC로 변환합니다.

    Args:
        value: naive면 tz 기준 벽시계 시간으로, aware면 그 시각 그대로 해석
        tz: IANA 타임존 이름 (예: "Asia/Seoul")

    Raises:
        zoneinfo.ZoneInfoNotFoundError: 알 수 없는 타임존
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=ZoneInfo(tz))
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class TimeWindow:
    """[start, end] 구간. 항상 UTC로 저장됩니다."""
    start: datetime
    end: datetime

    def __post_init__(self):
        # naive 값은 UTC로 간주
        object.__setattr__(self, "start", to_utc(self.start))
        object.__setattr__(self, "end", to_utc(self.end))
        if self.end <= self.start:
            raise InvalidTimeWindowError(
                f"end must be after start: {self.start.isoformat()} ~ {self.end.isoformat()}"
            )

    def contains(self, other: "TimeWindow") -> bool:
        """other가 이 구간 안에 완전히 들어가는지 (경계 포함)"""
        return self.start <= other.start and self.end >= other.end

    def overlaps(self, other: "TimeWindow") -> bool:
        """조금이라도 겹치는지 (끝점만 맞닿는 경우는 제외)"""
        return self.start < other.end and self.end > other.start

    def duration(self) -> timedelta:
        return self.end - self.start

    def in_timezone(self, tz: str) -> "TimeSlot":
        """표시용 TimeSlot으로 변환합니다."""
        zone = ZoneInfo(tz)
        return TimeSlot(
            start=self.start.astimezone(zone),
            end=self.end.astimezone(zone),
            timezone=tz,
        )


@dataclass(frozen=True)
class TimeSlot:
    """특정 타임존으로 표현한 시간대 (표시용)"""
    start: datetime
    end: datetime
    timezone: str

    def to_window(self) -> TimeWindow:
        return TimeWindow(self.start, self.end)

    def as_dict(self) -> dict:
        return {
            "start_time": self.start.isoformat(),
            "end_time": self.end.isoformat(),
            "timezone": self.timezone,
        }
