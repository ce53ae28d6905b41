from dataclasses import dataclass
from datetime import datetime
from typing import TypedDict, List, Dict, Optional, Tuple

from time_window import TimeSlot, TimeWindow, to_utc


class NormalizedData(TypedDict):
    source: str                              # 'when2meet' | 'timepick'
    name: str                                # 이벤트 이름
    participants: List[str]                  # 전체 인원
    slot_minutes: int                        # 슬롯 간격 (분)
    slots: List[datetime]                    # 전체 시간대 (UTC)
    availability: Dict[datetime, List[str]]  # {시간: [가능한 사람들]}


@dataclass(frozen=True)
class ProposedWindow:
    """주최자가 제안한 시간 범위. naive 시간은 timezone 기준 벽시계 시간"""
    start: datetime
    end: datetime
    timezone: str = "UTC"

    def to_window(self) -> TimeWindow:
        return TimeWindow(to_utc(self.start, self.timezone), to_utc(self.end, self.timezone))


@dataclass(frozen=True)
class AvailabilityRecord:
    """저장된 참가자 가능 시간 한 줄 (벽시계 시간 + 타임존)"""
    participant_id: str
    start: datetime
    end: datetime
    timezone: str = "UTC"


@dataclass(frozen=True)
class Recommendation:
    slot: TimeSlot
    available_count: int
    availability_rate: float                  # 0.0 ~ 1.0
    available_participants: Tuple[str, ...]
    unavailable_participants: Tuple[str, ...]

    def as_dict(self) -> dict:
        return {
            "slot": self.slot.as_dict(),
            "available_participants": self.available_count,
            "availability_rate": self.availability_rate,
            "available_users": list(self.available_participants),
            "unavailable_users": list(self.unavailable_participants),
        }


@dataclass(frozen=True)
class RecommendationResult:
    best_recommendation: Optional[Recommendation]
    total_participants: int
    message: str
    duration_minutes: int = 0

    def as_dict(self) -> dict:
        best = self.best_recommendation
        return {
            "duration_minutes": self.duration_minutes,
            "total_participants": self.total_participants,
            "best_recommendation": best.as_dict() if best else None,
            "message": self.message,
        }
