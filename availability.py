"""
추천 엔진 입력 만들기

슬롯 격자 데이터(when2meet, timepick)나 저장된 가능 시간 기록을
UTC TimeWindow로 바꿉니다.
"""

import logging
from collections import defaultdict
from datetime import datetime, timedelta
from typing import Iterable, Optional

from schemas import AvailabilityRecord, NormalizedData, ProposedWindow
from time_window import InvalidTimeWindowError, TimeWindow, to_utc

logger = logging.getLogger(__name__)


# =============================================================================
# 1. 연속된 시간대 묶기
# =============================================================================

def merge_consecutive_slots(
    slots: list[datetime],
    slot_minutes: int = 15,
    min_duration_minutes: int = 0
) -> list[tuple[datetime, datetime]]:
    """
    연속된 시간 슬롯들을 묶어서 (시작, 종료) 튜플 리스트로 반환합니다.

    Args:
        slots: 슬롯 시작 시각 리스트 (정렬 안 되어 있어도 됨)
        slot_minutes: 슬롯 간격 (분)
        min_duration_minutes: 최소 연속 시간 (분). 이보다 짧은 범위는 제외

    Returns:
        [(시작시간, 종료시간), ...] 형태의 리스트
    """
    if not slots:
        return []

    sorted_slots = sorted(set(slots))
    step = timedelta(minutes=slot_minutes)
    merged = []

    start = sorted_slots[0]
    end = sorted_slots[0]

    for slot in sorted_slots[1:]:
        # 이전 슬롯과 연속인지 확인
        if slot - end == step:
            end = slot
        else:
            merged.append((start, end + step))
            start = slot
            end = slot

    # 마지막 범위 추가
    merged.append((start, end + step))

    if min_duration_minutes > 0:
        min_duration = timedelta(minutes=min_duration_minutes)
        merged = [(s, e) for s, e in merged if (e - s) >= min_duration]

    return merged


# =============================================================================
# 2. 슬롯 격자 → 엔진 입력
# =============================================================================

def availability_from_slots(data: NormalizedData) -> dict[str, list[TimeWindow]]:
    """
    참가자별로 체크한 슬롯을 묶어 가능 시간 구간으로 만듭니다.

    Returns:
        {"이름": [TimeWindow, ...], ...} (아무것도 체크 안 한 사람은 빈 리스트)
    """
    marked = defaultdict(list)
    for slot, people in data["availability"].items():
        for name in people:
            marked[name].append(slot)

    result = {}
    for name in data["participants"]:
        ranges = merge_consecutive_slots(marked.get(name, []), data["slot_minutes"])
        result[name] = [TimeWindow(s, e) for s, e in ranges]
    return result


def proposed_windows_from_slots(data: NormalizedData, timezone: str = "UTC") -> list[ProposedWindow]:
    """이벤트 전체 격자를 연속 구간별 제안 시간으로 묶습니다."""
    ranges = merge_consecutive_slots(data["slots"], data["slot_minutes"])
    return [ProposedWindow(to_utc(s), to_utc(e), timezone) for s, e in ranges]


def request_from_data(
    data: NormalizedData,
    duration_minutes: int,
    participants: Optional[list[str]] = None,
    timezone: str = "UTC",
) -> dict:
    """
    recommend()에 바로 넘길 수 있는 키워드 인자를 만듭니다.

    Args:
        participants: 일부 인원만 볼 때. None이면 전체 인원
        timezone: 결과를 보여줄 타임존
    """
    if participants is None:
        participants = list(data["participants"])

    return {
        "proposed_windows": proposed_windows_from_slots(data, timezone),
        "duration_minutes": duration_minutes,
        "participant_ids": participants,
        "availability": availability_from_slots(data),
    }


# =============================================================================
# 3. 저장된 기록 → 엔진 입력
# =============================================================================

def validate_records(records: Iterable[AvailabilityRecord]) -> None:
    for i, record in enumerate(records):
        if record.end <= record.start:
            raise InvalidTimeWindowError(
                f"invalid time slot {i}: end time must be after start time"
            )


def availability_from_records(records: list[AvailabilityRecord]) -> dict[str, list[TimeWindow]]:
    """
    벽시계 시간 + 타임존 기록을 참가자별 UTC 구간으로 묶습니다.

    Raises:
        InvalidTimeWindowError: 종료가 시작보다 늦지 않은 기록
        zoneinfo.ZoneInfoNotFoundError: 알 수 없는 타임존
    """
    validate_records(records)

    grouped = defaultdict(list)
    for record in records:
        grouped[record.participant_id].append(
            TimeWindow(to_utc(record.start, record.timezone), to_utc(record.end, record.timezone))
        )

    logger.debug("Loaded %d availability records for %d participants", len(records), len(grouped))
    return dict(grouped)
