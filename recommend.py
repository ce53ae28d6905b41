import logging
from datetime import datetime, timedelta, timezone
from typing import Iterable, Mapping
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from schemas import ProposedWindow, Recommendation, RecommendationResult
from time_window import TimeSlot, TimeWindow

logger = logging.getLogger(__name__)

STEP_MINUTES = 15

NO_PARTICIPANTS_MESSAGE = "No participants found for this event"
NO_CANDIDATES_MESSAGE = "No available time slots found within the proposed time windows"
NO_COMMON_AVAILABILITY_MESSAGE = (
    "No common availability found. Consider expanding the proposed time window "
    "or collecting more availability data."
)


# =============================================================================
# 1. 후보 시간대 생성 (슬라이딩 윈도우)
# =============================================================================

def generate_candidates(
    window: TimeWindow,
    duration_minutes: int,
    step_minutes: int = STEP_MINUTES,
) -> list[TimeWindow]:
    """
    제안된 시간 범위 안에서 duration 길이의 후보를 step 간격으로 만듭니다.

    마지막 후보의 종료 시각은 window.end와 같을 수 있지만 넘지는 않습니다.
    duration이 범위보다 길면 빈 리스트를 반환합니다.
    """
    if step_minutes <= 0:
        raise ValueError(f"step_minutes must be positive, got {step_minutes}")

    # 범위보다 긴 duration은 timedelta로 바꾸기 전에 제외
    if duration_minutes > window.duration() / timedelta(minutes=1):
        return []

    duration = timedelta(minutes=duration_minutes)
    step = timedelta(minutes=step_minutes)

    candidates = []
    cursor = window.start
    while True:
        candidate_end = cursor + duration
        if candidate_end > window.end:
            break
        candidates.append(TimeWindow(cursor, candidate_end))

        cursor += step
        if cursor >= window.end:
            break

    return candidates


# =============================================================================
# 2. 참가자 가능 여부 확인
# =============================================================================

def is_available(candidate: TimeWindow, windows: Iterable[TimeWindow]) -> bool:
    """가능 시간 중 하나라도 후보를 완전히 포함하면 True"""
    return any(w.contains(candidate) for w in windows)


def check_candidate(
    candidate: TimeWindow,
    participant_ids: list[str],
    availability: Mapping[str, Iterable[TimeWindow]],
    tz: str = "UTC",
) -> Recommendation:
    """
    후보 하나에 대해 가능/불가능 인원을 나눕니다.

    가능 시간을 제출하지 않은 참가자는 불가능으로 처리합니다.
    slot은 tz 기준으로 변환되며, 판정은 모두 UTC로 끝난 뒤입니다.
    """
    available = []
    unavailable = []

    for pid in participant_ids:
        windows = availability.get(pid) or ()
        if is_available(candidate, windows):
            available.append(pid)
        else:
            unavailable.append(pid)

    total = len(participant_ids)
    rate = len(available) / total if total else 0.0

    return Recommendation(
        slot=candidate.in_timezone(tz),
        available_count=len(available),
        availability_rate=rate,
        available_participants=tuple(available),
        unavailable_participants=tuple(unavailable),
    )


# =============================================================================
# 3. 순위 매기기 & 메시지
# =============================================================================

def _utc_start(rec: Recommendation) -> datetime:
    return rec.slot.start.astimezone(timezone.utc)


def rank_candidates(recommendations: list[Recommendation]) -> list[Recommendation]:
    """
    가능 인원 내림차순, 같으면 UTC 시작 시각이 이른 순으로 정렬합니다.
    두 기준이 모두 같으면 원래 순서를 유지합니다 (stable sort).
    """
    return sorted(recommendations, key=lambda r: (-r.available_count, _utc_start(r)))


def build_message(best: Recommendation, total_participants: int) -> str:
    if best.availability_rate == 1.0:
        return (
            f"Perfect match! All {best.available_count} participants "
            f"are available for this time slot."
        )
    if best.available_count == 0:
        return NO_COMMON_AVAILABILITY_MESSAGE
    # 반올림 (0.5는 올림)
    percent = int(best.availability_rate * 100 + 0.5)
    return (
        f"Best available slot with {best.available_count} out of {total_participants} "
        f"participants ({percent}% availability)."
    )


# =============================================================================
# 4. 추천
# =============================================================================

def _candidates_for(proposed: ProposedWindow, duration_minutes: int) -> list[TimeWindow]:
    if duration_minutes <= 0:
        logger.warning("Invalid duration %d minutes, no candidates", duration_minutes)
        return []
    try:
        ZoneInfo(proposed.timezone)
        window = proposed.to_window()
    except (ValueError, ZoneInfoNotFoundError) as e:
        logger.warning("Skipping proposed window %s ~ %s (%s): %s",
                       proposed.start, proposed.end, proposed.timezone, e)
        return []
    return generate_candidates(window, duration_minutes)


def recommend(
    proposed_windows: list[ProposedWindow],
    duration_minutes: int,
    participant_ids: list[str],
    availability: Mapping[str, Iterable[TimeWindow]],
) -> RecommendationResult:
    """
    제안된 시간 범위들 중 가장 많은 인원이 가능한, 가장 이른 시간대를 추천합니다.

    Args:
        proposed_windows: 주최자가 제안한 시간 범위들
        duration_minutes: 회의 길이 (분)
        participant_ids: 참가자 ID 리스트 (중복은 한 번만 셈)
        availability: {참가자 ID: [가능한 TimeWindow, ...]} (UTC)

    Returns:
        RecommendationResult: 후보가 없거나 참가자가 없으면 best_recommendation은 None
    """
    participants = list(dict.fromkeys(participant_ids))
    total = len(participants)

    if total == 0:
        return RecommendationResult(None, 0, NO_PARTICIPANTS_MESSAGE, duration_minutes)

    # 가능 시간을 한 번만 읽어 둠
    lookup = {pid: tuple(availability.get(pid) or ()) for pid in participants}

    scored = []
    for proposed in proposed_windows:
        candidates = _candidates_for(proposed, duration_minutes)
        logger.debug("%d candidates in %s ~ %s", len(candidates), proposed.start, proposed.end)
        for candidate in candidates:
            scored.append(check_candidate(candidate, participants, lookup, proposed.timezone))

    if not scored:
        return RecommendationResult(None, total, NO_CANDIDATES_MESSAGE, duration_minutes)

    best = rank_candidates(scored)[0]
    logger.debug("Best slot %s with %d/%d available",
                 best.slot.start.isoformat(), best.available_count, total)

    return RecommendationResult(best, total, build_message(best, total), duration_minutes)


# =============================================================================
# 표시용
# =============================================================================

def format_time_range(slot: TimeSlot) -> str:
    """시간 범위를 보기 좋게 포맷팅합니다."""
    duration = slot.end - slot.start
    hours, remainder = divmod(int(duration.total_seconds()), 3600)
    minutes = remainder // 60

    duration_str = ""
    if hours > 0:
        duration_str += f"{hours}시간"
    if minutes > 0:
        duration_str += f" {minutes}분" if hours > 0 else f"{minutes}분"

    return (
        f"{slot.start.strftime('%Y-%m-%d %H:%M')} ~ {slot.end.strftime('%H:%M')} "
        f"({duration_str.strip()}, {slot.timezone})"
    )
