"""
Timepick 데이터 추출 모듈
"""

import logging
from datetime import datetime, timedelta

import requests

from config import settings
from schemas import NormalizedData
from time_window import to_utc

logger = logging.getLogger(__name__)

SLOT_MINUTES = 15


def _get_api_url(url: str) -> str:
    """Timepick 링크에서 API URL 추출"""
    schedule_id = url.strip("/").split("/")[-1]
    return f"https://backend.timepick.net/api/event/{schedule_id}/"


def _fetch_data(api_url: str) -> dict:
    """API에서 JSON 데이터 가져오기"""
    headers = {
        "Accept": "application/json",
        "Content-Type": "application/json"
    }
    response = requests.get(api_url, headers=headers, timeout=settings.request_timeout_seconds)
    response.raise_for_status()
    return response.json()


def _parse_dates(dates_str: str) -> list[str]:
    """쉼표로 구분된 날짜 문자열을 리스트로 변환합니다."""
    return [d.strip() for d in dates_str.split(",") if d.strip()]


def _generate_slots(dates: list[str], start_hour: int, end_hour: int, tz: str) -> list[datetime]:
    """
    날짜와 시간 범위로 모든 타임슬롯을 생성합니다. (15분 단위)

    Args:
        dates: ["2025-12-18", "2025-12-19", ...]
        start_hour: 시작 시간 (tz 기준)
        end_hour: 종료 시간. 0이면 자정(24시)
        tz: 벽시계 시간의 타임존

    Returns:
        UTC로 변환된 슬롯 시작 시각들
    """
    if end_hour == 0:
        end_hour = 24

    slots = []
    for date_str in dates:
        date = datetime.strptime(date_str, "%Y-%m-%d")

        current_time = date.replace(hour=start_hour, minute=0)
        end_time = date + timedelta(hours=end_hour)

        while current_time < end_time:
            slots.append(to_utc(current_time, tz))
            current_time += timedelta(minutes=SLOT_MINUTES)

    return slots


def _parse_availability(
    group_availability: dict[str, str],
    slots: list[datetime]
) -> dict[datetime, list[str]]:
    """
    availability 문자열을 정규화된 형태로 변환

    Args:
        group_availability: {"이름": "111100001111...", ...}
        slots: [datetime, datetime, ...]

    Returns:
        {datetime: ["가능한", "사람들"], ...}
    """
    availability: dict[datetime, list[str]] = {slot: [] for slot in slots}

    for name, avail_str in group_availability.items():
        for i, bit in enumerate(avail_str):
            if i < len(slots) and bit == "1":
                availability[slots[i]].append(name)

    return availability


def parse_timepick_event(raw_data: dict, tz: str) -> NormalizedData:
    """Timepick API 응답을 정규화된 형태로 바꿉니다."""
    dates = _parse_dates(raw_data["dates"])
    slots = _generate_slots(dates, raw_data["startTime"], raw_data["endTime"], tz)
    availability = _parse_availability(raw_data["groupAvailability"], slots)

    return {
        "source": "timepick",
        "name": raw_data["name"],
        "participants": list(raw_data["participants"]),
        "slot_minutes": SLOT_MINUTES,
        "slots": slots,
        "availability": availability,
    }


def get_timepick_data(url: str) -> NormalizedData:
    """
    Timepick URL에서 데이터를 추출하고 정규화된 형태로 반환합니다.

    Args:
        url: Timepick 이벤트 URL 또는 API URL

    Raises:
        requests.HTTPError: API 요청 실패
        KeyError: 응답에 필요한 필드가 없음
    """
    if "backend.timepick.net" in url:
        api_url = url
    else:
        api_url = _get_api_url(url)

    data = parse_timepick_event(_fetch_data(api_url), settings.source_timezone)
    logger.info("Loaded Timepick event '%s' (%d participants, %d slots)",
                data["name"], len(data["participants"]), len(data["slots"]))
    return data
