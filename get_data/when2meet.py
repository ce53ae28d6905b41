"""
When2meet 데이터 추출 모듈

"""

import logging
import re
from datetime import datetime, timezone

import requests

from config import settings
from schemas import NormalizedData

logger = logging.getLogger(__name__)


def _get_html(url: str) -> str:
    """When2meet 페이지의 HTML을 가져옵니다."""
    headers = {"User-Agent": settings.user_agent}
    response = requests.get(url, headers=headers, timeout=settings.request_timeout_seconds)
    response.raise_for_status()
    return response.text


def _parse_people(html: str) -> dict[int, str]:
    """
    참가자 정보를 추출합니다.
    Returns: {id: name} 형태의 딕셔너리
    """
    pattern = r"PeopleNames\[(\d+)\]\s*=\s*'([^']+)';\s*PeopleIDs\[\1\]\s*=\s*(\d+);"
    matches = re.findall(pattern, html)

    return {int(pid): name for _, name, pid in matches}


def _parse_time_slots(html: str) -> dict[int, int]:
    """
    타임슬롯 정보를 추출합니다.
    Returns: {slot_index: unix_timestamp} 형태의 딕셔너리
    """
    pattern = r"TimeOfSlot\[(\d+)\]=(\d+);"
    matches = re.findall(pattern, html)

    return {int(idx): int(timestamp) for idx, timestamp in matches}


def _parse_availability(html: str) -> dict[int, list[int]]:
    """
    가용성 정보를 추출합니다.
    Returns: {slot_index: [person_id, ...]} 형태의 딕셔너리
    """
    pattern = r"AvailableAtSlot\[(\d+)\]\.push\((\d+)\);"
    matches = re.findall(pattern, html)

    availability: dict[int, list[int]] = {}
    for slot_idx, person_id in matches:
        availability.setdefault(int(slot_idx), []).append(int(person_id))

    return availability


def _parse_event_name(html: str) -> str:
    """이벤트 이름을 추출합니다."""
    pattern = r"<title>(.+?)\s*-\s*When2meet</title>"
    match = re.search(pattern, html)
    return match.group(1) if match else "Unknown Event"


def parse_when2meet_html(html: str) -> NormalizedData:
    """
    When2meet HTML을 정규화된 형태로 바꿉니다.
    슬롯 시각은 unix timestamp라서 그대로 UTC로 변환합니다.
    """
    people = _parse_people(html)  # {id: name}
    time_slots = _parse_time_slots(html)  # {slot_idx: timestamp}
    raw_availability = _parse_availability(html)  # {slot_idx: [person_ids]}

    if not time_slots:
        raise ValueError("No time slots found in When2meet page")

    availability: dict[datetime, list[str]] = {}
    slots: list[datetime] = []

    for slot_idx, timestamp in sorted(time_slots.items(), key=lambda x: x[1]):
        dt = datetime.fromtimestamp(timestamp, tz=timezone.utc)
        slots.append(dt)

        person_ids = raw_availability.get(slot_idx, [])
        availability[dt] = [people[pid] for pid in person_ids if pid in people]

    return {
        'source': 'when2meet',
        'name': _parse_event_name(html),
        'participants': sorted(people.values()),
        'slot_minutes': 15,
        'slots': slots,
        'availability': availability,
    }


def get_when2meet_data(url: str) -> NormalizedData:
    """
    When2meet URL에서 데이터를 추출하고 정규화된 형태로 반환합니다.

    Raises:
        requests.HTTPError: 페이지 요청 실패
        ValueError: 슬롯 정보가 없는 페이지
    """
    data = parse_when2meet_html(_get_html(url))
    logger.info("Loaded When2meet event '%s' (%d participants, %d slots)",
                data["name"], len(data["participants"]), len(data["slots"]))
    return data
