import logging

import streamlit as st
from config import settings
from get_data.when2meet import get_when2meet_data
from get_data.timepick import get_timepick_data
from availability import request_from_data
from recommend import recommend, format_time_range

logging.basicConfig(level=settings.log_level)

st.set_page_config(page_title="회의 시간 추천", page_icon="📅", layout="wide")

DURATION_OPTIONS = [30, 45, 60, 90, 120, 180]


# =============================================================================
# 캐싱된 데이터 로드 함수 (같은 URL은 캐시 사용)
# =============================================================================
@st.cache_data(show_spinner=False, ttl=settings.cache_ttl_seconds)
def load_when2meet(url: str):
    return get_when2meet_data(url)

@st.cache_data(show_spinner=False, ttl=settings.cache_ttl_seconds)
def load_timepick(url: str):
    return get_timepick_data(url)


# =============================================================================
# URL 자동 감지 함수
# =============================================================================
def detect_source(url: str) -> str | None:
    """URL에서 플랫폼을 자동 감지합니다."""
    if not url:
        return None
    if "when2meet.com" in url:
        return "when2meet"
    if "timepick.net" in url:
        return "timepick"
    return None


def render_result(result) -> None:
    best = result.best_recommendation
    if best is None:
        st.warning(f"😢 {result.message}")
        return

    if best.availability_rate == 1.0:
        st.success(f"✅ {result.message}")
    elif best.available_count == 0:
        st.error(f"❌ {result.message}")
    else:
        st.info(f"💡 {result.message}")

    st.subheader("🕐 추천 시간")
    st.write(format_time_range(best.slot))

    col1, col2 = st.columns(2)
    with col1:
        st.write(f"**가능 ({best.available_count}명)**")
        for name in best.available_participants:
            st.write(f"- {name}")
    with col2:
        st.write(f"**불가능 ({len(best.unavailable_participants)}명)**")
        for name in best.unavailable_participants:
            st.write(f"- {name}")


def main() -> None:
    st.title("📅 회의 시간 추천")

    # =========================================================================
    # 상단: URL 입력
    # =========================================================================
    col1, col2 = st.columns([4, 1])
    with col1:
        url = st.text_input(
            "🔗 일정 링크",
            placeholder="when2meet 또는 timepick 링크를 붙여넣으세요",
            label_visibility="collapsed",
        )
    with col2:
        load_button = st.button("불러오기", type="primary", use_container_width=True)

    if "data" not in st.session_state:
        st.session_state.data = None

    if load_button and url:
        source = detect_source(url)
        if source is None:
            st.error("❌ 올바른 when2meet 또는 timepick 링크를 입력해주세요!")
        else:
            with st.spinner("데이터 불러오는 중..."):
                try:
                    if source == "when2meet":
                        st.session_state.data = load_when2meet(url)
                    else:
                        st.session_state.data = load_timepick(url)
                    st.success(f"✅ '{st.session_state.data['name']}' 로드 완료!")
                except Exception as e:
                    logging.getLogger(__name__).exception("Failed to load %s", url)
                    st.error(f"❌ 오류: {e}")

    data = st.session_state.data
    if not data:
        st.info("when2meet 또는 timepick 링크를 붙여넣고 불러오기를 눌러주세요~")
        return

    st.divider()

    # =========================================================================
    # 조건 선택
    # =========================================================================
    default_duration = settings.default_duration_minutes
    if default_duration not in DURATION_OPTIONS:
        default_duration = DURATION_OPTIONS[0]
    duration = st.selectbox(
        "⏱️ 회의 길이 (분)",
        options=DURATION_OPTIONS,
        index=DURATION_OPTIONS.index(default_duration),
    )

    selected = st.multiselect(
        "👥 참여 인원 선택 (비우면 전체)",
        options=data["participants"],
        default=None,
    )

    st.divider()

    request = request_from_data(
        data,
        duration,
        participants=selected or None,
        timezone=settings.display_timezone,
    )
    render_result(recommend(**request))


main()
