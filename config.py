"""
설정 관리
환경 변수와 .env 파일에서 pydantic-settings로 읽어옵니다.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # 추천 결과를 보여줄 타임존 (IANA 이름)
    display_timezone: str = "Asia/Seoul"
    # timepick처럼 벽시계 시간만 주는 소스의 타임존
    source_timezone: str = "Asia/Seoul"

    default_duration_minutes: int = 60

    # HTTP
    request_timeout_seconds: float = 30
    user_agent: str = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"

    cache_ttl_seconds: int = 3600  # 1시간 캐시

    log_level: str = "INFO"


settings = Settings()
