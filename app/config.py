"""애플리케이션 설정"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional


class Settings(BaseSettings):
    """환경변수 기반 설정"""

    # API Keys
    gemini_api_key: str = ""

    # Application
    app_name: str = "Remodel Proxy API"
    app_version: str = "1.0.0"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 3001

    # CORS
    cors_origins: List[str] = ["*"]

    # Request body (base64 이미지 포함)
    max_request_size_mb: int = 10

    # Gemini API
    gemini_image_model: str = "gemini-2.5-flash-image-preview"
    gemini_timeout_seconds: int = 60

    # Supabase (크레딧 차감, 둘 다 있어야 활성화)
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    credits_table: str = "profiles"
    credit_cost_per_remodel: int = 1
    credits_default_user_id: Optional[str] = None

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    @property
    def credits_enabled(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)

    @property
    def max_request_size_bytes(self) -> int:
        return self.max_request_size_mb * 1024 * 1024


# 전역 설정 인스턴스
settings = Settings()
