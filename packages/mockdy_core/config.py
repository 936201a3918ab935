from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict
from packages.mockdy_core.errors import ConfigurationError


class MockdyConfig(BaseSettings):
    """
    애플리케이션 전역 설정 클래스.
    .env 파일에서 환경 변수를 로드합니다.

    OAuth 값은 Optional 입니다. 누락 시 로딩은 성공하고,
    해당 값이 필요한 작업(URL 생성, 토큰 교환)에서 ConfigurationError 가 발생합니다.
    """
    PROJECT_NAME: str = "Mockdy Interview Practice"
    VERSION: str = "0.1.0"

    # Notion OAuth (server-held client credentials)
    OAUTH_CLIENT_ID: Optional[str] = None
    OAUTH_CLIENT_SECRET: Optional[str] = None
    OAUTH_REDIRECT_URI: Optional[str] = None
    NOTION_AUTH_URL: str = "https://api.notion.com/v1/oauth/authorize"
    NOTION_TOKEN_URL: str = "https://api.notion.com/v1/oauth/token"
    NOTION_API_BASE: str = "https://api.notion.com/v1"
    NOTION_VERSION: str = "2022-06-28"
    NOTION_TIMEOUT_SEC: float = 30.0

    # Gemini
    GOOGLE_API_KEY: Optional[str] = None
    GEMINI_MODEL: str = "gemini-2.5-flash"
    CHAT_TEMPERATURE: float = 0.7

    # Local persistence (one directory == one browser profile)
    STORAGE_DIR: str = "data/storage"

    # Graded interviews stay reviewable in memory this long
    FINISHED_INTERVIEW_TTL_SEC: float = 3600.0

    # Where the OAuth callback sends the user back to
    APP_ORIGIN: str = "http://localhost:5173/"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"  # 정의되지 않은 환경변수는 무시
    )

    @classmethod
    def load(cls) -> "MockdyConfig":
        """
        설정을 로드하고 에러 발생 시 커스텀 예외로 래핑합니다.
        """
        try:
            return cls()
        except Exception as e:
            raise ConfigurationError(f"Failed to load configuration: {str(e)}") from e
