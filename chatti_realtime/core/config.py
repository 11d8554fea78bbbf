"""
Realtime Service Configuration

환경 변수를 통한 설정 관리
"""

from typing import List, Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings

load_dotenv()  # .env 파일 로드


class Settings(BaseSettings):
    """실시간 서비스 설정"""

    # Application
    app_name: str = "chatti-realtime"
    version: str = "1.0.0"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 5001

    # CORS
    cors_origins: List[str] = ["http://localhost:5173", "http://localhost:3000"]

    # WebSocket 인증 (JWT)
    ws_auth_required: bool = False
    secret_key: str = ""
    algorithm: str = "HS256"

    # 내부 이벤트 API (CRUD 서비스에서 호출)
    internal_api_key: Optional[str] = None

    # Presence
    last_seen_max_entries: int = 10000

    # Logging
    log_dir: str = "logs"
    log_to_file: bool = False

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"


settings = Settings()
