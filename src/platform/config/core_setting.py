from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


_PROJECT_ROOT = Path(__file__).resolve().parents[3]
_ENV_PATH = _PROJECT_ROOT / '.env'
_ENV_FILE = _ENV_PATH if _ENV_PATH.exists() else (_PROJECT_ROOT / '.env.example')


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_ignore_empty=True,
        extra='ignore',
    )

    PROJECT_NAME: str = 'Ticket Admission Gate'
    VERSION: str = '0.1.0'
    DEBUG: bool = True  # Set to False in production

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = []  # add the gate frontend URL here

    @field_validator('BACKEND_CORS_ORIGINS', mode='before')
    @classmethod
    def assemble_cors_origins(cls, v: str | List[str]) -> List[str]:
        if isinstance(v, str) and not v.startswith('['):
            return [i.strip() for i in v.split(',')]
        elif isinstance(v, list):
            return v
        return []

    # PostgreSQL
    POSTGRES_SERVER: str = 'localhost'
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = 'postgres'
    POSTGRES_PASSWORD: SecretStr = SecretStr('postgres')
    POSTGRES_DB: str = 'ticket_admission'
    DATABASE_URL_OVERRIDE: Optional[str] = None  # e.g. sqlite+aiosqlite:///./local.db

    @property
    def DATABASE_URL_ASYNC(self) -> str:
        if self.DATABASE_URL_OVERRIDE:
            return self.DATABASE_URL_OVERRIDE
        return (
            f'postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD.get_secret_value()}'
            f'@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}'
        )

    # Connection pool (ignored by sqlite)
    DB_POOL_SIZE: int = 10
    DB_POOL_MAX_OVERFLOW: int = 5
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 3600
    DB_POOL_PRE_PING: bool = True
    DB_CREATE_TABLES_ON_STARTUP: bool = False  # local dev and sqlite; use alembic otherwise

    # Admission
    ADMISSION_DUPLICATE_WINDOW_SECONDS: float = 2.0
    ADMISSION_LOG_DEFAULT_LIMIT: int = 20
    ADMISSION_LOG_MAX_LIMIT: int = 200

    # Credential issuance policy (counter vs unit credentials)
    CREDENTIAL_POLICY_VERSION: str = '2024-10'
    CREDENTIAL_POLICY_CUTOVER_AT: datetime = datetime(2024, 10, 1, tzinfo=timezone.utc)
    CREDENTIAL_POLICY_MAX_UNIT_CREDENTIALS: int = 20

    # Gate client
    GATE_API_BASE_URL: str = 'http://localhost:8000'
    GATE_HTTP_TIMEOUT_SECONDS: float = 10.0
    GATE_RETRY_MAX_ATTEMPTS: int = 3
    GATE_RETRY_BASE_DELAY_SECONDS: float = 1.0
    GATE_DUPLICATE_SCAN_WINDOW_SECONDS: float = 2.0
    GATE_STAFF_SESSION_HOURS: float = 8.0
    GATE_STAFF_SESSION_FILE: Path = Path.home() / '.ticket_gate' / 'staff_session.json'

    # Logging (level defaults to DEBUG when DEBUG is on, else INFO)
    LOG_LEVEL: Optional[str] = None
    LOG_TO_FILE: Optional[bool] = None  # defaults to DEBUG
    LOG_DIR: Path = _PROJECT_ROOT / 'logs'


settings = Settings()  # type: ignore
