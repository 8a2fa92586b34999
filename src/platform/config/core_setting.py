from pathlib import Path
from typing import List, Literal

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

    PROJECT_NAME: str = 'Popcorn Palace'
    VERSION: str = '0.1.0'
    DEBUG: bool = True  # Set to False in production

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = []  # add your frontend URL here

    @field_validator('BACKEND_CORS_ORIGINS', mode='before')
    @classmethod
    def assemble_cors_origins(cls, v: str | List[str]) -> List[str]:
        if isinstance(v, str) and not v.startswith('['):
            return [i.strip() for i in v.split(',')]
        elif isinstance(v, list):
            return v
        return []

    # Seating
    SEATS_PER_SHOWTIME: int = 100
    SEAT_RESERVATION_MAX_ATTEMPTS: int = 5  # CAS retries when another seat changed underneath

    # Storage: 'database' (SQLAlchemy) or 'memory' (tests / local demo)
    STORAGE_BACKEND: Literal['database', 'memory'] = 'database'

    # PostgreSQL
    POSTGRES_SERVER: str = 'localhost'
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = 'postgres'
    POSTGRES_PASSWORD: SecretStr = SecretStr('postgres')
    POSTGRES_DB: str = 'popcorn_palace'
    DATABASE_URL: str | None = None  # Overrides the POSTGRES_* parts when set

    # Connection pool
    DB_POOL_SIZE: int = 10
    DB_POOL_MAX_OVERFLOW: int = 5
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 3600
    DB_POOL_PRE_PING: bool = True

    @property
    def DATABASE_URL_ASYNC(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f'postgresql+asyncpg://{self.POSTGRES_USER}:'
            f'{self.POSTGRES_PASSWORD.get_secret_value()}'
            f'@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}'
        )


settings = Settings()  # type: ignore
