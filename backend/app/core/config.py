from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=True,
        extra='forbid',
    )

    DATABASE_URL: str
    JWT_SECRET_KEY: str
    APP_ENV: str = 'development'
    CORS_ORIGINS: str = 'http://localhost:3001'
    LOG_LEVEL: str = 'INFO'

    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30
    JWT_ALGORITHM: str = 'HS256'

    DEFAULT_CURRENCY: str = 'EUR'
    SEED_PUBLIC_PLANS: bool = True

    SUBSCRIPTION_SWEEP_INTERVAL_SECONDS: int = 3600
    CELERY_BROKER_URL: str = 'redis://localhost:6379/0'
    CELERY_RESULT_BACKEND: str = 'redis://localhost:6379/0'

    @field_validator('DATABASE_URL')
    @classmethod
    def validate_database_url(cls, value: str) -> str:
        if not value.startswith(('postgresql', 'sqlite')):
            raise ValueError('DATABASE_URL must point to PostgreSQL (or SQLite for tests)')
        return value

    @field_validator('JWT_SECRET_KEY')
    @classmethod
    def validate_jwt_secret_strength(cls, value: str) -> str:
        if len(value) < 32:
            raise ValueError('JWT secrets must be at least 32 characters')
        return value

    @field_validator('DEFAULT_CURRENCY')
    @classmethod
    def normalize_default_currency(cls, value: str) -> str:
        normalized = value.strip().upper()
        if len(normalized) != 3 or not normalized.isalpha():
            raise ValueError('DEFAULT_CURRENCY must be a 3-letter currency code')
        return normalized

    @field_validator('SUBSCRIPTION_SWEEP_INTERVAL_SECONDS')
    @classmethod
    def validate_sweep_interval(cls, value: int) -> int:
        if value <= 0:
            raise ValueError('SUBSCRIPTION_SWEEP_INTERVAL_SECONDS must be positive')
        return value

    @property
    def cors_origins(self) -> list[str]:
        return [item.strip() for item in self.CORS_ORIGINS.split(',') if item.strip()]

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith('sqlite')


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
