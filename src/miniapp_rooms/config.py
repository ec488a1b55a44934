from __future__ import annotations

from pydantic import ConfigDict, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    BOT_TOKEN: str = ""

    POSTGRES_USER: str
    POSTGRES_PASSWORD: str
    POSTGRES_DB: str
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432

    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    DB_POOL_RECYCLE: int = 300
    DB_COMMAND_TIMEOUT: float = 10.0

    INIT_DATA_HEADER: str = "X-Init-Data"
    INIT_DATA_MAX_AGE_SECONDS: int = 0

    IDENTITY_FIELDS: dict[str, str] = {
        "id": "user_id",
        "first_name": "user_first_name",
        "last_name": "user_last_name",
        "username": "user_username",
        "language": "user_language_code",
    }
    IDENTITY_USER_OBJECT_FIELD: str = "user"

    ROOM_ID_BYTES: int = Field(default=8, ge=8)
    ROOM_ID_MAX_ATTEMPTS: int = Field(default=3, ge=1)

    CORS_ORIGINS: list[str] = ["*"]

    LOG_LEVEL: str = "INFO"

    @property
    def database_url(self) -> str:
        return (
            f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.POSTGRES_DB}"
        )

    model_config = ConfigDict(
        env_file=".env",
        extra="ignore",
    )


settings = Settings()  # type: ignore[call-arg]
