from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", env_prefix="MIXPOINT_")

    ENV: str = "dev"
    DATABASE_URL_ASYNC: str = "sqlite+aiosqlite:///./mixpoint.db"
    DATABASE_URL_SYNC: str = "sqlite:///./mixpoint.db"
    SQL_ECHO: bool = False

    SLOT_COUNT: int = 2                   # track0, track1
    NOTIFICATION_BACKLOG: int = 50        # toasts kept until the UI drains them

    LOG_LEVEL: str = "INFO"


settings = Settings()
