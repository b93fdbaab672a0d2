from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    DEV: bool = False
    SECRET_KEY: str = "change_me_in_env"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24  # 24h

    DATABASE_URL: str = "sqlite:///./studyspace.db"
    CORS_ORIGINS: list[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

    LOG_LEVEL: str = "DEBUG"
    LOG_FORMAT: str = "json"  # json/text

    # default academic groups and subjects on startup
    SEED_DATA: bool = True

    model_config = SettingsConfigDict(env_file=".env", env_ignore_empty=True)


settings = Settings()
