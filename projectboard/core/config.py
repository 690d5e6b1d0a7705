from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

class Settings(BaseSettings):
    PROJECT_NAME: str = "Project Board"
    MONGODB_URL: str = "mongodb://localhost:27017/projectboard"

    # Signed cookie session used by the login guard
    SESSION_SECRET_KEY: str = Field(default="change-me", min_length=1)
    SESSION_COOKIE: str = "projectboard.sid"
    SESSION_MAX_AGE: int = 14 * 24 * 60 * 60

    MAX_IMAGE_BYTES: int = 5 * 1024 * 1024
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file='.env', env_file_encoding='utf-8', extra='ignore')

settings = Settings()
