from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path


class Settings(BaseSettings):
    """Runtime configuration, overridable through DUVIDAPP_* environment variables"""

    model_config = SettingsConfigDict(env_prefix="DUVIDAPP_", env_file=".env", extra="ignore")

    # Client
    api_url: str = "http://localhost:3000"
    request_timeout: float = 15.0
    toast_duration: float = 5.0
    token_file: Path = Path.home() / ".duvidapp" / "session.json"
    log_level: str = "INFO"

    # Development backend
    secret_key: str = "duvidapp-dev-secret"  # Change this to a strong secret key
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24
    mongo_url: str = ""  # empty means an in-process mongomock database
    database_name: str = "duvidapp"


settings = Settings()
