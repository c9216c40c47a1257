from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env")

    database_url: str

    # Comma-separated, e.g. "http://localhost:5173,https://vibes.example.com"
    cors_origins: str = ""
    log_level: str = "INFO"

    speaker_api_base_url: str = "https://api.ws.sonos.com/control/api/v1"
    speaker_api_timeout_seconds: float = 10.0

settings = Settings()
