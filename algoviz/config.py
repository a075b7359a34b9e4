from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # API
    API_HOST: str = "127.0.0.1"
    API_PORT: int = 8000

    # CORS
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Logging
    LOG_LEVEL: str = "INFO"

    # Playback
    TICK_INTERVAL_MS: int = 400
    GENERATE_DELAY_MS: int = 50

    # Engine: subprocess | http | recording | none
    ENGINE_KIND: str = "none"
    ENGINE_COMMAND: Optional[str] = None
    ENGINE_URL: Optional[str] = None
    ENGINE_TIMEOUT: float = 30.0
    ENGINE_RECORDING_PATH: Optional[str] = None

    model_config = SettingsConfigDict(env_file=".env", extra="allow")

    @property
    def tick_interval(self) -> float:
        return self.TICK_INTERVAL_MS / 1000.0

    @property
    def generate_delay(self) -> float:
        return self.GENERATE_DELAY_MS / 1000.0


settings = Settings()
