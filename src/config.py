"""Application settings loaded from the environment."""
import os
from functools import lru_cache
from typing import List

from pydantic import BaseModel


class Settings(BaseModel):
    """Process-wide configuration."""
    APP_NAME: str = "imposter-server"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3001
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: str = "*"  # comma-separated

    # Game
    COUNTDOWN_SECONDS: float = 6.5
    ROOM_CODE_LENGTH: int = 4

    @property
    def cors_origins(self) -> List[str]:
        origins = [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]
        return origins or ["*"]


@lru_cache
def get_settings() -> Settings:
    return Settings(
        APP_NAME=os.getenv("APP_NAME", "imposter-server"),
        HOST=os.getenv("HOST", "0.0.0.0"),
        PORT=int(os.getenv("PORT", "3001")),
        LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO").upper(),
        CORS_ORIGINS=os.getenv("CORS_ORIGINS", "*"),
        COUNTDOWN_SECONDS=float(os.getenv("COUNTDOWN_SECONDS", "6.5")),
        ROOM_CODE_LENGTH=int(os.getenv("ROOM_CODE_LENGTH", "4")),
    )
