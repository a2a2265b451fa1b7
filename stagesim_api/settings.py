import os
from typing import List

from pydantic import BaseModel


class Settings(BaseModel):
    cors_origins: List[str] = ["*"]
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        origins = os.environ.get("STAGESIM_CORS_ORIGINS", "*")
        return cls(
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()] or ["*"],
            log_level=os.environ.get("STAGESIM_LOG_LEVEL", "INFO").upper(),
        )
