"""Runtime settings read from environment variables."""

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass
class Settings:
    garage_file: Path
    log_level: str = "INFO"
    secret_key: str = "dev-secret-key-change-in-prod"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            garage_file=Path(os.environ.get("GARAGE_FILE", "garage.yaml")),
            log_level=os.environ.get("GARAGE_LOG_LEVEL", "INFO").upper(),
            secret_key=os.environ.get("SECRET_KEY", "dev-secret-key-change-in-prod"),
        )


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
