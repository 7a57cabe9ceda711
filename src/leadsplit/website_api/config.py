"""Environment-based configuration for the API service."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

DATA_DIR = Path.home() / ".leadsplit"

DEFAULT_ALLOWED_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
]


@dataclass
class Settings:
    """API configuration.

    Built once by the caller and handed to each component; nothing reads
    the environment after start-up.
    """

    api_secret: str
    host: str = "0.0.0.0"
    port: int = 8000
    db_path: str = str(DATA_DIR / "leadsplit.db")
    upload_dir: str = str(DATA_DIR / "uploads")
    max_upload_mb: int = 5
    bcrypt_rounds: int = 12
    debug: bool = False
    allowed_origins: List[str] = field(default_factory=lambda: list(DEFAULT_ALLOWED_ORIGINS))

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024

    @classmethod
    def from_env(cls, **overrides) -> "Settings":
        """Load settings from ``LEADSPLIT_*`` environment variables."""
        values = {
            "api_secret": os.getenv("LEADSPLIT_API_SECRET", ""),
            "host": os.getenv("LEADSPLIT_API_HOST", "0.0.0.0"),
            "port": int(os.getenv("LEADSPLIT_API_PORT", "8000")),
            "db_path": os.getenv("LEADSPLIT_DATABASE_PATH", str(DATA_DIR / "leadsplit.db")),
            "upload_dir": os.getenv("LEADSPLIT_UPLOAD_DIR", str(DATA_DIR / "uploads")),
            "max_upload_mb": int(os.getenv("LEADSPLIT_MAX_UPLOAD_MB", "5")),
            "bcrypt_rounds": int(os.getenv("LEADSPLIT_BCRYPT_ROUNDS", "12")),
            "debug": os.getenv("LEADSPLIT_ENV", "production") != "production",
        }
        origins = os.getenv("LEADSPLIT_ALLOWED_ORIGINS")
        if origins:
            values["allowed_origins"] = [o.strip() for o in origins.split(",") if o.strip()]
        values.update(overrides)

        if not values["api_secret"]:
            raise RuntimeError(
                "LEADSPLIT_API_SECRET environment variable is required. "
                "Generate one with: openssl rand -hex 32"
            )
        return cls(**values)
