"""
Configuration management.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path


def _split_origins(value: str) -> list[str]:
    return [origin.strip() for origin in value.split(",") if origin.strip()]


@dataclass
class Config:
    """
    Application configuration.

    Loads from environment variables with sensible defaults.
    The sensitive field set and privileged roles are fixed in code and
    are not configurable here.
    """

    # Server
    host: str = field(default_factory=lambda: os.getenv("HOST", "127.0.0.1"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "8000")))
    debug: bool = field(default_factory=lambda: os.getenv("DEBUG", "false").lower() == "true")
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())
    allowed_origins: list[str] = field(
        default_factory=lambda: _split_origins(
            os.getenv("ALLOWED_ORIGINS", "http://localhost:8000,http://127.0.0.1:8000")
        )
    )

    # Identity stand-in: role used when a request names none
    default_role: str = field(default_factory=lambda: os.getenv("DEFAULT_ROLE", "readonly"))

    # Data
    data_dir: str = field(default_factory=lambda: os.getenv("DATA_DIR", "./data"))

    @property
    def repository_path(self) -> Path:
        """JSON file backing the property and draft repository."""
        return Path(self.data_dir) / "properties.json"

    @classmethod
    def load(cls) -> "Config":
        """Load configuration from environment."""
        return cls()

    def to_dict(self) -> dict:
        """Convert config to dictionary."""
        return {
            "host": self.host,
            "port": self.port,
            "debug": self.debug,
            "log_level": self.log_level,
            "allowed_origins": list(self.allowed_origins),
            "default_role": self.default_role,
            "data_dir": self.data_dir,
        }
