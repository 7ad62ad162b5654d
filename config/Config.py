# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-08
# Updated: 2026-10-01
# Description: Config
# -----------------------------------------------------------------------------

import os
from dataclasses import dataclass
from dotenv import load_dotenv, find_dotenv

# Load .env once globally
load_dotenv(find_dotenv(usecwd=True), override=True)

CHROMA_MODES = ("cloud", "http", "persistent", "ephemeral")


@dataclass(frozen=True)
class Config:
    # Chroma Vector Database
    chroma_mode: str
    chroma_api_key: str = ""
    chroma_tenant: str = ""
    chroma_database: str = ""
    chroma_host: str = ""
    chroma_port: str = ""
    chroma_path: str = ""

    # ---- Single source of truth: field_name -> ENV VAR NAME ----
    ENV_VARS = {
        "chroma_mode": "CHROMA_MODE",
        "chroma_api_key": "CHROMA_API_KEY",
        "chroma_tenant": "CHROMA_TENANT",
        "chroma_database": "CHROMA_DATABASE",
        "chroma_host": "CHROMA_HOST",
        "chroma_port": "CHROMA_PORT",
        "chroma_path": "CHROMA_PATH",
    }

    # Fields each connection mode cannot do without
    REQUIRED_BY_MODE = {
        "cloud": ("chroma_api_key", "chroma_tenant", "chroma_database"),
        "http": ("chroma_host",),
        "persistent": ("chroma_path",),
        "ephemeral": (),
    }

    @staticmethod
    def from_env() -> "Config":
        """Build Config object from environment variables."""
        kwargs = {
            field_name: os.getenv(env_name, "")
            for field_name, env_name in Config.ENV_VARS.items()
        }
        kwargs["chroma_mode"] = (kwargs["chroma_mode"] or "cloud").strip().lower()
        return Config(**kwargs)

    def __post_init__(self):
        """Fail fast if the chosen mode is unknown or its settings are missing."""
        if self.chroma_mode not in CHROMA_MODES:
            raise ValueError(
                f"Unsupported CHROMA_MODE '{self.chroma_mode}', expected one of {list(CHROMA_MODES)}"
            )

        missing_fields = [f for f in self.REQUIRED_BY_MODE[self.chroma_mode] if not getattr(self, f)]

        if missing_fields:
            missing_env_vars = [self.ENV_VARS[f] for f in missing_fields]
            raise ValueError(f"Missing required environment variables: {missing_env_vars}")

        if self.chroma_port and not self.chroma_port.isdigit():
            raise ValueError(f"CHROMA_PORT must be an int, got {self.chroma_port!r}")

    def summary(self) -> dict:
        """Return a safe, non-sensitive summary for logging."""
        return {
            "chroma_mode": self.chroma_mode,
            "chroma_tenant": self.chroma_tenant,
            "chroma_database": self.chroma_database,
            "chroma_host": self.chroma_host,
            "chroma_port": self.chroma_port,
            "chroma_path": self.chroma_path,
        }
