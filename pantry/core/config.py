"""Runtime settings loaded from the environment (and ``.env`` if present)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv  # type: ignore


def default_data_file() -> str:
    return str(Path.home() / ".pantry" / "pantry.json")


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return float(raw)


@dataclass
class Settings:
    backend: str = "memory"  # memory | firestore
    collection: str = "pantry"
    data_file: Optional[str] = None
    project_id: Optional[str] = None
    database: str = "(default)"
    api_key: Optional[str] = None
    id_token: Optional[str] = None
    poll_interval_s: float = 1.0
    timeout: float = 5.0
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        return cls(
            backend=(os.getenv("PANTRY_BACKEND") or "memory").lower(),
            collection=os.getenv("PANTRY_COLLECTION") or "pantry",
            data_file=os.getenv("PANTRY_DATA_FILE") or default_data_file(),
            project_id=os.getenv("FIRESTORE_PROJECT_ID") or None,
            database=os.getenv("FIRESTORE_DATABASE") or "(default)",
            api_key=os.getenv("FIRESTORE_API_KEY") or None,
            id_token=os.getenv("FIRESTORE_ID_TOKEN") or None,
            poll_interval_s=_env_float("PANTRY_POLL_INTERVAL", 1.0),
            timeout=_env_float("PANTRY_TIMEOUT", 5.0),
            log_level=(os.getenv("PANTRY_LOG_LEVEL") or "WARNING").upper(),
        )
