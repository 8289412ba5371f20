import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def load_env(path: Optional[Path] = None) -> bool:
    """Load .env from the working directory (or `path`) if present.

    Variables already set in the environment are left untouched.
    Returns True when a file was loaded.
    """
    env_path = path or Path.cwd() / ".env"
    if not env_path.exists():
        return False
    return load_dotenv(dotenv_path=env_path, override=False)


def _env(name: str, default: str) -> str:
    value = os.getenv(name, "").strip()
    return value or default


@dataclass(frozen=True)
class ResolverSettings:
    """Resolver configuration sourced from RANKMERGE_* environment variables."""

    model_key: str = "id"
    score_field: str = "score"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "ResolverSettings":
        level = _env("RANKMERGE_LOG_LEVEL", "INFO").upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown RANKMERGE_LOG_LEVEL: {level}")
        return cls(
            model_key=_env("RANKMERGE_MODEL_KEY", "id"),
            score_field=_env("RANKMERGE_SCORE_FIELD", "score"),
            log_level=level,
        )
