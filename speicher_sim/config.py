"""
Runtime settings of the calculator, read from the environment.

A ``.env`` file in the working directory is merged into ``os.environ`` on
import; variables that are already set keep their value.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict


def _parse_dotenv(text: str) -> Dict[str, str]:
    pairs: Dict[str, str] = {}
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        pairs[key.strip()] = value.strip().strip('"').strip("'")
    return pairs


def _load_dotenv(path: str = ".env") -> Dict[str, str]:
    """
    Merge ``KEY=value`` lines of ``path`` into ``os.environ`` without overriding.

    Returns:
        The pairs found in the file (empty if it does not exist).
    """
    env_path = Path(path)
    if not env_path.exists():
        return {}
    pairs = _parse_dotenv(env_path.read_text(encoding="utf-8"))
    for key, value in pairs.items():
        os.environ.setdefault(key, value)
    return pairs


_load_dotenv()


def _resolve_path(value: str) -> Path:
    path = Path(value).expanduser()
    return path if path.is_absolute() else Path.cwd() / path


@dataclass(frozen=True)
class Settings:
    """
    Attributes:
        database_url: SQLAlchemy URL of the calculation history.
        results_dir: Directory receiving exported reports.
    """

    database_url: str
    results_dir: Path


def load_settings() -> Settings:
    """
    Read the current settings from the environment.

    ``POSTGRES_DSN`` takes precedence over the SQLite file at
    ``SPEICHER_DB_PATH`` (default ``speicher_sim.db``). Reports go to
    ``SPEICHER_RESULTS_DIR`` (default ``results``). Relative paths resolve
    against the working directory, and the SQLite parent directory is
    created so the engine can open the file.

    Example:
        ```python
        settings = load_settings()
        ResultBuilder(settings.results_dir)
        ```
    """
    database_url = os.getenv("POSTGRES_DSN")
    if not database_url:
        db_path = _resolve_path(os.getenv("SPEICHER_DB_PATH", "speicher_sim.db"))
        db_path.parent.mkdir(parents=True, exist_ok=True)
        database_url = f"sqlite+pysqlite:///{db_path}"

    return Settings(
        database_url=database_url,
        results_dir=_resolve_path(os.getenv("SPEICHER_RESULTS_DIR", "results")),
    )
