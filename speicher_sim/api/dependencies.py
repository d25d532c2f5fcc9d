from __future__ import annotations

from functools import lru_cache

from ..application import SpeicherApplication
from ..config import load_settings
from ..db.session import init_db
from ..persistence import PersistenceService
from ..result_builder import ResultBuilder


@lru_cache()
def get_persistence_service() -> PersistenceService:
    """
    Provide a cached PersistenceService instance for API routes.
    """
    init_db()
    return PersistenceService()


def get_result_builder() -> ResultBuilder:
    """
    Provide a ResultBuilder writing below the configured results directory.
    """
    return ResultBuilder(load_settings().results_dir)


def get_application_service() -> SpeicherApplication:
    """
    Provide a SpeicherApplication configured for API usage.
    """
    persistence = get_persistence_service()
    # API does not save report files by default
    return SpeicherApplication(
        save_outputs=False,
        persistence=persistence,
        result_builder=None,
    )
