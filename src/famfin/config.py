"""Runtime configuration read from the environment."""

import os
from functools import lru_cache
from pathlib import Path


class Settings:
    def __init__(self, database_path: str, locale: str, log_level: str) -> None:
        self.database_path = database_path
        self.locale = locale
        self.log_level = log_level


def _default_database_path() -> str:
    return str(Path.home() / ".famfin" / "famfin.db")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    database_path = os.getenv("FAMFIN_DB_PATH") or _default_database_path()
    locale = os.getenv("FAMFIN_LOCALE", "pt-BR")
    log_level = os.getenv("FAMFIN_LOG_LEVEL", "WARNING").upper()
    return Settings(database_path=database_path, locale=locale, log_level=log_level)
