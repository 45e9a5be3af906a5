from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Mapping

from dotenv import load_dotenv

from .exceptions import ConfigurationError

# Cartella statica di default: nella root del progetto (accanto a streamlit_app.py)
PROJECT_ROOT = Path(__file__).resolve().parents[1]
DEFAULT_STATIC_DIR = PROJECT_ROOT / "static"

_TRUE = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    db_url: str
    db_http_token: str = ""
    db_http_timeout: float = 30.0
    db_echo: bool = False
    host: str = "127.0.0.1"
    port: int = 5000
    static_dir: Path = DEFAULT_STATIC_DIR
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "Settings":
        """
        Legge le impostazioni dalle variabili d'ambiente.
        DB_URL è obbligatoria: senza il processo non parte.
        """
        env = os.environ if env is None else env

        db_url = (env.get("DB_URL") or "").strip()
        if not db_url:
            raise ConfigurationError("DB_URL non impostata (ambiente o file .env).")

        try:
            port = int(env.get("PORT", "5000"))
            timeout = float(env.get("DB_HTTP_TIMEOUT", "30"))
        except ValueError as e:
            raise ConfigurationError(f"Valore numerico non valido: {e}") from e

        return cls(
            db_url=db_url,
            db_http_token=env.get("DB_HTTP_TOKEN", ""),
            db_http_timeout=timeout,
            db_echo=env.get("DB_ECHO", "false").strip().lower() in _TRUE,
            host=env.get("HOST", "127.0.0.1"),
            port=port,
            static_dir=Path(env.get("STATIC_DIR") or DEFAULT_STATIC_DIR),
            log_level=env.get("LOG_LEVEL", "INFO"),
        )


@lru_cache()
def get_settings() -> Settings:
    """Impostazioni del processo (lette una volta, .env incluso)."""
    load_dotenv()
    return Settings.from_env()
