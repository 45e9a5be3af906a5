from __future__ import annotations

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase

# Driver PostgreSQL usato quando l'URL non ne specifica uno
PG_DRIVER = "postgresql+psycopg://"


class Base(DeclarativeBase):
    """Base ORM per tutti i modelli."""
    pass


def normalizza_url(url: str) -> str:
    """postgres:// e postgresql:// (senza driver) -> postgresql+psycopg://"""
    for prefix in ("postgres://", "postgresql://"):
        if url.startswith(prefix):
            return PG_DRIVER + url[len(prefix):]
    return url


def build_engine(url: str, echo: bool = False) -> Engine:
    url = normalizza_url(url)
    # SQLite: la connessione viene usata dai thread del worker pool di FastAPI
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}

    return create_engine(
        url,
        echo=echo,              # True per vedere le query
        future=True,
        pool_pre_ping=True,
        connect_args=connect_args,
    )
