from __future__ import annotations

import logging
from typing import Any, Mapping, Protocol

import requests
from sqlalchemy import text
from sqlalchemy.dialects import postgresql
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.schema import CreateIndex, CreateTable

from .config import Settings
from .db import Base, build_engine
from .exceptions import ConstraintViolation, DatabaseError

# Registra le tabelle nel metadata
from . import models  # noqa: F401

logger = logging.getLogger(__name__)

Row = dict[str, Any]

# SQLSTATE PostgreSQL per unique_violation
UNIQUE_VIOLATION = "23505"


class DatabaseGateway(Protocol):
    """
    Contratto unico verso il database: query parametrizzata -> righe.
    I parametri sono sempre passati a parte (segnaposto :nome), mai concatenati.
    """

    def execute(self, query: str, params: Mapping[str, Any] | None = None) -> list[Row]: ...

    def create_schema(self) -> None: ...

    def close(self) -> None: ...


# =========================
# Connessione diretta (pool SQLAlchemy)
# =========================
class SqlAlchemyGateway:
    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    @classmethod
    def from_url(cls, url: str, echo: bool = False) -> "SqlAlchemyGateway":
        return cls(build_engine(url, echo=echo))

    def execute(self, query: str, params: Mapping[str, Any] | None = None) -> list[Row]:
        # una transazione per statement: commit se ok, rollback su eccezioni
        try:
            with self.engine.begin() as conn:
                result = conn.execute(text(query), dict(params or {}))
                if not result.returns_rows:
                    return []
                return [dict(r) for r in result.mappings()]
        except IntegrityError as e:
            raise ConstraintViolation(str(e.orig)) from e
        except SQLAlchemyError as e:
            raise DatabaseError(str(e)) from e

    def create_schema(self) -> None:
        """Crea le tabelle se non esistono."""
        try:
            Base.metadata.create_all(bind=self.engine)
        except SQLAlchemyError as e:
            raise DatabaseError(str(e)) from e

    def close(self) -> None:
        self.engine.dispose()


# =========================
# SQL remoto via HTTP
# =========================
class HttpSqlGateway:
    """
    Client SQL "tunnelato" su HTTP.

    Protocollo:
    - POST <url> con JSON {"query": "...", "params": {...}}
    - risposta ok: {"rows": [{...}, ...]}
    - risposta errore: {"error": {"code": "<SQLSTATE>", "message": "..."}}
    """

    def __init__(
        self,
        url: str,
        token: str = "",
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self._session = session or requests.Session()
        if token:
            self._session.headers["Authorization"] = f"Bearer {token}"

    def execute(self, query: str, params: Mapping[str, Any] | None = None) -> list[Row]:
        payload = {"query": query, "params": dict(params or {})}
        try:
            r = self._session.post(self.url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise DatabaseError(f"Server SQL remoto non raggiungibile: {e}") from e

        try:
            body = r.json()
        except ValueError as e:
            raise DatabaseError(f"Risposta non JSON dal server SQL remoto (HTTP {r.status_code}).") from e

        if not isinstance(body, dict):
            raise DatabaseError("Risposta inattesa dal server SQL remoto.")

        error = body.get("error")
        if error is not None or r.status_code >= 400:
            code = error.get("code") if isinstance(error, dict) else None
            message = error.get("message") if isinstance(error, dict) else error
            if code == UNIQUE_VIOLATION:
                raise ConstraintViolation(message or "unique violation")
            raise DatabaseError(f"HTTP {r.status_code}: {message or 'errore sconosciuto'}")

        rows = body.get("rows") or []
        if not isinstance(rows, list) or not all(isinstance(row, dict) for row in rows):
            raise DatabaseError("Formato righe inatteso dal server SQL remoto.")
        return [dict(row) for row in rows]

    def create_schema(self) -> None:
        """Il server remoto è PostgreSQL: DDL compilato per quel dialetto."""
        dialect = postgresql.dialect()
        for table in Base.metadata.sorted_tables:
            self.execute(str(CreateTable(table, if_not_exists=True).compile(dialect=dialect)).strip())
            for index in table.indexes:
                self.execute(str(CreateIndex(index, if_not_exists=True).compile(dialect=dialect)).strip())

    def close(self) -> None:
        self._session.close()


def build_gateway(settings: Settings) -> DatabaseGateway:
    """URL http(s):// -> SQL via HTTP, qualsiasi altro URL -> connessione diretta."""
    if settings.db_url.startswith(("http://", "https://")):
        logger.info("Gateway DB: SQL via HTTP")
        return HttpSqlGateway(
            settings.db_url,
            token=settings.db_http_token,
            timeout=settings.db_http_timeout,
        )

    logger.info("Gateway DB: connessione diretta in pool")
    return SqlAlchemyGateway.from_url(settings.db_url, echo=settings.db_echo)
