from __future__ import annotations


class ConfigurationError(Exception):
    """Configurazione mancante o non valida: il processo non deve partire."""


# =========================
# Errori del gateway DB
# =========================
class DatabaseError(Exception):
    """Qualsiasi errore di connessione o di query restituito dal gateway."""


class ConstraintViolation(DatabaseError):
    """Violazione di un vincolo di unicità a livello di storage."""


# =========================
# Errori applicativi (mappati su HTTP)
# =========================
class PrenotazioniError(Exception):
    status_code: int = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class BadRequest(PrenotazioniError):
    status_code = 400


class Conflict(PrenotazioniError):
    # Volutamente 400 e non 409: è il contratto dell'API
    status_code = 400


class Unauthorized(PrenotazioniError):
    status_code = 401


class ServerError(PrenotazioniError):
    status_code = 500
