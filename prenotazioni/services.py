from __future__ import annotations

import logging

from .exceptions import BadRequest, Conflict, ConstraintViolation, Unauthorized
from .gateway import DatabaseGateway, Row
from .models import RUOLO_DEFAULT
from .security import hash_password, verify_password

logger = logging.getLogger(__name__)


# =========================
# Utenti
# =========================
def registra_utente(gw: DatabaseGateway, username: str | None, password: str | None) -> None:
    """
    Use case: Registrazione.
    - username e password obbligatori (nessuna query se mancano)
    - username già presente -> Conflict
    - ruolo sempre "user"
    """
    logger.info("Registrazione utente: %s", username)

    if not username or not password:
        raise BadRequest("Username and password required")

    existing = gw.execute("SELECT id FROM users WHERE username = :username", {"username": username})
    if existing:
        raise Conflict("Username already exists")

    try:
        gw.execute(
            "INSERT INTO users (username, password, role) VALUES (:username, :password, :role)",
            {"username": username, "password": hash_password(password), "role": RUOLO_DEFAULT},
        )
    except ConstraintViolation as e:
        # registrazione concorrente con lo stesso username: decide il vincolo UNIQUE
        raise Conflict("Username already exists") from e


def autentica(
    gw: DatabaseGateway,
    username: str | None,
    password: str | None,
    role: str | None,
) -> None:
    """Login: username, password e ruolo devono corrispondere tutti. Nessun token emesso."""
    if not username or not password or not role:
        raise Unauthorized("Invalid credentials")

    rows = gw.execute(
        "SELECT password FROM users WHERE username = :username AND role = :role",
        {"username": username, "role": role},
    )
    if not any(verify_password(password, r["password"]) for r in rows):
        logger.info("Login fallito per %s (ruolo %s)", username, role)
        raise Unauthorized("Invalid credentials")


# =========================
# Prenotazioni
# =========================
def prenota_appuntamento(
    gw: DatabaseGateway,
    patient: str | None,
    doctor: str | None,
    date: str | None,
    slot: str | None,
    username: str | None,
) -> None:
    """
    Use case: Prenotare appuntamento.
    - tutti i campi obbligatori
    - slot (medico, giorno, orario) già occupato -> Conflict
    """
    if not all((patient, doctor, date, slot, username)):
        raise BadRequest("All fields required")

    existing = gw.execute(
        "SELECT id FROM appointments WHERE doctor = :doctor AND date = :date AND slot = :slot",
        {"doctor": doctor, "date": date, "slot": slot},
    )
    if existing:
        logger.info("Slot occupato: %s %s %s", doctor, date, slot)
        raise Conflict("Slot already booked")

    try:
        gw.execute(
            "INSERT INTO appointments (patient_name, doctor, date, slot, username) "
            "VALUES (:patient, :doctor, :date, :slot, :username)",
            {"patient": patient, "doctor": doctor, "date": date, "slot": slot, "username": username},
        )
    except ConstraintViolation as e:
        logger.info("Slot preso da una prenotazione concorrente: %s %s %s", doctor, date, slot)
        raise Conflict("Slot already booked") from e


def lista_appuntamenti(gw: DatabaseGateway, username: str | None = None) -> list[Row]:
    """
    Con username: solo le prenotazioni dell'utente (doctor, date, slot).
    Senza: tutte le prenotazioni (patient, doctor, date, slot).
    Ordinamento sempre per giorno e poi orario.
    """
    if username:
        return gw.execute(
            "SELECT doctor, date, slot FROM appointments WHERE username = :username ORDER BY date, slot",
            {"username": username},
        )

    return gw.execute("SELECT patient_name AS patient, doctor, date, slot FROM appointments ORDER BY date, slot")
