from __future__ import annotations

from sqlalchemy import Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from .db import Base

RUOLO_DEFAULT = "user"


class Utente(Base):
    """
    Utente registrato.
    - username univoco (vincolo anche a livello DB)
    - password: hash passlib, mai in chiaro
    """
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    password: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default=RUOLO_DEFAULT, server_default=RUOLO_DEFAULT)

    def __repr__(self) -> str:
        return f"Utente({self.username}, {self.role})"


class Appuntamento(Base):
    __tablename__ = "appointments"
    __table_args__ = (
        # Evita doppie prenotazioni dello stesso slot (stesso medico + giorno + orario)
        UniqueConstraint("doctor", "date", "slot", name="uq_appointments_doctor_date_slot"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    patient_name: Mapped[str] = mapped_column(String(200), nullable=False)
    doctor: Mapped[str] = mapped_column(String(120), nullable=False)
    date: Mapped[str] = mapped_column(String(10), nullable=False)  # YYYY-MM-DD
    slot: Mapped[str] = mapped_column(String(20), nullable=False)
    # riferimento all'utente che ha prenotato (non è una foreign key)
    username: Mapped[str] = mapped_column(String(100), nullable=False, index=True)

    def __repr__(self) -> str:
        return f"Appuntamento({self.doctor}, {self.date} {self.slot}, {self.patient_name})"
