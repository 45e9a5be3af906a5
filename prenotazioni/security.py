from __future__ import annotations

from passlib.context import CryptContext

# pbkdf2_sha256: hash salato, nessuna dipendenza nativa
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return pwd_context.verify(password, password_hash)
    except ValueError:
        # valore salvato non riconosciuto come hash (es. vecchie password in chiaro)
        return False
