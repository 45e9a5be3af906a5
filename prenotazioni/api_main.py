from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import APIRouter, Depends, FastAPI, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel

from .config import Settings, get_settings
from .exceptions import DatabaseError, PrenotazioniError, ServerError
from .gateway import DatabaseGateway, build_gateway
from .services import autentica, lista_appuntamenti, prenota_appuntamento, registra_utente

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")



# Schemi richieste
# I campi sono opzionali: la presenza è verificata dai servizi (400, non 422)

class RegisterIn(BaseModel):
    username: str | None = None
    password: str | None = None


class LoginIn(BaseModel):
    username: str | None = None
    password: str | None = None
    role: str | None = None


class AppuntamentoIn(BaseModel):
    patient: str | None = None
    doctor: str | None = None
    date: str | None = None
    slot: str | None = None
    username: str | None = None



# Dipendenze

def get_gateway(request: Request) -> DatabaseGateway:
    gw = request.app.state.gateway
    if gw is None:
        raise ServerError("Database not initialised")
    return gw



# Endpoints

@router.get("/test")
def api_test() -> dict[str, str]:
    return {"message": "API working"}


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(payload: RegisterIn, gw: DatabaseGateway = Depends(get_gateway)) -> dict[str, str]:
    try:
        registra_utente(gw, payload.username, payload.password)
    except DatabaseError as e:
        logger.exception("Errore DB in registrazione")
        raise ServerError("Server error while registering") from e
    return {"message": "Registered successfully"}


@router.post("/login")
def login(payload: LoginIn, gw: DatabaseGateway = Depends(get_gateway)) -> dict[str, str]:
    try:
        autentica(gw, payload.username, payload.password, payload.role)
    except DatabaseError as e:
        logger.exception("Errore DB in login")
        raise ServerError("Server error while logging in") from e
    return {"message": "Login ok"}


@router.post("/appointments", status_code=status.HTTP_201_CREATED)
def crea_appuntamento(payload: AppuntamentoIn, gw: DatabaseGateway = Depends(get_gateway)) -> dict[str, str]:
    try:
        prenota_appuntamento(
            gw,
            patient=payload.patient,
            doctor=payload.doctor,
            date=payload.date,
            slot=payload.slot,
            username=payload.username,
        )
    except DatabaseError as e:
        logger.exception("Errore DB in prenotazione")
        raise ServerError("Server error while booking") from e
    return {"message": "Appointment booked"}


@router.get("/appointments")
def api_appuntamenti(
    username: str | None = Query(default=None),
    gw: DatabaseGateway = Depends(get_gateway),
) -> list[dict[str, Any]]:
    try:
        return lista_appuntamenti(gw, username)
    except DatabaseError as e:
        logger.exception("Errore DB in lettura appuntamenti")
        raise ServerError("Server error while fetching") from e



# Gestione errori -> {"message": ...}

async def _errore_applicativo(request: Request, exc: PrenotazioniError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


async def _richiesta_non_valida(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"message": "Invalid request body"})



# App

def create_app(settings: Settings | None = None, gateway: DatabaseGateway | None = None) -> FastAPI:
    """
    Costruisce l'app.
    - gateway passato dal chiamante: lo usa così com'è e non lo chiude
    - altrimenti lo crea all'avvio (con le tabelle) e lo chiude allo shutdown
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = app.state.gateway is None
        if owned:
            app.state.gateway = build_gateway(settings)
        try:
            app.state.gateway.create_schema()
            logger.info("Gateway DB pronto")
            yield
        finally:
            if owned:
                app.state.gateway.close()
                app.state.gateway = None
                logger.info("Gateway DB chiuso")

    app = FastAPI(title="Prenotazioni API", version="1.0.0", lifespan=lifespan)
    app.state.gateway = gateway

    app.add_exception_handler(PrenotazioniError, _errore_applicativo)
    app.add_exception_handler(RequestValidationError, _richiesta_non_valida)
    app.include_router(router)

    # Statici dopo le rotte API: index.html, css, js
    if settings.static_dir.is_dir():
        app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")
        logger.info("File statici da %s", settings.static_dir)

    return app
