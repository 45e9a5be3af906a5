from __future__ import annotations

import argparse
import logging
import sys

import uvicorn

from .config import Settings, get_settings
from .exceptions import ConfigurationError, DatabaseError, PrenotazioniError
from .gateway import DatabaseGateway, build_gateway
from .logging_config import setup_logging
from .services import lista_appuntamenti, prenota_appuntamento, registra_utente

logger = logging.getLogger(__name__)


def cmd_init(args: argparse.Namespace, gw: DatabaseGateway) -> None:
    gw.create_schema()
    print("Schema DB creato (users, appointments).")


def cmd_register(args: argparse.Namespace, gw: DatabaseGateway) -> None:
    registra_utente(gw, args.username, args.password)
    print(f"Utente registrato: {args.username}")


def cmd_book(args: argparse.Namespace, gw: DatabaseGateway) -> None:
    prenota_appuntamento(
        gw,
        patient=args.patient,
        doctor=args.doctor,
        date=args.date,
        slot=args.slot,
        username=args.username,
    )
    print(f"Appuntamento prenotato: {args.doctor} {args.date} {args.slot}")


def cmd_list(args: argparse.Namespace, gw: DatabaseGateway) -> None:
    rows = lista_appuntamenti(gw, args.username)
    if not rows:
        print("Nessun appuntamento.")
        return

    for r in rows:
        print(" | ".join(str(v) for v in r.values()))


def cmd_serve(args: argparse.Namespace, settings: Settings) -> None:
    # factory: l'app (e il gateway) vengono creati dentro il processo uvicorn
    uvicorn.run(
        "prenotazioni.api_main:create_app",
        factory=True,
        host=args.host or settings.host,
        port=args.port or settings.port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="prenotazioni", description="Backend prenotazioni appuntamenti")
    sub = p.add_subparsers(required=True)

    p_init = sub.add_parser("init", help="Crea le tabelle")
    p_init.set_defaults(func=cmd_init)

    p_serve = sub.add_parser("serve", help="Avvia l'API HTTP")
    p_serve.add_argument("--host", default=None)
    p_serve.add_argument("--port", type=int, default=None)
    p_serve.add_argument("--reload", action="store_true")
    p_serve.set_defaults(func=cmd_serve)

    p_reg = sub.add_parser("register", help="Registra un utente")
    p_reg.add_argument("--username", required=True)
    p_reg.add_argument("--password", required=True)
    p_reg.set_defaults(func=cmd_register)

    p_book = sub.add_parser("book", help="Prenota appuntamento")
    p_book.add_argument("--patient", required=True)
    p_book.add_argument("--doctor", required=True)
    p_book.add_argument("--date", required=True, help="es: 2024-01-01")
    p_book.add_argument("--slot", required=True, help="es: 10:00")
    p_book.add_argument("--username", required=True)
    p_book.set_defaults(func=cmd_book)

    p_list = sub.add_parser("list", help="Elenca appuntamenti")
    p_list.add_argument("--username", default=None, help="Solo le prenotazioni di questo utente")
    p_list.set_defaults(func=cmd_list)

    return p


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = get_settings()
    except ConfigurationError as e:
        print(f"Configurazione non valida: {e}", file=sys.stderr)
        return 1

    setup_logging(settings.log_level)

    if args.func is cmd_serve:
        cmd_serve(args, settings)
        return 0

    gw = build_gateway(settings)
    try:
        gw.create_schema()  # garantisce tabelle
        args.func(args, gw)
    except PrenotazioniError as e:
        print(e.message, file=sys.stderr)
        return 1
    except DatabaseError as e:
        logger.exception("Errore DB")
        print(f"Errore database: {e}", file=sys.stderr)
        return 1
    finally:
        gw.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
