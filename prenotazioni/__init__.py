"""
Backend prenotazioni appuntamenti.

Struttura:
- config.py         : impostazioni da ambiente / .env
- logging_config.py : configurazione logging
- exceptions.py     : tassonomia errori (400 / 401 / 500)
- db.py             : Base ORM ed engine SQLAlchemy
- models.py         : schema tabelle users / appointments
- gateway.py        : gateway DB (connessione diretta in pool oppure SQL via HTTP)
- security.py       : hash e verifica password
- services.py       : logica di dominio (registrazione, login, prenotazioni)
- api_main.py       : app FastAPI e rotte /api/*
- cli.py            : comandi da terminale (init, serve, register, book, list)
"""
