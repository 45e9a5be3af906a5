"""Test dei comandi da terminale."""
import pytest

from prenotazioni import cli
from prenotazioni.config import get_settings


@pytest.fixture
def db_env(tmp_path, monkeypatch):
    monkeypatch.setenv("DB_URL", f"sqlite:///{tmp_path / 'cli.sqlite'}")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_init_creates_schema(db_env, capsys):
    assert cli.main(["init"]) == 0
    assert "Schema DB creato" in capsys.readouterr().out


def test_register_then_duplicate(db_env, capsys):
    assert cli.main(["register", "--username", "alice", "--password", "segreta"]) == 0
    assert cli.main(["register", "--username", "alice", "--password", "segreta"]) == 1

    assert "Username already exists" in capsys.readouterr().err


def test_book_and_list(db_env, capsys):
    book = ["book", "--patient", "Alice Rossi", "--doctor", "Dr. A", "--date", "2024-01-01", "--slot", "10:00"]

    assert cli.main(book + ["--username", "alice"]) == 0
    assert cli.main(book + ["--username", "bob"]) == 1
    capsys.readouterr()

    assert cli.main(["list", "--username", "alice"]) == 0
    assert capsys.readouterr().out.strip() == "Dr. A | 2024-01-01 | 10:00"

    assert cli.main(["list"]) == 0
    assert capsys.readouterr().out.strip() == "Alice Rossi | Dr. A | 2024-01-01 | 10:00"


def test_list_empty(db_env, capsys):
    assert cli.main(["list"]) == 0
    assert "Nessun appuntamento." in capsys.readouterr().out


def test_missing_db_url_refuses_to_start(monkeypatch, capsys):
    monkeypatch.delenv("DB_URL", raising=False)
    monkeypatch.setattr(cli, "get_settings", lambda: cli.Settings.from_env({}))

    assert cli.main(["list"]) == 1
    assert "DB_URL" in capsys.readouterr().err


def test_serve_runs_uvicorn_factory(db_env, monkeypatch):
    monkeypatch.delenv("HOST", raising=False)
    get_settings.cache_clear()
    calls = {}
    monkeypatch.setattr(cli.uvicorn, "run", lambda target, **kwargs: calls.update(target=target, **kwargs))

    assert cli.main(["serve", "--port", "8001"]) == 0

    assert calls["target"] == "prenotazioni.api_main:create_app"
    assert calls["factory"] is True
    assert calls["port"] == 8001
    assert calls["host"] == "127.0.0.1"
