import pytest

from todo_api.config import Settings
from todo_api.errors import UpdateValuesMissingError, classify, error_body


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("HOST", "PORT", "DATABASE_URL", "DATABASE_ECHO", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = Settings.from_env()
    assert settings == Settings()
    assert settings.port == 3000
    assert settings.database_url == "sqlite:///tasks.db"


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("DATABASE_URL", "postgresql://todo:secret@db/todo")
    monkeypatch.setenv("DATABASE_ECHO", "yes")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    settings = Settings.from_env()
    assert settings.port == 8080
    assert settings.database_url == "postgresql://todo:secret@db/todo"
    assert settings.database_echo is True
    assert settings.log_level == "DEBUG"


def test_invalid_port(monkeypatch):
    monkeypatch.setenv("PORT", "eighty")
    with pytest.raises(ValueError, match="PORT must be an integer"):
        Settings.from_env()


def test_invalid_bool(monkeypatch):
    monkeypatch.setenv("DATABASE_ECHO", "maybe")
    with pytest.raises(ValueError, match="DATABASE_ECHO must be a boolean"):
        Settings.from_env()


def test_error_body_for_store_error():
    body = error_body(UpdateValuesMissingError())
    assert body["error"] == "store_error"
    assert body["name"] == "UpdateValuesMissingError"
    assert classify(UpdateValuesMissingError()) == ("store_error", 500)
