"""Settings and data source configuration tests"""

import pytest
from pydantic import ValidationError

from ticket_service.config import DatabaseSettings, Settings


class TestDatabaseSettings:
    """DatabaseSettings URL building"""

    def test_url_from_parts(self):
        db = DatabaseSettings(
            driver="postgresql+asyncpg",
            host="db.internal",
            port=6543,
            user="tickets",
            password="s3cret",
            database="prueba",
            url=None,
        )

        url = db.sqlalchemy_url
        assert url.drivername == "postgresql+asyncpg"
        assert url.host == "db.internal"
        assert url.port == 6543
        assert url.username == "tickets"
        assert url.password == "s3cret"
        assert url.database == "prueba"

    def test_password_is_hidden_when_rendered(self):
        db = DatabaseSettings(user="tickets", password="s3cret", url=None)

        assert "s3cret" not in db.sqlalchemy_url.render_as_string(hide_password=True)
        assert "s3cret" not in repr(db)

    def test_url_overrides_parts(self):
        db = DatabaseSettings(
            host="ignored",
            url="postgresql+asyncpg://u:p@other:5432/tickets",
        )

        assert db.sqlalchemy_url.host == "other"
        assert db.is_sqlite is False

    def test_sqlite_memory(self):
        db = DatabaseSettings(driver="sqlite+aiosqlite", database=":memory:", url=None)

        assert db.is_sqlite is True
        assert db.sqlalchemy_url.database == ":memory:"
        assert db.sqlalchemy_url.host is None

    def test_defaults_carry_no_credentials(self, monkeypatch):
        monkeypatch.delenv("DB_USER", raising=False)
        monkeypatch.delenv("DB_PASSWORD", raising=False)

        db = DatabaseSettings(_env_file=None)

        assert db.name == "ticket"
        assert db.user is None
        assert db.password is None

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("DB_HOST", "mongo-like-host")
        monkeypatch.setenv("DB_PORT", "15432")
        monkeypatch.setenv("DB_DATABASE", "prueba")

        db = DatabaseSettings(_env_file=None)

        assert db.host == "mongo-like-host"
        assert db.port == 15432
        assert db.database == "prueba"


class TestSettings:
    """Application settings"""

    def test_invalid_environment(self):
        with pytest.raises(ValidationError):
            Settings(environment="qa")

    def test_log_level_is_normalized(self):
        assert Settings(log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            Settings(log_level="chatty")

    def test_debug_turns_on_sql_echo(self):
        db = DatabaseSettings(driver="sqlite+aiosqlite", database=":memory:", url=None)

        assert Settings(debug=True, database=db).datasource_settings.echo is True
        assert Settings(debug=False, database=db).datasource_settings.echo is False
