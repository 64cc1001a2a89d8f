"""CLI tests via click's CliRunner."""

import sqlite3

from click.testing import CliRunner

from bookshelf import __version__
from bookshelf.cli.main import cli


def test_version():
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_gen_secret_prints_fresh_value():
    runner = CliRunner()
    first = runner.invoke(cli, ["gen-secret"]).output.strip()
    second = runner.invoke(cli, ["gen-secret"]).output.strip()
    assert len(first) >= 32
    assert first != second


def test_init_db_creates_tables(tmp_path, monkeypatch):
    db_path = tmp_path / "cli.db"
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("BOOKSHELF_DATABASE_URL", f"sqlite+aiosqlite:///{db_path}")
    monkeypatch.setenv("BOOKSHELF_JWT_SECRET", "cli-test-secret")

    result = CliRunner().invoke(cli, ["init-db"])
    assert result.exit_code == 0, result.output
    assert "Database ready." in result.output

    with sqlite3.connect(db_path) as conn:
        tables = {row[0] for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")}
    assert {"users", "books", "movies", "sequence_counters"} <= tables


def test_init_db_without_secret_exits(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("BOOKSHELF_JWT_SECRET", raising=False)

    result = CliRunner().invoke(cli, ["init-db"])
    assert result.exit_code == 1
    assert "jwt_secret" in result.output
