from types import SimpleNamespace

import pytest

from reportdash import db
from reportdash.config import ConfigurationError


class FakeCursor:
    def __init__(self, conn):
        self.conn = conn
        self.description = [SimpleNamespace(name=c) for c in conn.columns]

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def execute(self, sql, params):
        self.conn.executed.append((sql, params))

    def fetchall(self):
        return self.conn.rows


class FakeConnection:
    def __init__(self, rows, columns):
        self.rows = rows
        self.columns = columns
        self.executed = []
        self.session = None
        self.closed = False

    def set_session(self, **kwargs):
        self.session = kwargs

    def cursor(self, cursor_factory=None):
        return FakeCursor(self)

    def close(self):
        self.closed = True


@pytest.fixture
def pg(monkeypatch):
    monkeypatch.setenv("DB_HOST", "db.example.supabase.co")
    monkeypatch.setenv("DB_USER", "postgres")
    conn = FakeConnection(rows=[], columns=["id", "title", "content", "created_at"])
    connects = []

    def fake_connect(**kwargs):
        connects.append(kwargs)
        return conn

    monkeypatch.setattr(db.psycopg2, "connect", fake_connect)
    conn.connects = connects
    return conn


def test_connection_is_read_only(pg):
    conn = db.get_pg_connection()
    assert conn.session == {"readonly": True}
    assert pg.connects[0]["sslmode"] == "require"
    assert pg.connects[0]["dbname"] == "postgres"


def test_connection_requires_host(monkeypatch):
    with pytest.raises(ConfigurationError, match="DB_HOST"):
        db.get_pg_connection()


def test_query_df_returns_rows_and_closes(pg):
    pg.rows = [{"id": 1, "title": "A", "content": "x", "created_at": "2024-01-02T00:00:00Z"}]
    df = db.query_df("SELECT * FROM reports")
    assert df["title"].tolist() == ["A"]
    assert pg.executed == [("SELECT * FROM reports", ())]
    assert pg.closed


def test_query_df_empty_keeps_columns(pg):
    df = db.query_df("SELECT id, title, content, created_at FROM reports")
    assert df.empty
    assert list(df.columns) == ["id", "title", "content", "created_at"]
    assert pg.closed


def test_supabase_client_requires_credentials():
    with pytest.raises(ConfigurationError, match="SUPABASE_URL"):
        db.get_supabase_client()
