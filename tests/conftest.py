"""Shared fixtures: a throwaway SQLite database and a Flask test client over it."""

import sqlite3

import pytest

from config import ServerConfig
from db.sqlite_client import SQLiteClient
from main import create_app

PRODUCTS = [
    (1, "Pen", 1.5, 100),
    (2, "Pencil", 0.75, 250),
    (3, "Fountain Pen", 35.0, 5),
    (4, "Notebook", 4.25, 40),
    (5, "Penguin Plush", 12.0, 5),
]


@pytest.fixture
def db_path(tmp_path):
    path = tmp_path / "data.db"
    conn = sqlite3.connect(path)
    conn.execute(
        "CREATE TABLE products ("
        " id INTEGER PRIMARY KEY,"
        " name TEXT NOT NULL,"
        " price REAL,"
        " stock INTEGER DEFAULT 0)"
    )
    conn.executemany("INSERT INTO products VALUES (?, ?, ?, ?)", PRODUCTS)
    conn.commit()
    conn.close()
    return path


@pytest.fixture
def sqlite_client(db_path):
    return SQLiteClient(str(db_path))


@pytest.fixture
def make_client(sqlite_client):
    """Build a Flask test client for the products table with config overrides."""

    def _make(**overrides):
        overrides.setdefault("table", "products")
        cfg = ServerConfig(db_path=sqlite_client.db_path, **overrides)
        app = create_app(cfg, sqlite_client)
        app.testing = True
        return app.test_client()

    return _make
