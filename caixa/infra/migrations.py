# caixa/infra/migrations.py
"""
Migrações de schema usando PRAGMA user_version.

V1: params, produto, venda e itens de venda
V2: despesas e nome do cliente na venda
"""

from __future__ import annotations

from typing import List
from .db import connect


SCHEMA_V1: List[str] = [
    # Parâmetros K/V
    """
    CREATE TABLE IF NOT EXISTS params (
        chave TEXT PRIMARY KEY,
        valor TEXT
    );
    """,
    # Catálogo
    """
    CREATE TABLE IF NOT EXISTS produto (
        id TEXT PRIMARY KEY,
        nome TEXT NOT NULL,
        preco REAL NOT NULL,
        categoria TEXT,
        estoque INTEGER
    );
    """,
    # Cabeçalho da venda (total congelado na criação)
    """
    CREATE TABLE IF NOT EXISTS venda (
        id TEXT PRIMARY KEY,
        data TEXT NOT NULL,           -- YYYY-MM-DD
        total REAL NOT NULL,
        forma_pagamento TEXT NOT NULL
    );
    """,
    # Snapshot dos itens (nome/preço do momento da venda, sem FK para produto)
    """
    CREATE TABLE IF NOT EXISTS venda_item (
        venda_id TEXT NOT NULL,
        posicao INTEGER NOT NULL,
        produto_id TEXT NOT NULL,
        nome TEXT NOT NULL,
        preco_unitario REAL NOT NULL,
        quantidade INTEGER NOT NULL CHECK (quantidade > 0),
        PRIMARY KEY (venda_id, posicao),
        FOREIGN KEY (venda_id) REFERENCES venda(id) ON DELETE CASCADE
    );
    """,
]

SCHEMA_V2: List[str] = [
    """
    CREATE TABLE IF NOT EXISTS despesa (
        id TEXT PRIMARY KEY,
        descricao TEXT NOT NULL,
        valor REAL NOT NULL CHECK (valor >= 0),
        categoria TEXT NOT NULL,
        data TEXT NOT NULL            -- YYYY-MM-DD
    );
    """,
]


def _ensure_column(conn, table: str, column: str, ddl: str) -> None:
    """Adiciona coluna se não existir."""
    cur = conn.execute(f"PRAGMA table_info({table});")
    cols = [r[1] for r in cur.fetchall()]  # r[1] é o nome da coluna
    if column not in cols:
        conn.execute(f"ALTER TABLE {table} ADD COLUMN {ddl};")


def _apply_v1(conn) -> None:
    for sql in SCHEMA_V1:
        conn.executescript(sql)


def _apply_v2(conn) -> None:
    for sql in SCHEMA_V2:
        conn.executescript(sql)
    # SQLite não tem IF NOT EXISTS em ADD COLUMN
    _ensure_column(conn, "venda", "cliente", "cliente TEXT")


def apply_migrations(db_path: str) -> None:
    """Aplica migrações incrementais de acordo com PRAGMA user_version."""
    with connect(db_path) as conn:
        ver = conn.execute("PRAGMA user_version;").fetchone()[0] or 0

        if ver < 1:
            _apply_v1(conn)
            conn.execute("PRAGMA user_version = 1;")
            ver = 1

        if ver < 2:
            _apply_v2(conn)
            conn.execute("PRAGMA user_version = 2;")
            ver = 2
