# caixa/infra/db.py
"""
Conexão com o SQLite usado como armazenamento das vendas, produtos e despesas.
"""

from __future__ import annotations

import os
import sqlite3
from contextlib import contextmanager
from typing import Iterator, Union


@contextmanager
def connect(db_path: Union[str, "os.PathLike[str]"]) -> Iterator[sqlite3.Connection]:
    """
    Abre uma conexão curta com:
    - foreign_keys ON (itens de venda são removidos em cascata)
    - row_factory = sqlite3.Row
    - commit ao sair, rollback se o bloco levantar exceção
    """
    conn = sqlite3.connect(os.fspath(db_path))
    try:
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON;")
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()
