# caixa/usecases/catalogo.py
"""
UC: Catálogo de produtos.
- run_produto_criar / run_produto_editar / run_produto_remover / run_produto_listar
- run_produto_listar(busca=...): filtra por nome (sem diferenciar maiúsculas) ou código
- run_produto_lote(path): importa produtos de um XLSX

Obs.:
- Todo registro passa por ``validate_product`` antes de chegar ao banco.
- Editar um produto não altera vendas já gravadas (itens são snapshots).
"""

from __future__ import annotations

import sqlite3
from typing import Any, Dict, List, Optional

from caixa.config import DB_PATH
from caixa.adapters.planilhas import load_produtos_from_xlsx
from caixa.domain.models import Product
from caixa.domain.policies import ValidationError, validate_product
from caixa.infra.repositories import ProdutoRepo
from caixa.infra.logger import (
    log_transaction, log_database_operation, log_system_event, log_file_operation
)


def _to_product(rec: Dict[str, Any], product_id: str = "") -> Product:
    clean = validate_product(rec)
    return Product(id=product_id, **clean)


def run_produto_listar(db_path: str = DB_PATH, busca: Optional[str] = None) -> List[Product]:
    produtos = ProdutoRepo(db_path).list_products()
    log_database_operation("produto", "SELECT_ALL", len(produtos))
    if busca:
        produtos = filtrar_produtos(produtos, busca)
    return produtos


def filtrar_produtos(produtos: List[Product], termo: str) -> List[Product]:
    """Produtos cujo nome contém ``termo`` (casefold) ou cujo código é ``termo``."""
    alvo = termo.strip().casefold()
    if not alvo:
        return list(produtos)
    return [p for p in produtos if alvo in p.name.casefold() or p.id.casefold() == alvo]


def run_produto_criar(rec: Dict[str, Any], db_path: str = DB_PATH) -> Product:
    try:
        product = ProdutoRepo(db_path).create(_to_product(rec, str(rec.get("id") or "")))
    except Exception as e:
        log_transaction("produto_create", rec, error=str(e))
        raise
    log_database_operation("produto", "INSERT", 1, id=product.id)
    log_transaction("produto_create", rec, result=product.id)
    return product


def run_produto_editar(product_id: str, rec: Dict[str, Any], db_path: str = DB_PATH) -> Product:
    try:
        product = ProdutoRepo(db_path).update(product_id, _to_product(rec, product_id))
    except Exception as e:
        log_transaction("produto_update", {"id": product_id, **rec}, error=str(e))
        raise
    log_database_operation("produto", "UPDATE", 1, id=product_id)
    return product


def run_produto_remover(product_id: str, db_path: str = DB_PATH) -> None:
    ProdutoRepo(db_path).delete(product_id)
    log_database_operation("produto", "DELETE", 1, id=product_id)


def run_produto_lote(path: str, db_path: str = DB_PATH) -> Dict[str, Any]:
    """Lê um XLSX de produtos e insere as linhas válidas.

    Linhas inválidas são puladas e reportadas em ``erros`` (linha da planilha,
    contando o cabeçalho como linha 1).
    """
    log_system_event("produto_lote_start", {"file_path": path})
    rows = load_produtos_from_xlsx(path)
    log_file_operation("import", path, rows_processed=len(rows))

    repo = ProdutoRepo(db_path)
    sucessos = 0
    erros: List[Dict[str, Any]] = []
    for linha, row in enumerate(rows, start=2):
        try:
            repo.create(_to_product(row, str(row.get("id") or "")))
            sucessos += 1
        except ValidationError as e:
            erros.append({"linha": linha, "mensagem": str(e)})
        except sqlite3.IntegrityError as e:
            # código repetido (no catálogo ou na própria planilha)
            erros.append({"linha": linha, "mensagem": f"produto já cadastrado: {row.get('id')} ({e})"})

    log_database_operation("produto", "INSERT_MANY", sucessos, file_path=path)
    result = {"tipo": "Produtos", "arquivo": path, "total": len(rows), "sucessos": sucessos, "erros": erros}
    log_transaction("produto_lote", {"file": path}, result={"sucessos": sucessos, "erros": len(erros)})
    return result
