# caixa/usecases/despesas.py
"""
UC: Registrar DESPESAS (única, edição, remoção e em lote).

Obs.:
- ``validate_expense`` rejeita valor ausente (nunca vira zero) e categorias
  fora da lista fixa.
- Edição é substituição completa do registro pelo id.
"""

from __future__ import annotations

import sqlite3
from typing import Any, Dict, List

from caixa.config import DB_PATH
from caixa.adapters.planilhas import load_despesas_from_xlsx
from caixa.domain.models import Expense, to_date
from caixa.domain.policies import ValidationError, validate_expense
from caixa.infra.repositories import DespesaRepo
from caixa.infra.logger import (
    log_transaction, log_despesa, log_database_operation,
    log_system_event, log_file_operation
)


def _to_expense(rec: Dict[str, Any], expense_id: str = "") -> Expense:
    clean = validate_expense(rec)
    return Expense(
        id=expense_id,
        description=clean["description"],
        amount=clean["amount"],
        category=clean["category"],
        date=to_date(clean["date"]),
    )


def run_despesa_listar(db_path: str = DB_PATH) -> List[Expense]:
    return DespesaRepo(db_path).list_expenses()


def run_despesa_criar(rec: Dict[str, Any], db_path: str = DB_PATH) -> Expense:
    try:
        expense = DespesaRepo(db_path).create(_to_expense(rec))
    except Exception as e:
        log_transaction("despesa_create", rec, error=str(e))
        raise
    log_despesa("create", expense.id, expense.amount, categoria=expense.category)
    log_database_operation("despesa", "INSERT", 1, id=expense.id)
    return expense


def run_despesa_editar(expense_id: str, rec: Dict[str, Any], db_path: str = DB_PATH) -> Expense:
    try:
        expense = DespesaRepo(db_path).update(expense_id, _to_expense(rec, expense_id))
    except Exception as e:
        log_transaction("despesa_update", {"id": expense_id, **rec}, error=str(e))
        raise
    log_despesa("update", expense_id, expense.amount)
    return expense


def run_despesa_remover(expense_id: str, db_path: str = DB_PATH) -> None:
    DespesaRepo(db_path).delete(expense_id)
    log_despesa("delete", expense_id)
    log_database_operation("despesa", "DELETE", 1, id=expense_id)


def run_despesa_lote(path: str, db_path: str = DB_PATH) -> Dict[str, Any]:
    """Lê um XLSX de DESPESAS e insere as linhas válidas."""
    log_system_event("despesa_lote_start", {"file_path": path})
    log_file_operation("import", path)

    try:
        rows = load_despesas_from_xlsx(path)
        log_file_operation("import", path, rows_processed=len(rows))

        repo = DespesaRepo(db_path)
        sucessos = 0
        erros: List[Dict[str, Any]] = []
        for linha, row in enumerate(rows, start=2):
            try:
                expense = repo.create(_to_expense(row))
            except ValidationError as e:
                erros.append({"linha": linha, "mensagem": str(e)})
                continue
            except sqlite3.IntegrityError as e:
                erros.append({"linha": linha, "mensagem": f"recusada pelo banco: {e}"})
                continue
            sucessos += 1
            log_despesa("import", expense.id, expense.amount, linha=linha)

        log_database_operation("despesa", "INSERT_MANY", sucessos, file_path=path)
        result = {"tipo": "Despesas", "arquivo": path, "total": len(rows), "sucessos": sucessos, "erros": erros}
        log_transaction("despesa_lote", {"file": path}, result={"sucessos": sucessos, "erros": len(erros)})
        return result

    except Exception as e:
        error_msg = str(e)
        log_transaction("despesa_lote", {"file": path}, error=error_msg)
        log_system_event("despesa_lote_error", {"file_path": path, "error": error_msg}, level="error")
        raise
