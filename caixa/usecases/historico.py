# caixa/usecases/historico.py
"""
Histórico de vendas: consulta filtrada, detalhe e remoção.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from caixa.config import DB_PATH
from caixa.domain.models import Sale, date_components
from caixa.domain.periodo import filter_period, parse_ano_mes
from caixa.infra.repositories import VendaRepo
from caixa.infra.logger import log_venda, log_database_operation, log_system_event


def run_historico(
    data: Optional[str] = None,
    ano_mes: Optional[str] = None,
    db_path: str = DB_PATH,
) -> List[Dict[str, Any]]:
    """Lista vendas (resumo), mais recentes primeiro.

    ``data`` (YYYY-MM-DD) filtra um dia exato; ``ano_mes`` (YYYY-MM) filtra
    o período. Os dois podem ser combinados.
    """
    rows = VendaRepo(db_path).list_resumo()
    log_database_operation("vw_venda_resumo", "SELECT_ALL", len(rows))

    if ano_mes:
        year, month = parse_ano_mes(ano_mes)
        rows = filter_period(rows, year, month)
    if data:
        alvo = date_components(data)
        rows = [r for r in rows if date_components(r["date"]) == alvo]

    # ordenação estável: vendas do mesmo dia mantêm a ordem de gravação
    rows.sort(key=lambda r: date_components(r["date"]), reverse=True)
    return rows


def run_venda_detalhe(sale_id: str, db_path: str = DB_PATH) -> Optional[Sale]:
    return VendaRepo(db_path).get(sale_id)


def run_venda_remover(sale_id: str, db_path: str = DB_PATH) -> None:
    """Remove a venda inteira (itens em cascata)."""
    try:
        VendaRepo(db_path).delete(sale_id)
    except Exception as e:
        log_system_event("venda_delete_error", {"venda_id": sale_id, "error": str(e)}, level="error")
        raise
    log_venda("delete", sale_id)
    log_database_operation("venda", "DELETE", 1, venda_id=sale_id)
