"""
Testes do logging das operações do caixa.

Os loggers gravam em arquivo só quando ``ENABLE_LOGGING`` está ligado; aqui
cada teste aponta o logger para um arquivo em ``tmp_path``.
"""

from datetime import date

from caixa.domain.cart import Cart
from caixa.domain.models import Product
from caixa.infra import logger as logmod
from caixa.infra.migrations import apply_migrations
from caixa.infra.views import create_views
from caixa.usecases.registrar_venda import CartSession, run_registrar_venda


def _use_tmp_logger(monkeypatch, tmp_path, attr, tipo):
    log_file = tmp_path / "logs" / f"{tipo}.log"
    lg = logmod.setup_logger(f"caixa.test.{tipo}", str(log_file))
    monkeypatch.setattr(logmod, attr, lg)
    monkeypatch.setitem(logmod.LOG_FILES, tipo, log_file)
    return log_file


def test_logging_disabled_writes_nothing(monkeypatch, tmp_path):
    monkeypatch.setattr(logmod, "ENABLE_LOGGING", False)
    monkeypatch.setattr(logmod, "ENABLE_OUTPUT", False)
    log_file = _use_tmp_logger(monkeypatch, tmp_path, "venda_logger", "vendas")

    logmod.log_venda("finalize", "v1", 10.0)
    assert not log_file.exists()
    assert "não encontrado" in logmod.get_log_summary("vendas")


def test_sale_checkout_is_logged(monkeypatch, tmp_path):
    monkeypatch.setattr(logmod, "ENABLE_LOGGING", True)
    vendas_log = _use_tmp_logger(monkeypatch, tmp_path, "venda_logger", "vendas")
    trans_log = _use_tmp_logger(monkeypatch, tmp_path, "transaction_logger", "transactions")
    _use_tmp_logger(monkeypatch, tmp_path, "database_logger", "database")
    _use_tmp_logger(monkeypatch, tmp_path, "system_logger", "system")

    db_path = str(tmp_path / "caixa_test.sqlite")
    apply_migrations(db_path)
    create_views(db_path)

    session = CartSession(Cart().add_item(Product("a", "Café", 10.0)))
    sale = run_registrar_venda(session, "cash", db_path=db_path, today=date(2026, 1, 5))
    run_registrar_venda(session, "cash", db_path=db_path)

    conteudo = vendas_log.read_text(encoding="utf-8")
    assert "VENDA_FINALIZE" in conteudo
    assert sale.id in conteudo
    assert "VENDA_DECLINED" in conteudo
    assert "TRANSACTION_SUCCESS: venda" in trans_log.read_text(encoding="utf-8")


def test_get_log_summary_last_lines(monkeypatch, tmp_path):
    monkeypatch.setattr(logmod, "ENABLE_LOGGING", True)
    _use_tmp_logger(monkeypatch, tmp_path, "system_logger", "system")

    for i in range(5):
        logmod.log_system_event(f"evento_{i}")

    resumo = logmod.get_log_summary("system", lines=2)
    assert "evento_3" in resumo and "evento_4" in resumo
    assert "evento_2" not in resumo
    assert "desconhecido" in logmod.get_log_summary("outro")
