"""
Utilidades de parsing para valores digitados no terminal ou lidos de planilhas.

Este módulo interpreta strings de valores monetários (com vírgula ou ponto
decimal, com ou sem símbolo de moeda), datas de calendário e a notação
``ID[:QTD]`` usada pela CLI para montar o carrinho. As datas são sempre
decompostas em (ano, mês, dia), nunca convertidas via fuso horário.
"""

from __future__ import annotations

import re
from datetime import date
from typing import Optional, Tuple

_NUM_RE = re.compile(r"[-+]?\d[\d.,]*")
_ISO_RE = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})")
_BR_RE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{2}|\d{4})$")


def parse_valor(txt) -> Optional[float]:
    """Interpreta um valor monetário.

    O último separador (vírgula ou ponto) seguido de 1 ou 2 dígitos é tratado
    como separador decimal; os demais são separadores de milhar.

    Exemplos:
        "10"          → 10.0
        "12,50"       → 12.5
        "$ 1.234,56"  → 1234.56
        "1,234.56"    → 1234.56
        "abc"         → None

    Args:
        txt: Texto (ou número) a ser interpretado.

    Returns:
        O valor como float, ou None se não for possível interpretar.
    """
    if txt is None:
        return None
    if isinstance(txt, (int, float)) and not isinstance(txt, bool):
        return float(txt)
    s = str(txt).strip()
    if not s:
        return None
    m = _NUM_RE.search(s)
    if not m:
        return None
    num = m.group(0)
    last = max(num.rfind(","), num.rfind("."))
    if last != -1 and 1 <= len(num) - last - 1 <= 2:
        inteiro = re.sub(r"[.,]", "", num[:last])
        num = f"{inteiro}.{num[last + 1:]}"
    else:
        num = re.sub(r"[.,]", "", num)
    try:
        return float(num)
    except ValueError:
        return None


def parse_data(txt) -> Optional[str]:
    """Converte ``YYYY-MM-DD`` (ou timestamp ISO) e ``DD/MM/AAAA`` para ISO.

    Retorna None para texto vazio ou data inexistente (ex.: 31/02/2026).
    """
    if txt is None:
        return None
    if isinstance(txt, date):
        return date(txt.year, txt.month, txt.day).isoformat()
    s = str(txt).strip()
    if not s:
        return None
    m = _ISO_RE.match(s)
    if m:
        y, mo, d = int(m.group(1)), int(m.group(2)), int(m.group(3))
    else:
        m = _BR_RE.match(s)
        if not m:
            return None
        d, mo, y = int(m.group(1)), int(m.group(2)), int(m.group(3))
        if y < 100:
            y += 2000
    try:
        return date(y, mo, d).isoformat()
    except ValueError:
        return None


def parse_item_spec(txt: str) -> Tuple[Optional[str], int]:
    """Interpreta ``"ID"`` ou ``"ID:QTD"``.

    Exemplos:
        "p1"    → ("p1", 1)
        "p2:3"  → ("p2", 3)
        ":3"    → (None, 3)

    Raises:
        ValueError: se a quantidade não for um inteiro positivo.
    """
    s = (txt or "").strip()
    pid, _, qtd = s.partition(":")
    pid = pid.strip() or None
    if not qtd.strip():
        return pid, 1
    try:
        n = int(qtd)
    except ValueError:
        raise ValueError(f"quantidade inválida em {txt!r}")
    if n <= 0:
        raise ValueError(f"quantidade deve ser maior que 0 em {txt!r}")
    return pid, n
