# caixa/adapters/planilhas.py
"""
Loaders para planilhas (XLSX) de PRODUTOS e DESPESAS.

Essas funções:
- leem planilhas XLSX usando pandas;
- normalizam cabeçalhos (acentos, variações, sinônimos em PT/ES/EN);
- retornam listas de dicionários com os nomes de campo do modelo de dados.

Observações:
- Não validam regras de negócio; isso é feito por ``caixa.domain.policies``.
- Valores monetários são interpretados com ``parse_valor`` (vírgula ou ponto).
- Datas são normalizadas para ISO (YYYY-MM-DD) por decomposição de componentes.
- Células vazias viram None (nunca string vazia nem zero).
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional

import pandas as pd

from caixa.adapters.parsers import parse_data, parse_valor


# ---------------------------
# utilitários de normalização
# ---------------------------

_ALIASES = {
    # produto
    "id": "id",
    "codigo": "id",
    "cod": "id",
    "nome": "name",
    "produto": "name",
    "nombre": "name",
    "name": "name",
    "preco": "price",
    "preco unitario": "price",
    "precio": "price",
    "valor unitario": "price",
    "price": "price",
    "categoria": "category",
    "category": "category",
    "estoque": "stock",
    "stock": "stock",
    "quantidade": "stock",

    # despesa
    "descricao": "description",
    "descripcion": "description",
    "description": "description",
    "valor": "amount",
    "monto": "amount",
    "amount": "amount",
    "data": "date",
    "fecha": "date",
    "date": "date",
}

# categorias de despesa aceitas em português/espanhol
_CATEGORIAS = {
    "aluguel": "rent",
    "alquiler": "rent",
    "servicos": "utilities",
    "servicios": "utilities",
    "salarios": "salaries",
    "sueldos": "salaries",
    "fornecedores": "suppliers",
    "proveedores": "suppliers",
    "manutencao": "maintenance",
    "mantenimiento": "maintenance",
    "impostos": "taxes",
    "impuestos": "taxes",
    "outros": "other",
    "otros": "other",
}


def _slug(s: str) -> str:
    """Normaliza texto: minúsculas, sem acentos, sem não-alfanumérico."""
    if s is None:
        return ""
    s = str(s).strip().lower()
    acentos = dict(zip("áàâãäéèêëíìîïóòôõöúùûüçñ", "aaaaaeeeeiiiiooooouuuucn"))
    s = "".join(acentos.get(ch, ch) for ch in s)
    s = re.sub(r"[^a-z0-9]+", " ", s)
    s = re.sub(r"\s+", " ", s).strip()
    return s


def _safe_get(row, key) -> Optional[Any]:
    """Lê um valor da linha tratando NA/vazio como None."""
    val = row.get(key)
    if val is None or pd.isna(val):
        return None
    if isinstance(val, str) and not val.strip():
        return None
    return val


def _normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Renomeia colunas com base em sinônimos/variações."""
    new_cols = {}
    for col in df.columns:
        key = _slug(col)
        new_cols[col] = _ALIASES.get(key, key)  # se não houver alias, mantém slug
    return df.rename(columns=new_cols)


def _categoria(val: Any) -> Optional[str]:
    if val is None:
        return None
    key = _slug(val)
    return _CATEGORIAS.get(key, key)


def _read(path: str) -> pd.DataFrame:
    # dtype string preserva formatos como "12,50" e "05/01/2026"
    df = pd.read_excel(path, dtype="string")
    return _normalize_columns(df)


# ---------------------------
# loaders públicos (XLSX)
# ---------------------------

def load_produtos_from_xlsx(path: str) -> List[Dict[str, Any]]:
    """Lê XLSX de PRODUTOS.

    Campos de saída (chaves do dict por linha):
      - id: str | None (gerado na gravação quando ausente)
      - name: str | None
      - price: float | None
      - category: str | None
      - stock: str | None (convertido na validação)
    """
    df = _read(path)
    out: List[Dict[str, Any]] = []
    for _, row in df.iterrows():
        price_raw = _safe_get(row, "price")
        out.append({
            "id": _safe_get(row, "id"),
            "name": _safe_get(row, "name"),
            "price": parse_valor(price_raw) if price_raw is not None else None,
            "category": _safe_get(row, "category"),
            "stock": _safe_get(row, "stock"),
        })
    return out


def load_despesas_from_xlsx(path: str) -> List[Dict[str, Any]]:
    """Lê XLSX de DESPESAS.

    Campos de saída (chaves do dict por linha):
      - description: str | None
      - amount: float | None (ausente continua None; a validação rejeita)
      - category: str | None (sinônimos PT/ES mapeados para a lista fixa)
      - date: ISO date | None
    """
    df = _read(path)
    out: List[Dict[str, Any]] = []
    for _, row in df.iterrows():
        amount_raw = _safe_get(row, "amount")
        out.append({
            "description": _safe_get(row, "description"),
            "amount": parse_valor(amount_raw) if amount_raw is not None else None,
            "category": _categoria(_safe_get(row, "category")),
            "date": parse_data(_safe_get(row, "date")),
        })
    return out
