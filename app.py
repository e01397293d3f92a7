# app.py
"""
Entrypoint da aplicação.

Uso:
  python app.py migrate --db caixa.db
  python app.py produtos add --nome "Café" --preco 10
  python app.py venda --item <id>:2 --pagamento cash
  python app.py rel mensal --mes 2026-01
  python app.py pdv
"""

from caixa.adapters.cli import main

if __name__ == "__main__":
    main()
