"""
Shopping cart for one in-progress transaction.

The cart is an immutable value: every transition (add, update, remove,
clear) returns a new ``Cart`` and leaves the original untouched. A terminal
that needs a "current cart" keeps a reference and swaps it after each
operation (see ``caixa.usecases.registrar_venda.CartSession``).

Lines are unique by product id and keep insertion order. A line never holds
a quantity of zero: any transition that would drive it to zero removes it.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import List, Tuple

from caixa.domain.models import CartLine, Product


class CartState(str, Enum):
    EMPTY = "empty"
    OPEN = "open"


@dataclass(frozen=True)
class Cart:
    lines: Tuple[CartLine, ...] = ()

    # ------------------------------------------------------------------
    # queries
    # ------------------------------------------------------------------

    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def state(self) -> CartState:
        return CartState.EMPTY if self.is_empty else CartState.OPEN

    @property
    def item_count(self) -> int:
        """Total units across all lines."""
        return sum(line.quantity for line in self.lines)

    def get_lines(self) -> List[CartLine]:
        return list(self.lines)

    def find(self, product_id: str) -> CartLine | None:
        for line in self.lines:
            if line.product_id == product_id:
                return line
        return None

    def compute_total(self) -> float:
        """Return the sum of ``unit_price * quantity`` over all lines.

        An empty cart totals 0. Pure: does not touch the cart.
        """
        return sum((line.line_total for line in self.lines), 0)

    get_total = compute_total

    # ------------------------------------------------------------------
    # transitions
    # ------------------------------------------------------------------

    def add_item(self, product: Product) -> "Cart":
        """Add one unit of ``product``.

        An existing line has its quantity incremented (its unit price is kept
        from the first add). Otherwise a new line is appended with quantity 1
        and the product's current price frozen as ``unit_price``.
        """
        pid = str(product.id)
        if self.find(pid) is not None:
            return Cart(tuple(
                replace(line, quantity=line.quantity + 1) if line.product_id == pid else line
                for line in self.lines
            ))
        new_line = CartLine(
            product_id=pid,
            name=product.name,
            unit_price=float(product.price),
            quantity=1,
        )
        return Cart(self.lines + (new_line,))

    def update_quantity(self, product_id: str, delta: int) -> "Cart":
        """Shift a line's quantity by ``delta``, clamped at zero.

        A line reaching zero is removed; otherwise it is replaced in place.
        Unknown product ids leave the cart unchanged.
        """
        if self.find(product_id) is None:
            return self
        out = []
        for line in self.lines:
            if line.product_id != product_id:
                out.append(line)
                continue
            qty = max(0, line.quantity + int(delta))
            if qty > 0:
                out.append(replace(line, quantity=qty))
        return Cart(tuple(out))

    def remove_item(self, product_id: str) -> "Cart":
        """Drop the line for ``product_id``; no-op when absent."""
        if self.find(product_id) is None:
            return self
        return Cart(tuple(line for line in self.lines if line.product_id != product_id))

    def clear(self) -> "Cart":
        return Cart()
