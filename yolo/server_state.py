"""The exchange held by the running server: one order book per pair."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from yolo.order import Order
from yolo.order_book import OrderBook


@dataclass
class ServerState:
    """Order books keyed by trading pair name."""

    exchange: dict[str, OrderBook] = field(default_factory=dict)

    @classmethod
    def default(cls) -> ServerState:
        """A state with a single `usdt_eth` book holding one resting ask."""
        order_book = OrderBook()
        order_book.place_limit_order(Decimal("100.0"), Order.ask(Decimal("10")))
        return cls(exchange={"usdt_eth": order_book})