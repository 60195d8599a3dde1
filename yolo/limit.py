"""A price level of the order book and the matching of orders against it."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from decimal import Decimal

from sortedcontainers import SortedKeyList

from yolo.order import Order, Side


def _timestamp_key(order: Order) -> tuple[int, uuid.UUID]:
    return (order.timestamp, order.id)


@dataclass
class OrderMatch:
    """The outcome of matching a bid against an ask."""

    ask: Order
    bid: Order
    size_filled: Decimal
    price: Decimal


@dataclass
class Limit:
    """All resting orders at one price."""

    price: Decimal
    orders_by_uuid: dict[uuid.UUID, Order] = field(default_factory=dict)
    orders_by_timestamp: SortedKeyList = field(
        default_factory=lambda: SortedKeyList(key=_timestamp_key)
    )
    total_volume: Decimal = Decimal("0.0")

    def add_order(self, order: Order) -> None:
        """Add a copy of the order to this price level."""
        self.orders_by_uuid[order.id] = order.copy()
        self.orders_by_timestamp.add(order.copy())
        self.total_volume += order.size

    def remove_order(self, id: uuid.UUID) -> Order | None:
        """Remove and return the order with the given id, or None if absent."""
        order = self.orders_by_uuid.pop(id, None)
        if order is None:
            return None
        self.orders_by_timestamp.discard(order)
        self.total_volume -= order.size
        return order

    def is_empty(self) -> bool:
        """Whether no orders rest at this price."""
        return not self.orders_by_uuid

    def fill(self, order: Order) -> list[OrderMatch]:
        """Match the incoming order against resting orders.

        The incoming order's size is reduced in place; fully filled resting
        orders are removed from the level.
        """
        matches: list[OrderMatch] = []
        filled_ids: list[uuid.UUID] = []

        for limit_order_id, limit_order in self.orders_by_uuid.items():
            matches.append(_match_orders(order, limit_order, self.price))
            if limit_order.is_filled():
                filled_ids.append(limit_order_id)
            if order.is_filled():
                break

        for order_id in filled_ids:
            self.remove_order(order_id)

        return matches


def _match_orders(order1: Order, order2: Order, price: Decimal) -> OrderMatch:
    if order1.side is Side.BID and order2.side is Side.ASK:
        bid, ask = order1, order2
    elif order1.side is Side.ASK and order2.side is Side.BID:
        bid, ask = order2, order1
    else:
        raise ValueError("cannot match two orders on the same side")

    if ask.size >= bid.size:
        size_filled = bid.size
        ask.size -= bid.size
        bid.size = Decimal("0")
    else:
        size_filled = ask.size
        bid.size -= ask.size
        ask.size = Decimal("0")

    return OrderMatch(ask=ask.copy(), bid=bid.copy(), size_filled=size_filled, price=price)