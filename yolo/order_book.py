"""The order book: resting limit orders on both sides and market order matching."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from decimal import Decimal

from sortedcontainers import SortedDict

from yolo.limit import Limit, OrderMatch
from yolo.order import Order, Side


class OrderBookError(Exception):
    """Base class for errors raised by the order book."""


class InconsistentStateError(OrderBookError):
    """The order book's internal structures disagree with each other."""

    def __init__(self) -> None:
        super().__init__("inconsistent order book state")


class LimitNotFoundError(OrderBookError):
    """No price level exists at the requested price."""

    def __init__(self, price: Decimal) -> None:
        super().__init__(f"limit at price `{price}` not found")
        self.price = price


class OrderNotFoundError(OrderBookError):
    """No resting order has the requested id."""

    def __init__(self, id: uuid.UUID) -> None:
        super().__init__(f"order `{id}` not found")
        self.id = id


class NotEnoughVolumeError(OrderBookError):
    """The opposite side of the book cannot fill a market order."""

    def __init__(self, side: Side, expected_volume: Decimal, actual_volume: Decimal) -> None:
        super().__init__(
            f"not enough total volume in {side.opposite()} = {actual_volume}, "
            f"expected at least {expected_volume}"
        )
        self.side = side
        self.expected_volume = expected_volume
        self.actual_volume = actual_volume


def _descending(price: Decimal) -> Decimal:
    return -price


@dataclass
class OrderBook:
    """Price levels for asks (lowest first) and bids (highest first)."""

    asks: SortedDict = field(default_factory=SortedDict)
    bids: SortedDict = field(default_factory=lambda: SortedDict(_descending))
    ask_total_volume: Decimal = Decimal("0")
    bid_total_volume: Decimal = Decimal("0")
    order_index: dict[uuid.UUID, tuple[Side, Decimal]] = field(default_factory=dict)

    def _ensure_volume(self, order: Order) -> None:
        total_volume = self.ask_total_volume if order.side is Side.BID else self.bid_total_volume
        if order.size > total_volume:
            raise NotEnoughVolumeError(order.side, order.size, total_volume)

    def cancel_order(self, id: uuid.UUID) -> Order:
        """Remove a resting order and return it.

        Raises OrderNotFoundError if no order with this id rests in the book.
        """
        try:
            side, price = self.order_index.pop(id)
        except KeyError:
            raise OrderNotFoundError(id) from None

        if side is Side.BID:
            cancelled = self._cancel_from(self.bids, id, price)
            if cancelled is not None:
                self.bid_total_volume -= cancelled.size
        else:
            cancelled = self._cancel_from(self.asks, id, price)
            if cancelled is not None:
                self.ask_total_volume -= cancelled.size

        if cancelled is None:
            raise OrderNotFoundError(id)
        return cancelled

    @staticmethod
    def _cancel_from(levels: SortedDict, id: uuid.UUID, price: Decimal) -> Order | None:
        limit = levels.get(price)
        if limit is None:
            return None
        removed = limit.remove_order(id)
        if removed is None:
            return None
        if limit.is_empty():
            del levels[price]
        return removed

    def place_market_order(self, order: Order) -> list[OrderMatch]:
        """Fill the order against the opposite side, best price first.

        The order's size is reduced in place. Raises NotEnoughVolumeError,
        leaving the book untouched, if the opposite side is too thin.
        """
        self._ensure_volume(order)

        if order.side is Side.BID:
            matches = self._fill_against(self.asks, order)
            self.ask_total_volume -= sum((m.size_filled for m in matches), Decimal("0"))
        else:
            matches = self._fill_against(self.bids, order)
            self.bid_total_volume -= sum((m.size_filled for m in matches), Decimal("0"))
        return matches

    @staticmethod
    def _fill_against(levels: SortedDict, order: Order) -> list[OrderMatch]:
        matches: list[OrderMatch] = []
        empty_prices: list[Decimal] = []

        for price, limit in levels.items():
            if order.is_filled():
                break
            matches.extend(limit.fill(order))
            if limit.is_empty():
                empty_prices.append(price)

        for price in empty_prices:
            del levels[price]

        return matches

    def place_limit_order(self, price: Decimal, order: Order) -> None:
        """Rest a copy of the order at the given price."""
        self.order_index[order.id] = (order.side, price)

        if order.side is Side.ASK:
            self.ask_total_volume += order.size
            levels = self.asks
        else:
            self.bid_total_volume += order.size
            levels = self.bids

        limit = levels.get(price)
        if limit is None:
            limit = Limit(price)
            levels[price] = limit
        limit.add_order(order)