"""Shapes of the orders, matches and books the server returns."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from yolo.limit import OrderMatch
from yolo.order import Order, Side
from yolo.order_book import OrderBook


def order_to_dict(order: Order, price: Decimal) -> dict[str, Any]:
    """Describe a resting order at the given price."""
    return {
        "id": str(order.id),
        "price": price,
        "size": order.size,
        "timestamp": order.timestamp,
    }


def matched_order_to_dict(order_match: OrderMatch, order: Order) -> dict[str, Any]:
    """Describe a match from the point of view of the incoming order.

    The id is that of the resting order on the other side.
    """
    counterpart = order_match.ask if order.side is Side.BID else order_match.bid
    return {
        "id": str(counterpart.id),
        "price": order_match.price,
        "size": order_match.size_filled,
    }


def order_book_to_dict(order_book: OrderBook) -> dict[str, Any]:
    """Describe every resting order of a book, best prices first."""
    return {
        "asks": [
            order_to_dict(order, price)
            for price, limit in order_book.asks.items()
            for order in limit.orders_by_uuid.values()
        ],
        "bids": [
            order_to_dict(order, price)
            for price, limit in order_book.bids.items()
            for order in limit.orders_by_uuid.values()
        ],
        "ask_total_volume": order_book.ask_total_volume,
        "bid_total_volume": order_book.bid_total_volume,
    }