"""Orders, order sides and the clock used to stamp them."""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field, replace
from decimal import Decimal
from enum import Enum


def timestamp() -> int:
    """Return the current UTC time in nanoseconds since the epoch."""
    return time.time_ns()


class Side(Enum):
    """The side of the book an order belongs to."""

    BID = "bid"
    ASK = "ask"

    def opposite(self) -> Side:
        """Return the other side of the book."""
        return Side.ASK if self is Side.BID else Side.BID

    def __str__(self) -> str:
        return self.value


@dataclass(eq=False)
class Order:
    """An order of a given size on one side of the book.

    Two orders are equal when they share the same id.
    """

    id: uuid.UUID
    size: Decimal
    side: Side
    timestamp: int = field(default_factory=timestamp)

    @classmethod
    def new(cls, side: Side, size: Decimal) -> Order:
        """Create an order with a fresh id, stamped with the current time."""
        return cls(id=uuid.uuid4(), size=size, side=side, timestamp=timestamp())

    @classmethod
    def bid(cls, size: Decimal) -> Order:
        """Create a new bid order."""
        return cls.new(Side.BID, size)

    @classmethod
    def ask(cls, size: Decimal) -> Order:
        """Create a new ask order."""
        return cls.new(Side.ASK, size)

    def is_filled(self) -> bool:
        """Whether nothing of the order is left to fill."""
        return self.size == 0

    def copy(self) -> Order:
        """Return an independent copy of this order."""
        return replace(self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Order):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)