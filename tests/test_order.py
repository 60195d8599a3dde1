import time
import uuid
from decimal import Decimal

from yolo.order import Order, Side, timestamp


def test_side_opposite():
    assert Side.BID.opposite() is Side.ASK
    assert Side.ASK.opposite() is Side.BID


def test_side_str():
    assert str(Side.ASK.opposite()) == "bid"
    assert str(Side.BID.opposite()) == "ask"
    assert str(Order.bid(Decimal("1")).side) == "bid"
    assert str(Order.ask(Decimal("1")).side) == "ask"


def test_bid_and_ask_constructors():
    bid = Order.bid(Decimal("1.5"))
    ask = Order.ask(Decimal("2"))
    assert bid.side is Side.BID
    assert ask.side is Side.ASK
    assert bid.size == Decimal("1.5")
    assert ask.size == Decimal("2")


def test_new_orders_get_unique_ids():
    first = Order.new(Side.BID, Decimal("1"))
    second = Order.new(Side.BID, Decimal("1"))
    assert first.id != second.id
    assert first != second


def test_is_filled():
    order = Order.ask(Decimal("3"))
    assert not order.is_filled()
    order.size = Decimal("0.0")
    assert order.is_filled()


def test_equality_is_by_id():
    order_id = uuid.uuid4()
    a = Order(id=order_id, size=Decimal("1"), side=Side.BID, timestamp=1)
    b = Order(id=order_id, size=Decimal("9"), side=Side.ASK, timestamp=2)
    assert a == b
    assert hash(a) == hash(b)


def test_copy_is_independent():
    order = Order.bid(Decimal("5"))
    clone = order.copy()
    clone.size = Decimal("1")
    assert order.size == Decimal("5")
    assert clone == order
    assert clone.timestamp == order.timestamp


def test_timestamp_is_current_nanoseconds():
    before = time.time_ns()
    stamp = timestamp()
    after = time.time_ns()
    assert before <= stamp <= after


def test_new_order_is_stamped_with_current_time():
    before = time.time_ns()
    order = Order.ask(Decimal("1"))
    after = time.time_ns()
    assert before <= order.timestamp <= after