# yolo

An in-memory limit order book with a small JSON HTTP API on top of it.

The core keeps resting limit orders grouped by price level (`yolo.limit.Limit`).
Asks are kept lowest price first and bids highest price first. A market order
is first checked against the total volume on the opposite side and then filled
level by level; each fill is reported as a `yolo.limit.OrderMatch` holding the
bid, the ask, the size filled and the price.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Using the order book

```python
from decimal import Decimal

from yolo.order import Order
from yolo.order_book import OrderBook, NotEnoughVolumeError

book = OrderBook()
book.place_limit_order(Decimal("100.0"), Order.ask(Decimal("5")))
book.place_limit_order(Decimal("101.0"), Order.ask(Decimal("3")))

market = Order.bid(Decimal("6"))
for match in book.place_market_order(market):
    print(match.price, match.size_filled, match.ask.id)

assert market.is_filled()

try:
    book.place_market_order(Order.bid(Decimal("100")))
except NotEnoughVolumeError as err:
    print(err)
```

`place_market_order` reduces the size of the order passed to it. When the
opposite side holds too little volume it raises `NotEnoughVolumeError` and
leaves the book untouched.

`place_limit_order` rests a copy of the order at the given price. It does not
match it against the other side, even when the prices cross.

To cancel a resting limit order, pass its id to `OrderBook.cancel_order`. It
returns the cancelled order and raises `OrderNotFoundError` when the id is
unknown. All order book errors derive from `OrderBookError`.

## Running the server

```
yolo-server
```

The server reads its settings from the `config` directory in the current
working directory. It loads `config/base` first and then the file for the
environment that `SERVER_ENV` names: `local` (the default) or `production`,
in any case. Each file may be written as `.toml`, `.json`, `.yaml` or `.yml`.
Environment variables with the prefix `SERVER__` override single settings, for
example `SERVER__PORT=8080`.

A minimal `config/base.yaml`:

```yaml
host: 127.0.0.1
port: 8000
base_url: http://localhost:8000
```

The file for the environment, `config/local.yaml` or
`config/production.yaml`, must also be present. It may be empty.

Logging goes to standard error at the level named by `LOG_LEVEL` (default
`DEBUG`). A request that takes longer than 3 seconds is answered with 408.

The server starts with a single book, `usdt_eth`, which holds one resting ask
of 10 at price 100.0.

### Endpoints

| Method | Path | Body | Result |
|--------|------|------|--------|
| GET | `/order-book/{pair}` | | asks, bids and total volumes |
| POST | `/order-book/{pair}/order/limit` | `{"side": "bid", "size": "1.5", "price": "99.0"}` | 201 with the placed order |
| POST | `/order-book/{pair}/order/market` | `{"side": "ask", "size": "2"}` | 200 with a list of matched orders |
| DELETE | `/order-book/{pair}/{id}` | | 204 |

Sizes and prices may be sent as JSON numbers or strings; they are returned as
exact JSON numbers. Each matched order carries the id of the resting order on
the other side, the price and the size filled.

Errors are returned as a JSON body with a `code` and a `message`:

- an unknown pair returns 404 with code `null`;
- a body that is not the expected JSON, or an id that is not a UUID, returns a
  4xx status with code `1`;
- a failure inside the order book, such as too little volume or an unknown
  order id, returns 500 with code `2`:

```json
{"code": 2, "message": "Order book error: `...`"}
```

To embed the application in another ASGI server, call `yolo.server.build_app`;
`yolo.api.create_app` gives the bare application without the timeout and
logging middleware.

## What it does not do

The books live only in memory and are lost when the server stops. There is no
storage, no authentication, and no way to create a new trading pair over the
API.