"""HTTP handlers for the order books and the JSON error format they share."""

from __future__ import annotations

import json
import logging
import uuid
from decimal import Decimal, InvalidOperation
from enum import IntEnum
from typing import Any, ClassVar

from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import Response
from starlette.routing import Route

from yolo.models import matched_order_to_dict, order_book_to_dict, order_to_dict
from yolo.order import Order, Side
from yolo.order_book import OrderBook, OrderBookError
from yolo.server_state import ServerState

logger = logging.getLogger(__name__)


def _to_json(value: Any) -> str:
    """Encode a value as JSON, writing decimals as exact numbers."""
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, dict):
        items = (f"{json.dumps(str(key))}:{_to_json(item)}" for key, item in value.items())
        return "{" + ",".join(items) + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(_to_json(item) for item in value) + "]"
    return json.dumps(value)


class _JSONResponse(Response):
    media_type = "application/json"

    def render(self, content: Any) -> bytes:
        return _to_json(content).encode("utf-8")


class ServerErrorCode(IntEnum):
    """Application codes carried in error bodies."""

    UNKNOWN_ERROR = -1
    BAD_USER_INPUT = 1
    ORDER_BOOK_ERROR = 2


class ServerError(Exception):
    """An error that is answered with a JSON body of code and message."""

    status_code = 500
    code: ServerErrorCode | None = ServerErrorCode.UNKNOWN_ERROR
    # Log format for errors that are not the client's fault; None disables logging.
    log_template: ClassVar[str | None] = "internal error: %s"

    def __init__(self, message: str = "", *, log_detail: object | None = None) -> None:
        super().__init__(message)
        self.log_detail: object = message if log_detail is None else log_detail

    def to_response(self) -> Response:
        """Build the error response, logging errors that are not the client's fault."""
        if self.log_template is not None:
            logger.error(self.log_template, self.log_detail)
        body = {
            "code": None if self.code is None else int(self.code),
            "message": str(self),
        }
        return _JSONResponse(body, status_code=self.status_code)


class BadJsonError(ServerError):
    """The request body is not the JSON the endpoint expects."""

    code = ServerErrorCode.BAD_USER_INPUT
    log_template = None

    def __init__(self, body_text: str, status_code: int = 422) -> None:
        super().__init__(f"Bad JSON input: {body_text}")
        self.status_code = status_code


class _InvalidPathError(ServerError):
    status_code = 400
    code = ServerErrorCode.BAD_USER_INPUT
    log_template = None

    def __init__(self, detail: str) -> None:
        super().__init__(f"Invalid URL: {detail}")


class NotFoundError(ServerError):
    """The requested order book does not exist."""

    status_code = 404
    code = None
    log_template = None

    def __init__(self) -> None:
        super().__init__("Resource not found")


class OrderBookFailure(ServerError):
    """The order book refused the operation."""

    code = ServerErrorCode.ORDER_BOOK_ERROR
    log_template = "error from order_book module: %s"

    def __init__(self, error: OrderBookError) -> None:
        super().__init__(f"Order book error: `{error}`", log_detail=error)
        self.error = error


def _is_json_content_type(value: str) -> bool:
    mime = value.split(";", 1)[0].strip().lower()
    if not mime.startswith("application/"):
        return False
    subtype = mime[len("application/"):]
    return subtype == "json" or subtype.endswith("+json")


async def _read_json(request: Request) -> dict[str, Any]:
    if not _is_json_content_type(request.headers.get("content-type", "")):
        raise BadJsonError("Expected request with `Content-Type: application/json`", 415)
    body = await request.body()
    try:
        payload = json.loads(body, parse_float=Decimal)
    except ValueError as exc:
        raise BadJsonError(f"Failed to parse the request body as JSON: {exc}", 400) from exc
    if not isinstance(payload, dict):
        raise BadJsonError(
            "Failed to deserialize the JSON body into the target type: expected an object"
        )
    return payload


def _field(payload: dict[str, Any], name: str) -> Any:
    try:
        return payload[name]
    except KeyError:
        raise BadJsonError(
            f"Failed to deserialize the JSON body into the target type: missing field `{name}`"
        ) from None


def _side(value: Any) -> Side:
    for side in Side:
        if value == side.value:
            return side
    raise BadJsonError(
        "Failed to deserialize the JSON body into the target type: "
        f"side: unknown variant `{value}`, expected `bid` or `ask`"
    )


def _decimal(value: Any, name: str) -> Decimal:
    invalid = BadJsonError(
        f"Failed to deserialize the JSON body into the target type: {name}: invalid decimal"
    )
    if isinstance(value, bool):
        raise invalid
    if isinstance(value, (int, Decimal)):
        number = Decimal(value)
    elif isinstance(value, str):
        try:
            number = Decimal(value.strip())
        except InvalidOperation:
            raise invalid from None
    else:
        raise invalid
    if not number.is_finite():
        raise invalid
    return number


def _order_book(request: Request) -> OrderBook:
    state: ServerState = request.app.state.server_state
    order_book = state.exchange.get(request.path_params["pair"])
    if order_book is None:
        raise NotFoundError()
    return order_book


async def order_book_index(request: Request) -> Response:
    """GET the resting orders and volumes of a book."""
    return _JSONResponse(order_book_to_dict(_order_book(request)))


async def create_limit_order(request: Request) -> Response:
    """POST a limit order, which rests in the book."""
    payload = await _read_json(request)
    side = _side(_field(payload, "side"))
    size = _decimal(_field(payload, "size"), "size")
    price = _decimal(_field(payload, "price"), "price")

    order_book = _order_book(request)
    order = Order.new(side, size)
    order_book.place_limit_order(price, order)
    return _JSONResponse(order_to_dict(order, price), status_code=201)


async def create_market_order(request: Request) -> Response:
    """POST a market order and return the matches it made."""
    payload = await _read_json(request)
    side = _side(_field(payload, "side"))
    size = _decimal(_field(payload, "size"), "size")

    order_book = _order_book(request)
    order = Order.new(side, size)
    try:
        matches = order_book.place_market_order(order)
    except OrderBookError as exc:
        raise OrderBookFailure(exc) from exc
    return _JSONResponse([matched_order_to_dict(match, order) for match in matches])


async def cancel_order(request: Request) -> Response:
    """DELETE a resting order by id."""
    try:
        order_id = uuid.UUID(request.path_params["id"])
    except ValueError as exc:
        raise _InvalidPathError(f"id: {exc}") from exc

    order_book = _order_book(request)
    try:
        order_book.cancel_order(order_id)
    except OrderBookError as exc:
        raise OrderBookFailure(exc) from exc
    return Response(status_code=204)


async def _handle_server_error(request: Request, exc: Exception) -> Response:
    assert isinstance(exc, ServerError)
    return exc.to_response()


def create_app(state: ServerState) -> Starlette:
    """Build the application routing requests to the handlers over `state`."""
    routes = [
        Route("/order-book/{pair}", order_book_index, methods=["GET"]),
        Route("/order-book/{pair}/order/limit", create_limit_order, methods=["POST"]),
        Route("/order-book/{pair}/order/market", create_market_order, methods=["POST"]),
        Route("/order-book/{pair}/{id}", cancel_order, methods=["DELETE"]),
    ]
    app = Starlette(routes=routes, exception_handlers={ServerError: _handle_server_error})
    app.state.server_state = state
    return app