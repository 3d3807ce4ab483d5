"""
Bithumb REST API metadata
=========================

Static description of the venue: base URLs, endpoint table, fee schedule
and the handful of constants the adapter needs to talk to it.

Reference:
- https://apidocs.bithumb.com/
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Mapping

from core.types import ApiType, OrderSide, OrderType

EXCHANGE_ID = "bithumb"
EXCHANGE_NAME = "Bithumb"
COUNTRIES = ("KR",)
RATE_LIMIT_MS = 500

PUBLIC_URL = "https://api.bithumb.com/public"
PRIVATE_URL = "https://api.bithumb.com"
WWW_URL = "https://www.bithumb.com"
DOC_URL = "https://apidocs.bithumb.com/"

SUCCESS_STATUS = "0000"
SETTLEMENT_CURRENCY = "KRW"
# Non-instrument key inside the bulk ticker payload
DATE_SENTINEL = "date"

MAKER_FEE = Decimal("0.0015")
TAKER_FEE = Decimal("0.0015")

ORDER_BOOK_MAX_COUNT = 50
RECENT_TRADES_MAX_COUNT = 100

# Withdrawals of these need an extra `destination` (memo / destination tag)
DESTINATION_TAG_CURRENCIES = frozenset({"XRP", "XMR"})

PUBLIC_GET = (
    "ticker/{currency}",
    "ticker/all",
    "orderbook/{currency}",
    "orderbook/all",
    "recent_transactions/{currency}",
    "recent_transactions/all",
)

PRIVATE_POST = (
    "info/account",
    "info/balance",
    "info/wallet_address",
    "info/ticker",
    "info/orders",
    "info/user_transactions",
    "trade/place",
    "info/order_detail",
    "trade/cancel",
    "trade/btc_withdrawal",
    "trade/krw_deposit",
    "trade/krw_withdrawal",
    "trade/market_buy",
    "trade/market_sell",
)

# (order type, side) -> private endpoint
ORDER_ENDPOINTS: Mapping[tuple[OrderType, OrderSide], str] = {
    ("limit", "buy"): "trade/place",
    ("limit", "sell"): "trade/place",
    ("market", "buy"): "trade/market_buy",
    ("market", "sell"): "trade/market_sell",
}

# Venue vocabulary for order sides
PLACE_SIDES: Mapping[OrderSide, str] = {"buy": "bid", "sell": "ask"}
CANCEL_SIDES: Mapping[OrderSide, str] = {"buy": "purchase", "sell": "sales"}

WITHDRAW_ENDPOINT = "trade/btc_withdrawal"
CANCEL_ENDPOINT = "trade/cancel"
BALANCE_ENDPOINT = "info/balance"

_PLACEHOLDER = re.compile(r"\{([^}]+)\}")


@dataclass(frozen=True)
class Endpoint:
    path: str
    api: ApiType
    method: str


ENDPOINTS: Mapping[str, Endpoint] = {
    **{path: Endpoint(path=path, api="public", method="GET") for path in PUBLIC_GET},
    **{path: Endpoint(path=path, api="private", method="POST") for path in PRIVATE_POST},
}


def get_endpoint(path: str) -> Endpoint:
    """Look up a declared endpoint by its path template."""
    try:
        return ENDPOINTS[path]
    except KeyError:
        raise ValueError(f"Unknown {EXCHANGE_ID} endpoint: {path}") from None


def extract_params(path: str) -> list[str]:
    """Return placeholder names in a path template, e.g. ``ticker/{currency}`` -> ``['currency']``."""
    return _PLACEHOLDER.findall(path)


def implode_params(path: str, params: Mapping[str, Any]) -> str:
    """Substitute placeholder values from ``params`` into ``path``."""

    def _replace(match: re.Match[str]) -> str:
        name = match.group(1)
        if name not in params:
            raise ValueError(f"{EXCHANGE_ID} endpoint {path} requires `{name}`")
        return str(params[name])

    return _PLACEHOLDER.sub(_replace, path)
