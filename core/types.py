from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Literal, Mapping, Optional

OrderType = Literal["limit", "market"]
OrderSide = Literal["buy", "sell"]
ApiType = Literal["public", "private"]

# (price, amount)
PriceLevel = tuple[Decimal, Decimal]


@dataclass(frozen=True)
class MinMax:
    min: Optional[Decimal] = None
    max: Optional[Decimal] = None


@dataclass(frozen=True)
class MarketPrecision:
    amount: Optional[int] = None
    price: Optional[int] = None


@dataclass(frozen=True)
class MarketLimits:
    amount: MinMax = field(default_factory=MinMax)
    price: MinMax = field(default_factory=MinMax)
    cost: MinMax = field(default_factory=MinMax)


@dataclass(frozen=True)
class Market:
    """Tradable instrument.

    `id` is the venue-native code, `symbol` is always ``base/quote``.
    """

    id: str
    symbol: str
    base: str
    quote: str
    taker_fee: Decimal
    maker_fee: Decimal
    precision: MarketPrecision = field(default_factory=MarketPrecision)
    limits: MarketLimits = field(default_factory=MarketLimits)
    active: bool = True
    raw: Optional[Mapping[str, Any]] = None


@dataclass(frozen=True)
class OrderBook:
    """Bids descending, asks ascending, in the order the venue sent them."""

    symbol: Optional[str]
    timestamp: Optional[int]
    datetime: Optional[str]
    bids: tuple[PriceLevel, ...]
    asks: tuple[PriceLevel, ...]
    raw: Optional[Mapping[str, Any]] = None


@dataclass(frozen=True)
class Ticker:
    """24h ticker. Fields the venue does not publish stay None."""

    symbol: Optional[str]
    timestamp: Optional[int]
    datetime: Optional[str]
    high: Optional[Decimal] = None
    low: Optional[Decimal] = None
    bid: Optional[Decimal] = None
    ask: Optional[Decimal] = None
    vwap: Optional[Decimal] = None
    open: Optional[Decimal] = None
    close: Optional[Decimal] = None
    first: Optional[Decimal] = None
    last: Optional[Decimal] = None
    change: Optional[Decimal] = None
    percentage: Optional[Decimal] = None
    average: Optional[Decimal] = None
    base_volume: Optional[Decimal] = None
    quote_volume: Optional[Decimal] = None
    raw: Optional[Mapping[str, Any]] = None


@dataclass(frozen=True)
class Trade:
    timestamp: int
    datetime: str
    symbol: str
    side: OrderSide
    price: Decimal
    amount: Decimal
    id: Optional[str] = None
    order: Optional[str] = None
    type: Optional[OrderType] = None
    raw: Optional[Mapping[str, Any]] = None


@dataclass(frozen=True)
class Balance:
    """Per-currency balance, values passed through from the venue as-is."""

    currency: str
    total: Optional[Decimal] = None
    used: Optional[Decimal] = None
    free: Optional[Decimal] = None


@dataclass(frozen=True)
class Balances:
    currencies: Mapping[str, Balance]
    raw: Optional[Mapping[str, Any]] = None

    def __getitem__(self, currency: str) -> Balance:
        return self.currencies[currency]

    def __contains__(self, currency: object) -> bool:
        return currency in self.currencies


@dataclass(frozen=True)
class OrderResult:
    """Result of order creation. `id` is None when the venue returned none."""

    info: Mapping[str, Any]
    id: Optional[str] = None


@dataclass(frozen=True)
class WithdrawalResult:
    info: Mapping[str, Any]
    id: Optional[str] = None


@dataclass(frozen=True)
class OrderRequest:
    symbol: str
    type: OrderType
    side: OrderSide
    amount: Decimal
    price: Optional[Decimal] = None


@dataclass(frozen=True)
class CancelRequest:
    id: str
    side: Optional[OrderSide] = None
    currency: Optional[str] = None
    symbol: Optional[str] = None


@dataclass(frozen=True)
class WithdrawRequest:
    """`tag` is used as the destination when `destination` is not given."""

    currency: str
    amount: Decimal
    address: str
    tag: Optional[str] = None
    destination: Optional[str] = None


@dataclass(frozen=True)
class SignedRequest:
    """HTTP envelope produced by the request signer."""

    url: str
    method: str
    body: Optional[str] = None
    headers: Optional[Mapping[str, str]] = None
