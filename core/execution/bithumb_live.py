from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Mapping, Optional, Protocol, runtime_checkable

from cex.bithumb.api import endpoints
from core.errors import InvalidOrder, MissingParameter
from core.market_data.bithumb_markets import MarketCache
from core.types import (
    CancelRequest,
    OrderRequest,
    OrderResult,
    WithdrawalResult,
    WithdrawRequest,
)


logger = logging.getLogger(__name__)


@runtime_checkable
class PrivateApi(Protocol):
    def private_post(self, path: str, params: dict[str, Any]) -> Mapping[str, Any]:
        """POST to a private endpoint and return the validated envelope."""


def _units(value: Decimal) -> str:
    # Plain notation; the venue rejects exponents such as 1E-8
    return format(Decimal(str(value)), "f")


@dataclass(frozen=True)
class BithumbOrderManager:
    """Maps order, cancel and withdraw intents onto Bithumb private endpoints.

    Every request is validated before anything is sent; a failed check
    never reaches the network.
    """

    client: PrivateApi
    markets: MarketCache

    def create_order(
        self,
        symbol: str,
        order_type: str,
        side: str,
        amount: Decimal,
        price: Optional[Decimal] = None,
    ) -> OrderResult:
        return self.place(
            OrderRequest(symbol=symbol, type=order_type, side=side, amount=amount, price=price)  # type: ignore[arg-type]
        )

    def place(self, order: OrderRequest) -> OrderResult:
        path = endpoints.ORDER_ENDPOINTS.get((order.type, order.side))
        if path is None:
            raise InvalidOrder(
                endpoints.EXCHANGE_ID,
                f"unsupported order type/side: {order.type!r}/{order.side!r}",
            )
        if order.amount is None or Decimal(str(order.amount)) <= 0:
            raise InvalidOrder(endpoints.EXCHANGE_ID, "order amount must be positive")
        if order.type == "limit" and order.price is None:
            raise InvalidOrder(endpoints.EXCHANGE_ID, "limit orders require price")

        market = self.markets.market(order.symbol)
        if order.type == "limit":
            params: dict[str, Any] = {
                "order_currency": market.id,
                "payment_currency": market.quote,
                "units": _units(order.amount),
                "price": _units(order.price),  # type: ignore[arg-type]
                "type": endpoints.PLACE_SIDES[order.side],
            }
        else:
            params = {
                "currency": market.id,
                "units": _units(order.amount),
            }

        logger.info("Placing %s %s order on %s for %s", order.type, order.side, market.symbol, params["units"])
        response = self.client.private_post(path, params)
        order_id = response.get("order_id")
        return OrderResult(info=response, id=str(order_id) if order_id else None)

    def cancel_order(self, request: CancelRequest) -> Mapping[str, Any]:
        if request.side is None:
            raise MissingParameter(
                endpoints.EXCHANGE_ID,
                "side",
                "cancel_order requires a side parameter (sell or buy) and a currency parameter",
            )
        if request.currency is None:
            raise MissingParameter(endpoints.EXCHANGE_ID, "currency", "cancel_order requires a currency parameter")

        params = {
            "order_id": request.id,
            "type": endpoints.CANCEL_SIDES["buy" if request.side == "buy" else "sell"],
            "currency": request.currency,
        }
        logger.info("Cancelling Bithumb order %s (%s %s)", request.id, request.currency, params["type"])
        return self.client.private_post(endpoints.CANCEL_ENDPOINT, params)

    def withdraw(self, request: WithdrawRequest) -> WithdrawalResult:
        params: dict[str, Any] = {
            "units": _units(request.amount),
            "address": request.address,
            "currency": request.currency,
        }
        # `tag` is the generic name for the same memo field
        destination = request.destination if request.destination is not None else request.tag
        if request.currency in endpoints.DESTINATION_TAG_CURRENCIES:
            if destination is None:
                raise MissingParameter(
                    endpoints.EXCHANGE_ID,
                    "destination",
                    f"{request.currency} withdraw requires an extra destination param",
                )
            params["destination"] = destination
        elif destination is not None:
            params["destination"] = destination

        logger.info("Withdrawing %s %s", params["units"], request.currency)
        response = self.client.private_post(endpoints.WITHDRAW_ENDPOINT, params)
        # The withdrawal endpoint does not echo an identifier
        return WithdrawalResult(info=response, id=None)
