"""
Bithumb REST Client
===================

Thin REST layer over the Bithumb API using the requests library.

Every call goes through the same pipeline:
    sign (auth.BithumbSigner) -> HTTP (requests.Session) -> validate_envelope

Features:
- Public API (ticker, orderbook, recent transactions)
- Authenticated API (balance, place/cancel orders, withdrawals)
- No retries: transport failures are raised to the caller as TransportError

Usage:
    from cex.bithumb.api.bithumb_client import BithumbClient

    client = BithumbClient(api_key="...", api_secret="...")
    ticker = client.get_ticker("BTC")
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

import requests

from cex.bithumb.api import endpoints
from cex.bithumb.api.auth import BithumbSigner, NonceSource
from cex.bithumb.config import BithumbConfig
from core.errors import TransportError, VenueError
from core.types import SignedRequest

logger = logging.getLogger(__name__)


def validate_envelope(response: Mapping[str, Any]) -> Mapping[str, Any]:
    """Return ``response`` untouched unless its status is a venue error.

    Bulk/public payloads sometimes carry no ``status``; those pass through.
    """
    if "status" in response and response["status"] != endpoints.SUCCESS_STATUS:
        logger.warning("Bithumb returned status %s", response["status"])
        raise VenueError(endpoints.EXCHANGE_ID, response)
    return response


class BithumbClient:
    """
    Bithumb REST Client

    Owns the HTTP session and the signer. Higher layers (market catalog,
    order manager) only ever call the typed methods below.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_secret: Optional[str] = None,
        *,
        config: Optional[BithumbConfig] = None,
        session: Optional[requests.Session] = None,
        nonce_source: Optional[NonceSource] = None,
    ) -> None:
        """
        Initialize Bithumb client.

        Args:
            api_key: API key (falls back to config / BITHUMB_API_KEY)
            api_secret: API secret (falls back to config / BITHUMB_API_SECRET)
            config: Optional full configuration
            session: Optional requests session (tests inject a mock here)
            nonce_source: Shared nonce issuer when several clients use one key
        """
        self.config = config or BithumbConfig.from_env(api_key=api_key, api_secret=api_secret)
        self.signer = BithumbSigner(
            api_key=self.config.api_key,
            api_secret=self.config.api_secret,
            nonce_source=nonce_source,
            public_url=self.config.public_url,
            private_url=self.config.private_url,
        )
        if session is None:
            session = requests.Session()
            session.headers.update({"User-Agent": self.config.user_agent})
        # A caller-supplied session is used as is
        self._session = session

    # ==================== Transport ====================

    def fetch(self, signed: SignedRequest) -> Mapping[str, Any]:
        """Send a signed envelope and decode its JSON body."""
        try:
            response = self._session.request(
                signed.method,
                signed.url,
                data=signed.body,
                headers=dict(signed.headers) if signed.headers else None,
                timeout=self.config.timeout_s,
            )
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as exc:
            raise TransportError(endpoints.EXCHANGE_ID, f"{signed.method} {signed.url} failed: {exc}") from exc

        if not isinstance(data, dict):
            raise TransportError(endpoints.EXCHANGE_ID, f"unexpected response type: {type(data).__name__}")
        return data

    def request(self, path: str, params: Optional[Mapping[str, Any]] = None) -> Mapping[str, Any]:
        """Call a declared endpoint and return the validated envelope."""
        endpoint = endpoints.get_endpoint(path)
        signed = self.signer.sign(path, endpoint.api, endpoint.method, params)
        logger.debug("Bithumb %s %s", endpoint.method, path)
        return validate_envelope(self.fetch(signed))

    # ==================== Public API Methods ====================

    def get_ticker_all(self) -> Mapping[str, Any]:
        return self.request("ticker/all")

    def get_ticker(self, currency: str) -> Mapping[str, Any]:
        return self.request("ticker/{currency}", {"currency": currency})

    def get_orderbook(self, currency: str, count: int = endpoints.ORDER_BOOK_MAX_COUNT) -> Mapping[str, Any]:
        return self.request("orderbook/{currency}", {"currency": currency, "count": count})

    def get_recent_transactions(
        self, currency: str, count: int = endpoints.RECENT_TRADES_MAX_COUNT
    ) -> Mapping[str, Any]:
        return self.request("recent_transactions/{currency}", {"currency": currency, "count": count})

    # ==================== Authenticated API Methods ====================

    def get_balance(self, currency: str = "ALL") -> Mapping[str, Any]:
        return self.request(endpoints.BALANCE_ENDPOINT, {"currency": currency})

    def private_post(self, path: str, params: Dict[str, Any]) -> Mapping[str, Any]:
        """Call a private endpoint from the declared table."""
        if endpoints.get_endpoint(path).api != "private":
            raise ValueError(f"{path} is not a private endpoint")
        return self.request(path, params)

    def close(self) -> None:
        """Close the HTTP session."""
        self._session.close()
