"""Shared test fixtures for pytest.

Provides sample Bithumb payloads and a fake HTTP session used across the
bithumb test files. Nothing here touches the network.
"""

from __future__ import annotations

from pathlib import Path
import sys
from typing import Any, Callable
from unittest.mock import Mock

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from cex.bithumb.api.auth import NonceSource
from cex.bithumb.api.bithumb_client import BithumbClient
from cex.bithumb.config import BithumbConfig
from cex.bithumb.exchange import BithumbExchange


@pytest.fixture
def ticker_payload() -> dict[str, Any]:
    """Single-instrument fragment as found under `data` of ticker/{currency}."""
    return {
        "opening_price": "4600000",
        "closing_price": "4620000",
        "min_price": "4500000",
        "max_price": "4700000",
        "average_price": "4610000.5",
        "units_traded": "1234.5",
        "volume_1day": "1234.5",
        "volume_7day": "9000.1",
        "buy_price": "4619000",
        "sell_price": "4621000",
        "date": "1505900000000",
    }


@pytest.fixture
def ticker_all_envelope(ticker_payload: dict[str, Any]) -> dict[str, Any]:
    eth = dict(ticker_payload, closing_price="300000")
    eth.pop("date")
    btc = dict(ticker_payload)
    btc.pop("date")
    return {
        "status": "0000",
        "data": {
            "BTC": btc,
            "ETH": eth,
            "date": "1505900000000",
        },
    }


@pytest.fixture
def orderbook_envelope() -> dict[str, Any]:
    return {
        "status": "0000",
        "data": {
            "timestamp": "1505900000123",
            "order_currency": "BTC",
            "payment_currency": "KRW",
            "bids": [
                {"quantity": "0.5", "price": "4619000"},
                {"quantity": "1.25", "price": "4618000"},
            ],
            "asks": [
                {"quantity": "0.1", "price": "4621000"},
                {"quantity": "2", "price": "4622000"},
            ],
        },
    }


@pytest.fixture
def trades_envelope() -> dict[str, Any]:
    return {
        "status": "0000",
        "data": [
            {
                "transaction_date": "2017-09-20 10:15:00",
                "type": "bid",
                "units_traded": "0.2",
                "price": "4620000",
                "total": "924000",
            },
            {
                "transaction_date": "2017-09-20 9:05:30",
                "type": "ask",
                "units_traded": "1.5",
                "price": "4600000",
                "total": "6900000",
            },
        ],
    }


@pytest.fixture
def balance_envelope() -> dict[str, Any]:
    return {
        "status": "0000",
        "data": {
            "total_btc": "1.5",
            "in_use_btc": "0.5",
            "available_btc": "1.0",
            "total_krw": 1000000,
            "in_use_krw": 0,
            "available_krw": 1000000,
            "xcoin_last": "4620000",
        },
    }


def make_response(payload: Any) -> Mock:
    response = Mock()
    response.json.return_value = payload
    response.raise_for_status.return_value = None
    return response


@pytest.fixture
def json_response() -> Callable[[Any], Mock]:
    """Factory for mocked `requests.Response` objects returning a JSON payload."""
    return make_response


@pytest.fixture
def fake_session() -> Mock:
    """requests.Session stand-in; set `.request.return_value` / `.side_effect` per test."""
    session = Mock()
    session.headers = {}
    session.request.return_value = make_response({"status": "0000"})
    return session


@pytest.fixture
def fixed_nonce() -> NonceSource:
    return NonceSource(clock=lambda: 1609459200000)


@pytest.fixture
def client(fake_session: Mock, fixed_nonce: NonceSource) -> BithumbClient:
    config = BithumbConfig(api_key="test_key", api_secret="test_secret")
    return BithumbClient(config=config, session=fake_session, nonce_source=fixed_nonce)


@pytest.fixture
def public_client(fake_session: Mock) -> BithumbClient:
    return BithumbClient(config=BithumbConfig(), session=fake_session)


@pytest.fixture
def exchange(client: BithumbClient) -> BithumbExchange:
    return BithumbExchange(client)
