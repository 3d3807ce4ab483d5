#!/usr/bin/env python
from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from cex.bithumb.exchange import create_exchange


def _parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Smoke-test Bithumb public endpoints through the adapter (no keys).")
    p.add_argument("--symbol", default="BTC/KRW", help="Canonical symbol like BTC/KRW (or venue id BTC)")
    p.add_argument("--depth", type=int, default=5, help="Order book levels to request")
    p.add_argument("--trades", type=int, default=5, help="Recent trades to request")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return p.parse_args()


def main() -> int:
    args = _parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    exchange = create_exchange(api_key="", api_secret="")
    try:
        markets = exchange.load_markets()
        print(f"markets={len(markets)}")

        ticker = exchange.fetch_ticker(args.symbol)
        print(f"ticker symbol={ticker.symbol} last={ticker.last} bid={ticker.bid} ask={ticker.ask} at={ticker.datetime}")

        book = exchange.fetch_order_book(args.symbol, limit=args.depth)
        print(f"book bids={len(book.bids)} asks={len(book.asks)} best_bid={book.bids[:1]} best_ask={book.asks[:1]}")

        trades = exchange.fetch_trades(args.symbol, limit=args.trades)
        for trade in trades:
            print(f"trade {trade.datetime} {trade.side} {trade.amount} @ {trade.price}")
    finally:
        exchange.close()

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
