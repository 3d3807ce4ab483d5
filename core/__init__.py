"""Core domain modules.

Exchange-agnostic building blocks shared by the venue adapters under `cex/`:

- types: canonical model (markets, tickers, order books, trades, balances, orders)
- errors: exchange error taxonomy
- market_data: market catalog building and response normalization
- execution: order lifecycle mapping and the adapter interface
"""
