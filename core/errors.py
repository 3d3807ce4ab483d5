"""Exchange adapter error taxonomy.

All errors are raised straight to the caller. Nothing in the adapter
retries or recovers locally; backoff belongs to whoever drives it.
"""

from __future__ import annotations

import json
from typing import Any, Mapping, Optional


class ExchangeError(RuntimeError):
    """Base error for everything raised by an exchange adapter."""

    def __init__(self, exchange_id: str, message: str) -> None:
        super().__init__(f"{exchange_id} {message}")
        self.exchange_id = exchange_id


class CredentialsMissing(ExchangeError):
    """Private endpoint called without an API key and secret."""

    def __init__(self, exchange_id: str, missing: str) -> None:
        super().__init__(exchange_id, f"requires `{missing}` for private endpoints")
        self.missing = missing


class MissingParameter(ExchangeError, ValueError):
    """A required side-channel parameter was not supplied."""

    def __init__(self, exchange_id: str, parameter: str, message: str) -> None:
        super().__init__(exchange_id, message)
        self.parameter = parameter


class InvalidOrder(ExchangeError, ValueError):
    pass


class BadSymbol(ExchangeError, ValueError):
    pass


class VenueError(ExchangeError):
    """Response envelope carried a non-success status code."""

    def __init__(self, exchange_id: str, envelope: Mapping[str, Any]) -> None:
        super().__init__(exchange_id, json.dumps(envelope, ensure_ascii=False, default=str))
        self.envelope = envelope
        self.status: Optional[str] = envelope.get("status")


class BadResponse(ExchangeError):
    """Venue payload is missing a field the canonical model cannot do without."""

    def __init__(self, exchange_id: str, field: str, message: str) -> None:
        super().__init__(exchange_id, message)
        self.field = field


class TransportError(ExchangeError):
    """HTTP layer failure; the original exception is kept as ``__cause__``."""
