from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional

from cex.bithumb.api import endpoints


@dataclass(frozen=True)
class BithumbConfig:
    """Connection configuration.

    Credentials should come from environment (BITHUMB_API_KEY /
    BITHUMB_API_SECRET). Do not log them.
    """

    api_key: Optional[str] = field(default=None, repr=False)
    api_secret: Optional[str] = field(default=None, repr=False)
    public_url: str = endpoints.PUBLIC_URL
    private_url: str = endpoints.PRIVATE_URL
    timeout_s: float = 10.0
    user_agent: str = "cryptotrader/2.0"

    @property
    def has_credentials(self) -> bool:
        return bool(self.api_key and self.api_secret and self.api_key.strip() and self.api_secret.strip())

    @classmethod
    def from_env(cls, **overrides: object) -> "BithumbConfig":
        """Build a config from BITHUMB_* environment variables; keyword overrides win."""
        values: dict[str, object] = {
            "api_key": os.getenv("BITHUMB_API_KEY"),
            "api_secret": os.getenv("BITHUMB_API_SECRET"),
        }
        timeout = os.getenv("BITHUMB_TIMEOUT_S")
        if timeout:
            try:
                values["timeout_s"] = float(timeout)
            except ValueError:
                raise ValueError(f"BITHUMB_TIMEOUT_S must be a number, got {timeout!r}") from None
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)  # type: ignore[arg-type]
