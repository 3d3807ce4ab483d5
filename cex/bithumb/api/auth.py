"""
Bithumb API Authentication Helper
=================================

HMAC-SHA512 request signing for Bithumb private REST endpoints.

Signing scheme:
- body  = urlencoded ``{"endpoint": <path>, **params}``
- auth  = endpoint + NUL + body + NUL + nonce
- Api-Sign = base64(hex(HMAC-SHA512(secret, auth)))

Security:
- Never logs API keys/secrets or signatures

Reference:
- https://apidocs.bithumb.com/docs/api-key-usage
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import logging
import threading
import time
from typing import Any, Callable, Dict, Mapping, Optional
from urllib.parse import urlencode

from cex.bithumb.api import endpoints
from core.errors import CredentialsMissing
from core.types import ApiType, SignedRequest

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


class NonceSource:
    """Monotonic millisecond nonce issuer.

    Nonces are wall-clock milliseconds, but issuance is serialised and a
    value is never repeated: if the clock has not moved past the last
    nonce, the last nonce + 1 is issued instead.
    """

    def __init__(self, clock: Callable[[], int] = _now_ms) -> None:
        self._clock = clock
        self._last = 0
        self._lock = threading.Lock()

    def next(self) -> str:
        with self._lock:
            value = self._clock()
            if value <= self._last:
                value = self._last + 1
            self._last = value
            return str(value)


def generate_signature(api_secret: str, endpoint: str, body: str, nonce: str) -> str:
    """
    Generate the Api-Sign header value for a Bithumb private request.

    Args:
        api_secret: API secret (must not be logged)
        endpoint: Substituted endpoint path (e.g., "/info/balance")
        body: Urlencoded request body, including the ``endpoint`` field
        nonce: Millisecond timestamp as string

    Returns:
        Base64 encoding of the lowercase hex HMAC-SHA512 digest

    Example:
        >>> sig = generate_signature("secret", "/info/balance", "endpoint=%2Finfo%2Fbalance", "1609459200000")
        >>> len(sig) == 172  # base64 of 128 hex chars
        True
    """
    auth = f"{endpoint}\0{body}\0{nonce}"
    digest = hmac.new(
        api_secret.encode("utf-8"),
        auth.encode("utf-8"),
        hashlib.sha512,
    ).hexdigest()
    return base64.b64encode(digest.encode("utf-8")).decode("ascii")


def build_auth_headers(api_key: str, api_secret: str, endpoint: str, body: str, nonce: str) -> Dict[str, str]:
    """
    Build authentication headers for a Bithumb private REST request.

    Args:
        api_key: API key (must not be logged)
        api_secret: API secret (must not be logged)
        endpoint: Substituted endpoint path (e.g., "/info/balance")
        body: Urlencoded request body
        nonce: Nonce issued for this request

    Returns:
        Dict with Accept, Content-Type, Api-Key, Api-Sign, Api-Nonce

    Example:
        >>> headers = build_auth_headers("k", "s", "/info/balance", "endpoint=%2Finfo%2Fbalance", "1")
        >>> headers["Api-Key"]
        'k'
    """
    return {
        "Accept": "application/json",
        "Content-Type": "application/x-www-form-urlencoded",
        "Api-Key": api_key,
        "Api-Sign": generate_signature(api_secret, endpoint, body, nonce),
        "Api-Nonce": nonce,
    }


class BithumbSigner:
    """Turns (path, api, method, params) into a ready-to-send HTTP envelope."""

    def __init__(
        self,
        *,
        api_key: Optional[str] = None,
        api_secret: Optional[str] = None,
        nonce_source: Optional[NonceSource] = None,
        public_url: str = endpoints.PUBLIC_URL,
        private_url: str = endpoints.PRIVATE_URL,
    ) -> None:
        self.api_key = api_key
        self.api_secret = api_secret
        self.nonce_source = nonce_source or NonceSource()
        self.urls: Dict[str, str] = {"public": public_url, "private": private_url}

    def __repr__(self) -> str:
        return f"BithumbSigner(api_key={'***' if self.api_key else None}, urls={self.urls!r})"

    def check_required_credentials(self) -> None:
        if not self.api_key or not self.api_key.strip():
            raise CredentialsMissing(endpoints.EXCHANGE_ID, "api_key")
        if not self.api_secret or not self.api_secret.strip():
            raise CredentialsMissing(endpoints.EXCHANGE_ID, "api_secret")

    def sign(
        self,
        path: str,
        api: ApiType = "public",
        method: str = "GET",
        params: Optional[Mapping[str, Any]] = None,
        nonce: Optional[str] = None,
    ) -> SignedRequest:
        """Build the HTTP envelope for ``path``.

        Placeholders in ``path`` are filled from ``params`` and the consumed
        keys are dropped. Public requests put the rest on the query string;
        private requests put it in the signed form body. ``nonce`` is only
        meant for tests; normally the nonce source issues one.
        """
        params = dict(params or {})
        endpoint = "/" + endpoints.implode_params(path, params)
        url = self.urls[api] + endpoint
        consumed = set(endpoints.extract_params(path))
        query = {key: value for key, value in params.items() if key not in consumed}

        if api == "public":
            if query:
                url += "?" + urlencode(query)
            logger.debug("Signed public %s %s", method, endpoint)
            return SignedRequest(url=url, method=method)

        self.check_required_credentials()
        body = urlencode({"endpoint": endpoint, **query})
        if nonce is None:
            nonce = self.nonce_source.next()
        headers = build_auth_headers(self.api_key, self.api_secret, endpoint, body, nonce)
        logger.debug("Signed private %s %s", method, endpoint)
        return SignedRequest(url=url, method=method, body=body, headers=headers)
