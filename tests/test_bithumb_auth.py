"""
Unit tests for the Bithumb authentication helper.

Tests signature generation deterministically with fixed inputs.
"""

import base64
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
import sys
from urllib.parse import parse_qs

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from cex.bithumb.api.auth import BithumbSigner, NonceSource, build_auth_headers, generate_signature
from core.errors import CredentialsMissing

BALANCE_BODY = "endpoint=%2Finfo%2Fbalance&currency=ALL"


class TestGenerateSignature:
    """Test HMAC-SHA512 signature generation with fixed inputs."""

    def test_known_test_vector(self) -> None:
        """Matches `openssl dgst -sha512 -hmac` over endpoint NUL body NUL nonce."""
        sig = generate_signature("my_test_secret", "/info/balance", BALANCE_BODY, "1609459200000")

        expected_hex = (
            "5f70a28c4f26d2e60723df762a40fcf23d63636a464fabc19dd962e58a475c91"
            "6b6684d4eb7c19c7281b718ec6017ac6282f9b51875f99232cb488b7c69c43b1"
        )
        assert base64.b64decode(sig).decode("ascii") == expected_hex

    def test_signature_is_base64_of_lowercase_hex(self) -> None:
        sig = generate_signature("secret", "/info/balance", BALANCE_BODY, "1")
        decoded = base64.b64decode(sig).decode("ascii")

        assert len(decoded) == 128  # SHA512 = 64 bytes = 128 hex chars
        assert decoded == decoded.lower()
        int(decoded, 16)

    def test_signature_deterministic_with_fixed_inputs(self) -> None:
        sig1 = generate_signature("secret", "/info/balance", BALANCE_BODY, "1609459200000")
        sig2 = generate_signature("secret", "/info/balance", BALANCE_BODY, "1609459200000")
        assert sig1 == sig2

    def test_one_byte_body_change_changes_signature(self) -> None:
        sig1 = generate_signature("secret", "/info/balance", BALANCE_BODY, "1")
        sig2 = generate_signature("secret", "/info/balance", BALANCE_BODY[:-1] + "M", "1")
        assert sig1 != sig2

    def test_separator_is_significant(self) -> None:
        """Moving bytes across the NUL boundaries must change the signature."""
        sig1 = generate_signature("secret", "/a", "b", "1")
        sig2 = generate_signature("secret", "/ab", "", "1")
        assert sig1 != sig2

    def test_different_secrets_produce_different_signatures(self) -> None:
        sig1 = generate_signature("secret1", "/info/balance", BALANCE_BODY, "1")
        sig2 = generate_signature("secret2", "/info/balance", BALANCE_BODY, "1")
        assert sig1 != sig2


class TestBuildAuthHeaders:
    def test_headers_contain_required_fields(self) -> None:
        headers = build_auth_headers("my_key", "secret", "/info/balance", BALANCE_BODY, "42")

        assert headers == {
            "Accept": "application/json",
            "Content-Type": "application/x-www-form-urlencoded",
            "Api-Key": "my_key",
            "Api-Sign": generate_signature("secret", "/info/balance", BALANCE_BODY, "42"),
            "Api-Nonce": "42",
        }


class TestNonceSource:
    def test_nonce_is_clock_milliseconds(self) -> None:
        assert NonceSource(clock=lambda: 1609459200000).next() == "1609459200000"

    def test_nonce_never_repeats_on_stalled_clock(self) -> None:
        source = NonceSource(clock=lambda: 1000)
        assert [source.next() for _ in range(3)] == ["1000", "1001", "1002"]

    def test_nonce_never_goes_backwards(self) -> None:
        ticks = iter([2000, 1500, 2500])
        source = NonceSource(clock=lambda: next(ticks))
        assert [source.next() for _ in range(3)] == ["2000", "2001", "2500"]

    def test_default_clock_is_13_digit_milliseconds(self) -> None:
        nonce = NonceSource().next()
        assert nonce.isdigit()
        assert len(nonce) == 13

    def test_concurrent_issuance_is_unique(self) -> None:
        source = NonceSource(clock=lambda: 5)
        with ThreadPoolExecutor(max_workers=8) as pool:
            nonces = list(pool.map(lambda _: source.next(), range(200)))
        assert len(set(nonces)) == 200


class TestSigner:
    def test_public_request_encodes_query(self) -> None:
        signer = BithumbSigner()
        signed = signer.sign("orderbook/{currency}", "public", "GET", {"currency": "BTC", "count": 50})

        assert signed.url == "https://api.bithumb.com/public/orderbook/BTC?count=50"
        assert signed.method == "GET"
        assert signed.body is None
        assert signed.headers is None

    def test_public_request_without_query_has_no_question_mark(self) -> None:
        signed = BithumbSigner().sign("ticker/{currency}", "public", "GET", {"currency": "ETH"})
        assert signed.url == "https://api.bithumb.com/public/ticker/ETH"

    def test_public_request_does_not_need_credentials(self) -> None:
        signed = BithumbSigner(api_key=None, api_secret=None).sign("ticker/all")
        assert signed.url == "https://api.bithumb.com/public/ticker/all"

    def test_private_request_builds_signed_body(self) -> None:
        signer = BithumbSigner(api_key="key", api_secret="my_test_secret", nonce_source=NonceSource(lambda: 1609459200000))
        signed = signer.sign("info/balance", "private", "POST", {"currency": "ALL"})

        assert signed.url == "https://api.bithumb.com/info/balance"
        assert signed.method == "POST"
        assert signed.body == BALANCE_BODY
        assert signed.headers["Api-Key"] == "key"
        assert signed.headers["Api-Nonce"] == "1609459200000"
        assert signed.headers["Api-Sign"] == generate_signature(
            "my_test_secret", "/info/balance", BALANCE_BODY, "1609459200000"
        )

    def test_private_request_drops_consumed_placeholders(self) -> None:
        signer = BithumbSigner(api_key="key", api_secret="secret")
        signed = signer.sign("ticker/{currency}", "private", "POST", {"currency": "BTC", "extra": "1"})

        assert parse_qs(signed.body) == {"endpoint": ["/ticker/BTC"], "extra": ["1"]}

    def test_private_request_is_deterministic_for_fixed_nonce(self) -> None:
        signer = BithumbSigner(api_key="key", api_secret="secret")
        first = signer.sign("info/balance", "private", "POST", {"currency": "BTC"}, nonce="7")
        second = signer.sign("info/balance", "private", "POST", {"currency": "BTC"}, nonce="7")
        assert first == second

    @pytest.mark.parametrize(
        ("api_key", "api_secret", "missing"),
        [(None, "secret", "api_key"), ("key", None, "api_secret"), ("key", "  ", "api_secret")],
    )
    def test_private_request_requires_credentials(self, api_key, api_secret, missing) -> None:
        signer = BithumbSigner(api_key=api_key, api_secret=api_secret)
        with pytest.raises(CredentialsMissing) as excinfo:
            signer.sign("info/balance", "private", "POST", {})
        assert excinfo.value.missing == missing
        assert "bithumb" in str(excinfo.value)

    def test_missing_placeholder_value_raises(self) -> None:
        with pytest.raises(ValueError, match="currency"):
            BithumbSigner().sign("ticker/{currency}", "public", "GET", {})

    def test_repr_hides_credentials(self) -> None:
        signer = BithumbSigner(api_key="very_secret_key", api_secret="very_secret")
        assert "very_secret" not in repr(signer)
