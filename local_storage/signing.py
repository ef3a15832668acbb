"""Pre-signed URL delegation.

The local filesystem has no native notion of a signed URL, so providers
hand URL construction to a caller-supplied signer. ``HmacUrlSigner`` is a
ready-made signer for deployments that serve objects through an HTTP
route able to verify the query-string signature.
"""

import hashlib
import hmac
import time
from collections.abc import Awaitable
from typing import Protocol
from urllib.parse import quote, urlencode

from .models import SigningOperation

DEFAULT_TTL_SECONDS = 86400


class Signer(Protocol):
    """Callable that turns an operation on a key into a URL.

    ``operation`` is the tag "get" or "put". The callable may also be a
    coroutine function.
    """

    def __call__(self, operation: str, key: str, ttl: int) -> str | Awaitable[str]:
        ...


def normalize_ttl(ttl: int | None) -> int:
    """Return ``ttl``, or one day when it is missing, zero or negative."""
    return ttl if ttl and ttl > 0 else DEFAULT_TTL_SECONDS


class HmacUrlSigner:
    """Sign URLs with an HMAC-SHA256 over operation, key and expiry.

    Example URL:
        http://localhost:8000/storage/reports/q1.csv?op=get&expires=1735689600&signature=9f2c...
    """

    def __init__(self, base_url: str, secret_key: str):
        """Initialize the signer.

        Args:
            base_url: URL prefix under which objects are served
            secret_key: Shared secret with the verifying route
        """
        self.base_url = base_url.rstrip("/")
        self._secret = secret_key.encode("utf-8")

    def __call__(self, operation: str, key: str, ttl: int) -> str:
        return self.sign(operation, key, ttl)

    def sign(
        self,
        operation: str,
        key: str,
        ttl: int,
        now: float | None = None,
    ) -> str:
        """Build a URL granting ``operation`` on ``key`` for ``ttl`` seconds.

        Args:
            operation: "get" or "put"
            key: Object key as given by the caller
            ttl: Validity in seconds
            now: Current unix time (defaults to ``time.time()``)

        Returns:
            Signed URL
        """
        op = SigningOperation(operation).value
        expires = int(now if now is not None else time.time()) + ttl
        query = urlencode(
            {
                "op": op,
                "expires": expires,
                "signature": self._digest(op, key, expires),
            }
        )
        return f"{self.base_url}/{quote(key.lstrip('/'))}?{query}"

    def verify(
        self,
        operation: str,
        key: str,
        expires: int,
        signature: str,
        now: float | None = None,
    ) -> bool:
        """Check a signature produced by ``sign``.

        Returns:
            True if the signature matches and has not expired
        """
        current = now if now is not None else time.time()
        if int(expires) < current:
            return False
        expected = self._digest(SigningOperation(operation).value, key, int(expires))
        return hmac.compare_digest(expected, signature)

    def _digest(self, op: str, key: str, expires: int) -> str:
        message = f"{op}\n{key.lstrip('/')}\n{expires}".encode("utf-8")
        return hmac.new(self._secret, message, hashlib.sha256).hexdigest()
