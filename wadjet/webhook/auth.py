"""Slack request signature verification.

Slack signs ``v0:<timestamp>:<raw body>`` with HMAC-SHA256 keyed by the app's
signing secret and sends the result as ``X-Slack-Signature: v0=<hex>``.

A ``SignatureVerifier`` only covers the bytes it has been fed. ``ensure()``
must run after the whole body has passed through ``update()`` or ``tee()``;
finalizing earlier checks a prefix of the body and nothing else.
"""

import hashlib
import hmac
import logging
import re
import time
from typing import AsyncIterator, Callable, Mapping, Optional, Union

from wadjet.exceptions import (
    ExpiredTimestampError,
    MalformedSignatureError,
    MissingSignatureHeadersError,
    SignatureMismatchError,
)

logger = logging.getLogger(__name__)

TIMESTAMP_HEADER = "X-Slack-Request-Timestamp"
SIGNATURE_HEADER = "X-Slack-Signature"
SIGNATURE_VERSION = "v0"

# Slack recommends rejecting requests older than five minutes.
DEFAULT_TOLERANCE = 300.0


def _secret_bytes(secret: Union[str, bytes]) -> bytes:
    return secret.encode() if isinstance(secret, str) else secret


def sign(secret: Union[str, bytes], timestamp: Union[int, str], body: bytes) -> str:
    """Generate the ``v0=<hex>`` signature for a request body.

    Args:
        secret: Shared signing secret
        timestamp: Request timestamp (Unix seconds)
        body: Raw request body bytes

    Returns:
        Signature header value
    """
    base = f"{SIGNATURE_VERSION}:{timestamp}:".encode() + body
    digest = hmac.new(_secret_bytes(secret), base, hashlib.sha256).hexdigest()
    return f"{SIGNATURE_VERSION}={digest}"


class SignatureVerifier:
    """Incremental HMAC-SHA256 verifier for one request."""

    def __init__(
        self,
        headers: Mapping[str, str],
        secret: Union[str, bytes],
        tolerance: float = DEFAULT_TOLERANCE,
        now: Optional[Callable[[], float]] = None,
    ):
        """Read the signing headers and seed the accumulator.

        Args:
            headers: Request headers (case-insensitive mapping for HTTP requests)
            secret: Shared signing secret
            tolerance: Allowed clock skew in seconds
            now: Clock override, for tests

        Raises:
            MissingSignatureHeadersError: A signing header is absent
            MalformedSignatureError: The timestamp or signature cannot be decoded
        """
        raw_timestamp = headers.get(TIMESTAMP_HEADER)
        if not raw_timestamp:
            raise MissingSignatureHeadersError(TIMESTAMP_HEADER)
        signature = headers.get(SIGNATURE_HEADER)
        if not signature:
            raise MissingSignatureHeadersError(SIGNATURE_HEADER)

        # Unix seconds; twelve digits covers every plausible clock
        if not re.fullmatch(r"[0-9]{1,12}", raw_timestamp):
            raise MalformedSignatureError(f"invalid request timestamp: {raw_timestamp[:32]!r}")
        self.timestamp = int(raw_timestamp)

        prefix = f"{SIGNATURE_VERSION}="
        if signature.startswith(prefix):
            signature = signature[len(prefix):]
        if not re.fullmatch(r"(?:[0-9a-fA-F]{2})+", signature):
            raise MalformedSignatureError("signature is not valid hex")
        self.expected = bytes.fromhex(signature)

        self.tolerance = tolerance
        self._now = now or time.time
        self._hash = hmac.new(_secret_bytes(secret), digestmod=hashlib.sha256)
        self._hash.update(f"{SIGNATURE_VERSION}:{raw_timestamp}:".encode())
        self.bytes_read = 0

    def update(self, chunk: bytes) -> None:
        """Feed body bytes into the accumulator."""
        self._hash.update(chunk)
        self.bytes_read += len(chunk)

    async def tee(self, stream: AsyncIterator[bytes]) -> AsyncIterator[bytes]:
        """Yield chunks from ``stream`` after feeding each one to the accumulator."""
        async for chunk in stream:
            if chunk:
                self.update(chunk)
            yield chunk

    def ensure(self) -> None:
        """Check the timestamp window and the signature over the bytes read so far.

        Raises:
            ExpiredTimestampError: Timestamp outside the tolerance window
            SignatureMismatchError: Digest does not match the signature header
        """
        skew = abs(int(self._now()) - self.timestamp)
        if skew > self.tolerance:
            raise ExpiredTimestampError(self.timestamp, skew)

        # copy() so ensure() can be called again without finalizing state
        actual = self._hash.copy().digest()
        if not hmac.compare_digest(actual, self.expected):
            logger.debug(f"Signature mismatch after {self.bytes_read} body bytes")
            raise SignatureMismatchError()
