"""RFC 4226 HOTP (HMAC-based One-Time Password) implementation."""

import functools
import logging
from enum import Enum
from typing import Type, Union

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, hmac

from rfc6238_totp.errors import (
    CryptoUnavailable,
    InvalidDigitCount,
    InvalidSecretEncoding,
)


logger = logging.getLogger(__name__)

MIN_DIGITS = 1
MAX_DIGITS = 10

COUNTER_SIZE = 8


class HashAlgorithm(Enum):
    """Hash functions usable for the HMAC step, with their digest sizes."""

    SHA1 = (hashes.SHA1, 20)
    SHA256 = (hashes.SHA256, 32)
    SHA512 = (hashes.SHA512, 64)

    def __init__(self, primitive: Type[hashes.HashAlgorithm], digest_size: int):
        self.primitive = primitive
        self.digest_size = digest_size

    def __str__(self) -> str:
        return self.name

    @classmethod
    def parse(cls, value: str) -> "HashAlgorithm":
        """
        Look up an algorithm by name.

        Accepts spellings such as ``sha1``, ``SHA-256`` and ``HmacSHA512``.

        Raises:
            ValueError: If the name does not match a supported algorithm.
        """
        key = value.strip().upper().replace("-", "").replace("_", "")
        if key.startswith("HMAC"):
            key = key[4:]
        try:
            return cls[key]
        except KeyError:
            supported = ", ".join(member.name for member in cls)
            raise ValueError(
                f"Unsupported hash algorithm {value!r} (expected one of: {supported})"
            ) from None


class HmacEngine:
    """
    HMAC computation bound to a single hash algorithm.

    The primitive is checked against the crypto backend when the engine is
    built, so an incomplete platform fails here rather than on each call.
    """

    def __init__(self, algorithm: HashAlgorithm):
        """
        Args:
            algorithm: Hash algorithm for the HMAC.

        Raises:
            CryptoUnavailable: If the backend lacks the HMAC primitive.
        """
        self.algorithm = algorithm
        try:
            hmac.HMAC(b"\x00", algorithm.primitive())
        except UnsupportedAlgorithm as e:
            logger.error("HMAC-%s is not available: %s", algorithm, e)
            raise CryptoUnavailable(
                f"HMAC-{algorithm} is not supported by the crypto backend"
            ) from e
        logger.debug("Resolved HMAC-%s engine", algorithm)

    def compute(self, key: bytes, message: bytes) -> bytes:
        """Return the HMAC digest of ``message`` keyed with ``key``."""
        mac = hmac.HMAC(key, self.algorithm.primitive())
        mac.update(message)
        return mac.finalize()


@functools.lru_cache(maxsize=None)
def get_engine(algorithm: HashAlgorithm) -> HmacEngine:
    """Return the shared engine for ``algorithm``, building it on first use."""
    return HmacEngine(algorithm)


def encode_secret(secret: Union[str, bytes]) -> bytes:
    """
    Convert a shared secret into HMAC key bytes.

    String secrets are encoded as ASCII; bytes-like values are used unchanged.

    Raises:
        InvalidSecretEncoding: If the secret is empty, not ASCII, or of
            another type.
    """
    if isinstance(secret, str):
        try:
            raw_secret = secret.encode("ascii")
        except UnicodeEncodeError as e:
            raise InvalidSecretEncoding(
                f"Shared secret must be ASCII: {e}"
            ) from e
    elif isinstance(secret, (bytes, bytearray, memoryview)):
        raw_secret = bytes(secret)
    else:
        raise InvalidSecretEncoding(
            f"Shared secret must be str or bytes, got {type(secret).__name__}"
        )

    if not raw_secret:
        raise InvalidSecretEncoding("Shared secret must not be empty")
    return raw_secret


def counter_bytes(counter: int) -> bytes:
    """Render a counter as the 8-byte big-endian HMAC message."""
    try:
        return counter.to_bytes(COUNTER_SIZE, byteorder="big")
    except OverflowError as e:
        raise ValueError(
            f"Counter {counter} does not fit in {COUNTER_SIZE} unsigned bytes"
        ) from e


def validate_digits(digits: int) -> int:
    """Return ``digits`` unchanged, or raise InvalidDigitCount."""
    # bool is an int subclass
    if (
        isinstance(digits, bool)
        or not isinstance(digits, int)
        or not MIN_DIGITS <= digits <= MAX_DIGITS
    ):
        raise InvalidDigitCount(digits, MIN_DIGITS, MAX_DIGITS)
    return digits


def truncate(digest: bytes) -> int:
    """
    Dynamic truncation (RFC 4226, Section 5.3).

    Args:
        digest: HMAC output, at least 20 bytes long.

    Returns:
        The 31-bit integer selected by the low nibble of the last byte.
    """
    offset = digest[-1] & 0x0F
    return (
        ((digest[offset] & 0x7F) << 24)
        | ((digest[offset + 1] & 0xFF) << 16)
        | ((digest[offset + 2] & 0xFF) << 8)
        | (digest[offset + 3] & 0xFF)
    )


def format_code(value: int, digits: int) -> str:
    """Reduce ``value`` to ``digits`` decimal digits, zero-padded on the left."""
    validate_digits(digits)
    code = value % (10**digits)
    return f"{code:0{digits}d}"


def generate_hotp(
    secret: Union[str, bytes],
    counter: int,
    digits: int = 6,
    algorithm: HashAlgorithm = HashAlgorithm.SHA1,
) -> str:
    """
    Generate an HOTP code using RFC 4226.

    Args:
        secret: The shared secret, as an ASCII string or raw bytes.
        counter: The moving factor, 0 <= counter < 2**64.
        digits: Number of digits in the output code (default: 6).
        algorithm: Hash function for the HMAC (default: SHA1).

    Returns:
        A zero-padded HOTP code string.

    Raises:
        InvalidDigitCount: If digits is outside [1, 10].
        InvalidSecretEncoding: If the secret is empty or not ASCII.
        ValueError: If the counter does not fit in 8 unsigned bytes.
    """
    validate_digits(digits)
    raw_secret = encode_secret(secret)

    hmac_digest = get_engine(algorithm).compute(raw_secret, counter_bytes(counter))
    return format_code(truncate(hmac_digest), digits)
