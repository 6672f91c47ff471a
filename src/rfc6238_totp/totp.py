"""RFC 6238 TOTP (Time-based One-Time Password) implementation."""

import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Union

from rfc6238_totp.hotp import (
    HashAlgorithm,
    counter_bytes,
    generate_hotp,
    validate_digits,
)

__all__ = [
    "DEFAULT_STEP",
    "DEFAULT_T0",
    "TotpRow",
    "counter_bytes",
    "counter_hex",
    "format_utc",
    "generate_totp",
    "time_counter",
    "totp_table",
]

DEFAULT_T0 = 0
DEFAULT_STEP = 30

UTC_FORMAT = "%Y-%m-%d %H:%M:%S"
UTC_OUT_OF_RANGE = "out of range"


def time_counter(
    for_time: Union[int, float], t0: int = DEFAULT_T0, step: int = DEFAULT_STEP
) -> int:
    """
    Derive the time-step counter T = floor((for_time - t0) / step).

    Args:
        for_time: Seconds since the Unix epoch.
        t0: Unix time to start counting steps from (default: 0).
        step: Time-step size in seconds (default: 30).

    Returns:
        The non-negative step counter.

    Raises:
        ValueError: If step is not positive or for_time precedes t0.
    """
    if step <= 0:
        raise ValueError(f"Time step must be positive, got {step}")
    counter = int((for_time - t0) // step)
    if counter < 0:
        raise ValueError(f"Time {for_time} is before the epoch origin {t0}")
    return counter


def counter_hex(counter: int) -> str:
    return format(counter, "X")


def generate_totp(
    secret: Union[str, bytes],
    for_time: Union[int, float],
    digits: int = 6,
    algorithm: HashAlgorithm = HashAlgorithm.SHA1,
    t0: int = DEFAULT_T0,
    step: int = DEFAULT_STEP,
) -> str:
    """
    Generate a TOTP code using RFC 6238.

    Args:
        secret: The shared secret, as an ASCII string or raw bytes.
        for_time: Seconds since the Unix epoch.
        digits: Number of digits in the output code (default: 6).
        algorithm: Hash function for the HMAC (default: SHA1).
        t0: Unix time to start counting steps from (default: 0).
        step: Time-step size in seconds (default: 30).

    Returns:
        A zero-padded TOTP code string.

    Raises:
        InvalidDigitCount: If digits is outside [1, 10].
        InvalidSecretEncoding: If the secret is empty or not ASCII.
        CryptoUnavailable: If the HMAC primitive is missing.
    """
    validate_digits(digits)
    counter = time_counter(for_time, t0=t0, step=step)
    return generate_hotp(secret, counter, digits=digits, algorithm=algorithm)


def format_utc(for_time: Union[int, float]) -> str:
    """Render a Unix time as UTC, or a placeholder past what datetime can hold."""
    try:
        return datetime.fromtimestamp(for_time, tz=timezone.utc).strftime(UTC_FORMAT)
    except (ValueError, OverflowError, OSError):
        return UTC_OUT_OF_RANGE


@dataclass(frozen=True)
class TotpRow:
    """One line of the code table: a single algorithm at a single time."""

    unix_time: int
    utc_time: str
    counter: int
    code: str
    algorithm: HashAlgorithm

    @property
    def counter_hex(self) -> str:
        return counter_hex(self.counter)


def totp_table(
    secret: Union[str, bytes],
    digits: int,
    for_time: Optional[int] = None,
    t0: int = DEFAULT_T0,
    step: int = DEFAULT_STEP,
    algorithms: Iterable[HashAlgorithm] = tuple(HashAlgorithm),
) -> List[TotpRow]:
    """
    Compute the code for each algorithm at one point in time.

    Args:
        secret: The shared secret, as an ASCII string or raw bytes.
        digits: Number of digits in each code.
        for_time: Seconds since the Unix epoch (default: now).
        t0: Unix time to start counting steps from (default: 0).
        step: Time-step size in seconds (default: 30).
        algorithms: Algorithms to include, in row order (default: all).

    Returns:
        One TotpRow per algorithm.
    """
    validate_digits(digits)
    if for_time is None:
        for_time = int(time.time())

    counter = time_counter(for_time, t0=t0, step=step)
    utc_time = format_utc(for_time)

    return [
        TotpRow(
            unix_time=for_time,
            utc_time=utc_time,
            counter=counter,
            code=generate_hotp(secret, counter, digits=digits, algorithm=algorithm),
            algorithm=algorithm,
        )
        for algorithm in algorithms
    ]
