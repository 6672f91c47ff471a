"""Exceptions raised by rfc6238-totp."""


class TOTPError(Exception):
    """Base class for all one-time password errors."""


class InvalidDigitCount(TOTPError, ValueError):
    """Requested code length is outside the supported range."""

    def __init__(self, digits: int, minimum: int, maximum: int):
        self.digits = digits
        super().__init__(
            f"Digit count must be between {minimum} and {maximum}, got {digits}"
        )


class InvalidSecretEncoding(TOTPError, ValueError):
    """Shared secret cannot be used as an HMAC key."""


class CryptoUnavailable(TOTPError, RuntimeError):
    """The crypto backend does not provide the requested HMAC primitive."""
