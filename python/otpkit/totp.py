"""
otpkit TOTP - Time-based One-Time Passwords (RFC 6238).

Compatible with Google Authenticator, Authy, Microsoft Authenticator, etc.

Example:
    >>> from otpkit.totp import TOTP, generate_key
    >>> key = generate_key("Example", "alice@example.com")
    >>> totp = TOTP.from_key(key)
    >>> code = totp.generate()
    >>> totp.verify(code)  # True
"""

import logging
import math
import time
from datetime import datetime, timezone
from typing import Iterator, Optional, Union

from otpkit import hotp
from otpkit.algorithm import Algorithm
from otpkit.digits import Digits
from otpkit.errors import MissingAccountNameError, MissingIssuerError, OTPError
from otpkit.key import DEFAULT_PERIOD, Key, build_url
from otpkit.secret import encode_secret, generate_secret

logger = logging.getLogger(__name__)

DEFAULT_SKEW = 1
DEFAULT_SECRET_SIZE = 10

Timestamp = Union[int, float, datetime, None]


def _unix_seconds(t: Timestamp) -> int:
    if t is None:
        return int(time.time())
    if isinstance(t, datetime):
        if t.tzinfo is None:
            t = t.replace(tzinfo=timezone.utc)
        return math.floor(t.timestamp())
    return math.floor(t)


def _period(period: Optional[int]) -> int:
    if not period:
        return DEFAULT_PERIOD
    if period < 0:
        raise ValueError(f"Period must be positive, got {period}")
    return period


def counter_at(t: Timestamp = None, period: Optional[int] = DEFAULT_PERIOD) -> int:
    """
    Time-step counter for `t`: floor(unix_seconds / period).

    Args:
        t: Unix timestamp or datetime (default: now; naive datetimes are UTC)
        period: Time step in seconds (default: 30)
    """
    return _unix_seconds(t) // _period(period)


def generate_code(
    secret: str,
    t: Timestamp = None,
    period: Optional[int] = DEFAULT_PERIOD,
    digits: Union[Digits, int] = Digits.SIX,
    algorithm: Algorithm = Algorithm.SHA1,
) -> str:
    """
    Generate the TOTP code for time `t`.

    Args:
        secret: Base32 secret
        t: Unix timestamp or datetime (default: now)
        period: Time step in seconds (default: 30)
        digits: Code length (default: 6)
        algorithm: HMAC hash (default: SHA1)

    Returns:
        OTP code as string (zero-padded)
    """
    counter = counter_at(t, period) & hotp.MAX_COUNTER
    return hotp.generate_code(secret, counter, digits, algorithm)


def _offsets(skew: int) -> Iterator[int]:
    yield 0
    for i in range(1, skew + 1):
        yield i
        yield -i


def validate_custom(
    passcode: str,
    secret: str,
    t: Timestamp = None,
    period: Optional[int] = DEFAULT_PERIOD,
    skew: int = DEFAULT_SKEW,
    digits: Union[Digits, int] = Digits.SIX,
    algorithm: Algorithm = Algorithm.SHA1,
) -> bool:
    """
    Verify a TOTP code, tolerating `skew` time steps of clock drift.

    The current step is tried first, then each offset forward and backward
    in increasing distance. The first error aborts the scan.

    Returns:
        True if any step in the window matches

    Raises:
        InvalidInputLengthError: If the passcode has the wrong length
        InvalidSecretEncodingError: If the secret is not valid base32
    """
    if skew < 0:
        raise ValueError(f"Skew must not be negative, got {skew}")

    counter = counter_at(t, period)
    for offset in _offsets(skew):
        # Same wrap-around as an unsigned 64-bit counter
        candidate = (counter + offset) & hotp.MAX_COUNTER
        if hotp.validate_custom(passcode, candidate, secret, digits, algorithm):
            if offset:
                logger.debug("TOTP code matched %+d steps from current", offset)
            return True

    logger.debug("TOTP code matched no step within skew %d", skew)
    return False


def validate(passcode: str, secret: str) -> bool:
    """
    Validate at the current time with default options.

    Malformed input is reported as a failed validation rather than raised.
    """
    try:
        return validate_custom(passcode, secret, datetime.now(timezone.utc))
    except OTPError as e:
        logger.debug("TOTP validation rejected input: %s", e)
        return False


def generate_key(
    issuer: str,
    account_name: str,
    period: int = DEFAULT_PERIOD,
    secret_size: int = DEFAULT_SECRET_SIZE,
    digits: Union[Digits, int] = Digits.SIX,
    algorithm: Algorithm = Algorithm.SHA1,
) -> Key:
    """
    Generate a new TOTP key with a random secret.

    Args:
        issuer: Service name shown by authenticator apps
        account_name: User account identifier (e.g., email)
        period: Time step in seconds (default: 30)
        secret_size: Secret length in bytes (default: 10)
        digits: Code length (default: 6)
        algorithm: HMAC hash (default: SHA1)

    Raises:
        MissingIssuerError: If issuer is empty
        MissingAccountNameError: If account_name is empty
    """
    if not issuer:
        raise MissingIssuerError()
    if not account_name:
        raise MissingAccountNameError()

    period = _period(period)
    digits = Digits.coerce(digits)
    secret = encode_secret(generate_secret(secret_size))

    url = build_url(
        "totp",
        issuer,
        account_name,
        [
            ("secret", secret),
            ("issuer", issuer),
            ("algorithm", str(algorithm)),
            ("digits", str(digits)),
            ("period", str(period)),
        ],
    )
    logger.debug("Generated TOTP key for issuer %r (%d-byte secret)", issuer, secret_size)
    return Key.from_url(url)


class TOTP:
    """
    Time-based One-Time Password generator/verifier.

    Compatible with RFC 6238 and common authenticator apps.
    """

    def __init__(
        self,
        secret: str,
        digits: Union[Digits, int] = Digits.SIX,
        interval: int = DEFAULT_PERIOD,
        algorithm: Algorithm = Algorithm.SHA1,
    ):
        """
        Initialize TOTP generator.

        Args:
            secret: Base32 shared secret
            digits: OTP length (6 or 8)
            interval: Time step in seconds (default: 30)
            algorithm: HMAC hash (default: SHA1)
        """
        self.secret = secret
        self.digits = Digits.coerce(digits)
        self.interval = _period(interval)
        self.algorithm = algorithm

    @classmethod
    def from_key(cls, key: Key) -> "TOTP":
        """Build a generator from the parameters carried by a key URI."""
        return cls(key.secret, key.digits, key.period, key.algorithm)

    def generate(self, timestamp: Timestamp = None) -> str:
        """
        Generate TOTP code.

        Args:
            timestamp: Unix timestamp or datetime (default: current time)
        """
        return generate_code(self.secret, timestamp, self.interval, self.digits, self.algorithm)

    def verify(
        self,
        code: str,
        timestamp: Timestamp = None,
        window: int = DEFAULT_SKEW,
    ) -> bool:
        """
        Verify TOTP code with time window.

        Args:
            code: User-provided code
            timestamp: Time to verify against (default: now)
            window: Number of intervals to check before/after

        Returns:
            True if code is valid
        """
        return validate_custom(
            code, self.secret, timestamp, self.interval, window, self.digits, self.algorithm
        )

    def remaining(self, timestamp: Timestamp = None) -> int:
        """Seconds until the current code rolls over."""
        return self.interval - _unix_seconds(timestamp) % self.interval

    def provisioning_uri(self, account: str, issuer: str) -> str:
        """
        Generate URI for QR code (otpauth://).

        Args:
            account: User account identifier (e.g., email)
            issuer: Service name

        Returns:
            otpauth:// URI for QR code generation
        """
        return build_url(
            "totp",
            issuer,
            account,
            [
                ("secret", self.secret.strip().upper().rstrip("=")),
                ("issuer", issuer),
                ("algorithm", str(self.algorithm)),
                ("digits", str(self.digits)),
                ("period", str(self.interval)),
            ],
        )
