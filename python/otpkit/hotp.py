"""
otpkit HOTP - HMAC-based One-Time Passwords (RFC 4226).

Example:
    >>> from otpkit import hotp
    >>> key = hotp.generate_key("Example", "alice@example.com")
    >>> code = hotp.generate_code(key.secret, counter=0)
    >>> hotp.validate(code, 0, key.secret)  # True

The caller owns the counter: persisting it and rejecting replays of an
already-used counter is outside this module.
"""

import hmac
import logging
import struct
from typing import Optional, Union

from otpkit.algorithm import Algorithm
from otpkit.digits import Digits
from otpkit.errors import (
    InvalidInputLengthError,
    MissingAccountNameError,
    MissingIssuerError,
    OTPError,
)
from otpkit.key import Key, build_url
from otpkit.secret import decode_secret, encode_secret, generate_secret

logger = logging.getLogger(__name__)

DEFAULT_SECRET_SIZE = 20
MAX_COUNTER = 0xFFFFFFFFFFFFFFFF


def generate_code(
    secret: str,
    counter: int,
    digits: Union[Digits, int] = Digits.SIX,
    algorithm: Algorithm = Algorithm.SHA1,
) -> str:
    """
    Compute the HOTP code for `counter`.

    Args:
        secret: Base32 secret (padding optional, any case)
        counter: Moving factor, 0 <= counter < 2**64
        digits: Code length (default: 6)
        algorithm: HMAC hash (default: SHA1)

    Returns:
        Zero-padded code of exactly `digits` characters

    Raises:
        InvalidSecretEncodingError: If the secret is not valid base32
    """
    digits = Digits.coerce(digits)
    if not 0 <= counter <= MAX_COUNTER:
        raise ValueError(f"Counter must fit in 64 unsigned bits, got {counter}")

    key = decode_secret(secret)

    # Counter as 8-byte big-endian
    mac = algorithm.new_hmac(key, struct.pack(">Q", counter)).digest()

    # Dynamic truncation (RFC 4226 section 5.4)
    offset = mac[-1] & 0x0F
    value = struct.unpack(">I", mac[offset : offset + 4])[0] & 0x7FFFFFFF

    return digits.format(value % digits.modulus)


def validate_custom(
    passcode: str,
    counter: int,
    secret: str,
    digits: Union[Digits, int] = Digits.SIX,
    algorithm: Algorithm = Algorithm.SHA1,
) -> bool:
    """
    Check a user-supplied passcode against one counter value.

    Returns:
        True on an exact match, False for a well-formed wrong code

    Raises:
        InvalidInputLengthError: If the passcode has the wrong length
        InvalidSecretEncodingError: If the secret is not valid base32
    """
    digits = Digits.coerce(digits)
    passcode = passcode.strip()

    if len(passcode) != digits.length():
        raise InvalidInputLengthError()

    expected = generate_code(secret, counter, digits, algorithm)

    # compare_digest runs in time independent of where the inputs differ
    return hmac.compare_digest(expected.encode(), passcode.encode())


def validate(passcode: str, counter: int, secret: str) -> bool:
    """
    Validate with the default options (6 digits, SHA1).

    Malformed input is reported as a failed validation rather than raised.
    """
    try:
        return validate_custom(passcode, counter, secret)
    except OTPError as e:
        logger.debug("HOTP validation rejected input: %s", e)
        return False


def generate_key(
    issuer: str,
    account_name: str,
    secret_size: int = DEFAULT_SECRET_SIZE,
    digits: Union[Digits, int] = Digits.SIX,
    algorithm: Algorithm = Algorithm.SHA1,
) -> Key:
    """
    Generate a new HOTP key with a random secret.

    Args:
        issuer: Service name shown by authenticator apps
        account_name: User account identifier (e.g., email)
        secret_size: Secret length in bytes (default: 20)
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

    digits = Digits.coerce(digits)
    secret = encode_secret(generate_secret(secret_size))

    url = build_url(
        "hotp",
        issuer,
        account_name,
        [
            ("secret", secret),
            ("issuer", issuer),
            ("algorithm", str(algorithm)),
            ("digits", str(digits)),
        ],
    )
    logger.debug("Generated HOTP key for issuer %r (%d-byte secret)", issuer, secret_size)
    return Key.from_url(url)


class HOTP:
    """
    Counter-based One-Time Password generator/verifier.

    Wraps one base32 secret and its parameters so they need not be repeated
    on every call.
    """

    def __init__(
        self,
        secret: str,
        digits: Union[Digits, int] = Digits.SIX,
        algorithm: Algorithm = Algorithm.SHA1,
    ):
        """
        Initialize HOTP generator.

        Args:
            secret: Base32 shared secret
            digits: OTP length (6 or 8)
            algorithm: HMAC hash (default: SHA1)
        """
        self.secret = secret
        self.digits = Digits.coerce(digits)
        self.algorithm = algorithm

    @classmethod
    def from_key(cls, key: Key) -> "HOTP":
        """Build a generator from the parameters carried by a key URI."""
        return cls(key.secret, key.digits, key.algorithm)

    def generate(self, counter: int) -> str:
        """Generate the code for `counter`."""
        return generate_code(self.secret, counter, self.digits, self.algorithm)

    def verify(self, code: str, counter: int) -> bool:
        """Verify a code against `counter`. Raises on malformed input."""
        return validate_custom(code, counter, self.secret, self.digits, self.algorithm)

    def provisioning_uri(
        self,
        account: str,
        issuer: str,
        counter: Optional[int] = None,
    ) -> str:
        """
        Generate URI for QR code (otpauth://).

        Args:
            account: User account identifier (e.g., email)
            issuer: Service name
            counter: Initial counter to advertise, if any

        Returns:
            otpauth:// URI for QR code generation
        """
        params = [
            ("secret", self.secret.strip().upper().rstrip("=")),
            ("issuer", issuer),
            ("algorithm", str(self.algorithm)),
            ("digits", str(self.digits)),
        ]
        if counter is not None:
            params.append(("counter", str(counter)))
        return build_url("hotp", issuer, account, params)
