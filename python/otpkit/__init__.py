"""
otpkit - HOTP/TOTP One-Time Passwords

Counter-based (RFC 4226) and time-based (RFC 6238) one-time passwords, plus
the otpauth:// key URIs used to provision authenticator apps.

Usage:
    from otpkit import totp, parse_key

    # Provision a new user
    key = totp.generate_key("Example", "alice@example.com")
    uri = key.url  # render as a QR code

    # Verify a login
    totp.validate_custom(code, key.secret, skew=1)

    # Read an existing key
    key = parse_key("otpauth://hotp/Example:alice?secret=JBSWY3DPEHPK3PXP")

Security:
    Codes are compared with hmac.compare_digest. Secret storage, counter
    persistence and replay protection belong to the caller.
"""

__version__ = "0.1.0"
__license__ = "CC0-1.0"

from otpkit import hotp, totp
from otpkit.algorithm import Algorithm
from otpkit.digits import Digits
from otpkit.errors import (
    OTPError,
    InvalidSecretEncodingError,
    InvalidInputLengthError,
    MissingIssuerError,
    MissingAccountNameError,
    KeyParseError,
    UnknownAlgorithmError,
)
from otpkit.hotp import HOTP
from otpkit.key import Key, parse as parse_key
from otpkit.secret import generate_secret, encode_secret, decode_secret
from otpkit.totp import TOTP

__all__ = [
    # Engines
    "hotp",
    "totp",
    "HOTP",
    "TOTP",
    # Parameters
    "Algorithm",
    "Digits",
    # Keys
    "Key",
    "parse_key",
    # Secrets
    "generate_secret",
    "encode_secret",
    "decode_secret",
    # Errors
    "OTPError",
    "InvalidSecretEncodingError",
    "InvalidInputLengthError",
    "MissingIssuerError",
    "MissingAccountNameError",
    "KeyParseError",
    "UnknownAlgorithmError",
]
