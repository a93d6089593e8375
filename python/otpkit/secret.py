"""
Shared secret helpers.

Secrets travel as unpadded, uppercase base32 text (RFC 4648), the form
authenticator apps expect. These helpers convert between that text and the
raw bytes used as the HMAC key.
"""

import base64
import binascii
import secrets

from otpkit.errors import InvalidSecretEncodingError


def generate_secret(size: int) -> bytes:
    """
    Generate random secret bytes for a new key.

    Args:
        size: Secret length in bytes

    Returns:
        Random bytes from the OS CSPRNG
    """
    if size <= 0:
        raise ValueError(f"Secret size must be positive, got {size}")
    return secrets.token_bytes(size)


def encode_secret(raw: bytes) -> str:
    """Base32-encode secret bytes without padding."""
    return base64.b32encode(raw).decode("ascii").rstrip("=")


def decode_secret(text: str) -> bytes:
    """
    Decode a base32 secret as typed or scanned by a user.

    Surrounding whitespace is trimmed, lowercase is accepted and missing
    padding is restored before decoding.

    Raises:
        InvalidSecretEncodingError: If the text is not valid base32
    """
    b32 = text.strip().upper()
    padding = len(b32) % 8
    if padding:
        b32 += "=" * (8 - padding)
    try:
        return base64.b32decode(b32)
    except (binascii.Error, ValueError):
        raise InvalidSecretEncodingError() from None
