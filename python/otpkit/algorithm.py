"""
Hash algorithm selection for HOTP/TOTP.

Each member maps the name used in otpauth:// URIs to a hashlib constructor.
"""

import hashlib
import hmac
from enum import Enum
from typing import Optional

from otpkit.errors import UnknownAlgorithmError


class Algorithm(Enum):
    """Hash function used to compute one-time passwords."""

    SHA1 = "SHA1"
    SHA256 = "SHA256"
    SHA512 = "SHA512"
    MD5 = "MD5"

    def __str__(self) -> str:
        return self.value

    @property
    def digestmod(self):
        """hashlib constructor for this algorithm."""
        return _DIGESTS[self]

    @property
    def digest_size(self) -> int:
        """Size of the raw HMAC output in bytes."""
        return self.digestmod().digest_size

    def new_hmac(self, key: bytes, msg: Optional[bytes] = None) -> hmac.HMAC:
        """
        Create a fresh HMAC context keyed with `key`.

        Args:
            key: Raw secret bytes
            msg: Optional initial message

        Returns:
            Independent hmac.HMAC instance
        """
        return hmac.new(key, msg, self.digestmod)

    @classmethod
    def from_name(cls, name: str) -> "Algorithm":
        """
        Look up an algorithm by its URI name.

        Accepts any case and an optional dash ("sha-256").

        Raises:
            UnknownAlgorithmError: If the name matches no member
        """
        normalized = name.strip().upper().replace("-", "")
        try:
            return cls(normalized)
        except ValueError:
            raise UnknownAlgorithmError(f"Unknown algorithm: {name!r}") from None


_DIGESTS = {
    Algorithm.SHA1: hashlib.sha1,
    Algorithm.SHA256: hashlib.sha256,
    Algorithm.SHA512: hashlib.sha512,
    Algorithm.MD5: hashlib.md5,
}
