"""
otpauth:// key URIs.

A Key packages the issuer, account name, secret and parameters of an OTP
series in the URI format read by Google Authenticator, Authy, etc.:

    otpauth://totp/Example:alice@example.com?secret=JBSWY3DPEHPK3PXP&issuer=Example

Example:
    >>> from otpkit.key import parse
    >>> key = parse("otpauth://totp/Example:alice@example.com?secret=JBSWY3DPEHPK3PXP")
    >>> key.issuer, key.account_name
    ('Example', 'alice@example.com')
"""

from typing import Iterable, Tuple
from urllib.parse import SplitResult, parse_qs, quote, unquote, urlencode, urlsplit, urlunsplit

from otpkit.algorithm import Algorithm
from otpkit.digits import Digits
from otpkit.errors import KeyParseError

SCHEME = "otpauth"
DEFAULT_PERIOD = 30


class Key:
    """
    Immutable view over an HOTP or TOTP key URI.

    Accessors read straight from the parsed URI; nothing is validated until
    a typed accessor (algorithm, digits, period, counter) is used.
    """

    __slots__ = ("_orig", "_url")

    def __init__(self, orig: str, url: SplitResult):
        object.__setattr__(self, "_orig", orig)
        object.__setattr__(self, "_url", url)

    def __setattr__(self, name, value):
        raise AttributeError("Key is immutable")

    @classmethod
    def from_url(cls, orig: str) -> "Key":
        """
        Create a Key from TOTP or HOTP URI text.

        Raises:
            KeyParseError: If the text is not a valid URI
        """
        s = orig.strip()
        try:
            url = urlsplit(s)
            url.port  # malformed authority raises here
        except ValueError as e:
            raise KeyParseError(f"Invalid key URI: {e}") from e
        return cls(s, url)

    def __str__(self) -> str:
        return self._orig

    def __repr__(self) -> str:
        return f"Key(type={self.type!r}, issuer={self.issuer!r}, account_name={self.account_name!r})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Key):
            return NotImplemented
        return self._orig == other._orig

    def __hash__(self) -> int:
        return hash(self._orig)

    def _query(self, name: str) -> str:
        values = parse_qs(self._url.query, keep_blank_values=True).get(name)
        return values[0] if values else ""

    def _label_parts(self) -> Tuple[str, str, str]:
        path = self._url.path
        if path.startswith("/"):
            path = path[1:]
        # A literal ":" separates issuer and account, so an encoded one
        # inside the issuer survives. Without one, "Example%3Aalice" still
        # splits after decoding.
        if ":" not in path:
            return unquote(path).partition(":")
        prefix, sep, rest = path.partition(":")
        return unquote(prefix), sep, unquote(rest)

    @property
    def type(self) -> str:
        """URI host: "hotp" or "totp" (not validated)."""
        # Host without any userinfo, port kept verbatim
        return self._url.netloc.rpartition("@")[2]

    @property
    def issuer(self) -> str:
        """Issuer from the query, else the label prefix before ':'."""
        issuer = self._query("issuer")
        if issuer:
            return issuer

        prefix, sep, _ = self._label_parts()
        return prefix if sep else ""

    @property
    def account_name(self) -> str:
        """Label after the first ':', or the whole label."""
        prefix, sep, account = self._label_parts()
        return account if sep else prefix

    @property
    def secret(self) -> str:
        """Base32 secret exactly as carried in the URI."""
        return self._query("secret")

    @property
    def algorithm(self) -> Algorithm:
        name = self._query("algorithm")
        if not name:
            return Algorithm.SHA1
        return Algorithm.from_name(name)

    @property
    def digits(self) -> Digits:
        value = self._query("digits")
        if not value:
            return Digits.SIX
        return Digits(int(value))

    @property
    def period(self) -> int:
        """TOTP time step in seconds (30 when absent)."""
        value = self._query("period")
        if not value:
            return DEFAULT_PERIOD
        return int(value)

    @property
    def counter(self) -> int:
        """HOTP initial counter (0 when absent)."""
        value = self._query("counter")
        if not value:
            return 0
        return int(value)

    @property
    def url(self) -> str:
        """Canonical URI text."""
        return urlunsplit(self._url)

    def to_dict(self) -> dict:
        """Decoded fields (for display or storage by the caller)."""
        data = {
            "type": self.type,
            "issuer": self.issuer,
            "account_name": self.account_name,
            "secret": self.secret,
            "algorithm": str(self.algorithm),
            "digits": int(self.digits),
        }
        if self.type == "totp":
            data["period"] = self.period
        elif self.type == "hotp":
            data["counter"] = self.counter
        return data


def parse(uri: str) -> Key:
    """Parse otpauth:// URI text into a Key."""
    return Key.from_url(uri)


def build_url(
    otp_type: str,
    issuer: str,
    account_name: str,
    params: Iterable[Tuple[str, str]],
) -> str:
    """
    Build otpauth:// URI text.

    Query parameters keep the order in which they are given.
    """
    path = "/" + quote(issuer, safe="@") + ":" + quote(account_name, safe="@")
    return urlunsplit((SCHEME, otp_type, path, urlencode(list(params)), ""))
