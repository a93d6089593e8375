"""Tests for otpkit TOTP."""

import base64
import time
from datetime import datetime, timedelta, timezone

import pytest
from otpkit import hotp, totp
from otpkit.algorithm import Algorithm
from otpkit.digits import Digits
from otpkit.errors import (
    InvalidInputLengthError,
    InvalidSecretEncodingError,
    MissingAccountNameError,
    MissingIssuerError,
)
from otpkit.key import parse
from otpkit.totp import TOTP

SECRET_SHA1 = base64.b32encode(b"12345678901234567890").decode()
SECRET_SHA256 = base64.b32encode(b"12345678901234567890123456789012").decode()
SECRET_SHA512 = base64.b32encode(
    b"1234567890123456789012345678901234567890123456789012345678901234"
).decode()

# RFC 6238 Appendix B
RFC6238_VECTORS = [
    (59, "94287082", Algorithm.SHA1, SECRET_SHA1),
    (59, "46119246", Algorithm.SHA256, SECRET_SHA256),
    (59, "90693936", Algorithm.SHA512, SECRET_SHA512),
    (1111111109, "07081804", Algorithm.SHA1, SECRET_SHA1),
    (1111111109, "68084774", Algorithm.SHA256, SECRET_SHA256),
    (1111111109, "25091201", Algorithm.SHA512, SECRET_SHA512),
    (1111111111, "14050471", Algorithm.SHA1, SECRET_SHA1),
    (1111111111, "67062674", Algorithm.SHA256, SECRET_SHA256),
    (1111111111, "99943326", Algorithm.SHA512, SECRET_SHA512),
    (1234567890, "89005924", Algorithm.SHA1, SECRET_SHA1),
    (1234567890, "91819424", Algorithm.SHA256, SECRET_SHA256),
    (1234567890, "93441116", Algorithm.SHA512, SECRET_SHA512),
    (2000000000, "69279037", Algorithm.SHA1, SECRET_SHA1),
    (2000000000, "90698825", Algorithm.SHA256, SECRET_SHA256),
    (2000000000, "38618901", Algorithm.SHA512, SECRET_SHA512),
    (20000000000, "65353130", Algorithm.SHA1, SECRET_SHA1),
    (20000000000, "77737706", Algorithm.SHA256, SECRET_SHA256),
    (20000000000, "47863826", Algorithm.SHA512, SECRET_SHA512),
]


class TestGenerateCode:
    """Test TOTP code generation."""

    @pytest.mark.parametrize("ts,expected,algorithm,secret", RFC6238_VECTORS)
    def test_rfc6238_vectors(self, ts, expected, algorithm, secret):
        """Codes match the RFC 6238 test vectors."""
        assert totp.generate_code(secret, ts, digits=Digits.EIGHT, algorithm=algorithm) == expected

    def test_datetime_input(self):
        """Aware and naive datetimes are accepted (naive = UTC)."""
        aware = datetime(2005, 3, 18, 1, 58, 29, tzinfo=timezone.utc)  # 1111111109
        naive = aware.replace(tzinfo=None)
        assert totp.generate_code(SECRET_SHA1, aware, digits=8) == "07081804"
        assert totp.generate_code(SECRET_SHA1, naive, digits=8) == "07081804"

    def test_float_timestamp(self):
        """Fractional seconds floor to the same step."""
        assert totp.generate_code(SECRET_SHA1, 59.9, digits=8) == "94287082"

    def test_delegates_to_hotp(self):
        """TOTP is HOTP at floor(t / period)."""
        assert totp.generate_code(SECRET_SHA1, 95, period=30) == hotp.generate_code(SECRET_SHA1, 3)
        assert totp.generate_code(SECRET_SHA1, 95, period=60) == hotp.generate_code(SECRET_SHA1, 1)

    def test_zero_period_defaults(self):
        """Unset period falls back to 30 seconds."""
        assert totp.generate_code(SECRET_SHA1, 95, period=0) == totp.generate_code(SECRET_SHA1, 95)
        assert totp.generate_code(SECRET_SHA1, 95, period=None) == totp.generate_code(SECRET_SHA1, 95)

    def test_negative_period(self):
        """Negative period is rejected."""
        with pytest.raises(ValueError):
            totp.generate_code(SECRET_SHA1, 95, period=-30)

    def test_counter_at(self):
        """Counter is floor(t / period)."""
        assert totp.counter_at(59) == 1
        assert totp.counter_at(60) == 2
        assert totp.counter_at(1111111109, 30) == 37037036

    def test_default_now(self):
        """Default time is now."""
        code = totp.generate_code(SECRET_SHA1)
        assert len(code) == 6
        assert totp.validate_custom(code, SECRET_SHA1, skew=1)

    def test_invalid_secret(self):
        """Malformed secret raises."""
        with pytest.raises(InvalidSecretEncodingError):
            totp.generate_code("!!!!", 59)


class TestValidate:
    """Test TOTP validation."""

    @pytest.mark.parametrize("ts,code,algorithm,secret", RFC6238_VECTORS)
    def test_rfc6238_vectors(self, ts, code, algorithm, secret):
        """RFC codes validate at their time."""
        assert totp.validate_custom(code, secret, ts, digits=8, algorithm=algorithm)

    @pytest.mark.parametrize("t", [1111111080, 1111111095])
    def test_skew_tolerance(self, t):
        """Skew 1 accepts +/-29s and rejects +/-61s."""
        code = totp.generate_code(SECRET_SHA1, t)
        assert totp.validate_custom(code, SECRET_SHA1, t, period=30, skew=1)
        assert totp.validate_custom(code, SECRET_SHA1, t + 29, period=30, skew=1)
        assert totp.validate_custom(code, SECRET_SHA1, t - 29, period=30, skew=1)
        assert not totp.validate_custom(code, SECRET_SHA1, t + 61, period=30, skew=1)
        assert not totp.validate_custom(code, SECRET_SHA1, t - 61, period=30, skew=1)

    def test_zero_skew(self):
        """Skew 0 checks only the current step."""
        t = 1111111080
        code = totp.generate_code(SECRET_SHA1, t)
        assert totp.validate_custom(code, SECRET_SHA1, t + 29, skew=0)
        assert not totp.validate_custom(code, SECRET_SHA1, t + 30, skew=0)

    def test_wider_skew(self):
        """Skew 2 reaches two steps away."""
        t = 1111111080
        code = totp.generate_code(SECRET_SHA1, t)
        assert totp.validate_custom(code, SECRET_SHA1, t + 60, skew=2)
        assert totp.validate_custom(code, SECRET_SHA1, t - 60, skew=2)
        assert not totp.validate_custom(code, SECRET_SHA1, t + 90, skew=2)

    def test_negative_skew(self):
        """Negative skew is rejected."""
        with pytest.raises(ValueError):
            totp.validate_custom("123456", SECRET_SHA1, 59, skew=-1)

    def test_window_order(self, monkeypatch):
        """Current step first, then +1, -1, +2, -2."""
        seen = []

        def record(passcode, counter, secret, digits, algorithm):
            seen.append(counter)
            return False

        monkeypatch.setattr(totp.hotp, "validate_custom", record)
        assert not totp.validate_custom("123456", SECRET_SHA1, 300, skew=2)
        assert seen == [10, 11, 9, 12, 8]

    def test_window_stops_on_match(self, monkeypatch):
        """Scan stops at the first matching step."""
        seen = []

        def record(passcode, counter, secret, digits, algorithm):
            seen.append(counter)
            return counter == 11

        monkeypatch.setattr(totp.hotp, "validate_custom", record)
        assert totp.validate_custom("123456", SECRET_SHA1, 300, skew=3)
        assert seen == [10, 11]

    def test_window_wraps_at_zero(self, monkeypatch):
        """Step before counter 0 wraps like an unsigned counter."""
        seen = []

        def record(passcode, counter, secret, digits, algorithm):
            seen.append(counter)
            return False

        monkeypatch.setattr(totp.hotp, "validate_custom", record)
        totp.validate_custom("123456", SECRET_SHA1, 0, skew=1)
        assert seen == [0, 1, hotp.MAX_COUNTER]

    def test_error_aborts_scan(self, monkeypatch):
        """First error propagates without trying remaining steps."""
        seen = []

        def record(passcode, counter, secret, digits, algorithm):
            seen.append(counter)
            raise InvalidSecretEncodingError()

        monkeypatch.setattr(totp.hotp, "validate_custom", record)
        with pytest.raises(InvalidSecretEncodingError):
            totp.validate_custom("123456", SECRET_SHA1, 300, skew=2)
        assert seen == [10]

    def test_wrong_length_raises(self):
        """Wrong length raises InvalidInputLengthError."""
        with pytest.raises(InvalidInputLengthError):
            totp.validate_custom("12345", SECRET_SHA1, 59)

    def test_invalid_secret_raises(self):
        """Malformed secret raises, not False."""
        with pytest.raises(InvalidSecretEncodingError):
            totp.validate_custom("123456", "!!!!", 59)

    def test_wrong_code(self):
        """Wrong code returns False."""
        code = totp.generate_code(SECRET_SHA1, 59)
        wrong = f"{(int(code) + 1) % 1000000:06d}"
        assert not totp.validate_custom(wrong, SECRET_SHA1, 59, skew=0)

    def test_default_validate(self):
        """Convenience validate at current time."""
        code = totp.generate_code(SECRET_SHA1)
        assert totp.validate(code, SECRET_SHA1)
        assert not totp.validate("12345", SECRET_SHA1)
        assert not totp.validate(code, "!!!!")


class TestGenerateKey:
    """Test TOTP key generation."""

    def test_generate(self):
        """Generated key carries identity and a 10-byte secret."""
        key = totp.generate_key("Example", "alice@example.com")
        assert key.type == "totp"
        assert key.issuer == "Example"
        assert key.account_name == "alice@example.com"
        assert len(key.secret) == 16
        assert key.period == 30

    def test_url_layout(self):
        """Period is appended after the common parameters."""
        key = totp.generate_key("Example", "alice", period=60, digits=8)
        query = key.url.split("?", 1)[1]
        names = [pair.split("=", 1)[0] for pair in query.split("&")]
        assert names == ["secret", "issuer", "algorithm", "digits", "period"]
        assert key.period == 60
        assert key.digits == Digits.EIGHT
        assert key.algorithm is Algorithm.SHA1

    def test_missing_issuer(self):
        """Issuer is required."""
        with pytest.raises(MissingIssuerError):
            totp.generate_key("", "alice")

    def test_missing_account_name(self):
        """Account name is required."""
        with pytest.raises(MissingAccountNameError):
            totp.generate_key("Example", "")

    def test_roundtrip(self):
        """Parsing the URL yields the same identity and secret."""
        key = totp.generate_key("X", "y@z")
        parsed = parse(key.url)
        assert parsed.issuer == "X"
        assert parsed.account_name == "y@z"
        assert parsed.secret == key.secret

    def test_issuer_with_spaces(self):
        """Issuer and account are percent-encoded in the label."""
        key = totp.generate_key("Acme Corp", "alice smith")
        assert " " not in key.url
        parsed = parse(key.url)
        assert parsed.issuer == "Acme Corp"
        assert parsed.account_name == "alice smith"

    def test_issuer_with_colon(self):
        """Colon in the issuer does not leak into the account name."""
        parsed = parse(totp.generate_key("A:B", "c").url)
        assert parsed.issuer == "A:B"
        assert parsed.account_name == "c"


class TestTOTP:
    """Test TOTP class."""

    def test_generate_verify(self):
        """Generate and verify TOTP code."""
        key = totp.generate_key("Example", "alice")
        t = TOTP.from_key(key)
        code = t.generate()
        assert t.verify(code)

    def test_code_length_8(self):
        """8-digit codes work."""
        t = TOTP(SECRET_SHA1, digits=8)
        assert t.generate(59) == "94287082"

    def test_time_window(self):
        """Codes valid within time window."""
        t = TOTP(SECRET_SHA1, interval=30)
        now = int(time.time())
        old_code = t.generate(now - 30)
        assert t.verify(old_code, now, window=1)

    def test_expired_code_fails(self):
        """Very old codes fail."""
        t = TOTP(SECRET_SHA1, interval=30)
        now = int(time.time())
        old_code = t.generate(now - 120)
        assert not t.verify(old_code, now, window=1)

    def test_datetime_timestamp(self):
        """Datetimes work as timestamps."""
        t = TOTP(SECRET_SHA1, digits=8)
        moment = datetime(1970, 1, 1, tzinfo=timezone.utc) + timedelta(seconds=1234567890)
        assert t.generate(moment) == "89005924"

    def test_remaining(self):
        """Seconds left in the current step."""
        t = TOTP(SECRET_SHA1, interval=30)
        assert t.remaining(60) == 30
        assert t.remaining(89) == 1

    def test_sha256_algorithm(self):
        """SHA256 algorithm works."""
        t = TOTP(SECRET_SHA256, digits=8, algorithm=Algorithm.SHA256)
        assert t.verify("46119246", 59)

    def test_provisioning_uri(self):
        """Provisioning URI is valid."""
        t = TOTP(SECRET_SHA1, interval=60)
        uri = t.provisioning_uri("user@example.com", "MyApp")

        assert uri.startswith("otpauth://totp/")
        assert "MyApp:user@example.com" in uri
        assert "issuer=MyApp" in uri
        assert parse(uri).period == 60
        assert parse(uri).secret == SECRET_SHA1
