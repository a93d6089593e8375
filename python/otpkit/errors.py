"""Exceptions raised by otpkit."""


class OTPError(Exception):
    """Base class for all otpkit errors."""

    pass


class InvalidSecretEncodingError(OTPError, ValueError):
    """Secret could not be decoded as base32."""

    def __init__(self, message: str = "Decoding of secret as base32 failed"):
        super().__init__(message)


class InvalidInputLengthError(OTPError, ValueError):
    """Passcode length does not match the configured digit count."""

    def __init__(self, message: str = "Input length unexpected"):
        super().__init__(message)


class MissingIssuerError(OTPError, ValueError):
    """Key generation requested without an issuer."""

    def __init__(self, message: str = "Issuer must be set"):
        super().__init__(message)


class MissingAccountNameError(OTPError, ValueError):
    """Key generation requested without an account name."""

    def __init__(self, message: str = "AccountName must be set"):
        super().__init__(message)


class KeyParseError(OTPError, ValueError):
    """Text is not a syntactically valid URI."""

    pass


class UnknownAlgorithmError(OTPError, ValueError):
    """Algorithm name does not match any supported hash."""

    pass
