#!/usr/bin/env python3
"""
otpkit CLI - Command-line interface for one-time passwords.

Usage:
    otpkit totp-setup --account ACCOUNT [--issuer ISSUER]
    otpkit hotp-setup --account ACCOUNT [--issuer ISSUER]
    otpkit totp-code <secret> [--time T]
    otpkit hotp-code <secret> <counter>
    otpkit verify <uri> <code> [--counter N] [--time T] [--skew S]
    otpkit inspect <uri>

Examples:
    # Set up TOTP for 2FA
    otpkit totp-setup --account user@example.com

    # Generate TOTP code
    otpkit totp-code JBSWY3DPEHPK3PXP

    # Check a code against a provisioned key
    otpkit verify "otpauth://totp/Example:alice?secret=JBSWY3DPEHPK3PXP" 123456
"""

import argparse
import logging
import sys
from typing import Optional

from otpkit import __version__, hotp, totp
from otpkit.algorithm import Algorithm
from otpkit.errors import OTPError
from otpkit.hotp import HOTP
from otpkit.key import parse
from otpkit.totp import TOTP

logger = logging.getLogger(__name__)


def _algorithm(value: str) -> Algorithm:
    try:
        return Algorithm.from_name(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def cmd_totp_setup(args: argparse.Namespace) -> int:
    """Set up TOTP for 2FA."""
    key = totp.generate_key(
        args.issuer,
        args.account,
        period=args.period,
        digits=args.digits,
        algorithm=args.algorithm,
    )

    print("TOTP Secret (Base32):", key.secret)
    print()
    print("QR Code URI:", key.url)
    print()
    print("Add this secret to your authenticator app (Google Authenticator, Authy, etc.)")
    print()
    print("Current code:", TOTP.from_key(key).generate())
    return 0


def cmd_hotp_setup(args: argparse.Namespace) -> int:
    """Set up HOTP for 2FA."""
    key = hotp.generate_key(
        args.issuer,
        args.account,
        digits=args.digits,
        algorithm=args.algorithm,
    )

    print("HOTP Secret (Base32):", key.secret)
    print()
    print("QR Code URI:", key.url)
    print()
    print("Code for counter 0:", HOTP.from_key(key).generate(0))
    return 0


def cmd_totp_code(args: argparse.Namespace) -> int:
    """Generate TOTP code from secret."""
    code = totp.generate_code(
        args.secret,
        args.time,
        period=args.period,
        digits=args.digits,
        algorithm=args.algorithm,
    )
    print(code)
    return 0


def cmd_hotp_code(args: argparse.Namespace) -> int:
    """Generate HOTP code from secret and counter."""
    print(hotp.generate_code(args.secret, args.counter, args.digits, args.algorithm))
    return 0


def cmd_verify(args: argparse.Namespace) -> int:
    """Verify a code against a key URI."""
    key = parse(args.uri)

    if key.type == "hotp":
        counter = key.counter if args.counter is None else args.counter
        valid = hotp.validate_custom(args.code, counter, key.secret, key.digits, key.algorithm)
    elif key.type == "totp":
        valid = totp.validate_custom(
            args.code,
            key.secret,
            args.time,
            period=key.period,
            skew=args.skew,
            digits=key.digits,
            algorithm=key.algorithm,
        )
    else:
        print(f"Error: Unsupported key type: {key.type!r}", file=sys.stderr)
        return 1

    print("valid" if valid else "invalid")
    return 0 if valid else 1


def cmd_inspect(args: argparse.Namespace) -> int:
    """Print the fields of a key URI."""
    for name, value in parse(args.uri).to_dict().items():
        print(f"{name}: {value}")
    return 0


def _add_code_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--digits", type=int, default=6, help="Code length (default: 6)")
    parser.add_argument(
        "--algorithm",
        type=_algorithm,
        default=Algorithm.SHA1,
        help="SHA1, SHA256, SHA512 or MD5 (default: SHA1)",
    )


def main(argv: Optional[list] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="otpkit",
        description="otpkit - HOTP/TOTP One-Time Passwords",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version", action="version", version=f"otpkit {__version__}"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # totp-setup command
    totp_setup_parser = subparsers.add_parser("totp-setup", help="Set up TOTP 2FA")
    totp_setup_parser.add_argument("--account", required=True, help="Account identifier")
    totp_setup_parser.add_argument("--issuer", default="otpkit", help="Service name")
    totp_setup_parser.add_argument("--period", type=int, default=30, help="Time step in seconds")
    _add_code_options(totp_setup_parser)

    # hotp-setup command
    hotp_setup_parser = subparsers.add_parser("hotp-setup", help="Set up HOTP 2FA")
    hotp_setup_parser.add_argument("--account", required=True, help="Account identifier")
    hotp_setup_parser.add_argument("--issuer", default="otpkit", help="Service name")
    _add_code_options(hotp_setup_parser)

    # totp-code command
    totp_code_parser = subparsers.add_parser("totp-code", help="Generate TOTP code")
    totp_code_parser.add_argument("secret", help="Base32 secret")
    totp_code_parser.add_argument("--period", type=int, default=30, help="Time step in seconds")
    totp_code_parser.add_argument("--time", type=int, help="Unix timestamp (default: now)")
    _add_code_options(totp_code_parser)

    # hotp-code command
    hotp_code_parser = subparsers.add_parser("hotp-code", help="Generate HOTP code")
    hotp_code_parser.add_argument("secret", help="Base32 secret")
    hotp_code_parser.add_argument("counter", type=int, help="Counter value")
    _add_code_options(hotp_code_parser)

    # verify command
    verify_parser = subparsers.add_parser("verify", help="Verify a code against a key URI")
    verify_parser.add_argument("uri", help="otpauth:// key URI")
    verify_parser.add_argument("code", help="Code to check")
    verify_parser.add_argument("--counter", type=int, help="HOTP counter (default: from URI)")
    verify_parser.add_argument("--time", type=int, help="Unix timestamp (default: now)")
    verify_parser.add_argument("--skew", type=int, default=1, help="TOTP steps of drift allowed")

    # inspect command
    inspect_parser = subparsers.add_parser("inspect", help="Show the fields of a key URI")
    inspect_parser.add_argument("uri", help="otpauth:// key URI")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        return 0

    commands = {
        "totp-setup": cmd_totp_setup,
        "hotp-setup": cmd_hotp_setup,
        "totp-code": cmd_totp_code,
        "hotp-code": cmd_hotp_code,
        "verify": cmd_verify,
        "inspect": cmd_inspect,
    }

    try:
        return commands[args.command](args)
    except (OTPError, ValueError) as e:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
