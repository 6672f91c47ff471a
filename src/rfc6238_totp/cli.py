"""Command-line interface for rfc6238-totp."""

import argparse
import logging
import sys
from typing import List, Optional, Sequence

from rfc6238_totp.errors import TOTPError
from rfc6238_totp.hotp import HashAlgorithm, validate_digits
from rfc6238_totp.totp import DEFAULT_STEP, DEFAULT_T0, TotpRow, totp_table


COLUMNS = (
    ("Time(sec)", 15),
    ("Time (UTC format)", 20),
    ("Value of T(Hex)", 20),
    ("TOTP", 15),
    ("Mode", 10),
)


def _border() -> str:
    return "+" + "+".join("-" * width for _, width in COLUMNS) + "+"


def _line(cells: Sequence[str]) -> str:
    padded = (f"{cell:<{width}}" for cell, (_, width) in zip(cells, COLUMNS))
    return "|" + "|".join(padded) + "|"


def render_table(rows: List[TotpRow]) -> str:
    """Format rows as the fixed-width TOTP table."""
    lines = [_border(), _line([title for title, _ in COLUMNS]), _border()]
    for row in rows:
        lines.append(
            _line(
                [
                    str(row.unix_time),
                    row.utc_time,
                    row.counter_hex,
                    row.code,
                    row.algorithm.name,
                ]
            )
        )
    lines.append(_border())
    return "\n".join(lines)


def table_command(args: argparse.Namespace) -> int:
    """Print the TOTP table for the requested secret and digit count."""
    try:
        validate_digits(args.digits)
        rows = totp_table(
            args.secret,
            args.digits,
            for_time=args.time,
            t0=args.t0,
            step=args.step,
            algorithms=args.algorithm or tuple(HashAlgorithm),
        )
    except (TOTPError, ValueError) as e:
        print(f"✗ {e}", file=sys.stderr)
        return 1

    print(render_table(rows))
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="RFC 6238 TOTP code generator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "secret",
        help="Shared secret, encoded as ASCII",
    )
    parser.add_argument(
        "digits",
        type=int,
        help="Number of digits in the code (1-10)",
    )
    parser.add_argument(
        "--time",
        "-t",
        type=int,
        default=None,
        help="Unix time in seconds (default: now)",
    )
    parser.add_argument(
        "--t0",
        type=int,
        default=DEFAULT_T0,
        help=f"Unix time to start counting steps from (default: {DEFAULT_T0})",
    )
    parser.add_argument(
        "--step",
        "-s",
        type=int,
        default=DEFAULT_STEP,
        help=f"Time step in seconds (default: {DEFAULT_STEP})",
    )
    parser.add_argument(
        "--algorithm",
        "-a",
        type=HashAlgorithm.parse,
        action="append",
        metavar="NAME",
        help="Hash algorithm, may be repeated (default: SHA1, SHA256 and SHA512)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    return table_command(args)


if __name__ == "__main__":
    sys.exit(main())
