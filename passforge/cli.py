"""PassForge command-line interface.

Usage examples:
    passforge derive example.com -n 32
    echo "master phrase" | passforge derive example.com --stdin
    passforge generate -n 24 -c 5
    passforge strength 'Tr0ub4dor&3'
"""

import argparse
import getpass
import logging
import sys

from passforge import (
    DEFAULT_LENGTH,
    MAX_SCORE,
    PassforgeError,
    derive,
    estimate_strength,
    generate_random,
    validate_length,
)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="passforge",
        description="Derive per-site passwords from a master phrase, or generate random ones.",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    sub = parser.add_subparsers(dest="command")

    # ── derive ─────────────────────────────────────────────────────────
    derive_p = sub.add_parser(
        "derive", help="Derive the password for a site (Argon2id)",
    )
    derive_p.add_argument("domain", help="Site or domain, e.g. example.com")
    derive_p.add_argument(
        "-n", "--length", type=int, default=DEFAULT_LENGTH,
        help=f"Password length (default: {DEFAULT_LENGTH})",
    )
    derive_p.add_argument(
        "--stdin",
        action="store_true",
        help="Read the master phrase from the first line of stdin",
    )
    derive_p.add_argument(
        "-s", "--strength",
        action="store_true",
        help="Include strength analysis in output",
    )

    # ── generate ───────────────────────────────────────────────────────
    gen_p = sub.add_parser("generate", help="Generate policy-compliant random passwords")
    gen_p.add_argument(
        "-n", "--length", type=int, default=DEFAULT_LENGTH,
        help=f"Password length (default: {DEFAULT_LENGTH})",
    )
    gen_p.add_argument(
        "-c", "--count", type=int, default=1,
        help="Number of passwords to generate (default: 1)",
    )

    # ── strength ───────────────────────────────────────────────────────
    strength_p = sub.add_parser("strength", help="Estimate password strength")
    strength_p.add_argument("passwords", nargs="+", help="Passwords to analyse")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    try:
        if args.command == "derive":
            return _cmd_derive(args)
        if args.command == "generate":
            return _cmd_generate(args)
        if args.command == "strength":
            return _cmd_strength(args)
    except PassforgeError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    parser.print_help()
    return 0


def _strength_line(password: str) -> str:
    report = estimate_strength(password)
    bar = "#" * report["score"] + "-" * (MAX_SCORE - report["score"])
    return f"[{bar}] {report['label']} ({report['entropy_bits']} bits)"


def _read_master(from_stdin: bool) -> str:
    if from_stdin:
        return sys.stdin.readline().rstrip("\r\n")
    return getpass.getpass("Master password: ")


def _cmd_derive(args: argparse.Namespace) -> int:
    if not args.domain.strip():
        print("Error: domain must not be empty", file=sys.stderr)
        return 1
    validate_length(args.length)

    master = _read_master(args.stdin)
    if not master:
        print("Error: master password must not be empty", file=sys.stderr)
        return 1

    pwd = derive(master, args.domain, args.length)
    print(pwd)
    if args.strength:
        print(f"  Strength: {_strength_line(pwd)}")
    return 0


def _cmd_generate(args: argparse.Namespace) -> int:
    if args.count < 1:
        print("Error: count must be at least 1", file=sys.stderr)
        return 1

    for _ in range(args.count):
        pwd = generate_random(args.length)
        report = estimate_strength(pwd)
        print(f"  {pwd}  ({report['label']}, {report['entropy_bits']} bits)")

    return 0


def _cmd_strength(args: argparse.Namespace) -> int:
    for pwd in args.passwords:
        print(f"  '{pwd}'  {_strength_line(pwd)}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
