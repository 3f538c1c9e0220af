"""PassForge -- deterministic and random password utilities.

Core functions for site-password derivation (Argon2id), policy-compliant
random generation, and entropy-based strength estimation.
"""

import hashlib
import logging
import math
import secrets
import string
import time
from typing import Callable, TypedDict

from argon2.exceptions import HashingError
from argon2.low_level import Type, hash_secret_raw

logger = logging.getLogger(__name__)


# ── Limits and KDF parameters ──────────────────────────────────────────────

MIN_LENGTH = 16
MAX_LENGTH = 128
DEFAULT_LENGTH = 32

# Changing any of these changes every derived password.
ARGON2_TIME_COST = 4
ARGON2_MEMORY_COST = 65536  # KiB (64 MB)
ARGON2_PARALLELISM = 2


# ── Character tables ───────────────────────────────────────────────────────

UPPERCASE = string.ascii_uppercase
LOWERCASE = string.ascii_lowercase
DIGITS = string.digits

# ASCII punctuation without the backslash, in derivation order.
SYMBOLS = "!@#$%^&*()-_=+[]{}|;:'\",.<>/?`~"

EXTENDED_SYMBOLS = "§±×÷√∞≠≈€£¥₿©®™µΩπδλΣΦΨΞ"

# Order is part of the derivation contract.
CHARSET = UPPERCASE + LOWERCASE + DIGITS + SYMBOLS + EXTENDED_SYMBOLS

# Symbols accepted by common account password policies (Microsoft et al.).
POLICY_SYMBOLS = "!@#$%^&*()-_=+[]{};:,.?/"

POLICY_CHARSET = UPPERCASE + LOWERCASE + DIGITS + POLICY_SYMBOLS


# ── Errors ─────────────────────────────────────────────────────────────────


class PassforgeError(Exception):
    """Base class for all passforge errors."""


class ValidationError(PassforgeError, ValueError):
    """The caller supplied an unusable argument (e.g. a too-short length)."""


class ComputationError(PassforgeError, RuntimeError):
    """A cryptographic primitive failed or is unavailable."""


def validate_length(length: int) -> None:
    """Raise :class:`ValidationError` unless *length* is an int in range."""
    if isinstance(length, bool) or not isinstance(length, int):
        raise ValidationError(f"Password length must be an integer, got {length!r}")
    if length < MIN_LENGTH:
        raise ValidationError(f"Password length must be at least {MIN_LENGTH}")
    if length > MAX_LENGTH:
        raise ValidationError(f"Password length must be at most {MAX_LENGTH}")


# ── Deterministic derivation (Argon2id) ────────────────────────────────────


def canonicalize_domain(domain: str) -> str:
    """Return the canonical form of *domain*: trimmed and lowercased."""
    return domain.strip().lower()


def domain_salt(domain: str) -> bytes:
    """Return the 32-byte salt for *domain* (SHA-256 of its canonical form)."""
    return hashlib.sha256(canonicalize_domain(domain).encode("utf-8")).digest()


def derive(master: str | bytes, domain: str, length: int = DEFAULT_LENGTH) -> str:
    """Derive the site password for *domain* from the *master* phrase.

    The result is a pure function of ``(master, canonical domain, length)``:
    the salt is SHA-256 of the canonical domain, and Argon2id runs with fixed
    parameters producing ``2 * length`` bytes, of which the first *length*
    are mapped onto :data:`CHARSET`.

    Raises :class:`ValidationError` for an out-of-range *length* and
    :class:`ComputationError` if Argon2id fails or runs out of memory.  There is no
    fallback to a weaker algorithm.
    """
    validate_length(length)

    try:
        secret = master.encode("utf-8") if isinstance(master, str) else bytes(master)
        salt = domain_salt(domain)
    except UnicodeEncodeError as exc:
        raise ValidationError("Master phrase and domain must be valid UTF-8 text") from exc

    logger.debug("Deriving %d-character password", length)
    started = time.perf_counter()
    try:
        raw = hash_secret_raw(
            secret=secret,
            salt=salt,
            time_cost=ARGON2_TIME_COST,
            memory_cost=ARGON2_MEMORY_COST,
            parallelism=ARGON2_PARALLELISM,
            hash_len=2 * length,
            type=Type.ID,
        )
    except (HashingError, MemoryError) as exc:
        logger.error("Argon2id derivation failed: %s", type(exc).__name__)
        raise ComputationError(f"Argon2id derivation failed: {exc}") from exc
    logger.debug("Argon2id finished in %.0f ms", (time.perf_counter() - started) * 1000)

    return "".join(CHARSET[b % len(CHARSET)] for b in raw[:length])


# ── Random generation ──────────────────────────────────────────────────────

RandomSource = Callable[[int], bytes]


def _read(source: RandomSource, n: int) -> bytes:
    try:
        data = source(n)
    except Exception as exc:
        logger.error("Secure random source failed: %s", type(exc).__name__)
        raise ComputationError("Secure random source is unavailable") from exc
    if not isinstance(data, (bytes, bytearray)) or len(data) != n:
        raise ComputationError(f"Secure random source did not return {n} bytes")
    return data


def _randbelow(source: RandomSource, n: int) -> int:
    # 32 bits per draw keeps the modulo bias negligible for small tables.
    return int.from_bytes(_read(source, 4), "big") % n


def _choice(source: RandomSource, alphabet: str) -> str:
    return alphabet[_randbelow(source, len(alphabet))]


def generate_random(length: int = DEFAULT_LENGTH, *, source: RandomSource | None = None) -> str:
    """Generate a random password accepted by common account policies.

    Guarantees at least one uppercase letter, lowercase letter, digit and
    symbol from :data:`POLICY_SYMBOLS`.  Randomness comes only from *source*
    (``secrets.token_bytes`` by default); a failing source raises
    :class:`ComputationError`.
    """
    validate_length(length)
    if source is None:
        source = secrets.token_bytes

    required = [
        _choice(source, UPPERCASE),
        _choice(source, LOWERCASE),
        _choice(source, DIGITS),
        _choice(source, POLICY_SYMBOLS),
    ]
    remaining = length - len(required)
    chars = required + [_choice(source, POLICY_CHARSET) for _ in range(remaining)]

    # Fisher-Yates shuffle with the same source
    for i in range(len(chars) - 1, 0, -1):
        j = _randbelow(source, i + 1)
        chars[i], chars[j] = chars[j], chars[i]

    return "".join(chars)


# ── Strength estimation ────────────────────────────────────────────────────

CLASS_SIZES = {
    "uppercase": len(UPPERCASE),
    "lowercase": len(LOWERCASE),
    "digits":    len(DIGITS),
    "symbols":   len(string.punctuation),
    "extended":  len(EXTENDED_SYMBOLS),
}

STRENGTH_LABELS = [
    (64, "Weak"),
    (98, "Fair"),
    (128, "Good"),
    (192, "Strong"),
    (256, "Very Strong"),
    (384, "Excellent"),
    (512, "Maximum"),
]

MAX_SCORE = 8


class StrengthAssessment(TypedDict):
    score: int
    label: str
    entropy_bits: int
    length: int
    char_classes: dict[str, bool]


def _char_class(ch: str) -> str:
    if ch in UPPERCASE:
        return "uppercase"
    if ch in LOWERCASE:
        return "lowercase"
    if ch in DIGITS:
        return "digits"
    if ch.isascii():
        return "symbols"
    return "extended"


def strength_label(entropy_bits: int) -> str:
    """Return the strength label for *entropy_bits*."""
    for limit, label in STRENGTH_LABELS:
        if entropy_bits < limit:
            return label
    return "INSANE"


def estimate_strength(password: str) -> StrengthAssessment:
    """Estimate the strength of *password* from its character classes.

    Returns a dict with keys:
        score        -- int 0-8  (entropy_bits // 64, capped)
        label        -- str      ("Weak" ... "INSANE")
        entropy_bits -- int      (floor of length * log2(alphabet size))
        length       -- int
        char_classes -- dict[str, bool]  (uppercase, lowercase, digits,
                        symbols, extended)
    """
    present = {_char_class(ch) for ch in password}
    classes = {name: name in present for name in CLASS_SIZES}

    pool = sum(size for name, size in CLASS_SIZES.items() if classes[name])
    entropy_bits = math.floor(len(password) * math.log2(pool)) if pool else 0

    return {
        "score": min(entropy_bits // 64, MAX_SCORE),
        "label": strength_label(entropy_bits),
        "entropy_bits": entropy_bits,
        "length": len(password),
        "char_classes": classes,
    }
