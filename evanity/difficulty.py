"""
Difficulty model for vanity address problems.

Every problem matches some subset of the 16**40 possible address bodies.
The size of that subset (the "probability space") is computed exactly with
Python integers; the expected number of addresses to generate before a hit
is the full space divided by the matching space.

Spaces of several problems are summed without removing overlaps, so the
combined estimate is a lower bound on the true expected tries.
"""

import math
import re
from typing import Iterable, Optional, Union

from evanity.problems import ADDRESS_LENGTH, Problem, ProblemKind, UnknownProblemKindError

TOTAL_ADDRESS_SPACE = 16 ** ADDRESS_LENGTH

# Network-wide assumptions used when quoting expected matches for an order
DEFAULT_PROVIDERS = 20
DEFAULT_HASH_RATE = 5_000_000   # hashes/sec per provider
XPUB_EFFICIENCY = 0.1           # xpub searches are ~10% as effective as a public key

CREDIT_DECIMALS = 18
CREDIT_UNIT = 10 ** CREDIT_DECIMALS   # one credit buys one minute of search

_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhd])\s*$", re.IGNORECASE)
_DURATION_UNITS = {"s": 1, "m": 60, "h": 3600, "d": 86400}


def combinations(n: int, k: int) -> int:
    """Exact binomial coefficient C(n, k) by multiplicative accumulation."""
    if k < 0 or k > n:
        return 0
    if k == 0 or k == n:
        return 1
    if k > n // 2:
        k = n - k
    result = 1
    for i in range(1, k + 1):
        # Exact at every step: result is C(n, i - 1) * (n - i + 1), divisible by i
        result = result * (n - i + 1) // i
    return result


def exactly_letters_combinations(letters: int, total: int = ADDRESS_LENGTH) -> int:
    """Number of bodies of ``total`` chars with exactly ``letters`` chars in a-f."""
    if letters < 0 or letters > total:
        return 0
    return 6 ** letters * 10 ** (total - letters) * combinations(total, letters)


def snake_combinations(pairs: int, total: int = ADDRESS_LENGTH) -> int:
    """Number of bodies of ``total`` chars with exactly ``pairs`` equal adjacent pairs.

    The first character is free, every matched position repeats its
    predecessor and every unmatched one has 15 choices.
    """
    if pairs < 0 or pairs >= total:
        return 0
    return 16 * 15 ** (total - 1 - pairs) * combinations(total - 1, pairs)


def _fixed_space(threshold: int, choices: int = 1) -> int:
    if threshold > ADDRESS_LENGTH or threshold < 1:
        return TOTAL_ADDRESS_SPACE
    return choices * 16 ** (ADDRESS_LENGTH - threshold)


def probability_space(kind: Union[ProblemKind, str], threshold: int) -> int:
    """Count the addresses meeting ``kind`` at least as strictly as ``threshold``.

    Raises UnknownProblemKindError for anything but the eight problem kinds.
    """
    kind = ProblemKind.parse(kind)

    if kind in (ProblemKind.USER_PREFIX, ProblemKind.USER_SUFFIX, ProblemKind.USER_MASK):
        return _fixed_space(threshold)
    if kind in (ProblemKind.LEADING_ANY, ProblemKind.TRAILING_ANY):
        # 16 choices for the repeated character
        return _fixed_space(threshold, choices=16)
    if kind == ProblemKind.LETTERS_HEAVY:
        return sum(
            exactly_letters_combinations(k, ADDRESS_LENGTH)
            for k in range(threshold, ADDRESS_LENGTH + 1)
        )
    if kind == ProblemKind.NUMBERS_HEAVY:
        return sum(
            exactly_letters_combinations(ADDRESS_LENGTH - k, ADDRESS_LENGTH)
            for k in range(threshold, ADDRESS_LENGTH + 1)
        )
    if kind == ProblemKind.SNAKE_SCORE_NO_CASE:
        return sum(
            snake_combinations(p, ADDRESS_LENGTH)
            for p in range(threshold, ADDRESS_LENGTH)
        )
    raise UnknownProblemKindError(kind)


def problem_space(problem: Problem) -> int:
    return probability_space(problem.kind, problem.threshold)


def expected_tries_from_space(space: int) -> int:
    """Expected tries to hit a space of the given size; 0 for an empty space."""
    if space <= 0:
        return 0
    return TOTAL_ADDRESS_SPACE // space


def estimate_work_units(problems: Iterable[Problem]) -> int:
    """Expected number of addresses to check to match at least one problem.

    Returns 1 for an empty problem list; callers should treat "no problems"
    as undefined difficulty before calling.
    """
    total = sum(problem_space(p) for p in problems)
    return TOTAL_ADDRESS_SPACE // (total or TOTAL_ADDRESS_SPACE)


def to_safe_number(value: int) -> float:
    """Narrow an exact work-unit count to a float for display.

    Values above 2**53 lose precision; this is accepted for
    display and must not be fed back into further exact arithmetic.
    """
    return float(value)


def expected_matches(
    work_units: int,
    duration_seconds: float,
    key_type: str = "publicKey",
    providers: int = DEFAULT_PROVIDERS,
    hash_rate: float = DEFAULT_HASH_RATE,
) -> int:
    """Expected number of matching addresses found during an order's duration."""
    if work_units <= 0 or duration_seconds <= 0:
        return 0
    hashes = providers * hash_rate * duration_seconds
    if key_type == "xpub":
        hashes *= XPUB_EFFICIENCY
    return round(hashes / work_units)


def expected_seconds(work_units: int, hash_rate: float) -> Optional[float]:
    """Seconds until the first expected match at ``hash_rate`` hashes/sec."""
    if work_units <= 0 or hash_rate <= 0:
        return None
    return work_units / hash_rate


def duration_to_seconds(duration: str) -> int:
    """Parse an order duration such as "30m", "2h" or "1d".

    Returns 0 for anything unparseable, which callers treat as invalid.
    """
    m = _DURATION_RE.match(duration or "")
    if not m:
        return 0
    return int(m.group(1)) * _DURATION_UNITS[m.group(2).lower()]


def required_credits(duration_seconds: int) -> int:
    """Credits (in 18-decimal base units) needed for a search of this length."""
    if duration_seconds <= 0:
        return 0
    return math.ceil(duration_seconds / 60) * CREDIT_UNIT


def format_credits(units: int) -> str:
    """Render 18-decimal credit units with at most two decimals."""
    whole, remainder = divmod(units, CREDIT_UNIT)
    if remainder == 0:
        return str(whole)
    decimals = str(remainder).rjust(CREDIT_DECIMALS, "0")[:2]
    text = f"{whole}.{decimals}".rstrip("0")
    return text.rstrip(".")
