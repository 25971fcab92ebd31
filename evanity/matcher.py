"""Address matching and per-match rarity for vanity address problems."""

from dataclasses import dataclass
from typing import Iterable, Optional

from evanity.difficulty import expected_tries_from_space, probability_space
from evanity.problems import (
    ADDRESS_LENGTH,
    Problem,
    ProblemKind,
    UnknownProblemKindError,
    mask_template,
    strip_0x,
)


@dataclass(frozen=True)
class MatchInfo:
    """How rare a specific address is with respect to one problem.

    ``rarity`` is the expected number of tries to find a match at least this
    strong; 0 means the match is trivial or undefined.
    """
    rarity: int
    summary: str
    matched_run_length: Optional[int] = None


@dataclass(frozen=True)
class RankedResult:
    address: str
    problem: Optional[Problem]
    info: Optional[MatchInfo]

    @property
    def rarity(self) -> int:
        return self.info.rarity if self.info else 0


def address_body(address: str) -> str:
    """Lowercased address body without the 0x marker."""
    return strip_0x(address).lower()


def count_letters(body: str) -> int:
    return sum(1 for c in body.lower() if c in "abcdef")


def count_digits(body: str) -> int:
    return sum(1 for c in body if c in "0123456789")


def count_snake_pairs(body: str) -> int:
    """Count equal adjacent pairs; runs overlap, so "aaa" has 2 pairs."""
    body = body.lower()
    return sum(1 for a, b in zip(body, body[1:]) if a == b)


def leading_run(body: str) -> int:
    body = body.lower()
    if not body:
        return 0
    run = 1
    while run < len(body) and body[run] == body[0]:
        run += 1
    return run


def trailing_run(body: str) -> int:
    return leading_run(body[::-1])


def _mask_matches(body: str, mask: str) -> bool:
    for i, m in enumerate(mask):
        if m == "x":
            continue
        if i >= len(body) or body[i] != m:
            return False
    return True


def matches(address: str, problem: Problem) -> bool:
    """Return True if ``address`` satisfies ``problem``.

    Comparison is case-insensitive; the 0x marker is optional.
    Raises UnknownProblemKindError for unsupported kinds.
    """
    body = address_body(address)
    kind = problem.kind

    if kind == ProblemKind.LEADING_ANY:
        return len(body) >= problem.length and leading_run(body) >= problem.length
    elif kind == ProblemKind.TRAILING_ANY:
        return len(body) >= problem.length and trailing_run(body) >= problem.length
    elif kind == ProblemKind.LETTERS_HEAVY:
        return count_letters(body) >= problem.count
    elif kind == ProblemKind.NUMBERS_HEAVY:
        return count_digits(body) == ADDRESS_LENGTH
    elif kind == ProblemKind.SNAKE_SCORE_NO_CASE:
        return count_snake_pairs(body) >= problem.count
    elif kind == ProblemKind.USER_PREFIX:
        return body.startswith(strip_0x(problem.specifier).lower())
    elif kind == ProblemKind.USER_SUFFIX:
        return body.endswith(strip_0x(problem.specifier).lower())
    elif kind == ProblemKind.USER_MASK:
        return _mask_matches(body, mask_template(problem.specifier))
    raise UnknownProblemKindError(kind)


def match_first(address: str, problems: Iterable[Problem]) -> Optional[Problem]:
    """Return the first problem, in the given order, that ``address`` satisfies."""
    for problem in problems:
        if matches(address, problem):
            return problem
    return None


def _common_prefix(a: str, b: str) -> int:
    n = 0
    for x, y in zip(a, b):
        if x != y:
            break
        n += 1
    return n


def _pow16(exponent: int) -> int:
    # A zero-strength match is treated as trivial.
    if exponent <= 0:
        return 0
    return 16 ** exponent


def rarity_of(address: str, problem: Problem) -> MatchInfo:
    """Rate how rare this address's realized match for ``problem`` is.

    Positional kinds report 16 ** (characters actually matched); aggregate
    kinds report the expected tries for an address at least as extreme as
    this one's letter count, digit count or snake pairs.
    """
    body = address_body(address)
    kind = problem.kind

    if kind == ProblemKind.USER_PREFIX:
        prefix = strip_0x(problem.specifier).lower()
        length = _common_prefix(body, prefix)
        return MatchInfo(
            rarity=_pow16(length),
            summary=f"{length} char prefix ({prefix[:length].upper()})",
            matched_run_length=length,
        )
    if kind == ProblemKind.USER_SUFFIX:
        suffix = strip_0x(problem.specifier).lower()
        length = _common_prefix(body[::-1], suffix[::-1])
        matched = suffix[len(suffix) - length:] if length else ""
        return MatchInfo(
            rarity=_pow16(length),
            summary=f"{length} char suffix ({matched.upper()})",
            matched_run_length=length,
        )
    if kind == ProblemKind.USER_MASK:
        mask = mask_template(problem.specifier)
        fixed = sum(
            1 for m, c in zip(mask, body) if m != "x" and m == c
        )
        return MatchInfo(
            rarity=_pow16(fixed),
            summary=f"{fixed} mask characters fixed",
            matched_run_length=fixed,
        )
    if kind == ProblemKind.LEADING_ANY:
        run = leading_run(body)
        first = body[:1].upper()
        return MatchInfo(
            rarity=_pow16(run),
            summary=f"{run} leading {first}",
            matched_run_length=run,
        )
    if kind == ProblemKind.TRAILING_ANY:
        run = trailing_run(body)
        last = body[-1:].upper()
        return MatchInfo(
            rarity=_pow16(run),
            summary=f"{run} trailing {last}",
            matched_run_length=run,
        )
    if kind == ProblemKind.LETTERS_HEAVY:
        count = count_letters(body)
        return MatchInfo(
            rarity=_aggregate_rarity(kind, count),
            summary=f"{count} letters",
        )
    if kind == ProblemKind.NUMBERS_HEAVY:
        count = count_digits(body)
        return MatchInfo(
            rarity=_aggregate_rarity(kind, count),
            summary=f"{count} digits",
        )
    if kind == ProblemKind.SNAKE_SCORE_NO_CASE:
        pairs = count_snake_pairs(body)
        return MatchInfo(
            rarity=_aggregate_rarity(kind, pairs),
            summary=f"{pairs} snake pairs",
        )
    raise UnknownProblemKindError(kind)


def _aggregate_rarity(kind: ProblemKind, realized: int) -> int:
    if realized <= 0:
        return 0
    return expected_tries_from_space(probability_space(kind, realized))


def rank_results(addresses: Iterable[str], problems: list[Problem]) -> list[RankedResult]:
    """Label each address with its first matching problem, rarest first.

    Unmatched addresses sort last; ties keep their input order.
    """
    ranked = []
    for address in addresses:
        problem = match_first(address, problems)
        info = rarity_of(address, problem) if problem else None
        ranked.append(RankedResult(address=address, problem=problem, info=info))
    ranked.sort(key=lambda r: r.rarity, reverse=True)
    return ranked
