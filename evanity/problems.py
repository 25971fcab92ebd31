"""Problem (pattern) definitions for vanity address orders.

A problem is one matching rule a user selects when creating an order, e.g.
"starts with CAFE" or "at least 32 letters". Problems are serialized into the
request record as ``{"type": ..., <param>: ...}`` objects.
"""

import json
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

ADDRESS_LENGTH = 40

_HEX_RE = re.compile(r"^[0-9a-f]+$", re.IGNORECASE)
_PREFIXED_HEX_RE = re.compile(r"^0x[0-9a-f]+$", re.IGNORECASE)
_MASK_RE = re.compile(r"^[0-9a-fx]+$", re.IGNORECASE)


class UnknownProblemKindError(ValueError):
    """Raised for a problem kind outside the eight supported ones."""

    def __init__(self, kind):
        super().__init__(f"Unknown problem kind: {kind!r}")
        self.kind = kind


class ProblemKind(Enum):
    LEADING_ANY = "leading-any"
    TRAILING_ANY = "trailing-any"
    LETTERS_HEAVY = "letters-heavy"
    NUMBERS_HEAVY = "numbers-heavy"
    SNAKE_SCORE_NO_CASE = "snake-score-no-case"
    USER_PREFIX = "user-prefix"
    USER_SUFFIX = "user-suffix"
    USER_MASK = "user-mask"

    @classmethod
    def parse(cls, value) -> "ProblemKind":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise UnknownProblemKindError(value) from None


# Which payload field each kind carries on the wire.
_PARAM_FIELD = {
    ProblemKind.LEADING_ANY: "length",
    ProblemKind.TRAILING_ANY: "length",
    ProblemKind.LETTERS_HEAVY: "count",
    ProblemKind.NUMBERS_HEAVY: None,
    ProblemKind.SNAKE_SCORE_NO_CASE: "count",
    ProblemKind.USER_PREFIX: "specifier",
    ProblemKind.USER_SUFFIX: "specifier",
    ProblemKind.USER_MASK: "specifier",
}


def strip_0x(value: str) -> str:
    """Remove a leading ``0x`` marker if present."""
    return value[2:] if value.startswith("0x") else value


def mask_template(specifier: str) -> str:
    """Lowercased 40-char mask; a 0x marker is only present on 42-char input.

    A 40-char mask starting with "0x" is a fixed 0 followed by a wildcard.
    """
    if len(specifier) == ADDRESS_LENGTH + 2 and specifier.startswith("0x"):
        specifier = specifier[2:]
    return specifier.lower()


@dataclass(frozen=True)
class Problem:
    """Immutable, picklable problem specification.

    A single discriminated type for every kind; only the field named by the
    kind is meaningful (``length``, ``count`` or ``specifier``).
    """
    kind: ProblemKind
    length: Optional[int] = None
    count: Optional[int] = None
    specifier: Optional[str] = None

    def __post_init__(self):
        # Accept wire tags as well as enum members.
        object.__setattr__(self, "kind", ProblemKind.parse(self.kind))

    @classmethod
    def leading_any(cls, length: int) -> "Problem":
        return cls(ProblemKind.LEADING_ANY, length=length)

    @classmethod
    def trailing_any(cls, length: int) -> "Problem":
        return cls(ProblemKind.TRAILING_ANY, length=length)

    @classmethod
    def letters_heavy(cls, count: int) -> "Problem":
        return cls(ProblemKind.LETTERS_HEAVY, count=count)

    @classmethod
    def numbers_heavy(cls) -> "Problem":
        return cls(ProblemKind.NUMBERS_HEAVY)

    @classmethod
    def snake_score(cls, count: int) -> "Problem":
        return cls(ProblemKind.SNAKE_SCORE_NO_CASE, count=count)

    @classmethod
    def user_prefix(cls, specifier: str) -> "Problem":
        return cls(ProblemKind.USER_PREFIX, specifier=specifier)

    @classmethod
    def user_suffix(cls, specifier: str) -> "Problem":
        return cls(ProblemKind.USER_SUFFIX, specifier=specifier)

    @classmethod
    def user_mask(cls, specifier: str) -> "Problem":
        return cls(ProblemKind.USER_MASK, specifier=specifier)

    @property
    def threshold(self) -> int:
        """Kind-specific strictness: fixed characters, run length or count."""
        kind = self.kind
        if kind in (ProblemKind.USER_PREFIX, ProblemKind.USER_SUFFIX):
            return len(strip_0x(self.specifier))
        if kind == ProblemKind.USER_MASK:
            mask = mask_template(self.specifier)
            return len(mask) - mask.count("x")
        if kind in (ProblemKind.LEADING_ANY, ProblemKind.TRAILING_ANY):
            return self.length
        if kind in (ProblemKind.LETTERS_HEAVY, ProblemKind.SNAKE_SCORE_NO_CASE):
            return self.count
        if kind == ProblemKind.NUMBERS_HEAVY:
            return ADDRESS_LENGTH
        raise UnknownProblemKindError(kind)

    @classmethod
    def from_dict(cls, data: dict) -> "Problem":
        """Build a problem from its request-record form.

        Unknown keys (such as the form's ``enabled`` flag) are ignored.
        """
        if "type" not in data:
            raise ValueError("Problem record is missing 'type'.")
        kind = ProblemKind.parse(data["type"])
        field = _PARAM_FIELD[kind]
        if field is None:
            return cls(kind)
        if field not in data:
            raise ValueError(f"Problem '{kind.value}' is missing '{field}'.")
        value = data[field]
        if field == "specifier":
            if not isinstance(value, str):
                raise ValueError(f"Problem '{kind.value}' specifier must be a string.")
        elif isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"Problem '{kind.value}' {field} must be an integer.")
        return cls(kind, **{field: value})

    def to_dict(self) -> dict:
        kind = ProblemKind.parse(self.kind)
        data = {"type": kind.value}
        field = _PARAM_FIELD[kind]
        if field is not None:
            data[field] = getattr(self, field)
        return data

    def describe(self) -> str:
        kind = ProblemKind.parse(self.kind)
        field = _PARAM_FIELD[kind]
        if field is None:
            return kind.value
        return f"{kind.value}={getattr(self, field)}"


def parse_problems(records: list) -> list[Problem]:
    return [Problem.from_dict(r) for r in records]


def dump_problems(problems: list[Problem]) -> list[dict]:
    return [p.to_dict() for p in problems]


def load_problems_json(text: str) -> list[Problem]:
    """Parse problems from JSON: a bare array, or a request object with 'problems'."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid problems JSON: {e}") from e
    if isinstance(data, dict):
        data = data.get("problems")
    if not isinstance(data, list):
        raise ValueError("Problems JSON must be an array or an object with a 'problems' array.")
    for record in data:
        if not isinstance(record, dict):
            raise ValueError("Each problem must be a JSON object.")
    return parse_problems(data)


def _check_range(value: int, low: int, high: int, label: str) -> None:
    if value is None or value < low or value > high:
        raise ValueError(f"{label} must be between {low} and {high}")


def validate_problem(problem: Problem) -> Problem:
    """Validate a problem's parameters against its allowed domain.

    The difficulty engine does not re-check these bounds; callers run this
    before accepting user input into an order.
    Raises ValueError for out-of-domain problems.
    """
    kind = problem.kind
    if kind in (ProblemKind.LEADING_ANY, ProblemKind.TRAILING_ANY):
        _check_range(problem.length, 8, 40, "Length")
    elif kind == ProblemKind.LETTERS_HEAVY:
        _check_range(problem.count, 32, 40, "Count")
    elif kind == ProblemKind.SNAKE_SCORE_NO_CASE:
        _check_range(problem.count, 15, 39, "Count")
    elif kind == ProblemKind.NUMBERS_HEAVY:
        pass
    elif kind == ProblemKind.USER_PREFIX:
        spec = problem.specifier or ""
        if not spec.startswith("0x"):
            raise ValueError("Specifier must start with 0x")
        if len(spec) < 8 or len(spec) > 42:
            raise ValueError("Specifier must be between 8 and 42 characters")
        if not _PREFIXED_HEX_RE.match(spec):
            raise ValueError("Specifier must be a valid hex string")
    elif kind == ProblemKind.USER_SUFFIX:
        spec = problem.specifier or ""
        if len(spec) < 6 or len(spec) > 40:
            raise ValueError("Specifier must be between 6 and 40 characters")
        if not _HEX_RE.match(spec):
            raise ValueError("Specifier must be a valid hex string")
    elif kind == ProblemKind.USER_MASK:
        spec = problem.specifier or ""
        if len(spec) != ADDRESS_LENGTH:
            raise ValueError(
                "Specifier must be 40 characters long (don't include the 0x prefix)"
            )
        if not _MASK_RE.match(spec):
            raise ValueError("Mask may only contain hex characters and 'x' wildcards")
    else:
        raise UnknownProblemKindError(kind)
    return problem


def validate_problems(problems: list[Problem]) -> list[Problem]:
    if not problems:
        raise ValueError("Select at least one problem")
    for problem in problems:
        validate_problem(problem)
    return problems


def validate_public_key(public_key: str, key_type: str = "publicKey") -> str:
    """Validate the key an order is placed for.

    ``publicKey`` is an uncompressed secp256k1 key (0x + 130 hex chars),
    ``xpub`` an extended public key.
    """
    if key_type == "publicKey":
        if not public_key.startswith("0x") or len(public_key) != 132:
            raise ValueError("Public key must start with 0x and be 132 characters long")
    elif key_type == "xpub":
        if not public_key.startswith("xpub") or len(public_key) != 111:
            raise ValueError("xpub must start with xpub and be 111 characters long")
    else:
        raise ValueError(f"Unknown key type: {key_type}. Use 'publicKey' or 'xpub'")
    return public_key


DEFAULT_PROBLEMS = {
    ProblemKind.LEADING_ANY: Problem.leading_any(8),
    ProblemKind.TRAILING_ANY: Problem.trailing_any(8),
    ProblemKind.LETTERS_HEAVY: Problem.letters_heavy(32),
    ProblemKind.NUMBERS_HEAVY: Problem.numbers_heavy(),
    ProblemKind.SNAKE_SCORE_NO_CASE: Problem.snake_score(15),
    ProblemKind.USER_PREFIX: Problem.user_prefix("0xC0FFEE00"),
    ProblemKind.USER_SUFFIX: Problem.user_suffix("00BADD1E"),
    ProblemKind.USER_MASK: Problem.user_mask("1234xxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxx5678"),
}
