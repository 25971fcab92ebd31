"""Tests for evanity.difficulty."""

import pytest

from evanity.difficulty import (
    CREDIT_UNIT,
    TOTAL_ADDRESS_SPACE,
    combinations,
    duration_to_seconds,
    estimate_work_units,
    exactly_letters_combinations,
    expected_matches,
    expected_seconds,
    format_credits,
    probability_space,
    required_credits,
    snake_combinations,
    to_safe_number,
)
from evanity.problems import Problem, ProblemKind, UnknownProblemKindError

ALL_KINDS = list(ProblemKind)


class TestCombinations:
    def test_symmetry(self):
        for n in range(41):
            for k in range(n + 1):
                assert combinations(n, k) == combinations(n, n - k)

    def test_edges(self):
        for n in range(41):
            assert combinations(n, 0) == 1
            assert combinations(n, n) == 1

    def test_known_value(self):
        assert combinations(40, 20) == 137846528820
        assert combinations(39, 2) == 741

    def test_out_of_range(self):
        assert combinations(5, 6) == 0
        assert combinations(5, -1) == 0


class TestKernels:
    def test_letters_partition_whole_space(self):
        total = sum(exactly_letters_combinations(k, 40) for k in range(41))
        assert total == TOTAL_ADDRESS_SPACE

    def test_snake_partition_whole_space(self):
        total = sum(snake_combinations(p, 40) for p in range(40))
        assert total == TOTAL_ADDRESS_SPACE

    def test_snake_degenerate(self):
        assert snake_combinations(40, 40) == 0
        assert snake_combinations(-1, 40) == 0


class TestProbabilitySpace:
    def test_prefix(self):
        assert probability_space(ProblemKind.USER_PREFIX, 4) == 16 ** 36

    def test_accepts_string_tag(self):
        assert probability_space("user-mask", 8) == 16 ** 32

    def test_leading_any(self):
        assert probability_space(ProblemKind.LEADING_ANY, 8) == 16 * 16 ** 32

    @pytest.mark.parametrize("kind", [
        ProblemKind.USER_PREFIX, ProblemKind.USER_SUFFIX, ProblemKind.USER_MASK,
        ProblemKind.LEADING_ANY, ProblemKind.TRAILING_ANY,
    ])
    @pytest.mark.parametrize("threshold", [0, -3, 41])
    def test_degenerate_threshold_is_full_space(self, kind, threshold):
        assert probability_space(kind, threshold) == TOTAL_ADDRESS_SPACE

    def test_letters_all_forty(self):
        assert probability_space(ProblemKind.LETTERS_HEAVY, 40) == 6 ** 40

    def test_numbers_heavy(self):
        assert probability_space(ProblemKind.NUMBERS_HEAVY, 40) == 10 ** 40

    def test_snake_max(self):
        assert probability_space(ProblemKind.SNAKE_SCORE_NO_CASE, 39) == 16

    def test_unknown_kind(self):
        with pytest.raises(UnknownProblemKindError):
            probability_space("palindrome", 5)

    def test_mask_starting_with_0x(self):
        assert estimate_work_units([Problem.user_mask("0x" + "x" * 38)]) == 16

    @pytest.mark.parametrize("kind", ALL_KINDS)
    def test_monotonic(self, kind):
        spaces = [probability_space(kind, t) for t in range(1, 41)]
        assert all(a >= b for a, b in zip(spaces, spaces[1:]))


class TestEstimateWorkUnits:
    def test_prefix_cafe(self):
        assert estimate_work_units([Problem.user_prefix("0xCAFE")]) == 65536

    def test_leading_any(self):
        assert estimate_work_units([Problem.leading_any(8)]) == 268435456

    def test_numbers_heavy(self):
        assert estimate_work_units([Problem.numbers_heavy()]) == 16 ** 40 // 10 ** 40

    def test_empty_set(self):
        assert estimate_work_units([]) == 1

    def test_union_without_overlap_correction(self):
        a = Problem.user_prefix("0xCAFE00")
        b = Problem.user_suffix("C0FFEE")
        expected = TOTAL_ADDRESS_SPACE // (2 * 16 ** 34)
        assert estimate_work_units([a, b]) == expected

    def test_duplicate_kinds_each_count(self):
        a = Problem.user_prefix("0xCAFE00")
        b = Problem.user_prefix("0xBEEF0000")
        expected = TOTAL_ADDRESS_SPACE // (16 ** 34 + 16 ** 32)
        assert estimate_work_units([a, b]) == expected

    def test_adding_problems_never_raises_difficulty(self):
        problems = [
            Problem.leading_any(10),
            Problem.letters_heavy(36),
            Problem.snake_score(20),
            Problem.user_mask("1234" + "x" * 32 + "5678"),
        ]
        combined = estimate_work_units(problems)
        for p in problems:
            assert combined <= estimate_work_units([p])

    def test_order_independent(self):
        problems = [Problem.trailing_any(9), Problem.numbers_heavy()]
        assert estimate_work_units(problems) == estimate_work_units(problems[::-1])

    def test_deterministic(self):
        problems = [Problem.snake_score(17)]
        assert estimate_work_units(problems) == estimate_work_units(problems)

    def test_monotonic_in_threshold(self):
        values = [estimate_work_units([Problem.letters_heavy(c)]) for c in range(32, 41)]
        assert values == sorted(values)

    def test_safe_number_loses_precision_only_above_2_53(self):
        assert to_safe_number(65536) == 65536.0
        huge = estimate_work_units([Problem.user_prefix("0x" + "a" * 40)])
        assert huge == 16 ** 40
        assert int(to_safe_number(huge)) == 2 ** 160


class TestOrderQuote:
    def test_expected_matches(self):
        # 20 providers * 5 MH/s * 60 s / 65536
        assert expected_matches(65536, 60) == round(20 * 5e6 * 60 / 65536)

    def test_expected_matches_xpub(self):
        assert expected_matches(1000, 10, key_type="xpub") == round(20 * 5e6 * 10 * 0.1 / 1000)

    def test_expected_matches_invalid(self):
        assert expected_matches(0, 60) == 0
        assert expected_matches(100, 0) == 0

    def test_expected_seconds(self):
        assert expected_seconds(1000, 100) == 10
        assert expected_seconds(1000, 0) is None

    @pytest.mark.parametrize("text,seconds", [
        ("30m", 1800), ("2h", 7200), ("1d", 86400), ("45s", 45), ("bogus", 0), ("", 0),
    ])
    def test_duration(self, text, seconds):
        assert duration_to_seconds(text) == seconds

    def test_required_credits(self):
        assert required_credits(1800) == 30 * CREDIT_UNIT
        assert required_credits(61) == 2 * CREDIT_UNIT
        assert required_credits(0) == 0

    def test_format_credits(self):
        assert format_credits(30 * CREDIT_UNIT) == "30"
        assert format_credits(CREDIT_UNIT + CREDIT_UNIT // 2) == "1.5"
        assert format_credits(10 * CREDIT_UNIT + CREDIT_UNIT // 4) == "10.25"
