"""
Command-line interface for evanity.

Usage:
    python -m evanity --prefix 0xcafe00 --dry-run
    python -m evanity --leading-any 8 --snake 15 --duration 2h --dry-run
    python -m evanity --problems request.json --check 0x0000000012... 0xabc...
    python -m evanity --prefix 0xdead00 --workers 8 --output my_key
"""

import argparse
import sys

from evanity import __version__
from evanity.difficulty import duration_to_seconds, estimate_work_units, expected_matches
from evanity.display import display_difficulty, format_rate, format_time
from evanity.export import prepare_export, save_key_file, save_report
from evanity.generator import VanityGenerator, GeneratorStats
from evanity.matcher import rank_results
from evanity.problems import Problem, load_problems_json, validate_problems


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="evanity",
        description="Vanity Ethereum address difficulty estimator and local search",
        epilog=(
            "Examples:\n"
            "  evanity --prefix 0xcafe00 --dry-run\n"
            "  evanity --leading-any 8 --snake 15 --duration 2h --dry-run\n"
            "  evanity --mask 1234xxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxx5678 --dry-run\n"
            "  evanity --problems request.json --check 0xabc...\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--version", action="version", version=f"evanity {__version__}"
    )

    problems = parser.add_argument_group("problems (first match wins, in this order)")
    problems.add_argument(
        "--leading-any", type=int, metavar="N",
        help="Address starts with N identical characters (8-40)",
    )
    problems.add_argument(
        "--trailing-any", type=int, metavar="N",
        help="Address ends with N identical characters (8-40)",
    )
    problems.add_argument(
        "--letters-heavy", type=int, metavar="N",
        help="At least N of the 40 characters are letters a-f (32-40)",
    )
    problems.add_argument(
        "--numbers-heavy", action="store_true",
        help="All 40 characters are digits",
    )
    problems.add_argument(
        "--snake", type=int, metavar="N",
        help="At least N equal adjacent character pairs (15-39)",
    )
    problems.add_argument(
        "--prefix", "-p", metavar="HEX",
        help="Address starts with this 0x-prefixed hex string",
    )
    problems.add_argument(
        "--suffix", "-s", metavar="HEX",
        help="Address ends with this hex string",
    )
    problems.add_argument(
        "--mask", "-m", metavar="MASK",
        help="40-char template of hex digits and 'x' wildcards",
    )
    problems.add_argument(
        "--problems", metavar="FILE",
        help="JSON file with a problems array or a request record",
    )

    parser.add_argument(
        "--duration", default="30m",
        help="Order duration used for the expected-matches quote (default: 30m)",
    )
    parser.add_argument(
        "--key-type", choices=("publicKey", "xpub"), default="publicKey",
        help="Key type the order is placed for (default: publicKey)",
    )
    parser.add_argument(
        "--check", nargs="+", metavar="ADDRESS",
        help="Rank these addresses against the problems instead of searching",
    )
    parser.add_argument(
        "--workers", "-w", type=int, default=0,
        help="Number of worker processes (default: auto)",
    )
    parser.add_argument(
        "--output", "-o", metavar="PATH",
        help="Output file path prefix (default: ./<address>)",
    )
    parser.add_argument(
        "--dry-run", action="store_true",
        help="Show difficulty estimate without searching",
    )
    parser.add_argument(
        "--quiet", "-q", action="store_true",
        help="Minimal output (just the result address)",
    )

    return parser


def problems_from_args(args: argparse.Namespace) -> list[Problem]:
    if args.problems:
        with open(args.problems) as f:
            return load_problems_json(f.read())

    problems = []
    if args.leading_any is not None:
        problems.append(Problem.leading_any(args.leading_any))
    if args.trailing_any is not None:
        problems.append(Problem.trailing_any(args.trailing_any))
    if args.letters_heavy is not None:
        problems.append(Problem.letters_heavy(args.letters_heavy))
    if args.numbers_heavy:
        problems.append(Problem.numbers_heavy())
    if args.snake is not None:
        problems.append(Problem.snake_score(args.snake))
    if args.prefix:
        problems.append(Problem.user_prefix(args.prefix))
    if args.suffix:
        problems.append(Problem.user_suffix(args.suffix))
    if args.mask:
        problems.append(Problem.user_mask(args.mask))
    return problems


def progress_callback(stats: GeneratorStats, quiet: bool = False) -> None:
    if quiet:
        return
    sys.stderr.write(
        f"\r  Checked: {stats.total_checked:,}  |  "
        f"Rate: {format_rate(stats.rate)}/sec  |  "
        f"Elapsed: {format_time(stats.elapsed)}  "
    )
    sys.stderr.flush()


def print_estimate(problems: list[Problem], duration: str, key_type: str) -> None:
    work_units = estimate_work_units(problems)
    print("  Problems:")
    for problem in problems:
        single = estimate_work_units([problem])
        print(f"    {problem.describe():<40} {display_difficulty(single)}")
    print(f"  Difficulty: {work_units:,} ({display_difficulty(work_units)})")

    seconds = duration_to_seconds(duration)
    if seconds > 0:
        matches = expected_matches(work_units, seconds, key_type=key_type)
        print(f"  Expected matches in {duration}: ~{matches:,}")
    else:
        print(f"  Invalid duration: {duration}")


def run_check(addresses: list[str], problems: list[Problem], quiet: bool) -> int:
    ranked = rank_results(addresses, problems)
    for r in ranked:
        if quiet:
            print(f"{r.address} {r.rarity}")
            continue
        if r.problem is None:
            print(f"  {r.address}  no match")
        else:
            print(
                f"  {r.address}  {r.problem.kind.value}: {r.info.summary}  "
                f"rarity {display_difficulty(r.rarity)}"
            )
    return 0 if any(r.problem for r in ranked) else 1


def main(argv: list[str] = None) -> int:
    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        problems = problems_from_args(args)
        if args.check:
            if not problems:
                raise ValueError("Select at least one problem")
        else:
            validate_problems(problems)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.check:
        return run_check(args.check, problems, args.quiet)

    gen = VanityGenerator(problems, num_workers=args.workers, validate=False)

    if not args.quiet:
        print(f"evanity v{__version__}")
        print_estimate(problems, args.duration, args.key_type)
        print(f"  Workers:    {gen.num_workers}")
        print()

    if args.dry_run:
        return 0

    gen.on_progress = lambda stats: progress_callback(stats, args.quiet)

    if not args.quiet:
        print("Searching...")

    results = gen.run_blocking(progress_interval=0.5)

    if not args.quiet:
        sys.stderr.write("\n")

    if not results:
        print("No results found (search was interrupted).", file=sys.stderr)
        return 1

    for result in results:
        export = prepare_export(
            result.private_key, result.address, result.problem, result.match_info
        )

        if not args.quiet:
            print(f"\n{'=' * 60}")
            print("  MATCH FOUND")
            print(f"  Address:        {export.checksum_address}")
            print(f"  Problem:        {export.problem}")
            print(f"  Match:          {export.summary}")
            print(f"  Rarity:         {display_difficulty(export.rarity)}")
            print(f"  Time:           {format_time(result.elapsed)}")
            print(f"  Keys Checked:   {result.total_checked:,}")
            print(f"  Rate:           {format_rate(result.rate)}/sec")
            print(f"{'=' * 60}")

        out_prefix = args.output if args.output else result.address
        key_path = save_key_file(export, out_prefix + ".key")
        text_path = save_report(export, out_prefix + ".txt")

        if not args.quiet:
            print(f"\n  Saved key:      {key_path}")
            print(f"  Saved info:     {text_path}")
        else:
            print(result.address)

    return 0
