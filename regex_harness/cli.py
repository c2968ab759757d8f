"""
Command line entry point for the regex harness.

Checks a regex transformer against its own input: every "before" pattern is
compared with its transformed "after" pattern for matching equivalence, and
both are timed by an external matcher script.

Usage:
    regex-harness --patterns <file> --transformer <binary> --wordgen <cmd> [options]

Examples:
    regex-harness --patterns patterns.txt --transformer ./target/release/simplify \\
        --wordgen "./wordgen" --matcher-script scripts/regular_compression.py
    regex-harness --patterns - --transformer ./simplify --wordgen ./wordgen --flow equivalence
"""

import argparse
import shlex
import sys
import time
from pathlib import Path
from typing import List, Optional

from .corpus import ExternalWordGenerator, PatternFileSource
from .harness import Harness
from .path_config import (
    MATCHER_SCRIPT_ENV,
    TRANSFORMER_ENV,
    HarnessConfig,
    build_matcher_cmd,
    DEFAULT_BENCH_COUNT_WORDS,
    DEFAULT_BENCH_MAX_DUMP_SIZE,
    DEFAULT_EQUIVALENCE_COUNT_WORDS,
    DEFAULT_EQUIVALENCE_MAX_DUMP_SIZE,
    DEFAULT_MARKER,
    TIME_UNIT_SECONDS,
    TRANSFORMER_TIMEOUT_SECONDS,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="regex-harness",
        description="Equivalence and benchmark harness for an external regex transformer",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Examples:
  regex-harness --patterns patterns.txt --transformer ./simplify --wordgen ./wordgen --matcher-script match.py
  regex-harness --patterns patterns.txt --transformer ./simplify --wordgen "python3 gen.py" --flow equivalence

Environment:
  {TRANSFORMER_ENV}      default for --transformer
  {MATCHER_SCRIPT_ENV}   default for --matcher-script
        """,
    )
    parser.add_argument('--patterns', required=True, help='File with one pattern per line ("-" for stdin)')
    parser.add_argument('--transformer', help='Path to the regex transformer binary')
    parser.add_argument('--wordgen', required=True, help='Word generator command; called as <cmd> <pattern> <count> <max-dump-size>')
    parser.add_argument('--matcher-script', help='Matcher script run with python for the benchmark flow')
    parser.add_argument('--flow', choices=['equivalence', 'benchmark', 'both'], default='both',
                        help='Which flow(s) to run (default: both)')
    parser.add_argument('--bench-count-words', type=int, default=DEFAULT_BENCH_COUNT_WORDS,
                        help=f'Words per pattern in the benchmark flow (default: {DEFAULT_BENCH_COUNT_WORDS})')
    parser.add_argument('--bench-max-dump-size', type=int, default=DEFAULT_BENCH_MAX_DUMP_SIZE,
                        help=f'Generated data bound per pattern in the benchmark flow (default: {DEFAULT_BENCH_MAX_DUMP_SIZE})')
    parser.add_argument('--equivalence-count-words', type=int, default=DEFAULT_EQUIVALENCE_COUNT_WORDS,
                        help=f'Words per pattern in the equivalence flow (default: {DEFAULT_EQUIVALENCE_COUNT_WORDS})')
    parser.add_argument('--equivalence-max-dump-size', type=int, default=DEFAULT_EQUIVALENCE_MAX_DUMP_SIZE,
                        help=f'Generated data bound per pattern in the equivalence flow (default: {DEFAULT_EQUIVALENCE_MAX_DUMP_SIZE})')
    parser.add_argument('--time-unit', type=float, default=TIME_UNIT_SECONDS,
                        help=f'Matcher timeout per word in seconds (default: {TIME_UNIT_SECONDS})')
    parser.add_argument('--transformer-timeout', type=float, default=TRANSFORMER_TIMEOUT_SECONDS,
                        help=f'Timeout for one transformer batch in seconds (default: {TRANSFORMER_TIMEOUT_SECONDS})')
    parser.add_argument('--marker', default=DEFAULT_MARKER,
                        help=f'Suffix of the extra benchmark word (default: {DEFAULT_MARKER})')
    return parser


def config_from_args(args: argparse.Namespace) -> HarnessConfig:
    config = HarnessConfig(
        bench_count_words=args.bench_count_words,
        bench_max_dump_size=args.bench_max_dump_size,
        equivalence_count_words=args.equivalence_count_words,
        equivalence_max_dump_size=args.equivalence_max_dump_size,
        time_unit=args.time_unit,
        transformer_timeout=args.transformer_timeout,
        marker=args.marker,
    )
    if args.transformer:
        config.transformer_path = Path(args.transformer)
    if args.matcher_script:
        config.matcher_cmd = build_matcher_cmd(args.matcher_script)
    return config


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    run_equivalence = args.flow in ('equivalence', 'both')
    run_benchmark = args.flow in ('benchmark', 'both')

    config = config_from_args(args)
    try:
        config.validate(require_matcher=run_benchmark)
    except ValueError as e:
        print(f"[FAIL][config] {e}", file=sys.stderr)
        return 2

    harness = Harness(
        config,
        pattern_source=PatternFileSource(args.patterns),
        word_generator=ExternalWordGenerator(shlex.split(args.wordgen)),
    )

    start_time = time.time()
    failures = harness.start(run_equivalence=run_equivalence, run_benchmark=run_benchmark)
    total_time = time.time() - start_time

    for failure in failures:
        print(f"[FAIL][{failure.flow}] {failure}", file=sys.stderr)
    print(f"Total harness time: {total_time:.2f} seconds")
    return 1 if failures else 0

