"""
Benchmark coordinator: times the before and after pattern of every pair.

Runs are strictly sequential, before then after, pair by pair, so one run's
load never skews another's timing. A matcher that exits with an error aborts
the benchmark; a matcher that runs out of time is reported as TIMEOUT and the
benchmark moves on.
"""

from typing import Iterable, List

from .errors import ProcessExitError
from .matcher_runner import MatcherRunner
from .models import BenchmarkEntry, PatternPair, RunResult

SEPARATOR = "_" * 23


def format_duration(result: RunResult) -> str:
    return f"{result.duration.total_seconds():.6f}s"


class BenchmarkCoordinator:
    def __init__(self, runner: MatcherRunner, quiet: bool = False):
        self.runner = runner
        self.quiet = quiet

    def _run_side(self, side: str, pattern: str, words: List[str]) -> RunResult:
        result = self.runner.run(pattern, words)
        try:
            result.raise_for_status()
        except ProcessExitError as exc:
            raise ProcessExitError(
                f"failed to run {side} regexp",
                returncode=exc.returncode,
                stderr=exc.stderr,
                details="",
                pattern=pattern,
            ) from exc
        return result

    def print_entry(self, entry: BenchmarkEntry) -> None:
        print(f"[BENCH] {len(entry.pair.words)} words")
        print(f"\tto before: regex: {entry.pair.before}, status: {entry.before.status}, "
              f"duration: {format_duration(entry.before)}")
        print(f"\tto after: regex: {entry.pair.after}, status: {entry.after.status}, "
              f"duration: {format_duration(entry.after)}")
        print(SEPARATOR)

    def run_pair(self, pair: PatternPair) -> BenchmarkEntry:
        if pair.after is None:
            raise ValueError(f"pattern {pair.before!r} has not been transformed")
        before = self._run_side("before", pair.before, pair.words)
        after = self._run_side("after", pair.after, pair.words)
        entry = BenchmarkEntry(pair=pair, before=before, after=after)
        if not self.quiet:
            self.print_entry(entry)
        return entry

    def run_all(self, pairs: Iterable[PatternPair]) -> List[BenchmarkEntry]:
        return [self.run_pair(pair) for pair in pairs]
