"""
Equivalence check between a "before" pattern and its transformed "after".

Both patterns are anchored to the whole word and every word of the pair's
corpus is tested against each. A word on which they disagree is an
equivalence violation. Violations are report entries, not errors, and the
verifier always walks every word of every pair.

A pattern that does not compile is treated as matching nothing, so the
comparison stays defined even for garbage transformer output. The compile
error is kept in the report and printed as a warning so that a broken
transformation is still visible.
"""

import re
from typing import Iterable, List, Optional, Pattern, Tuple

from .models import EquivalenceReport, PatternPair, WordVerdict


def anchor(pattern: str) -> str:
    """Wrap a pattern so it must match a whole word."""
    return f"^(?:{pattern})$"


def compile_anchored(pattern: str) -> Tuple[Optional[Pattern[str]], Optional[str]]:
    """Return (compiled anchored pattern, None) or (None, error text).

    The raw pattern must compile on its own: wrapping can close a stray
    parenthesis, e.g. "a)|(b" becomes valid once anchored.
    """
    try:
        re.compile(pattern)
        return re.compile(anchor(pattern)), None
    except re.error as exc:
        return None, str(exc)


def matches(compiled: Optional[Pattern[str]], word: str) -> bool:
    if compiled is None:
        return False
    return compiled.fullmatch(word) is not None


def equal_matched(before: str, after: str, word: str) -> bool:
    """True if both patterns agree on whether ``word`` matches."""
    before_re, _ = compile_anchored(before)
    after_re, _ = compile_anchored(after)
    return matches(before_re, word) == matches(after_re, word)


class EquivalenceVerifier:
    def __init__(self, quiet: bool = False):
        self.quiet = quiet

    def verify(self, pair: PatternPair) -> EquivalenceReport:
        if pair.after is None:
            raise ValueError(f"pattern {pair.before!r} has not been transformed")
        before_re, before_error = compile_anchored(pair.before)
        after_re, after_error = compile_anchored(pair.after)
        report = EquivalenceReport(pair=pair, before_error=before_error, after_error=after_error)
        for word in pair.words:
            report.verdicts.append(WordVerdict(
                word=word,
                matched_before=matches(before_re, word),
                matched_after=matches(after_re, word),
            ))
        return report

    def print_report(self, report: EquivalenceReport) -> None:
        pair = report.pair
        print(f"compare expected: {pair.before} regular with actual: {pair.after}")
        if report.before_error:
            print(f"[WARN] before pattern does not compile, treated as no match: {report.before_error}")
        if report.after_error:
            print(f"[WARN] after pattern does not compile, treated as no match: {report.after_error}")
        for verdict in report.verdicts:
            if verdict.agrees:
                print(f"[OK] {verdict.word}")
            else:
                print(f"[MISMATCH] {verdict.word} (before={verdict.matched_before}, after={verdict.matched_after})")

    def verify_all(self, pairs: Iterable[PatternPair]) -> List[EquivalenceReport]:
        reports = []
        for pair in pairs:
            report = self.verify(pair)
            if not self.quiet:
                self.print_report(report)
            reports.append(report)
        return reports
