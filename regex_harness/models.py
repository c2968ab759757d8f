"""
Data types shared by the transformer client, the verifier and the benchmark runner.
"""

from dataclasses import dataclass, field, replace
from datetime import timedelta
from enum import Enum
from typing import List, Optional

from .errors import ProcessExitError


@dataclass
class PatternPair:
    """A before/after regex pair plus the words it is tested against.

    ``after`` is filled in exactly once by the batch transformer, at the index
    of ``before`` in the submitted batch.
    """
    before: str
    after: Optional[str] = None
    words: List[str] = field(default_factory=list)

    def with_words(self, words: List[str]) -> "PatternPair":
        """Return a derived copy with a different word set."""
        return replace(self, words=list(words))


class RunOutcome(Enum):
    COMPLETED = "completed"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


@dataclass
class RunResult:
    """Result of one timed matcher invocation."""
    pattern: str
    duration: timedelta
    output: str
    outcome: RunOutcome
    returncode: Optional[int] = None
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.outcome is RunOutcome.COMPLETED

    @property
    def timed_out(self) -> bool:
        return self.outcome is RunOutcome.TIMED_OUT

    @property
    def status(self) -> str:
        """Text shown next to the duration in benchmark lines."""
        if self.timed_out:
            return "TIMEOUT"
        return self.output

    def raise_for_status(self) -> None:
        """Raise ProcessExitError if the matcher exited with an error."""
        if self.outcome is RunOutcome.FAILED:
            raise ProcessExitError(
                f"matcher exited with status {self.returncode}",
                returncode=self.returncode if self.returncode is not None else -1,
                stderr=self.stderr,
                pattern=self.pattern,
            )


@dataclass
class WordVerdict:
    word: str
    matched_before: bool
    matched_after: bool

    @property
    def agrees(self) -> bool:
        return self.matched_before == self.matched_after


@dataclass
class EquivalenceReport:
    """Per-word verdicts for one pattern pair.

    ``before_error``/``after_error`` hold the compile error of a pattern that
    could not be compiled; such a pattern is treated as matching nothing.
    """
    pair: PatternPair
    verdicts: List[WordVerdict] = field(default_factory=list)
    before_error: Optional[str] = None
    after_error: Optional[str] = None

    @property
    def mismatches(self) -> List[WordVerdict]:
        return [v for v in self.verdicts if not v.agrees]

    @property
    def passed(self) -> bool:
        return not self.mismatches

    @property
    def compile_errors(self) -> List[str]:
        return [e for e in (self.before_error, self.after_error) if e]


@dataclass
class BenchmarkEntry:
    pair: PatternPair
    before: RunResult
    after: RunResult
