"""
Adapters for the pattern and word generators.

Generation itself happens outside the harness. These adapters read a
pattern corpus from a file and ask an external word generator for the words
of each pattern, turning any failure into a GenerationError.
"""

import os
import subprocess
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from .errors import GenerationError
from .models import PatternPair
from .transformer import split_output_lines

WORDGEN_TIMEOUT_SECONDS = float(os.environ.get("REGEX_HARNESS_WORDGEN_TIMEOUT", "300"))


class PatternFileSource:
    """Pattern corpus read from a file, one pattern per line ("-" for stdin).

    The input is read on the first call only; every flow gets the same list.
    """

    def __init__(self, path):
        self.path = path
        self._patterns: Optional[List[str]] = None

    def __call__(self) -> List[str]:
        if self._patterns is None:
            self._patterns = self._read()
        return list(self._patterns)

    def _read(self) -> List[str]:
        try:
            if str(self.path) == "-":
                text = sys.stdin.read()
            else:
                text = Path(self.path).read_text()
        except OSError as exc:
            raise GenerationError("failed to read patterns", path=str(self.path)) from exc
        return [line for line in text.splitlines() if line.strip()]


class ExternalWordGenerator:
    """Runs ``cmd + [pattern, count_words, max_dump_size]`` once per pattern.

    Each stdout line of the generator is one word for that pattern.
    """

    def __init__(self, cmd: Sequence[str], timeout: Optional[float] = WORDGEN_TIMEOUT_SECONDS):
        if not cmd:
            raise ValueError("word generator command must not be empty")
        self.cmd = list(cmd)
        self.timeout = timeout

    def words_for(self, pattern: str, count_words: int, max_dump_size: int) -> List[str]:
        cmd = self.cmd + [pattern, str(count_words), str(max_dump_size)]
        try:
            proc = subprocess.run(cmd, capture_output=True, text=True, encoding="utf-8",
                                  errors="replace", timeout=self.timeout, check=False)
        except subprocess.TimeoutExpired as exc:
            raise GenerationError("word generator timed out", f"after {self.timeout}s", pattern=pattern) from exc
        except OSError as exc:
            raise GenerationError("failed to start word generator", cmd=cmd) from exc
        if proc.returncode != 0:
            raise GenerationError(
                f"word generator failed (rc={proc.returncode})",
                proc.stderr.strip() or None,
                pattern=pattern,
            )
        return split_output_lines(proc.stdout)

    def __call__(self, patterns: Sequence[str], count_words: int, max_dump_size: int) -> List[PatternPair]:
        return [PatternPair(before=p, words=self.words_for(p, count_words, max_dump_size)) for p in patterns]


def marker_word(words: Sequence[str], marker: str) -> str:
    """Longest word of the set with the marker appended: a near miss for most patterns."""
    longest = max(words, key=len) if words else ""
    return longest + marker


def augment_for_benchmark(pairs: Sequence[PatternPair], marker: str = "Z") -> List[PatternPair]:
    """Derived copies of ``pairs`` whose word sets gain one marker word each.

    The original pairs are left untouched.
    """
    return [pair.with_words(list(pair.words) + [marker_word(pair.words, marker)]) for pair in pairs]
