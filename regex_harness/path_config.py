"""
Shared helpers for configuring the harness's external programs.

The transformer binary and the matcher script used to be located relative to
the harness's own source file. These helpers resolve them once at startup,
from environment variables or command-line flags, so the same harness can run
against any build of the transformer and any matcher script.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

TRANSFORMER_ENV = "REGEX_HARNESS_TRANSFORMER"
MATCHER_SCRIPT_ENV = "REGEX_HARNESS_MATCHER_SCRIPT"
PYTHON_ENV = "REGEX_HARNESS_PYTHON"

# One timeout unit per word in the matcher's corpus.
TIME_UNIT_SECONDS = float(os.environ.get("REGEX_HARNESS_TIME_UNIT", "1.0"))
TRANSFORMER_TIMEOUT_SECONDS = float(os.environ.get("REGEX_HARNESS_TRANSFORMER_TIMEOUT", "300"))

DEFAULT_BENCH_COUNT_WORDS = 5
DEFAULT_BENCH_MAX_DUMP_SIZE = 10000
DEFAULT_EQUIVALENCE_COUNT_WORDS = 10
DEFAULT_EQUIVALENCE_MAX_DUMP_SIZE = 1000
DEFAULT_MARKER = "Z"


def _expand_path(path: str | os.PathLike[str]) -> Path:
    return Path(path).expanduser().resolve()


def get_transformer_path() -> Optional[Path]:
    """Return the transformer binary from the environment, if set."""
    override = os.environ.get(TRANSFORMER_ENV)
    if override:
        return _expand_path(override)
    return None


def get_matcher_script() -> Optional[Path]:
    """Return the matcher script from the environment, if set."""
    override = os.environ.get(MATCHER_SCRIPT_ENV)
    if override:
        return _expand_path(override)
    return None


def get_python_executable() -> str:
    return os.environ.get(PYTHON_ENV) or sys.executable


def build_matcher_cmd(script: str | os.PathLike[str]) -> List[str]:
    """Build the matcher command; the pattern is appended per invocation."""
    return [get_python_executable(), str(_expand_path(script))]


@dataclass
class HarnessConfig:
    """Every option the harness entry point recognises."""

    transformer_path: Optional[Path] = field(default_factory=get_transformer_path)
    matcher_cmd: List[str] = field(default_factory=list)
    bench_count_words: int = DEFAULT_BENCH_COUNT_WORDS
    bench_max_dump_size: int = DEFAULT_BENCH_MAX_DUMP_SIZE
    equivalence_count_words: int = DEFAULT_EQUIVALENCE_COUNT_WORDS
    equivalence_max_dump_size: int = DEFAULT_EQUIVALENCE_MAX_DUMP_SIZE
    time_unit: float = TIME_UNIT_SECONDS
    transformer_timeout: Optional[float] = TRANSFORMER_TIMEOUT_SECONDS
    marker: str = DEFAULT_MARKER

    def __post_init__(self):
        if not self.matcher_cmd:
            script = get_matcher_script()
            if script is not None:
                self.matcher_cmd = build_matcher_cmd(script)

    def validate(self, require_matcher: bool = True) -> None:
        if self.transformer_path is None:
            raise ValueError(f"No transformer binary configured (set {TRANSFORMER_ENV} or pass --transformer)")
        if require_matcher and not self.matcher_cmd:
            raise ValueError(f"No matcher script configured (set {MATCHER_SCRIPT_ENV} or pass --matcher-script)")
        for name in ("bench_count_words", "bench_max_dump_size",
                     "equivalence_count_words", "equivalence_max_dump_size"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")
        if self.time_unit <= 0:
            raise ValueError(f"time_unit must be positive, got {self.time_unit}")
        if not self.marker:
            raise ValueError("marker must be a non-empty string")
