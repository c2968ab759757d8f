"""
Batch client for the external regex transformer.

Protocol: the transformer is invoked once per batch. Its stdin receives one
"before" pattern per line, and its stdout must contain exactly one "after"
pattern per line, in the same order. No keys are exchanged, so pairing relies
purely on position; the client checks the line count before touching any pair.
"""

import os
import subprocess
from typing import List, Optional, Sequence

from .errors import TransformerExecutionError
from .models import PatternPair


def split_output_lines(stdout: str) -> List[str]:
    """Split transformer output into lines.

    One trailing newline is dropped. Empty output is zero lines, not a single
    empty pattern.
    """
    if not stdout:
        return []
    if stdout.endswith("\n"):
        stdout = stdout[:-1]
    return stdout.split("\n")


class BatchTransformer:
    def __init__(self, binary_path, timeout: Optional[float] = None):
        self.binary_path = os.fspath(binary_path)
        self.timeout = timeout

    def _build_input(self, pairs: Sequence[PatternPair]) -> str:
        return "".join(pair.before + "\n" for pair in pairs)

    def run(self, patterns_input: str) -> str:
        """Run the transformer on raw stdin text and return its stdout."""
        cmd = [self.binary_path]
        try:
            proc = subprocess.run(
                cmd,
                input=patterns_input,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            raise TransformerExecutionError(
                "failed to run simplifier",
                f"timed out after {self.timeout}s",
                reason="timeout",
                binary=self.binary_path,
            ) from exc
        except OSError as exc:
            raise TransformerExecutionError(
                "failed to start simplifier",
                reason="start failed",
                binary=self.binary_path,
            ) from exc

        if proc.returncode != 0:
            raise TransformerExecutionError(
                f"failed to run simplifier (rc={proc.returncode})",
                proc.stderr.strip() or None,
                reason="non-zero exit",
                binary=self.binary_path,
                returncode=proc.returncode,
            )
        return proc.stdout

    def transform(self, pairs: Sequence[PatternPair]) -> Sequence[PatternPair]:
        """Fill in ``after`` for every pair, by position.

        Nothing is written to the pairs unless the whole batch succeeds. An
        empty batch never starts the transformer.
        """
        if not pairs:
            return pairs
        stdout = self.run(self._build_input(pairs))
        lines = split_output_lines(stdout)
        if len(lines) != len(pairs):
            raise TransformerExecutionError(
                "output line count mismatch",
                f"expected {len(pairs)} lines, got {len(lines)}",
                reason="output line count mismatch",
                binary=self.binary_path,
                expected=len(pairs),
                received=len(lines),
            )
        for pair, after in zip(pairs, lines):
            pair.after = after
        return pairs
