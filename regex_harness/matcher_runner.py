"""
Timed runner for the external matcher script.

One matcher process is started per (pattern, corpus): the pattern is passed
verbatim as the last command-line argument, with no shell and no added
quoting, and the words are streamed to stdin, one per line. The runner
measures wall-clock time from process start to exit and returns it with the
matcher's stdout.

A watcher timer is armed for ``len(words)`` time units. If it fires while the
process is still running, the whole process group is killed with SIGKILL and
the run is reported as TIMED_OUT; whatever stdout was produced is still
returned. The watcher is cancelled as soon as the process exits.

The matcher's stderr is relayed to our own stderr line by line as it is
written, and also kept for error reporting. Output is decoded as UTF-8 with
undecodable bytes replaced.
"""

import os
import signal
import subprocess
import sys
import threading
import time
from datetime import timedelta
from typing import IO, List, Optional, Sequence

from .errors import ProcessStartError
from .models import RunOutcome, RunResult


def _feed_words(stream: IO[str], words: Sequence[str]) -> None:
    try:
        for word in words:
            stream.write(word + "\n")
        stream.flush()
    except BrokenPipeError:
        # matcher exited (or was killed) before reading the whole corpus
        pass
    finally:
        try:
            stream.close()
        except BrokenPipeError:
            pass


def _relay_stderr(stream: IO[str], sink: IO[str], captured: List[str]) -> None:
    for line in stream:
        captured.append(line)
        sink.write(line)
        sink.flush()
    stream.close()


def _kill_process_group(proc: subprocess.Popen, fired: threading.Event) -> None:
    """Watcher callback: SIGKILL the matcher's process group if it is still running."""
    if proc.poll() is not None:
        return
    fired.set()
    try:
        os.killpg(proc.pid, signal.SIGKILL)
    except ProcessLookupError:
        pass
    except PermissionError:
        print(f"failed to kill matcher process {proc.pid}", file=sys.stderr)


class MatcherRunner:
    def __init__(self, matcher_cmd: Sequence[str], time_unit: float = 1.0, stderr_sink: Optional[IO[str]] = None):
        if not matcher_cmd:
            raise ValueError("matcher_cmd must not be empty")
        self.matcher_cmd = list(matcher_cmd)
        self.time_unit = time_unit
        self.stderr_sink = stderr_sink

    def timeout_for(self, words: Sequence[str]) -> float:
        """Corpus-proportional timeout: one time unit per word, at least one unit."""
        return max(len(words), 1) * self.time_unit

    def run(self, pattern: str, words: Sequence[str]) -> RunResult:
        cmd = self.matcher_cmd + [pattern]
        timeout = self.timeout_for(words)
        sink = self.stderr_sink if self.stderr_sink is not None else sys.stderr

        start_time = time.perf_counter()
        try:
            proc = subprocess.Popen(
                cmd,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
                start_new_session=True,
            )
        except OSError as exc:
            raise ProcessStartError("failed to start matcher script", cmd=cmd) from exc

        fired = threading.Event()
        watcher = threading.Timer(timeout, _kill_process_group, args=(proc, fired))
        watcher.daemon = True
        stderr_lines: List[str] = []
        feeder = threading.Thread(target=_feed_words, args=(proc.stdin, words), daemon=True)
        relay = threading.Thread(target=_relay_stderr, args=(proc.stderr, sink, stderr_lines), daemon=True)

        watcher.start()
        feeder.start()
        relay.start()
        try:
            stdout = proc.stdout.read()
            returncode = proc.wait()
            elapsed = time.perf_counter() - start_time
        except BaseException:
            # the matcher would outlive us once we stop reading its output
            _kill_process_group(proc, threading.Event())
            proc.wait()
            raise
        finally:
            watcher.cancel()
            proc.stdout.close()
            feeder.join()
            relay.join()

        if fired.is_set():
            outcome = RunOutcome.TIMED_OUT
        elif returncode != 0:
            outcome = RunOutcome.FAILED
        else:
            outcome = RunOutcome.COMPLETED

        if stdout.endswith("\n"):
            stdout = stdout[:-1]

        return RunResult(
            pattern=pattern,
            duration=timedelta(seconds=elapsed),
            output=stdout,
            outcome=outcome,
            returncode=returncode,
            stderr="".join(stderr_lines),
        )
