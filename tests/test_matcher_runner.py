"""
Tests for the timed matcher runner.
"""

import io
import os
import sys
import time

import pytest

from regex_harness.errors import ProcessExitError, ProcessStartError
from regex_harness.matcher_runner import MatcherRunner
from regex_harness.models import RunOutcome

pytestmark = pytest.mark.skipif(os.name != "posix", reason="process groups are POSIX only")


def python_cmd(script):
    return [sys.executable, str(script)]


class TestTimeout:
    def test_timeout_is_one_unit_per_word(self):
        runner = MatcherRunner(["matcher"], time_unit=0.5)
        assert runner.timeout_for(["a", "b", "c"]) == 1.5

    def test_empty_corpus_gets_one_unit(self):
        assert MatcherRunner(["matcher"], time_unit=2.0).timeout_for([]) == 2.0

    def test_empty_command_is_rejected(self):
        with pytest.raises(ValueError):
            MatcherRunner([])


class TestMatcherRunner:
    def test_fast_process_completes(self, matcher_cmd):
        runner = MatcherRunner(matcher_cmd, time_unit=5.0)
        result = runner.run("a+", ["a", "aa", "b"])
        assert result.outcome is RunOutcome.COMPLETED
        assert result.ok
        assert result.output == "matched 2/3"
        assert result.returncode == 0
        assert result.duration.total_seconds() < runner.timeout_for(["a", "aa", "b"])
        result.raise_for_status()

    def test_pattern_is_passed_as_single_argument(self, make_script):
        script = make_script("argv.py", """
            import sys
            sys.stdin.read()
            print(len(sys.argv[1:]), sys.argv[1])
        """)
        result = MatcherRunner(python_cmd(script), time_unit=5.0).run("a b|c", ["x"])
        assert result.output == "1 a b|c"

    def test_hanging_process_is_killed(self, make_script):
        script = make_script("hang.py", """
            import time
            time.sleep(60)
        """)
        runner = MatcherRunner(python_cmd(script), time_unit=0.5)
        started = time.monotonic()
        result = runner.run("a", ["a"])
        assert time.monotonic() - started < 10
        assert result.outcome is RunOutcome.TIMED_OUT
        assert result.timed_out
        assert result.status == "TIMEOUT"
        result.raise_for_status()

    def test_killed_process_output_is_drained(self, make_script):
        script = make_script("partial.py", """
            import sys
            import time
            print("started", flush=True)
            time.sleep(60)
        """)
        result = MatcherRunner(python_cmd(script), time_unit=0.5).run("a", ["a"])
        assert result.timed_out
        assert result.output == "started"

    def test_child_processes_are_killed_with_the_group(self, make_script):
        script = make_script("spawner.py", """
            import subprocess
            import sys
            subprocess.run([sys.executable, "-c", "import time; time.sleep(60)"])
        """)
        started = time.monotonic()
        result = MatcherRunner(python_cmd(script), time_unit=0.5).run("a", ["a"])
        assert time.monotonic() - started < 10
        assert result.timed_out

    def test_non_zero_exit_is_failed(self, make_script):
        script = make_script("broken.py", """
            import sys
            sys.stdin.read()
            sys.stderr.write("bad pattern\\n")
            sys.exit(4)
        """)
        sink = io.StringIO()
        result = MatcherRunner(python_cmd(script), time_unit=5.0, stderr_sink=sink).run("(", ["a"])
        assert result.outcome is RunOutcome.FAILED
        assert result.returncode == 4
        assert result.stderr == "bad pattern\n"
        with pytest.raises(ProcessExitError) as excinfo:
            result.raise_for_status()
        assert excinfo.value.returncode == 4
        assert "bad pattern" in str(excinfo.value)

    def test_stderr_is_relayed(self, make_script):
        script = make_script("chatty.py", """
            import sys
            for word in sys.stdin.read().splitlines():
                sys.stderr.write(f"saw {word}\\n")
            print("OK")
        """)
        sink = io.StringIO()
        result = MatcherRunner(python_cmd(script), time_unit=5.0, stderr_sink=sink).run("a", ["x", "y"])
        assert result.ok
        assert sink.getvalue() == "saw x\nsaw y\n"
        assert result.stderr == "saw x\nsaw y\n"

    def test_process_ignoring_stdin(self, make_script):
        script = make_script("ignores_stdin.py", """
            print("done")
        """)
        words = ["w" * 1000] * 500
        result = MatcherRunner(python_cmd(script), time_unit=0.05).run("a", words)
        assert result.ok
        assert result.output == "done"

    def test_undecodable_output_is_replaced(self, make_script):
        script = make_script("binary_output.py", """
            import sys
            sys.stdin.read()
            sys.stdout.buffer.write(b"\\xff\\xfeok\\n")
            sys.stderr.buffer.write(b"\\xff\\n")
        """)
        sink = io.StringIO()
        result = MatcherRunner(python_cmd(script), time_unit=5.0, stderr_sink=sink).run("a", ["a"])
        assert result.ok
        assert result.output == "\ufffd\ufffdok"
        assert result.stderr == "\ufffd\n"

    def test_start_failure(self, tmp_path):
        runner = MatcherRunner([str(tmp_path / "missing")], time_unit=1.0)
        with pytest.raises(ProcessStartError) as excinfo:
            runner.run("a", ["a"])
        assert isinstance(excinfo.value.__cause__, OSError)
