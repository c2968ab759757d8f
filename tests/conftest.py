"""
Shared pytest fixtures: fake external programs written into tmp_path.
"""

import sys
import textwrap

import pytest


@pytest.fixture
def make_script(tmp_path):
    """Write an executable Python script and return its path."""
    def _make(name, body):
        path = tmp_path / name
        path.write_text(f"#!{sys.executable}\n" + textwrap.dedent(body))
        path.chmod(0o755)
        return path
    return _make


@pytest.fixture
def identity_transformer(make_script):
    """Transformer that returns every pattern unchanged."""
    return make_script("identity_transformer.py", """
        import sys
        sys.stdout.write(sys.stdin.read())
    """)


@pytest.fixture
def matcher_script(make_script):
    """Matcher that counts full matches of argv[1] over the stdin words."""
    return make_script("matcher.py", """
        import re
        import sys
        pattern = re.compile(sys.argv[1])
        words = sys.stdin.read().splitlines()
        matched = sum(1 for w in words if pattern.fullmatch(w))
        print(f"matched {matched}/{len(words)}")
    """)


@pytest.fixture
def matcher_cmd(matcher_script):
    return [sys.executable, str(matcher_script)]
