"""
Tests for the command line entry point.
"""

import sys

from regex_harness.cli import build_parser, config_from_args, main


def test_config_from_args(tmp_path):
    args = build_parser().parse_args([
        "--patterns", "p.txt", "--wordgen", "gen", "--transformer", str(tmp_path / "t"),
        "--matcher-script", str(tmp_path / "m.py"), "--bench-count-words", "7", "--time-unit", "0.25",
    ])
    config = config_from_args(args)
    assert config.transformer_path == tmp_path / "t"
    assert config.matcher_cmd[-1] == str((tmp_path / "m.py").resolve())
    assert config.bench_count_words == 7
    assert config.time_unit == 0.25


def test_missing_transformer_is_usage_error(tmp_path, monkeypatch, capsys):
    monkeypatch.delenv("REGEX_HARNESS_TRANSFORMER", raising=False)
    rc = main(["--patterns", str(tmp_path / "p.txt"), "--wordgen", "gen", "--flow", "equivalence"])
    assert rc == 2
    assert "[FAIL][config]" in capsys.readouterr().err


def test_full_run(tmp_path, make_script, identity_transformer, matcher_script, capsys):
    patterns = tmp_path / "patterns.txt"
    patterns.write_text("a+\nab*\n")
    wordgen = make_script("wordgen.py", """
        import sys
        print("a")
        print("ab")
    """)
    rc = main([
        "--patterns", str(patterns),
        "--transformer", str(identity_transformer),
        "--wordgen", f"{sys.executable} {wordgen}",
        "--matcher-script", str(matcher_script),
        "--time-unit", "5",
    ])
    captured = capsys.readouterr()
    assert rc == 0, captured.err
    assert "[OK] ab" in captured.out
    assert "to before: regex: ab*" in captured.out


def test_failed_flow_exit_code(tmp_path, make_script, matcher_script, capsys):
    patterns = tmp_path / "patterns.txt"
    patterns.write_text("a\n")
    rc = main([
        "--patterns", str(patterns),
        "--transformer", str(tmp_path / "missing"),
        "--wordgen", str(tmp_path / "missing-gen"),
        "--matcher-script", str(matcher_script),
    ])
    err = capsys.readouterr().err
    assert rc == 1
    assert "[FAIL][equivalence]" in err
    assert "[FAIL][benchmark]" in err
