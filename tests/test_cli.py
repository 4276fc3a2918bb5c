import hashlib
import json
import subprocess
import sys
from pathlib import Path

from typer.testing import CliRunner

from hashcalc.cli import app

runner = CliRunner()

PROJECT_ROOT = Path(__file__).parent.parent

ABC_HEX = "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"
EMPTY_HEX = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"


def test_cli_smoke():
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0


def test_hash_text():
    result = runner.invoke(app, ["hash", "abc"])
    assert result.exit_code == 0
    assert result.stdout.strip() == ABC_HEX


def test_hash_stdin():
    result = runner.invoke(app, ["hash"], input="")
    assert result.exit_code == 0
    assert result.stdout.strip() == EMPTY_HEX


def test_hash_file(tmp_path):
    path = tmp_path / "data.bin"
    path.write_bytes(b"\x00\x01" * 100)
    result = runner.invoke(app, ["hash", "--file", str(path)])
    assert result.exit_code == 0
    assert result.stdout.strip() == hashlib.sha256(b"\x00\x01" * 100).hexdigest()


def test_hash_text_and_file_conflict(tmp_path):
    path = tmp_path / "data.bin"
    path.write_bytes(b"x")
    result = runner.invoke(app, ["hash", "abc", "--file", str(path)])
    assert result.exit_code == 2


def test_hash_trace_json():
    result = runner.invoke(app, ["hash", "abc", "--trace"])
    assert result.exit_code == 0
    trace = json.loads(result.stdout)
    assert trace["finalDigest"] == ABC_HEX


def test_interactive_session():
    result = runner.invoke(app, ["interactive"], input="abc\n  \nEXIT\nnever hashed\n")
    assert result.exit_code == 0
    out = result.stdout
    assert out.startswith("===Program to calculate hashes===")
    assert "Type exit to finish the program" in out
    assert "Text: abc" in out
    assert f"Text hashed: {ABC_HEX}" in out
    # blank line is trimmed to the empty string and still hashed
    assert f"Text hashed: {EMPTY_HEX}" in out
    assert "-" * 50 in out
    assert out.rstrip().endswith("bye bye!")
    assert "never hashed" not in out


def test_interactive_stops_at_end_of_input():
    result = runner.invoke(app, ["interactive"], input="abc\n")
    assert result.exit_code == 0
    assert f"Text hashed: {ABC_HEX}" in result.stdout
    assert "bye bye!" not in result.stdout


def test_verify_ok():
    result = runner.invoke(app, ["verify", "abc", ABC_HEX])
    assert result.exit_code == 0
    assert "OK" in result.stdout


def test_verify_mismatch():
    result = runner.invoke(app, ["verify", "abd", ABC_HEX])
    assert result.exit_code == 1


def test_verify_malformed_digest():
    result = runner.invoke(app, ["verify", "abc", "not-a-digest"])
    assert result.exit_code == 2


def test_analyze_with_plots(tmp_path):
    result = runner.invoke(app, ["analyze", "--samples", "20", "--buckets", "4",
                                 "--seed", "1", "--plots", str(tmp_path)])
    assert result.exit_code == 0
    assert "Collisions found: 0" in result.stdout
    assert (tmp_path / "uniformity_distribution.png").exists()
    assert (tmp_path / "avalanche_boxplot.png").exists()


def _run_module(*args, env=None):
    return subprocess.run(
        [sys.executable, "-m", "hashcalc.cli", *args],
        capture_output=True, text=True, cwd=PROJECT_ROOT, env=env,
    )


def test_debug_logging_keeps_trace_json_on_stdout():
    result = _run_module("--log-level", "DEBUG", "hash", "abc", "--trace")
    assert result.returncode == 0
    assert json.loads(result.stdout)["finalDigest"] == ABC_HEX
    assert "Traced 1 block(s)" in result.stderr


def test_analyze_report_starts_stdout():
    result = _run_module("analyze", "-n", "3", "--seed", "1")
    assert result.returncode == 0
    assert result.stdout.splitlines()[0].startswith("Collisions found")


def test_invalid_config_exits_with_usage_error(monkeypatch):
    monkeypatch.setenv("HASHCALC_ENABLE_TRACE", "maybe")
    result = runner.invoke(app, ["analyze", "-n", "2"])
    assert result.exit_code == 2
    assert not isinstance(result.exception, ValueError)


def test_serve_invalid_config_does_not_start(monkeypatch):
    started = []
    monkeypatch.setattr("hashcalc.cli.uvicorn.run", lambda *a, **kw: started.append(kw))
    monkeypatch.setenv("HASHCALC_PORT", "not-a-port")
    result = runner.invoke(app, ["serve"])
    assert result.exit_code == 2
    assert started == []


def test_serve_flags_override_env(monkeypatch):
    started = []
    monkeypatch.setattr("hashcalc.cli.uvicorn.run", lambda *a, **kw: started.append(kw))
    monkeypatch.setenv("HASHCALC_PORT", "9001")
    result = runner.invoke(app, ["serve", "--port", "9100"])
    assert result.exit_code == 0
    assert started[0]["port"] == 9100


def test_hash_command_does_not_load_matplotlib():
    code = "import sys, hashcalc.cli\nprint('matplotlib' in sys.modules)\n"
    result = subprocess.run([sys.executable, "-c", code], capture_output=True, text=True,
                            cwd=PROJECT_ROOT, check=True)
    assert result.stdout.strip() == "False"
