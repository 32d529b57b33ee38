"""Tests for the command line interface."""

import os
import subprocess
import sys
from pathlib import Path

import pytest

from kroki.encoding import encode_payload

REPO_ROOT = Path(__file__).resolve().parents[2]


def run_cli(*args: str, stdin: str | None = None, **env: str):
    """Run ``python . <args>`` from the repository root."""
    environ = {k: v for k, v in os.environ.items() if not k.startswith("KROKI_")}
    environ.update(env)
    return subprocess.run(
        [sys.executable, ".", *args],
        capture_output=True,
        text=True,
        input=stdin,
        cwd=REPO_ROOT,
        env=environ,
        timeout=30,
    )


@pytest.mark.unit
def test_help():
    """--help lists the commands."""
    result = run_cli("--help")
    assert result.returncode == 0
    for command in ("render", "url", "encode", "decode", "env", "kinds"):
        assert command in result.stdout


@pytest.mark.unit
def test_no_arguments_shows_help():
    """Running without a command prints usage and fails."""
    result = run_cli()
    assert result.returncode == 1
    assert "Usage:" in result.stdout


@pytest.mark.unit
def test_unknown_command():
    """Unknown commands fail."""
    result = run_cli("paint")
    assert result.returncode == 1
    assert "Unknown command: paint" in result.stderr


@pytest.mark.unit
def test_encode_from_stdin():
    """encode prints the payload of stdin."""
    result = run_cli("encode", stdin="A->B: hi")
    assert result.returncode == 0
    assert result.stdout.strip() == encode_payload("A->B: hi")


@pytest.mark.unit
def test_encode_from_file(tmp_path):
    """encode reads a source file."""
    source = tmp_path / "diagram.dot"
    source.write_text("digraph { a -> b }", encoding="utf-8")
    result = run_cli("encode", str(source))
    assert result.stdout.strip() == encode_payload("digraph { a -> b }")


@pytest.mark.unit
def test_decode():
    """decode prints the original source."""
    result = run_cli("decode", encode_payload("Bob -> Alice: hello"))
    assert result.returncode == 0
    assert result.stdout == "Bob -> Alice: hello"


@pytest.mark.unit
def test_decode_invalid_token():
    """decode fails cleanly on garbage."""
    result = run_cli("decode", "%%%")
    assert result.returncode == 1
    assert "Invalid Kroki payload" in result.stderr


@pytest.mark.unit
def test_url_uses_endpoint_variable():
    """url composes the request URI from KROKI_ENDPOINT."""
    result = run_cli(
        "url",
        "PlantUML",
        "--format",
        "png",
        stdin="A->B: hi",
        KROKI_ENDPOINT="http://example.test",
    )
    assert result.returncode == 0
    assert result.stdout.strip() == (
        f"http://example.test/plantuml/png/{encode_payload('A->B: hi')}"
    )


@pytest.mark.unit
def test_url_rejects_invalid_kind():
    """url reports a malformed kind instead of printing a URI."""
    result = run_cli("url", "plant uml", stdin="A->B: hi")
    assert result.returncode == 1
    assert result.stdout == ""
    assert "identifier-like token" in result.stderr


@pytest.mark.unit
def test_env_shows_variables():
    """env lists the configuration variables."""
    result = run_cli("env", KROKI_ENDPOINT="http://localhost:8000/")
    assert result.returncode == 0
    assert "KROKI_ENDPOINT" in result.stdout
    assert "KROKI_TIMEOUT" in result.stdout
    assert "Resolved endpoint: http://localhost:8000\n" in result.stdout


@pytest.mark.unit
def test_kinds():
    """kinds lists diagram kinds."""
    result = run_cli("kinds")
    assert result.returncode == 0
    assert "plantuml" in result.stdout.split()
    assert "graphviz" in result.stdout.split()


@pytest.mark.unit
def test_render_connection_failure():
    """Transport failures are reported and exit non-zero."""
    result = run_cli(
        "render",
        "graphviz",
        "--endpoint",
        "http://127.0.0.1:9",
        stdin="digraph { a -> b }",
        KROKI_TIMEOUT="2",
    )
    assert result.returncode == 1
    assert "Kroki request failed" in result.stderr


@pytest.mark.kroki
@pytest.mark.integration
def test_render_to_file(tmp_path, kroki_service):
    """render writes the image next to the source."""
    source = tmp_path / "diagram.dot"
    source.write_text("digraph { a -> b }", encoding="utf-8")
    result = run_cli("render", "graphviz", str(source), KROKI_ENDPOINT=kroki_service)
    assert result.returncode == 0
    assert b"<svg" in (tmp_path / "diagram.svg").read_bytes()
