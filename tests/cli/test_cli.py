"""Tests for the command line interface."""

import json
import subprocess
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).parent.parent.parent


def _run(*args: str, timeout: int = 60) -> subprocess.CompletedProcess:
    return subprocess.run(
        [sys.executable, ".", *args],
        capture_output=True,
        text=True,
        encoding="utf-8",
        cwd=PROJECT_ROOT,
        timeout=timeout,
    )


@pytest.fixture
def config_file(tmp_path, sample_config):
    path = tmp_path / "design.json"
    path.write_text(json.dumps(sample_config, ensure_ascii=False), encoding="utf-8")
    return path


@pytest.mark.integration
def test_help_lists_commands():
    result = _run("--help")
    assert result.returncode == 0
    for command in ("generate", "export", "validate", "mcp", "env", "test"):
        assert command in result.stdout


@pytest.mark.integration
def test_unknown_command_fails():
    assert _run("frobnicate").returncode == 1


@pytest.mark.integration
def test_generate_tree(config_file):
    result = _run("generate", str(config_file), "--format", "tree")
    assert result.returncode == 0
    assert result.stdout.startswith("Orders [page]")
    assert "我的订单 [text," in result.stdout


@pytest.mark.integration
def test_generate_json_to_file(config_file, tmp_path):
    target = tmp_path / "document.json"
    result = _run("generate", str(config_file), "-o", str(target))
    assert result.returncode == 0
    assert json.loads(target.read_text(encoding="utf-8"))["_class"] == "document"


@pytest.mark.integration
def test_generate_missing_config(tmp_path):
    result = _run("generate", str(tmp_path / "missing.json"))
    assert result.returncode == 1
    assert "Generation failed" in result.stderr


@pytest.mark.integration
def test_export_then_validate(config_file, tmp_path):
    out = tmp_path / "exports"
    result = _run("export", str(config_file), "--output-dir", str(out), "--filename", "cli")
    assert result.returncode == 0, result.stderr
    archive = Path(result.stdout.strip())
    assert archive.parent == out
    assert archive.name.startswith("cli_")
    assert archive.suffix == ".sketch"

    check = _run("validate", str(archive))
    assert check.returncode == 0
    assert "valid: 0 violation(s)" in check.stdout


@pytest.mark.integration
def test_validate_broken_directory(tmp_path):
    result = _run("validate", str(tmp_path))
    assert result.returncode == 1
    assert "missing_file" in result.stdout


@pytest.mark.integration
def test_env_lists_registry():
    result = _run("env")
    assert result.returncode == 0
    assert "SKETCH_OUTPUT_DIR" in result.stdout
    assert "MCP_PORT" in result.stdout
