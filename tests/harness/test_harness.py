import os
import subprocess
import sys

import pytest

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))
TOOL = os.path.join(REPO_ROOT, "json_tool.py")

TEST_DIR = os.path.dirname(__file__)

# List all .json files in harness/
json_files = sorted(f for f in os.listdir(TEST_DIR) if f.endswith(".json"))

VALID_FILES = [f for f in json_files if f.startswith("pass")]
INVALID_FILES = [f for f in json_files if f.startswith("fail")]

# Hard fail if test files are missing
if not VALID_FILES:
    raise RuntimeError("No pass*.json files found in harness directory")
if not INVALID_FILES:
    raise RuntimeError("No fail*.json files found in harness directory")


def _run(command, path):
    env = dict(os.environ, PYTHONIOENCODING="utf-8")
    return subprocess.run([sys.executable, TOOL, command, path],
                          capture_output=True, text=True, encoding="utf-8", env=env)


@pytest.mark.parametrize("filename", VALID_FILES)
def test_valid_json_returns_0(filename):
    path = os.path.join(TEST_DIR, filename)
    result = _run("validate", path)
    assert result.returncode == 0, f"Expected 0 from {filename}, got {result.returncode}: {result.stderr}"
    assert result.stdout.startswith("OK")


@pytest.mark.parametrize("filename", INVALID_FILES)
def test_invalid_json_returns_1(filename):
    path = os.path.join(TEST_DIR, filename)
    result = _run("validate", path)
    assert result.returncode == 1, f"Expected 1 from {filename}, got {result.returncode}"
    assert "SyntaxError: Error at line" in result.stderr


@pytest.mark.parametrize("filename", VALID_FILES)
def test_format_output_is_a_fixed_point(filename, tmp_path):
    path = os.path.join(TEST_DIR, filename)
    first = _run("format", path)
    assert first.returncode == 0
    again = tmp_path / "formatted.json"
    again.write_text(first.stdout, encoding="utf-8")
    second = _run("format", str(again))
    assert second.returncode == 0
    assert second.stdout == first.stdout


@pytest.mark.parametrize("filename", INVALID_FILES)
def test_highlight_accepts_invalid_files(filename):
    path = os.path.join(TEST_DIR, filename)
    result = _run("highlight", path)
    assert result.returncode == 0
    assert result.stdout.startswith("<pre")
