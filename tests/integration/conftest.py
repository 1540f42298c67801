import json
import os
import subprocess
import sys
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[2]


def run_cli(args, cwd=None, env=None, timeout=60):
    """
    Run the CLI as a subprocess: python -m riskscan.cli <args>
    Returns CompletedProcess with stdout/stderr text captured.
    """
    cmd = [sys.executable, "-m", "riskscan.cli"] + list(map(str, args))
    if env is None:
        env = os.environ.copy()
        env["PYTHONPATH"] = os.pathsep.join(p for p in (str(REPO_ROOT), env.get("PYTHONPATH")) if p)
    return subprocess.run(cmd, cwd=cwd, env=env, capture_output=True, text=True, timeout=timeout)


@pytest.fixture()
def project_dir(tmp_path: Path) -> Path:
    """
    A small PHP/JS project with a known set of findings.
    """
    root = tmp_path / "project"
    (root / "src" / "lib").mkdir(parents=True)
    (root / "src" / "app.php").write_text(
        "<?php\n"
        "// entry point\n"
        "$name = $_GET['name'];\n"
        "echo $name;\n"
        "$x = eval($_GET['c']);\n"
    )
    (root / "src" / "lib" / "config.js").write_text(
        "// settings\n"
        "const api_key = \"AKIA1234567890ABCDEF\";\n"
        "const password = 'hunter22';\n"
    )
    (root / "notes.txt").write_text("eval(this) is never scanned\n")
    return root


@pytest.fixture()
def out_dir(tmp_path: Path) -> Path:
    d = tmp_path / "out"
    d.mkdir(parents=True, exist_ok=True)
    return d


def load_json(p: Path):
    with p.open("r") as f:
        return json.load(f)


def assert_exit_ok(proc):
    assert proc.returncode == 0, f"Non-zero exit:\nSTDOUT:\n{proc.stdout}\nSTDERR:\n{proc.stderr}"


def assert_file(p: Path):
    assert p.exists(), f"Expected file missing: {p}"
    return p
