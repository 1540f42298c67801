from pathlib import Path
from .conftest import run_cli, load_json, assert_exit_ok, assert_file


def test_dir_mode_reports_findings_in_path_order(project_dir: Path, out_dir: Path):
    proc = run_cli(["dir", project_dir, "--no-progress", "--no-color", "--out", out_dir])
    assert_exit_ok(proc)

    assert f"Starting scan on: {project_dir}" in proc.stdout
    assert "HIGH Found: Dangerous Eval" in proc.stdout
    assert "Code: $x = eval($_GET['c']);" in proc.stdout
    assert "4 finding(s) in 2 file(s)" in proc.stdout
    assert "notes.txt" not in proc.stdout

    findings = load_json(assert_file(out_dir / "findings.json"))
    assert [(Path(f["file_path"]).name, f["line_number"], f["rule_name"]) for f in findings] == [
        ("app.php", 5, "Dangerous Eval"),
        ("config.js", 2, "AWS Access Key"),
        ("config.js", 2, "Generic API Key"),
        ("config.js", 3, "Hardcoded Password"),
    ]

    summary = load_json(assert_file(out_dir / "summary.json"))
    assert summary["findings"] == 4
    assert summary["by_severity"] == {"CRITICAL": 1, "HIGH": 2, "MEDIUM": 1, "LOW": 0}
    assert summary["files_scanned"] == 2
    assert summary["cancelled"] is False
    assert_file(out_dir / "findings.md")


def test_repeated_runs_produce_identical_output(project_dir: Path):
    first = run_cli(["dir", project_dir, "--no-progress", "--no-color", "--workers", "1"])
    second = run_cli(["dir", project_dir, "--no-progress", "--no-color", "--workers", "16"])
    assert_exit_ok(first)
    assert_exit_ok(second)
    assert first.stdout == second.stdout


def test_txt_and_clean_php_report_no_findings(tmp_path: Path):
    (tmp_path / "readme.txt").write_text("password = 'supersecret'\n")
    (tmp_path / "index.php").write_text("<?php echo 'hello';\n")
    proc = run_cli(["dir", tmp_path, "--no-progress", "--no-color"])
    assert_exit_ok(proc)
    assert "No findings." in proc.stdout
    assert "Found:" not in proc.stdout


def test_missing_root_is_not_a_crash(tmp_path: Path):
    proc = run_cli(["dir", tmp_path / "does-not-exist", "--no-progress", "--no-color"])
    assert_exit_ok(proc)
    assert "No findings." in proc.stdout


def test_custom_extensions(project_dir: Path):
    proc = run_cli(["dir", project_dir, "--no-progress", "--no-color", "--ext", "txt"])
    assert_exit_ok(proc)
    assert "notes.txt:1" in proc.stdout
    assert "app.php" not in proc.stdout
