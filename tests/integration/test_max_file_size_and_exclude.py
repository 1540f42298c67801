from pathlib import Path
from .conftest import run_cli, assert_exit_ok


def test_max_file_size_skips_large_file(project_dir: Path):
    large = project_dir / "bundle.js"
    with large.open("w") as f:
        f.write("exec(ShouldBeSkippedDueToSize)\n")
        f.write("// padding\n" * 20_000)

    proc = run_cli(["dir", project_dir, "--no-progress", "--no-color", "--max-file-size", "100000"])
    assert_exit_ok(proc)
    assert "ShouldBeSkippedDueToSize" not in proc.stdout
    assert "Dangerous Eval" in proc.stdout


def test_exclude_dirs(project_dir: Path):
    proc = run_cli(["dir", project_dir, "--no-progress", "--no-color", "--exclude", "lib"])
    assert_exit_ok(proc)
    assert "config.js" not in proc.stdout
    assert "app.php" in proc.stdout
