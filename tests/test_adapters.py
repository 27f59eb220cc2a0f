"""
Tests for adapters — local filesystem, subprocess runner and the in-memory doubles.
"""

import sys
from pathlib import Path

import pytest

from scaffoldkit.adapters import (
    FakeProcessRunner,
    LocalFileSystem,
    MemoryFileSystem,
    ProcessResult,
    SubprocessRunner,
)

# ── LocalFileSystem ─────────────────────────────────────────────────


class TestLocalFileSystem:
    def test_write_creates_parents(self, tmp_path: Path):
        fs = LocalFileSystem()
        target = tmp_path / "a" / "b" / "c.txt"
        fs.write_text(target, "hi")
        assert fs.is_file(target)
        assert fs.is_dir(target.parent)
        assert fs.read_text(target) == "hi"

    def test_line_endings_untouched(self, tmp_path: Path):
        fs = LocalFileSystem()
        target = tmp_path / "crlf.txt"
        fs.write_text(target, "a\r\nb\r\n")
        assert target.read_bytes() == b"a\r\nb\r\n"
        assert fs.read_text(target) == "a\r\nb\r\n"

    def test_latin1_fallback(self, tmp_path: Path):
        target = tmp_path / "legacy.properties"
        target.write_bytes("name=Caf\xe9\n".encode("latin-1"))
        assert LocalFileSystem().read_text(target) == "name=Café\n"

    def test_replace_atomic(self, tmp_path: Path):
        fs = LocalFileSystem()
        target = tmp_path / "A.java"
        target.write_text("old")
        fs.replace_atomic(target, "new")
        assert target.read_text() == "new"
        assert [p.name for p in tmp_path.iterdir()] == ["A.java"]

    def test_delete(self, tmp_path: Path):
        target = tmp_path / "gone.txt"
        target.write_text("x")
        LocalFileSystem().delete(target)
        assert not target.exists()

    def test_list_files_sorted_and_hidden_skipped(self, tmp_path: Path):
        for name in ("b.txt", "a/z.txt", "a.txt", ".git/config", "a/.hidden"):
            path = tmp_path / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text("x")
        files = LocalFileSystem().list_files(tmp_path)
        assert [p.relative_to(tmp_path).as_posix() for p in files] == ["a.txt", "a/z.txt", "b.txt"]

    def test_list_dirs(self, tmp_path: Path):
        for name in ("web", "api", ".cache"):
            (tmp_path / name).mkdir()
        (tmp_path / "file.txt").write_text("x")
        assert [p.name for p in LocalFileSystem().list_dirs(tmp_path)] == ["api", "web"]

    def test_missing_directory(self, tmp_path: Path):
        fs = LocalFileSystem()
        assert fs.list_files(tmp_path / "nope") == []
        assert fs.list_dirs(tmp_path / "nope") == []


# ── SubprocessRunner ────────────────────────────────────────────────


@pytest.mark.skipif(sys.platform == "win32", reason="needs a POSIX shell")
class TestSubprocessRunner:
    def test_captures_output(self, tmp_path: Path):
        result = SubprocessRunner().run("echo out; echo err >&2", cwd=tmp_path)
        assert result.ok
        assert result.stdout == "out\n"
        assert result.stderr == "err\n"

    def test_cwd(self, tmp_path: Path):
        result = SubprocessRunner().run("pwd", cwd=tmp_path)
        assert Path(result.stdout.strip()).resolve() == tmp_path.resolve()

    def test_exit_code(self, tmp_path: Path):
        result = SubprocessRunner().run("exit 4", cwd=tmp_path)
        assert result.exit_code == 4
        assert not result.ok

    def test_stdin(self, tmp_path: Path):
        result = SubprocessRunner().run("cat", cwd=tmp_path, stdin="piped")
        assert result.stdout == "piped"

    def test_no_stdin_does_not_block(self, tmp_path: Path):
        result = SubprocessRunner().run("cat", cwd=tmp_path, timeout=5)
        assert result.ok
        assert result.stdout == ""

    def test_redirects(self, tmp_path: Path):
        out, err = tmp_path / "logs" / "out.txt", tmp_path / "logs" / "err.txt"
        result = SubprocessRunner().run(
            "echo out; echo err >&2", cwd=tmp_path, stdout_to=out, stderr_to=err
        )
        assert result.stdout == ""
        assert out.read_text() == "out\n"
        assert err.read_text() == "err\n"

    def test_timeout(self, tmp_path: Path):
        result = SubprocessRunner().run("sleep 5", cwd=tmp_path, timeout=0.3)
        assert result.timed_out
        assert not result.ok


# ── MemoryFileSystem ────────────────────────────────────────────────


class TestMemoryFileSystem:
    def test_seeded_files_and_implicit_dirs(self):
        fs = MemoryFileSystem({"/p/src/A.java": "class A {}"})
        assert fs.is_file(Path("/p/src/A.java"))
        assert fs.is_dir(Path("/p/src"))
        assert fs.is_dir(Path("/p"))
        assert fs.write_count == 0

    def test_write_log(self):
        fs = MemoryFileSystem()
        fs.write_text(Path("/p/a.txt"), "a")
        fs.replace_atomic(Path("/p/a.txt"), "b")
        assert fs.write_log == [Path("/p/a.txt"), Path("/p/a.txt")]
        assert fs.read_text(Path("/p/a.txt")) == "b"

    def test_read_missing(self):
        with pytest.raises(FileNotFoundError):
            MemoryFileSystem().read_text(Path("/nope"))

    def test_delete(self):
        fs = MemoryFileSystem({"/p/a.txt": "a"})
        fs.delete(Path("/p/a.txt"))
        assert not fs.is_file(Path("/p/a.txt"))
        with pytest.raises(FileNotFoundError):
            fs.delete(Path("/p/a.txt"))

    def test_write_over_directory(self):
        fs = MemoryFileSystem()
        fs.mkdir(Path("/p/dir"))
        with pytest.raises(IsADirectoryError):
            fs.write_text(Path("/p/dir"), "x")

    def test_listing(self):
        fs = MemoryFileSystem(
            {
                "/c/hello/world/b.txt": "",
                "/c/hello/world/a/z.txt": "",
                "/c/hello/world/.hidden": "",
                "/c/bye/now/x.txt": "",
            }
        )
        files = fs.list_files(Path("/c/hello/world"))
        assert [p.name for p in files] == ["z.txt", "b.txt"]
        assert [p.name for p in fs.list_dirs(Path("/c"))] == ["bye", "hello"]


# ── FakeProcessRunner ───────────────────────────────────────────────


class TestFakeProcessRunner:
    def test_unmatched_succeeds(self, tmp_path: Path):
        result = FakeProcessRunner().run("anything", cwd=tmp_path)
        assert result == ProcessResult(command="anything")

    def test_exact_then_substring(self, tmp_path: Path):
        runner = FakeProcessRunner()
        runner.set_result("git", stdout="generic")
        runner.set_result("git status", stdout="exact")
        assert runner.run("git status", cwd=tmp_path).stdout == "exact"
        assert runner.run("git log", cwd=tmp_path).stdout == "generic"

    def test_result_carries_actual_command(self, tmp_path: Path):
        runner = FakeProcessRunner()
        runner.set_failure("mvn", exit_code=2)
        result = runner.run("mvn -q package", cwd=tmp_path)
        assert result.command == "mvn -q package"
        assert result.exit_code == 2

    def test_call_log(self, tmp_path: Path):
        runner = FakeProcessRunner()
        runner.run("ls", cwd=tmp_path, stdin="in", timeout=9)
        assert runner.call_count == 1
        assert runner.call_log[0]["stdin"] == "in"
        assert runner.call_log[0]["timeout"] == 9
        assert runner.commands == ["ls"]
