"""Tests for dirlist.vcs: porcelain parsing and status lookup."""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

import pytest

from dirlist import vcs
from dirlist.vcs import GitStatus, GitStatusProvider, NullStatusProvider, iter_porcelain_records, parse_status_code


class TestParseStatusCode:
    @pytest.mark.parametrize(
        ("code", "expected"),
        [
            ("??", GitStatus.UNTRACKED),
            ("!!", GitStatus.IGNORED),
            (" M", GitStatus.MODIFIED),
            ("M ", GitStatus.MODIFIED),
            ("A ", GitStatus.ADDED),
            (" D", GitStatus.DELETED),
            ("D ", GitStatus.DELETED),
            ("R ", GitStatus.RENAMED),
            ("C ", GitStatus.COPIED),
            ("UU", GitStatus.UPDATED),
            # worktree column wins over the index column
            ("AM", GitStatus.MODIFIED),
            ("RD", GitStatus.DELETED),
            ("  ", GitStatus.CLEAN),
            ("X", GitStatus.CLEAN),
        ],
    )
    def test_mapping(self, code: str, expected: GitStatus) -> None:
        assert parse_status_code(code) is expected


class TestIterPorcelainRecords:
    def test_plain_records(self) -> None:
        output = " M src/app.py\0?? new.txt\0!! build/\0"
        assert iter_porcelain_records(output) == [
            (" M", "src/app.py"),
            ("??", "new.txt"),
            ("!!", "build/"),
        ]

    def test_rename_skips_source_token(self) -> None:
        output = "R  new_name.py\0old_name.py\0 M other.py\0"
        assert iter_porcelain_records(output) == [("R ", "new_name.py"), (" M", "other.py")]

    def test_empty_output(self) -> None:
        assert iter_porcelain_records("") == []

    def test_paths_with_spaces(self) -> None:
        assert iter_porcelain_records("?? my file.txt\0") == [("??", "my file.txt")]


def _fake_git(output: str):
    def run(cwd: Path, args: list[str]) -> subprocess.CompletedProcess[str]:
        return subprocess.CompletedProcess(["git", *args], 0, stdout=output, stderr="")

    return run


class TestGitStatusProvider:
    @pytest.fixture
    def provider(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> GitStatusProvider:
        monkeypatch.setattr(
            vcs,
            "_run_git",
            _fake_git(" M src/app.py\0?? notes.txt\0?? scratch/\0!! build/\0A  added.py\0"),
        )
        return GitStatusProvider(tmp_path.resolve())

    @pytest.mark.parametrize(
        ("rel", "expected"),
        [
            ("src/app.py", GitStatus.MODIFIED),
            ("notes.txt", GitStatus.UNTRACKED),
            ("added.py", GitStatus.ADDED),
            ("build", GitStatus.IGNORED),
            ("build/out/lib.so", GitStatus.IGNORED),
            ("scratch/deep/file", GitStatus.UNTRACKED),
            ("src/clean.py", GitStatus.CLEAN),
            (".git", GitStatus.NOT_TRACKED),
            (".git/config", GitStatus.NOT_TRACKED),
        ],
    )
    def test_relative_lookup(self, provider: GitStatusProvider, rel: str, expected: GitStatus) -> None:
        assert provider.status_for(Path(rel)) is expected

    def test_absolute_lookup(self, provider: GitStatusProvider, tmp_path: Path) -> None:
        assert provider.status_for(tmp_path / "src" / "app.py") is GitStatus.MODIFIED

    def test_outside_repository(self, provider: GitStatusProvider, tmp_path: Path) -> None:
        assert provider.status_for(tmp_path.parent / "elsewhere.txt") is GitStatus.NOT_TRACKED

    def test_git_runs_once(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        calls: list[list[str]] = []

        def run(cwd: Path, args: list[str]) -> subprocess.CompletedProcess[str]:
            calls.append(args)
            return subprocess.CompletedProcess(["git", *args], 0, stdout="", stderr="")

        monkeypatch.setattr(vcs, "_run_git", run)
        provider = GitStatusProvider(tmp_path.resolve())
        provider.status_for(Path("a"))
        provider.status_for(Path("b"))
        assert len(calls) == 1

    def test_failed_git_means_clean(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(vcs, "_run_git", lambda cwd, args: None)
        assert GitStatusProvider(tmp_path.resolve()).status_for(Path("a")) is GitStatus.CLEAN


class TestDiscover:
    def test_outside_repository_is_null(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(vcs, "_run_git", lambda cwd, args: None)
        assert isinstance(GitStatusProvider.discover(tmp_path), NullStatusProvider)

    def test_null_provider(self, tmp_path: Path) -> None:
        assert NullStatusProvider().status_for(tmp_path) is GitStatus.NOT_TRACKED

    @pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")
    def test_real_repository(self, tmp_path: Path) -> None:
        subprocess.run(["git", "init", "-q", str(tmp_path)], check=True)
        (tmp_path / "new.txt").write_text("x")
        provider = GitStatusProvider.discover(tmp_path)
        assert isinstance(provider, GitStatusProvider)
        assert provider.status_for(tmp_path / "new.txt") is GitStatus.UNTRACKED
