"""Tests for dirlist.cli: CLI entry point.

Tests here cover:
  - Exit codes (clean run, recovered errors, invalid options, closed output)
  - Option to config translation
  - Smoke tests that touch the full stack with a realistic tree
"""

from __future__ import annotations

import io
import os
from pathlib import Path

import pytest

from conftest import needs_symlinks
from dirlist.cli import build_config, build_parser, run_dlist
from dirlist.config import ColorMode, IconMode, Layout, SizeStyle, SortKey
from dirlist.style import BLUE_BOLD, RESET


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("LS_ICONS", raising=False)
    monkeypatch.delenv("NO_COLOR", raising=False)


def _run(argv: list[str]) -> tuple[int, str, str]:
    out, err = io.StringIO(), io.StringIO()
    status = run_dlist(argv, out, err)
    return status, out.getvalue(), err.getvalue()


class BrokenStdout(io.StringIO):
    def write(self, s: str) -> int:
        raise BrokenPipeError(32, "Broken pipe")


class TestRunDlist:
    # ------------------------------------------------------------------
    # Smoke / full-stack checks
    # ------------------------------------------------------------------
    def test_default_output(self, sample_tree: Path) -> None:
        status, out, err = _run([str(sample_tree)])
        assert status == 0
        assert out == "README.md\ndocs\nrun.sh\nsrc\n"
        assert err == ""

    def test_all_shows_dotfiles(self, sample_tree: Path) -> None:
        _, out, _ = _run(["-a", str(sample_tree)])
        assert out.splitlines()[0] == ".hidden"

    def test_commas(self, sample_tree: Path) -> None:
        _, out, _ = _run(["-m", str(sample_tree)])
        assert out == "README.md, docs, run.sh, src\n"

    def test_columns(self, sample_tree: Path) -> None:
        _, out, _ = _run(["-C", "--width", "80", str(sample_tree)])
        assert out == "README.md  docs       run.sh     src\n"

    def test_last_layout_flag_wins(self, sample_tree: Path) -> None:
        _, out, _ = _run(["-m", "-1", str(sample_tree)])
        assert out == "README.md\ndocs\nrun.sh\nsrc\n"

    def test_color_always(self, sample_tree: Path) -> None:
        _, out, _ = _run(["--color=always", "-F", str(sample_tree)])
        assert f"{BLUE_BOLD}docs{RESET}/" in out.splitlines()

    def test_long_numeric(self, sample_tree: Path) -> None:
        status, out, _ = _run(["-ln", "--time-style", "iso", str(sample_tree)])
        lines = out.splitlines()
        assert status == 0
        assert lines[0].startswith("total ")
        assert lines[-1].endswith(" src")
        assert str(os.getuid()) in lines[1].split()

    def test_multiple_directories_get_headers(self, sample_tree: Path) -> None:
        docs, src = str(sample_tree / "docs"), str(sample_tree / "src")
        _, out, _ = _run([docs, src])
        assert out == f"{docs}:\nguide.md\n\n{src}:\napi\nmain.py\n"

    def test_recursive(self, sample_tree: Path) -> None:
        _, out, _ = _run(["-R", str(sample_tree / "src")])
        src = sample_tree / "src"
        assert out == f"{src}:\napi\nmain.py\n\n{src}/api:\nauth.py\n"

    # ------------------------------------------------------------------
    # Error paths
    # ------------------------------------------------------------------
    def test_missing_path(self, tmp_path: Path) -> None:
        missing = tmp_path / "missing"
        status, out, err = _run([str(missing)])
        assert status == 1
        assert out == ""
        assert err == f"dlist: {missing}: No such file or directory\n"

    def test_partial_failure_still_lists_the_rest(self, sample_tree: Path) -> None:
        missing = sample_tree / "missing"
        status, out, err = _run([str(missing), str(sample_tree / "docs")])
        assert status == 1
        assert "guide.md" in out
        assert str(missing) in err

    @needs_symlinks
    def test_cycle_reported(self, tmp_path: Path) -> None:
        (tmp_path / "a").mkdir()
        os.symlink("..", tmp_path / "a" / "loop")
        status, _, err = _run(["-RL", str(tmp_path)])
        assert status == 1
        assert err == f"dlist: {tmp_path / 'a' / 'loop'}: not following symlink cycle\n"

    def test_invalid_width(self, sample_tree: Path) -> None:
        status, _, err = _run(["--width", "0", str(sample_tree)])
        assert status == 1
        assert err == "dlist: invalid line width: 0\n"

    def test_unknown_option_exits_2(self) -> None:
        with pytest.raises(SystemExit) as excinfo:
            _run(["--no-such-option"])
        assert excinfo.value.code == 2

    def test_closed_output_exits_silently(self, sample_tree: Path) -> None:
        err = io.StringIO()
        status = run_dlist([str(sample_tree)], BrokenStdout(), err)
        assert status == 1
        assert err.getvalue() == ""


class TestBuildConfig:
    def _config(self, argv: list[str], stdout: io.StringIO | None = None):
        args = build_parser().parse_args(argv)
        return build_config(args, stdout or io.StringIO())

    def test_defaults_for_a_pipe(self) -> None:
        config = self._config([])
        assert config.layout is Layout.ONE_PER_LINE
        assert config.color is ColorMode.NEVER
        assert config.icons is IconMode.NEVER
        assert config.sort_key is SortKey.NAME
        assert config.size_style is SizeStyle.BYTES

    def test_short_h_means_human_sizes(self) -> None:
        assert self._config(["-lh"]).size_style is SizeStyle.HUMAN

    def test_numeric_ids_imply_long_format(self) -> None:
        config = self._config(["-n"])
        assert config.long_format is True
        assert config.numeric_ids is True

    @pytest.mark.parametrize(
        ("argv", "expected"),
        [
            (["-t"], SortKey.TIME),
            (["-S"], SortKey.SIZE),
            (["-S", "-t"], SortKey.TIME),
        ],
    )
    def test_sort_keys(self, argv: list[str], expected: SortKey) -> None:
        assert self._config(argv).sort_key is expected

    def test_icons_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LS_ICONS", "always")
        assert self._config([]).icons is IconMode.ALWAYS
        assert self._config(["--icons", "never"]).icons is IconMode.NEVER

    def test_patterns_collected(self) -> None:
        config = self._config(["-I", "*.pyc", "--ignore", "dist", "--hide", "*~"])
        assert config.ignore_patterns == ("*.pyc", "dist")
        assert config.hide_patterns == ("*~",)

    def test_width_option(self) -> None:
        assert self._config(["-w", "120"]).terminal_width == 120
