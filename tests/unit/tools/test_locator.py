"""Unit tests for external tool discovery."""

from pathlib import Path

import pytest

from vshrink.tools.locator import (
    BinaryLocator,
    ToolNotFoundError,
    executable_name,
    locate_tools,
)


def _touch(directory: Path, name: str) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / name
    path.write_text("")
    return path


def _no_which(name: str) -> None:
    return None


@pytest.fixture
def dirs(tmp_path: Path) -> dict[str, Path]:
    layout = {
        "hint": tmp_path / "hint",
        "program": tmp_path / "program",
        "cwd": tmp_path / "cwd",
        "path": tmp_path / "path",
    }
    for directory in layout.values():
        directory.mkdir()
    return layout


def _locator(dirs: dict[str, Path], which=_no_which) -> BinaryLocator:
    return BinaryLocator(
        cwd=dirs["cwd"],
        program_dir=dirs["program"],
        which=which,
        system="Linux",
    )


class TestExecutableName:
    """Tests for executable_name()."""

    def test_unchanged_on_linux(self) -> None:
        assert executable_name("ffmpeg", "Linux") == "ffmpeg"

    def test_exe_suffix_on_windows(self) -> None:
        assert executable_name("ffmpeg", "Windows") == "ffmpeg.exe"

    def test_existing_suffix_not_doubled(self) -> None:
        assert executable_name("ffmpeg.EXE", "Windows") == "ffmpeg.EXE"


class TestBinaryLocator:
    """Tests for BinaryLocator.locate() search order."""

    def test_suggested_dir_wins(self, dirs: dict[str, Path]) -> None:
        """Suggested directory is searched before everything else."""
        expected = _touch(dirs["hint"], "ffmpeg")
        _touch(dirs["program"], "ffmpeg")
        _touch(dirs["cwd"], "ffmpeg")

        result = _locator(dirs).locate(str(dirs["hint"]), "ffmpeg")

        assert result == str(expected)

    def test_suggested_dir_beats_path(self, dirs: dict[str, Path]) -> None:
        expected = _touch(dirs["hint"], "ffmpeg")
        on_path = _touch(dirs["path"], "ffmpeg")

        locator = _locator(dirs, which=lambda name: str(on_path))
        assert locator.locate(str(dirs["hint"]), "ffmpeg") == str(expected)

    def test_trailing_separator_trimmed(self, dirs: dict[str, Path]) -> None:
        expected = _touch(dirs["hint"], "ffprobe")

        result = _locator(dirs).locate(str(dirs["hint"]) + "/", "ffprobe")

        assert result == str(expected)

    def test_relative_hint_resolved_against_cwd(self, dirs: dict[str, Path]) -> None:
        expected = _touch(dirs["cwd"] / "bin", "ffmpeg")

        result = _locator(dirs).locate("bin", "ffmpeg")

        assert Path(result) == expected.resolve()

    def test_program_dir_before_cwd(self, dirs: dict[str, Path]) -> None:
        expected = _touch(dirs["program"], "ffmpeg")
        _touch(dirs["cwd"], "ffmpeg")

        assert _locator(dirs).locate("", "ffmpeg") == str(expected)

    def test_cwd_before_path(self, dirs: dict[str, Path]) -> None:
        expected = _touch(dirs["cwd"], "ffmpeg")
        on_path = _touch(dirs["path"], "ffmpeg")

        locator = _locator(dirs, which=lambda name: str(on_path))
        assert locator.locate("", "ffmpeg") == str(expected)

    def test_falls_back_to_path(self, dirs: dict[str, Path]) -> None:
        on_path = _touch(dirs["path"], "ffmpeg")
        seen: list[str] = []

        def which(name: str) -> str:
            seen.append(name)
            return str(on_path)

        assert _locator(dirs, which=which).locate("", "ffmpeg") == str(on_path)
        assert seen == ["ffmpeg"]

    def test_missing_returns_empty_string(self, dirs: dict[str, Path]) -> None:
        assert _locator(dirs).locate(str(dirs["hint"]), "ffmpeg") == ""

    def test_missing_hint_dir_is_skipped(self, dirs: dict[str, Path]) -> None:
        expected = _touch(dirs["cwd"], "ffmpeg")

        result = _locator(dirs).locate(str(dirs["hint"] / "nope"), "ffmpeg")

        assert result == str(expected)

    def test_directory_with_tool_name_ignored(self, dirs: dict[str, Path]) -> None:
        (dirs["hint"] / "ffmpeg").mkdir()

        assert _locator(dirs).locate(str(dirs["hint"]), "ffmpeg") == ""

    def test_windows_suffix_applied(self, dirs: dict[str, Path]) -> None:
        expected = _touch(dirs["hint"], "ffmpeg.exe")
        locator = BinaryLocator(
            cwd=dirs["cwd"],
            program_dir=dirs["program"],
            which=_no_which,
            system="Windows",
        )

        assert locator.locate(str(dirs["hint"]), "ffmpeg") == str(expected)


class TestLocateTools:
    """Tests for locate_tools()."""

    def test_both_found(self, dirs: dict[str, Path]) -> None:
        ffmpeg = _touch(dirs["hint"], "ffmpeg")
        ffprobe = _touch(dirs["cwd"], "ffprobe")

        tools = locate_tools(str(dirs["hint"]), "", locator=_locator(dirs))

        assert tools.ffmpeg == ffmpeg
        assert tools.ffprobe == ffprobe

    def test_missing_ffmpeg_raises(self, dirs: dict[str, Path]) -> None:
        _touch(dirs["cwd"], "ffprobe")

        with pytest.raises(ToolNotFoundError) as exc_info:
            locate_tools(locator=_locator(dirs))

        assert exc_info.value.name == "ffmpeg"

    def test_missing_ffprobe_raises(self, dirs: dict[str, Path]) -> None:
        _touch(dirs["cwd"], "ffmpeg")

        with pytest.raises(ToolNotFoundError, match="ffprobe"):
            locate_tools(locator=_locator(dirs))
