"""CLI tests using click's CliRunner; external tools only run in --dry-run mode."""

import pytest
from click.testing import CliRunner

from abcmode.cli import main

from conftest import TWO_SONGS


@pytest.fixture
def tunes(tmp_path):
    path = tmp_path / "tunes.abc"
    path.write_text(TWO_SONGS, encoding="utf-8")
    return path


def _invoke(tmp_path, *args: str):
    runner = CliRunner()
    return runner.invoke(main, ["--config", str(tmp_path / "none.yaml"), *args])


def test_titles(tmp_path, tunes) -> None:
    result = _invoke(tmp_path, "titles", str(tunes))
    assert result.exit_code == 0
    assert "     2  First" in result.output
    assert "     6  Second" in result.output


def test_renumber_prints_result(tmp_path, tunes) -> None:
    result = _invoke(tmp_path, "renumber", str(tunes))
    assert result.exit_code == 0
    assert result.output == "X:1\nT:First\nabc|\n\nX:2\nT:Second\ndef|\n"
    assert tunes.read_text(encoding="utf-8") == TWO_SONGS


def test_renumber_in_place(tmp_path, tunes) -> None:
    result = _invoke(tmp_path, "renumber", "-i", str(tunes))
    assert result.exit_code == 0
    assert tunes.read_text(encoding="utf-8").startswith("X:1\n")


def test_extract_chords(tmp_path) -> None:
    path = tmp_path / "t.abc"
    path.write_text('X:1\nK:G\n"G"GAB|', encoding="utf-8")
    result = _invoke(tmp_path, "extract-chords", str(path))
    assert result.output == 'X:1\nK:G\n"G"xxx|'


def test_align_bars(tmp_path) -> None:
    path = tmp_path / "t.abc"
    path.write_text("ab|c\nd|e", encoding="utf-8")
    result = _invoke(tmp_path, "align-bars", str(path))
    assert result.output == "ab | c\nd  | e"


def test_classify_spans(tmp_path, tunes) -> None:
    result = _invoke(tmp_path, "classify", "--spans", str(tunes))
    assert result.exit_code == 0
    assert "2:0-7  title-field" in result.output


def test_classify_highlight_keeps_text(tmp_path, tunes) -> None:
    result = _invoke(tmp_path, "classify", str(tunes))
    assert result.exit_code == 0
    assert "T:Second" in result.output


def test_render_dry_run(tmp_path, tunes) -> None:
    result = _invoke(tmp_path, "render", "--format", "pretty", "--dry-run", str(tunes))
    assert result.exit_code == 0
    assert f"abcm2ps -p {tunes}" in result.output


def test_render_single_song_dry_run(tmp_path, tunes) -> None:
    result = _invoke(tmp_path, "render", "--song", "5", "--dry-run", str(tunes))
    assert result.exit_code == 0
    assert f"abcm2ps -e 5 {tunes}" in result.output


def test_render_missing_song(tmp_path, tunes) -> None:
    result = _invoke(tmp_path, "render", "--song", "9", "--dry-run", str(tunes))
    assert result.exit_code == 1


def test_render_unknown_format(tmp_path, tunes) -> None:
    result = _invoke(tmp_path, "render", "--format", "poster", "--dry-run", str(tunes))
    assert result.exit_code == 1


def test_midi_dry_run(tmp_path, tunes) -> None:
    result = _invoke(tmp_path, "midi", "--song", "2", "--dry-run", str(tunes))
    assert result.exit_code == 0
    assert f"abc2midi {tunes} 2" in result.output


def test_transform_dry_run(tmp_path, tunes) -> None:
    result = _invoke(tmp_path, "transform", "--dry-run", str(tunes), "-t", "2")
    assert result.exit_code == 0
    assert f"abc2abc {tunes} -t 2" in result.output


def test_instruments(tmp_path) -> None:
    result = _invoke(tmp_path, "instruments", "violin")
    assert result.output.strip() == "%%MIDI program 40"
    assert _invoke(tmp_path, "instruments", "theremin").exit_code == 1
    listing = _invoke(tmp_path, "instruments")
    assert "  0  acoustic grand piano" in listing.output
    assert "  0  piano\n" not in listing.output
    with_aliases = _invoke(tmp_path, "instruments", "--aliases")
    assert "  0  piano\n" in with_aliases.output


def test_song(tmp_path, tunes) -> None:
    result = _invoke(tmp_path, "song", str(tunes), "5")
    assert result.exit_code == 0
    assert result.output == "X:5\nT:Second\ndef|\n"
    assert _invoke(tmp_path, "song", str(tunes), "3").exit_code == 1


def test_fields_reflect_config(tmp_path) -> None:
    config = tmp_path / "abcmode.yaml"
    config.write_text('tags:\n  title: "T: "\n', encoding="utf-8")
    result = CliRunner().invoke(main, ["--config", str(config), "fields"])
    assert result.exit_code == 0
    assert "title             T: \n" in result.output
    assert "reference         X:\n" in result.output
