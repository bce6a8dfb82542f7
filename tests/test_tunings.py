"""Tests for tuning lookup and note-name conversion."""

from __future__ import annotations

import pytest

from src.voicing_engine.tunings import get_tuning, load_tunings, note_to_semitones, resolve_tuning


class TestNoteToSemitones:

    @pytest.mark.parametrize(
        "name, expected",
        [("E2", 28), ("A2", 33), ("C0", 0), ("G#2", 32), ("Bb1", 22), ("e4", 52), (" D3 ", 38)],
    )
    def test_known_notes(self, name, expected):
        assert note_to_semitones(name) == expected

    @pytest.mark.parametrize("name", ["", "H2", "E", "2E", "E#x3"])
    def test_invalid_names(self, name):
        with pytest.raises(ValueError):
            note_to_semitones(name)


class TestTuningTable:

    def test_standard_guitar(self, standard_tuning):
        assert get_tuning("guitar", "standard") == standard_tuning

    def test_all_instruments_load(self):
        tunings = load_tunings()
        assert set(tunings) == {"guitar", "banjo", "mandolin"}
        assert tunings["mandolin"]["standard"] == [43, 50, 57, 64]
        assert tunings["guitar"]["dropped_d"][0] == 26

    def test_unknown_instrument(self):
        with pytest.raises(KeyError):
            get_tuning("theorbo")

    def test_unknown_tuning(self):
        with pytest.raises(KeyError):
            get_tuning("guitar", "nashville")

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_tunings(tmp_path / "tunings.yaml")

    def test_custom_file(self, tmp_path):
        path = tmp_path / "tunings.yaml"
        path.write_text("ukulele:\n  standard: [G4, C4, E4, A4]\n", encoding="utf-8")
        assert get_tuning("ukulele", tunings_path=path) == [55, 48, 52, 57]


class TestResolveTuning:

    def test_named(self, standard_tuning):
        assert resolve_tuning("guitar/standard") == standard_tuning
        assert resolve_tuning("guitar") == standard_tuning

    def test_note_names_and_semitones(self, standard_tuning):
        assert resolve_tuning(["E2", "A2", "D3", "G3", "B3", "E4"]) == standard_tuning
        assert resolve_tuning(standard_tuning) == standard_tuning
        assert resolve_tuning(["D2", 33]) == [26, 33]

    def test_empty(self):
        with pytest.raises(ValueError):
            resolve_tuning([])

    def test_bad_entry(self):
        with pytest.raises(ValueError):
            resolve_tuning([28, 3.5])
