"""Tests for voicing labels."""

from __future__ import annotations

import pytest

from src.voicing_engine.labels import (
    difficulty_tier,
    inversion_label,
    shape_type,
    string_statuses,
    tab_shorthand,
)
from src.voicing_engine.models import Voicing


class TestTabShorthand:

    def test_open_c(self, standard_tuning):
        assert tab_shorthand(Voicing.from_frets([None, 3, 2, 0, 1, 0], standard_tuning)) == "x32010"

    def test_high_frets_parenthesised(self, standard_tuning):
        voicing = Voicing.from_frets([None, 10, 12, 12, 11, None], standard_tuning)
        assert tab_shorthand(voicing) == "x(10)(12)(12)(11)x"


class TestShapeType:

    def test_barre(self, standard_tuning):
        assert shape_type(Voicing.from_frets([1, 3, 3, 2, 1, 1], standard_tuning)) == "Barre"

    def test_open(self, standard_tuning):
        assert shape_type(Voicing.from_frets([None, 3, 2, 0, 1, 0], standard_tuning)) == "Open"

    @pytest.mark.parametrize(
        "frets, expected",
        [
            ([None, None, 5, 7, 6, 8], "5th pos"),
            ([None, None, 1, 3, 2, 4], "1st pos"),
            ([None, None, 2, 4, 3, 5], "2nd pos"),
            ([None, None, 3, 5, 4, 6], "3rd pos"),
            ([None, None, 11, 13, 12, 14], "11th pos"),
        ],
    )
    def test_position(self, standard_tuning, frets, expected):
        assert shape_type(Voicing.from_frets(frets, standard_tuning)) == expected


class TestMisc:

    def test_string_statuses(self, standard_tuning):
        voicing = Voicing.from_frets([None, 3, 2, 0, 1, 0], standard_tuning)
        assert string_statuses(voicing) == ["muted", "fretted", "fretted", "open", "fretted", "open"]

    @pytest.mark.parametrize(
        "cost, tier", [(-0.2, "easy"), (1.49, "easy"), (1.5, "medium"), (2.99, "medium"), (3.0, "hard")]
    )
    def test_difficulty_tier(self, cost, tier):
        assert difficulty_tier(cost) == tier

    @pytest.mark.parametrize(
        "inversion, label", [(0, "Root"), (1, "1st inv"), (2, "2nd inv"), (3, "3rd inv"), (4, "4th inv")]
    )
    def test_inversion_label(self, inversion, label):
        assert inversion_label(inversion) == label
