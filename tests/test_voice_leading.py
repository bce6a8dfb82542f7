"""Tests for voice-leading distance and motion analysis."""

from __future__ import annotations

from conftest import make_voicing

from src.voicing_engine.voice_leading import (
    ParallelMotion,
    compute_voice_leading,
    contrary_motion_ratio,
    detect_parallels,
    find_smoothest_transition,
    sort_by_voice_leading,
    voice_directions,
    voice_leading_distance,
)


class TestComputeVoiceLeading:

    def test_same_voicing_is_zero(self):
        seq = make_voicing([(0, 40, 0), (1, 45, 0), (2, 50, 0)])
        result = compute_voice_leading(seq, seq, 6)
        assert result.total_distance == 0
        assert result.common_strings == 3

    def test_one_fret_shift(self):
        a = make_voicing([(0, 40, 0), (1, 45, 0), (2, 50, 0)])
        b = make_voicing([(0, 41, 1), (1, 46, 1), (2, 51, 1)])
        assert compute_voice_leading(a, b, 6).total_distance == 3

    def test_added_and_removed_strings(self):
        a = make_voicing([(0, 40, 0), (1, 45, 0)])
        b = make_voicing([(0, 40, 0), (2, 50, 0)])
        result = compute_voice_leading(a, b, 6)
        assert result.per_string[:3] == [0, None, None]
        assert result.common_strings == 1
        assert result.total_distance == 6

    def test_custom_penalty(self):
        a = make_voicing([(0, 40, 0)])
        b = make_voicing([(1, 45, 0)])
        assert voice_leading_distance(a, b, 6, string_change_penalty=5) == 10

    def test_per_string_distances(self):
        a = make_voicing([(0, 40, 0), (1, 45, 0), (2, 50, 0)])
        b = make_voicing([(0, 42, 2), (1, 45, 0), (2, 53, 3)])
        assert compute_voice_leading(a, b, 6).per_string[:3] == [2, 0, 3]

    def test_symmetric(self):
        a = make_voicing([(0, 40, 0), (1, 48, 3), (3, 55, 0)])
        b = make_voicing([(1, 45, 0), (2, 52, 2), (3, 59, 4), (5, 64, 0)])
        assert voice_leading_distance(a, b) == voice_leading_distance(b, a)

    def test_string_count_defaults_to_longest(self):
        a = make_voicing([(0, 40, 0)], string_count=4)
        b = make_voicing([(0, 40, 0), (5, 64, 0)], string_count=6)
        assert voice_leading_distance(a, b) == 3


class TestSmoothestTransition:

    def test_empty_pool(self):
        assert find_smoothest_transition(make_voicing([(0, 40, 0)]), [], 6) is None

    def test_picks_closest(self):
        start = make_voicing([(0, 40, 0), (1, 45, 0)])
        close = make_voicing([(0, 41, 1), (1, 46, 1)])
        far = make_voicing([(0, 45, 5), (1, 50, 5)])
        assert find_smoothest_transition(start, [far, close], 6) is close

    def test_ties_go_to_first(self):
        start = make_voicing([(0, 40, 0)])
        up = make_voicing([(0, 41, 1)])
        down = make_voicing([(0, 39, 0)])
        assert find_smoothest_transition(start, [up, down], 6) is up
        assert find_smoothest_transition(start, [down, up], 6) is down

    def test_sort_by_voice_leading(self):
        start = make_voicing([(0, 40, 0), (1, 45, 0)])
        a = make_voicing([(0, 41, 1), (1, 46, 1)])
        b = make_voicing([(0, 43, 3), (1, 48, 3)])
        c = make_voicing([(0, 42, 2), (1, 47, 2)])
        pool = [b, a, c]
        ordered = sort_by_voice_leading(start, pool, 6)
        assert ordered == [a, c, b]
        assert pool == [b, a, c]


class TestMotion:

    def test_directions(self):
        start = make_voicing([(0, 40, 0), (1, 45, 0), (2, 50, 0)])
        end = make_voicing([(0, 42, 2), (1, 44, 0), (2, 50, 0), (3, 55, 0)])
        assert voice_directions(start, end, 5) == ["up", "down", "same", None, None]

    def test_parallel_motion_has_no_contrary(self):
        start = make_voicing([(0, 40, 0), (1, 45, 0)])
        end = make_voicing([(0, 42, 2), (1, 47, 2)])
        assert contrary_motion_ratio(start, end, 3) == 0

    def test_opposite_motion_is_fully_contrary(self):
        start = make_voicing([(0, 40, 0), (1, 45, 0)])
        end = make_voicing([(0, 42, 2), (1, 43, 0)])
        assert contrary_motion_ratio(start, end, 3) == 1

    def test_partial_contrary(self):
        start = make_voicing([(0, 40, 0), (1, 45, 0), (2, 50, 0), (3, 55, 0)])
        end = make_voicing([(0, 41, 1), (1, 46, 1), (2, 51, 1), (3, 54, 0)])
        assert contrary_motion_ratio(start, end) == 0.5

    def test_fewer_than_two_moving(self):
        start = make_voicing([(0, 40, 0), (1, 45, 0)])
        end = make_voicing([(0, 40, 0), (1, 47, 2)])
        assert contrary_motion_ratio(start, end, 2) == 0


class TestParallels:

    def test_parallel_fifths(self):
        start = make_voicing([(0, 40, 0), (1, 47, 7)])
        end = make_voicing([(0, 47, 7), (1, 54, 14)])
        assert detect_parallels(start, end, 3) == [ParallelMotion("fifth", 0, 1)]

    def test_parallel_fourths(self):
        start = make_voicing([(0, 40, 0), (1, 45, 0)])
        end = make_voicing([(0, 42, 2), (1, 47, 2)])
        assert detect_parallels(start, end) == [ParallelMotion("fourth", 0, 1)]

    def test_static_voicing_has_none(self):
        seq = make_voicing([(0, 40, 0), (1, 47, 7)])
        assert detect_parallels(seq, seq, 3) == []

    def test_contrary_motion_has_none(self):
        start = make_voicing([(0, 40, 0), (1, 47, 7)])
        end = make_voicing([(0, 47, 7), (1, 40, 0)])
        assert detect_parallels(start, end, 3) == []

    def test_one_voice_static_is_not_parallel(self):
        start = make_voicing([(0, 40, 0), (1, 47, 7)])
        end = make_voicing([(0, 40, 0), (1, 59, 19)])
        assert detect_parallels(start, end) == []

    def test_parallel_octaves(self):
        start = make_voicing([(0, 40, 0), (1, 52, 7)])
        end = make_voicing([(0, 42, 2), (1, 54, 9)])
        assert detect_parallels(start, end) == [ParallelMotion("octave", 0, 1)]

    def test_parallel_unison_not_counted_as_octave(self):
        start = make_voicing([(0, 45, 5), (1, 45, 0)])
        end = make_voicing([(0, 47, 7), (1, 47, 2)])
        assert detect_parallels(start, end) == [ParallelMotion("unison", 0, 1)]

    def test_only_adjacent_shared_strings(self):
        start = make_voicing([(0, 40, 0), (2, 47, 2)])
        end = make_voicing([(0, 42, 2), (2, 49, 4)])
        assert detect_parallels(start, end) == []
