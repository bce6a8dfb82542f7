"""Candidate Map Builder — per-string fret options that sound a chord tone.

For every string the map lists:
    - the muted sentinel (always first)
    - every fret in ``[min_fret, max_fret]`` whose pitch class is in the
      target set, ascending, where ``min_fret`` is 0 when open strings are
      allowed and 1 otherwise

All computations are deterministic and side-effect free.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from .models import Candidate, pitch_class


CandidateMap = list[list[Candidate]]


def normalize_pitch_classes(pitch_classes: Iterable[int]) -> frozenset[int]:
    """Reduce every value modulo 12 (so ``-1`` → 11, ``12`` → 0)."""
    return frozenset(pitch_class(pc) for pc in pitch_classes)


def validate_search_inputs(tuning: Sequence[int], max_fret: int) -> None:
    """Reject inputs that make a fretboard search meaningless.

    Raises:
        ValueError: If *tuning* is empty or *max_fret* is negative.
    """
    if len(tuning) == 0:
        raise ValueError("Tuning must contain at least one string")
    if max_fret < 0:
        raise ValueError(f"max_fret must be non-negative, got {max_fret}")


def build_candidate_map(
    pitch_classes: Iterable[int],
    tuning: Sequence[int],
    max_fret: int,
    allow_open: bool = True,
) -> CandidateMap:
    """Enumerate every chord-tone position on every string.

    Args:
        pitch_classes: Target pitch classes (any integers, reduced mod 12).
        tuning: Absolute open-string semitones, lowest string first.
        max_fret: Highest fret considered (inclusive).
        allow_open: Whether fret 0 may be used.

    Returns:
        One candidate list per string, muted sentinel first.

    Raises:
        ValueError: If *tuning* is empty or *max_fret* is negative.
    """
    validate_search_inputs(tuning, max_fret)

    targets = normalize_pitch_classes(pitch_classes)
    start_fret = 0 if allow_open else 1

    candidate_map: CandidateMap = []
    for string, open_note in enumerate(tuning):
        options = [Candidate(string=string)]  # muted
        for fret in range(start_fret, max_fret + 1):
            semitones = open_note + fret
            if pitch_class(semitones) in targets:
                options.append(Candidate(string=string, fret=fret, semitones=semitones))
        candidate_map.append(options)

    return candidate_map


def suppliable_suffixes(candidate_map: CandidateMap) -> list[frozenset[int]]:
    """Pitch classes reachable from each string onward.

    ``result[s]`` is the union of pitch classes offered by strings ``s..N-1``;
    ``result[N]`` is empty. Used by the search's completeness look-ahead.
    """
    suffixes: list[frozenset[int]] = [frozenset()] * (len(candidate_map) + 1)
    for string in range(len(candidate_map) - 1, -1, -1):
        offered = {c.pitch_class for c in candidate_map[string] if c.pitch_class is not None}
        suffixes[string] = suffixes[string + 1] | offered
    return suffixes
