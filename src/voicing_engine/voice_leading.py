"""Voice Leading — how far each string's voice moves between two voicings.

Each string is treated as one voice. All functions are pure and accept an
optional ``string_count``; when omitted, the longer of the two voicings is
used and missing strings count as muted.

Functions:
    compute_voice_leading      – per-string and total semitone distance
    voice_leading_distance     – total distance only
    find_smoothest_transition  – nearest candidate from a pool
    sort_by_voice_leading      – pool ordered by distance, smoothest first
    voice_directions           – up / down / same per shared string
    contrary_motion_ratio      – balance of opposing motion
    detect_parallels           – parallel unisons, fourths, fifths, octaves
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional, Sequence

from .models import Voicing, pitch_class


# Cost of a string that sounds in only one of the two voicings
STRING_CHANGE_PENALTY: int = 3

Direction = Literal["up", "down", "same"]
ParallelKind = Literal["unison", "fourth", "fifth", "octave"]

_PARALLEL_INTERVALS: dict[int, ParallelKind] = {5: "fourth", 7: "fifth"}


@dataclass(frozen=True)
class VoiceLeadingResult:
    total_distance: int
    per_string: list[Optional[int]]  # None where either voicing is muted
    common_strings: int


@dataclass(frozen=True)
class ParallelMotion:
    kind: ParallelKind
    lower_string: int
    upper_string: int


def _string_count(a: Voicing, b: Voicing, string_count: Optional[int]) -> int:
    if string_count is None:
        return max(a.string_count, b.string_count)
    return string_count


def compute_voice_leading(
    a: Voicing,
    b: Voicing,
    string_count: Optional[int] = None,
    string_change_penalty: int = STRING_CHANGE_PENALTY,
) -> VoiceLeadingResult:
    """Per-string semitone distance between two voicings.

    Strings sounding in both add ``|a - b|``; strings sounding in only one add
    *string_change_penalty*; strings muted in both add nothing. The result is
    symmetric in *a* and *b*.
    """
    per_string: list[Optional[int]] = []
    total = 0
    common = 0

    for string in range(_string_count(a, b, string_count)):
        a_semi = a.semitone_on(string)
        b_semi = b.semitone_on(string)

        if a_semi is not None and b_semi is not None:
            dist = abs(a_semi - b_semi)
            per_string.append(dist)
            total += dist
            common += 1
        else:
            per_string.append(None)
            if a_semi is not None or b_semi is not None:
                total += string_change_penalty

    return VoiceLeadingResult(total_distance=total, per_string=per_string, common_strings=common)


def voice_leading_distance(
    a: Voicing,
    b: Voicing,
    string_count: Optional[int] = None,
    string_change_penalty: int = STRING_CHANGE_PENALTY,
) -> int:
    return compute_voice_leading(a, b, string_count, string_change_penalty).total_distance


def find_smoothest_transition(
    from_voicing: Voicing,
    candidates: Sequence[Voicing],
    string_count: Optional[int] = None,
    string_change_penalty: int = STRING_CHANGE_PENALTY,
) -> Optional[Voicing]:
    """Candidate with the smallest distance from *from_voicing*.

    Ties go to the first candidate encountered, so a cost-sorted pool favours
    the more playable voicing. Returns ``None`` for an empty pool.
    """
    best: Optional[Voicing] = None
    best_dist = 0
    for candidate in candidates:
        dist = voice_leading_distance(from_voicing, candidate, string_count, string_change_penalty)
        if best is None or dist < best_dist:
            best, best_dist = candidate, dist
    return best


def sort_by_voice_leading(
    from_voicing: Voicing,
    candidates: Sequence[Voicing],
    string_count: Optional[int] = None,
    string_change_penalty: int = STRING_CHANGE_PENALTY,
) -> list[Voicing]:
    """New list of *candidates*, smoothest first (stable for equal distances)."""
    return sorted(
        candidates,
        key=lambda v: voice_leading_distance(from_voicing, v, string_count, string_change_penalty),
    )


def voice_directions(
    a: Voicing, b: Voicing, string_count: Optional[int] = None
) -> list[Optional[Direction]]:
    """Motion of each string's voice from *a* to *b*; ``None`` unless shared."""
    directions: list[Optional[Direction]] = []
    for string in range(_string_count(a, b, string_count)):
        a_semi = a.semitone_on(string)
        b_semi = b.semitone_on(string)
        if a_semi is None or b_semi is None:
            directions.append(None)
        elif b_semi > a_semi:
            directions.append("up")
        elif b_semi < a_semi:
            directions.append("down")
        else:
            directions.append("same")
    return directions


def contrary_motion_ratio(
    a: Voicing, b: Voicing, string_count: Optional[int] = None
) -> float:
    """``2 * min(ups, downs) / moving voices``; 0 with fewer than two moving."""
    directions = voice_directions(a, b, string_count)
    ups = directions.count("up")
    downs = directions.count("down")
    moving = ups + downs
    if moving < 2:
        return 0.0
    return 2 * min(ups, downs) / moving


def detect_parallels(
    a: Voicing, b: Voicing, string_count: Optional[int] = None
) -> list[ParallelMotion]:
    """Parallel perfect intervals between adjacent strings.

    A pair qualifies when both strings sound in both voicings, both voices
    move, and the mod-12 interval between them is unchanged. Fifths and
    fourths are reported directly; a mod-12 interval of 0 is a unison only
    when the two voices share the same pitch before and after. Octaves are
    found in a second pass: interval 0 mod 12, a nonzero raw interval before
    the move, and both voices moving in the same direction.
    """
    count = _string_count(a, b, string_count)
    found: list[ParallelMotion] = []
    moving_pairs: list[tuple[int, int, int, int, int]] = []

    for lower in range(count - 1):
        upper = lower + 1
        a_lo, a_hi = a.semitone_on(lower), a.semitone_on(upper)
        b_lo, b_hi = b.semitone_on(lower), b.semitone_on(upper)
        if None in (a_lo, a_hi, b_lo, b_hi):
            continue
        if a_lo == b_lo or a_hi == b_hi:
            continue
        moving_pairs.append((lower, a_lo, a_hi, b_lo, b_hi))

    for lower, a_lo, a_hi, b_lo, b_hi in moving_pairs:
        before = pitch_class(a_hi - a_lo)
        after = pitch_class(b_hi - b_lo)
        if before != after:
            continue
        if before in _PARALLEL_INTERVALS:
            found.append(ParallelMotion(_PARALLEL_INTERVALS[before], lower, lower + 1))
        elif before == 0 and a_hi == a_lo and b_hi == b_lo:
            found.append(ParallelMotion("unison", lower, lower + 1))

    for lower, a_lo, a_hi, b_lo, b_hi in moving_pairs:
        if pitch_class(a_hi - a_lo) != 0 or pitch_class(b_hi - b_lo) != 0:
            continue
        if a_hi == a_lo:
            continue
        if (b_lo > a_lo) == (b_hi > a_hi):
            found.append(ParallelMotion("octave", lower, lower + 1))

    return found
