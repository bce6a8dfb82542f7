"""Data model shared by the voicing engine.

All records are frozen dataclasses: a voicing is built once at a search leaf
and afterwards only read by the scorer, the voice-leading analyzer and the
progression optimizer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence


PITCH_CLASSES: int = 12


def pitch_class(value: int) -> int:
    """Reduce any semitone value to its pitch class (0–11)."""
    return value % PITCH_CLASSES


@dataclass(frozen=True)
class Candidate:
    """One option for a single string: muted (``fret is None``), open or fretted."""

    string: int
    fret: Optional[int] = None
    semitones: Optional[int] = None

    @property
    def is_muted(self) -> bool:
        return self.fret is None

    @property
    def is_fretted(self) -> bool:
        return self.fret is not None and self.fret > 0

    @property
    def pitch_class(self) -> Optional[int]:
        if self.semitones is None:
            return None
        return pitch_class(self.semitones)


@dataclass(frozen=True)
class Barre:
    """One finger pressing ``fret`` on every string in ``[from_string, to_string]``."""

    fret: int
    from_string: int
    to_string: int

    def covers(self, string: int, fret: Optional[int]) -> bool:
        return fret == self.fret and self.from_string <= string <= self.to_string


@dataclass(frozen=True)
class ErgonomicBreakdown:
    """Itemised playability cost of a voicing. Lower ``total_cost`` = easier."""

    fret_span: float
    finger_count: float
    stretch_evenness: float
    string_contiguity: float
    open_string_bonus: float
    bass_correctness: float
    position_weight: float
    total_cost: float

    def as_dict(self) -> dict[str, float]:
        return {
            "fret_span": self.fret_span,
            "finger_count": self.finger_count,
            "stretch_evenness": self.stretch_evenness,
            "string_contiguity": self.string_contiguity,
            "open_string_bonus": self.open_string_bonus,
            "bass_correctness": self.bass_correctness,
            "position_weight": self.position_weight,
            "total_cost": self.total_cost,
        }


@dataclass(frozen=True)
class Voicing:
    """A complete assignment: one fret (or ``None`` = muted) per string.

    ``semitones`` holds the absolute pitch sounded on each string, aligned with
    ``frets``. ``breakdown`` is attached by the search and does not take part
    in equality or hashing.
    """

    frets: tuple[Optional[int], ...]
    semitones: tuple[Optional[int], ...]
    breakdown: Optional[ErgonomicBreakdown] = field(
        default=None, compare=False, repr=False
    )

    def __post_init__(self) -> None:
        if len(self.frets) != len(self.semitones):
            raise ValueError(
                f"frets and semitones differ in length: "
                f"{len(self.frets)} != {len(self.semitones)}"
            )

    # ── Constructors ──────────────────────────────────────────

    @classmethod
    def from_candidates(
        cls,
        candidates: Iterable[Candidate],
        breakdown: Optional[ErgonomicBreakdown] = None,
    ) -> "Voicing":
        ordered = sorted(candidates, key=lambda c: c.string)
        return cls(
            frets=tuple(c.fret for c in ordered),
            semitones=tuple(c.semitones for c in ordered),
            breakdown=breakdown,
        )

    @classmethod
    def from_frets(
        cls, frets: Sequence[Optional[int]], tuning: Sequence[int]
    ) -> "Voicing":
        """Build a voicing from a fret list such as ``[None, 3, 2, 0, 1, 0]``."""
        if len(frets) != len(tuning):
            raise ValueError(
                f"Expected {len(tuning)} frets for this tuning, got {len(frets)}"
            )
        return cls(
            frets=tuple(frets),
            semitones=tuple(
                None if fret is None else open_note + fret
                for fret, open_note in zip(frets, tuning)
            ),
        )

    def with_breakdown(self, breakdown: ErgonomicBreakdown) -> "Voicing":
        return Voicing(self.frets, self.semitones, breakdown)

    # ── Derived views ─────────────────────────────────────────

    @property
    def string_count(self) -> int:
        return len(self.frets)

    @property
    def total_cost(self) -> Optional[float]:
        return None if self.breakdown is None else self.breakdown.total_cost

    @property
    def sounded_strings(self) -> list[int]:
        return [s for s, fret in enumerate(self.frets) if fret is not None]

    @property
    def fretted_strings(self) -> list[int]:
        return [s for s, fret in enumerate(self.frets) if fret is not None and fret > 0]

    @property
    def open_strings(self) -> list[int]:
        return [s for s, fret in enumerate(self.frets) if fret == 0]

    @property
    def sounded_count(self) -> int:
        return len(self.sounded_strings)

    @property
    def pitch_classes(self) -> set[int]:
        return {pitch_class(semi) for semi in self.semitones if semi is not None}

    @property
    def bass_string(self) -> Optional[int]:
        sounded = self.sounded_strings
        return sounded[0] if sounded else None

    @property
    def min_fretted(self) -> Optional[int]:
        frets = [self.frets[s] for s in self.fretted_strings]
        return min(frets) if frets else None

    def semitone_on(self, string: int) -> Optional[int]:
        """Absolute pitch on *string*, ``None`` if muted or out of range."""
        if 0 <= string < len(self.semitones):
            return self.semitones[string]
        return None

    def sort_key(self) -> tuple[int, ...]:
        """Fret tuple with muted strings as ``-1``, for deterministic tie-breaks."""
        return tuple(-1 if fret is None else fret for fret in self.frets)

    def is_subset_of(self, other: "Voicing") -> bool:
        """True if every sounded string here has the identical fret in *other*
        and *other* sounds strictly more strings."""
        if self.sounded_count >= other.sounded_count:
            return False
        for string in self.sounded_strings:
            if string >= other.string_count or other.frets[string] != self.frets[string]:
                return False
        return True
