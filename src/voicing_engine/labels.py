"""Human-readable labels for voicings (tab shorthand, shape, difficulty)."""

from __future__ import annotations

from typing import Literal

from .cost_model import detect_barre
from .models import Voicing


DifficultyTier = Literal["easy", "medium", "hard"]
StringStatus = Literal["muted", "open", "fretted"]

_EASY_BELOW: float = 1.5
_MEDIUM_BELOW: float = 3.0


def tab_shorthand(voicing: Voicing) -> str:
    """Tab-style shorthand, lowest string first, e.g. ``"x32010"``.

    Frets of 10 and above are parenthesised (``"(10)"``) to stay unambiguous.
    """
    parts = []
    for fret in voicing.frets:
        if fret is None:
            parts.append("x")
        elif fret >= 10:
            parts.append(f"({fret})")
        else:
            parts.append(str(fret))
    return "".join(parts)


def _ordinal(n: int) -> str:
    if 10 <= n % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


def shape_type(voicing: Voicing) -> str:
    """``"Barre"``, ``"Open"`` or the position, e.g. ``"5th pos"``."""
    if detect_barre(voicing) is not None:
        return "Barre"
    if voicing.open_strings:
        return "Open"
    lowest = voicing.min_fretted
    return f"{_ordinal(lowest if lowest is not None else 0)} pos"


def string_statuses(voicing: Voicing) -> list[StringStatus]:
    statuses: list[StringStatus] = []
    for fret in voicing.frets:
        if fret is None:
            statuses.append("muted")
        elif fret == 0:
            statuses.append("open")
        else:
            statuses.append("fretted")
    return statuses


def difficulty_tier(total_cost: float) -> DifficultyTier:
    if total_cost < _EASY_BELOW:
        return "easy"
    if total_cost < _MEDIUM_BELOW:
        return "medium"
    return "hard"


def inversion_label(inversion: int) -> str:
    if inversion == 0:
        return "Root"
    return f"{_ordinal(inversion)} inv"
