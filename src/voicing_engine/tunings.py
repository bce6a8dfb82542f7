"""Tunings — load named open-string tunings and convert note names.

Tunings are stored in ``configs/tunings.yaml`` as note names per
instrument (lowest string first) and returned as absolute semitones with
C0 = 0, so ``E2`` → 28.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Sequence

from src.config import DEFAULT_TUNINGS_PATH, load_yaml_config


_LETTERS: dict[str, int] = {"c": 0, "d": 2, "e": 4, "f": 5, "g": 7, "a": 9, "b": 11}
_ACCIDENTALS: dict[str, int] = {"#": 1, "b": -1}
_NOTE_RE = re.compile(r"^([A-Ga-g])([#b]*)(-?\d+)$")


def note_to_semitones(name: str) -> int:
    """Convert a note name with octave (``"E2"``, ``"G#3"``, ``"Bb1"``).

    Raises:
        ValueError: If *name* is not a note name with an octave number.
    """
    match = _NOTE_RE.match(name.strip())
    if match is None:
        raise ValueError(f"Not a note name with octave: '{name}'")
    letter, accidentals, octave = match.groups()
    offset = sum(_ACCIDENTALS[ch] for ch in accidentals)
    return int(octave) * 12 + _LETTERS[letter.lower()] + offset


def load_tunings(
    tunings_path: str | Path | None = None,
) -> dict[str, dict[str, list[int]]]:
    """Load every tuning as ``{instrument: {name: [semitones, ...]}}``.

    Raises:
        FileNotFoundError: If the tunings file does not exist.
        ValueError: If an entry is not a list of note names.
    """
    if tunings_path is None:
        tunings_path = DEFAULT_TUNINGS_PATH
    raw = load_yaml_config(tunings_path)

    tunings: dict[str, dict[str, list[int]]] = {}
    for instrument, named in raw.items():
        if not isinstance(named, dict):
            raise ValueError(f"Tunings for '{instrument}' must be a mapping: {tunings_path}")
        tunings[instrument] = {}
        for name, notes in named.items():
            if not isinstance(notes, list) or not notes:
                raise ValueError(
                    f"Tuning '{instrument}/{name}' must be a non-empty list: {tunings_path}"
                )
            tunings[instrument][name] = [note_to_semitones(str(n)) for n in notes]
    return tunings


def get_tuning(
    instrument: str = "guitar",
    name: str = "standard",
    tunings_path: str | Path | None = None,
) -> list[int]:
    """Look up one named tuning.

    Raises:
        KeyError: If the instrument or tuning name is unknown.
    """
    tunings = load_tunings(tunings_path)
    if instrument not in tunings:
        raise KeyError(f"Unknown instrument '{instrument}' (known: {sorted(tunings)})")
    if name not in tunings[instrument]:
        raise KeyError(
            f"Unknown tuning '{name}' for {instrument} (known: {sorted(tunings[instrument])})"
        )
    return tunings[instrument][name]


def resolve_tuning(
    spec: str | Sequence[int | str],
    tunings_path: str | Path | None = None,
) -> list[int]:
    """Accept ``"guitar/standard"``, ``"guitar"``, note names or semitones.

    Raises:
        ValueError: If *spec* is empty or contains something unparseable.
        KeyError: If a named tuning is unknown.
    """
    if isinstance(spec, str):
        instrument, _, name = spec.partition("/")
        return get_tuning(instrument, name or "standard", tunings_path)

    if len(spec) == 0:
        raise ValueError("Tuning must contain at least one string")

    tuning: list[int] = []
    for value in spec:
        if isinstance(value, bool):
            raise ValueError(f"Invalid tuning entry: {value!r}")
        if isinstance(value, int):
            tuning.append(value)
        elif isinstance(value, str):
            tuning.append(note_to_semitones(value))
        else:
            raise ValueError(f"Invalid tuning entry: {value!r}")
    return tuning
