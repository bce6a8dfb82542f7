"""Annotator — run the progression pipeline on a file and export results.

Responsibilities:
    1. Load and validate a progression JSON file.
    2. Call the progression optimizer to choose a voicing per chord.
    3. Save ``<stem>_voicings.json`` (default: ``data/voicings/``).
    4. Optionally export a MIDI file with one block chord per voicing.
    5. Return the result data structure for programmatic use.

Progression files are a JSON array of chords, or an object with a
``chords`` array::

    [
      {"id": "c1", "pitch_classes": [0, 4, 7], "root": 0, "tuning": "guitar/standard"},
      {"id": "c2", "pitch_classes": [7, 11, 2], "tuning": ["E2", "A2", "D3", "G3", "B3", "E4"]},
      ...
    ]
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

import pretty_midi

from src.config import PROJECT_ROOT

from .cost_model import ErgonomicCostModel
from .labels import difficulty_tier, shape_type, tab_shorthand
from .models import Voicing
from .progression import DEFAULT_MAX_FRET, ProgressionChord, plan_progression
from .solver import SearchConfig
from .tunings import resolve_tuning


logger = logging.getLogger(__name__)

# Absolute semitones use C0 = 0; MIDI note numbers use C-1 = 0
_MIDI_OFFSET: int = 12
_GUITAR_PROGRAM: int = 25  # Acoustic Guitar (steel)


def load_progression(json_path: str | Path) -> list[ProgressionChord]:
    """Load and validate a progression file.

    Args:
        json_path: Path to the progression JSON.

    Returns:
        Chord records in file order. Chords without an ``id`` get ``"chord<N>"``.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the structure or any chord entry is invalid.
    """
    path = Path(json_path)
    if not path.exists():
        raise FileNotFoundError(f"Progression file not found: {path}")

    with open(path, "r", encoding="utf-8") as fh:
        data = json.load(fh)

    if isinstance(data, dict):
        data = data.get("chords")
    if not isinstance(data, list):
        raise ValueError(f"Progression file must contain a list of chords: {path}")

    chords: list[ProgressionChord] = []
    for i, entry in enumerate(data):
        if not isinstance(entry, dict):
            raise ValueError(f"Entry {i} in '{path.name}' must be an object")
        for key in ("pitch_classes", "tuning"):
            if key not in entry:
                raise ValueError(f"Entry {i} in '{path.name}' is missing required key '{key}'")

        pcs = entry["pitch_classes"]
        if not isinstance(pcs, list) or not all(isinstance(pc, int) for pc in pcs):
            raise ValueError(
                f"Entry {i} in '{path.name}': pitch_classes must be a list of integers"
            )

        try:
            tuning = resolve_tuning(entry["tuning"])
        except (KeyError, ValueError) as exc:
            raise ValueError(f"Entry {i} in '{path.name}': invalid tuning: {exc}") from exc

        root = entry.get("root")
        inversion = int(entry.get("inversion", 0))
        if inversion < 0:
            raise ValueError(f"Entry {i} in '{path.name}': inversion must be >= 0")

        chords.append(
            ProgressionChord(
                id=str(entry.get("id", f"chord{i}")),
                pitch_classes=list(pcs),
                tuning=tuning,
                root=None if root is None else int(root),
                inversion=inversion,
            )
        )

    return chords


def voicing_to_dict(voicing: Voicing) -> dict[str, Any]:
    """JSON-ready summary of a scored voicing."""
    breakdown = voicing.breakdown.as_dict() if voicing.breakdown is not None else None
    return {
        "tab": tab_shorthand(voicing),
        "frets": list(voicing.frets),
        "semitones": list(voicing.semitones),
        "shape": shape_type(voicing),
        "difficulty": None if breakdown is None else difficulty_tier(breakdown["total_cost"]),
        "breakdown": breakdown,
    }


def annotate_progression(
    progression_path: str | Path,
    output_dir: str | Path | None = None,
    config_path: str | Path | None = None,
    export_midi: bool = False,
    strategy: str = "greedy",
    max_fret: Optional[int] = None,
) -> list[dict[str, Any]]:
    """Choose voicings for a progression file and save the result.

    Args:
        progression_path: Path to the progression JSON.
        output_dir: Directory for output files.
            Defaults to ``data/voicings/`` relative to the project root.
        config_path: Path to the cost-config YAML.
            Defaults to ``configs/voicing_costs.yaml``.
        export_midi: If ``True``, also save a MIDI file.
        strategy: ``"greedy"`` or ``"dp"``.
        max_fret: Fret ceiling; defaults to the config's ``search.max_fret``.

    Returns:
        One dict per input chord with ``id``, ``voicing_index`` (``None`` when
        the chord was skipped) and ``voicing`` (see :func:`voicing_to_dict`).
    """
    progression_path = Path(progression_path)

    if output_dir is None:
        output_dir = PROJECT_ROOT / "data" / "voicings"
    else:
        output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    # ── Pipeline ──────────────────────────────────────────────
    cost_model = ErgonomicCostModel(config_path)
    search_defaults = cost_model.search_defaults
    config = SearchConfig.from_mapping(search_defaults)
    if max_fret is None:
        max_fret = int(search_defaults.get("max_fret", DEFAULT_MAX_FRET))

    chords = load_progression(progression_path)
    plan = plan_progression(chords, config, max_fret, strategy, cost_model)
    chosen = {id(step.chord): step for step in plan}

    results: list[dict[str, Any]] = []
    for chord in chords:
        step = chosen.get(id(chord))
        results.append(
            {
                "id": chord.id,
                "voicing_index": None if step is None else step.index,
                "voicing": None if step is None else voicing_to_dict(step.voicing),
            }
        )

    # ── Save <stem>_voicings.json ─────────────────────────────
    stem = progression_path.stem
    json_path = output_dir / f"{stem}_voicings.json"
    with open(json_path, "w", encoding="utf-8") as fh:
        json.dump(results, fh, indent=2, ensure_ascii=False)
    logger.info("Wrote %s", json_path)

    # ── Optional: export MIDI ─────────────────────────────────
    if export_midi:
        export_progression_midi(
            [step.voicing for step in plan], output_dir / f"{stem}_voicings.mid"
        )

    return results


def export_progression_midi(
    voicings: list[Voicing],
    midi_path: str | Path,
    chord_duration: float = 2.0,
    velocity: int = 90,
) -> Path:
    """Write the voicings as consecutive block chords.

    Each chord is also stored as a ``pretty_midi.Lyric`` with its tab
    shorthand (e.g. ``x32010``) at the chord's onset.

    Args:
        voicings: Voicings in playing order.
        midi_path: Output ``.mid`` path.
        chord_duration: Length of each chord in seconds.
        velocity: MIDI velocity for every note.

    Returns:
        Path to the saved MIDI file.
    """
    midi_path = Path(midi_path)
    midi_data = pretty_midi.PrettyMIDI()
    guitar = pretty_midi.Instrument(program=_GUITAR_PROGRAM, name="Voicings")

    for i, voicing in enumerate(voicings):
        start = i * chord_duration
        end = start + chord_duration
        for semi in voicing.semitones:
            if semi is None:
                continue
            guitar.notes.append(
                pretty_midi.Note(velocity=velocity, pitch=semi + _MIDI_OFFSET, start=start, end=end)
            )
        midi_data.lyrics.append(pretty_midi.Lyric(text=tab_shorthand(voicing), time=start))

    midi_data.instruments.append(guitar)
    midi_data.write(str(midi_path))
    return midi_path


def voicings_to_json_bytes(voicings: list[Voicing]) -> bytes:
    """Serialise voicings to UTF-8 JSON bytes (for download buttons)."""
    payload = [voicing_to_dict(v) for v in voicings]
    return json.dumps(payload, indent=2, ensure_ascii=False).encode("utf-8")
