"""Cost Model — configurable ergonomic scoring for chord voicings.

All weights and constants are loaded from ``configs/voicing_costs.yaml``.
No hardcoded constants: if a required key is missing from the YAML,
a ``ValueError`` is raised with a clear message.

Methods:
    detect_barre          – lowest-fret barre the index finger can hold
    count_fingers         – barre-aware fretting-hand finger count
    fret_span_cost        – distance between lowest and highest fretted note
    finger_count_cost     – fingers used, with an overflow score past the hand
    stretch_evenness_cost – variance of fret gaps between adjacent strings
    contiguity_cost       – muted strings inside the sounded range
    open_string_bonus     – negative cost for open strings
    bass_cost             – penalises a non-root lowest note
    position_cost         – mild bias toward lower positions
    score                 – aggregated :class:`ErgonomicBreakdown`
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Optional

import numpy as np

from src.config import DEFAULT_COSTS_PATH, load_yaml_config

from .models import Barre, ErgonomicBreakdown, Voicing, pitch_class


WEIGHT_KEYS: list[str] = [
    "fret_span",
    "finger_count",
    "stretch_evenness",
    "string_contiguity",
    "open_string_bonus",
    "bass_correctness",
    "position_weight",
]

_REQUIRED_KEYS: list[str] = [
    "weights",
    "max_comfortable_span",
    "comfortable_fingers",
    "finger_overflow_score",
    "stretch_variance_cap",
    "bass_penalty",
    "position_divisor",
    "string_change_penalty",
]


# ── Barre logic (no configuration needed) ─────────────────────

def detect_barre(voicing: Voicing) -> Optional[Barre]:
    """Find the barre held by the index finger, if any.

    Fretted strings are grouped by fret. A fret shared by two or more strings
    is a barre candidate when no string between its outermost strings is
    fretted *lower* (the finger cannot lie over a lower fretted note); muted,
    open and same-fret strings in between are fine. Only the lowest-fret
    candidate is kept.
    """
    by_fret: dict[int, list[int]] = {}
    for string in voicing.fretted_strings:
        by_fret.setdefault(voicing.frets[string], []).append(string)

    for fret in sorted(by_fret):
        strings = by_fret[fret]
        if len(strings) < 2:
            continue
        lo, hi = min(strings), max(strings)
        blocked = any(
            voicing.frets[s] is not None and 0 < voicing.frets[s] < fret
            for s in range(lo, hi + 1)
        )
        if not blocked:
            return Barre(fret=fret, from_string=lo, to_string=hi)
    return None


def count_fingers(voicing: Voicing, barre: Optional[Barre] = None) -> int:
    """Fingers needed to fret *voicing*.

    A barre costs one finger for every string it covers at its fret; every
    other fretted string costs one more. Open and muted strings are free.
    """
    fretted = voicing.fretted_strings
    if barre is None:
        return len(fretted)
    uncovered = sum(1 for s in fretted if not barre.covers(s, voicing.frets[s]))
    return 1 + uncovered


class ErgonomicCostModel:
    """Rule-based cost model for ranking voicings by playability.

    Args:
        config_path: Path to the YAML configuration file.
        weights: Optional per-sub-score weight overrides (keys from
            :data:`WEIGHT_KEYS`).
    """

    def __init__(
        self,
        config_path: str | Path | None = None,
        weights: Mapping[str, float] | None = None,
    ) -> None:
        if config_path is None:
            config_path = DEFAULT_COSTS_PATH
        self.config_path = Path(config_path)

        self._cfg: dict[str, Any] = load_yaml_config(self.config_path, _REQUIRED_KEYS)

        cfg_weights = self._cfg["weights"] or {}
        for key in WEIGHT_KEYS:
            if key not in cfg_weights:
                raise ValueError(
                    f"Missing required weight '{key}' in cost config: {self.config_path}"
                )
        self.weights: dict[str, float] = {k: float(cfg_weights[k]) for k in WEIGHT_KEYS}

        if weights:
            unknown = set(weights) - set(WEIGHT_KEYS)
            if unknown:
                raise ValueError(f"Unknown weight keys: {sorted(unknown)}")
            self.weights.update({k: float(v) for k, v in weights.items()})

        self.max_comfortable_span: float = float(self._cfg["max_comfortable_span"])
        self.comfortable_fingers: int = int(self._cfg["comfortable_fingers"])
        self.finger_overflow_score: float = float(self._cfg["finger_overflow_score"])
        self.stretch_variance_cap: float = float(self._cfg["stretch_variance_cap"])
        self.bass_penalty: float = float(self._cfg["bass_penalty"])
        self.position_divisor: float = float(self._cfg["position_divisor"])
        self.string_change_penalty: int = int(self._cfg["string_change_penalty"])

    @property
    def search_defaults(self) -> dict[str, Any]:
        """The optional ``search`` section of the config (may be empty)."""
        return dict(self._cfg.get("search") or {})

    # ── Barre / finger helpers ────────────────────────────────

    def detect_barre(self, voicing: Voicing) -> Optional[Barre]:
        return detect_barre(voicing)

    def count_fingers(self, voicing: Voicing) -> int:
        return count_fingers(voicing, detect_barre(voicing))

    # ── Individual cost components ────────────────────────────

    def fret_span_cost(self, voicing: Voicing) -> float:
        """Span of fretted notes over the comfortable span; 0 below two notes."""
        frets = [voicing.frets[s] for s in voicing.fretted_strings]
        if len(frets) < 2:
            return 0.0
        return (max(frets) - min(frets)) / self.max_comfortable_span

    def finger_count_cost(self, fingers: int) -> float:
        if fingers > self.comfortable_fingers:
            return self.finger_overflow_score
        return fingers / self.comfortable_fingers

    def stretch_evenness_cost(self, voicing: Voicing) -> float:
        """Variance of the fret gaps between adjacent fretted strings, capped at 1."""
        frets = [voicing.frets[s] for s in voicing.fretted_strings]
        if len(frets) < 2:
            return 0.0
        gaps = np.abs(np.diff(np.array(frets, dtype=float)))
        return float(min(np.var(gaps) / self.stretch_variance_cap, 1.0))

    def contiguity_cost(self, voicing: Voicing) -> float:
        """Fraction of interior strings that are muted inside the sounded range."""
        sounded = voicing.sounded_strings
        if len(sounded) < 2:
            return 0.0
        width = sounded[-1] - sounded[0] + 1
        if width <= 2:
            return 0.0
        return (width - len(sounded)) / (width - 2)

    def open_string_bonus(self, voicing: Voicing) -> float:
        sounded = voicing.sounded_count
        if sounded == 0:
            return 0.0
        return -(len(voicing.open_strings) / sounded)

    def bass_cost(self, voicing: Voicing, root: int) -> float:
        bass = voicing.bass_string
        if bass is None:
            return 0.0
        if pitch_class(voicing.semitones[bass]) == pitch_class(root):
            return 0.0
        return self.bass_penalty

    def position_cost(self, voicing: Voicing) -> float:
        lowest = voicing.min_fretted
        if lowest is None:
            return 0.0
        return lowest / self.position_divisor

    # ── Aggregate ─────────────────────────────────────────────

    def score(self, voicing: Voicing, root: int) -> ErgonomicBreakdown:
        """Compute the itemised ergonomic cost of a voicing.

        Args:
            voicing: A complete voicing.
            root: Pitch class expected in the bass (reduced mod 12).

        Returns:
            A fresh :class:`ErgonomicBreakdown`; ``total_cost`` is the
            weighted sum of the seven sub-scores.
        """
        parts = {
            "fret_span": self.fret_span_cost(voicing),
            "finger_count": self.finger_count_cost(self.count_fingers(voicing)),
            "stretch_evenness": self.stretch_evenness_cost(voicing),
            "string_contiguity": self.contiguity_cost(voicing),
            "open_string_bonus": self.open_string_bonus(voicing),
            "bass_correctness": self.bass_cost(voicing, root),
            "position_weight": self.position_cost(voicing),
        }
        total = sum(self.weights[key] * value for key, value in parts.items())
        return ErgonomicBreakdown(total_cost=total, **parts)

    def total_cost(self, voicing: Voicing, root: int) -> float:
        """Convenience wrapper: just the weighted total."""
        return self.score(voicing, root).total_cost
