"""Progression — choose one voicing per chord for smooth voice leading.

Strategies:
    ``"greedy"`` (default)
        Left to right. The first chord takes its most playable voicing; each
        later chord takes the pool entry nearest to the previously *chosen*
        voicing. Locally optimal per step, not across the whole progression.
    ``"dp"``
        Dynamic programming over ``(chord, candidate)`` states minimising the
        cumulative voice-leading distance. Optimal across the progression, so
        it can pick a less playable first voicing than ``"greedy"`` would.

Chords without pitch classes, or whose search finds no voicing, are left
untouched and do not become the "previous" voicing.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Sequence

from .cost_model import ErgonomicCostModel
from .models import Voicing, pitch_class
from .solver import SearchConfig, generate_voicings
from .voice_leading import find_smoothest_transition, voice_leading_distance


logger = logging.getLogger(__name__)

STRATEGIES: tuple[str, ...] = ("greedy", "dp")
DEFAULT_MAX_FRET: int = 15

# update(chord_id, {"voicing_index": int, "voicing_enabled": True})
UpdateCallback = Callable[[str, dict[str, Any]], None]


@dataclass
class ProgressionChord:
    """A chord record owned by the host application.

    ``pitch_classes`` are ordered chord tones, root first; the engine only
    reads them and writes ``voicing_index`` / ``voicing_enabled``.
    """

    id: str
    pitch_classes: list[int]
    tuning: list[int]
    root: Optional[int] = None
    inversion: int = 0
    voicing_index: Optional[int] = None
    voicing_enabled: bool = False

    def bass_pitch_class(self) -> Optional[int]:
        """Pitch class the voicing should have in the bass.

        With an inversion, the chord tones are rotated and the first tone of
        the rotated chord is the bass; otherwise the root (or first tone).
        """
        if not self.pitch_classes:
            return None
        if self.inversion > 0:
            return pitch_class(self.pitch_classes[self.inversion % len(self.pitch_classes)])
        if self.root is not None:
            return pitch_class(self.root)
        return pitch_class(self.pitch_classes[0])


@dataclass
class PlannedVoicing:
    chord: ProgressionChord
    index: int
    voicing: Voicing
    pool: list[Voicing] = field(repr=False, default_factory=list)


def build_pools(
    chords: Sequence[ProgressionChord],
    config: SearchConfig | None = None,
    max_fret: int = DEFAULT_MAX_FRET,
    cost_model: ErgonomicCostModel | None = None,
) -> list[Optional[list[Voicing]]]:
    """Voicing pool per chord; ``None`` where no pool could be generated."""
    if cost_model is None:
        cost_model = ErgonomicCostModel()

    pools: list[Optional[list[Voicing]]] = []
    for chord in chords:
        bass = chord.bass_pitch_class()
        if bass is None:
            logger.warning("Chord %s has no pitch classes; skipped", chord.id)
            pools.append(None)
            continue
        voicings = generate_voicings(
            chord.pitch_classes, bass, chord.tuning, max_fret, config, cost_model
        )
        if not voicings:
            logger.warning("No playable voicing for chord %s; skipped", chord.id)
            pools.append(None)
            continue
        logger.debug("Chord %s: %d candidate voicings", chord.id, len(voicings))
        pools.append(voicings)
    return pools


def _greedy(
    chords: Sequence[ProgressionChord],
    pools: Sequence[Optional[list[Voicing]]],
    string_change_penalty: int,
) -> list[PlannedVoicing]:
    plan: list[PlannedVoicing] = []
    previous: Optional[Voicing] = None

    for chord, pool in zip(chords, pools):
        if not pool:
            continue
        index = 0
        if previous is not None:
            smoothest = find_smoothest_transition(
                previous, pool, len(chord.tuning), string_change_penalty
            )
            if smoothest is not None:
                index = pool.index(smoothest)
        plan.append(PlannedVoicing(chord, index, pool[index], pool))
        previous = pool[index]

    return plan


def _dynamic(
    chords: Sequence[ProgressionChord],
    pools: Sequence[Optional[list[Voicing]]],
    string_change_penalty: int,
) -> list[PlannedVoicing]:
    steps = [(chord, pool) for chord, pool in zip(chords, pools) if pool]
    if not steps:
        return []

    # dp[i][j] = minimum cumulative distance ending at candidate j of step i
    # bp[i][j] = candidate index chosen at step i - 1
    dp: list[list[float]] = [[0.0] * len(steps[0][1])]
    bp: list[list[int]] = [[-1] * len(steps[0][1])]

    for i in range(1, len(steps)):
        chord, pool = steps[i]
        prev_pool = steps[i - 1][1]
        row: list[float] = []
        back: list[int] = []
        for candidate in pool:
            best_cost = math.inf
            best_prev = 0
            for k, prev in enumerate(prev_pool):
                total = dp[i - 1][k] + voice_leading_distance(
                    prev, candidate, len(chord.tuning), string_change_penalty
                )
                if total < best_cost:
                    best_cost, best_prev = total, k
            row.append(best_cost)
            back.append(best_prev)
        dp.append(row)
        bp.append(back)

    # Best final state; ties go to the lower (more playable) index
    last = dp[-1]
    index = min(range(len(last)), key=lambda j: (last[j], j))

    chosen: list[int] = [index]
    for i in range(len(steps) - 1, 0, -1):
        chosen.append(bp[i][chosen[-1]])
    chosen.reverse()

    return [
        PlannedVoicing(chord, j, pool[j], pool)
        for (chord, pool), j in zip(steps, chosen)
    ]


def plan_progression(
    chords: Sequence[ProgressionChord],
    config: SearchConfig | None = None,
    max_fret: int = DEFAULT_MAX_FRET,
    strategy: str = "greedy",
    cost_model: ErgonomicCostModel | None = None,
) -> list[PlannedVoicing]:
    """Choose a voicing for every solvable chord without writing anything.

    Raises:
        ValueError: If *strategy* is not one of :data:`STRATEGIES`.
    """
    if strategy not in STRATEGIES:
        raise ValueError(f"Unknown strategy '{strategy}' (expected one of {STRATEGIES})")
    if cost_model is None:
        cost_model = ErgonomicCostModel()

    pools = build_pools(chords, config, max_fret, cost_model)
    penalty = cost_model.string_change_penalty

    if strategy == "dp":
        plan = _dynamic(chords, pools, penalty)
    else:
        plan = _greedy(chords, pools, penalty)

    logger.info(
        "Planned %d of %d chords with the %s strategy", len(plan), len(chords), strategy
    )
    return plan


def _write_back(chord: ProgressionChord, changes: dict[str, Any]) -> None:
    for key, value in changes.items():
        setattr(chord, key, value)


def optimize_progression(
    chords: Sequence[ProgressionChord],
    update: UpdateCallback | None = None,
    config: SearchConfig | None = None,
    max_fret: int = DEFAULT_MAX_FRET,
    strategy: str = "greedy",
    cost_model: ErgonomicCostModel | None = None,
) -> None:
    """Select a voicing per chord and write the selection back.

    Args:
        chords: Ordered chord records.
        update: Called as ``update(chord_id, {"voicing_index": i,
            "voicing_enabled": True})`` for every chord that received a
            voicing. When ``None``, the fields are set on the records.
        config: Search bounds shared by every chord.
        max_fret: Fret ceiling for every chord's search.
        strategy: ``"greedy"`` or ``"dp"``.
        cost_model: Scorer shared by every chord.
    """
    plan = plan_progression(chords, config, max_fret, strategy, cost_model)
    for step in plan:
        changes = {"voicing_index": step.index, "voicing_enabled": True}
        if update is None:
            _write_back(step.chord, changes)
        else:
            update(step.chord.id, changes)
