"""Fretboard Architect — Voicing Engine entry point.

Command-line front end for the voicing engine::

    python -m src.main voicings 0 4 7 --root 0 --tuning guitar/standard
    python -m src.main progression data/raw/song.json --strategy dp

The Streamlit app lives in ``app/streamlit_app.py``.
"""

from __future__ import annotations

import argparse
from typing import Optional, Sequence

from src.config import setup_logging
from src.voicing_engine.annotate import annotate_progression
from src.voicing_engine.cost_model import ErgonomicCostModel
from src.voicing_engine.labels import difficulty_tier, shape_type, tab_shorthand
from src.voicing_engine.progression import DEFAULT_MAX_FRET, STRATEGIES
from src.voicing_engine.solver import SearchConfig, generate_voicings
from src.voicing_engine.tunings import resolve_tuning


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fretboard-architect",
        description="Find playable chord voicings and voice-led progressions.",
    )
    parser.add_argument("--config", default=None, help="Cost config YAML")
    parser.add_argument("--log-level", default="WARNING")
    sub = parser.add_subparsers(dest="command", required=True)

    voicings = sub.add_parser("voicings", help="Rank voicings of one pitch-class set")
    voicings.add_argument("pitch_classes", nargs="+", type=int)
    voicings.add_argument("--root", type=int, default=None, help="Bass pitch class")
    voicings.add_argument("--tuning", default="guitar/standard")
    voicings.add_argument("--max-fret", type=int, default=None)
    voicings.add_argument("--max-span", type=int, default=None)
    voicings.add_argument("--max-fingers", type=int, default=None)
    voicings.add_argument("--min-sounded", type=int, default=None)
    voicings.add_argument("--max-results", type=int, default=None)
    voicings.add_argument("--no-open", action="store_true", help="Disallow open strings")

    progression = sub.add_parser("progression", help="Voice-lead a progression file")
    progression.add_argument("path")
    progression.add_argument("--output-dir", default=None)
    progression.add_argument("--strategy", choices=STRATEGIES, default="greedy")
    progression.add_argument("--max-fret", type=int, default=None)
    progression.add_argument("--midi", action="store_true", help="Also export MIDI")

    return parser


def _run_voicings(args: argparse.Namespace) -> int:
    cost_model = ErgonomicCostModel(args.config)
    defaults = cost_model.search_defaults
    overrides = {
        "max_span": args.max_span,
        "max_fingers": args.max_fingers,
        "min_sounded": args.min_sounded,
        "max_results": args.max_results,
    }
    defaults.update({k: v for k, v in overrides.items() if v is not None})
    if args.no_open:
        defaults["allow_open"] = False
    config = SearchConfig.from_mapping(defaults)

    max_fret = args.max_fret
    if max_fret is None:
        max_fret = int(defaults.get("max_fret", DEFAULT_MAX_FRET))

    tuning = resolve_tuning(args.tuning)
    root = args.root if args.root is not None else args.pitch_classes[0]
    voicings = generate_voicings(args.pitch_classes, root, tuning, max_fret, config, cost_model)

    if not voicings:
        print("No playable voicing found; try raising --max-fret, --max-span or --max-fingers.")
        return 1

    for rank, voicing in enumerate(voicings, start=1):
        cost = voicing.total_cost
        print(
            f"{rank:>3}. {tab_shorthand(voicing):<14} {shape_type(voicing):<9}"
            f" cost={cost:6.3f} ({difficulty_tier(cost)})"
        )
    return 0


def _run_progression(args: argparse.Namespace) -> int:
    results = annotate_progression(
        args.path,
        output_dir=args.output_dir,
        config_path=args.config,
        export_midi=args.midi,
        strategy=args.strategy,
        max_fret=args.max_fret,
    )
    for entry in results:
        voicing = entry["voicing"]
        label = "skipped" if voicing is None else f"#{entry['voicing_index']} {voicing['tab']}"
        print(f"  {entry['id']:<12} {label}")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Parse arguments, configure logging and run the chosen command."""
    args = _build_parser().parse_args(argv)
    setup_logging(args.log_level)

    print("Fretboard Architect – Voicing Engine")
    if args.command == "voicings":
        return _run_voicings(args)
    return _run_progression(args)


if __name__ == "__main__":
    raise SystemExit(main())
