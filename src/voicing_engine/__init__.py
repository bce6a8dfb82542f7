"""Voicing Engine — ranked chord voicings and voice-led progressions.

Sub-package containing:
    models         – candidates, voicings, barres, ergonomic breakdowns
    candidate_map  – per-string chord-tone positions
    cost_model     – configurable ergonomic scoring and barre detection
    solver         – depth-first voicing search with pruning
    voice_leading  – distance, motion and parallel-interval analysis
    progression    – greedy / DP voicing selection across a progression
    tunings        – named tunings and note-name conversion
    labels         – tab shorthand, shape and difficulty labels
    annotate       – orchestrates the file pipeline and exports results
"""
