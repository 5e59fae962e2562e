"""Fingering Engine — chord fingerings from captured handprints.

Sub-package containing:
    handprints         – handprint records, validation and JSON IO
    pattern_extractor  – statistical hand patterns
    chord_matcher      – exact matches inside captured handprints
    synthesizer        – approximate fingerings from grid search
    scorer             – shared comfort / geometry / ergonomics scoring
    ergonomics         – hand-size aware analysis and finger assignment
    suggest            – orchestrates the pipeline and exports results
"""
