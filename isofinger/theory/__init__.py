"""Theory — pitch-class arithmetic and the static chord tables.

Sub-package containing:
    pitch         – note names, scale tables, mod-12 helpers
    chords        – chord-quality intervals, names, voicing analysis
    chord_parser  – chord-notation parsing and target resolution
"""
