"""isofinger — chord fingering suggestions for isomorphic grid controllers.

Sub-packages:
    grid             – hex and square pad geometry, device presets
    theory           – pitch classes, chord dictionary, chord-name parsing
    fingering_engine – handprints, matching, synthesis, scoring, export
"""
