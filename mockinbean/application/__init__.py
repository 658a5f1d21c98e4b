"""Application layer for the mockinbean harness.

Orchestrates the domain collaborators into the substitution workflow:
declaration scanning, target resolution, field matching and the engine
that installs and restores doubles.
"""
