"""Domain layer for the mockinbean harness.

This layer contains:
- Interfaces: Collaborator contracts (container, double factory)
- Value Objects: Immutable primitives (double kind, engine state, markers)
- Entities: Declarations, resolved targets, matched fields, undo records
- Exceptions: The substitution error taxonomy

The domain layer has ZERO dependencies on external libraries (except Python stdlib).
"""
