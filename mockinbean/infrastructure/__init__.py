"""Infrastructure layer for the mockinbean harness.

The infrastructure layer contains implementations of domain interfaces:
- Container adapters (InstanceRegistry)
- Double factories (MockDoubleFactory over unittest.mock)
- Engine state machine
- Error handling decorators

This layer depends on the domain layer, but the domain layer does NOT
depend on infrastructure.
"""
