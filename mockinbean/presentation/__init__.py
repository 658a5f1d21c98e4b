"""Presentation layer for the mockinbean harness.

The presentation layer is the outermost layer that:
- Hooks the substitution engine into the test runner's lifecycle
- Exposes the runner-facing fixtures and settings

This layer depends on application and domain layers but NOT vice versa.
"""
