"""Tests for the mockinbean harness."""
