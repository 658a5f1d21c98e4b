"""Application services for the mockinbean harness."""

from .declaration_scanner import DeclarationScanner
from .field_matcher import FieldMatcher
from .substitution_engine import SubstitutionEngine
from .target_resolver import TargetResolver

__all__ = [
    "DeclarationScanner",
    "FieldMatcher",
    "SubstitutionEngine",
    "TargetResolver",
]
