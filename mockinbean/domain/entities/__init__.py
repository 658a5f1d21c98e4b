"""Domain entities for the mockinbean harness."""

from .matched_field import MatchedField
from .resolved_target import ResolvedTarget
from .substitution_declaration import SubstitutionDeclaration
from .undo_record import MISSING, UndoRecord

__all__ = [
    "MatchedField",
    "ResolvedTarget",
    "SubstitutionDeclaration",
    "UndoRecord",
    "MISSING",
]
