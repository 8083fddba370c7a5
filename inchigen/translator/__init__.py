"""
Molecule to engine-input translation for inchigen.
"""

from .structure_translator import (
    StructureTranslator,
    EarlyProblem,
    ProblemKind,
    translate
)

__all__ = [
    'StructureTranslator',
    'EarlyProblem',
    'ProblemKind',
    'translate'
]
