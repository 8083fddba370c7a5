"""
inchigen: InChI generation for molecular graphs.

Typical use:

    >>> from inchigen import InChIGeneratorFactory
    >>> factory = InChIGeneratorFactory()
    >>> session = factory.get_inchi_generator(molecule, "-SNon")
    >>> session.get_inchi()
"""

from .errors import (
    InChIGenerationError,
    TranslationError,
    UnsupportedSpinMultiplicityError,
    NegativeImplicitHydrogenError,
    GeneratorReuseError,
    GenerationFailedError,
    MissingIdentifierError,
    EngineError,
    EngineUnavailableError,
    InvalidOptionError
)
from .molecule import Atom, AtomParity, Bond, BondStereo, CoordinateType, Molecule
from .options import GenerationConfig, InchiOption, InchiOptions, ProcessingOption
from .result import GenerationResult, ReturnStatus
from .structural_input import StructuralInput
from .translator import EarlyProblem, ProblemKind, StructureTranslator
from .engine import InChIEngine, RDKitInChIEngine
from .session import GenerationSession, InChIGeneratorFactory, SessionState

__version__ = "0.1.0"

__all__ = [
    'InChIGenerationError',
    'TranslationError',
    'UnsupportedSpinMultiplicityError',
    'NegativeImplicitHydrogenError',
    'GeneratorReuseError',
    'GenerationFailedError',
    'MissingIdentifierError',
    'EngineError',
    'EngineUnavailableError',
    'InvalidOptionError',
    'Atom',
    'AtomParity',
    'Bond',
    'BondStereo',
    'CoordinateType',
    'Molecule',
    'GenerationConfig',
    'InchiOption',
    'InchiOptions',
    'ProcessingOption',
    'GenerationResult',
    'ReturnStatus',
    'StructuralInput',
    'EarlyProblem',
    'ProblemKind',
    'StructureTranslator',
    'InChIEngine',
    'RDKitInChIEngine',
    'GenerationSession',
    'InChIGeneratorFactory',
    'SessionState'
]
