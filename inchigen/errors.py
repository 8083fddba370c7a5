"""
errors.py

Exception hierarchy for InChI generation.

Every fatal condition raised by the translator, the session or an engine
derives from InChIGenerationError so callers can catch the whole family in
one place. The unsupported-bond-order case has no exception: it is a
recorded outcome of generation (see translator.EarlyProblem), not an error.
"""

from typing import Any, Dict, Optional


class InChIGenerationError(Exception):
    """
    Base exception for everything that can go wrong while generating an InChI.

    Attributes:
        message: Human-readable error description
        details: Additional context (atom ids, offending values, ...)
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}

        full_message = message
        if details:
            full_message += f" | Details: {details}"

        super().__init__(full_message)


class TranslationError(InChIGenerationError):
    """Raised when a molecule cannot be converted into engine input."""
    pass


class UnsupportedSpinMultiplicityError(TranslationError):
    """Raised for spin multiplicities outside 0..3."""
    pass


class NegativeImplicitHydrogenError(TranslationError):
    """
    Raised when an atom's explicit hydrogen total is smaller than the number
    of hydrogen atoms bonded to it in the graph.
    """
    pass


class GeneratorReuseError(InChIGenerationError):
    """Raised when generate() is called on a session that already ran."""
    pass


class GenerationFailedError(InChIGenerationError):
    """Raised when a result is requested but generation produced none."""
    pass


class MissingIdentifierError(InChIGenerationError):
    """Raised when an identifier string is required but was not produced."""
    pass


class EngineError(InChIGenerationError):
    """Raised by engines when the underlying InChI library fails."""
    pass


class EngineUnavailableError(EngineError):
    """Raised when the InChI library cannot be loaded."""
    pass


class InvalidOptionError(InChIGenerationError):
    """Raised for option flags the InChI library does not recognise."""
    pass
