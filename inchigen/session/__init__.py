"""
Generation sessions for inchigen.
"""

from .generation_session import (
    GenerationSession,
    SessionState,
    INCHI_CONVENTION
)
from .factory import InChIGeneratorFactory

__all__ = [
    'GenerationSession',
    'SessionState',
    'INCHI_CONVENTION',
    'InChIGeneratorFactory'
]
