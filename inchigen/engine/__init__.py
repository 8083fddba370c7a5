"""
InChI engines for inchigen.
"""

from .base_engine import InChIEngine
from .rdkit_engine import RDKitInChIEngine, RDKIT_AVAILABLE

__all__ = [
    'InChIEngine',
    'RDKitInChIEngine',
    'RDKIT_AVAILABLE'
]
