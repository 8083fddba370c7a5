"""
engine/base_engine.py

This module defines the abstract interface every InChI engine implements.

Design Philosophy:
-----------------
The InChI computation itself is an external library. The rest of the
package only needs a pure function from StructuralInput to GenerationResult,
so the interface is kept to exactly that plus two small helpers:

- `name` identifies the engine in logs
- `is_available()` tells the factory whether the library could be loaded
- `compute()` runs the library on one structural input
- `inchi_to_key()` hashes an identifier into an InChIKey

Engines are stateless operators. A session calls compute() at most once;
nothing about one call may influence the next.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ..result import GenerationResult
from ..structural_input import StructuralInput


class InChIEngine(ABC):
    """
    Abstract base class for InChI engines.

    Subclasses must implement compute(). Python raises TypeError when an
    engine without it is instantiated.

    Attributes:
    ----------
    name : str
        Human-readable identifier used in logs and error messages.
    """

    name: str = "engine"

    @abstractmethod
    def compute(self, structural_input: StructuralInput) -> GenerationResult:
        """
        Run the InChI library on a finished structural input.

        Parameters:
        ----------
        structural_input : StructuralInput
            Atoms, bonds, 0-D stereo elements and options. Must not be
            modified.

        Returns:
        -------
        GenerationResult
            Status, identifier, AuxInfo, message and log. A status outside
            OKAY/WARNING is a normal return value, not an exception.

        Raises:
        ------
        EngineError:
            When the library itself fails (cannot load, crashes, rejects
            the input before producing a status).
        """
        pass

    def is_available(self) -> bool:
        """Whether the underlying library can be used. Defaults to True."""
        return True

    def inchi_to_key(self, inchi: str) -> Optional[str]:
        """
        Derive the InChIKey of an identifier.

        Engines that cannot compute keys return None.
        """
        return None

    def __str__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.name}')"

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name='{self.name}'>"
