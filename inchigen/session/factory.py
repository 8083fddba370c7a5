"""
session/factory.py

Factory providing access to GenerationSession.

Constructing the factory checks that an InChI engine can actually be used,
so a missing library is reported once, up front, instead of at the first
generation. Sessions can then be requested with options in any of the
accepted forms:

    factory = InChIGeneratorFactory()
    factory.get_inchi_generator(molecule)                      # defaults
    factory.get_inchi_generator(molecule, "-SNon /FixedH")     # option string
    factory.get_inchi_generator(molecule, [InchiOption.SREL])  # option list

All three resolve to the same InchiOptions value before translation.
"""

import logging
from typing import Iterable, Optional, Union

from ..engine.base_engine import InChIEngine
from ..engine.rdkit_engine import RDKitInChIEngine
from ..errors import EngineUnavailableError
from ..molecule import Molecule
from ..options import GenerationConfig, InchiOption, InchiOptions, ProcessingOption
from .generation_session import GenerationSession


logger = logging.getLogger(__name__)

OptionsArg = Union[None, str, InchiOptions, Iterable[InchiOption]]


class InChIGeneratorFactory:
    """
    Builds GenerationSession objects sharing one engine.

    Attributes:
        engine: Engine handed to every session
    """

    def __init__(self, engine: Optional[InChIEngine] = None):
        """
        Args:
            engine: Engine to use; RDKitInChIEngine when None

        Raises:
            EngineUnavailableError: If the engine cannot be used
        """
        self.engine = engine if engine is not None else RDKitInChIEngine()

        if not self.engine.is_available():
            raise EngineUnavailableError(
                f"Unable to load native code for engine {self.engine.name!r}; "
                f"install RDKit with InChI support (pip install rdkit)"
            )

        logger.info(f"InChIGeneratorFactory initialized with engine={self.engine.name}")

    def get_inchi_generator(
        self,
        molecule: Molecule,
        options: OptionsArg = None,
        processing_options: Optional[Iterable[ProcessingOption]] = None
    ) -> GenerationSession:
        """
        Get a generation session for a molecule.

        Args:
            molecule: Molecule to generate the InChI for
            options: None, a space-delimited option string, InchiOptions, or
                     an iterable of InchiOption
            processing_options: Translator options; {USE_BONDS} when None

        Returns:
            A fresh, not yet generated GenerationSession

        Raises:
            InvalidOptionError: If an option is not recognised
        """
        config = GenerationConfig.build(options=options, processing_options=processing_options)
        return GenerationSession(molecule=molecule, config=config, engine=self.engine)
