"""
GenerationSession: single-use wrapper around one InChI generation.

A session owns one molecule, one configuration and one engine. It runs the
translator and the engine at most once and caches whatever came out, so all
accessors are cheap, repeatable reads.

Design Principles:
- Explicit state: every accessor checks SessionState, nothing is recomputed
- Lazy: the first accessor call triggers generate() if nobody else did
- Single use: generate() may run once; a second call is a usage error no
  matter how the first one ended
- Early problems (unsupported bond order) are recorded, not raised; the
  engine is never called for them and get_prior_problem() exposes the cause
- Fatal errors propagate to the caller and are remembered, so later
  accessors raise the same error again
"""

import logging
import xml.etree.ElementTree as ET
from enum import Enum
from typing import Any, Dict, FrozenSet, Optional

from ..engine.base_engine import InChIEngine
from ..engine.rdkit_engine import RDKitInChIEngine
from ..errors import (
    EngineError,
    GenerationFailedError,
    GeneratorReuseError,
    InChIGenerationError,
    MissingIdentifierError,
)
from ..molecule import Molecule
from ..options import GenerationConfig, ProcessingOption
from ..result import GenerationResult, ReturnStatus
from ..structural_input import StructuralInput
from ..translator import EarlyProblem, StructureTranslator


# Convention used on identifier elements holding an InChI
INCHI_CONVENTION = "iupac:inchi"


class SessionState(Enum):
    """
    Lifecycle of a session.

    NOT_RUN: generate() has not been called
    SUCCEEDED: the engine returned a result (whatever its status)
    FAILED_EARLY: translation stopped on an early problem; no engine call
    FAILED: a fatal error was raised during translation or by the engine
    """
    NOT_RUN = "not_run"
    SUCCEEDED = "succeeded"
    FAILED_EARLY = "failed_early"
    FAILED = "failed"


class GenerationSession:
    """
    Generates the InChI of one molecule, once.

    Usage:
        >>> session = GenerationSession(molecule, engine=RDKitInChIEngine())
        >>> if session.is_acceptable():
        ...     print(session.get_inchi())
        ... elif session.get_prior_problem() is not None:
        ...     print(session.get_prior_problem())

    Attributes:
        molecule: Graph to generate for; only append_to_molecule() writes to it
        config: Options used for translation and by the engine
        engine: InChIEngine performing the computation
        translator: StructureTranslator building the engine input
        logger: Logger for lifecycle events
    """

    def __init__(
        self,
        molecule: Molecule,
        config: Optional[GenerationConfig] = None,
        engine: Optional[InChIEngine] = None,
        translator: Optional[StructureTranslator] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Args:
            molecule: Molecule to generate the InChI for
            config: Options; a fresh default GenerationConfig when None
            engine: Engine to call; RDKitInChIEngine when None
            translator: Translator; a new StructureTranslator when None
            logger: Logger; the module logger when None
        """
        if engine is None:
            engine = RDKitInChIEngine()

        self.molecule = molecule
        self.config = config if config is not None else GenerationConfig()
        self.engine = engine
        self.translator = translator if translator is not None else StructureTranslator()
        self.logger = logger if logger is not None else logging.getLogger(__name__)

        self._state = SessionState.NOT_RUN
        self._structural_input: Optional[StructuralInput] = None
        self._result: Optional[GenerationResult] = None
        self._prior_problem: Optional[EarlyProblem] = None
        self._error: Optional[BaseException] = None

    # =========================================================================
    # Generation
    # =========================================================================

    def generate(self) -> None:
        """
        Translate the molecule and call the engine. Can be called only once.

        Raises:
            GeneratorReuseError: If this session already ran
            TranslationError: If the molecule cannot be translated
            GenerationFailedError: If the engine fails
        """
        if self._state != SessionState.NOT_RUN:
            raise GeneratorReuseError("Generator cannot be reused")

        molecule_id = self.molecule.molecule_id
        self.logger.info(
            f"Starting InChI generation for molecule_id={molecule_id}",
            extra={"molecule_id": molecule_id, "engine": self.engine.name}
        )

        # Translation; fatal errors propagate after being recorded
        try:
            structural_input, problem = self.translator.translate(self.molecule, self.config)
        except InChIGenerationError as e:
            self._fail(e)
            self.logger.error(
                f"Translation failed for molecule_id={molecule_id}: {e}",
                extra={"molecule_id": molecule_id, "error_type": type(e).__name__}
            )
            raise
        except Exception as e:
            self._fail(e)
            self.logger.critical(
                f"Unexpected error translating molecule_id={molecule_id}: {e}",
                extra={"molecule_id": molecule_id, "error_type": type(e).__name__}
            )
            raise

        self._structural_input = structural_input

        if problem is not None:
            self._prior_problem = problem
            self._state = SessionState.FAILED_EARLY
            self.logger.warning(
                f"InChI generation stopped before the engine for molecule_id={molecule_id}: {problem}",
                extra={"molecule_id": molecule_id, "problem": problem.kind.name}
            )
            return

        # Engine call
        try:
            result = self.engine.compute(structural_input)
        except EngineError as e:
            wrapped = GenerationFailedError(f"Failed to generate InChI: {e.message}")
            self._fail(wrapped)
            self.logger.error(
                f"Engine {self.engine.name} failed for molecule_id={molecule_id}: {e}",
                extra={"molecule_id": molecule_id, "engine": self.engine.name}
            )
            raise wrapped from e
        except Exception as e:
            self._fail(e)
            self.logger.critical(
                f"Unexpected error in engine {self.engine.name}: {e}",
                extra={
                    "molecule_id": molecule_id,
                    "engine": self.engine.name,
                    "error_type": type(e).__name__
                }
            )
            raise

        self._result = result
        self._state = SessionState.SUCCEEDED
        self.logger.info(
            f"InChI generation complete for molecule_id={molecule_id}: {result.return_status}",
            extra={
                "molecule_id": molecule_id,
                "return_status": result.return_status.name,
                "has_identifier": result.has_identifier()
            }
        )

    def _fail(self, error: BaseException) -> None:
        self._error = error
        self._state = SessionState.FAILED

    def _require_result(self) -> GenerationResult:
        """Generate on first use, then return the cached result or re-raise."""
        if self._state == SessionState.NOT_RUN:
            self.generate()

        if self._state == SessionState.SUCCEEDED:
            return self._result
        if self._state == SessionState.FAILED_EARLY:
            raise GenerationFailedError(f"Failed to generate InChI: {self._prior_problem}")
        raise self._error

    # =========================================================================
    # Result accessors (lazy)
    # =========================================================================

    def get_result(self) -> GenerationResult:
        return self._require_result()

    def get_return_status(self) -> ReturnStatus:
        """
        Status from the InChI library. OKAY and WARNING indicate an InChI was
        generated; every other status means generation failed.
        """
        return self._require_result().return_status

    def is_acceptable(self) -> bool:
        return self.get_return_status().is_acceptable()

    def get_inchi(self) -> Optional[str]:
        return self._require_result().inchi

    def get_aux_info(self) -> Optional[str]:
        return self._require_result().aux_info

    def get_message(self) -> Optional[str]:
        """Error or warning message from the library."""
        return self._require_result().message

    def get_log(self) -> Optional[str]:
        return self._require_result().log

    def get_inchi_key(self) -> Optional[str]:
        """
        InChIKey of the generated identifier.

        Raises:
            MissingIdentifierError: If no identifier was produced
        """
        return self.engine.inchi_to_key(self._require_identifier())

    # =========================================================================
    # Non-generating accessors
    # =========================================================================

    def get_prior_problem(self) -> Optional[EarlyProblem]:
        """
        Problem found before the engine was reached, or None.

        Never triggers generation.
        """
        return self._prior_problem

    @property
    def state(self) -> SessionState:
        return self._state

    def is_generated(self) -> bool:
        """Whether generate() has run (successfully or not)."""
        return self._state != SessionState.NOT_RUN

    @property
    def processing_options(self) -> FrozenSet[ProcessingOption]:
        return self.config.processing_options

    @property
    def structural_input(self) -> Optional[StructuralInput]:
        """Engine input built by generate(); None before or after a fatal error."""
        return self._structural_input

    # =========================================================================
    # Identifier annotation
    # =========================================================================

    def _require_identifier(self) -> str:
        inchi = self.get_inchi()
        if inchi is None:
            raise MissingIdentifierError(
                "Failed to generate InChI",
                details={
                    "molecule_id": self.molecule.molecule_id,
                    "return_status": self.get_return_status().name
                }
            )
        return inchi

    def append_to_element(self, element: ET.Element) -> ET.Element:
        """
        Add an identifier element holding the InChI to `element`.

        The child takes the namespace of `element`, so appending to a CML
        molecule element produces a CML identifier.

        Args:
            element: Any ElementTree element

        Returns:
            The new identifier element

        Raises:
            MissingIdentifierError: If no identifier was produced
        """
        inchi = self._require_identifier()

        tag = "identifier"
        if element.tag.startswith("{"):
            namespace = element.tag[1:element.tag.index("}")]
            tag = f"{{{namespace}}}identifier"

        identifier = ET.SubElement(element, tag, {"convention": INCHI_CONVENTION})
        identifier.text = inchi
        return identifier

    def append_to_molecule(self) -> None:
        """Record the InChI in the source molecule's identifiers."""
        self.molecule.add_identifier(INCHI_CONVENTION, self._require_identifier())

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_dict(self) -> Dict[str, Any]:
        """
        Snapshot of the session for logging or storage. Does not generate.
        """
        return {
            "molecule_id": self.molecule.molecule_id,
            "engine": self.engine.name,
            "config": self.config.to_dict(),
            "state": self._state.value,
            "prior_problem": str(self._prior_problem) if self._prior_problem else None,
            "error": str(self._error) if self._error else None,
            "result": self._result.to_dict() if self._result else None,
        }

    def __repr__(self) -> str:
        return (
            f"<GenerationSession molecule_id={self.molecule.molecule_id!r} "
            f"state={self._state.value}>"
        )
