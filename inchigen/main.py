"""
main.py

Entry point for the inchigen smoke test.

Builds L-alanine as a graph with explicit hydrogen counts and 3-D
coordinates, generates its InChI through the factory and logs the result.
It exercises the whole path (factory, session, translator, RDKit engine)
without any input files.

Usage:
    python -m inchigen.main

Expected behavior:
    - Logs system initialization
    - Generates the InChI and InChIKey of L-alanine
    - Exits cleanly
"""

import logging
import sys

from .errors import GenerationFailedError
from .molecule import DOUBLE, SINGLE, Atom, Bond, Molecule
from .session import InChIGeneratorFactory


def configure_logging() -> None:
    """
    Configure logging for the smoke run.

    INFO level with timestamps, logger names and levels, written to stdout.
    Library modules only create loggers; handlers are set up here.
    """
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )
    logging.info("Logging configured for inchigen")


def initialize_factory() -> InChIGeneratorFactory:
    """
    Initialize the generator factory with the default RDKit engine.

    Raises:
        EngineUnavailableError: If RDKit with InChI support is not installed
    """
    factory = InChIGeneratorFactory()
    logging.info(f"Factory initialized with engine {factory.engine}")
    return factory


def build_l_alanine() -> Molecule:
    """L-alanine with 3-D coordinates and explicit hydrogen totals."""
    return Molecule(
        molecule_id="L_ALANINE",
        name="L-alanine",
        atoms=(
            Atom("a1", "C", xyz3=(-0.358, 0.819, 20.655), hydrogen_count=1),
            Atom("a2", "C", xyz3=(-1.598, -0.032, 20.905), hydrogen_count=0),
            Atom("a3", "N", xyz3=(-0.275, 2.014, 21.574), hydrogen_count=2),
            Atom("a4", "C", xyz3=(0.952, 0.043, 20.838), hydrogen_count=3),
            Atom("a5", "O", xyz3=(-2.678, 0.479, 21.093), hydrogen_count=0),
            Atom("a6", "O", xyz3=(-1.596, -1.239, 20.958), hydrogen_count=1),
        ),
        bonds=(
            Bond(("a1", "a2"), SINGLE),
            Bond(("a1", "a3"), SINGLE),
            Bond(("a1", "a4"), SINGLE),
            Bond(("a2", "a5"), DOUBLE),
            Bond(("a2", "a6"), SINGLE),
        )
    )


def run_smoke_test(factory: InChIGeneratorFactory) -> None:
    """
    Generate the InChI of L-alanine and log it.

    Raises:
        GenerationFailedError: If the engine did not return an acceptable status
    """
    logging.info("=" * 60)
    logging.info("Starting inchigen smoke test")
    logging.info("=" * 60)

    molecule = build_l_alanine()
    session = factory.get_inchi_generator(molecule)

    if not session.is_acceptable():
        raise GenerationFailedError(
            f"Smoke test failed: {session.get_return_status()}",
            details={'message': session.get_message()}
        )

    logging.info(f"InChI: {session.get_inchi()}")
    logging.info(f"InChIKey: {session.get_inchi_key()}")
    logging.info("=" * 60)
    logging.info("Smoke test PASSED")
    logging.info("=" * 60)


def main() -> None:
    """
    Configure logging, build the factory and run the smoke test.

    Exceptions propagate so failures show a full stack trace.
    """
    # Step 1: Configure logging first for visibility
    configure_logging()

    # Step 2: Initialize components
    factory = initialize_factory()

    # Step 3: Execute smoke test
    run_smoke_test(factory)

    logging.info("inchigen execution complete")


if __name__ == "__main__":
    main()
