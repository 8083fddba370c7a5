"""
tests/test_main.py

Tests for the smoke-test entry point, run against FakeEngine.
"""

import pytest

from inchigen.errors import GenerationFailedError
from inchigen.main import build_l_alanine, run_smoke_test
from inchigen.result import GenerationResult, ReturnStatus
from inchigen.session import InChIGeneratorFactory
from inchigen.tests.fakes import FakeEngine, l_alanine


class TestSmokeTest:
    """Test suite for main.run_smoke_test()."""

    def test_alanine_matches_fixture(self):
        """Test that the entry point builds the same graph as the test fixture."""
        built = build_l_alanine()
        assert built.atoms == l_alanine().atoms
        assert built.bonds == l_alanine().bonds

    def test_smoke_test_passes(self):
        """Test that an acceptable result completes the smoke test."""
        engine = FakeEngine()
        run_smoke_test(InChIGeneratorFactory(engine=engine))
        assert len(engine.calls) == 1

    def test_smoke_test_fails_loudly(self):
        """Test that a rejected structure raises."""
        engine = FakeEngine(GenerationResult(return_status=ReturnStatus.FATAL, message="boom"))
        with pytest.raises(GenerationFailedError, match="FATAL"):
            run_smoke_test(InChIGeneratorFactory(engine=engine))
