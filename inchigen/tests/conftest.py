"""
tests/conftest.py

Shared pytest fixtures.
"""

import pytest

from inchigen.tests.fakes import FakeEngine, l_alanine, methane


@pytest.fixture
def fake_engine():
    return FakeEngine()


@pytest.fixture
def alanine():
    return l_alanine()


@pytest.fixture
def single_carbon():
    return methane()
