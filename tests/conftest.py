"""Shared fixtures for the sewer condition test suite."""

import pytest

from sewer_condition.classifier import SectionClassifier
from sewer_condition.config.models import ReferenceData


@pytest.fixture(scope="session")
def reference_data():
    """Built-in reference data; read-only, so one copy serves every test."""
    return ReferenceData.default()


@pytest.fixture
def diagnostics():
    """List that receives every diagnostic reported during a test."""
    return []


@pytest.fixture
def classifier(reference_data, diagnostics):
    """Classifier on the built-in tables that records diagnostics into a list."""
    return SectionClassifier(reference_data, diagnostic_sink=diagnostics.append)
