"""Shared fixtures for the streaming HTML builder test suite."""

import pytest

from streaming_html_builder.diagnostics.concerns import default_context


@pytest.fixture(autouse=True)
def reset_default_diagnostics():
    """Leave the process-wide concern table disabled and empty around every test."""
    default_context().disable()
    yield
    default_context().disable()
