"""Pytest configuration and shared fixtures."""

import pytest
import sys
import numpy as np
from pathlib import Path

# Add the source directory to the Python path
src_dir = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_dir))


@pytest.fixture
def rng():
    """Provide a seeded random generator for reproducible tests."""
    return np.random.default_rng(42)

