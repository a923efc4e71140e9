"""
Pytest configuration and shared fixtures for reviewproof tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers and settings
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

# Get the project root (parent of tests/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

# Add both project root and tests root to sys.path
for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

# =============================================================================
# Import fixtures using importlib (more robust for pytest loading)
# =============================================================================

import importlib

_common = importlib.import_module("fixtures.common")

make_review = _common.make_review
make_reviews = _common.make_reviews
make_tree = _common.make_tree
sample_reviews = _common.sample_reviews
write_sample_dataset = _common.write_sample_dataset


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def reviews():
    """Provide the three-review sample scenario."""
    return sample_reviews()


@pytest.fixture
def tree(reviews):
    """Provide a tree batch-built from the sample scenario."""
    return make_tree(reviews)


@pytest.fixture
def dataset_file(tmp_path):
    """Provide a five-review JSON-lines dataset on disk."""
    return write_sample_dataset(tmp_path / "reviews.jsonl", count=5)


@pytest.fixture
def root_log(tmp_path):
    """Provide a path for a root log that does not exist yet."""
    return tmp_path / "roots" / "merkle_roots.txt"


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    """Keep REVIEWPROOF_* variables from the host out of tests."""
    for name in (
        "REVIEWPROOF_ROOT_LOG",
        "REVIEWPROOF_DATASET",
        "REVIEWPROOF_MAX_RECORDS",
        "REVIEWPROOF_TAMPER_SEED",
        "REVIEWPROOF_LOG_LEVEL",
        "REVIEWPROOF_LOG_FILE",
    ):
        monkeypatch.delenv(name, raising=False)


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
