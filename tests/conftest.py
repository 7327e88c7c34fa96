"""
Pytest configuration for streampipe tests.

Puts the repository root on the Python path so the tests can import the
streampipe package without installing it, and provides shared records.
"""

import sys
from pathlib import Path
from types import SimpleNamespace

import pytest

# Add the parent directory to the Python path
parent_dir = Path(__file__).parent.parent
if str(parent_dir) not in sys.path:
    sys.path.insert(0, str(parent_dir))


@pytest.fixture
def people():
    """Mixed dict and object records with repeated ages"""
    return [
        {"age": 20, "name": "Johny"},
        SimpleNamespace(age=20, name="Mario"),
        {"age": 30, "name": "Anna"},
        {"age": 30, "name": "Zeus"},
        SimpleNamespace(age=20, name="Rachel"),
        SimpleNamespace(age=40, name="Tomas"),
    ]


@pytest.fixture
def codes():
    return ["a1", "a2", "b1", "b2", "b3", "c1", "c3"]
