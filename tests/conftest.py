import sys
from pathlib import Path
from unittest.mock import patch

import pytest

# Add the project root to the path so imports work
sys.path.insert(0, str(Path(__file__).parent.parent))

from fake_firestore import FakeFirestore


@pytest.fixture
def fake_db():
    store = FakeFirestore()
    with patch("helix.database.get_db", return_value=store):
        yield store
