import sys
import pathlib

import pytest

# Ensure project root is on sys.path so the flat modules import when pytest
# runs from a different working directory or on a single test file.
_ROOT = pathlib.Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from ladder import _build_ladder


@pytest.fixture(autouse=True)
def cold_ladder_cache():
    _build_ladder.cache_clear()
    yield
