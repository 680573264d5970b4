from __future__ import annotations

import itertools
import sys
from typing import List

import pytest

from approxgen.compiler.loader import compile_and_load

_module_ids = itertools.count()


@pytest.fixture
def load():
    """Generate a declaration source and import it as a fresh module."""
    loaded: List[str] = []

    def _load(src: str, **kwargs):
        name = f"approxgen_generated_{next(_module_ids)}"
        loaded.append(name)
        return compile_and_load(src, name, **kwargs)

    yield _load
    for name in loaded:
        sys.modules.pop(name, None)
