from __future__ import annotations

import pytest

from wcr.data import Dataset, build_dataset


@pytest.fixture(scope="session")
def dataset() -> Dataset:
    return build_dataset()
