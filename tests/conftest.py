from __future__ import annotations

from pathlib import Path

import pytest

from nhs_dispensing.data.store import DataStore

from tests.helpers import sample_rows, write_csv


@pytest.fixture
def sample_csv(tmp_path: Path) -> Path:
    return write_csv(tmp_path / "dispensing_data_202509.csv", sample_rows())


@pytest.fixture
def store(sample_csv: Path) -> DataStore:
    return DataStore(tolerance=0, pair_policy="raise", workers=1).load(sample_csv)


@pytest.fixture
def clean(store: DataStore):
    return store.clean
