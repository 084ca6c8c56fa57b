"""Shared fixtures for the decisioning core tests."""

from __future__ import annotations

import copy
from datetime import date, timedelta
from typing import Any, Dict, List, Optional

import pytest
import yaml

from reference import ReferenceData, load_reference
from reference.loader import DEFAULT_PATH


@pytest.fixture(scope="session")
def reference_doc() -> Dict[str, Any]:
    with open(DEFAULT_PATH, "r", encoding="utf-8") as f:
        return yaml.safe_load(f)


@pytest.fixture()
def raw_reference(reference_doc: Dict[str, Any]) -> Dict[str, Any]:
    """Mutable copy of the packaged reference document."""
    return copy.deepcopy(reference_doc)


@pytest.fixture(scope="session")
def reference() -> ReferenceData:
    return load_reference()


@pytest.fixture()
def july_31() -> date:
    return date(2024, 7, 31)


def daily_rows(
    precipitation: List[float],
    *,
    temp_max: float = 33.0,
    temp_min: float = 22.0,
    humidity: Optional[float] = 60.0,
    wind_speed: Optional[float] = 2.5,
    end: Optional[date] = None,
) -> List[Dict[str, Any]]:
    """Build a list of per-day dicts ending on ``end`` (undated if None)."""
    rows = []
    n = len(precipitation)
    for i, p in enumerate(precipitation):
        row: Dict[str, Any] = {
            "precipitation": p,
            "temp_max": temp_max,
            "temp_min": temp_min,
            "humidity": humidity,
            "wind_speed": wind_speed,
        }
        if end is not None:
            row["date"] = (end - timedelta(days=n - 1 - i)).isoformat()
        rows.append(row)
    return rows
