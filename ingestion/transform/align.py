"""Functions to bring provider payloads into the canonical frames.

The weather collaborators deliver data in several shapes:

* an Open‑Meteo style ``daily`` block, i.e. a mapping of parallel
  lists (``time``, ``precipitation_sum``, ``temperature_2m_max`` …);
* a list of per-day dicts, possibly using camelCase keys;
* an already built ``pandas.DataFrame``.

:func:`align_daily` maps all of them onto the columns
``['date','precipitation','temp_max','temp_min','humidity','wind_speed']``
and :func:`readings_frame` turns a list of
:class:`ingestion.records.WeatherReading` into one row per provider.
Neither function validates values; that is the job of
``ingestion/quality/contracts.py``.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Sequence, Union

import pandas as pd

from ingestion.records import DAILY_COLUMNS, WeatherReading

# provider key -> canonical column
_ALIASES: Dict[str, str] = {
    "time": "date",
    "day": "date",
    "precipitation_sum": "precipitation",
    "precip": "precipitation",
    "temperature_2m_max": "temp_max",
    "tempMax": "temp_max",
    "temperatureMax": "temp_max",
    "temperature_max": "temp_max",
    "temperature_2m_min": "temp_min",
    "tempMin": "temp_min",
    "temperatureMin": "temp_min",
    "temperature_min": "temp_min",
    "relative_humidity_2m": "humidity",
    "relative_humidity_2m_mean": "humidity",
    "wind_speed_10m": "wind_speed",
    "wind_speed_10m_max": "wind_speed",
    "windSpeed": "wind_speed",
}

DailyInput = Union[pd.DataFrame, Mapping[str, Sequence[Any]], Iterable[Mapping[str, Any]], None]


def _frame_from_mapping(block: Mapping[str, Sequence[Any]]) -> pd.DataFrame:
    # Parallel lists may have different lengths when a provider drops a
    # variable for the last days; pad with NaN instead of failing.
    series = {key: pd.Series(list(values), dtype="object") for key, values in block.items()}
    return pd.DataFrame(series)


def align_daily(data: DailyInput) -> pd.DataFrame:
    """Return the canonical daily weather frame for ``data``.

    Parameters
    ----------
    data : DataFrame, mapping of lists, iterable of dicts or None
        Raw daily series from a weather provider.  ``None`` or an empty
        container yields an empty frame with the canonical columns.

    Returns
    -------
    pandas.DataFrame
        Frame ordered like the input with columns ``DAILY_COLUMNS``.
        Missing optional variables are filled with NaN.
    """
    if data is None:
        df = pd.DataFrame(columns=DAILY_COLUMNS)
    elif isinstance(data, pd.DataFrame):
        df = data.copy()
    elif isinstance(data, Mapping):
        block = data.get("daily", data)
        df = _frame_from_mapping(block)
    else:
        df = pd.DataFrame(list(data))

    df = df.rename(columns={k: v for k, v in _ALIASES.items() if k in df.columns})
    for col in DAILY_COLUMNS:
        if col not in df.columns:
            df[col] = None
    df = df[DAILY_COLUMNS].reset_index(drop=True)
    for col in DAILY_COLUMNS[1:]:
        df[col] = pd.to_numeric(df[col], errors="coerce").astype(float)
    df["date"] = pd.to_datetime(df["date"], errors="coerce")
    return df


def readings_frame(readings: Iterable[WeatherReading]) -> pd.DataFrame:
    """One row per provider reading, columns named like the record fields."""
    rows: List[Dict[str, Any]] = [r.to_dict() for r in readings]
    columns = ["source", "precipitation", "temperature_max", "temperature_min", "humidity", "wind_speed"]
    if not rows:
        return pd.DataFrame(columns=columns)
    df = pd.DataFrame(rows, columns=columns)
    for col in columns[1:]:
        df[col] = pd.to_numeric(df[col], errors="coerce").astype(float)
    return df


__all__ = ["align_daily", "readings_frame"]
