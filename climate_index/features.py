"""
climate_index.features
----------------------

This module reduces a daily weather time series into the scalar
climate indicators consumed by :mod:`climate_index.crop_risk`:

* ``consecutive_dry_days`` – length of the dry spell (days with less
  than 1 mm of rain).  Both the longest spell anywhere in the window
  and the spell ending on the last day are computed; the larger of the
  two is reported.
* ``total_precipitation`` and ``average_temperature`` (mean of the
  daily ``(Tmax + Tmin) / 2``) together with the window's
  ``max_temperature``.
* ``et0`` – the mean daily reference evapotranspiration, see
  :mod:`climate_index.evapotranspiration`.
* ``precipitation_anomaly`` / ``temperature_anomaly`` – percentage
  deviation of the window totals from the monthly climatological
  normals of the reference month.

The reference date is always an explicit argument.  Two calls with
the same series, latitude and reference date return the same
indicators.

Example usage::

    from datetime import date
    from climate_index.features import WeatherIndicatorCalculator

    calc = WeatherIndicatorCalculator()
    indicators = calc.calculate(daily_block, latitude=12.37,
                                reference_date=date(2024, 7, 31))

See Also
--------
ingestion.transform.align : for the accepted input shapes.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from datetime import date
from typing import Any, Dict, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from ingestion.quality.contracts import DailyWeatherSchema, validate_frame
from ingestion.records import DEFAULT_HUMIDITY, DEFAULT_WIND_SPEED
from ingestion.transform.align import DailyInput, align_daily
from reference import MonthlyNormals, ReferenceData, load_reference

from .evapotranspiration import daily_et0

logger = logging.getLogger(__name__)

DRY_DAY_THRESHOLD_MM = 1.0


@dataclass(frozen=True)
class ClimateIndicators:
    """Scalar climate indicators of one weather window."""

    consecutive_dry_days: int
    total_precipitation: float
    average_temperature: float
    max_temperature: float
    et0: float
    precipitation_anomaly: float
    temperature_anomaly: float
    days: int = 0
    sufficient_data: bool = True

    @classmethod
    def insufficient(cls, days: int = 0) -> "ClimateIndicators":
        """Sentinel returned when the window is empty or too short."""
        return cls(
            consecutive_dry_days=0,
            total_precipitation=0.0,
            average_temperature=0.0,
            max_temperature=0.0,
            et0=0.0,
            precipitation_anomaly=0.0,
            temperature_anomaly=0.0,
            days=days,
            sufficient_data=False,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def dry_spells(
    precipitation: Sequence[float], threshold: float = DRY_DAY_THRESHOLD_MM
) -> Tuple[int, int]:
    """Return ``(longest, trailing)`` dry spell lengths in days.

    ``trailing`` is the spell ending on the last element, i.e. the
    current dry spell.
    """
    dry = np.asarray(precipitation, dtype=float) < threshold
    longest = current = 0
    for is_dry in dry:
        current = current + 1 if is_dry else 0
        longest = max(longest, current)
    return longest, current


def percentage_anomaly(observed: float, normal: float) -> float:
    """Deviation of ``observed`` from ``normal`` in percent, 0 if no normal."""
    if normal <= 0:
        return 0.0
    return (observed - normal) / normal * 100.0


class WeatherIndicatorCalculator:
    """Turn a daily weather series into :class:`ClimateIndicators`.

    Parameters
    ----------
    reference : ReferenceData, optional
        Supplies the monthly normals.  The packaged defaults are loaded
        when omitted.
    normals : MonthlyNormals, optional
        Overrides ``reference.normals``.
    min_days : int, default 1
        Windows with fewer valid days return the insufficient-data
        sentinel.
    """

    def __init__(
        self,
        reference: Optional[ReferenceData] = None,
        *,
        normals: Optional[MonthlyNormals] = None,
        min_days: int = 1,
    ) -> None:
        if normals is None:
            normals = (reference or load_reference()).normals
        self.normals = normals
        self.min_days = max(1, int(min_days))

    def prepare(self, series: DailyInput) -> pd.DataFrame:
        """Align, clean and validate the raw series.

        Days without temperatures are kept: their rainfall still counts.
        """
        df = validate_frame(align_daily(series), DailyWeatherSchema)
        df["precipitation"] = df["precipitation"].fillna(0.0)
        df["humidity"] = df["humidity"].fillna(DEFAULT_HUMIDITY)
        df["wind_speed"] = df["wind_speed"].fillna(DEFAULT_WIND_SPEED)
        return df

    def calculate(
        self,
        series: DailyInput,
        latitude: float,
        *,
        reference_date: date,
    ) -> ClimateIndicators:
        """Compute the indicators of ``series``.

        Parameters
        ----------
        series : DataFrame, mapping of lists or iterable of dicts
            Ordered daily observations (oldest first).
        latitude : float
            Site latitude, used by the ET0 radiation term.
        reference_date : datetime.date
            "Today" for the computation: selects the monthly normals and
            the day of year for undated rows.

        Returns
        -------
        ClimateIndicators
            ``ClimateIndicators.insufficient()`` when fewer than
            ``min_days`` usable days remain.
        """
        df = self.prepare(series)
        if len(df) < self.min_days:
            logger.warning(
                "Insufficient weather data: %d day(s), %d required", len(df), self.min_days
            )
            return ClimateIndicators.insufficient(days=len(df))

        has_temp = df["temp_max"].notna() & df["temp_min"].notna()
        if not has_temp.any():
            logger.warning("No temperature readings in %d day(s) of weather data", len(df))
            return ClimateIndicators.insufficient(days=len(df))
        if not has_temp.all():
            logger.warning(
                "%d day(s) without temperatures left out of temperature and ET0 statistics",
                int((~has_temp).sum()),
            )

        # rainfall statistics use every day of the window
        precip = df["precipitation"].to_numpy(dtype=float)
        longest, trailing = dry_spells(precip)
        total_precipitation = float(precip.sum())

        temps = df.loc[has_temp]
        tmax = temps["temp_max"].to_numpy(dtype=float)
        tmin = temps["temp_min"].to_numpy(dtype=float)
        average_temperature = float(((tmax + tmin) / 2).mean())
        max_temperature = float(tmax.max())

        ref_doy = reference_date.timetuple().tm_yday
        doy = temps["date"].dt.dayofyear.fillna(ref_doy).to_numpy(dtype=float)
        et0_values = daily_et0(
            tmax,
            tmin,
            temps["humidity"].to_numpy(dtype=float),
            temps["wind_speed"].to_numpy(dtype=float),
            latitude,
            doy,
        )

        month = reference_date.month
        indicators = ClimateIndicators(
            consecutive_dry_days=int(max(longest, trailing)),
            total_precipitation=total_precipitation,
            average_temperature=average_temperature,
            max_temperature=max_temperature,
            et0=float(np.mean(et0_values)),
            precipitation_anomaly=percentage_anomaly(
                total_precipitation, self.normals.precipitation(month)
            ),
            temperature_anomaly=percentage_anomaly(
                average_temperature, self.normals.temperature(month)
            ),
            days=len(df),
        )
        logger.debug("Climate indicators over %d days: %s", len(df), indicators)
        return indicators


def calculate_indicators(
    series: DailyInput,
    latitude: float,
    *,
    reference_date: date,
    reference: Optional[ReferenceData] = None,
) -> ClimateIndicators:
    """Functional shortcut for :meth:`WeatherIndicatorCalculator.calculate`."""
    return WeatherIndicatorCalculator(reference).calculate(
        series, latitude, reference_date=reference_date
    )


__all__ = [
    "ClimateIndicators",
    "WeatherIndicatorCalculator",
    "calculate_indicators",
    "dry_spells",
    "percentage_anomaly",
]
