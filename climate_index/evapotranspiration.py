"""
climate_index.evapotranspiration
--------------------------------

Reference evapotranspiration (ET0) following a temperature-driven
approximation of the FAO‑56 Penman‑Monteith equation.  Solar
radiation is not measured by the providers we consume, so it is
estimated from the diurnal temperature range (Hargreaves' radiation
formula, ``Rs = 0.16 * sqrt(Tmax - Tmin) * Ra``).

All functions accept scalars or ``numpy`` arrays and broadcast like
ordinary ``numpy`` expressions.

References
----------
Allen, R. G. et al. (1998). *Crop evapotranspiration – Guidelines for
computing crop water requirements*.  FAO Irrigation and drainage
paper 56, equations 11–13, 21–25 and 50.
"""

from __future__ import annotations

from typing import Union

import numpy as np

ArrayLike = Union[float, np.ndarray]

SOLAR_CONSTANT = 0.0820  # MJ m-2 min-1
PSYCHROMETRIC_CONSTANT = 0.665  # kPa °C-1 scaled as in the field formula
RADIATION_ADJUSTMENT = 0.16  # interior locations


def saturation_vapour_pressure(temperature: ArrayLike) -> ArrayLike:
    """e°(T) in kPa."""
    return 0.6108 * np.exp(17.27 * temperature / (temperature + 237.3))


def extraterrestrial_radiation(latitude: float, day_of_year: ArrayLike) -> ArrayLike:
    """Daily extraterrestrial radiation Ra (MJ m-2 day-1).

    The sunset hour angle argument is clipped to [-1, 1] so polar
    latitudes yield 24h daylight or darkness instead of NaN.
    """
    doy = np.asarray(day_of_year, dtype=float)
    dr = 1 + 0.033 * np.cos(2 * np.pi * doy / 365)
    decl = 0.409 * np.sin(2 * np.pi * doy / 365 - 1.39)
    lat = np.deg2rad(latitude)
    ws = np.arccos(np.clip(-np.tan(lat) * np.tan(decl), -1.0, 1.0))
    ra = (
        24 * 60 / np.pi * SOLAR_CONSTANT * dr
        * (ws * np.sin(lat) * np.sin(decl) + np.cos(lat) * np.cos(decl) * np.sin(ws))
    )
    return ra


def daily_et0(
    temp_max: ArrayLike,
    temp_min: ArrayLike,
    humidity: ArrayLike,
    wind_speed: ArrayLike,
    latitude: float,
    day_of_year: ArrayLike,
) -> ArrayLike:
    """Reference evapotranspiration in mm/day, never negative.

    Parameters
    ----------
    temp_max, temp_min : float or array
        Daily extreme temperatures in °C.
    humidity : float or array
        Mean relative humidity in %.
    wind_speed : float or array
        Wind speed at 2 m in m/s.
    latitude : float
        Site latitude in decimal degrees.
    day_of_year : int or array
        Julian day (1–366).
    """
    tmax = np.asarray(temp_max, dtype=float)
    tmin = np.asarray(temp_min, dtype=float)
    rh = np.asarray(humidity, dtype=float)
    u2 = np.asarray(wind_speed, dtype=float)

    tmean = (tmax + tmin) / 2
    es = (saturation_vapour_pressure(tmax) + saturation_vapour_pressure(tmin)) / 2
    ea = es * rh / 100
    delta = 4098 * es / (tmean + 237.3) ** 2
    gamma = PSYCHROMETRIC_CONSTANT

    ra = extraterrestrial_radiation(latitude, day_of_year)
    rs = RADIATION_ADJUSTMENT * np.sqrt(np.abs(tmax - tmin)) * ra

    et0 = (0.408 * delta * rs + gamma * 900 / (tmean + 273) * u2 * (es - ea)) / (
        delta + gamma * (1 + 0.34 * u2)
    )
    et0 = np.maximum(et0, 0.0)
    if np.ndim(et0) == 0:
        return float(et0)
    return et0


__all__ = ["saturation_vapour_pressure", "extraterrestrial_radiation", "daily_et0"]
