"""Record types handed over by the weather provider collaborators."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

DAILY_COLUMNS = ["date", "precipitation", "temp_max", "temp_min", "humidity", "wind_speed"]

DEFAULT_HUMIDITY = 70.0  # %
DEFAULT_WIND_SPEED = 2.0  # m/s


@dataclass(frozen=True)
class WeatherReading:
    """One provider's observation for a given date and location."""

    source: str
    precipitation: float
    temperature_max: float
    temperature_min: float
    humidity: Optional[float] = None
    wind_speed: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


__all__ = ["WeatherReading", "DAILY_COLUMNS", "DEFAULT_HUMIDITY", "DEFAULT_WIND_SPEED"]
