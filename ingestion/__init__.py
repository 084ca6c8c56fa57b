"""Canonical input frames for the decisioning core.

The surrounding application fetches weather, soil and market data from
several providers.  This package defines the shape those payloads must
take once they reach the core:

* :mod:`ingestion.records` – provider record types.
* :mod:`ingestion.transform.align` – mapping raw payloads to frames.
* :mod:`ingestion.quality.contracts` – pandera schemas for the frames.
"""

from .records import WeatherReading

__all__ = ["WeatherReading"]
