"""Data contracts for the frames entering the decisioning core.

We use the [Pandera](https://pandera.readthedocs.io/) library to define
schemas for the weather inputs.  Schemas act both as documentation
and as runtime validation: a daily series or a set of provider
readings must pass its schema before any indicator is computed.
Failures are re-raised as :class:`utils.errors.InvalidInputError` by
:func:`validate_frame` so callers only deal with one exception type.

See ``ingestion/transform/align.py`` for how the frames are built.
"""

import pandas as pd
import pandera as pa
from pandera import Check, Column, DataFrameSchema
from pandera.errors import SchemaError, SchemaErrors

from utils.errors import InvalidInputError


DailyWeatherSchema = DataFrameSchema(
    {
        "date": Column(pa.DateTime, nullable=True, required=False, coerce=True),
        "precipitation": Column(float, nullable=True, checks=Check.ge(0)),
        "temp_max": Column(float, nullable=True, checks=Check.between(-60, 65)),
        "temp_min": Column(float, nullable=True, checks=Check.between(-60, 65)),
        "humidity": Column(float, nullable=True, checks=Check.between(0, 100)),
        "wind_speed": Column(float, nullable=True, checks=Check.ge(0)),
    },
    strict=False,
    coerce=True,
    name="DailyWeather",
)


ReadingsSchema = DataFrameSchema(
    {
        "source": Column(str, nullable=False),
        "precipitation": Column(float, nullable=False, checks=Check.ge(0)),
        "temperature_max": Column(float, nullable=False),
        "temperature_min": Column(float, nullable=False),
        "humidity": Column(float, nullable=True, checks=Check.between(0, 100)),
        "wind_speed": Column(float, nullable=True, checks=Check.ge(0)),
    },
    strict=False,
    coerce=True,
    name="ProviderReadings",
)


def validate_frame(df: pd.DataFrame, schema: DataFrameSchema) -> pd.DataFrame:
    """Validate ``df`` against ``schema`` and return the coerced frame."""
    try:
        return schema.validate(df)
    except (SchemaError, SchemaErrors) as exc:
        raise InvalidInputError(f"{schema.name} validation failed: {exc}") from exc


__all__ = ["DailyWeatherSchema", "ReadingsSchema", "validate_frame"]
