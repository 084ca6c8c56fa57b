from .contracts import DailyWeatherSchema, ReadingsSchema, validate_frame

__all__ = ["DailyWeatherSchema", "ReadingsSchema", "validate_frame"]
