from .align import align_daily, readings_frame

__all__ = ["align_daily", "readings_frame"]
