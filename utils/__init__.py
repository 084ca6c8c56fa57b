"""Top‑level module for utility functions.

The :mod:`utils` package collects functionality shared across the
decisioning core:

* :mod:`utils.data_quality` – cross-source weather validation.
* :mod:`utils.numeric` – clamping, half-up rounding, variance helpers.
* :mod:`utils.errors` – exception taxonomy.

Only the dependency-free modules are imported here; import
``utils.data_quality`` explicitly since it depends on :mod:`reference`,
which itself relies on :mod:`utils.errors`.
"""

from . import errors  # noqa: F401
from . import numeric  # noqa: F401

__all__ = [
    "errors",
    "numeric",
]
