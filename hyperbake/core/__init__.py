# hyperbake/core/__init__.py
from .defaults import DEFAULTS, Defaults
from .interpolate import InterpolateContext

__all__ = ["DEFAULTS", "Defaults", "InterpolateContext"]
