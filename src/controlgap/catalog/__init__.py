"""Standard control catalog definitions."""

from controlgap.catalog.standard_controls import STANDARD_CONTROLS

__all__ = [
    "STANDARD_CONTROLS",
]
