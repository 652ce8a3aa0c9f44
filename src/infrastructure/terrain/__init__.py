"""Infrastructure adapters for the terrain bounded context.

Adapter exported for simplified imports.
"""

from .grid_adapter import GridElevationAdapter

__all__ = ["GridElevationAdapter"]
