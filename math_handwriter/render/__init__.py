"""
Render sinks for drawing plans.

The matplotlib figure lives in `math_handwriter.render.visualize` and is not
imported here, so raster/Excalidraw export does not pull in pyplot.
"""

from .excalidraw import (
    ExcalidrawStyle,
    save_excalidraw,
    to_excalidraw_elements,
    to_excalidraw_scene,
)
from .raster import PlanRenderer

__all__ = [
    'ExcalidrawStyle',
    'PlanRenderer',
    'save_excalidraw',
    'to_excalidraw_elements',
    'to_excalidraw_scene',
]
