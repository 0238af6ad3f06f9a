"""
Excalidraw export.

Each stroke instruction with at least two points becomes one `freedraw`
element. Points are stored relative to the element's top-left corner.
Element ids and seeds are derived from the stroke index so the same plan
always exports the same scene.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..animation.plan import DrawingPlan


@dataclass(frozen=True)
class ExcalidrawStyle:
    stroke_color: str = '#000000'
    stroke_width: float = 2
    roughness: float = 0
    opacity: float = 100
    id_prefix: str = 'math-handwriter'


def to_excalidraw_elements(plan: DrawingPlan, style: Optional[ExcalidrawStyle] = None) -> List[Dict[str, Any]]:
    """Free-draw element dicts, one per drawable stroke."""
    style = style or ExcalidrawStyle()
    elements = []

    for instruction in plan.stroke_instructions:
        points = instruction.points
        if len(points) < 2:
            continue

        xs = [p.x for p in points]
        ys = [p.y for p in points]
        min_x, min_y = min(xs), min(ys)
        index = len(elements)

        elements.append({
            'type': 'freedraw',
            'id': f"{style.id_prefix}-{index}",
            'x': min_x,
            'y': min_y,
            'width': max(xs) - min_x,
            'height': max(ys) - min_y,
            'angle': 0,
            'strokeColor': style.stroke_color,
            'backgroundColor': 'transparent',
            'fillStyle': 'solid',
            'strokeWidth': style.stroke_width,
            'strokeStyle': 'solid',
            'roughness': style.roughness,
            'opacity': style.opacity,
            'groupIds': [],
            'seed': index + 1,
            'version': 1,
            'versionNonce': index + 1,
            'isDeleted': False,
            'points': [[p.x - min_x, p.y - min_y] for p in points],
            'pressures': [],
            'simulatePressure': True,
            'lastCommittedPoint': None,
        })

    return elements


def to_excalidraw_scene(plan: DrawingPlan, style: Optional[ExcalidrawStyle] = None) -> Dict[str, Any]:
    """A complete .excalidraw document."""
    return {
        'type': 'excalidraw',
        'version': 2,
        'source': 'math_handwriter',
        'elements': to_excalidraw_elements(plan, style),
        'appState': {'viewBackgroundColor': '#ffffff'},
        'files': {},
    }


def save_excalidraw(plan: DrawingPlan, path: Union[str, Path], style: Optional[ExcalidrawStyle] = None) -> Path:
    path = Path(path)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(to_excalidraw_scene(plan, style), f, indent=2)
    return path
