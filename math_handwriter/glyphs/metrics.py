"""
Handwritten Glyph Database

Symbol metrics provider backed by a JSON file of hand-designed glyphs.
Each glyph is defined in a normalized coordinate space (0-1) where (0,0) is
top-left and (1,1) is bottom-right.

JSON format (glyph_data.json):
    {
        "version": 1,
        "glyphs": {
            "x": {"baseline": 0.7, "aspect_ratio": 0.7, "advance": 0.75,
                  "strokes": [[[0.15, 0.25], [0.75, 0.85]], ...]},
            ...
        }
    }

Optional per-glyph "delays": [ms, ...] gives a pre-delay for each stroke.

Usage:
    from math_handwriter.glyphs import default_glyphs

    glyphs = default_glyphs()
    metrics = glyphs.lookup("x")     # never fails
    "x" in glyphs                    # True
"""

import json
import logging
import threading
from functools import lru_cache
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Protocol, Union

from ..data.types import Stroke, SymbolMetrics

logger = logging.getLogger(__name__)

DEFAULT_GLYPH_PATH = Path(__file__).parent / "glyph_data.json"

# Placeholder for characters missing from the database: a boxed X
PLACEHOLDER_STROKES = (
    Stroke.from_list([[0.1, 0.1], [0.9, 0.1], [0.9, 0.9], [0.1, 0.9], [0.1, 0.1]]),
    Stroke.from_list([[0.1, 0.1], [0.9, 0.9]]),
    Stroke.from_list([[0.9, 0.1], [0.1, 0.9]]),
)
PLACEHOLDER_BASELINE = 0.85
PLACEHOLDER_ASPECT_RATIO = 0.7
PLACEHOLDER_ADVANCE = 0.75


class MetricsProvider(Protocol):
    """Anything that can turn a character into SymbolMetrics."""

    def lookup(self, char: str) -> SymbolMetrics:
        ...


def placeholder_metrics(char: str) -> SymbolMetrics:
    """Deterministic placeholder glyph for an unknown character."""
    return SymbolMetrics(
        char=char,
        strokes=PLACEHOLDER_STROKES,
        baseline=PLACEHOLDER_BASELINE,
        aspect_ratio=PLACEHOLDER_ASPECT_RATIO,
        advance=PLACEHOLDER_ADVANCE,
    )


def _metrics_from_entry(char: str, entry: Dict) -> SymbolMetrics:
    """Build SymbolMetrics from one JSON glyph entry."""
    try:
        raw_strokes = entry['strokes']
        delays = entry.get('delays') or [0.0] * len(raw_strokes)
        if len(delays) != len(raw_strokes):
            raise ValueError(
                f"Malformed glyph entry for {char!r}: {len(raw_strokes)} strokes but {len(delays)} delays")
        strokes = tuple(
            Stroke.from_list(points, delay=float(delay))
            for points, delay in zip(raw_strokes, delays)
        )
        return SymbolMetrics(
            char=char,
            strokes=strokes,
            baseline=float(entry['baseline']),
            aspect_ratio=float(entry['aspect_ratio']),
            advance=float(entry['advance']),
        )
    except (KeyError, TypeError, IndexError) as e:
        raise ValueError(f"Malformed glyph entry for {char!r}: {e}") from e


class GlyphDatabase:
    """Immutable character -> SymbolMetrics mapping with placeholder fallback."""

    def __init__(self, glyphs: Optional[Dict[str, SymbolMetrics]] = None):
        self._glyphs: Dict[str, SymbolMetrics] = dict(glyphs or {})
        self._warned = set()
        self._warn_lock = threading.Lock()

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> 'GlyphDatabase':
        """Load glyphs from a JSON file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Glyph data not found at {path}")

        with open(path, 'r', encoding='utf-8') as f:
            raw_data = json.load(f)

        raw_glyphs = raw_data.get('glyphs', raw_data)
        glyphs = {char: _metrics_from_entry(char, entry) for char, entry in raw_glyphs.items()}
        logger.debug("Loaded %d glyphs from %s", len(glyphs), path)
        return cls(glyphs)

    def lookup(self, char: str) -> SymbolMetrics:
        """Get metrics for a character. Unknown characters get the placeholder."""
        metrics = self._glyphs.get(char)
        if metrics is not None:
            return metrics

        with self._warn_lock:
            first_time = char not in self._warned
            self._warned.add(char)
        if first_time:
            logger.warning("Glyph not found for character: %r (using placeholder)", char)
        return placeholder_metrics(char)

    def register(self, metrics: Iterable[SymbolMetrics]) -> 'GlyphDatabase':
        """Return a new database with extra (or replaced) glyphs."""
        merged = dict(self._glyphs)
        for m in metrics:
            merged[m.char] = m
        return GlyphDatabase(merged)

    def chars(self) -> List[str]:
        return list(self._glyphs.keys())

    def __contains__(self, char: str) -> bool:
        return char in self._glyphs

    def __len__(self) -> int:
        return len(self._glyphs)

    def __repr__(self) -> str:
        return f"GlyphDatabase({len(self._glyphs)} glyphs)"


@lru_cache(maxsize=1)
def default_glyphs() -> GlyphDatabase:
    """The glyph set shipped with the package (loaded once)."""
    return GlyphDatabase.from_json(DEFAULT_GLYPH_PATH)
