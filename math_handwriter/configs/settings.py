"""
Handwriter configuration.

Numeric knobs only. Every config validates itself before any work is done.

Usage:
    from math_handwriter.configs import HandwriterConfig, replace_config

    config = HandwriterConfig(font_size=60, speed=500)
    slow = replace_config(config, speed=100)
"""

import math
from dataclasses import dataclass, replace
from typing import Optional, Tuple

# Baseline position below the requested top-left corner, as a font-size ratio
BASELINE_RATIO = 0.7


def _check_positive(name: str, value: float):
    if not math.isfinite(value) or value <= 0:
        raise ValueError(f"{name} must be a positive finite number, got {value!r}")


def _check_non_negative(name: str, value: float):
    if not math.isfinite(value) or value < 0:
        raise ValueError(f"{name} must be a non-negative finite number, got {value!r}")


@dataclass(frozen=True)
class AnimationConfig:
    """Timing parameters for a drawing plan."""

    speed: float                          # pixels per second
    pause_between_strokes: float = 50.0   # ms
    pause_between_chars: float = 0.0      # ms, applied by the stroke generator

    def validate(self) -> 'AnimationConfig':
        _check_positive("speed", self.speed)
        _check_non_negative("pause_between_strokes", self.pause_between_strokes)
        _check_non_negative("pause_between_chars", self.pause_between_chars)
        return self


@dataclass(frozen=True)
class HandwriterConfig:
    """Full pipeline configuration."""

    # Layout
    font_size: float = 40.0
    position: Tuple[float, float] = (100.0, 100.0)
    spacing: float = 0.1                  # extra advance, fraction of font size

    # Strokes
    variation: float = 0.3                # jitter amplitude in pixels
    smoothing: float = 0.5                # Catmull-Rom tension, 0 disables
    resample_spacing: float = 5.0         # pixels between resampled points
    seed: Optional[int] = None            # jitter seed for reproducible output

    # Timing
    speed: float = 300.0                  # pixels per second
    pause_between_strokes: float = 30.0   # ms
    pause_between_chars: float = 0.0      # ms

    def validate(self) -> 'HandwriterConfig':
        _check_positive("font_size", self.font_size)
        if len(self.position) != 2 or not all(math.isfinite(v) for v in self.position):
            raise ValueError(f"position must be a finite (x, y) pair, got {self.position!r}")
        _check_non_negative("spacing", self.spacing)
        _check_non_negative("variation", self.variation)
        _check_non_negative("smoothing", self.smoothing)
        _check_positive("resample_spacing", self.resample_spacing)
        self.animation_config().validate()
        return self

    def animation_config(self) -> AnimationConfig:
        return AnimationConfig(
            speed=self.speed,
            pause_between_strokes=self.pause_between_strokes,
            pause_between_chars=self.pause_between_chars,
        )

    @property
    def baseline_y(self) -> float:
        return self.position[1] + self.font_size * BASELINE_RATIO


def replace_config(config, **changes):
    """Copy of a config with some fields changed, validated."""
    return replace(config, **changes).validate()
