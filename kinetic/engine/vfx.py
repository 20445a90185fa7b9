"""Global and per-scene visual effect overlays."""

import math
from typing import Optional

from .easing import interpolate
from .state import FilmGrainState, LightLeakState, MediaBackgroundState, VfxState


FILM_GRAIN_OPACITY = 0.06
LIGHT_LEAK_INTENSITY = 0.3


def film_grain(frame: int, opacity: float = FILM_GRAIN_OPACITY) -> FilmGrainState:
    """Noise overlay; the pattern changes every 3 frames."""
    return FilmGrainState(seed=frame // 3, opacity=opacity)


def light_leak(
    frame: int,
    total_frames: int,
    color: str,
    intensity: float = LIGHT_LEAK_INTENSITY,
) -> LightLeakState:
    """Radial bloom sweeping diagonally across the frame, pulsing slowly."""
    span = [0, max(total_frames, 1)]
    return LightLeakState(
        color=color,
        x_pct=interpolate(frame, span, [-20, 120]),
        y_pct=interpolate(frame, span, [120, -20]),
        opacity=intensity + math.sin(frame / 15) * 0.1,
    )


def media_background(
    frame: int,
    duration: int,
    image_url: Optional[str],
    opacity: float = 0.4,
) -> Optional[MediaBackgroundState]:
    """Slow Ken Burns zoom from 1.05 to 1.15 over the scene."""
    if not image_url:
        return None
    scale = interpolate(frame, [0, max(duration, 1)], [1.05, 1.15], extrapolate_right="clamp")
    return MediaBackgroundState(image_url=image_url, opacity=opacity, scale=scale)


def global_vfx(frame: int, total_frames: int, color: str, enabled: bool = True) -> VfxState:
    if not enabled:
        return VfxState()
    return VfxState(
        film_grain=film_grain(frame),
        light_leak=light_leak(frame, total_frames, color),
    )
