"""
Easing, interpolation and spring physics.

All functions are pure. ``spring`` is the closed-form response of a damped
harmonic oscillator released from 0 towards 1 with zero initial velocity,
sampled at ``frame / fps`` seconds.
"""

import math
from typing import Literal, Sequence

from ..timeline.models import Easing


# |1 - x| below which a spring counts as settled.
SPRING_REST_THRESHOLD = 0.01

Extrapolate = Literal["extend", "clamp"]


def ease(t: float, easing: Easing | str = Easing.LINEAR) -> float:
    """Apply a cubic easing curve to ``t`` in [0, 1]."""
    easing = Easing(easing)
    t = min(max(t, 0.0), 1.0)
    if easing == Easing.EASE_IN:
        return t**3
    if easing == Easing.EASE_OUT:
        return 1 - (1 - t) ** 3
    if easing == Easing.EASE_IN_OUT:
        return 4 * t**3 if t < 0.5 else 1 - (-2 * t + 2) ** 3 / 2
    return t


def interpolate(
    value: float,
    input_range: Sequence[float],
    output_range: Sequence[float],
    extrapolate_left: Extrapolate = "extend",
    extrapolate_right: Extrapolate = "extend",
) -> float:
    """Piecewise-linear map of ``value`` from ``input_range`` to ``output_range``.

    Args:
        value: The input value.
        input_range: Strictly increasing breakpoints (at least two).
        output_range: Output values, same length as ``input_range``.
        extrapolate_left: "extend" or "clamp" below the first breakpoint.
        extrapolate_right: "extend" or "clamp" above the last breakpoint.

    Returns:
        The mapped value.
    """
    if len(input_range) != len(output_range) or len(input_range) < 2:
        raise ValueError("input_range and output_range need the same length (>= 2)")
    if any(b <= a for a, b in zip(input_range, input_range[1:])):
        raise ValueError(f"input_range must be strictly increasing: {list(input_range)}")

    if value < input_range[0] and extrapolate_left == "clamp":
        return float(output_range[0])
    if value > input_range[-1] and extrapolate_right == "clamp":
        return float(output_range[-1])

    # Pick the segment containing value (edge segments extend outwards).
    segment = len(input_range) - 2
    for i in range(1, len(input_range) - 1):
        if value < input_range[i]:
            segment = i - 1
            break

    in_lo, in_hi = input_range[segment], input_range[segment + 1]
    out_lo, out_hi = output_range[segment], output_range[segment + 1]
    ratio = (value - in_lo) / (in_hi - in_lo)
    return out_lo + (out_hi - out_lo) * ratio


def clamped(value: float, input_range: Sequence[float], output_range: Sequence[float]) -> float:
    """``interpolate`` clamped on both sides."""
    return interpolate(value, input_range, output_range, "clamp", "clamp")


def eased_value(
    start: float,
    end: float,
    frame: float,
    duration: int,
    easing: Easing | str = Easing.EASE_OUT,
) -> float:
    """Value of an eased ramp from ``start`` to ``end`` over ``duration`` frames.

    Raises:
        ValueError: If ``duration`` is negative.
    """
    if duration < 0:
        raise ValueError(f"Animation duration must not be negative: {duration}")
    if duration == 0:
        return end if frame >= 0 else start
    t = ease(frame / duration, easing)
    return start + (end - start) * t


def _oscillator(damping: float, mass: float, stiffness: float) -> tuple[float, float]:
    if damping <= 0 or mass <= 0 or stiffness <= 0:
        raise ValueError(
            f"Spring needs positive damping, mass and stiffness "
            f"(got {damping}, {mass}, {stiffness})"
        )
    omega = math.sqrt(stiffness / mass)
    zeta = damping / (2 * math.sqrt(stiffness * mass))
    return omega, zeta


def _displacement(t: float, omega: float, zeta: float) -> float:
    """Position at time ``t`` seconds, moving from 0 to 1."""
    if zeta < 1:
        omega_d = omega * math.sqrt(1 - zeta * zeta)
        envelope = math.exp(-zeta * omega * t)
        return 1 - envelope * (math.cos(omega_d * t) + (zeta * omega / omega_d) * math.sin(omega_d * t))
    if zeta == 1:
        return 1 - math.exp(-omega * t) * (1 + omega * t)
    root = math.sqrt(zeta * zeta - 1)
    r1 = -omega * (zeta - root)
    r2 = -omega * (zeta + root)
    return 1 - (r2 * math.exp(r1 * t) - r1 * math.exp(r2 * t)) / (r2 - r1)


def max_overshoot(damping: float = 10, mass: float = 1, stiffness: float = 100) -> float:
    """Largest excursion past 1.0 an unclamped spring reaches."""
    _, zeta = _oscillator(damping, mass, stiffness)
    if zeta >= 1:
        return 0.0
    return math.exp(-zeta * math.pi / math.sqrt(1 - zeta * zeta))


def settle_frame(
    fps: float,
    damping: float = 10,
    mass: float = 1,
    stiffness: float = 100,
) -> int:
    """First frame from which the spring reports exactly 1.0."""
    omega, zeta = _oscillator(damping, mass, stiffness)
    if zeta < 1:
        # Past this frame the envelope amplitude / sqrt(1 - zeta^2) alone keeps
        # the oscillation under the threshold.
        amplitude = 1 / math.sqrt(1 - zeta * zeta)
        seconds = math.log(amplitude / SPRING_REST_THRESHOLD) / (zeta * omega)
        frame = max(1, math.ceil(seconds * fps))
        # Walk back over the frames whose displacement is already at rest.
        while frame > 1 and abs(1 - _displacement((frame - 1) / fps, omega, zeta)) < SPRING_REST_THRESHOLD:
            frame -= 1
        return frame

    # Critically and over-damped springs approach 1 monotonically.
    frame = 1
    while 1 - _displacement(frame / fps, omega, zeta) >= SPRING_REST_THRESHOLD:
        frame += 1
    return frame


def spring(
    frame: float,
    fps: float,
    damping: float = 10,
    mass: float = 1,
    stiffness: float = 100,
    overshoot_clamping: bool = False,
) -> float:
    """Spring progress from 0 to 1.

    Returns 0.0 for ``frame <= 0`` and exactly 1.0 from ``settle_frame``
    on. The value is never negative.

    Args:
        frame: Frames since the spring was released.
        fps: Frames per second of the timeline.
        damping: Damping coefficient.
        mass: Mass of the moving body.
        stiffness: Spring constant.
        overshoot_clamping: Cap the value at 1.0 while it oscillates.

    Returns:
        Spring progress.
    """
    if fps <= 0:
        raise ValueError(f"fps must be positive: {fps}")
    omega, zeta = _oscillator(damping, mass, stiffness)
    if frame <= 0:
        return 0.0
    if frame >= settle_frame(fps, damping, mass, stiffness):
        return 1.0
    value = max(0.0, _displacement(frame / fps, omega, zeta))
    if overshoot_clamping:
        value = min(value, 1.0)
    return value


def _to_uint32(value: int) -> int:
    return value & 0xFFFFFFFF


def _imul(a: int, b: int) -> int:
    return _to_uint32(_to_uint32(a) * _to_uint32(b))


def seeded_random(seed: str | int | float) -> float:
    """Deterministic pseudo-random number in [0, 1) for a seed.

    Strings are folded with a 31-multiplier hash, then mixed with
    mulberry32. The same seed always yields the same number.
    """
    if isinstance(seed, str):
        state = 0
        for char in seed:
            state = _to_uint32((state << 5) - state + ord(char))
    else:
        state = _to_uint32(int(seed * 10_000_000))

    t = _to_uint32(state + 0x6D2B79F5)
    t = _imul(t ^ (t >> 15), t | 1)
    t ^= _to_uint32(t + _imul(t ^ (t >> 7), t | 61))
    return _to_uint32(t ^ (t >> 14)) / 4294967296
