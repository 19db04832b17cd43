from __future__ import annotations
import math
from typing import List, Tuple

EPSILON = 1e-7

Point = Tuple[float, float]

def approximate(start: Point, end: Point, large: bool, sweep: bool,
                radius_x: float, radius_y: float, rotation: float) -> List[Point]:
    """Approximate an elliptical arc segment with a polyline.

    ``rotation`` is the ellipse's x-axis angle in radians. Out-of-range
    parameters are handled as in the SVG 1.1 arc implementation notes.
    """
    if points_close(start, end):
        return []

    radius_x = abs(radius_x)
    radius_y = abs(radius_y)
    if radius_x < EPSILON or radius_y < EPSILON:
        return [start, end]

    cos_r = math.cos(rotation)
    sin_r = math.sin(rotation)

    radius_x, radius_y = _correct_radii(start, end, radius_x, radius_y, cos_r, sin_r)

    center, angle_start, angle_delta = endpoint_to_center(
        start, end, large, sweep, radius_x, radius_y, cos_r, sin_r)

    # the rasterization scale is unknown here, so the segment's own size is used
    dist = abs(end[0] - start[0]) + abs(end[1] - start[1])
    num_steps = max(2, math.ceil(abs(angle_delta * dist)))
    step_size = angle_delta / num_steps

    points = []
    for i in range(num_steps + 1):
        angle = angle_start + step_size * i
        first = radius_x * math.cos(angle)
        second = radius_y * math.sin(angle)
        points.append((
            cos_r * first - sin_r * second + center[0],
            sin_r * first + cos_r * second + center[1],
        ))

    return points

def approximate_scaled(start: Point, end: Point, large: bool, sweep: bool,
                       radius_x: float, radius_y: float, rotation: float,
                       scale: float) -> List[Point]:
    """Like :func:`approximate`, with the step count taken at ``scale`` times the size.

    Points are returned in the input coordinate space. Use the pixel scale of
    the current transform so curves drawn in user space stay smooth on output.
    """
    if scale <= 0 or scale == 1.0:
        return approximate(start, end, large, sweep, radius_x, radius_y, rotation)

    points = approximate((start[0] * scale, start[1] * scale), (end[0] * scale, end[1] * scale),
                         large, sweep, radius_x * scale, radius_y * scale, rotation)
    return [(x / scale, y / scale) for x, y in points]

def endpoint_to_center(start: Point, end: Point, large: bool, sweep: bool,
                       radius_x: float, radius_y: float,
                       cos_r: float, sin_r: float) -> Tuple[Point, float, float]:
    """Convert endpoint parameterization to ``(center, angle_start, angle_delta)``."""
    x_half = (start[0] - end[0]) / 2
    y_half = (start[1] - end[1]) / 2
    x1p = cos_r * x_half + sin_r * y_half
    y1p = -sin_r * x_half + cos_r * y_half

    rx2 = radius_x * radius_x
    ry2 = radius_y * radius_y
    x1p2 = x1p * x1p
    y1p2 = y1p * y1p

    # abs() absorbs a slightly negative numerator when the radii barely fit
    factor = math.sqrt(abs((rx2 * ry2 - rx2 * y1p2 - ry2 * x1p2) / (rx2 * y1p2 + ry2 * x1p2)))
    if large == sweep:
        factor = -factor
    cxp = factor * radius_x * y1p / radius_y
    cyp = -factor * radius_y * x1p / radius_x

    center_x = cos_r * cxp - sin_r * cyp + (start[0] + end[0]) / 2
    center_y = sin_r * cxp + cos_r * cyp + (start[1] + end[1]) / 2

    ux = (x1p - cxp) / radius_x
    uy = (y1p - cyp) / radius_y
    vx = (-x1p - cxp) / radius_x
    vy = (-y1p - cyp) / radius_y

    angle_start = vector_angle(ux, uy)
    angle_delta = vector_angle_between(ux, uy, vx, vy)

    if not sweep and angle_delta > 0:
        angle_delta -= 2 * math.pi
    elif sweep and angle_delta < 0:
        angle_delta += 2 * math.pi

    return (center_x, center_y), angle_start, angle_delta

def vector_angle(vx: float, vy: float) -> float:
    norm = math.hypot(vx, vy)
    sign = 1 if vy >= 0 else -1
    return sign * math.acos(_clamp_cos(vx / norm))

def vector_angle_between(ux: float, uy: float, vx: float, vy: float) -> float:
    dot = ux * vx + uy * vy
    norm = math.hypot(ux, uy) * math.hypot(vx, vy)
    sign = 1 if ux * vy - uy * vx >= 0 else -1
    return sign * math.acos(_clamp_cos(dot / norm))

def points_close(a: Point, b: Point) -> bool:
    return abs(a[0] - b[0]) < EPSILON and abs(a[1] - b[1]) < EPSILON

def _correct_radii(start: Point, end: Point, radius_x: float, radius_y: float,
                   cos_r: float, sin_r: float) -> Tuple[float, float]:
    x_half = (start[0] - end[0]) / 2
    y_half = (start[1] - end[1]) / 2
    x1p = cos_r * x_half + sin_r * y_half
    y1p = -sin_r * x_half + cos_r * y_half

    lambda_val = (x1p * x1p) / (radius_x * radius_x) + (y1p * y1p) / (radius_y * radius_y)
    if lambda_val > 1:
        scale = math.sqrt(lambda_val)
        return radius_x * scale, radius_y * scale
    return radius_x, radius_y

def _clamp_cos(value: float) -> float:
    return max(-1.0, min(1.0, value))
