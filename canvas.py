from __future__ import annotations
import math
from typing import List, Optional, Sequence, Tuple
import numpy as np
from PIL import Image

Point = Tuple[float, float]
Color = Tuple[int, int, int, int]

# 2x2 supersampling offsets inside a pixel
AA_OFFSETS = ((0.25, 0.25), (0.75, 0.25), (0.25, 0.75), (0.75, 0.75))

class Canvas:
    def __init__(self, width: int, height: int, background: Optional[Sequence[int]] = None,
                 anti_aliasing: bool = False):
        self.width = width
        self.height = height
        self.anti_aliasing = anti_aliasing

        self.buffer = np.zeros((height, width, 4), dtype=np.uint8)
        if background is not None:
            self.buffer[:, :, 0:len(background)] = background
            if len(background) == 3:
                self.buffer[:, :, 3] = 255

    def _clip_bounds(self, min_x: float, min_y: float, max_x: float, max_y: float):
        x0 = max(0, int(math.floor(min_x)))
        y0 = max(0, int(math.floor(min_y)))
        x1 = min(self.width, int(math.ceil(max_x)) + 1)
        y1 = min(self.height, int(math.ceil(max_y)) + 1)
        if x0 >= x1 or y0 >= y1:
            return None
        return x0, y0, x1, y1

    def blend(self, x0: int, y0: int, coverage: np.ndarray, color: Color):
        """Source-over blend ``color`` weighted by ``coverage`` into the region at (x0, y0)."""
        h, w = coverage.shape
        region = self.buffer[y0:y0 + h, x0:x0 + w].astype(np.float64) / 255.0

        src_a = coverage * (color[3] / 255.0)
        dst_a = region[:, :, 3]
        out_a = src_a + dst_a * (1.0 - src_a)

        src_rgb = np.array(color[:3], dtype=np.float64) / 255.0
        safe_a = np.where(out_a > 0, out_a, 1.0)
        out_rgb = (src_rgb[None, None, :] * src_a[:, :, None]
                   + region[:, :, 0:3] * (dst_a * (1.0 - src_a))[:, :, None]) / safe_a[:, :, None]

        region[:, :, 0:3] = out_rgb
        region[:, :, 3] = out_a
        self.buffer[y0:y0 + h, x0:x0 + w] = np.clip(np.round(region * 255.0), 0, 255).astype(np.uint8)

    def fill_polygons(self, polygons: List[List[Point]], color: Color, fill_rule: str = 'nonzero'):
        polygons = [p for p in polygons if len(p) >= 3]
        if not polygons or color is None:
            return

        xs = [x for polygon in polygons for x, _ in polygon]
        ys = [y for polygon in polygons for _, y in polygon]
        bounds = self._clip_bounds(min(xs), min(ys), max(xs), max(ys))
        if bounds is None:
            return
        x0, y0, x1, y1 = bounds

        offsets = AA_OFFSETS if self.anti_aliasing else ((0.5, 0.5),)
        coverage = np.zeros((y1 - y0, x1 - x0), dtype=np.float64)
        grid_y, grid_x = np.mgrid[y0:y1, x0:x1].astype(np.float64)
        for ox, oy in offsets:
            inside = _points_in_polygons(grid_x + ox, grid_y + oy, polygons, fill_rule)
            coverage += inside
        coverage /= len(offsets)

        if coverage.any():
            self.blend(x0, y0, coverage, color)

    def stroke_polyline(self, points: List[Point], color: Color, width: float, closed: bool = False):
        if len(points) < 2 or color is None or width <= 0:
            return
        if closed and points[0] != points[-1]:
            points = list(points) + [points[0]]

        half_width = width / 2.0
        xs = [p[0] for p in points]
        ys = [p[1] for p in points]
        bounds = self._clip_bounds(min(xs) - half_width - 1, min(ys) - half_width - 1,
                                   max(xs) + half_width + 1, max(ys) + half_width + 1)
        if bounds is None:
            return
        x0, y0, x1, y1 = bounds

        grid_y, grid_x = np.mgrid[y0:y1, x0:x1].astype(np.float64)
        px = grid_x + 0.5
        py = grid_y + 0.5
        distance = np.full(px.shape, np.inf)
        for (ax, ay), (bx, by) in zip(points[:-1], points[1:]):
            distance = np.minimum(distance, _segment_distance(px, py, ax, ay, bx, by))

        if self.anti_aliasing:
            coverage = np.clip(half_width + 0.5 - distance, 0.0, 1.0)
        else:
            # keep hairlines visible
            coverage = (distance <= max(half_width, 0.5)).astype(np.float64)

        if coverage.any():
            self.blend(x0, y0, coverage, color)

    def blit(self, source: Image.Image, x: float, y: float, width: float, height: float):
        dst_w = int(round(width))
        dst_h = int(round(height))
        if dst_w <= 0 or dst_h <= 0:
            return
        dst_x = int(round(x))
        dst_y = int(round(y))

        bounds = self._clip_bounds(dst_x, dst_y, dst_x + dst_w - 1, dst_y + dst_h - 1)
        if bounds is None:
            return
        x0, y0, x1, y1 = bounds

        rgba = source if source.mode == 'RGBA' else source.convert('RGBA')
        resized = rgba.resize((dst_w, dst_h), Image.Resampling.BILINEAR)
        try:
            pixels = np.asarray(resized, dtype=np.float64)
        finally:
            resized.close()
            if rgba is not source:
                rgba.close()

        pixels = pixels[y0 - dst_y:y1 - dst_y, x0 - dst_x:x1 - dst_x]
        region = self.buffer[y0:y1, x0:x1].astype(np.float64)

        src_a = pixels[:, :, 3] / 255.0
        dst_a = region[:, :, 3] / 255.0
        out_a = src_a + dst_a * (1.0 - src_a)
        safe_a = np.where(out_a > 0, out_a, 1.0)
        out_rgb = (pixels[:, :, 0:3] * src_a[:, :, None]
                   + region[:, :, 0:3] * (dst_a * (1.0 - src_a))[:, :, None]) / safe_a[:, :, None]

        region[:, :, 0:3] = out_rgb
        region[:, :, 3] = out_a * 255.0
        self.buffer[y0:y1, x0:x1] = np.clip(np.round(region), 0, 255).astype(np.uint8)

    def get_rgba_buffer(self) -> np.ndarray:
        return self.buffer.copy()

def _segment_distance(px: np.ndarray, py: np.ndarray,
                      ax: float, ay: float, bx: float, by: float) -> np.ndarray:
    bax = bx - ax
    bay = by - ay
    length_sq = bax * bax + bay * bay
    pax = px - ax
    pay = py - ay
    if length_sq == 0:
        return np.hypot(pax, pay)
    h = np.clip((pax * bax + pay * bay) / length_sq, 0.0, 1.0)
    return np.hypot(pax - bax * h, pay - bay * h)

def _points_in_polygons(x: np.ndarray, y: np.ndarray, polygons: List[List[Point]],
                        fill_rule: str) -> np.ndarray:
    winding = np.zeros(x.shape, dtype=np.int32)
    for polygon in polygons:
        # closing edge included
        for (xi, yi), (xj, yj) in zip(polygon, polygon[1:] + polygon[:1]):
            if yi == yj:
                continue
            cross = (xj - xi) * (y - yi) - (yj - yi) * (x - xi)
            upward = (yi <= y) & (yj > y) & (cross > 0)
            downward = (yi > y) & (yj <= y) & (cross < 0)
            winding += upward.astype(np.int32) - downward.astype(np.int32)

    if fill_rule == 'evenodd':
        return (winding % 2) != 0
    return winding != 0
