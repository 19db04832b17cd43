from __future__ import annotations
from abc import abstractmethod
from typing import List, Tuple
from parser import Node
from renderer import Renderer
from colors import get_paint
from geometry import parse_number_list
from arc_approximator import approximate_scaled
from path import parse_path

Point = Tuple[float, float]
Outline = Tuple[List[Point], bool]

PAINT_ATTRIBUTES = ('fill', 'fill-opacity', 'fill-rule', 'stroke', 'stroke-opacity',
                    'stroke-width', 'opacity')

class ShapeRenderer(Renderer):
    """Fills and strokes the outlines a subclass computes in user space."""

    shape_attributes: tuple = ()
    fillable = True

    @property
    def attributes(self) -> tuple:
        return self.shape_attributes + PAINT_ATTRIBUTES

    @abstractmethod
    def get_outlines(self, context, options: dict) -> List[Outline]:
        ...

    def render(self, context, options: dict, node: Node):
        outlines = self.get_outlines(context, options)
        if not outlines:
            return

        pixel_outlines = [([context.to_pixel(x, y) for x, y in points], closed)
                          for points, closed in outlines]
        canvas = context.get_canvas()

        fill_color = get_paint(options, 'fill', node) if self.fillable else None
        if fill_color is not None:
            fill_rule = options.get('fill-rule') or 'nonzero'
            canvas.fill_polygons([points for points, _ in pixel_outlines], fill_color, fill_rule)

        stroke_color = get_paint(options, 'stroke', node)
        if stroke_color is not None:
            stroke_width = context.resolve_length(options.get('stroke-width'))
            for points, closed in pixel_outlines:
                canvas.stroke_polyline(points, stroke_color, stroke_width, closed)

class RectRenderer(ShapeRenderer):
    shape_attributes = ('x', 'y', 'width', 'height', 'rx', 'ry')

    def get_outlines(self, context, options: dict) -> List[Outline]:
        x = context.user_length_x(options['x'])
        y = context.user_length_y(options['y'])
        width = context.user_length_x(options['width'])
        height = context.user_length_y(options['height'])
        if width <= 0 or height <= 0:
            return []

        rx = context.user_length_x(options['rx']) if _is_set(options['rx']) else None
        ry = context.user_length_y(options['ry']) if _is_set(options['ry']) else None
        if rx is None:
            rx = ry if ry is not None else 0.0
        if ry is None:
            ry = rx
        rx = min(max(rx, 0.0), width / 2.0)
        ry = min(max(ry, 0.0), height / 2.0)

        if rx == 0 or ry == 0:
            return [([(x, y), (x + width, y), (x + width, y + height), (x, y + height), (x, y)], True)]

        corners = [
            ((x + width - rx, y), (x + width, y + ry)),
            ((x + width, y + height - ry), (x + width - rx, y + height)),
            ((x + rx, y + height), (x, y + height - ry)),
            ((x, y + ry), (x + rx, y)),
        ]
        scale = context.transform.scale_factor()
        points = [(x + rx, y)]
        for corner_start, corner_end in corners:
            points.append(corner_start)
            points.extend(approximate_scaled(corner_start, corner_end, False, True,
                                             rx, ry, 0.0, scale)[1:])
        return [(points, True)]

class EllipseRenderer(ShapeRenderer):
    shape_attributes = ('cx', 'cy', 'rx', 'ry')

    def get_radii(self, context, options: dict) -> Tuple[float, float]:
        return context.user_length_x(options['rx']), context.user_length_y(options['ry'])

    def get_outlines(self, context, options: dict) -> List[Outline]:
        cx = context.user_length_x(options['cx'])
        cy = context.user_length_y(options['cy'])
        rx, ry = self.get_radii(context, options)
        if rx <= 0 or ry <= 0:
            return []

        right = (cx + rx, cy)
        left = (cx - rx, cy)
        scale = context.transform.scale_factor()
        points = approximate_scaled(right, left, False, True, rx, ry, 0.0, scale)
        points.extend(approximate_scaled(left, right, False, True, rx, ry, 0.0, scale)[1:])
        return [(points, True)]

class CircleRenderer(EllipseRenderer):
    shape_attributes = ('cx', 'cy', 'r')

    def get_radii(self, context, options: dict) -> Tuple[float, float]:
        r = context.user_length(options['r'])
        return r, r

class LineRenderer(ShapeRenderer):
    shape_attributes = ('x1', 'y1', 'x2', 'y2')
    fillable = False

    def get_outlines(self, context, options: dict) -> List[Outline]:
        start = (context.user_length_x(options['x1']), context.user_length_y(options['y1']))
        end = (context.user_length_x(options['x2']), context.user_length_y(options['y2']))
        return [([start, end], False)]

class PolygonRenderer(ShapeRenderer):
    shape_attributes = ('points',)

    def __init__(self, closed: bool):
        self.closed = closed

    def get_outlines(self, context, options: dict) -> List[Outline]:
        numbers = parse_number_list(options['points'])
        points = [(numbers[i], numbers[i + 1]) for i in range(0, len(numbers) - 1, 2)]
        if len(points) < 2:
            return []
        return [(points, self.closed)]

class PathRenderer(ShapeRenderer):
    shape_attributes = ('d',)

    def get_outlines(self, context, options: dict) -> List[Outline]:
        return parse_path(options['d'], context.transform.scale_factor())

def _is_set(value) -> bool:
    return value is not None and str(value).strip() not in ('', 'auto')
