from __future__ import annotations
import logging
import math
from typing import Optional, Sequence, Tuple
import numpy as np
from parser import Node
from svg_state import SVGState
from canvas import Canvas
from transforms import TransformMatrix, parse_transform
from geometry import normalize_unit, diagonal_reference
from attributes import is_rendered
from renderers import get_renderer, RENDERERS

logger = logging.getLogger(__name__)

CONTAINER_TAGS = {'svg', 'g', 'a', 'switch'}

class Rasterizer:
    """One rasterization pass: the canvas plus the coordinate context renderers draw through."""

    def __init__(self, state: SVGState, width: Optional[int] = None, height: Optional[int] = None,
                 background: Optional[Sequence[int]] = None, anti_aliasing: bool = False,
                 nesting_depth: int = 0):
        if width is None:
            width = int(round(state.viewport_width))
        if height is None:
            height = int(round(state.viewport_height))

        self.state = state
        self.width = width
        self.height = height
        self.nesting_depth = nesting_depth
        self.base_dir = state.base_dir
        self.canvas = Canvas(width, height, background, anti_aliasing)
        self.transform_stack = [state.viewport_transform(width, height)]

    @property
    def transform(self) -> TransformMatrix:
        return self.transform_stack[-1]

    @property
    def offset_x(self) -> float:
        return self.transform.e

    @property
    def offset_y(self) -> float:
        return self.transform.f

    def get_canvas(self) -> Canvas:
        return self.canvas

    def user_length_x(self, value) -> float:
        return normalize_unit(value, self.state.user_width)

    def user_length_y(self, value) -> float:
        return normalize_unit(value, self.state.user_height)

    def user_length(self, value) -> float:
        return normalize_unit(value, diagonal_reference(self.state.user_width, self.state.user_height))

    def resolve_length_x(self, value) -> float:
        return self.user_length_x(value) * math.hypot(self.transform.a, self.transform.b)

    def resolve_length_y(self, value) -> float:
        return self.user_length_y(value) * math.hypot(self.transform.c, self.transform.d)

    def resolve_length(self, value) -> float:
        return self.user_length(value) * self.transform.scale_factor()

    def to_pixel(self, x: float, y: float) -> Tuple[float, float]:
        return self.transform.transform_point(x, y)

    def push_transform(self, matrix: TransformMatrix):
        self.transform_stack.append(self.transform.multiply(matrix))

    def pop_transform(self):
        if len(self.transform_stack) > 1:
            self.transform_stack.pop()

    def render(self, kind: str, options: dict, node: Node):
        get_renderer(kind).render(self, options, node)

    def rasterize(self) -> np.ndarray:
        if self.state.svg_tree is not None:
            self._rasterize_node(self.state.svg_tree)
        return self.canvas.get_rgba_buffer()

    def _rasterize_node(self, node: Node):
        if not is_rendered(node):
            return

        transform_str = node.get_attribute('transform', None, use_inheritance=False)
        if transform_str:
            self.push_transform(parse_transform(transform_str))

        try:
            renderer = RENDERERS.get(node.tag)
            if renderer is not None:
                logger.debug("rendering <%s> at depth %d", node.tag, self.nesting_depth)
                self.render(node.tag, renderer.get_options(node), node)

            if node.tag in CONTAINER_TAGS:
                for child in node.children:
                    self._rasterize_node(child)
        finally:
            if transform_str:
                self.pop_transform()

def rasterize(state: SVGState, width: Optional[int] = None, height: Optional[int] = None,
              background: Optional[Sequence[int]] = None, anti_aliasing: bool = False,
              nesting_depth: int = 0) -> np.ndarray:
    rasterizer = Rasterizer(state, width, height, background, anti_aliasing, nesting_depth)
    return rasterizer.rasterize()

def rasterize_svg_bytes(data: bytes, width: int, height: int, nesting_depth: int = 0,
                        base_dir: str = None) -> np.ndarray:
    state = SVGState.from_string(data, base_dir)
    if not state.is_valid():
        raise ValueError("; ".join(state.validation_errors))

    logger.debug("rasterizing nested document to %dx%d at depth %d", width, height, nesting_depth)
    return rasterize(state, width, height, nesting_depth=nesting_depth)
