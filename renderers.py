from renderer import Renderer
from shape_renderers import (RectRenderer, CircleRenderer, EllipseRenderer, LineRenderer,
                             PolygonRenderer, PathRenderer)
from image_renderer import ImageRenderer

RENDERERS = {
    'rect': RectRenderer(),
    'circle': CircleRenderer(),
    'ellipse': EllipseRenderer(),
    'line': LineRenderer(),
    'polyline': PolygonRenderer(closed=False),
    'polygon': PolygonRenderer(closed=True),
    'path': PathRenderer(),
    'image': ImageRenderer(),
}

def get_renderer(kind: str) -> Renderer:
    return RENDERERS[kind]
