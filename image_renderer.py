from __future__ import annotations
import logging
from parser import Node
from renderer import Renderer
from attributes import get_href
from image_loader import ImageDecodeError, load_image

logger = logging.getLogger(__name__)

MAX_NESTING_DEPTH = 8

class ImageRenderer(Renderer):
    """Draws referenced images (``<image>`` elements).

    Options:
    - href: the image URI (data URI, URL or file path)
    - x, y: the upper left corner
    - width, height: the footprint the image is scaled to

    Nested SVG documents are rasterized at exactly the footprint size. Images
    that cannot be decoded are skipped with a warning; errors reading a file
    or URL propagate.
    """

    attributes = ('x', 'y', 'width', 'height')

    def get_options(self, node: Node) -> dict:
        options = super().get_options(node)
        options['href'] = get_href(node)
        return options

    def render(self, context, options: dict, node: Node):
        href = options.get('href')
        if not href:
            logger.warning("skipping <%s> without href", node.tag)
            return

        x = context.resolve_length_x(options['x']) + context.offset_x
        y = context.resolve_length_y(options['y']) + context.offset_y
        width = context.resolve_length_x(options['width'])
        height = context.resolve_length_y(options['height'])

        target_width = int(round(width))
        target_height = int(round(height))
        if target_width <= 0 or target_height <= 0:
            return

        if context.nesting_depth >= MAX_NESTING_DEPTH:
            logger.warning("skipping image %s: nesting deeper than %d documents",
                           _describe(href), MAX_NESTING_DEPTH)
            return

        try:
            image = load_image(href, target_width, target_height,
                               context.nesting_depth + 1, context.base_dir)
        except ImageDecodeError as e:
            logger.warning("skipping image %s: %s", _describe(href), e)
            return

        try:
            context.get_canvas().blit(image, x, y, width, height)
        finally:
            image.close()

def _describe(href: str) -> str:
    if len(href) > 64:
        return href[:61] + '...'
    return href
