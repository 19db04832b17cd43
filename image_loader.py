from __future__ import annotations
import base64
import io
import logging
import os
from urllib.parse import urlparse
from urllib.request import urlopen
from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

DATA_PREFIX = 'data:'
URL_SCHEMES = ('http', 'https', 'file', 'ftp')

class ImageDecodeError(ValueError):
    pass

def is_data_uri(href: str) -> bool:
    return href.startswith(DATA_PREFIX)

def decode_data_uri(href: str) -> bytes:
    # data:[<media-type>][;base64],<payload>
    metadata, _, content = href.partition(',')

    if ';base64' in metadata:
        try:
            return base64.b64decode(content)
        except ValueError as e:
            raise ImageDecodeError(f"invalid base64 payload: {e}") from e

    return content.encode('utf-8')

def load_image_content(href: str, base_dir: str = None) -> bytes:
    """Fetch the raw bytes behind an image reference.

    Data URIs are decoded in place, URLs are fetched and anything else is read
    as a file path. ``OSError`` from file or network access is not caught.
    """
    if is_data_uri(href):
        logger.debug("decoding data URI of %d characters", len(href))
        return decode_data_uri(href)

    if urlparse(href).scheme.lower() in URL_SCHEMES:
        with urlopen(href) as response:
            return response.read()

    with open(resolve_path(href, base_dir), 'rb') as file:
        return file.read()

def resolve_path(href: str, base_dir: str = None) -> str:
    if base_dir and not os.path.isabs(href):
        return os.path.join(base_dir, href)
    return href

def is_svg_content(content: bytes) -> bool:
    start = content.find(b'<svg')
    return start != -1 and content.rfind(b'</svg>') > start

def decode_image(content: bytes, width: int, height: int, nesting_depth: int = 0,
                 base_dir: str = None) -> Image.Image:
    """Turn raw image bytes into a loaded PIL image.

    SVG content is rasterized to exactly ``width`` x ``height``, anything else
    keeps its native size. Raises :class:`ImageDecodeError` when the bytes
    cannot be decoded.
    """
    if is_svg_content(content):
        from rasterizer import rasterize_svg_bytes
        try:
            pixels = rasterize_svg_bytes(content, width, height, nesting_depth, base_dir)
        except ValueError as e:
            raise ImageDecodeError(f"invalid nested SVG document: {e}") from e
        return Image.fromarray(pixels, 'RGBA')

    if not content:
        raise ImageDecodeError("empty image payload")

    try:
        image = Image.open(io.BytesIO(content))
    except UnidentifiedImageError as e:
        raise ImageDecodeError(str(e)) from e

    try:
        image.load()
    except (OSError, ValueError) as e:
        image.close()
        raise ImageDecodeError(f"could not decode image: {e}") from e
    return image

def load_image(href: str, width: int, height: int, nesting_depth: int = 0,
               base_dir: str = None) -> Image.Image:
    content = load_image_content(href, base_dir)

    # relative references inside a nested file resolve against that file
    nested_base_dir = base_dir
    if not is_data_uri(href) and urlparse(href).scheme.lower() not in URL_SCHEMES:
        nested_base_dir = os.path.dirname(os.path.abspath(resolve_path(href, base_dir)))

    return decode_image(content, width, height, nesting_depth, nested_base_dir)
