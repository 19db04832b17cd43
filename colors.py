from __future__ import annotations
from typing import Optional, Tuple
from PIL import ImageColor
from parser import Node
from attributes import get_attribute_with_default, parse_opacity

Color = Tuple[int, int, int, int]

def resolve_color_value(value: str, node: Node = None) -> Optional[str]:
    if not value:
        return None

    value = value.strip()

    if value.startswith('url('):
        # paint servers are not rendered, use the fallback color if one is given
        fallback = value[value.find(')') + 1:].strip()
        return resolve_color_value(fallback, node) if fallback else 'none'

    if value.lower() == 'currentcolor':
        if node is not None:
            return get_attribute_with_default(node, 'color')
        return 'black'

    return value

def parse_color(color_str: str, node: Node = None) -> Optional[Tuple[int, int, int, int]]:
    resolved = resolve_color_value(color_str, node)
    if resolved is None or resolved.lower() in ('none', 'transparent'):
        return None

    try:
        color = ImageColor.getrgb(resolved)
    except ValueError:
        return None

    if len(color) == 3:
        return (color[0], color[1], color[2], 255)
    return color

def get_group_opacity(node: Node) -> float:
    opacity = 1.0
    current = node
    while current is not None:
        opacity *= parse_opacity(current.attributes.get('opacity'))
        current = current.parent
    return opacity

def get_paint(options: dict, paint_attr: str, node: Node = None) -> Optional[Color]:
    color = parse_color(options.get(paint_attr), node)
    if color is None:
        return None

    opacity = parse_opacity(options.get(f'{paint_attr}-opacity')) * parse_opacity(options.get('opacity'))
    if node is not None:
        opacity *= get_group_opacity(node.parent)

    alpha = int(round(color[3] * opacity))
    if alpha <= 0:
        return None
    return (color[0], color[1], color[2], alpha)
