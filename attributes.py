from parser import Node

SVG_DEFAULTS = {
    'fill': 'black',
    'fill-opacity': '1',
    'fill-rule': 'nonzero',
    'stroke': 'none',
    'stroke-width': '1',
    'stroke-opacity': '1',
    'opacity': '1',
    'color': 'black',
    'visibility': 'visible',
    'display': 'inline',
    'x': '0',
    'y': '0',
    'x1': '0',
    'y1': '0',
    'x2': '0',
    'y2': '0',
    'cx': '0',
    'cy': '0',
}

def get_attribute_with_default(node: Node, attr_name: str, use_inheritance: bool = True) -> str:
    value = node.get_attribute(attr_name, None, use_inheritance)

    if value is not None:
        return value

    return SVG_DEFAULTS.get(attr_name, None)

def get_href(node: Node) -> str:
    href = node.get_attribute('href', None, use_inheritance=False)
    if href is None:
        href = node.get_attribute('xlink:href', None, use_inheritance=False)
    return href.strip() if href else None

def parse_opacity(value, default: float = 1.0) -> float:
    if value is None:
        return default
    try:
        text = str(value).strip()
        opacity = float(text[:-1]) / 100.0 if text.endswith('%') else float(text)
    except ValueError:
        return default
    return max(0.0, min(1.0, opacity))

def is_rendered(node: Node) -> bool:
    if get_attribute_with_default(node, 'display', use_inheritance=False) == 'none':
        return False
    return get_attribute_with_default(node, 'visibility') not in ('hidden', 'collapse')
