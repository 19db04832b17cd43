from __future__ import annotations
import re
from typing import Optional
from xml.sax.saxutils import unescape

xml_pattern = re.compile(r'(\<[^>]*?\>)', flags=re.DOTALL | re.MULTILINE)
comment_pattern = re.compile(r'\<!--.*?--\>', flags=re.DOTALL | re.MULTILINE)
cdata_pattern = re.compile(r'\<!\[CDATA\[.*?\]\]\>', flags=re.DOTALL)
first_word_pattern = re.compile(r'^\s*[/!?]*\s*([\w:.-]+)')
attribute_pattern = re.compile(r'([\w:.-]+)\s*=\s*("([^"]*)"|\'([^\']*)\')', flags=re.DOTALL)

INHERITED_ATTRIBUTES = {
    'fill', 'fill-opacity', 'fill-rule', 'stroke', 'stroke-width', 'stroke-opacity',
    'color', 'visibility',
}

def is_self_terminating(svg_value: str) -> bool:
    return svg_value.rstrip().endswith('/>')

def is_terminator(svg_value: str) -> bool:
    return svg_value.strip().startswith('</')

def is_declaration(svg_value: str) -> bool:
    return svg_value.lstrip().startswith(('<?', '<!'))

def get_tag(svg_value: str) -> str:
    match = first_word_pattern.search(svg_value.strip().lstrip('<'))
    if not match:
        return ""
    tag = match.group(1)
    # svg:rect and rect are the same element here
    return tag.split(':', 1)[-1]

def parse_style(style: str) -> dict:
    declarations = {}
    for declaration in style.split(';'):
        name, sep, value = declaration.partition(':')
        if sep and name.strip():
            declarations[name.strip()] = value.strip()
    return declarations

def parse_attributes(element: str) -> dict:
    content = element.strip()
    if content.startswith('</'):
        return {}

    attributes = {}
    for match in attribute_pattern.finditer(content):
        value = match.group(3) if match.group(3) is not None else match.group(4)
        attributes[match.group(1)] = unescape(value, {'&quot;': '"', '&apos;': "'"})

    # style declarations win over presentation attributes
    style = attributes.pop('style', None)
    if style:
        attributes.update(parse_style(style))

    return attributes

def tokenize(data: str) -> list[str]:
    data = comment_pattern.sub('', data)
    data = cdata_pattern.sub('', data)
    return xml_pattern.findall(data)

def parse_svg_string(data: str | bytes) -> Optional['Node']:
    if isinstance(data, bytes):
        data = data.decode('utf-8', errors='replace')
    return build_tree(tokenize(data))

def build_tree(entries: list[str]) -> Optional['Node']:
    iterator = iter(entries)
    root = None

    for element in iterator:
        if is_declaration(element) or is_terminator(element):
            continue
        if get_tag(element) == 'svg':
            root = Node(element)
            break

    if root is None:
        return None

    current = root
    for element in iterator:
        if current is None:
            break
        if is_declaration(element):
            continue

        if is_terminator(element):
            if current.compare_tag(element):
                current = current.parent
            continue

        if is_self_terminating(element):
            current.add_child(element)
        else:
            current = current.add_child(element)

    return root

class Node:
    def __init__(self, element: str):
        self.tag = get_tag(element)
        self.attributes = parse_attributes(element)
        self.children = []
        self.parent = None

    def add_child(self, element: str) -> 'Node':
        new_node = Node(element)
        new_node.parent = self
        self.children.append(new_node)
        return new_node

    def compare_tag(self, element: str) -> bool:
        return self.tag == get_tag(element)

    def get_attribute(self, attr_name: str, default: str = None, use_inheritance: bool = True) -> str:
        if attr_name in self.attributes:
            value = self.attributes[attr_name]
            if value != 'inherit':
                return value
        elif not use_inheritance or attr_name not in INHERITED_ATTRIBUTES:
            return default

        current = self.parent
        while current is not None:
            value = current.attributes.get(attr_name)
            if value is not None and value != 'inherit':
                return value
            current = current.parent
        return default

    def __repr__(self) -> str:
        return f"Node({self.tag!r}, {len(self.children)} children)"
