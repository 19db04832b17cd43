from __future__ import annotations
import os
from typing import Optional
from parser import Node, parse_svg_string
from geometry import normalize_unit, parse_number_list
from transforms import TransformMatrix

DEFAULT_VIEWPORT_SIZE = 100.0

class SVGState:
    def __init__(self, svg_tree: Optional[Node], base_dir: str = None):
        self.svg_tree = svg_tree
        self.base_dir = base_dir
        self.viewport_width = None
        self.viewport_height = None
        self.viewbox = None
        self.validation_errors = []
        self._extract_viewport_info()
        self.validate()

    @classmethod
    def from_string(cls, data: str | bytes, base_dir: str = None) -> 'SVGState':
        return cls(parse_svg_string(data), base_dir)

    @classmethod
    def from_file(cls, path: str) -> 'SVGState':
        with open(path, 'rb') as file:
            data = file.read()
        return cls.from_string(data, os.path.dirname(os.path.abspath(path)))

    def _extract_viewport_info(self):
        if self.svg_tree is None:
            return

        attrs = self.svg_tree.attributes

        viewbox = parse_number_list(attrs.get('viewBox', ''))
        if len(viewbox) >= 4:
            self.viewbox = tuple(viewbox[:4])

        # percentages on the root have nothing to resolve against
        if 'width' in attrs and not attrs['width'].strip().endswith('%'):
            self.viewport_width = normalize_unit(attrs['width'])
        if 'height' in attrs and not attrs['height'].strip().endswith('%'):
            self.viewport_height = normalize_unit(attrs['height'])

        if self.viewbox is not None:
            if self.viewport_width is None:
                self.viewport_width = self.viewbox[2]
            if self.viewport_height is None:
                self.viewport_height = self.viewbox[3]

        if self.viewport_width is None:
            self.viewport_width = DEFAULT_VIEWPORT_SIZE
        if self.viewport_height is None:
            self.viewport_height = DEFAULT_VIEWPORT_SIZE

    @property
    def user_width(self) -> float:
        return self.viewbox[2] if self.viewbox else self.viewport_width

    @property
    def user_height(self) -> float:
        return self.viewbox[3] if self.viewbox else self.viewport_height

    def viewport_transform(self, width: float, height: float) -> TransformMatrix:
        """User space to pixel space for an output of ``width`` x ``height`` pixels."""
        if self.viewbox is None:
            return TransformMatrix.scale(width / self.viewport_width if self.viewport_width else 1.0,
                                         height / self.viewport_height if self.viewport_height else 1.0)

        vb_min_x, vb_min_y, vb_width, vb_height = self.viewbox
        scale_x = width / vb_width if vb_width > 0 else 1.0
        scale_y = height / vb_height if vb_height > 0 else 1.0

        preserve_aspect = self.svg_tree.get_attribute('preserveAspectRatio', 'xMidYMid meet',
                                                      use_inheritance=False)
        parts = preserve_aspect.strip().split()
        align = parts[0].lower() if parts else 'xmidymid'

        if align == 'none':
            return TransformMatrix(scale_x, 0.0, 0.0, scale_y,
                                   -vb_min_x * scale_x, -vb_min_y * scale_y)

        meet_or_slice = parts[1].lower() if len(parts) > 1 else 'meet'
        scale = min(scale_x, scale_y) if meet_or_slice == 'meet' else max(scale_x, scale_y)
        free_x = width - vb_width * scale
        free_y = height - vb_height * scale

        if 'xmin' in align:
            offset_x = 0.0
        elif 'xmax' in align:
            offset_x = free_x
        else:
            offset_x = free_x / 2.0

        if 'ymin' in align:
            offset_y = 0.0
        elif 'ymax' in align:
            offset_y = free_y
        else:
            offset_y = free_y / 2.0

        return TransformMatrix(scale, 0.0, 0.0, scale,
                               offset_x - vb_min_x * scale, offset_y - vb_min_y * scale)

    def validate(self):
        self.validation_errors = []

        if self.svg_tree is None:
            self.validation_errors.append("No root <svg> element found")
            return

        if self.viewport_width <= 0:
            self.validation_errors.append(f"Invalid viewport width: {self.viewport_width}")
        if self.viewport_height <= 0:
            self.validation_errors.append(f"Invalid viewport height: {self.viewport_height}")

        if self.viewbox is not None and (self.viewbox[2] <= 0 or self.viewbox[3] <= 0):
            self.validation_errors.append(f"Invalid viewBox: {self.viewbox}")

    def is_valid(self) -> bool:
        return len(self.validation_errors) == 0
