from __future__ import annotations

import unittest

from attributes import get_href, parse_opacity
from colors import get_paint, parse_color
from geometry import normalize_unit, parse_number_with_unit
from parser import parse_svg_string
from svg_state import SVGState
from transforms import parse_transform


class ParserTests(unittest.TestCase):
    def test_tree_skips_declarations_and_comments(self) -> None:
        root = parse_svg_string(
            '<?xml version="1.0"?>\n<!-- a comment <rect/> -->\n'
            '<svg width="10"><g id="layer"><rect x="1"/><circle r="2"></circle></g></svg>')
        self.assertEqual(root.tag, 'svg')
        self.assertEqual(len(root.children), 1)
        group = root.children[0]
        self.assertEqual([child.tag for child in group.children], ['rect', 'circle'])
        self.assertIs(group.children[0].parent, group)

    def test_style_and_entities(self) -> None:
        root = parse_svg_string(
            '<svg><rect fill="blue" style="fill:red; stroke : green" title="a &amp; b"/></svg>')
        rect = root.children[0]
        self.assertEqual(rect.attributes['fill'], 'red')
        self.assertEqual(rect.attributes['stroke'], 'green')
        self.assertEqual(rect.attributes['title'], 'a & b')

    def test_inheritance_only_for_inherited_attributes(self) -> None:
        root = parse_svg_string('<svg x="3"><g fill="red"><rect fill="inherit"/></g></svg>')
        rect = root.children[0].children[0]
        self.assertEqual(rect.get_attribute('fill'), 'red')
        self.assertIsNone(rect.get_attribute('x'))
        self.assertEqual(rect.get_attribute('stroke', 'none', use_inheritance=False), 'none')

    def test_href_prefers_plain_attribute(self) -> None:
        root = parse_svg_string('<svg><image href=" a.png " xlink:href="b.png"/><image xlink:href="c.png"/></svg>')
        self.assertEqual(get_href(root.children[0]), 'a.png')
        self.assertEqual(get_href(root.children[1]), 'c.png')

    def test_no_svg_root(self) -> None:
        self.assertIsNone(parse_svg_string('<html><body/></html>'))


class LengthTests(unittest.TestCase):
    def test_units(self) -> None:
        self.assertEqual(normalize_unit('1in'), 96.0)
        self.assertAlmostEqual(normalize_unit('10mm'), 37.795275, places=5)
        self.assertEqual(normalize_unit('12'), 12.0)
        self.assertEqual(normalize_unit(7.5), 7.5)
        self.assertEqual(normalize_unit('2em'), 32.0)

    def test_percentages_need_a_reference(self) -> None:
        self.assertEqual(normalize_unit('50%', 200.0), 100.0)
        self.assertEqual(normalize_unit('50%'), 50.0)

    def test_malformed_values_fall_back_to_zero(self) -> None:
        self.assertEqual(parse_number_with_unit('abc'), (0.0, ''))
        self.assertEqual(normalize_unit(None), 0.0)
        self.assertEqual(normalize_unit(''), 0.0)


class ColorTests(unittest.TestCase):
    def test_parse_color(self) -> None:
        self.assertEqual(parse_color('red'), (255, 0, 0, 255))
        self.assertEqual(parse_color('#0f0'), (0, 255, 0, 255))
        self.assertEqual(parse_color('rgb(1, 2, 3)'), (1, 2, 3, 255))
        self.assertIsNone(parse_color('none'))
        self.assertIsNone(parse_color('not-a-color'))
        self.assertIsNone(parse_color(None))

    def test_current_color_and_paint_fallback(self) -> None:
        root = parse_svg_string('<svg color="blue"><rect/></svg>')
        self.assertEqual(parse_color('currentColor', root.children[0]), (0, 0, 255, 255))
        self.assertEqual(parse_color('url(#gradient) red'), (255, 0, 0, 255))
        self.assertIsNone(parse_color('url(#gradient)'))

    def test_paint_combines_opacities(self) -> None:
        paint = get_paint({'fill': 'blue', 'fill-opacity': '0.5', 'opacity': '0.5'}, 'fill')
        self.assertEqual(paint, (0, 0, 255, 64))
        self.assertIsNone(get_paint({'fill': 'blue', 'opacity': '0'}, 'fill'))

    def test_group_opacity_applies_to_children(self) -> None:
        root = parse_svg_string('<svg><g opacity="0.5"><rect/></g></svg>')
        rect = root.children[0].children[0]
        self.assertEqual(get_paint({'fill': 'red', 'opacity': '1'}, 'fill', rect), (255, 0, 0, 128))

    def test_parse_opacity(self) -> None:
        self.assertEqual(parse_opacity('50%'), 0.5)
        self.assertEqual(parse_opacity('2'), 1.0)
        self.assertEqual(parse_opacity('bad'), 1.0)


class TransformTests(unittest.TestCase):
    def test_transform_list_is_applied_right_to_left(self) -> None:
        matrix = parse_transform('translate(10,20) scale(2)')
        self.assertEqual(matrix.transform_point(1, 1), (12.0, 22.0))

    def test_rotate_about_point(self) -> None:
        x, y = parse_transform('rotate(90 5 5)').transform_point(10, 5)
        self.assertAlmostEqual(x, 5.0)
        self.assertAlmostEqual(y, 10.0)

    def test_matrix_and_empty(self) -> None:
        self.assertEqual(parse_transform('matrix(1 0 0 1 3 4)').transform_point(0, 0), (3.0, 4.0))
        self.assertTrue(parse_transform('').is_identity())


class SVGStateTests(unittest.TestCase):
    def test_viewport_defaults(self) -> None:
        state = SVGState.from_string('<svg></svg>')
        self.assertEqual((state.viewport_width, state.viewport_height), (100.0, 100.0))
        self.assertTrue(state.is_valid())

    def test_viewbox_supplies_missing_size(self) -> None:
        state = SVGState.from_string('<svg viewBox="0 0 30 40"></svg>')
        self.assertEqual((state.viewport_width, state.viewport_height), (30.0, 40.0))

    def test_meet_centers_content(self) -> None:
        state = SVGState.from_string('<svg width="100" height="100" viewBox="0 0 10 5"></svg>')
        matrix = state.viewport_transform(100, 100)
        self.assertEqual(matrix.transform_point(0, 0), (0.0, 25.0))
        self.assertEqual(matrix.transform_point(10, 5), (100.0, 75.0))

    def test_invalid_documents(self) -> None:
        self.assertFalse(SVGState.from_string('<div></div>').is_valid())
        self.assertFalse(SVGState.from_string('<svg viewBox="0 0 0 10"></svg>').is_valid())


if __name__ == "__main__":
    unittest.main()
