from __future__ import annotations

import base64
import io
import os
import tempfile
import unittest
from unittest import mock

import numpy as np
from PIL import Image

import image_renderer
from image_renderer import MAX_NESTING_DEPTH, ImageRenderer
from rasterizer import Rasterizer, rasterize
from svg_state import SVGState

RED = (255, 0, 0, 255)
TRANSPARENT = (0, 0, 0, 0)


def _png_data_uri(size=(1, 1), color=RED) -> str:
    buffer = io.BytesIO()
    Image.new('RGBA', size, color).save(buffer, format='PNG')
    return 'data:image/png;base64,' + base64.b64encode(buffer.getvalue()).decode('ascii')


def _svg(width: int, height: int, body: str) -> str:
    return f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}">{body}</svg>'


def _pixel(pixels: np.ndarray, x: int, y: int) -> tuple:
    return tuple(int(v) for v in pixels[y, x])


class ImageCompositingTests(unittest.TestCase):
    def test_single_pixel_png_fills_the_target_footprint(self) -> None:
        state = SVGState.from_string(_svg(200, 100,
            f'<image href="{_png_data_uri()}" x="0" y="0" width="100" height="50"/>'))
        pixels = rasterize(state)

        self.assertEqual(pixels.shape, (100, 200, 4))
        self.assertTrue((pixels[0:50, 0:100] == RED).all())
        self.assertTrue((pixels[50:, :] == 0).all())
        self.assertTrue((pixels[:, 100:] == 0).all())

    def test_x_and_y_resolve_on_their_own_axes(self) -> None:
        state = SVGState.from_string(_svg(100, 100,
            f'<image href="{_png_data_uri()}" x="10" y="30" width="20" height="10"/>'))
        pixels = rasterize(state)

        self.assertEqual(_pixel(pixels, 10, 30), RED)
        self.assertEqual(_pixel(pixels, 29, 39), RED)
        self.assertEqual(_pixel(pixels, 10, 10), TRANSPARENT)
        self.assertEqual(_pixel(pixels, 9, 30), TRANSPARENT)
        self.assertEqual(_pixel(pixels, 10, 29), TRANSPARENT)
        self.assertEqual(_pixel(pixels, 30, 39), TRANSPARENT)
        self.assertEqual(_pixel(pixels, 29, 40), TRANSPARENT)

    def test_percentage_lengths_use_axis_specific_references(self) -> None:
        state = SVGState.from_string(_svg(200, 100,
            f'<image href="{_png_data_uri()}" x="50%" y="50%" width="10%" height="10%"/>'))
        pixels = rasterize(state)

        self.assertEqual(_pixel(pixels, 100, 50), RED)
        self.assertEqual(_pixel(pixels, 119, 59), RED)
        self.assertEqual(_pixel(pixels, 120, 50), TRANSPARENT)
        self.assertEqual(_pixel(pixels, 100, 60), TRANSPARENT)

    def test_translated_group_moves_the_image(self) -> None:
        state = SVGState.from_string(_svg(50, 50,
            f'<g transform="translate(5 7)"><image xlink:href="{_png_data_uri()}" '
            f'width="4" height="4"/></g>'))
        pixels = rasterize(state)

        self.assertEqual(_pixel(pixels, 5, 7), RED)
        self.assertEqual(_pixel(pixels, 8, 10), RED)
        self.assertEqual(_pixel(pixels, 4, 7), TRANSPARENT)

    def test_nested_svg_is_rasterized_at_target_size(self) -> None:
        nested = _svg(10, 10, '<rect width="10" height="10" fill="#00ff00"/>')
        href = 'data:image/svg+xml;base64,' + base64.b64encode(nested.encode()).decode('ascii')
        state = SVGState.from_string(_svg(60, 60,
            f'<image href="{href}" x="0" y="0" width="40" height="20"/>'))
        pixels = rasterize(state)

        self.assertTrue((pixels[0:20, 0:40] == (0, 255, 0, 255)).all())
        self.assertEqual(_pixel(pixels, 40, 0), TRANSPARENT)
        self.assertEqual(_pixel(pixels, 0, 20), TRANSPARENT)

    def test_undecodable_image_is_skipped_with_a_warning(self) -> None:
        state = SVGState.from_string(_svg(20, 20,
            '<image href="data:image/png;base64,AAAA" width="10" height="10"/>'
            '<rect x="15" y="15" width="5" height="5" fill="red"/>'))

        with self.assertLogs('image_renderer', level='WARNING') as logs:
            pixels = rasterize(state)

        self.assertIn('skipping image', logs.output[0])
        self.assertTrue((pixels[0:10, 0:10] == 0).all())
        # the rest of the document is still drawn
        self.assertEqual(_pixel(pixels, 17, 17), RED)

    def test_non_ascii_base64_payload_is_skipped(self) -> None:
        state = SVGState.from_string(_svg(20, 20,
            '<image href="data:image/png;base64,QUJDé" width="10" height="10"/>'
            '<rect x="15" y="15" width="5" height="5" fill="red"/>'))

        with self.assertLogs('image_renderer', level='WARNING') as logs:
            pixels = rasterize(state)

        self.assertIn('skipping image', logs.output[0])
        self.assertTrue((pixels[0:10, 0:10] == 0).all())
        self.assertEqual(_pixel(pixels, 17, 17), RED)

    def test_missing_file_propagates(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            state = SVGState.from_string(_svg(20, 20,
                '<image href="nowhere.png" width="10" height="10"/>'), base_dir=tmp)
            with self.assertRaises(FileNotFoundError):
                rasterize(state)

    def test_relative_file_reference(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            Image.new('RGBA', (2, 2), RED).save(os.path.join(tmp, 'red.png'))
            svg_path = os.path.join(tmp, 'doc.svg')
            with open(svg_path, 'w', encoding='utf-8') as file:
                file.write(_svg(20, 20, '<image href="red.png" x="2" y="2" width="6" height="6"/>'))

            pixels = rasterize(SVGState.from_file(svg_path))

        self.assertEqual(_pixel(pixels, 2, 2), RED)
        self.assertEqual(_pixel(pixels, 7, 7), RED)
        self.assertEqual(_pixel(pixels, 8, 8), TRANSPARENT)

    def test_cyclic_reference_stops_at_nesting_limit(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            svg_path = os.path.join(tmp, 'loop.svg')
            with open(svg_path, 'w', encoding='utf-8') as file:
                file.write(_svg(10, 10, '<image href="loop.svg" width="10" height="10"/>'))

            with self.assertLogs('image_renderer', level='WARNING') as logs:
                pixels = rasterize(SVGState.from_file(svg_path))

        self.assertEqual(pixels.shape, (10, 10, 4))
        self.assertTrue(any('nesting' in line for line in logs.output))


class ImageResourceTests(unittest.TestCase):
    def _context(self) -> Rasterizer:
        return Rasterizer(SVGState.from_string(_svg(20, 20, '')))

    def _options(self) -> dict:
        return {'href': 'image.png', 'x': '0', 'y': '0', 'width': '10', 'height': '10'}

    def test_image_is_closed_after_blit(self) -> None:
        image = Image.new('RGBA', (2, 2), RED)
        context = self._context()
        node = mock.Mock(tag='image')

        with mock.patch.object(image, 'close', wraps=image.close) as close, \
                mock.patch.object(image_renderer, 'load_image', return_value=image):
            ImageRenderer().render(context, self._options(), node)

        close.assert_called_once_with()
        self.assertEqual(_pixel(context.get_canvas().buffer, 5, 5), RED)

    def test_image_is_closed_when_blit_fails(self) -> None:
        image = Image.new('RGBA', (2, 2), RED)
        context = self._context()
        node = mock.Mock(tag='image')

        with mock.patch.object(image, 'close', wraps=image.close) as close, \
                mock.patch.object(image_renderer, 'load_image', return_value=image), \
                mock.patch.object(context.get_canvas(), 'blit', side_effect=RuntimeError('boom')):
            with self.assertRaises(RuntimeError):
                ImageRenderer().render(context, self._options(), node)

        close.assert_called_once_with()

    def test_nothing_is_loaded_past_the_nesting_limit(self) -> None:
        context = self._context()
        context.nesting_depth = MAX_NESTING_DEPTH

        with mock.patch.object(image_renderer, 'load_image') as load, \
                self.assertLogs('image_renderer', level='WARNING'):
            ImageRenderer().render(context, self._options(), mock.Mock(tag='image'))

        load.assert_not_called()

    def test_empty_footprint_draws_nothing(self) -> None:
        context = self._context()
        options = dict(self._options(), width='0')

        with mock.patch.object(image_renderer, 'load_image') as load:
            ImageRenderer().render(context, options, mock.Mock(tag='image'))

        load.assert_not_called()


if __name__ == "__main__":
    unittest.main()
