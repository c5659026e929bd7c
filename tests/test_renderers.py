import unittest

import numpy as np

from ascii_art_pipeline.charsets import CharacterSet
from ascii_art_pipeline.constants import CharSet, EdgeDirection, RenderMode
from ascii_art_pipeline.edge_detection import EdgeMap
from ascii_art_pipeline.exceptions import ConfigError
from ascii_art_pipeline.renderers import (
    EdgeVariant, GrayscaleVariant, ShadedColorVariant, TrueColorVariant,
    color_span, render_edges, render_grayscale, render_shaded_color, render_true_color,
    resolve_variant,
)


def rgba(rows):
    return np.array(rows, dtype=np.uint8)


class TestResolveVariant(unittest.TestCase):

    def test_grayscale_follows_charset(self):
        ascii_variant = resolve_variant(RenderMode.GRAYSCALE, CharSet.ASCII)
        braille_variant = resolve_variant(RenderMode.GRAYSCALE, CharSet.BRAILLE)

        self.assertEqual(ascii_variant, GrayscaleVariant(CharacterSet.STANDARD))
        self.assertEqual(braille_variant.ramp, CharacterSet.BRAILLE)
        self.assertTrue(braille_variant.coalesce_blank)

    def test_braille_modes_pin_the_family(self):
        grayscale = resolve_variant(RenderMode.GRAYSCALE_BRAILLE, CharSet.ASCII)
        edges = resolve_variant(RenderMode.EDGE_BRAILLE, CharSet.ASCII)

        self.assertEqual(grayscale.ramp, CharacterSet.BRAILLE)
        self.assertEqual(edges.glyphs, CharacterSet.BRAILLE_EDGES)
        self.assertFalse(edges.fill)

    def test_reverse_and_levels(self):
        variant = resolve_variant(RenderMode.GRAYSCALE_BRAILLE, CharSet.BRAILLE,
                                  reverse=True, braille_levels=2)
        self.assertEqual(variant.ramp.glyphs, ('⣿', '⠀'))

    def test_color_modes(self):
        self.assertEqual(resolve_variant(RenderMode.COLOR, CharSet.BRAILLE), TrueColorVariant())
        shaded = resolve_variant(RenderMode.COLOR_BRIGHTNESS_MAP, CharSet.ASCII)
        self.assertIsInstance(shaded, ShadedColorVariant)
        self.assertTrue(shaded.trim_trailing)

    def test_unsupported_pairing(self):
        with self.assertRaises(ConfigError):
            resolve_variant(RenderMode.COLOR_BRIGHTNESS_MAP, CharSet.BRAILLE)

    def test_edge_modes(self):
        outline = resolve_variant(RenderMode.EDGE_OUTLINE, CharSet.ASCII)
        fill = resolve_variant(RenderMode.EDGE_FILL, CharSet.BRAILLE)

        self.assertEqual(outline, EdgeVariant(CharacterSet.EDGES, CharacterSet.STANDARD, fill=False))
        self.assertEqual(fill.glyphs, CharacterSet.BRAILLE_EDGES)
        self.assertEqual(fill.ramp, CharacterSet.BRAILLE)
        self.assertTrue(fill.fill)


class TestGrayscaleRenderer(unittest.TestCase):

    def test_trailing_blanks_dropped(self):
        levels = np.array([[255, 0, 0], [0, 255, 0]], dtype=np.uint8)

        result = render_grayscale(levels, GrayscaleVariant(CharacterSet.STANDARD))

        self.assertEqual(result.lines, ['Ñ', ' Ñ'])
        self.assertEqual(result.text, 'Ñ\n Ñ')
        self.assertEqual((result.width, result.height), (3, 2))
        self.assertIsNone(result.colors)

    def test_reversed_ramp_trims_its_blank(self):
        levels = np.array([[0, 255, 255]], dtype=np.uint8)

        result = render_grayscale(levels, GrayscaleVariant(CharacterSet.STANDARD.reversed()))

        self.assertEqual(result.lines, ['Ñ'])

    def test_braille_blank_runs_coalesce(self):
        levels = np.array([[0, 0, 255, 0, 255, 0, 0]], dtype=np.uint8)

        result = render_grayscale(levels, GrayscaleVariant(CharacterSet.BRAILLE, coalesce_blank=True))

        self.assertEqual(result.cells, [['⠀⠀⣿', '⠀⣿']])
        self.assertEqual(result.lines, ['⠀⠀⣿⠀⣿'])

    def test_all_blank_row_is_empty(self):
        levels = np.zeros((2, 4), dtype=np.uint8)
        result = render_grayscale(levels, GrayscaleVariant(CharacterSet.STANDARD))
        self.assertEqual(result.text, '\n')


class TestColorRenderers(unittest.TestCase):

    def test_color_span_format(self):
        self.assertEqual(color_span('@', (1, 2, 3)), '<span style="color: rgb(1, 2, 3)">@</span>')

    def test_true_color(self):
        pixels = rgba([[[255, 0, 0, 255], [0, 0, 255, 255]]])

        result = render_true_color(pixels, TrueColorVariant())

        self.assertEqual(
            result.text,
            '<span style="color: rgb(255, 0, 0)">@</span>'
            '<span style="color: rgb(0, 0, 255)">@</span>'
        )
        self.assertEqual(result.lines, ['@@'])
        self.assertEqual(result.colors, [[(255, 0, 0), (0, 0, 255)]])

    def test_shaded_drops_rightmost_blanks_only(self):
        pixels = rgba([[[x, x, x, 255] for x in (10, 20, 30, 40, 50)]])
        levels = np.array([[255, 0, 255, 0, 0]], dtype=np.uint8)

        result = render_shaded_color(pixels, levels, ShadedColorVariant(CharacterSet.STANDARD))

        self.assertEqual(result.cells, [['Ñ', ' ', 'Ñ']])
        self.assertEqual(result.colors, [[(10, 10, 10), (20, 20, 20), (30, 30, 30)]])
        self.assertEqual(result.text.count('<span'), 3)

    def test_shaded_without_trim_keeps_every_pixel(self):
        pixels = rgba([[[0, 0, 0, 255]] * 4])
        levels = np.zeros((1, 4), dtype=np.uint8)

        trimmed = render_shaded_color(pixels, levels, ShadedColorVariant(CharacterSet.STANDARD))
        untrimmed = render_shaded_color(pixels, levels,
                                        ShadedColorVariant(CharacterSet.STANDARD, trim_trailing=False))

        self.assertEqual(trimmed.text, '')
        self.assertEqual(untrimmed.lines, ['    '])


class TestEdgeRenderer(unittest.TestCase):

    def edge_map(self):
        directions = np.array([
            [EdgeDirection.FLAT, EdgeDirection.HORIZONTAL],
            [EdgeDirection.VERTICAL, EdgeDirection.DIAGONAL1],
            [EdgeDirection.DIAGONAL2, EdgeDirection.FLAT],
        ], dtype=np.uint8)
        zeros = np.zeros(directions.shape)
        return EdgeMap(magnitude=zeros, angle=zeros, directions=directions)

    def test_outline(self):
        blurred = np.full((5, 4), 255, dtype=np.uint8)

        result = render_edges(self.edge_map(), blurred,
                              EdgeVariant(CharacterSet.EDGES, CharacterSet.STANDARD))

        self.assertEqual(result.lines, [' ─', '│/', '\\ '])
        self.assertEqual((result.width, result.height), (2, 3))

    def test_fill_shades_flat_pixels(self):
        blurred = np.zeros((5, 4), dtype=np.uint8)
        blurred[1, 1] = 255
        blurred[3, 2] = 128

        result = render_edges(self.edge_map(), blurred,
                              EdgeVariant(CharacterSet.EDGES, CharacterSet.STANDARD, fill=True))

        mid = CharacterSet.STANDARD[CharacterSet.STANDARD.index_of(128)]
        self.assertEqual(result.lines, ['Ñ─', '│/', '\\' + mid])

    def test_braille_outline(self):
        blurred = np.zeros((5, 4), dtype=np.uint8)

        result = render_edges(self.edge_map(), blurred,
                              EdgeVariant(CharacterSet.BRAILLE_EDGES, CharacterSet.BRAILLE))

        self.assertEqual(result.lines, ['⠀⠒', '⡇⠔', '⠢⠀'])


if __name__ == '__main__':
    unittest.main()
