import io
import os
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from unittest import mock

from ascii_art_pipeline.charsets import CharacterSet
from ascii_art_pipeline.cli import InteractiveMode, create_argument_parser, main

from tests.helpers import solid_image


class TestCommandLine(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.image_path = os.path.join(self.tmp.name, 'gray.png')
        solid_image(8, 4, (128, 128, 128)).save(self.image_path)

    def test_parser_defaults(self):
        args = create_argument_parser().parse_args(['x.png'])

        self.assertEqual(args.mode, 'grayscale')
        self.assertEqual(args.charset, 'ascii')
        self.assertEqual(args.edge_threshold, 50.0)
        self.assertEqual(args.blur_radius, 2)
        self.assertIsNone(args.width)

    def test_writes_text_file(self):
        output = os.path.join(self.tmp.name, 'art.txt')
        stdout = io.StringIO()

        with redirect_stdout(stdout):
            code = main([self.image_path, '-w', '8', '-H', '4', '-o', output])

        self.assertEqual(code, 0)
        self.assertIn('Saved to', stdout.getvalue())
        with open(output, encoding='utf-8') as f:
            content = f.read()
        glyph = CharacterSet.STANDARD[CharacterSet.STANDARD.index_of(128)]
        self.assertEqual(content, '\n'.join([glyph * 8] * 4))

    def test_writes_html_file(self):
        output = os.path.join(self.tmp.name, 'art.html')

        with redirect_stdout(io.StringIO()):
            code = main([self.image_path, '-w', '4', '-H', '2', '-m', 'color', '-o', output])

        self.assertEqual(code, 0)
        with open(output, encoding='utf-8') as f:
            self.assertIn('rgb(128, 128, 128)', f.read())

    def test_keep_aspect_prints_to_terminal(self):
        stdout = io.StringIO()

        with redirect_stdout(stdout):
            code = main([self.image_path, '-w', '16', '--keep-aspect'])

        self.assertEqual(code, 0)
        # 8x4 source at width 16 gives floor(16 / 2 / 2) rows
        self.assertEqual(len(stdout.getvalue().rstrip('\n').split('\n')), 4)

    def test_keep_aspect_from_height(self):
        wide_path = os.path.join(self.tmp.name, 'wide.png')
        solid_image(200, 100, (128, 128, 128)).save(wide_path)
        output = os.path.join(self.tmp.name, 'wide.txt')

        with redirect_stdout(io.StringIO()):
            code = main([wide_path, '-H', '10', '--keep-aspect', '-o', output])

        self.assertEqual(code, 0)
        with open(output, encoding='utf-8') as f:
            rows = f.read().split('\n')
        self.assertEqual(len(rows), 10)
        self.assertTrue(all(len(row) == 40 for row in rows))

    def test_width_wins_when_both_dimensions_given(self):
        wide_path = os.path.join(self.tmp.name, 'wide.png')
        solid_image(200, 100, (128, 128, 128)).save(wide_path)
        output = os.path.join(self.tmp.name, 'wide.txt')

        with redirect_stdout(io.StringIO()):
            main([wide_path, '-w', '100', '-H', '10', '--keep-aspect', '-o', output])

        with open(output, encoding='utf-8') as f:
            self.assertEqual(len(f.read().split('\n')), 25)

    def test_unwritable_output(self):
        output = os.path.join(self.tmp.name, 'no_such_dir', 'art.txt')
        stderr = io.StringIO()

        with redirect_stdout(io.StringIO()), redirect_stderr(stderr):
            code = main([self.image_path, '-w', '4', '-H', '2', '-o', output])

        self.assertEqual(code, 1)
        self.assertIn('Error:', stderr.getvalue())

    def test_missing_file(self):
        stderr = io.StringIO()

        with redirect_stderr(stderr):
            code = main([os.path.join(self.tmp.name, 'missing.png')])

        self.assertEqual(code, 1)
        self.assertIn('Error:', stderr.getvalue())

    def test_invalid_width(self):
        with redirect_stderr(io.StringIO()):
            self.assertEqual(main([self.image_path, '-w', '0']), 1)

    def test_no_input_prints_help(self):
        with redirect_stdout(io.StringIO()):
            self.assertEqual(main([]), 1)


class TestInteractiveMode(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.image_path = os.path.join(self.tmp.name, 'white.png')
        solid_image(4, 4, (255, 255, 255)).save(self.image_path)
        self.session = InteractiveMode()

    def run_commands(self, *lines):
        stdout = io.StringIO()
        with redirect_stdout(stdout):
            results = [self.session.handle(line) for line in lines]
        return results, stdout.getvalue()

    def test_settings_persist_between_renders(self):
        results, output = self.run_commands(
            f'load {self.image_path}',
            'set output_width 3',
            'set outputHeight 2',
            'render',
        )

        self.assertEqual(results, [True] * 4)
        self.assertIn('ÑÑÑ\nÑÑÑ', output)
        self.assertEqual(self.session.pipeline.config.size, (3, 2))

    def test_render_with_mode(self):
        _, output = self.run_commands(
            f'load {self.image_path}', 'set width 2', 'set height 1', 'render grayscaleBraille'
        )
        self.assertIn('⣿⣿', output)

    def test_save_and_show(self):
        output_path = os.path.join(self.tmp.name, 'out.txt')
        _, output = self.run_commands(
            f'load {self.image_path}', 'set width 2', 'set height 2',
            f'save {output_path}', 'show',
        )

        self.assertTrue(os.path.exists(output_path))
        self.assertIn('output_width: 2', output)

    def test_session_survives_failed_save(self):
        bad_path = os.path.join(self.tmp.name, 'no_such_dir', 'out.txt')
        commands = [f'load {self.image_path}', f'save {bad_path}', 'show', 'q']
        stdout = io.StringIO()

        with mock.patch('builtins.input', side_effect=commands), redirect_stdout(stdout):
            self.session.run()

        self.assertIn('Error:', stdout.getvalue())
        self.assertIn('output_width: 150', stdout.getvalue())

    def test_quit(self):
        results, _ = self.run_commands('q')
        self.assertEqual(results, [False])

    def test_unknown_command_prints_help(self):
        _, output = self.run_commands('dance')
        self.assertIn('Commands:', output)


if __name__ == '__main__':
    unittest.main()
