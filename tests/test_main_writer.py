#!/usr/bin/env python3
"""
Unit tests for the command-line entry point.
"""

import io
import os
import sys
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from main_writer import main


class TestMainWriter(unittest.TestCase):
    """Test cases for main_writer.main."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.base = os.path.realpath(self.tmp.name)
        self.source = os.path.join(self.base, 'source.bin')
        self.data = os.urandom(64 * 1024)
        with open(self.source, 'wb') as f:
            f.write(self.data)

    def tearDown(self):
        self.tmp.cleanup()

    def test_copies_into_symbolic_root(self):
        """Test a copy into the DOCUMENTS root with transfer logging."""
        log_dir = os.path.join(self.base, 'logs')
        out = io.StringIO()

        with redirect_stdout(out):
            code = main([self.source, 'sub/copy.bin', '--directory', 'DOCUMENTS', '--recursive',
                         '--root-base', self.base, '--log-dir', log_dir])

        expected = os.path.join(self.base, 'Documents', 'sub', 'copy.bin')
        self.assertEqual(code, 0)
        self.assertEqual(out.getvalue().strip(), expected)
        with open(expected, 'rb') as f:
            self.assertEqual(f.read(), self.data)

    def test_invalid_path_exit_code(self):
        """Test that an escaping target exits with 2."""
        code = main([self.source, '../outside.bin', '--directory', 'DATA', '--root-base', self.base])

        self.assertEqual(code, 2)

    def test_missing_source_exit_code(self):
        """Test that a missing source file exits with 1."""
        code = main([os.path.join(self.base, 'nope.bin'), os.path.join(self.base, 'x.bin')])

        self.assertEqual(code, 1)

    def test_missing_parent_exit_code(self):
        """Test that a missing parent without --recursive exits with 1."""
        target = os.path.join(self.base, 'missing', 'x.bin')

        code = main([self.source, target, '--chunk-size', '3072'])

        self.assertEqual(code, 1)
        self.assertFalse(os.path.exists(os.path.join(self.base, 'missing')))


if __name__ == '__main__':
    unittest.main()
