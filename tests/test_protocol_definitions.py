#!/usr/bin/env python3
"""
Unit tests for the loopback wire helpers.
"""

import sys
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from blobwriter.common.protocol_definitions import (
    SessionInfo, build_write_url, create_auth_header, decode_write_path,
    parse_bearer_token, parse_recursive_flag, token_matches
)


class TestProtocolDefinitions(unittest.TestCase):
    """Test cases for URL and header helpers."""

    def setUp(self):
        self.session = SessionInfo(host='127.0.0.1', port=5123, token='secret-token')

    def test_build_write_url(self):
        """Test that the URL carries the quoted path and the recursive flag."""
        url = build_write_url(self.session, '/data/my file#1.bin', recursive=True)

        self.assertEqual(url, 'http://127.0.0.1:5123/data/my%20file%231.bin?recursive=true')

    def test_url_path_round_trip(self):
        """Test that the decoded URL path is the original filesystem path."""
        url = build_write_url(self.session, '/data/ünï cödé?.bin', recursive=False)
        raw_path = url[len(self.session.base_url):].split('?recursive=')[0]

        self.assertEqual(decode_write_path(raw_path), '/data/ünï cödé?.bin')
        self.assertTrue(url.endswith('?recursive=false'))

    def test_auth_header(self):
        """Test bearer header creation and parsing."""
        header = create_auth_header('abc')['Authorization']

        self.assertEqual(header, 'Bearer abc')
        self.assertEqual(parse_bearer_token(header), 'abc')
        self.assertEqual(parse_bearer_token('bearer abc'), 'abc')
        self.assertIsNone(parse_bearer_token('Basic abc'))
        self.assertIsNone(parse_bearer_token('Bearer '))
        self.assertIsNone(parse_bearer_token(None))

    def test_token_matches(self):
        """Test token comparison."""
        self.assertTrue(token_matches('Bearer secret-token', 'secret-token'))
        self.assertFalse(token_matches('Bearer wrong', 'secret-token'))
        self.assertFalse(token_matches(None, 'secret-token'))

    def test_parse_recursive_flag(self):
        """Test recursive flag parsing."""
        self.assertTrue(parse_recursive_flag('true'))
        self.assertTrue(parse_recursive_flag('TRUE'))
        self.assertFalse(parse_recursive_flag('false'))
        self.assertFalse(parse_recursive_flag(None))
        self.assertFalse(parse_recursive_flag(''))
        with self.assertRaises(ValueError):
            parse_recursive_flag('yes')


if __name__ == '__main__':
    unittest.main()
