import unittest

from phpbuild.lib.core.php_version import is_modern_php, parse_php_version
from phpbuild.lib.errors import UsageError


class PhpVersionTests(unittest.TestCase):
    def test_boundary_is_php_seven(self) -> None:
        self.assertTrue(is_modern_php("7.0"))
        self.assertTrue(is_modern_php("7.4.33"))
        self.assertTrue(is_modern_php("8.3.1"))
        self.assertFalse(is_modern_php("5.6.40"))
        self.assertFalse(is_modern_php("5"))

    def test_comparison_is_numeric_not_lexical(self) -> None:
        self.assertTrue(is_modern_php("10.0"))
        self.assertTrue(is_modern_php("7.10"))

    def test_trailing_dot_prefix_is_accepted(self) -> None:
        self.assertTrue(is_modern_php("7."))
        self.assertEqual(parse_php_version(" 8.2 ").major, 8)

    def test_garbage_is_rejected(self) -> None:
        for raw in ("", "   ", "latest", "php8"):
            with self.subTest(raw=raw):
                with self.assertRaises(UsageError):
                    parse_php_version(raw)
