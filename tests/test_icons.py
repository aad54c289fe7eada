"""Icon key normalization: allow-list pass-through and legacy code translation."""

import unittest

from app.core.icons import ALLOWED_ICON_KEYS, normalize_icon_key


class TestNormalizeIconKey(unittest.TestCase):
    def test_allowed_keys_pass_through(self) -> None:
        for key in ALLOWED_ICON_KEYS:
            self.assertEqual(normalize_icon_key(key), key)

    def test_legacy_codes_translate(self) -> None:
        self.assertEqual(normalize_icon_key("TS"), "shop")
        self.assertEqual(normalize_icon_key("TB"), "grid")
        self.assertEqual(normalize_icon_key("EX"), "credit-card")

    def test_surrounding_whitespace_ignored(self) -> None:
        self.assertEqual(normalize_icon_key("  shield "), "shield")

    def test_unknown_empty_and_non_string_are_none(self) -> None:
        self.assertIsNone(normalize_icon_key("rocket"))
        self.assertIsNone(normalize_icon_key(""))
        self.assertIsNone(normalize_icon_key("   "))
        self.assertIsNone(normalize_icon_key(None))
        self.assertIsNone(normalize_icon_key(42))
