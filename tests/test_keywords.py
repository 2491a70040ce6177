#!/usr/bin/env python3
import unittest

from backend.nlu.keywords import STOP_WORDS, extract_keywords


class TestExtractKeywords(unittest.TestCase):
    def test_hours_question(self):
        self.assertEqual(extract_keywords("What are your hours?"), ["hours"])

    def test_lowercases_and_strips_punctuation(self):
        self.assertEqual(
            extract_keywords("Is the Nut-Free policy STRICT?!"),
            ["nutfree", "policy", "strict"],
        )

    def test_drops_short_tokens(self):
        self.assertEqual(extract_keywords("Is it ok to go at 6 pm"), [])

    def test_stop_words_only(self):
        self.assertEqual(extract_keywords("What would you have been"), [])
        self.assertEqual(extract_keywords(" ".join(sorted(STOP_WORDS))), [])

    def test_empty_input(self):
        self.assertEqual(extract_keywords(""), [])
        self.assertEqual(extract_keywords("   \n\t "), [])

    def test_keeps_digits_and_duplicates(self):
        self.assertEqual(
            extract_keywords("Fees for 2025 and 2026 fees"),
            ["fees", "for", "2025", "and", "2026", "fees"],
        )

    def test_wildcard_characters_removed(self):
        self.assertEqual(extract_keywords("100% tuition_refund"), ["100", "tuitionrefund"])

    def test_no_stemming(self):
        self.assertEqual(extract_keywords("meals meal"), ["meals", "meal"])


if __name__ == "__main__":
    unittest.main()
