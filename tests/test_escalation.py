#!/usr/bin/env python3
import unittest

from backend.app.config import DEFAULT_SENSITIVE_KEYWORDS
from backend.nlu.rules import EscalationPolicy


class TestEscalationPolicy(unittest.TestCase):
    def setUp(self):
        self.policy = EscalationPolicy(DEFAULT_SENSITIVE_KEYWORDS)

    def test_schedule_a_tour_escalates(self):
        self.assertTrue(self.policy.should_escalate("I want to schedule a tour"))

    def test_general_question_does_not_escalate(self):
        self.assertFalse(self.policy.should_escalate("What are your hours?"))

    def test_case_insensitive(self):
        self.assertTrue(self.policy.should_escalate("I have a COMPLAINT about pickup"))
        self.assertTrue(self.policy.should_escalate("What is the Door Code?"))

    def test_phrase_inside_longer_word(self):
        self.assertTrue(self.policy.should_escalate("Are visiting grandparents allowed?"))

    def test_configured_phrases_are_lowercased(self):
        policy = EscalationPolicy(["Field Trip"])
        self.assertTrue(policy.should_escalate("when is the field trip"))
        self.assertFalse(policy.should_escalate("when is the trip"))

    def test_matched_phrase(self):
        self.assertEqual(self.policy.matched_phrase("There is a custody order"), "custody")
        self.assertIsNone(self.policy.matched_phrase("What is for lunch?"))

    def test_empty_question(self):
        self.assertFalse(self.policy.should_escalate(""))

    def test_empty_configuration_never_escalates(self):
        self.assertFalse(EscalationPolicy([]).should_escalate("custody complaint"))

    def test_from_config(self):
        policy = EscalationPolicy.from_config()
        self.assertTrue(policy.sensitive_keywords)


if __name__ == "__main__":
    unittest.main()
