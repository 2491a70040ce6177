#!/usr/bin/env python3
"""
Retrieval tests against an in-memory SQLite knowledge base.
"""
import unittest
from datetime import date, timedelta

from backend.app.retrieval import KnowledgeRetriever, escape_like
from backend.data.models import KnowledgeCategory

from db_utils import add_entry, drop_all, make_session_factory


class TestEscapeLike(unittest.TestCase):
    def test_escapes_wildcards(self):
        self.assertEqual(escape_like("50%"), "50\\%")
        self.assertEqual(escape_like("a_b"), "a\\_b")
        self.assertEqual(escape_like("back\\slash"), "back\\\\slash")
        self.assertEqual(escape_like("plain"), "plain")


class TestKnowledgeRetriever(unittest.TestCase):
    def setUp(self):
        self.Session, self.engine = make_session_factory()
        self.db = self.Session()
        self.retriever = KnowledgeRetriever(self.db)

    def tearDown(self):
        self.db.close()
        drop_all(self.engine)

    def test_retrieves_entry_by_keyword(self):
        add_entry(
            self.db,
            category=KnowledgeCategory.hours,
            title="Hours of Operation",
            content="Open Monday-Friday 6:30 AM to 6:30 PM",
            keywords=["hours", "open", "close"],
        )
        add_entry(self.db, title="Meals Provided", content="Breakfast and lunch", keywords=["meals"])

        results = self.retriever.retrieve("What are your hours?")

        self.assertEqual(len(results), 1)
        self.assertEqual(results[0].title, "Hours of Operation")

    def test_matches_title_substring_case_insensitive(self):
        add_entry(self.db, title="Nut-Free Facility", content="No peanuts are served.")
        results = self.retriever.retrieve("Is the facility safe?")
        self.assertEqual([e.title for e in results], ["Nut-Free Facility"])

    def test_matches_content_substring(self):
        add_entry(self.db, title="Payment", content="Tuition is due via AUTOPAY on the 1st.")
        results = self.retriever.retrieve("Can I use autopay")
        self.assertEqual(len(results), 1)

    def test_keyword_membership_is_whole_element(self):
        add_entry(self.db, title="Competitions", content="Ask the front desk.", keywords=["tournament"])
        self.assertEqual(self.retriever.find_active_entries(["tour"]), [])
        self.assertEqual(len(self.retriever.find_active_entries(["tournament"])), 1)

    def test_tags_are_stored_lowercase(self):
        entry = add_entry(self.db, title="Closing", content="We close early on Fridays.", keywords=["Naptime", " RESTING "])
        self.assertEqual(entry.keywords, ["naptime", "resting"])
        self.assertEqual([e.title for e in self.retriever.retrieve("Naptime?")], ["Closing"])

    def test_stop_word_question_returns_nothing(self):
        add_entry(self.db, title="What we do", content="What are we? We are a center.", keywords=["what"])
        self.assertEqual(self.retriever.retrieve("What are you?"), [])
        self.assertEqual(self.retriever.retrieve(""), [])

    def test_inactive_entries_are_skipped(self):
        add_entry(self.db, title="Old hours", content="hours", keywords=["hours"], is_active=False)
        self.assertEqual(self.retriever.retrieve("hours"), [])

    def test_validity_window(self):
        today = date(2026, 3, 1)
        add_entry(self.db, title="Future", content="holiday", effective_date=today + timedelta(days=1))
        add_entry(self.db, title="Expired", content="holiday", expiry_date=today - timedelta(days=1))
        add_entry(
            self.db,
            title="Current",
            content="holiday",
            effective_date=today,
            expiry_date=today,
        )
        add_entry(self.db, title="Open ended", content="holiday")

        results = self.retriever.find_active_entries(["holiday"], today=today)

        self.assertEqual(sorted(e.title for e in results), ["Current", "Open ended"])

    def test_limit_caps_results(self):
        for i in range(8):
            add_entry(self.db, title=f"Fee {i}", content="fee schedule")
        self.assertEqual(len(self.retriever.retrieve("fee")), 5)
        self.assertEqual(len(self.retriever.retrieve("fee", limit=3)), 3)

    def test_zero_limit_returns_nothing(self):
        for i in range(3):
            add_entry(self.db, title=f"Fee {i}", content="fee schedule")
        self.assertEqual(self.retriever.retrieve("fee", limit=0), [])
        self.assertEqual(KnowledgeRetriever(self.db, default_limit=0).retrieve("fee"), [])

    def test_default_limit_from_constructor(self):
        for i in range(4):
            add_entry(self.db, title=f"Fee {i}", content="fee schedule")
        retriever = KnowledgeRetriever(self.db, default_limit=2)
        self.assertEqual(len(retriever.retrieve("fee")), 2)

    def test_any_keyword_matches(self):
        add_entry(self.db, title="Lunch", content="Lunch is served at 11.")
        add_entry(self.db, title="Naps", content="Rest time after lunch.", keywords=["nap"])
        add_entry(self.db, title="Tuition", content="Monthly rates.")
        results = self.retriever.retrieve("lunch nap")
        self.assertEqual(sorted(e.title for e in results), ["Lunch", "Naps"])

    def test_percent_is_literal(self):
        add_entry(self.db, title="Discount", content="Siblings get 10% off.")
        add_entry(self.db, title="Meals", content="Breakfast is included.")

        self.assertEqual([e.title for e in self.retriever.find_active_entries(["%"])], ["Discount"])
        self.assertEqual([e.title for e in self.retriever.find_active_entries(["10%"])], ["Discount"])
        self.assertEqual(self.retriever.find_active_entries(["0%f"]), [])

    def test_underscore_is_literal(self):
        add_entry(self.db, title="Codes", content="Use code early_bird at signup.")
        add_entry(self.db, title="Other", content="earlyXbird")

        results = self.retriever.find_active_entries(["early_bird"])

        self.assertEqual([e.title for e in results], ["Codes"])

    def test_empty_keyword_list(self):
        add_entry(self.db, title="Anything", content="anything")
        self.assertEqual(self.retriever.find_active_entries([]), [])
        self.assertEqual(self.retriever.find_active_entries([""]), [])


if __name__ == "__main__":
    unittest.main()
