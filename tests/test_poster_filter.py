import unittest
from datetime import datetime, timedelta, timezone
from email.utils import format_datetime

from postersearch.poster_filter import (
    PosterFilter,
    date_cutoff,
    normalize_search_term,
    parse_overview_date,
    poster_matches,
)

NOW = datetime(2024, 3, 10, 12, 0, 0, tzinfo=timezone.utc)


def record(from_field, date):
    if isinstance(date, datetime):
        date = format_datetime(date)
    return {"article": "105", "subject": "Hello", "from": from_field, "date": date}


class NormalizeTests(unittest.TestCase):
    def test_splits_name_and_email(self):
        self.assertEqual(("john doe", "j@x.com"), normalize_search_term("  John Doe <J@X.com>  "))

    def test_name_only(self):
        self.assertEqual(("jane", ""), normalize_search_term("Jane"))

    def test_email_only(self):
        self.assertEqual(("", "j@x.com"), normalize_search_term("<j@x.com>"))

    def test_idempotent(self):
        for term in ["John Doe <J@X.com>", " jane ", "<a@b>", "x <y"]:
            name, email = normalize_search_term(term)
            rebuilt = f"{name} <{email}>" if email else name
            self.assertEqual((name, email), normalize_search_term(rebuilt))


class MatchTests(unittest.TestCase):
    def test_exact_match(self):
        search = normalize_search_term("john doe <j@x.com>")
        self.assertTrue(poster_matches(search, "John Doe <j@x.com>", exact=True))

    def test_exact_rejects_partial_name(self):
        search = normalize_search_term("john <j@x.com>")
        self.assertFalse(poster_matches(search, "John Doe <j@x.com>", exact=True))

    def test_exact_rejects_missing_email(self):
        search = normalize_search_term("john doe")
        self.assertFalse(poster_matches(search, "John Doe <j@x.com>", exact=True))

    def test_substring_without_email_matches_on_name(self):
        search = normalize_search_term("doe")
        self.assertTrue(poster_matches(search, "John Doe <j@x.com>"))

    def test_substring_requires_both_parts(self):
        search = normalize_search_term("doe <other@x.com>")
        self.assertFalse(poster_matches(search, "John Doe <j@x.com>"))

    def test_substring_name_mismatch(self):
        search = normalize_search_term("jane")
        self.assertFalse(poster_matches(search, "John Doe <j@x.com>"))


class DateTests(unittest.TestCase):
    def test_parse_strips_zone_comment(self):
        parsed = parse_overview_date("Mon, 1 Jan 2024 10:00:00 +0200 (CEST)")
        self.assertEqual(datetime(2024, 1, 1, 8, 0, 0, tzinfo=timezone.utc), parsed)

    def test_parse_failure_returns_none(self):
        self.assertIsNone(parse_overview_date("yesterday"))

    def test_parse_negative_offset(self):
        parsed = parse_overview_date("Sat, 30 Dec 2023 22:15:00 -0530")
        self.assertEqual(datetime(2023, 12, 31, 3, 45, 0, tzinfo=timezone.utc), parsed)

    def test_parse_uses_english_names_only(self):
        self.assertIsNone(parse_overview_date("Mo, 1 Jan 2024 10:00:00 +0000"))
        self.assertIsNone(parse_overview_date("Mon, 1 Mai 2024 10:00:00 +0000"))
        self.assertIsNotNone(parse_overview_date("Wed, 1 May 2024 10:00:00 +0000"))

    def test_parse_rejects_impossible_values(self):
        self.assertIsNone(parse_overview_date("Mon, 32 Jan 2024 10:00:00 +0000"))
        self.assertIsNone(parse_overview_date("Mon, 1 Jan 2024 10:00:00 +9999"))

    def test_no_cutoff_for_zero_days(self):
        self.assertIsNone(date_cutoff(0, NOW))

    def test_zero_days_accepts_old_records(self):
        poster_filter = PosterFilter.build("john", days=0, now=NOW)
        self.assertTrue(poster_filter.matches(record("John <j@x.com>", "Mon, 1 Jan 1990 10:00:00 +0000")))

    def test_zero_days_rejects_unparseable_date(self):
        poster_filter = PosterFilter.build("john", days=0, now=NOW)
        self.assertFalse(poster_filter.matches(record("John <j@x.com>", "garbage")))

    def test_boundary_is_exclusive(self):
        poster_filter = PosterFilter.build("john", days=7, now=NOW)
        cutoff = NOW - timedelta(days=7)
        self.assertEqual(cutoff, poster_filter.cutoff)
        self.assertFalse(poster_filter.matches(record("John <j@x.com>", cutoff)))
        self.assertTrue(poster_filter.matches(record("John <j@x.com>", cutoff + timedelta(days=1))))
        self.assertTrue(poster_filter.matches(record("John <j@x.com>", cutoff + timedelta(seconds=1))))

    def test_poster_gate_applies_before_date(self):
        poster_filter = PosterFilter.build("jane", days=0, now=NOW)
        self.assertFalse(poster_filter.matches(record("John <j@x.com>", NOW)))


class ScenarioTests(unittest.TestCase):
    LINE_FROM = "John Doe <j@x.com>"
    LINE_DATE = "Mon, 1 Jan 2024 10:00:00 +0000"

    def test_exact_scenario_selects_article(self):
        poster_filter = PosterFilter.build("john doe <j@x.com>", days=0, exact=True)
        self.assertTrue(poster_filter.matches(record(self.LINE_FROM, self.LINE_DATE)))

    def test_name_mismatch_scenario(self):
        poster_filter = PosterFilter.build("jane", days=0)
        self.assertFalse(poster_filter.matches(record(self.LINE_FROM, self.LINE_DATE)))


if __name__ == "__main__":
    unittest.main()
