import unittest
from datetime import date, datetime, timezone as dt_timezone
from decimal import Decimal

from apps.common.money import money_str, to_money
from apps.common.periods import (
    PERIOD_ALL,
    PERIOD_DAILY,
    PERIOD_MONTHLY,
    PERIOD_WEEKLY,
    PERIOD_YEARLY,
    date_bounds,
    normalize_period,
    parse_date,
    period_start,
)

# Thursday afternoon, UTC
NOW = datetime(2024, 5, 16, 15, 42, 7, tzinfo=dt_timezone.utc)


class PeriodTests(unittest.TestCase):
    def test_normalize_period(self):
        self.assertEqual(normalize_period(None), PERIOD_ALL)
        self.assertEqual(normalize_period(" monthly "), PERIOD_MONTHLY)
        self.assertIsNone(normalize_period("FORTNIGHTLY"))

    def test_period_starts(self):
        self.assertEqual(period_start(PERIOD_DAILY, NOW).date(), date(2024, 5, 16))
        self.assertEqual(period_start(PERIOD_DAILY, NOW).hour, 0)
        # Weeks start on Monday
        self.assertEqual(period_start(PERIOD_WEEKLY, NOW).date(), date(2024, 5, 13))
        self.assertEqual(period_start(PERIOD_MONTHLY, NOW).date(), date(2024, 5, 1))
        self.assertEqual(period_start(PERIOD_YEARLY, NOW).date(), date(2024, 1, 1))
        self.assertIsNone(period_start(PERIOD_ALL, NOW))

    def test_parse_date(self):
        self.assertIsNone(parse_date(""))
        self.assertEqual(parse_date("2024-02-29T10:00:00Z"), date(2024, 2, 29))
        with self.assertRaises(ValueError):
            parse_date("29/02/2024")

    def test_date_bounds_include_the_whole_end_day(self):
        lower, upper = date_bounds(date(2024, 5, 1), date(2024, 5, 31))
        self.assertEqual(lower.date(), date(2024, 5, 1))
        self.assertEqual(upper.date(), date(2024, 6, 1))
        self.assertEqual(date_bounds(None, None), (None, None))


class MoneyTests(unittest.TestCase):
    def test_to_money_rounds_half_up(self):
        self.assertEqual(to_money("10.005"), Decimal("10.01"))
        self.assertEqual(to_money(5), Decimal("5.00"))

    def test_to_money_rejects_garbage(self):
        with self.assertRaises(ValueError):
            to_money("five")
        with self.assertRaises(ValueError):
            to_money(Decimal("NaN"))

    def test_money_str(self):
        self.assertEqual(money_str(None), "0.00")
        self.assertEqual(money_str(Decimal("12.5")), "12.50")
