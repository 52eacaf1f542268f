"""
Unit tests for extra principal payment sets.

Version: 0.1.0
Last Updated: 2026-10-19
Status: Active
"""

import datetime as dt
import unittest
from collections.abc import Mapping

from fixed_rate_amortization.errors import (
    EmptyOperationError,
    IncompatiblePeriodError,
    InvalidParameterError,
    UnknownDateError,
)
from fixed_rate_amortization.extra_payments import ExtraPaymentSet
from fixed_rate_amortization.payment_calendar import PeriodCalendar
from fixed_rate_amortization.periods import PeriodType

from tests.utilities import REFERENCE_FIRST_DUE, reference_calendar


# =============================================================================
# Module-level shared data (populated by setUpModule)
# =============================================================================

MONTHLY_CALENDAR: PeriodCalendar | None = None
BIWEEKLY_CALENDAR: PeriodCalendar | None = None


def setUpModule():
    """Build the mortgage calendars shared by every test."""
    global MONTHLY_CALENDAR, BIWEEKLY_CALENDAR
    MONTHLY_CALENDAR = reference_calendar(PeriodType.MONTHLY, 20)
    BIWEEKLY_CALENDAR = reference_calendar(PeriodType.BIWEEKLY, 20)


def tearDownModule():
    global MONTHLY_CALENDAR, BIWEEKLY_CALENDAR
    MONTHLY_CALENDAR = None
    BIWEEKLY_CALENDAR = None


def month(n: int) -> dt.date:
    """Due-date of the n-th monthly payment (1-based)."""
    return MONTHLY_CALENDAR[n - 1]


# =============================================================================
# Test Classes
# =============================================================================

class TestFromDefinition(unittest.TestCase):

    def test_recurring_monthly_extra(self):
        extras = ExtraPaymentSet.from_definition(MONTHLY_CALENDAR, 500.0, MONTHLY_CALENDAR)
        self.assertEqual(len(extras), 240)
        self.assertEqual(extras.total, 120_000.0)
        self.assertEqual(extras[REFERENCE_FIRST_DUE], 500.0)

    def test_yearly_extra_on_monthly_mortgage(self):
        yearly = PeriodCalendar(PeriodType.YEARLY, REFERENCE_FIRST_DUE, 5)
        extras = ExtraPaymentSet.from_definition(yearly, 1000.0, MONTHLY_CALENDAR)
        self.assertEqual(list(extras), [dt.date(2020 + k, 2, 1) for k in range(5)])

    def test_yearly_for_biweekly_extra_on_biweekly_mortgage(self):
        yearly = PeriodCalendar(PeriodType.YEARLY_FOR_BIWEEKLY, BIWEEKLY_CALENDAR.first_date, 4)
        extras = ExtraPaymentSet.from_definition(yearly, 250.0, BIWEEKLY_CALENDAR)
        self.assertEqual(len(extras), 4)
        for day in extras:
            self.assertIn(day, BIWEEKLY_CALENDAR)

    def test_onetime_extra(self):
        onetime = PeriodCalendar(PeriodType.ONETIME, month(12))
        extras = ExtraPaymentSet.from_definition(onetime, 10_000.0, MONTHLY_CALENDAR)
        self.assertEqual(dict(extras), {month(12): 10_000.0})

    def test_incompatible_periods_raise(self):
        cases = [
            (PeriodType.WEEKLY, MONTHLY_CALENDAR),
            (PeriodType.BIWEEKLY, MONTHLY_CALENDAR),
            (PeriodType.YEARLY, BIWEEKLY_CALENDAR),
            (PeriodType.YEARLY_FOR_WEEKLY, BIWEEKLY_CALENDAR),
            (PeriodType.MONTHLY, BIWEEKLY_CALENDAR),
        ]
        for extra_period, mortgage in cases:
            with self.subTest(extra_period=extra_period, mortgage=mortgage.period_type):
                extra_calendar = PeriodCalendar(extra_period, mortgage.first_date, 1)
                with self.assertRaises(IncompatiblePeriodError):
                    ExtraPaymentSet.from_definition(extra_calendar, 100.0, mortgage)

    def test_date_not_in_mortgage_calendar_raises(self):
        onetime = PeriodCalendar(PeriodType.ONETIME, dt.date(2020, 2, 2))
        with self.assertRaises(UnknownDateError):
            ExtraPaymentSet.from_definition(onetime, 100.0, MONTHLY_CALENDAR)

    def test_extra_calendar_past_mortgage_end_raises(self):
        too_long = PeriodCalendar(PeriodType.MONTHLY, month(230), 20)
        with self.assertRaises(UnknownDateError):
            ExtraPaymentSet.from_definition(too_long, 100.0, MONTHLY_CALENDAR)

    def test_non_positive_amount_raises(self):
        for amount in (0.0, -50.0, float("nan")):
            with self.subTest(amount=amount):
                with self.assertRaises(InvalidParameterError):
                    ExtraPaymentSet.from_definition(MONTHLY_CALENDAR, amount, MONTHLY_CALENDAR)


class TestExtraPaymentSetMapping(unittest.TestCase):

    def test_empty_set(self):
        extras = ExtraPaymentSet.empty(MONTHLY_CALENDAR)
        self.assertEqual(len(extras), 0)
        self.assertEqual(extras.total, 0.0)
        self.assertIsInstance(extras, Mapping)

    def test_get_returns_zero_when_absent(self):
        extras = ExtraPaymentSet.empty(MONTHLY_CALENDAR).set_payment(month(3), 75.0)
        self.assertEqual(extras.get(month(3)), 75.0)
        self.assertEqual(extras.get(month(4)), 0.0)
        with self.assertRaises(KeyError):
            extras[month(4)]

    def test_iteration_is_chronological(self):
        extras = ExtraPaymentSet.empty(MONTHLY_CALENDAR).set({
            month(9): 1.0,
            month(2): 2.0,
            month(5): 3.0,
        })
        self.assertEqual(list(extras), [month(2), month(5), month(9)])
        self.assertEqual(extras.entries, ((month(2), 2.0), (month(5), 3.0), (month(9), 1.0)))

    def test_value_equality(self):
        a = ExtraPaymentSet.empty(MONTHLY_CALENDAR).set({month(1): 10.0, month(2): 20.0})
        b = ExtraPaymentSet.empty(MONTHLY_CALENDAR).set({month(2): 20.0}).set({month(1): 10.0})
        self.assertEqual(a, b)

    def test_datetime_keys_are_normalised(self):
        extras = ExtraPaymentSet.empty(MONTHLY_CALENDAR).set({dt.datetime(2020, 3, 1, 9, 0): 40.0})
        self.assertEqual(extras.get(dt.date(2020, 3, 1)), 40.0)

    def test_non_mortgage_calendar_raises(self):
        yearly = PeriodCalendar(PeriodType.YEARLY, REFERENCE_FIRST_DUE, 5)
        with self.assertRaises(InvalidParameterError):
            ExtraPaymentSet.empty(yearly)


class TestSetAndAdd(unittest.TestCase):

    def setUp(self):
        self.extras = ExtraPaymentSet.empty(MONTHLY_CALENDAR).set({month(1): 100.0, month(2): 200.0})

    def test_set_overwrites(self):
        updated = self.extras.set({month(2): 50.0, month(3): 25.0})
        self.assertEqual(dict(updated), {month(1): 100.0, month(2): 50.0, month(3): 25.0})

    def test_add_sums(self):
        updated = self.extras.add({month(2): 50.0, month(3): 25.0})
        self.assertEqual(dict(updated), {month(1): 100.0, month(2): 250.0, month(3): 25.0})

    def test_single_entry_conveniences(self):
        self.assertEqual(self.extras.set_payment(month(1), 5.0)[month(1)], 5.0)
        self.assertEqual(self.extras.add_payment(month(1), 5.0)[month(1)], 105.0)

    def test_add_accepts_another_set(self):
        recurring = ExtraPaymentSet.from_definition(
            PeriodCalendar(PeriodType.MONTHLY, month(1), 3), 10.0, MONTHLY_CALENDAR
        )
        updated = self.extras.add(recurring)
        self.assertEqual(dict(updated), {month(1): 110.0, month(2): 210.0, month(3): 10.0})

    def test_original_is_unchanged(self):
        self.extras.set({month(1): 1.0})
        self.extras.add({month(2): 1.0})
        self.assertEqual(dict(self.extras), {month(1): 100.0, month(2): 200.0})

    def test_unknown_date_aborts_whole_batch(self):
        with self.assertRaises(UnknownDateError):
            self.extras.add({month(3): 10.0, dt.date(2020, 3, 15): 10.0})
        with self.assertRaises(UnknownDateError):
            self.extras.set({month(3): 10.0, dt.date(2045, 1, 1): 10.0})
        self.assertNotIn(month(3), self.extras)

    def test_invalid_amount_raises(self):
        with self.assertRaises(InvalidParameterError):
            self.extras.set({month(3): 0.0})
        with self.assertRaises(InvalidParameterError):
            self.extras.add({month(3): -5.0})

    def test_non_mapping_raises(self):
        with self.assertRaises(InvalidParameterError):
            self.extras.set([(month(3), 10.0)])


class TestRemoveAndClear(unittest.TestCase):

    def setUp(self):
        self.extras = ExtraPaymentSet.empty(MONTHLY_CALENDAR).set({
            month(1): 100.0,
            month(2): 200.0,
            month(3): 300.0,
        })

    def test_remove_iterable(self):
        updated = self.extras.remove([month(1), month(3)])
        self.assertEqual(dict(updated), {month(2): 200.0})

    def test_remove_single_date(self):
        updated = self.extras.remove(month(2))
        self.assertEqual(list(updated), [month(1), month(3)])

    def test_remove_missing_date_is_atomic(self):
        with self.assertRaises(UnknownDateError):
            self.extras.remove([month(1), month(4)])
        self.assertEqual(len(self.extras), 3)

    def test_remove_from_empty_raises(self):
        with self.assertRaises(EmptyOperationError):
            ExtraPaymentSet.empty(MONTHLY_CALENDAR).remove([month(1)])

    def test_clear(self):
        cleared = self.extras.clear()
        self.assertEqual(len(cleared), 0)
        self.assertEqual(cleared.mortgage_calendar, MONTHLY_CALENDAR)
        with self.assertRaises(EmptyOperationError):
            cleared.clear()


if __name__ == '__main__':
    unittest.main()
