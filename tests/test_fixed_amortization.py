"""
Unit tests for the FixedAmortization facade.

Version: 0.1.0
Last Updated: 2026-10-19
Status: Active
"""

import unittest

from fixed_rate_amortization.amortization import FixedAmortization, build_ledger
from fixed_rate_amortization.errors import EmptyOperationError, InvalidParameterError
from fixed_rate_amortization.extra_payments import ExtraPaymentSet
from fixed_rate_amortization.periods import PeriodType

from tests.utilities import (
    REFERENCE_EXTRA,
    REFERENCE_FIRST_DUE,
    canadian_calculator,
    reference_calendar,
    us_calculator,
)


class TestFixedAmortization(unittest.TestCase):

    def setUp(self):
        self.calendar = reference_calendar()
        self.loan = FixedAmortization(us_calculator(), self.calendar)
        self.recurring = ExtraPaymentSet.from_definition(self.calendar, REFERENCE_EXTRA, self.calendar)

    def test_table_is_built_eagerly(self):
        self.assertEqual(self.loan.table, build_ledger(us_calculator(), self.calendar))
        self.assertEqual(self.loan.pmt, 928.85)
        self.assertEqual(len(self.loan.extra_payments), 0)

    def test_set_extra_payments(self):
        updated = self.loan.set_extra_payments(self.recurring)
        self.assertEqual(len(updated.table), 132)
        self.assertEqual(updated.extra_payment(REFERENCE_FIRST_DUE), REFERENCE_EXTRA)
        # Original untouched
        self.assertEqual(len(self.loan.table), 240)
        self.assertEqual(self.loan.extra_payment(REFERENCE_FIRST_DUE), 0.0)

    def test_add_and_remove_extra_payments(self):
        updated = self.loan.add_extra_payments({REFERENCE_FIRST_DUE: 100.0})
        updated = updated.add_extra_payments({REFERENCE_FIRST_DUE: 50.0})
        self.assertEqual(updated.extra_payment(REFERENCE_FIRST_DUE), 150.0)
        self.assertEqual(updated.table.first.extra_principal, 150.0)
        removed = updated.remove_extra_payments(REFERENCE_FIRST_DUE)
        self.assertEqual(removed.table, self.loan.table)

    def test_clear_extra_payments(self):
        cleared = self.loan.set_extra_payments(self.recurring).clear_extra_payments()
        self.assertEqual(len(cleared.table), 240)
        with self.assertRaises(EmptyOperationError):
            cleared.clear_extra_payments()

    def test_with_calculator_keeps_extras(self):
        with_extras = FixedAmortization(us_calculator(), self.calendar, self.recurring)
        canadian = with_extras.with_calculator(canadian_calculator())
        self.assertEqual(canadian.extra_payments, self.recurring)
        self.assertEqual(canadian.table.first.extra_principal, REFERENCE_EXTRA)

    def test_with_calendar_drops_extras(self):
        with_extras = FixedAmortization(us_calculator(), self.calendar, self.recurring)
        moved = with_extras.with_calendar(reference_calendar(years=25))
        self.assertEqual(len(moved.extra_payments), 0)
        self.assertEqual(moved.extra_payments.mortgage_calendar.count, 300)
        self.assertEqual(len(moved.table), 240)

    def test_rejects_non_set_extras(self):
        with self.assertRaises(InvalidParameterError):
            FixedAmortization(us_calculator(), self.calendar, {REFERENCE_FIRST_DUE: 10.0})

    def test_biweekly_loan(self):
        calculator = us_calculator(period_type=PeriodType.RAPID_BIWEEKLY)
        loan = FixedAmortization(calculator, reference_calendar(PeriodType.RAPID_BIWEEKLY))
        self.assertTrue(loan.table.is_paid_off)
        # Thirteen monthly-equivalent payments a year pay off early
        self.assertLess(len(loan.table), 20 * 26)


if __name__ == '__main__':
    unittest.main()
