"""
Common ground for the mpnum unit tests.

Each test runs under a fresh context, pushed in setUp() and popped in tearDown(),
so sticky flags never leak from one test to another.
"""

import math
import unittest

import mpnum
from mpnum import floating


def floats_really_same(f1, f2):
    """
    Same float, telling -0.0 from 0.0, and NaN the same as NaN.

    assert floats_really_same(float('nan'), float('nan'))
    assert not floats_really_same(0.0, -0.0)
    """
    if math.isnan(f1) or math.isnan(f2):
        return math.isnan(f1) and math.isnan(f2)
    return f1 == f2 and math.copysign(1.0, f1) == math.copysign(1.0, f2)


class MpnumTests(unittest.TestCase):

    def setUp(self):
        super(MpnumTests, self).setUp()
        self.context = mpnum.push(mpnum.context())

    def tearDown(self):
        mpnum.pop()
        super(MpnumTests, self).tearDown()

    def assertExactType(self, expected_type, value):
        """isinstance() is not enough:  an xmpz is an mpz, but not the other way around."""
        self.assertIs(expected_type, type(value), "{!r} is a {}, not a {}".format(
            value,
            type(value).__name__,
            expected_type.__name__,
        ))

    def assertMpfrSame(self, x1, x2):
        """Same bits, same sign of zero, same precision."""
        self.assertExactType(mpnum.mpfr, x1)
        self.assertExactType(mpnum.mpfr, x2)
        self.assertEqual(x1._mpf, x2._mpf, "{!r} has different bits from {!r}".format(x1, x2))
        self.assertEqual(x1.precision, x2.precision)

    def assertFloatSame(self, x1, x2):
        self.assertTrue(floats_really_same(x1, x2), "{x1} is not the same as {x2}".format(
            x1=x1,
            x2=x2,
        ))

    def assertNan(self, x):
        self.assertTrue(x.is_nan(), "{!r} is not NaN".format(x))

    def assertNegativeZero(self, x):
        self.assertTrue(x.is_zero() and x.is_signed(), "{!r} is not -0".format(x))

    def assertPositiveZero(self, x):
        self.assertTrue(x.is_zero() and not x.is_signed(), "{!r} is not +0".format(x))

    def assertFlags(self, expected_flags, context=None):
        """Exactly these sticky flags are raised, no others."""
        if context is None:
            context = self.context
        self.assertEqual(set(expected_flags), context.flags())

    def assertRaw(self, expected_raw, x):
        self.assertEqual(floating.plain(expected_raw), floating.plain(x._mpf))
        self.assertEqual(floating.is_signed(expected_raw), x.is_signed())
