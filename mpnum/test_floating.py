"""
Unit tests for floating.py, the raw Real and Complex kernels.
"""

import fractions
import unittest

from mpmath.libmp import fnan, finf, fninf, fone, from_float, from_int, from_man_exp, fzero

from mpnum import floating
from mpnum.floating import fnzero
from mpnum.context import (
    EMAX_DEFAULT,
    EMIN_DEFAULT,
    Flag,
    RoundAwayZero,
    RoundDown,
    RoundToNearest,
    RoundToZero,
    RoundUp,
)
from mpnum.test_base import MpnumTests


def run(the_kernel, prec=53, rounding=RoundToNearest, emin=EMIN_DEFAULT, emax=EMAX_DEFAULT, subnormalize=False):
    return floating.evaluate(the_kernel, prec, rounding, emin, emax, subnormalize)


THIRD = fractions.Fraction(1, 3)


class RawValueTests(MpnumTests):

    def test_predicates(self):
        self.assertTrue(floating.is_nan(fnan))
        self.assertTrue(floating.is_inf(fninf))
        self.assertTrue(floating.is_special(finf))
        self.assertFalse(floating.is_special(fnzero))
        self.assertTrue(floating.is_zero(fnzero))
        self.assertTrue(floating.is_signed(fnzero))
        self.assertFalse(floating.is_signed(fnan))
        self.assertTrue(floating.is_integer(from_int(12)))
        self.assertFalse(floating.is_integer(from_float(0.5)))
        self.assertFalse(floating.is_integer(finf))

    def test_negative_zero(self):
        self.assertEqual((1, 0, 0, 0), fnzero)
        self.assertEqual(fnzero, floating.from_float_signed(-0.0))
        self.assertEqual(fnzero, floating.signed_zero(True))
        self.assertNotEqual(fzero, fnzero)

    def test_negate_keeps_zero_sign(self):
        self.assertEqual(fnzero, floating.negate(fzero))
        self.assertEqual(fzero, floating.negate(fnzero))
        self.assertEqual(fninf, floating.negate(finf))
        self.assertEqual(from_int(-3), floating.negate(from_int(3)))

    def test_absolute(self):
        self.assertEqual(fzero, floating.absolute(fnzero))
        self.assertEqual(finf, floating.absolute(fninf))
        self.assertEqual(from_int(3), floating.absolute(from_int(-3)))

    def test_plain(self):
        self.assertEqual(fzero, floating.plain(fnzero))
        self.assertEqual(fone, floating.plain(fone))

    def test_fraction(self):
        self.assertEqual(fractions.Fraction(0.1), floating.to_fraction(from_float(0.1)))
        self.assertEqual(fractions.Fraction(-12), floating.to_fraction(from_int(-12)))
        with self.assertRaises(ValueError):
            floating.to_fraction(fnan)
        self.assertEqual(from_man_exp(3, -3), floating.from_fraction_exact(fractions.Fraction(3, 8)))
        self.assertIsNone(floating.from_fraction_exact(THIRD))

    def test_from_float_signed(self):
        self.assertEqual(fnzero, floating.from_float_signed(-0.0))
        self.assertEqual(fzero, floating.from_float_signed(0.0))
        self.assertEqual(from_int(2), floating.from_float_signed(2.0))

    def test_compare(self):
        self.assertEqual(0, floating.compare(fzero, fnzero))
        self.assertEqual(-1, floating.compare(fninf, fzero))
        self.assertEqual(1, floating.compare(from_int(2), fone))
        self.assertIsNone(floating.compare(fnan, fone))
        self.assertIsNone(floating.compare(fnan, fnan))


class RoundingTests(MpnumTests):

    def test_ternary_value(self):
        self.assertEqual(0, run(floating.from_integer(3)).rc)
        self.assertLess(0, run(floating.from_fraction(THIRD), rounding=RoundUp).rc)
        self.assertGreater(0, run(floating.from_fraction(THIRD), rounding=RoundDown).rc)
        self.assertGreater(0, run(floating.from_fraction(THIRD), rounding=RoundToZero).rc)
        self.assertLess(0, run(floating.from_fraction(THIRD), rounding=RoundAwayZero).rc)
        self.assertLess(0, run(floating.from_fraction(-THIRD), rounding=RoundToZero).rc)

    def test_inexact_flag_follows_rc(self):
        self.assertEqual(frozenset(), run(floating.from_integer(3)).flags)
        self.assertEqual({Flag.INEXACT}, run(floating.from_fraction(THIRD)).flags)

    def test_precision(self):
        rounded = run(floating.from_integer(0b10111), prec=3, rounding=RoundToZero)
        self.assertEqual(from_int(0b10100), rounded.value)
        rounded = run(floating.from_integer(0b10111), prec=3, rounding=RoundUp)
        self.assertEqual(from_int(0b11000), rounded.value)

    def test_nan_result_is_invalid(self):
        self.assertEqual({Flag.INVALID}, run(floating.constant(fnan)).flags)


class RangeTests(MpnumTests):

    def test_overflow_to_infinity(self):
        rounded = run(floating.from_integer(2 ** 11), emin=-10, emax=10)
        self.assertEqual(finf, rounded.value)
        self.assertEqual(1, rounded.rc)
        self.assertEqual({Flag.OVERFLOW, Flag.INEXACT}, rounded.flags)

    def test_overflow_to_largest(self):
        rounded = run(floating.from_integer(2 ** 11), prec=4, rounding=RoundToZero, emin=-10, emax=10)
        self.assertEqual(from_int(15 * 2 ** 6), rounded.value)
        self.assertEqual(-1, rounded.rc)
        self.assertEqual({Flag.OVERFLOW, Flag.INEXACT}, rounded.flags)

    def test_negative_overflow_directed(self):
        rounded = run(floating.from_integer(-2 ** 11), prec=4, rounding=RoundUp, emin=-10, emax=10)
        self.assertEqual(from_int(-15 * 2 ** 6), rounded.value)
        rounded = run(floating.from_integer(-2 ** 11), prec=4, rounding=RoundDown, emin=-10, emax=10)
        self.assertEqual(fninf, rounded.value)

    def test_underflow_to_zero(self):
        rounded = run(floating.from_fraction(fractions.Fraction(1, 2 ** 20)), emin=-10, emax=10)
        self.assertEqual(fzero, rounded.value)
        self.assertEqual(-1, rounded.rc)
        self.assertEqual({Flag.UNDERFLOW, Flag.INEXACT}, rounded.flags)

    def test_underflow_keeps_sign(self):
        rounded = run(floating.from_fraction(fractions.Fraction(-1, 2 ** 20)), emin=-10, emax=10)
        self.assertEqual(fnzero, rounded.value)

    def test_underflow_to_minimum(self):
        smallest = from_man_exp(1, -11)
        rounded = run(floating.from_fraction(fractions.Fraction(1, 2 ** 20)), rounding=RoundUp, emin=-10, emax=10)
        self.assertEqual(smallest, rounded.value)
        self.assertEqual(1, rounded.rc)
        rounded = run(floating.from_fraction(fractions.Fraction(-1, 2 ** 20)), rounding=RoundDown, emin=-10, emax=10)
        self.assertEqual(floating.negate(smallest), rounded.value)

    def test_in_range_untouched(self):
        rounded = run(floating.from_integer(2 ** 9), emin=-10, emax=10)
        self.assertEqual(from_int(2 ** 9), rounded.value)
        self.assertEqual(frozenset(), rounded.flags)

    def test_subnormal(self):
        # 3 * 2**-12 has exponent -10, so only one bit survives, rounding the tie to even.
        rounded = run(floating.from_fraction(fractions.Fraction(3, 2 ** 12)), emin=-10, emax=10, subnormalize=True)
        self.assertEqual(from_man_exp(1, -10), rounded.value)
        self.assertEqual({Flag.UNDERFLOW, Flag.INEXACT}, rounded.flags)

    def test_exact_subnormal(self):
        rounded = run(floating.from_fraction(fractions.Fraction(1, 2 ** 11)), emin=-10, emax=10, subnormalize=True)
        self.assertEqual(from_man_exp(1, -11), rounded.value)
        self.assertEqual(frozenset(), rounded.flags)


class ArithmeticKernelTests(MpnumTests):

    def test_zero_sum_sign(self):
        self.assertEqual(fzero, run(floating.add(fzero, fnzero)).value)
        self.assertEqual(fnzero, run(floating.add(fzero, fnzero), rounding=RoundDown).value)
        self.assertEqual(fnzero, run(floating.add(fnzero, fnzero)).value)
        self.assertEqual(fzero, run(floating.sub(fone, fone)).value)
        self.assertEqual(fnzero, run(floating.sub(fone, fone), rounding=RoundDown).value)

    def test_product_sign(self):
        self.assertEqual(fnzero, run(floating.mul(fnzero, from_int(3))).value)
        self.assertEqual(fzero, run(floating.mul(fnzero, from_int(-3))).value)
        self.assertEqual(from_int(-6), run(floating.mul_int(from_int(2), -3)).value)

    def test_division_by_zero(self):
        rounded = run(floating.div(fone, fzero))
        self.assertEqual(finf, rounded.value)
        self.assertEqual({Flag.DIVZERO}, rounded.flags)
        self.assertEqual(fninf, run(floating.div(fone, fnzero)).value)
        self.assertEqual(fninf, run(floating.div(from_int(-1), fzero)).value)

    def test_zero_over_zero(self):
        rounded = run(floating.div(fzero, fzero))
        self.assertEqual(fnan, rounded.value)
        self.assertEqual({Flag.INVALID}, rounded.flags)

    def test_infinity_over_zero(self):
        rounded = run(floating.div(finf, fzero))
        self.assertEqual(finf, rounded.value)
        self.assertEqual(frozenset(), rounded.flags)

    def test_rdiv_int(self):
        self.assertEqual(from_man_exp(1, -1), run(floating.rdiv_int(1, from_int(2))).value)
        self.assertEqual({Flag.DIVZERO}, run(floating.rdiv_int(1, fzero)).flags)

    def test_floor_div(self):
        self.assertEqual(from_int(3), run(floating.floor_div(from_int(7), from_int(2))).value)
        self.assertEqual(from_int(-4), run(floating.floor_div(from_int(-7), from_int(2))).value)
        self.assertEqual(finf, run(floating.floor_div(finf, from_int(2))).value)
        self.assertEqual(fzero, run(floating.floor_div(fone, finf)).value)
        self.assertEqual(fzero, run(floating.floor_div(fone, from_int(2))).value)

    def test_mod_sign_follows_divisor(self):
        self.assertEqual(from_int(1), run(floating.mod(from_int(7), from_int(3))).value)
        self.assertEqual(from_int(-2), run(floating.mod(from_int(7), from_int(-3))).value)
        self.assertEqual(from_int(2), run(floating.mod(from_int(-7), from_int(3))).value)
        self.assertEqual(fnzero, run(floating.mod(from_int(6), from_int(-3))).value)

    def test_mod_by_zero(self):
        rounded = run(floating.mod(from_int(7), fzero))
        self.assertEqual(fnan, rounded.value)
        self.assertEqual({Flag.DIVZERO, Flag.INVALID}, rounded.flags)

    def test_mod_by_infinity(self):
        rounded = run(floating.mod(from_int(5), finf))
        self.assertEqual(from_int(5), rounded.value)
        self.assertEqual({Flag.INVALID}, rounded.flags)
        self.assertEqual(fninf, run(floating.mod(from_int(5), fninf)).value)
        self.assertEqual(fnan, run(floating.mod(finf, from_int(5))).value)

    def test_neg_and_abs(self):
        self.assertEqual(fnzero, run(floating.neg(fzero)).value)
        self.assertEqual(from_int(-5), run(floating.neg(from_int(5))).value)
        self.assertEqual(from_int(5), run(floating.abs_(from_int(-5))).value)
        self.assertEqual(finf, run(floating.abs_(fninf)).value)

    def test_pow_int(self):
        self.assertEqual(from_int(1024), run(floating.pow_int(from_int(2), 10)).value)
        self.assertEqual(from_man_exp(1, -2), run(floating.pow_int(from_int(2), -2)).value)
        self.assertEqual(fone, run(floating.pow_int(finf, 0)).value)
        self.assertEqual(fone, run(floating.pow_int(fnan, 0)).value)
        self.assertEqual({Flag.DIVZERO}, run(floating.pow_int(fzero, -1)).flags)
        self.assertEqual(fninf, run(floating.pow_int(fnzero, -1)).value)
        self.assertEqual(finf, run(floating.pow_int(fnzero, -2)).value)
        self.assertEqual(fnzero, run(floating.pow_int(fninf, -1)).value)

    def test_power(self):
        half = from_man_exp(1, -1)
        self.assertEqual(from_int(3), run(floating.power(from_int(9), half)).value)
        self.assertEqual(fnan, run(floating.power(from_int(-8), half)).value)
        self.assertEqual(from_int(-8), run(floating.power(from_int(-2), from_int(3))).value)
        self.assertEqual(fone, run(floating.power(fnan, fzero)).value)
        self.assertEqual(fzero, run(floating.power(half, finf)).value)
        self.assertEqual(finf, run(floating.power(from_int(2), finf)).value)
        self.assertEqual(fone, run(floating.power(from_int(-1), finf)).value)


class FunctionKernelTests(MpnumTests):

    def test_sqrt(self):
        self.assertEqual(from_int(3), run(floating.sqrt(from_int(9))).value)
        self.assertEqual(fnzero, run(floating.sqrt(fnzero)).value)
        self.assertEqual(fnan, run(floating.sqrt(from_int(-1))).value)
        self.assertEqual({Flag.INEXACT}, run(floating.sqrt(from_int(2))).flags)

    def test_log(self):
        rounded = run(floating.log(fzero))
        self.assertEqual(fninf, rounded.value)
        self.assertEqual({Flag.DIVZERO}, rounded.flags)
        self.assertEqual(fzero, run(floating.log(fone)).value)
        self.assertEqual(fnan, run(floating.log(from_int(-1))).value)

    def test_exp(self):
        self.assertEqual(fone, run(floating.exp(fzero)).value)
        self.assertEqual(fzero, run(floating.exp(fninf)).value)
        self.assertEqual(finf, run(floating.exp(finf)).value)

    def test_trigonometry(self):
        self.assertEqual(fnzero, run(floating.sin(fnzero)).value)
        self.assertEqual(fone, run(floating.cos(fzero)).value)
        self.assertEqual(fnan, run(floating.sin(finf)).value)


class ComplexKernelTests(MpnumTests):

    def _run_pair(self, pair, prec=53):
        return run(pair[0], prec).value, run(pair[1], prec).value

    def test_mul_exact(self):
        z = (from_int(1), from_int(2))
        w = (from_int(3), from_int(4))
        self.assertEqual((from_int(-5), from_int(10)), self._run_pair(floating.complex_mul(z, w)))

    def test_mul_rounds_each_part_once(self):
        big = from_int(2 ** 60 + 1)
        z = (big, from_int(2 ** 30))
        real, imag = floating.complex_mul(z, z)
        self.assertEqual(0, run(imag, prec=62).rc)
        self.assertNotEqual(0, run(real, prec=62).rc)

    def test_div(self):
        z = (from_int(-5), from_int(10))
        w = (from_int(3), from_int(4))
        self.assertEqual((from_int(1), from_int(2)), self._run_pair(floating.complex_div(z, w)))

    def test_div_by_zero_is_componentwise(self):
        real, imag = floating.complex_div((fone, from_int(-1)), (fzero, fzero))
        self.assertEqual(finf, run(real).value)
        self.assertEqual(fninf, run(imag).value)
        self.assertIn(Flag.DIVZERO, run(real).flags)

    def test_pow_int(self):
        i = (fzero, fone)
        self.assertEqual((from_int(-1), fzero), self._run_pair(floating.complex_pow_int(i, 2)))
        self.assertEqual((fone, fzero), self._run_pair(floating.complex_pow_int((fnan, fnan), 0)))

    def test_special_arguments(self):
        self.assertEqual((fnan, fnan), self._run_pair(floating.complex_sqrt((finf, fone))))
        self.assertEqual((fninf, fzero), self._run_pair(floating.complex_log((fzero, fzero))))
        self.assertEqual((fone, fzero), self._run_pair(floating.complex_exp((fzero, fzero))))

    def test_evaluate_complex_precision_pair(self):
        ctx = self.context
        ctx.real_prec = 10
        ctx.imag_prec = 20
        third = floating.from_fraction(THIRD)
        real, imag, flags = floating.evaluate_complex((third, third), ctx)
        self.assertEqual(10, real.value[3])
        self.assertEqual(20, imag.value[3])
        self.assertEqual({Flag.INEXACT}, flags)


if __name__ == '__main__':
    unittest.main()
