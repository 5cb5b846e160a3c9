"""
Unit tests for convert.py, parsing and operand conversion.
"""

import decimal
import fractions
import unittest

from mpmath.libmp import fnan, finf, fninf, from_int, from_man_exp, from_rational, fzero

import mpnum
from mpnum import convert, floating
from mpnum.context import OperandTypeError
from mpnum.floating import fnzero
from mpnum.test_base import MpnumTests


class DigitTests(MpnumTests):

    def test_digit_value(self):
        self.assertEqual(35, convert.digit_value('z', 36))
        self.assertEqual(35, convert.digit_value('Z', 36))
        self.assertEqual(35, convert.digit_value('Z', 62))
        self.assertEqual(61, convert.digit_value('z', 62))
        with self.assertRaises(ValueError):
            convert.digit_value('2', 2)

    def test_parse_integer(self):
        self.assertEqual(31, convert.parse_integer('0x1f'))
        self.assertEqual(-5, convert.parse_integer('-0b101'))
        self.assertEqual(8, convert.parse_integer('0o10'))
        self.assertEqual(10, convert.parse_integer('010'))
        self.assertEqual(31, convert.parse_integer('1f', 16))
        self.assertEqual(31, convert.parse_integer('0x1f', 16))
        self.assertEqual(1000000, convert.parse_integer('1_000_000'))
        self.assertEqual(42, convert.parse_integer('  +42 '))

    def test_parse_integer_refuses(self):
        for text, base in (('', 0), ('-', 10), ('1.5', 10), ('12', 2), ('0x', 0), ('--1', 10), ('1 2', 10)):
            with self.assertRaises(ValueError, msg=repr(text)):
                convert.parse_integer(text, base)
        with self.assertRaises(ValueError):
            convert.parse_integer('1', 63)
        with self.assertRaises(ValueError):
            convert.parse_integer('1', 1)
        with self.assertRaises(TypeError):
            convert.parse_integer('1', '10')

    def test_digits_round_trip_every_base(self):
        samples = (0, 1, -1, 61, 62, -3843, 2 ** 100 + 12345, -(10 ** 40))
        for base in range(convert.BASE_MIN, convert.BASE_MAX + 1):
            for n in samples:
                text = convert.integer_digits(n, base)
                self.assertEqual(n, convert.parse_integer(text, base), "{} in base {}".format(n, base))

    def test_beyond_the_host_digit_limit(self):
        n = 10 ** 5000 + 7
        self.assertEqual('1' + '0' * 4999 + '7', convert.integer_digits(n, 10))
        self.assertEqual(n, convert.parse_integer('1' + '0' * 4999 + '7', 10))
        for base in (3, 7, 10, 36, 62):
            text = convert.integer_digits(-n, base)
            self.assertEqual(-n, convert.parse_integer(text, base), "base {}".format(base))
        self.assertEqual(int('1' * 5000, 16), convert.parse_integer('1' * 5000, 16))

    def test_integer_digits(self):
        self.assertEqual('0b101', convert.integer_digits(5, 2))
        self.assertEqual('-0o17', convert.integer_digits(-15, 8))
        self.assertEqual('z', convert.integer_digits(35, 36))
        self.assertEqual('Z', convert.integer_digits(35, 62))
        self.assertEqual('z', convert.integer_digits(61, 62))
        with self.assertRaises(ValueError):
            convert.integer_digits(5, 0)


class ParseRealTests(MpnumTests):

    def test_decimal(self):
        self.assertEqual(fractions.Fraction(3, 2), convert.parse_real('1.5'))
        self.assertEqual(fractions.Fraction(1, 10), convert.parse_real('.1'))
        self.assertEqual(fractions.Fraction(-1500), convert.parse_real('-1.5e3'))
        self.assertEqual(fractions.Fraction(3, 2000), convert.parse_real('1.5E-3'))
        self.assertEqual(fractions.Fraction(5), convert.parse_real('5.'))

    def test_other_bases(self):
        self.assertEqual(fractions.Fraction(511, 2), convert.parse_real('ff.8', 16))
        self.assertEqual(fractions.Fraction(12), convert.parse_real('3p2', 16))
        self.assertEqual(fractions.Fraction(5, 4), convert.parse_real('1.01', 2))
        self.assertEqual(fractions.Fraction(20), convert.parse_real('101e2', 2))
        self.assertEqual(fractions.Fraction(14 * 36 ** 2), convert.parse_real('e@2', 36))

    def test_specials(self):
        self.assertEqual(finf, convert.parse_real('inf'))
        self.assertEqual(finf, convert.parse_real('+Infinity'))
        self.assertEqual(fninf, convert.parse_real('-inf'))
        self.assertEqual(fnan, convert.parse_real('nan'))
        self.assertEqual(fnan, convert.parse_real('@NaN@'))
        self.assertEqual(fnzero, convert.parse_real('-0.0'))
        self.assertEqual(fzero, convert.parse_real('0'))

    def test_refuses(self):
        for text in ('', '.', 'e5', '1.5x', '1e', '1e1.5', 'infinite', '1..2'):
            with self.assertRaises(ValueError, msg=repr(text)):
                convert.parse_real(text)

    def test_huge_exponents(self):
        self.assertIsInstance(convert.parse_real('1e400000000'), floating.Kernel)
        self.assertIsInstance(convert.parse_real('-1.5e-400000000'), floating.Kernel)
        self.assertEqual(from_man_exp(1, 2 ** 40), convert.parse_real('1p1099511627776', 16))
        self.assertEqual(from_man_exp(-3, -2 ** 40), convert.parse_real('-11e-1099511627776', 2))
        self.assertEqual(fzero, convert.parse_real('0e999999999999'))
        self.assertEqual(fractions.Fraction(10 ** 300), convert.parse_real('1e300'))

    def test_huge_exponent_kernel_rounds_correctly(self):
        kernel = convert.parse_real('3e-20000')
        exact = fractions.Fraction(3, 10 ** 20000)
        for rnd in ('f', 'c', 'n'):
            self.assertEqual(
                from_rational(exact.numerator, exact.denominator, 53, rnd),
                kernel.op(53, rnd),
                rnd,
            )

    def test_parse_rational(self):
        self.assertEqual(fractions.Fraction(3, 4), convert.parse_rational('3/4'))
        self.assertEqual(fractions.Fraction(-3, 4), convert.parse_rational('-6/8'))
        self.assertEqual(fractions.Fraction(3, 4), convert.parse_rational('0.75'))
        self.assertEqual(fractions.Fraction(255, 16), convert.parse_rational('ff/10', 16))
        with self.assertRaises(ZeroDivisionError):
            convert.parse_rational('1/0')
        with self.assertRaises(ValueError):
            convert.parse_rational('inf')

    def test_parse_complex(self):
        half = fractions.Fraction(1, 2)
        self.assertEqual((fractions.Fraction(3, 2), fractions.Fraction(-2)), convert.parse_complex('1.5-2j'))
        self.assertEqual((fzero, fractions.Fraction(2)), convert.parse_complex('2j'))
        self.assertEqual((fractions.Fraction(1), fractions.Fraction(-1)), convert.parse_complex('1-j'))
        self.assertEqual((fractions.Fraction(1), fzero), convert.parse_complex('1'))
        self.assertEqual((half, fractions.Fraction(-2)), convert.parse_complex('(0.5 -2)'))
        self.assertEqual((fractions.Fraction(1, 100000), fractions.Fraction(2)), convert.parse_complex('1e-5+2j'))
        with self.assertRaises(ValueError):
            convert.parse_complex('1+2')
        with self.assertRaises(ValueError):
            convert.parse_complex('one')


class ExactValueTests(MpnumTests):

    def test_integer_of(self):
        self.assertEqual(5, convert.integer_of(mpnum.mpz(5)))
        self.assertEqual(1, convert.integer_of(True))
        with self.assertRaises(OperandTypeError):
            convert.integer_of(5.0)
        with self.assertRaises(OperandTypeError):
            convert.integer_of(mpnum.mpq(5))

    def test_rational_of(self):
        self.assertEqual(fractions.Fraction(1, 10), convert.rational_of(decimal.Decimal('0.1')))
        self.assertEqual(fractions.Fraction(0.1), convert.rational_of(0.1))
        self.assertEqual(fractions.Fraction(3, 2), convert.rational_of(mpnum.mpfr(1.5)))
        self.assertEqual(fractions.Fraction(7), convert.rational_of(7))
        self.assertEqual(fractions.Fraction(0), convert.rational_of(decimal.Decimal('-0')))
        with self.assertRaises(ValueError):
            convert.rational_of(float('nan'))
        with self.assertRaises(ValueError):
            convert.rational_of(decimal.Decimal('NaN'))
        with self.assertRaises(OverflowError):
            convert.rational_of(mpnum.mpfr('-inf'))
        with self.assertRaises(OperandTypeError):
            convert.rational_of(1j)

    def test_integer_from_raw(self):
        self.assertEqual(2, convert.integer_from_raw(mpnum.mpfr(2.5)._mpf))
        self.assertEqual(-2, convert.integer_from_raw(mpnum.mpfr(-2.5)._mpf))
        self.assertEqual(2, convert.integer_from_raw(mpnum.mpfr(2.5)._mpf, mpnum.RoundToNearest))
        self.assertEqual(4, convert.integer_from_raw(mpnum.mpfr(3.5)._mpf, mpnum.RoundToNearest))
        self.assertEqual(-3, convert.integer_from_raw(mpnum.mpfr(-2.5)._mpf, mpnum.RoundDown))
        self.assertEqual(3, convert.integer_from_raw(mpnum.mpfr(2.1)._mpf, mpnum.RoundUp))
        self.assertEqual(0, convert.integer_from_raw(fnzero))
        with self.assertRaises(ValueError):
            convert.integer_from_raw(fnan)
        with self.assertRaises(OverflowError):
            convert.integer_from_raw(finf)

    def test_real_exact(self):
        self.assertEqual(from_int(7), convert.real_exact(7))
        self.assertEqual(fnzero, convert.real_exact(-0.0))
        self.assertEqual(fractions.Fraction(1, 3), convert.real_exact(mpnum.mpq(1, 3)))
        self.assertEqual(fractions.Fraction(1, 10), convert.real_exact(decimal.Decimal('0.1')))
        self.assertEqual(fninf, convert.real_exact(decimal.Decimal('-Infinity')))
        with self.assertRaises(OperandTypeError):
            convert.real_exact(1j)
        with self.assertRaises(OperandTypeError):
            convert.real_exact('1.5')

    def test_real_operand_clamps(self):
        big = mpnum.mpfr(2 ** 100)
        narrow = mpnum.context(emax=50)
        value, flags = convert.real_operand(big, narrow)
        self.assertEqual(finf, value)
        self.assertEqual({'overflow', 'inexact'}, flags)
        self.assertEqual(set(), narrow.flags())

    def test_complex_exact(self):
        self.assertEqual((from_int(1), fnzero), convert.complex_exact(complex(1, -0.0)))
        self.assertEqual((fractions.Fraction(1, 2), fzero), convert.complex_exact(mpnum.mpq(1, 2)))
        with self.assertRaises(OperandTypeError):
            convert.complex_exact('1+2j')

    def test_complex_operand_rounds_rational_parts(self):
        ctx = mpnum.context(precision=10)
        (real, imag), flags = convert.complex_operand(fractions.Fraction(1, 3), ctx)
        self.assertEqual(10, real[3])
        self.assertEqual(fzero, imag)
        self.assertEqual({'inexact'}, flags)

    def test_complex_operand_rounds_in_the_part_mode(self):
        fifth = fractions.Fraction(1, 5)
        up = mpnum.context(precision=10, real_round=mpnum.RoundUp)
        (real, imag), flags = convert.complex_operand(fifth, up)
        self.assertGreater(floating.to_fraction(real), fifth)
        down = mpnum.context(precision=10, real_round=mpnum.RoundDown)
        (real, imag), flags = convert.complex_operand(fifth, down)
        self.assertLess(floating.to_fraction(real), fifth)

    def test_foreign_mpmath_values(self):
        class MpfLike(object):
            _mpf_ = from_int(3)

        self.assertEqual(from_int(3), convert.real_exact(MpfLike()))


if __name__ == '__main__':
    unittest.main()
