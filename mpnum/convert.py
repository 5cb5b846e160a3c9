"""
Conversion layer:  any supported operand into the form the backend computes with.

    Integer  - Python int
    Rational - fractions.Fraction
    Real     - raw mpf tuple (see floating.py), or a Fraction when the exact
               value is not a binary floating point number (1/3, Decimal('0.1'))
    Complex  - pair of raw mpf tuples

Conversions that would lose information are refused here rather than guessed:
OperandTypeError when the kind does not fit, ValueError for NaN into an exact
kind, OverflowError for an infinity into an exact kind.
"""

import fractions
import math
import numbers
import re

from mpmath.libmp import (
    finf,
    fnan,
    fninf,
    from_float,
    from_int,
    from_man_exp,
    fzero,
    to_int,
)

from . import floating
from .context import OperandTypeError
from .kind import (
    Kind,
    classify,
    is_decimal_like,
    is_native_and_range_valid,
    native_kind,
)


def type_name(x):
    """
    Describe (very briefly) what type of object this is.

    THANKS:  http://stackoverflow.com/a/5008854/673991
    """
    return type(x).__name__
assert 'int' == type_name(3)
assert 'list' == type_name([])


def _refuse(value, wanted):
    return OperandTypeError("{} cannot be converted to {}".format(type_name(value), wanted))


# Digits
# ------
DIGITS = '0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz'
LOWER_DIGITS = '0123456789abcdefghijklmnopqrstuvwxyz'
PREFIX_FROM_BASE = {2: '0b', 8: '0o', 16: '0x'}
BASE_FROM_PREFIX = {prefix: base for base, prefix in PREFIX_FROM_BASE.items()}
BASE_MIN = 2
BASE_MAX = len(DIGITS)


def _check_base(base, zero_allowed=True):
    if isinstance(base, bool) or not isinstance(base, int):
        raise TypeError("base must be an int, not {}".format(type_name(base)))
    if base == 0 and zero_allowed:
        return
    if not BASE_MIN <= base <= BASE_MAX:
        raise ValueError("base must be {}or in the interval [{}, {}], not {}".format(
            "0 " if zero_allowed else "",
            BASE_MIN,
            BASE_MAX,
            base,
        ))


def digit_value(character, base):
    """
    Value of one digit.  Letters are case-insensitive up to base 36.

    Above base 36, 'A'-'Z' are 10-35 and 'a'-'z' are 36-61.
    """
    if base <= 36:
        value = LOWER_DIGITS.find(character.lower())
    else:
        value = DIGITS.find(character)
    if value < 0 or value >= base:
        raise ValueError("invalid digit {!r} for base {}".format(character, base))
    return value
assert 15 == digit_value('f', 16) == digit_value('F', 16)
assert 36 == digit_value('a', 62)


# Python refuses int <-> str conversions beyond a few thousand digits in most
# bases, so longer digit strings are converted in halves.
DIGITS_CHUNK = 1000


def _unsigned_from_digits(digits, base):
    if not digits or digits[0] in '+-' or not digits.isalnum():
        raise ValueError("invalid digits {!r}".format(digits))
    return _value_of_digits(digits, base)


def _value_of_digits(digits, base):
    if len(digits) > DIGITS_CHUNK:
        middle = len(digits) // 2
        high = _value_of_digits(digits[:middle], base)
        low = _value_of_digits(digits[middle:], base)
        return high * base ** (len(digits) - middle) + low
    if base <= 36:
        return int(digits, base)
    value = 0
    for character in digits:
        value = value * base + digit_value(character, base)
    return value
assert 10 ** 2500 + 1 == _value_of_digits('1' + '0' * 2499 + '1', 10)


def _split_sign(text):
    if text[:1] in ('+', '-'):
        return text[0] == '-', text[1:]
    return False, text


def _strip_prefix(text, base):
    """Remove a 0b, 0o, 0x prefix.  With base 0, the prefix picks the base (10 without one)."""
    prefix = text[:2].lower()
    if prefix in BASE_FROM_PREFIX and (base == 0 or base == BASE_FROM_PREFIX[prefix]):
        return text[2:], BASE_FROM_PREFIX[prefix]
    return text, (10 if base == 0 else base)


def parse_integer(text, base=0):
    """
    Integer from its digits, e.g. parse_integer('-0x1F') == -31

    base 0 means autodetect from a 0b, 0o or 0x prefix, otherwise decimal.
    """
    _check_base(base)
    negative, body = _split_sign(text.strip().replace('_', ''))
    body, base = _strip_prefix(body, base)
    if not body:
        raise ValueError("invalid digits for an integer: {!r}".format(text))
    magnitude = _unsigned_from_digits(body, base)
    return -magnitude if negative else magnitude
assert -31 == parse_integer('-0x1F')
assert 61 == parse_integer('z', 62)


def _digits_of(magnitude, base, table, width=0):
    """Digits of a non-negative int, zero-padded to width.  Zero with no width is ''."""
    size = int(magnitude.bit_length() / math.log2(base)) + 1
    if size > DIGITS_CHUNK:
        half = size // 2
        high, low = divmod(magnitude, base ** half)
        return _digits_of(high, base, table, max(width - half, 0)) + _digits_of(low, base, table, half)
    if base == 10:
        text = str(magnitude) if magnitude else ''
    else:
        characters = []
        while magnitude:
            magnitude, digit = divmod(magnitude, base)
            characters.append(table[digit])
        text = ''.join(reversed(characters))
    return text.rjust(width, '0')
assert '007' == _digits_of(7, 10, LOWER_DIGITS, 3)
assert '1' + '0' * 3000 == _digits_of(10 ** 3000, 10, LOWER_DIGITS)


def integer_digits(n, base=10):
    """
    Digits of an integer in base 2 to 62.  Bases 2, 8, 16 get a 0b, 0o, 0x prefix.

    Round trip:  parse_integer(integer_digits(n, base), base) == n
    """
    _check_base(base, zero_allowed=False)
    table = LOWER_DIGITS if base <= 36 else DIGITS
    text = _digits_of(abs(n), base, table) or '0'
    return ('-' if n < 0 else '') + PREFIX_FROM_BASE.get(base, '') + text
assert '-0x1f' == integer_digits(-31, 16)
assert '10' == integer_digits(10)
assert '0' == integer_digits(0, 62)


def parse_rational(text, base=10):
    """Fraction from 'p/q' or 'p', or a decimal point literal in base 10, e.g. '3/4' or '0.75'"""
    text = text.strip()
    if '/' in text:
        numerator_text, denominator_text = text.split('/', 1)
        numerator = parse_integer(numerator_text, base)
        denominator = parse_integer(denominator_text, base)
        if denominator == 0:
            raise ZeroDivisionError("zero denominator in {!r}".format(text))
        return fractions.Fraction(numerator, denominator)
    if base == 10 and re.search(r'[.eE]', text):
        number = parse_real(text, 10, exact=True)
        if not isinstance(number, fractions.Fraction):
            if floating.is_zero(number):
                return fractions.Fraction(0)
            raise ValueError("{!r} is not a rational number".format(text))
        return number
    return fractions.Fraction(parse_integer(text, base))


_SPECIAL_REALS = {
    'inf': finf,
    'infinity': finf,
    '@inf@': finf,
    'nan': fnan,
    '@nan@': fnan,
}


def _exponent_markers(base):
    """Exponent letters and the base each one scales by."""
    markers = {'@': base}
    if base <= 10:
        markers['e'] = base
    if base in (2, 16):
        markers['p'] = 2
    return markers


# Past this many bits, scale_base ** exponent is not expanded exactly.
EXACT_SCALE_BITS = 2 ** 16


def parse_real(text, base=10, exact=False):
    """
    Value of a real literal:  [-]digits[.digits][(e|p|@)[-]decimal_exponent]

    Returns a Fraction for finite values, a raw mpf tuple for NaN, the
    infinities and negative zero.

        'e' - power of the base, bases up to 10
        'p' - power of 2, bases 2 and 16
        '@' - power of the base, any base

    Unless exact is set, a literal whose exponent would scale it by more than
    EXACT_SCALE_BITS bits comes back without a Fraction:  as a raw mpf when
    the scaling is a power of two, else as a floating.Kernel that rounds it.
    """
    _check_base(base)
    original = text
    negative, body = _split_sign(text.strip().replace('_', ''))
    special = _SPECIAL_REALS.get(body.lower())
    if special is not None:
        if negative and special == finf:
            return fninf
        return special
    body, base = _strip_prefix(body, base)
    markers = _exponent_markers(base)
    scale_base = base
    exponent = 0
    # NOTE:  Letters are digits in the larger bases, so only the markers of this base are searched.
    for position, character in enumerate(body):
        marker = character.lower() if character.lower() in ('e', 'p') else character
        if marker in markers:
            scale_base = markers[marker]
            try:
                exponent = parse_integer(body[position+1:], 10)
            except ValueError:
                raise ValueError("invalid exponent in {!r}".format(original))
            body = body[:position]
            break
    whole, point, fraction_digits = body.partition('.')
    if not whole and not fraction_digits:
        raise ValueError("invalid digits for a real number: {!r}".format(original))
    try:
        significand = _unsigned_from_digits(whole + fraction_digits, base)
    except ValueError:
        raise ValueError("invalid digits for a real number: {!r}".format(original))
    if significand == 0:
        return floating.signed_zero(negative)
    if negative:
        significand = -significand
    scale_bits = abs(exponent) * scale_base.bit_length() + len(fraction_digits) * base.bit_length()
    if not exact and scale_bits > EXACT_SCALE_BITS:
        return _scaled_real(significand, base, len(fraction_digits), scale_base, exponent)
    value = fractions.Fraction(significand, base ** len(fraction_digits))
    if exponent >= 0:
        value *= scale_base ** exponent
    else:
        value /= scale_base ** -exponent
    return value
assert fractions.Fraction(3, 2) == parse_real('1.5')
assert fractions.Fraction(-255) == parse_real('-0xff', 0)
assert fractions.Fraction(12) == parse_real('3p2', 16)


def _is_power_of_two(n):
    return n & (n - 1) == 0


def _scaled_real(significand, base, fraction_length, scale_base, exponent):
    """significand * base**-fraction_length * scale_base**exponent, without expanding the powers."""
    if _is_power_of_two(base) and _is_power_of_two(scale_base):
        shift = exponent * (scale_base.bit_length() - 1) - fraction_length * (base.bit_length() - 1)
        return from_man_exp(significand, shift)
    assert scale_base == base
    return floating.from_scaled_integer(significand, base, exponent - fraction_length)


_COMPLEX_PATTERN = re.compile(r'''
    ^\s*
    (?P<real>[-+]?[^-+\s]*?(?:[eEpP@][-+]?\d+)?)
    (?P<imag>[-+][^-+\s]*?(?:[eEpP@][-+]?\d+)?)?
    (?P<unit>[jJiI])?
    \s*$
''', re.VERBOSE)


def parse_complex(text, base=10):
    """
    Parts of a complex literal, each as parse_real() returns them.

    Accepts 'a+bj', 'a-bj', 'bj', 'a', and the two-part form '(a b)'.
    """
    stripped = text.strip()
    if stripped.startswith('(') and stripped.endswith(')'):
        stripped = stripped[1:-1].strip()
        parts = stripped.split()
        if len(parts) == 2:
            return parse_real(parts[0], base), parse_real(parts[1], base)
    match = _COMPLEX_PATTERN.match(stripped)
    if match is None or not match.group('real'):
        raise ValueError("invalid complex literal {!r}".format(text))
    real_text = match.group('real')
    imag_text = match.group('imag')
    if match.group('unit'):
        if imag_text is None:
            imag_text, real_text = real_text, '0'
        if imag_text in ('+', '-', ''):
            imag_text += '1'
    elif imag_text is not None:
        raise ValueError("invalid complex literal {!r}".format(text))
    else:
        imag_text = '0'
    return parse_real(real_text, base), parse_real(imag_text, base)


# Exact kinds
# -----------
def integer_of(value):
    """Python int for an Integer-kind operand.  Anything else is an OperandTypeError."""
    declared = native_kind(value)
    if declared == Kind.INTEGER:
        return value._value
    if declared is None:
        if isinstance(value, int):
            return int(value)
        if hasattr(value, '__mpz__'):
            return integer_of(value.__mpz__())
        if isinstance(value, numbers.Integral):
            return int(value)
    raise _refuse(value, 'an Integer')


def _decimal_value(value):
    """Raw special, raw signed zero, or exact Fraction of a decimal-like value."""
    if value.is_nan():
        return fnan
    if value.is_infinite():
        return fninf if value.is_signed() else finf
    if value.is_zero():
        return floating.signed_zero(value.is_signed())
    return fractions.Fraction(*value.as_integer_ratio())


def _exact_from_raw(raw):
    if floating.is_nan(raw):
        raise ValueError("NaN cannot be converted to an exact value")
    if floating.is_inf(raw):
        raise OverflowError("Infinity cannot be converted to an exact value")
    return floating.to_fraction(raw)


def rational_of(value):
    """
    Exact Fraction for an Integer, Rational or Real operand.

    NaN is a ValueError, an infinity an OverflowError, Complex an OperandTypeError.
    """
    kind = classify(value)
    declared = native_kind(value)
    if kind == Kind.INTEGER:
        return fractions.Fraction(integer_of(value))
    if kind == Kind.RATIONAL:
        if declared == Kind.RATIONAL:
            return value._value
        if isinstance(value, fractions.Fraction):
            return value
        if hasattr(value, '__mpq__'):
            return rational_of(value.__mpq__())
        return fractions.Fraction(int(value.numerator), int(value.denominator))
    if kind == Kind.REAL:
        if declared == Kind.REAL:
            return _exact_from_raw(value._mpf)
        if isinstance(value, float):
            if math.isnan(value):
                raise ValueError("NaN cannot be converted to an exact value")
            if math.isinf(value):
                raise OverflowError("Infinity cannot be converted to an exact value")
            return fractions.Fraction(value)
        if hasattr(value, '__mpfr__'):
            return rational_of(value.__mpfr__())
        if is_decimal_like(value):
            exact = _decimal_value(value)
            if isinstance(exact, fractions.Fraction):
                return exact
            if floating.is_zero(exact):
                return fractions.Fraction(0)
            return _exact_from_raw(exact)
        return rational_of(float(value))
    raise _refuse(value, 'a Rational')


def integer_from_raw(raw, rounding=None):
    """
    Python int from a raw mpf.  Truncates toward zero unless a rounding mode is given.

    NaN is a ValueError, an infinity an OverflowError.
    """
    if floating.is_nan(raw):
        raise ValueError("NaN cannot be converted to an Integer")
    if floating.is_inf(raw):
        raise OverflowError("Infinity cannot be converted to an Integer")
    if floating.is_zero(raw):
        return 0
    letter = None if rounding is None else floating.LETTER_FROM_ROUNDING[rounding]
    return int(to_int(raw, letter))


# Real
# ----
def real_exact(value):
    """
    Exact value of a Real-or-narrower operand, without rounding:  a raw mpf, or a Fraction.

    mpfr values are taken as stored, whatever their exponent.
    """
    kind = classify(value)
    declared = native_kind(value)
    if kind == Kind.INTEGER:
        return from_int(integer_of(value))
    if kind == Kind.RATIONAL:
        return rational_of(value)
    if kind == Kind.REAL:
        if declared == Kind.REAL:
            return value._mpf
        if isinstance(value, float):
            return floating.from_float_signed(value)
        if hasattr(value, '__mpfr__'):
            return real_exact(value.__mpfr__())
        if hasattr(value, '_mpf_'):
            return value._mpf_
        if is_decimal_like(value):
            return _decimal_value(value)
        return floating.from_float_signed(float(value))
    raise _refuse(value, 'a Real')


def real_operand(value, context):
    """
    Operand of Real arithmetic:  (raw mpf or Fraction, flags).

    An mpfr outside the exponent range of context is clamped first.
    The flags raised by clamping come back for the caller to merge.
    """
    if native_kind(value) == Kind.REAL and not is_native_and_range_valid(value, context):
        rounded = floating.evaluate_under(floating.copy(value._mpf), context, prec=value._prec)
        return rounded.value, rounded.flags
    return real_exact(value), frozenset()


def real_kernel(value, base=10):
    """
    Kernel that rounds any Real-or-narrower value, or a string, to a requested precision.

    Used by the mpfr constructor.
    """
    if isinstance(value, str):
        exact = parse_real(value, base)
    elif isinstance(value, float):
        if value == 0.0 or math.isnan(value) or math.isinf(value):
            return floating.constant(floating.from_float_signed(value))
        return floating.kernel(lambda prec, rnd: from_float(value, prec, rnd))
    else:
        exact = real_exact(value)
    if isinstance(exact, floating.Kernel):
        return exact
    if isinstance(exact, fractions.Fraction):
        return floating.from_fraction(exact)
    return floating.copy(exact)


def real_raw(value, context, prec=None, rounding=None):
    """A raw mpf for value, rounded under context (or prec and rounding) if it is not exact.  (raw, flags)"""
    exact = real_exact(value)
    if isinstance(exact, fractions.Fraction):
        rounded = floating.evaluate_under(floating.from_fraction(exact), context, prec, rounding)
        return rounded.value, rounded.flags
    return exact, frozenset()


def real_of(value, prec, rounding, context):
    """Rounded(raw, rc, flags) for any Real-or-narrower value at the given precision."""
    return floating.evaluate_under(real_kernel(value), context, prec, rounding)


# Complex
# -------
def complex_exact(value):
    """
    Parts of a Complex-or-narrower operand, without rounding:  (re, im)

    Each part is a raw mpf, or a Fraction for a Rational or decimal value.
    """
    kind = classify(value)
    declared = native_kind(value)
    if kind == Kind.COMPLEX:
        if declared == Kind.COMPLEX:
            return value._re, value._im
        if isinstance(value, complex):
            return floating.from_float_signed(value.real), floating.from_float_signed(value.imag)
        if hasattr(value, '__mpc__'):
            return complex_exact(value.__mpc__())
        if hasattr(value, '_mpc_'):
            return value._mpc_
        return complex_exact(complex(value))
    if kind in (Kind.INTEGER, Kind.RATIONAL, Kind.REAL):
        return real_exact(value), fzero
    raise _refuse(value, 'a Complex')


def complex_operand(value, context):
    """
    Operand of Complex arithmetic:  ((re, im), flags) with both parts raw mpf.

    Rational parts are rounded to the context's part precision, out of range
    mpc parts are clamped.
    """
    if native_kind(value) == Kind.COMPLEX and not is_native_and_range_valid(value, context):
        real, imag, flags = floating.evaluate_complex(
            (floating.copy(value._re), floating.copy(value._im)),
            context,
            value._prec,
        )
        return (real.value, imag.value), flags
    real_part, imag_part = complex_exact(value)
    flags = frozenset()
    if isinstance(real_part, fractions.Fraction):
        real_part, real_flags = real_raw(
            real_part,
            context,
            context.effective_real_prec,
            context.effective_real_round,
        )
        flags |= real_flags
    if isinstance(imag_part, fractions.Fraction):
        imag_part, imag_flags = real_raw(
            imag_part,
            context,
            context.effective_imag_prec,
            context.effective_imag_round,
        )
        flags |= imag_flags
    return (real_part, imag_part), flags


def complex_of(value, context):
    """(re, im) raw pair for any Complex-or-narrower value, rounding rational parts under context."""
    parts, flags = complex_operand(value, context)
    context.settle(flags, "complex conversion")
    return parts


def _part_kernel(part):
    if isinstance(part, floating.Kernel):
        return part
    if isinstance(part, fractions.Fraction):
        return floating.from_fraction(part)
    return floating.copy(part)


def complex_kernels(value, imag=None, base=10):
    """
    Pair of kernels rounding a complex value (or a real and an imaginary part) to any precision.

    Used by the mpc constructor.
    """
    if isinstance(value, str):
        if imag is not None:
            raise TypeError("no imaginary part allowed with a complex literal")
        real_part, imag_part = parse_complex(value, base)
    else:
        real_part, imag_part = complex_exact(value)
        if imag is not None:
            if classify(value) == Kind.COMPLEX:
                raise TypeError("no imaginary part allowed with a complex value")
            if isinstance(imag, str):
                imag_part = parse_real(imag, base)
            elif classify(imag) in (Kind.INTEGER, Kind.RATIONAL, Kind.REAL):
                imag_part = real_exact(imag)
            else:
                raise _refuse(imag, 'an imaginary part')
    return _part_kernel(real_part), _part_kernel(imag_part)

